from sqlalchemy import Boolean, Column, Integer, String, Text
from shared.config.database import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(64), nullable=True) # storefront category
    name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False, default=0) # cents
    image_url = Column(String(1024), nullable=True)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

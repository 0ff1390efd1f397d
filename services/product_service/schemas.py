from typing import Optional

from pydantic import BaseModel

class ProductWrite(BaseModel):
    type: Optional[str] = None
    name: str
    price: int # cents
    image_url: Optional[str] = None
    description: Optional[str] = None

class ProductResponse(BaseModel):
    id: int
    type: Optional[str]
    name: str
    price: int
    image_url: Optional[str]
    description: Optional[str]
    active: bool

    class Config:
        from_attributes = True

import enum

from sqlalchemy import Column, DateTime, Index, Integer, String, func
from shared.config.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


# Returned by the status poll when the order cannot be read
UNKNOWN_STATUS = "erro"

# Integer primary key: INTEGER on Postgres, so ids above this never exist
MAX_ORDER_ID = 2**31 - 1


class Order(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False)
    email = Column(String(255), nullable=True)
    amount_cents = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default=OrderStatus.PENDING.value) # pending -> paid only
    correlation_id = Column(String(255), nullable=True) # gateway txid, set once after the charge
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


# The gateway echoes txids in arbitrary casing; lookups go through lower().
# Not unique: set_correlation_id only writes into an empty slot.
Index("ix_customers_correlation_id_lower", func.lower(Order.correlation_id))

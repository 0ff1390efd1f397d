from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CustomerIn(BaseModel):
    name: NonEmptyStr
    phone: NonEmptyStr
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class OrderCreate(BaseModel):
    customer: CustomerIn
    value_in_cents: int = Field(alias="valueInCents", gt=0)

    class Config:
        populate_by_name = True


class StatusResponse(BaseModel):
    status: str


class OrderResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str]
    amount_cents: int
    status: str
    correlation_id: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

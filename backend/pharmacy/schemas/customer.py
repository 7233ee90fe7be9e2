from typing import Optional

from pydantic import ConfigDict, EmailStr, Field

from pharmacy.schemas.base import CamelModel, PartialUpdate


class CustomerBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(PartialUpdate):
    non_nullable = ("name",)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None


class Customer(CustomerBase):
    model_config = ConfigDict(frozen=True)

    id: int


class CustomerSummary(CamelModel):
    id: int
    name: str

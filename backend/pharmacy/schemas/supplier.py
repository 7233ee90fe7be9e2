from typing import Optional

from pydantic import ConfigDict, EmailStr, Field

from pharmacy.schemas.base import CamelModel, PartialUpdate


class SupplierBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    contact: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(PartialUpdate):
    non_nullable = ("name", "contact")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None


class Supplier(SupplierBase):
    model_config = ConfigDict(frozen=True)

    id: int


class SupplierSummary(CamelModel):
    id: int
    name: str
    contact: str

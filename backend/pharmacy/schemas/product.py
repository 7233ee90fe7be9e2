from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from pharmacy.core.dates import utcnow
from pharmacy.schemas.base import CamelModel, PartialUpdate, UtcDatetime


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    sku: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    # Free-text label, not a foreign key to Category
    category: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    cost_price: float = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)
    low_stock_threshold: int = Field(default=10, ge=0)
    expiry_date: Optional[UtcDatetime] = None
    supplier_id: Optional[int] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(PartialUpdate):
    non_nullable = ("name", "sku", "category", "price", "cost_price", "stock", "low_stock_threshold")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[float] = Field(None, ge=0)
    cost_price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    expiry_date: Optional[UtcDatetime] = None
    supplier_id: Optional[int] = None


class Product(ProductBase):
    model_config = ConfigDict(frozen=True)

    id: int

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expiry_date is None:
            return False
        return self.expiry_date < (now or utcnow())

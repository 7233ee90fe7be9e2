"""Point-of-sale schemas: stored transactions, their line items, and the sale request."""

import enum
from typing import Optional

from pydantic import ConfigDict, Field

from pharmacy.core.dates import utcnow
from pharmacy.schemas.base import CamelModel, PartialUpdate, UtcDatetime


class TransactionStatus(str, enum.Enum):
    COMPLETED = "completed"
    PENDING = "pending"


# ── Stored records ─────────────────────────────────

class TransactionBase(CamelModel):
    transaction_id: str = Field(..., min_length=1, max_length=50)
    customer_id: Optional[int] = None
    total: float = Field(..., ge=0)
    status: TransactionStatus = TransactionStatus.COMPLETED
    created_at: UtcDatetime = Field(default_factory=utcnow)


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(PartialUpdate):
    non_nullable = ("total", "status")

    customer_id: Optional[int] = None
    total: Optional[float] = Field(None, ge=0)
    status: Optional[TransactionStatus] = None


class Transaction(TransactionBase):
    model_config = ConfigDict(frozen=True)

    id: int


class TransactionItemBase(CamelModel):
    transaction_id: int
    product_id: int
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)
    subtotal: float = Field(..., ge=0)


class TransactionItemCreate(TransactionItemBase):
    pass


class TransactionItem(TransactionItemBase):
    model_config = ConfigDict(frozen=True)

    id: int


class TransactionDetail(TransactionBase):
    id: int
    items: list[TransactionItem] = []


# ── Checkout request ───────────────────────────────

class SaleItem(CamelModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class SaleCreate(CamelModel):
    transaction_id: Optional[str] = Field(None, min_length=1, max_length=50)
    customer_id: Optional[int] = None
    total: float = Field(..., ge=0)
    status: TransactionStatus = TransactionStatus.COMPLETED
    items: list[SaleItem] = Field(..., min_length=1)

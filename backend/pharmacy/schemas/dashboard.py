"""Dashboard response schemas."""

import enum
from datetime import date
from typing import Optional

from pharmacy.schemas.base import CamelModel
from pharmacy.schemas.customer import CustomerSummary
from pharmacy.schemas.product import ProductBase
from pharmacy.schemas.supplier import SupplierSummary
from pharmacy.schemas.transaction import TransactionBase


class SalesPeriod(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class DashboardStats(CamelModel):
    total_sales: float
    total_products: int
    low_stock_count: int
    expired_count: int
    # None when there is no earlier window to compare against
    percent_sales_change: Optional[float] = None
    percent_products_change: Optional[float] = None


class SalesPoint(CamelModel):
    label: str
    period_start: date
    sales: float


class CategoryShare(CamelModel):
    category: str
    percentage: int


class RecentTransaction(TransactionBase):
    id: int
    customer: Optional[CustomerSummary] = None


class LowStockProduct(ProductBase):
    id: int
    supplier: Optional[SupplierSummary] = None
    reorder_point: int
    average_daily_sales: float
    days_until_stockout: int

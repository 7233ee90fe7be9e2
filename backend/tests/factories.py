"""Builders for request payloads used across the test modules."""

from datetime import datetime, timedelta, timezone

from pharmacy.schemas import CategoryCreate, CustomerCreate, ProductCreate, SupplierCreate

NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)  # a Wednesday


def product_data(**overrides) -> ProductCreate:
    data = {
        "name": "Paracetamol 500mg",
        "sku": "MED-P500",
        "category": "Pain Relief",
        "price": 25000,
        "cost_price": 15000,
        "stock": 20,
        "low_stock_threshold": 10,
    }
    data.update(overrides)
    return ProductCreate(**data)


def customer_data(**overrides) -> CustomerCreate:
    data = {"name": "John Doe", "email": "john.doe@gmail.com", "phone": "081234567890"}
    data.update(overrides)
    return CustomerCreate(**data)


def supplier_data(**overrides) -> SupplierCreate:
    data = {"name": "Kimia Farma Distribution", "contact": "Budi Santoso"}
    data.update(overrides)
    return SupplierCreate(**data)


def category_data(name: str = "Pain Relief") -> CategoryCreate:
    return CategoryCreate(name=name, description=f"{name} products")


def days_ago(days: float, now: datetime = NOW) -> datetime:
    return now - timedelta(days=days)

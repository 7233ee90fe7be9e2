from pharmacy.schemas.category import Category, CategoryCreate, CategoryUpdate
from pharmacy.schemas.customer import Customer, CustomerCreate, CustomerSummary, CustomerUpdate
from pharmacy.schemas.dashboard import (
    CategoryShare, DashboardStats, LowStockProduct, RecentTransaction, SalesPeriod, SalesPoint,
)
from pharmacy.schemas.product import Product, ProductCreate, ProductUpdate
from pharmacy.schemas.supplier import Supplier, SupplierCreate, SupplierSummary, SupplierUpdate
from pharmacy.schemas.transaction import (
    SaleCreate, SaleItem, Transaction, TransactionCreate, TransactionDetail, TransactionItem,
    TransactionItemCreate, TransactionStatus, TransactionUpdate,
)
from pharmacy.schemas.user import User, UserCreate, UserResponse, UserRole, UserUpdate

__all__ = [
    "Category", "CategoryCreate", "CategoryUpdate",
    "Customer", "CustomerCreate", "CustomerSummary", "CustomerUpdate",
    "CategoryShare", "DashboardStats", "LowStockProduct", "RecentTransaction", "SalesPeriod", "SalesPoint",
    "Product", "ProductCreate", "ProductUpdate",
    "Supplier", "SupplierCreate", "SupplierSummary", "SupplierUpdate",
    "SaleCreate", "SaleItem", "Transaction", "TransactionCreate", "TransactionDetail", "TransactionItem",
    "TransactionItemCreate", "TransactionStatus", "TransactionUpdate",
    "User", "UserCreate", "UserResponse", "UserRole", "UserUpdate",
]

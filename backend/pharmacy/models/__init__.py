"""SQLAlchemy models for the SQL storage backend."""

from pharmacy.models.user import UserModel
from pharmacy.models.category import CategoryModel
from pharmacy.models.supplier import SupplierModel
from pharmacy.models.product import ProductModel
from pharmacy.models.customer import CustomerModel
from pharmacy.models.transaction import TransactionModel, TransactionItemModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "SupplierModel",
    "ProductModel",
    "CustomerModel",
    "TransactionModel",
    "TransactionItemModel",
]

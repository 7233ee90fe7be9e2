"""In-memory reference backend: one id → record dict per entity kind.

Every operation runs without awaiting anything, so under the asyncio event
loop each call is atomic with respect to other requests.
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from pharmacy.core.errors import DuplicateEntry, InsufficientStock
from pharmacy.schemas import (
    SaleItem, TransactionCreate, TransactionDetail, TransactionItemCreate,
)
from pharmacy.storage.base import (
    CategoryRepository, CustomerRepository, ProductRepository, Repository, Storage,
    SupplierRepository, TransactionItemRepository, TransactionRepository, UserRepository,
)


class MemoryRepository(Repository):
    def __init__(self):
        self._rows: dict[int, Any] = {}
        self._next_id = 1

    def _check_unique(self, values: Mapping[str, Any], exclude_id: int | None = None) -> None:
        for field in self.unique_fields:
            if field not in values:
                continue
            for row in self._rows.values():
                if row.id != exclude_id and getattr(row, field) == values[field]:
                    raise DuplicateEntry(self.kind, field, values[field])

    def _insert(self, values: dict[str, Any]):
        self._check_unique(values)
        row = self.entity(id=self._next_id, **values)
        self._rows[row.id] = row
        self._next_id += 1
        return row

    async def get(self, entity_id: int):
        return self._rows.get(entity_id)

    async def get_by(self, field: str, value: Any):
        for row in self._rows.values():
            if getattr(row, field) == value:
                return row
        return None

    async def create(self, data: BaseModel):
        return self._insert(data.model_dump())

    async def update(self, entity_id: int, fields: Mapping[str, Any]):
        row = self._rows.get(entity_id)
        if row is None:
            return None
        changes = self._known_fields(fields)
        self._check_unique(changes, exclude_id=entity_id)
        updated = row.model_copy(update=changes)
        self._rows[entity_id] = updated
        return updated

    async def delete(self, entity_id: int) -> bool:
        return self._rows.pop(entity_id, None) is not None

    async def list_all(self) -> list:
        return list(self._rows.values())


class MemoryUserRepository(MemoryRepository, UserRepository):
    pass


class MemoryProductRepository(MemoryRepository, ProductRepository):
    pass


class MemoryCategoryRepository(MemoryRepository, CategoryRepository):
    pass


class MemorySupplierRepository(MemoryRepository, SupplierRepository):
    pass


class MemoryCustomerRepository(MemoryRepository, CustomerRepository):
    pass


class MemoryTransactionRepository(MemoryRepository, TransactionRepository):
    pass


class MemoryTransactionItemRepository(MemoryRepository, TransactionItemRepository):
    pass


class MemoryStorage(Storage):
    backend = "memory"

    def __init__(self):
        self.users = MemoryUserRepository()
        self.products = MemoryProductRepository()
        self.categories = MemoryCategoryRepository()
        self.suppliers = MemorySupplierRepository()
        self.customers = MemoryCustomerRepository()
        self.transactions = MemoryTransactionRepository()
        self.transaction_items = MemoryTransactionItemRepository()

    async def record_sale(
        self, transaction: TransactionCreate, items: Sequence[SaleItem]
    ) -> TransactionDetail:
        requested = Counter()
        for item in items:
            requested[item.product_id] += item.quantity

        # Validate everything before the first write
        products = self.products._rows
        for product_id, quantity in requested.items():
            product = products.get(product_id)
            available = product.stock if product else 0
            if product is None or available < quantity:
                raise InsufficientStock(product_id, quantity, available)
        self.transactions._check_unique(transaction.model_dump())

        for product_id, quantity in requested.items():
            product = products[product_id]
            products[product_id] = product.model_copy(update={"stock": product.stock - quantity})

        saved = self.transactions._insert(transaction.model_dump())
        saved_items = [
            self.transaction_items._insert(
                TransactionItemCreate(
                    transaction_id=saved.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal,
                ).model_dump()
            )
            for item in items
        ]
        return TransactionDetail(**saved.model_dump(), items=saved_items)

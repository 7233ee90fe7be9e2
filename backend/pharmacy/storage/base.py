"""Entity Store contract.

Every entity kind gets a repository with the same CRUD surface; the
`Storage` object bundles them together with the one multi-entity write the
core needs, `record_sale`. Backends implement these classes; nothing outside
the storage package mutates stored state.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from pharmacy.core.dates import utcnow
from pharmacy.schemas import (
    Category, Customer, Product, SaleItem, Supplier, Transaction, TransactionCreate,
    TransactionDetail, TransactionItem, User,
)

EntityT = TypeVar("EntityT", bound=BaseModel)


class Repository(ABC, Generic[EntityT]):
    """CRUD over one entity kind.

    Identifiers come from a per-kind counter and are never reused, even after
    a delete. `update` shallow-merges the supplied fields onto the stored
    record. Fields named in `unique_fields` are checked on create and update
    and a clash raises `DuplicateEntry`.
    """

    kind: str
    entity: type[EntityT]
    unique_fields: tuple[str, ...] = ()

    @abstractmethod
    async def get(self, entity_id: int) -> Optional[EntityT]: ...

    @abstractmethod
    async def get_by(self, field: str, value: Any) -> Optional[EntityT]: ...

    @abstractmethod
    async def create(self, data: BaseModel) -> EntityT: ...

    @abstractmethod
    async def update(self, entity_id: int, fields: Mapping[str, Any]) -> Optional[EntityT]: ...

    @abstractmethod
    async def delete(self, entity_id: int) -> bool: ...

    @abstractmethod
    async def list_all(self) -> list[EntityT]:
        """All records in insertion order."""

    def _known_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in fields.items() if key in self.entity.model_fields and key != "id"}


class UserRepository(Repository[User]):
    kind = "user"
    entity = User
    unique_fields = ("username",)

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self.get_by("username", username)


class ProductRepository(Repository[Product]):
    kind = "product"
    entity = Product
    unique_fields = ("sku",)

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        return await self.get_by("sku", sku)

    async def list_low_stock(self) -> list[Product]:
        return [p for p in await self.list_all() if p.is_low_stock]

    async def list_expired(self, now: datetime | None = None) -> list[Product]:
        now = now or utcnow()
        return [p for p in await self.list_all() if p.is_expired(now)]


class CategoryRepository(Repository[Category]):
    kind = "category"
    entity = Category
    unique_fields = ("name",)

    async def get_by_name(self, name: str) -> Optional[Category]:
        return await self.get_by("name", name)


class SupplierRepository(Repository[Supplier]):
    kind = "supplier"
    entity = Supplier


class CustomerRepository(Repository[Customer]):
    kind = "customer"
    entity = Customer


class TransactionRepository(Repository[Transaction]):
    kind = "transaction"
    entity = Transaction
    unique_fields = ("transaction_id",)

    async def get_by_code(self, code: str) -> Optional[Transaction]:
        return await self.get_by("transaction_id", code)

    async def list_recent(self, limit: int) -> list[Transaction]:
        transactions = sorted(await self.list_all(), key=lambda t: (t.created_at, t.id), reverse=True)
        return transactions[:limit]


class TransactionItemRepository(Repository[TransactionItem]):
    kind = "transaction item"
    entity = TransactionItem

    async def list_for_transaction(self, transaction_id: int) -> list[TransactionItem]:
        return [item for item in await self.list_all() if item.transaction_id == transaction_id]


class Storage(ABC):
    users: UserRepository
    products: ProductRepository
    categories: CategoryRepository
    suppliers: SupplierRepository
    customers: CustomerRepository
    transactions: TransactionRepository
    transaction_items: TransactionItemRepository

    backend: str

    async def init(self) -> None:
        """Prepare the backend (create tables, open pools)."""

    async def close(self) -> None:
        """Release backend resources."""

    async def is_empty(self) -> bool:
        return not await self.users.list_all() and not await self.products.list_all()

    @abstractmethod
    async def record_sale(
        self, transaction: TransactionCreate, items: Sequence[SaleItem]
    ) -> TransactionDetail:
        """Commit a sale as one unit.

        Decrements stock for every line with a guarded check (stock must cover
        the summed quantity per product), then persists the transaction and
        one item per line. Raises `InsufficientStock` or `DuplicateEntry`
        without writing anything.
        """

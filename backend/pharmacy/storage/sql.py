"""Durable backend on async SQLAlchemy (SQLite via aiosqlite, PostgreSQL via asyncpg)."""

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect, select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pharmacy.core.dates import utcnow
from pharmacy.core.errors import Conflict, DuplicateEntry, InsufficientStock, StorageUnavailable
from pharmacy.db.base import Base, build_engine
from pharmacy.models import (
    CategoryModel, CustomerModel, ProductModel, SupplierModel, TransactionItemModel,
    TransactionModel, UserModel,
)
from pharmacy.schemas import (
    Product, SaleItem, Transaction, TransactionCreate, TransactionDetail, TransactionItem,
)
from pharmacy.storage.base import (
    CategoryRepository, CustomerRepository, ProductRepository, Repository, Storage,
    SupplierRepository, TransactionItemRepository, TransactionRepository, UserRepository,
)

logger = logging.getLogger(__name__)


class SqlRepository(Repository):
    model: type[Base]

    def __init__(self, storage: "SqlStorage"):
        self._storage = storage

    def _to_entity(self, row):
        values = {attr.key: getattr(row, attr.key) for attr in sa_inspect(row).mapper.column_attrs}
        return self.entity.model_validate(values)

    async def _check_unique(
        self, session: AsyncSession, values: Mapping[str, Any], exclude_id: int | None = None
    ) -> None:
        for field in self.unique_fields:
            if field not in values:
                continue
            query = select(self.model.id).where(getattr(self.model, field) == values[field])
            if exclude_id is not None:
                query = query.where(self.model.id != exclude_id)
            if (await session.execute(query)).first() is not None:
                raise DuplicateEntry(self.kind, field, values[field])

    async def _select(self, query) -> list:
        async with self._storage.session() as session:
            result = await session.execute(query)
            return [self._to_entity(row) for row in result.scalars().all()]

    async def get(self, entity_id: int):
        async with self._storage.session() as session:
            row = await session.get(self.model, entity_id)
            return self._to_entity(row) if row is not None else None

    async def get_by(self, field: str, value: Any):
        rows = await self._select(
            select(self.model).where(getattr(self.model, field) == value).order_by(self.model.id).limit(1)
        )
        return rows[0] if rows else None

    async def create(self, data: BaseModel):
        async with self._storage.session() as session:
            values = data.model_dump()
            await self._check_unique(session, values)
            row = self.model(**values)
            session.add(row)
            await session.flush()
            return self._to_entity(row)

    async def update(self, entity_id: int, fields: Mapping[str, Any]):
        async with self._storage.session() as session:
            row = await session.get(self.model, entity_id)
            if row is None:
                return None
            changes = self._known_fields(fields)
            await self._check_unique(session, changes, exclude_id=entity_id)
            for key, value in changes.items():
                setattr(row, key, value)
            await session.flush()
            return self._to_entity(row)

    async def delete(self, entity_id: int) -> bool:
        async with self._storage.session() as session:
            row = await session.get(self.model, entity_id)
            if row is None:
                return False
            await session.delete(row)
            return True

    async def list_all(self) -> list:
        return await self._select(select(self.model).order_by(self.model.id))


class SqlUserRepository(SqlRepository, UserRepository):
    model = UserModel


class SqlProductRepository(SqlRepository, ProductRepository):
    model = ProductModel

    async def list_low_stock(self) -> list[Product]:
        return await self._select(
            select(ProductModel)
            .where(ProductModel.stock <= ProductModel.low_stock_threshold)
            .order_by(ProductModel.id)
        )

    async def list_expired(self, now: datetime | None = None) -> list[Product]:
        return await self._select(
            select(ProductModel)
            .where(ProductModel.expiry_date.is_not(None), ProductModel.expiry_date < (now or utcnow()))
            .order_by(ProductModel.id)
        )


class SqlCategoryRepository(SqlRepository, CategoryRepository):
    model = CategoryModel


class SqlSupplierRepository(SqlRepository, SupplierRepository):
    model = SupplierModel


class SqlCustomerRepository(SqlRepository, CustomerRepository):
    model = CustomerModel


class SqlTransactionRepository(SqlRepository, TransactionRepository):
    model = TransactionModel

    async def list_recent(self, limit: int) -> list[Transaction]:
        return await self._select(
            select(TransactionModel)
            .order_by(TransactionModel.created_at.desc(), TransactionModel.id.desc())
            .limit(limit)
        )


class SqlTransactionItemRepository(SqlRepository, TransactionItemRepository):
    model = TransactionItemModel

    async def list_for_transaction(self, transaction_id: int) -> list[TransactionItem]:
        return await self._select(
            select(TransactionItemModel)
            .where(TransactionItemModel.transaction_id == transaction_id)
            .order_by(TransactionItemModel.id)
        )


class SqlStorage(Storage):
    backend = "sql"

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self._engine = build_engine(url, echo=echo)
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)

        self.users = SqlUserRepository(self)
        self.products = SqlProductRepository(self)
        self.categories = SqlCategoryRepository(self)
        self.suppliers = SqlSupplierRepository(self)
        self.customers = SqlCustomerRepository(self)
        self.transactions = SqlTransactionRepository(self)
        self.transaction_items = SqlTransactionItemRepository(self)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """One session per store call, committed on success and rolled back on any error."""
        try:
            async with self._sessions() as session, session.begin():
                yield session
        except IntegrityError as exc:
            raise Conflict(f"Write rejected by the database: {exc.orig}") from exc
        except (OperationalError, InterfaceError, PoolTimeoutError, OSError) as exc:
            logger.error(f"Database unavailable: {exc}")
            raise StorageUnavailable("Database unavailable") from exc

    async def init(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (OperationalError, InterfaceError, OSError) as exc:
            raise StorageUnavailable("Database unavailable") from exc

    async def close(self) -> None:
        await self._engine.dispose()

    async def record_sale(
        self, transaction: TransactionCreate, items: Sequence[SaleItem]
    ) -> TransactionDetail:
        requested = Counter()
        for item in items:
            requested[item.product_id] += item.quantity

        async with self.session() as session:
            # Ascending id order keeps row locks deadlock-free across concurrent sales
            for product_id in sorted(requested):
                quantity = requested[product_id]
                result = await session.execute(
                    update(ProductModel)
                    .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
                    .values(stock=ProductModel.stock - quantity)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    available = await session.scalar(
                        select(ProductModel.stock).where(ProductModel.id == product_id)
                    )
                    raise InsufficientStock(product_id, quantity, available or 0)

            values = transaction.model_dump()
            await self.transactions._check_unique(session, values)
            row = TransactionModel(**values)
            session.add(row)
            await session.flush()

            item_rows = [
                TransactionItemModel(
                    transaction_id=row.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal,
                )
                for item in items
            ]
            session.add_all(item_rows)
            await session.flush()

            saved = self.transactions._to_entity(row)
            return TransactionDetail(
                **saved.model_dump(),
                items=[self.transaction_items._to_entity(item_row) for item_row in item_rows],
            )

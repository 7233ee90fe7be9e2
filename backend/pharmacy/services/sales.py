"""Point-of-sale checkout: turns a cart into a stored transaction.

Flow: reconcile the declared total against the lines, check that every
product can cover the requested quantity, then hand the sale to the store's
atomic `record_sale`, which decrements stock and writes the transaction and
its items together. The stock check and the commit run while holding one
lock per product involved, so two checkouts racing for the last unit cannot
both pass the check.
"""

import asyncio
import logging
import secrets
import weakref
from collections import Counter
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Iterable

from pharmacy.core.errors import InsufficientStock, NotFound, TotalMismatch
from pharmacy.schemas import SaleCreate, TransactionCreate, TransactionDetail
from pharmacy.storage.base import Storage

logger = logging.getLogger(__name__)


def generate_transaction_id() -> str:
    """Display code, e.g. TRX-20261019143005-9F2A."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"TRX-{stamp}-{secrets.token_hex(2).upper()}"


class SaleProcessor:
    def __init__(self, storage: Storage, tolerance: float = 0.01):
        self._storage = storage
        self.tolerance = tolerance
        # A lock lives only while some checkout holds or awaits it
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, product_id: int) -> asyncio.Lock:
        lock = self._locks.get(product_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[product_id] = lock
        return lock

    @asynccontextmanager
    async def _hold(self, product_ids: Iterable[int]) -> AsyncIterator[None]:
        # Always acquire in ascending id order so overlapping carts cannot deadlock
        async with AsyncExitStack() as stack:
            for product_id in sorted(set(product_ids)):
                await stack.enter_async_context(self._lock_for(product_id))
            yield

    async def create_transaction(self, sale: SaleCreate) -> TransactionDetail:
        calculated = sum(item.price * item.quantity for item in sale.items)
        if abs(calculated - sale.total) > self.tolerance:
            logger.warning(f"Sale rejected: declared total {sale.total} != calculated {calculated}")
            raise TotalMismatch(sale.total, calculated)

        if sale.customer_id is not None and await self._storage.customers.get(sale.customer_id) is None:
            raise NotFound("customer", sale.customer_id)

        requested = Counter()
        for item in sale.items:
            requested[item.product_id] += item.quantity

        async with self._hold(requested):
            for product_id, quantity in requested.items():
                product = await self._storage.products.get(product_id)
                available = product.stock if product is not None else 0
                if product is None or available < quantity:
                    logger.warning(
                        f"Sale rejected: product {product_id} requested {quantity}, available {available}",
                        extra={"product_id": product_id},
                    )
                    raise InsufficientStock(product_id, quantity, available)

            record = await self._storage.record_sale(
                TransactionCreate(
                    transaction_id=sale.transaction_id or generate_transaction_id(),
                    customer_id=sale.customer_id,
                    total=sale.total,
                    status=sale.status,
                ),
                sale.items,
            )

        logger.info(
            f"Sale committed: {record.transaction_id} total={record.total} items={len(record.items)}",
            extra={"transaction_id": record.transaction_id},
        )
        return record

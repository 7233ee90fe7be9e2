"""Unit tests for checkout (SaleProcessor)."""

import asyncio
import gc
import re

import pytest

from pharmacy.core.errors import InsufficientStock, NotFound, TotalMismatch
from pharmacy.schemas import SaleCreate, SaleItem, TransactionStatus
from pharmacy.services.sales import SaleProcessor, generate_transaction_id
from pharmacy.storage import SqlStorage

from factories import customer_data, product_data


def sale(*lines, total=None, **fields) -> SaleCreate:
    items = [SaleItem(product_id=pid, quantity=qty, price=price) for pid, qty, price in lines]
    if total is None:
        total = sum(item.subtotal for item in items)
    return SaleCreate(total=total, items=items, **fields)


@pytest.mark.asyncio
async def test_sale_with_matching_total_is_stored(storage):
    """Two products, total 100000, is committed and stock drops."""
    paracetamol = await storage.products.create(product_data(sku="P", stock=10, price=25000))
    vitamin = await storage.products.create(product_data(sku="V", stock=5, price=50000))
    processor = SaleProcessor(storage)

    detail = await processor.create_transaction(
        sale((paracetamol.id, 2, 25000), (vitamin.id, 1, 50000), total=100000)
    )

    assert detail.total == 100000
    assert detail.status == TransactionStatus.COMPLETED
    assert len(detail.items) == 2
    assert (await storage.products.get(paracetamol.id)).stock == 8
    assert (await storage.products.get(vitamin.id)).stock == 4
    assert [t.id for t in await storage.transactions.list_all()] == [detail.id]


@pytest.mark.asyncio
async def test_total_mismatch_rejected(storage):
    product = await storage.products.create(product_data(stock=10))
    processor = SaleProcessor(storage)

    with pytest.raises(TotalMismatch) as exc_info:
        await processor.create_transaction(sale((product.id, 4, 25000), total=100050))

    assert exc_info.value.declared == 100050
    assert exc_info.value.calculated == 100000
    assert (await storage.products.get(product.id)).stock == 10
    assert await storage.transactions.list_all() == []


@pytest.mark.asyncio
async def test_total_within_tolerance_accepted(storage):
    product = await storage.products.create(product_data(stock=10, price=0.1))
    processor = SaleProcessor(storage, tolerance=0.01)

    detail = await processor.create_transaction(sale((product.id, 3, 0.1), total=0.3))

    assert detail.total == pytest.approx(0.3)


@pytest.mark.asyncio
async def test_insufficient_stock_rejected(storage):
    product = await storage.products.create(product_data(stock=2))
    processor = SaleProcessor(storage)

    with pytest.raises(InsufficientStock) as exc_info:
        await processor.create_transaction(sale((product.id, 5, 25000)))

    assert exc_info.value.product_id == product.id
    assert exc_info.value.requested == 5
    assert exc_info.value.available == 2
    assert (await storage.products.get(product.id)).stock == 2


@pytest.mark.asyncio
async def test_unknown_product_reports_zero_available(storage):
    processor = SaleProcessor(storage)

    with pytest.raises(InsufficientStock) as exc_info:
        await processor.create_transaction(sale((404, 1, 1000)))

    assert exc_info.value.available == 0


@pytest.mark.asyncio
async def test_unknown_customer_rejected(storage):
    product = await storage.products.create(product_data(stock=5))
    processor = SaleProcessor(storage)

    with pytest.raises(NotFound):
        await processor.create_transaction(sale((product.id, 1, 25000), customer_id=77))

    assert (await storage.products.get(product.id)).stock == 5


@pytest.mark.asyncio
async def test_sale_keeps_customer_and_code(storage):
    product = await storage.products.create(product_data(stock=5))
    customer = await storage.customers.create(customer_data())
    processor = SaleProcessor(storage)

    detail = await processor.create_transaction(
        sale(
            (product.id, 1, 25000),
            customer_id=customer.id,
            transaction_id="TRX-9001",
            status=TransactionStatus.PENDING,
        )
    )

    assert detail.customer_id == customer.id
    assert detail.transaction_id == "TRX-9001"
    assert detail.status == TransactionStatus.PENDING


async def sell_last_unit_twice(storage, first: SaleProcessor, second: SaleProcessor):
    product = await storage.products.create(product_data(stock=1))

    results = await asyncio.gather(
        first.create_transaction(sale((product.id, 1, 25000))),
        second.create_transaction(sale((product.id, 1, 25000))),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, InsufficientStock)]
    successes = [r for r in results if not isinstance(r, Exception)]
    assert len(successes) == 1, results
    assert len(failures) == 1, results
    assert (await storage.products.get(product.id)).stock == 0
    assert len(await storage.transactions.list_all()) == 1


@pytest.mark.asyncio
async def test_concurrent_sales_of_last_unit(storage):
    """Only one of two simultaneous checkouts can take the last unit."""
    processor = SaleProcessor(storage)

    await sell_last_unit_twice(storage, processor, processor)


@pytest.mark.asyncio
async def test_concurrent_sales_across_processors_on_shared_database(tmp_path):
    """Two processors share no locks; the guarded stock update still stops overselling."""
    storage = SqlStorage(f"sqlite+aiosqlite:///{tmp_path / 'pharmacy.db'}")
    await storage.init()
    try:
        await sell_last_unit_twice(storage, SaleProcessor(storage), SaleProcessor(storage))
    finally:
        await storage.close()


@pytest.mark.asyncio
async def test_product_locks_are_released_after_checkout(memory_storage):
    first = await memory_storage.products.create(product_data(sku="A", stock=5))
    second = await memory_storage.products.create(product_data(sku="B", stock=5))
    processor = SaleProcessor(memory_storage)

    await processor.create_transaction(sale((first.id, 1, 25000), (second.id, 1, 25000)))
    gc.collect()

    assert len(processor._locks) == 0


def test_generated_transaction_ids_are_unique():
    codes = {generate_transaction_id() for _ in range(50)}

    assert all(re.fullmatch(r"TRX-\d{14}-[0-9A-F]{4}", code) for code in codes)
    assert len(codes) > 1

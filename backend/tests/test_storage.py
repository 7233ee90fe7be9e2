"""Entity store tests, run against the memory and SQL backends."""

from datetime import timedelta

import pytest

from pharmacy.core.dates import utcnow
from pharmacy.core.errors import DuplicateEntry, InsufficientStock
from pharmacy.models import TransactionItemModel
from pharmacy.schemas import SaleItem, TransactionCreate, UserCreate

from factories import NOW, category_data, customer_data, days_ago, product_data, supplier_data


@pytest.mark.asyncio
async def test_create_assigns_sequential_ids(storage):
    first = await storage.customers.create(customer_data(name="Alice"))
    second = await storage.customers.create(customer_data(name="Bob"))

    assert first.id == 1
    assert second.id == 2
    assert await storage.customers.get(2) == second


@pytest.mark.asyncio
async def test_get_missing_returns_none(storage):
    assert await storage.products.get(999) is None


@pytest.mark.asyncio
async def test_ids_are_not_reused_after_delete(storage):
    """A deleted id is gone for good; the next record takes a fresh one."""
    for name in ("A", "B", "C"):
        await storage.categories.create(category_data(name))

    assert await storage.categories.delete(3) is True
    created = await storage.categories.create(category_data("D"))

    assert created.id == 4
    assert await storage.categories.get(3) is None


@pytest.mark.asyncio
async def test_delete_missing_returns_false(storage):
    assert await storage.suppliers.delete(42) is False


@pytest.mark.asyncio
async def test_update_merges_supplied_fields(storage):
    product = await storage.products.create(product_data())

    updated = await storage.products.update(product.id, {"price": 27500, "stock": 4})

    assert updated.price == 27500
    assert updated.stock == 4
    assert updated.name == product.name
    assert updated.sku == product.sku
    assert await storage.products.get(product.id) == updated


@pytest.mark.asyncio
async def test_update_ignores_unknown_fields_and_id(storage):
    customer = await storage.customers.create(customer_data())

    updated = await storage.customers.update(customer.id, {"id": 99, "loyalty": 5, "phone": "0800"})

    assert updated.id == customer.id
    assert updated.phone == "0800"


@pytest.mark.asyncio
async def test_update_missing_returns_none(storage):
    assert await storage.customers.update(7, {"name": "Nobody"}) is None


@pytest.mark.asyncio
async def test_list_all_in_insertion_order(storage):
    for name in ("Vitamins", "Digestion", "Pain Relief"):
        await storage.categories.create(category_data(name))

    names = [category.name for category in await storage.categories.list_all()]

    assert names == ["Vitamins", "Digestion", "Pain Relief"]


@pytest.mark.asyncio
async def test_duplicate_sku_rejected(storage):
    await storage.products.create(product_data(sku="SKU-1"))

    with pytest.raises(DuplicateEntry) as exc_info:
        await storage.products.create(product_data(sku="SKU-1", name="Other"))

    assert exc_info.value.field == "sku"
    assert len(await storage.products.list_all()) == 1


@pytest.mark.asyncio
async def test_duplicate_on_update_rejected(storage):
    await storage.categories.create(category_data("Vitamins"))
    other = await storage.categories.create(category_data("Digestion"))

    with pytest.raises(DuplicateEntry):
        await storage.categories.update(other.id, {"name": "Vitamins"})

    # Renaming a record to its own current name is fine
    same = await storage.categories.update(other.id, {"name": "Digestion"})
    assert same.name == "Digestion"


@pytest.mark.asyncio
async def test_duplicate_username_rejected(storage):
    user = UserCreate(username="admin", password="hashed-secret", full_name="Admin")
    await storage.users.create(user)

    with pytest.raises(DuplicateEntry):
        await storage.users.create(user)

    assert (await storage.users.get_by_username("admin")).full_name == "Admin"


@pytest.mark.asyncio
async def test_lookup_helpers(storage):
    await storage.products.create(product_data(sku="VIT-C1000"))
    await storage.categories.create(category_data("Vitamins"))

    assert (await storage.products.get_by_sku("VIT-C1000")).sku == "VIT-C1000"
    assert await storage.products.get_by_sku("NOPE") is None
    assert (await storage.categories.get_by_name("Vitamins")).name == "Vitamins"


@pytest.mark.asyncio
async def test_low_stock_uses_inclusive_threshold(storage):
    await storage.products.create(product_data(sku="LOW", stock=5, low_stock_threshold=10))
    await storage.products.create(product_data(sku="EDGE", stock=10, low_stock_threshold=10))
    await storage.products.create(product_data(sku="OK", stock=15, low_stock_threshold=10))

    skus = [product.sku for product in await storage.products.list_low_stock()]

    assert skus == ["LOW", "EDGE"]


@pytest.mark.asyncio
async def test_expired_excludes_missing_and_future_dates(storage):
    await storage.products.create(product_data(sku="PAST", expiry_date=days_ago(1)))
    await storage.products.create(product_data(sku="NONE", expiry_date=None))
    await storage.products.create(product_data(sku="FUTURE", expiry_date=days_ago(-1)))

    skus = [product.sku for product in await storage.products.list_expired(NOW)]

    assert skus == ["PAST"]


@pytest.mark.asyncio
async def test_expiry_date_comes_back_in_utc(storage):
    expiry = utcnow() + timedelta(days=30)
    product = await storage.products.create(product_data(expiry_date=expiry))

    stored = await storage.products.get(product.id)

    assert stored.expiry_date.utcoffset() == timedelta(0)
    assert abs(stored.expiry_date - expiry) < timedelta(seconds=1)


@pytest.mark.asyncio
async def test_list_recent_newest_first(storage):
    for code, days in (("T1", 4), ("T2", 3), ("T3", 2), ("T4", 1)):
        await storage.transactions.create(
            TransactionCreate(transaction_id=code, total=1000, created_at=days_ago(days))
        )

    recent = await storage.transactions.list_recent(2)

    assert [t.transaction_id for t in recent] == ["T4", "T3"]


@pytest.mark.asyncio
async def test_record_sale_writes_transaction_items_and_stock(storage):
    paracetamol = await storage.products.create(product_data(sku="P", stock=10))
    vitamin = await storage.products.create(product_data(sku="V", stock=3, price=45000))
    customer = await storage.customers.create(customer_data())

    detail = await storage.record_sale(
        TransactionCreate(transaction_id="TRX-1", customer_id=customer.id, total=95000),
        [
            SaleItem(product_id=paracetamol.id, quantity=2, price=25000),
            SaleItem(product_id=vitamin.id, quantity=1, price=45000),
        ],
    )

    assert detail.transaction_id == "TRX-1"
    assert [item.subtotal for item in detail.items] == [50000, 45000]
    assert (await storage.products.get(paracetamol.id)).stock == 8
    assert (await storage.products.get(vitamin.id)).stock == 2
    assert len(await storage.transaction_items.list_for_transaction(detail.id)) == 2
    assert (await storage.transactions.get_by_code("TRX-1")).id == detail.id


@pytest.mark.asyncio
async def test_record_sale_sums_duplicate_lines(storage):
    product = await storage.products.create(product_data(stock=3))

    with pytest.raises(InsufficientStock) as exc_info:
        await storage.record_sale(
            TransactionCreate(transaction_id="TRX-2", total=100000),
            [
                SaleItem(product_id=product.id, quantity=2, price=25000),
                SaleItem(product_id=product.id, quantity=2, price=25000),
            ],
        )

    assert exc_info.value.requested == 4
    assert exc_info.value.available == 3


@pytest.mark.asyncio
async def test_record_sale_failure_writes_nothing(storage):
    plenty = await storage.products.create(product_data(sku="PLENTY", stock=50))
    scarce = await storage.products.create(product_data(sku="SCARCE", stock=1))

    with pytest.raises(InsufficientStock):
        await storage.record_sale(
            TransactionCreate(transaction_id="TRX-3", total=75000),
            [
                SaleItem(product_id=plenty.id, quantity=1, price=25000),
                SaleItem(product_id=scarce.id, quantity=2, price=25000),
            ],
        )

    assert (await storage.products.get(plenty.id)).stock == 50
    assert (await storage.products.get(scarce.id)).stock == 1
    assert await storage.transactions.list_all() == []
    assert await storage.transaction_items.list_all() == []


@pytest.mark.asyncio
async def test_record_sale_rejects_duplicate_code(storage):
    product = await storage.products.create(product_data(stock=10))
    items = [SaleItem(product_id=product.id, quantity=1, price=25000)]
    await storage.record_sale(TransactionCreate(transaction_id="TRX-4", total=25000), items)

    with pytest.raises(DuplicateEntry):
        await storage.record_sale(TransactionCreate(transaction_id="TRX-4", total=25000), items)

    assert (await storage.products.get(product.id)).stock == 9


@pytest.mark.asyncio
async def test_is_empty(storage):
    assert await storage.is_empty() is True
    await storage.suppliers.create(supplier_data())
    await storage.products.create(product_data())
    assert await storage.is_empty() is False


@pytest.mark.asyncio
async def test_sold_product_can_be_deleted(storage):
    """Deleting a product that appears on past sales succeeds and leaves the items in place."""
    product = await storage.products.create(product_data(stock=5))
    detail = await storage.record_sale(
        TransactionCreate(transaction_id="TRX-5", total=25000),
        [SaleItem(product_id=product.id, quantity=1, price=25000)],
    )

    assert await storage.products.delete(product.id) is True
    assert await storage.products.get(product.id) is None

    items = await storage.transaction_items.list_for_transaction(detail.id)
    assert [item.product_id for item in items] == [product.id]


def test_transaction_items_have_no_foreign_keys():
    """Item references stay plain ids so a delete never trips a constraint."""
    columns = TransactionItemModel.__table__.c

    assert not columns.product_id.foreign_keys
    assert not columns.transaction_id.foreign_keys

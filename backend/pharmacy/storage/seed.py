"""Demo catalogue loaded into an empty store at startup.

Timestamps and expiry dates are relative to the moment of seeding so the
dashboard always has something current to show: one product is past its
expiry date and three sit at or under their low-stock threshold.
"""

import logging
from datetime import datetime, timedelta

from pharmacy.core.dates import utcnow
from pharmacy.core.security import hash_password
from pharmacy.schemas import (
    CategoryCreate, CustomerCreate, ProductCreate, SupplierCreate, TransactionCreate,
    TransactionItemCreate, TransactionStatus, UserCreate, UserRole,
)
from pharmacy.storage.base import Storage

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("Pain Relief", "Pain relief medications"),
    ("Vitamins", "Vitamin supplements"),
    ("Digestion", "Digestion and gut health products"),
]

SUPPLIERS = [
    {
        "name": "Kimia Farma Distribution",
        "contact": "Budi Santoso",
        "email": "orders@kimiafarma-dist.co.id",
        "phone": "0215551001",
        "address": "Jl. Veteran No. 9, Jakarta",
    },
    {
        "name": "Sehat Vitamin Supply",
        "contact": "Dewi Lestari",
        "email": "sales@sehatvitamin.co.id",
        "phone": "0215551002",
        "address": "Jl. Asia Afrika No. 77, Bandung",
    },
]

# (name, sku, description, category, price, cost, stock, threshold, expiry in days, supplier index)
PRODUCTS = [
    ("Paracetamol 500mg", "MED-P500", "Pain relief tablets", "Pain Relief", 25000, 15000, 5, 10, 420, 0),
    ("Vitamin C 1000mg", "VIT-C1000", "Vitamin C supplements", "Vitamins", 45000, 25000, 3, 5, 180, 1),
    ("Antacid Suspension", "GAS-ANT120", "Antacid for heartburn relief", "Digestion", 35000, 20000, 2, 5, -14, 0),
    ("Ibuprofen 400mg", "MED-I400", "Anti-inflammatory pain relief", "Pain Relief", 30000, 18000, 15, 10, 365, 0),
]

CUSTOMERS = [
    ("John Doe", "john.doe@gmail.com", "081234567890", "Jl. Sudirman No. 123"),
    ("Jane Smith", "jane.smith@gmail.com", "081234567891", "Jl. Thamrin No. 456"),
    ("Robert Johnson", "robert.johnson@gmail.com", "081234567892", "Jl. Gatot Subroto No. 789"),
    ("Sarah Williams", "sarah.williams@gmail.com", "081234567893", "Jl. Kuningan No. 101"),
]

# (code, customer index, status, hours ago, [(product index, quantity)])
TRANSACTIONS = [
    ("TRX-6520", 3, TransactionStatus.PENDING, 30, [(0, 1), (1, 1), (2, 1)]),
    ("TRX-6521", 2, TransactionStatus.COMPLETED, 4, [(1, 2), (3, 2)]),
    ("TRX-6522", 1, TransactionStatus.COMPLETED, 3, [(0, 1), (2, 1), (3, 1)]),
    ("TRX-6523", 0, TransactionStatus.COMPLETED, 1, [(0, 2), (1, 1), (3, 1)]),
]


async def seed_demo_data(storage: Storage, now: datetime | None = None) -> None:
    now = now or utcnow()

    await storage.users.create(
        UserCreate(
            username="admin",
            password=hash_password("password123"),
            full_name="Store Administrator",
            role=UserRole.ADMIN,
        )
    )

    for name, description in CATEGORIES:
        await storage.categories.create(CategoryCreate(name=name, description=description))

    suppliers = [await storage.suppliers.create(SupplierCreate(**data)) for data in SUPPLIERS]

    products = []
    for name, sku, description, category, price, cost, stock, threshold, expiry_days, supplier in PRODUCTS:
        products.append(
            await storage.products.create(
                ProductCreate(
                    name=name,
                    sku=sku,
                    description=description,
                    category=category,
                    price=price,
                    cost_price=cost,
                    stock=stock,
                    low_stock_threshold=threshold,
                    expiry_date=now + timedelta(days=expiry_days),
                    supplier_id=suppliers[supplier].id,
                )
            )
        )

    customers = [
        await storage.customers.create(CustomerCreate(name=name, email=email, phone=phone, address=address))
        for name, email, phone, address in CUSTOMERS
    ]

    # Historical sales are written directly; they predate the current stock levels.
    for code, customer, status, hours_ago, lines in TRANSACTIONS:
        total = sum(products[index].price * quantity for index, quantity in lines)
        transaction = await storage.transactions.create(
            TransactionCreate(
                transaction_id=code,
                customer_id=customers[customer].id,
                total=total,
                status=status,
                created_at=now - timedelta(hours=hours_ago),
            )
        )
        for index, quantity in lines:
            product = products[index]
            await storage.transaction_items.create(
                TransactionItemCreate(
                    transaction_id=transaction.id,
                    product_id=product.id,
                    quantity=quantity,
                    price=product.price,
                    subtotal=product.price * quantity,
                )
            )

    logger.info(
        f"Seeded demo data: {len(products)} products, {len(customers)} customers, "
        f"{len(TRANSACTIONS)} transactions"
    )

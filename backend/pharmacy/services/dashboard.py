"""Dashboard aggregation: read-only statistics computed from the store.

Buckets and windows are computed in the store timezone. Sales series always
end with the current, still-open period; a transaction falls in the bucket
whose calendar day, ISO week or month contains its local createdAt.
"""

import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from pharmacy.core.dates import as_utc, local_date, shift_months, start_of_month, start_of_week, utcnow
from pharmacy.schemas import (
    CategoryShare, CustomerSummary, DashboardStats, LowStockProduct, RecentTransaction,
    SalesPeriod, SalesPoint, SupplierSummary, Transaction,
)
from pharmacy.storage.base import Storage

DAILY_BUCKETS = 7
WEEKLY_BUCKETS = 4
MONTHLY_BUCKETS = 6


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percent_change(current: float, previous: float) -> Optional[float]:
    if previous == 0:
        return None
    return round((current - previous) / previous * 100, 1)


class DashboardService:
    def __init__(
        self,
        storage: Storage,
        tz: ZoneInfo | None = None,
        stats_window_days: int = 30,
        velocity_days: int = 30,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._storage = storage
        self.tz = tz or ZoneInfo("UTC")
        self.stats_window_days = stats_window_days
        self.velocity_days = velocity_days
        self._clock = clock

    def _now(self) -> datetime:
        return as_utc(self._clock())

    # ── Stats ─────────────────────────────────────

    async def dashboard_stats(self) -> DashboardStats:
        now = self._now()
        transactions = await self._storage.transactions.list_all()
        products = await self._storage.products.list_all()

        window = timedelta(days=self.stats_window_days)
        current = sum(t.total for t in transactions if now - window < t.created_at <= now)
        previous = sum(t.total for t in transactions if now - 2 * window < t.created_at <= now - window)

        return DashboardStats(
            total_sales=round(sum(t.total for t in transactions), 2),
            total_products=len(products),
            low_stock_count=sum(1 for p in products if p.is_low_stock),
            expired_count=sum(1 for p in products if p.is_expired(now)),
            percent_sales_change=percent_change(current, previous),
            # Products carry no creation history to compare against
            percent_products_change=None,
        )

    # ── Sales series ──────────────────────────────

    def _buckets(self, period: SalesPeriod, today: date) -> list[tuple[date, str]]:
        if period == SalesPeriod.DAILY:
            starts = [today - timedelta(days=offset) for offset in range(DAILY_BUCKETS - 1, -1, -1)]
            return [(start, start.strftime("%a")) for start in starts]
        if period == SalesPeriod.WEEKLY:
            monday = start_of_week(today)
            starts = [monday - timedelta(weeks=offset) for offset in range(WEEKLY_BUCKETS - 1, -1, -1)]
            return [
                (start, f"{start.isocalendar().year}-W{start.isocalendar().week:02d}")
                for start in starts
            ]
        first = start_of_month(today)
        starts = [shift_months(first, -offset) for offset in range(MONTHLY_BUCKETS - 1, -1, -1)]
        return [(start, start.strftime("%b %Y")) for start in starts]

    def _bucket_key(self, period: SalesPeriod, created_at: datetime) -> date:
        day = local_date(created_at, self.tz)
        if period == SalesPeriod.DAILY:
            return day
        if period == SalesPeriod.WEEKLY:
            return start_of_week(day)
        return start_of_month(day)

    async def sales_series(self, period: SalesPeriod = SalesPeriod.DAILY) -> list[SalesPoint]:
        today = local_date(self._now(), self.tz)
        buckets = self._buckets(period, today)
        totals: dict[date, float] = {start: 0.0 for start, _ in buckets}

        for transaction in await self._storage.transactions.list_all():
            key = self._bucket_key(period, transaction.created_at)
            if key in totals:
                totals[key] += transaction.total

        return [
            SalesPoint(label=label, period_start=start, sales=round(totals[start], 2))
            for start, label in buckets
        ]

    # ── Category share ────────────────────────────

    async def category_share(self) -> list[CategoryShare]:
        categories = await self._storage.categories.list_all()
        products = {p.id: p for p in await self._storage.products.list_all()}

        sales: dict[str, float] = {category.name: 0.0 for category in categories}
        total = 0.0
        for item in await self._storage.transaction_items.list_all():
            product = products.get(item.product_id)
            if product is None:
                continue
            sales[product.category] = sales.get(product.category, 0.0) + item.subtotal
            total += item.subtotal

        if total == 0:
            return [CategoryShare(category=name, percentage=0) for name in sales]

        return [
            CategoryShare(category=name, percentage=_round_half_up(amount / total * 100))
            for name, amount in sales.items()
        ]

    # ── Recent transactions ───────────────────────

    async def recent_transactions(self, limit: int = 5) -> list[RecentTransaction]:
        recent = await self._storage.transactions.list_recent(limit)
        enriched = []
        for transaction in recent:
            customer = None
            if transaction.customer_id is not None:
                customer = await self._storage.customers.get(transaction.customer_id)
            enriched.append(
                RecentTransaction(
                    **transaction.model_dump(),
                    customer=CustomerSummary(id=customer.id, name=customer.name) if customer else None,
                )
            )
        return enriched

    # ── Low stock ─────────────────────────────────

    async def average_daily_sales(self) -> dict[int, float]:
        """Units sold per product per day over the velocity window."""
        since = self._now() - timedelta(days=self.velocity_days)
        recent: dict[int, Transaction] = {
            t.id: t for t in await self._storage.transactions.list_all() if t.created_at > since
        }
        units: defaultdict[int, int] = defaultdict(int)
        for item in await self._storage.transaction_items.list_all():
            if item.transaction_id in recent:
                units[item.product_id] += item.quantity
        return {product_id: count / self.velocity_days for product_id, count in units.items()}

    async def low_stock_detail(self) -> list[LowStockProduct]:
        velocity = await self.average_daily_sales()
        detail = []
        for product in await self._storage.products.list_low_stock():
            supplier = None
            if product.supplier_id is not None:
                supplier = await self._storage.suppliers.get(product.supplier_id)
            average = velocity.get(product.id, 0.0)
            detail.append(
                LowStockProduct(
                    **product.model_dump(),
                    supplier=(
                        SupplierSummary(id=supplier.id, name=supplier.name, contact=supplier.contact)
                        if supplier else None
                    ),
                    reorder_point=product.low_stock_threshold,
                    average_daily_sales=round(average, 2),
                    days_until_stockout=math.floor(product.stock / max(average, 1)),
                )
            )
        return detail

"""
Service layer for dashboard statistics.

All figures are computed from the stored collections; there is no
order history, so revenue is an estimate: each product is assumed to
have sold 80% of its current stock.  Growth figures compare what was
created in the last 30 days with everything created before.

Monthly series cover the twelve calendar months ending with the
current one and are bucketed by ``createdAt``.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..stores import Stores, public_account
from .query import account_stats, category_distribution, product_stats

SOLD_SHARE = 0.8
GROWTH_WINDOW = timedelta(days=30)
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def estimated_sales(product: Dict[str, Any]) -> int:
    stock = product.get("stock") or 0
    return math.floor(stock * SOLD_SHARE)


def estimated_revenue(product: Dict[str, Any]) -> float:
    return (product.get("price") or 0) * estimated_sales(product)


def growth_percent(records: Iterable[Dict[str, Any]], now: datetime, weight=lambda r: 1) -> int:
    """Percentage growth of ``weight`` created within the window versus before it."""
    cutoff = now - GROWTH_WINDOW
    recent = before = 0.0
    for r in records:
        created = parse_timestamp(r.get("createdAt"))
        if created is not None and created >= cutoff:
            recent += weight(r)
        else:
            before += weight(r)
    if before == 0:
        return 100 if recent > 0 else 0
    return round(recent / before * 100)


def last_twelve_months(now: datetime) -> List[tuple]:
    """``(year, month)`` pairs for the 12 months ending with ``now``'s month."""
    months = []
    year, month = now.year, now.month
    for _ in range(12):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def monthly_buckets(records: Iterable[Dict[str, Any]], now: datetime, weight) -> Dict[tuple, float]:
    buckets = {ym: 0 for ym in last_twelve_months(now)}
    for r in records:
        created = parse_timestamp(r.get("createdAt"))
        if created is None:
            continue
        key = (created.year, created.month)
        if key in buckets:
            buckets[key] += weight(r)
    return buckets


class StatisticsService:
    """Aggregated views over the stores for the dashboard."""

    def __init__(self, stores: Stores) -> None:
        self.stores = stores

    async def overview(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        accounts = await self.stores.accounts.load_all()
        products = await self.stores.products.load_all()
        recent = await self.stores.logs.recent(10)

        users = account_stats(accounts)
        users["growth"] = growth_percent(accounts, now)
        inventory = product_stats(products)
        inventory["totalValue"] = f"{inventory['totalValue']:.2f}"
        revenue = sum(estimated_revenue(p) for p in products)
        return {
            "users": users,
            "products": inventory,
            "revenue": {
                "total": f"{revenue:.2f}",
                "growth": growth_percent(products, now, weight=estimated_revenue),
            },
            "activities": recent,
        }

    async def charts(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        accounts = await self.stores.accounts.load_all()
        products = await self.stores.products.load_all()

        revenue_by_month = monthly_buckets(products, now, estimated_revenue)
        signups_by_month = monthly_buckets(accounts, now, lambda r: 1)
        top = sorted(
            ({"name": p.get("name"), "sales": estimated_sales(p)} for p in products),
            key=lambda item: item["sales"],
            reverse=True,
        )[:5]
        return {
            "monthlyRevenue": [
                {"month": MONTH_NAMES[m - 1], "revenue": round(v, 2)}
                for (_, m), v in revenue_by_month.items()
            ],
            "categoryDistribution": category_distribution(products),
            "userRegistrations": [
                {"month": MONTH_NAMES[m - 1], "count": int(v)}
                for (_, m), v in signups_by_month.items()
            ],
            "topProducts": top,
        }

    async def activities(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Recent activity entries, with the acting account attached when it still exists."""
        entries = await self.stores.logs.recent(limit)
        accounts = {a["id"]: a for a in await self.stores.accounts.load_all()}
        enriched = []
        for entry in entries:
            account = public_account(accounts.get(entry.get("userId")))
            if account is not None:
                entry = {
                    **entry,
                    "user": {"name": account.get("name"), "email": account.get("email"), "role": account.get("role")},
                }
            enriched.append(entry)
        return enriched

"""
List-query helpers over an already loaded collection.

Everything here is a pure function of its arguments: no store access,
no mutation of the input records.  Routes load a collection snapshot
once and then narrow, order and slice it with these helpers.

Sorting is stable.  Records whose sort key is missing (or ``None``)
compare as smaller than every present value, so they come first in
ascending order and last in descending order.  Values of different
types are grouped (numbers, then strings, then anything else) instead
of raising ``TypeError``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

Record = Dict[str, Any]

SORT_ORDERS = ("asc", "desc")


@dataclass
class Page:
    """A slice of a filtered collection plus paging metadata."""

    items: List[Record]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    def pagination(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


@dataclass
class ListQuery:
    """Parameters of a list request.

    ``equals`` maps field names to exact values; falsy values are ignored
    so optional query-string filters can be passed through unchanged.
    ``ranges`` maps field names to inclusive ``(minimum, maximum)``
    bounds, either of which may be ``None``.
    """

    search: str = ""
    search_fields: Sequence[str] = ()
    equals: Dict[str, Any] = field(default_factory=dict)
    ranges: Dict[str, Tuple[Optional[float], Optional[float]]] = field(default_factory=dict)
    sort_by: str = "createdAt"
    sort_order: str = "desc"
    page: int = 1
    limit: int = 10


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def search(records: Iterable[Record], term: str, fields: Sequence[str]) -> List[Record]:
    """Keep records where any of ``fields`` contains ``term`` (case-insensitive)."""
    records = list(records)
    if not term:
        return records
    needle = term.lower()
    return [
        r for r in records
        if any(needle in str(r.get(f) or "").lower() for f in fields)
    ]


def filter_equals(records: Iterable[Record], field_name: str, value: Any) -> List[Record]:
    records = list(records)
    if value is None or value == "":
        return records
    return [r for r in records if r.get(field_name) == value]


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def filter_range(
    records: Iterable[Record],
    field_name: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> List[Record]:
    """Keep records with ``minimum <= field <= maximum``.

    A record without a numeric value is dropped as soon as any bound is
    given.
    """
    records = list(records)
    if minimum is None and maximum is None:
        return records
    kept = []
    for r in records:
        value = _as_number(r.get(field_name))
        if value is None:
            continue
        if minimum is not None and value < minimum:
            continue
        if maximum is not None and value > maximum:
            continue
        kept.append(r)
    return kept


# ---------------------------------------------------------------------------
# Sorting and paging
# ---------------------------------------------------------------------------

def _sort_key(field_name: str):
    def key(record: Record) -> Tuple[int, Any]:
        value = record.get(field_name)
        if value is None:
            return (0, 0)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return (1, value)
        if isinstance(value, str):
            return (2, value)
        return (3, str(value))

    return key


def sort_records(records: Iterable[Record], sort_by: str, order: str = "asc") -> List[Record]:
    """Stable sort by a single key; ``order`` is ``asc`` or ``desc``."""
    if order not in SORT_ORDERS:
        raise ValueError(f"sort order must be one of {SORT_ORDERS}, got {order!r}")
    return sorted(records, key=_sort_key(sort_by), reverse=order == "desc")


def paginate(records: Sequence[Record], page: int = 1, limit: int = 10) -> Page:
    """Return the 1-based ``page`` of ``limit`` records."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")
    start = (page - 1) * limit
    end = page * limit
    return Page(items=list(records[start:end]), total=len(records), page=page, limit=limit)


def run_query(records: Iterable[Record], query: ListQuery) -> Tuple[Page, List[Record]]:
    """Apply search, filters, sort and paging.

    Returns the page and the full filtered list (used e.g. to compute
    the filter options offered back to the client).
    """
    result = search(records, query.search, query.search_fields)
    for name, value in query.equals.items():
        result = filter_equals(result, name, value)
    for name, (minimum, maximum) in query.ranges.items():
        result = filter_range(result, name, minimum, maximum)
    result = sort_records(result, query.sort_by, query.sort_order)
    return paginate(result, query.page, query.limit), result


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def count_by(records: Iterable[Record], field_name: str) -> Dict[Any, int]:
    counts: Dict[Any, int] = {}
    for r in records:
        key = r.get(field_name)
        counts[key] = counts.get(key, 0) + 1
    return counts


def _value(product: Record) -> float:
    price = _as_number(product.get("price")) or 0
    stock = _as_number(product.get("stock")) or 0
    return price * stock


def inventory_value(products: Iterable[Record]) -> float:
    """Sum of ``price * stock`` over all products."""
    return sum(_value(p) for p in products)


def category_distribution(products: Iterable[Record]) -> List[Dict[str, Any]]:
    """``[{"name": category, "value": count}, ...]`` in first-seen order."""
    return [{"name": name, "value": count} for name, count in count_by(products, "category").items()]


def category_stats(products: Iterable[Record]) -> Dict[str, Dict[str, Any]]:
    stats: Dict[str, Dict[str, Any]] = {}
    for p in products:
        entry = stats.setdefault(p.get("category"), {"count": 0, "totalValue": 0, "totalStock": 0})
        entry["count"] += 1
        entry["totalValue"] += _value(p)
        entry["totalStock"] += _as_number(p.get("stock")) or 0
    return stats


def account_stats(accounts: Iterable[Record]) -> Dict[str, int]:
    total = active = admins = 0
    for a in accounts:
        total += 1
        if a.get("status") == "active":
            active += 1
        if a.get("role") == "admin":
            admins += 1
    return {"total": total, "active": active, "admins": admins}


def product_stats(products: Iterable[Record]) -> Dict[str, Any]:
    total = in_stock = 0
    value = 0.0
    categories = set()
    for p in products:
        total += 1
        if p.get("status") == "in_stock":
            in_stock += 1
        categories.add(p.get("category"))
        value += _value(p)
    return {"total": total, "inStock": in_stock, "categories": len(categories), "totalValue": value}

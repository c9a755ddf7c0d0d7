"""
Page and sort parameters for listing cash cards.

Sort parameters use the `field,direction` form (`sort=amount,desc`); the
parameter may repeat and earlier entries take precedence.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from core import db

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# API field name -> SQL column. Only these may appear in ORDER BY.
SORTABLE_FIELDS: dict[str, str] = {
    "id": "id",
    "amount": "amount",
    "owner": "owner",
}
DIRECTIONS = ("asc", "desc")
DEFAULT_SORT = ("amount,asc",)


class InvalidSortError(ValueError):
    pass


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def default_page_size() -> int:
    size = _env_int("CASHCARD_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    return min(max(size, 1), max_page_size())


def max_page_size() -> int:
    return max(_env_int("CASHCARD_MAX_PAGE_SIZE", MAX_PAGE_SIZE), 1)


@dataclass(frozen=True)
class SortOrder:
    field: str
    direction: str = "asc"

    @property
    def column(self) -> str:
        return SORTABLE_FIELDS[self.field]

    def to_sql(self) -> str:
        return f"{self.column} {self.direction.upper()}"


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sort: tuple[SortOrder, ...]

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def limit(self) -> int:
        return self.size


def parse_sort_param(raw: str) -> SortOrder:
    parts = [p.strip().lower() for p in (raw or "").split(",")]
    if not parts or not parts[0]:
        raise InvalidSortError("Sort field is empty.")
    if len(parts) > 2:
        raise InvalidSortError(f"Too many sort components: {raw!r}")

    field = parts[0]
    direction = parts[1] if len(parts) == 2 and parts[1] else "asc"
    if field not in SORTABLE_FIELDS:
        raise InvalidSortError(f"Unsupported sort field: {field!r}")
    if direction not in DIRECTIONS:
        raise InvalidSortError(f"Unsupported sort direction: {direction!r}")
    return SortOrder(field=field, direction=direction)


def parse_sort(params: list[str] | tuple[str, ...] | None) -> tuple[SortOrder, ...]:
    """
    Parse sort parameters into an ordered, de-duplicated tuple.

    Falls back to `DEFAULT_SORT` when nothing is given. A field listed twice
    keeps its first direction.
    """
    raw_params = [p for p in (params or []) if (p or "").strip()] or list(DEFAULT_SORT)

    orders: list[SortOrder] = []
    seen: set[str] = set()
    for raw in raw_params:
        order = parse_sort_param(raw)
        if order.field in seen:
            continue
        seen.add(order.field)
        orders.append(order)
    return tuple(orders)


def order_by_clause(sort: tuple[SortOrder, ...]) -> str:
    """
    Build an ORDER BY body from whitelisted columns, always ending on `id`
    so pages are stable.
    """
    terms = [order.to_sql() for order in sort]
    if not any(order.field == "id" for order in sort):
        terms.append("id ASC")
    return ", ".join(terms)


def build_page_request(
    *,
    page: int = 0,
    size: int | None = None,
    sort: list[str] | None = None,
) -> PageRequest:
    if page < 0:
        raise ValueError("page must be >= 0")
    effective_size = default_page_size() if size is None else min(max(size, 1), max_page_size())
    if page * effective_size > db.BIGINT_MAX - effective_size:
        raise ValueError("page is out of range")
    return PageRequest(page=page, size=effective_size, sort=parse_sort(sort))

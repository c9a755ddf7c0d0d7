"""
Cash card persistence (raw SQL).

Every lookup except `find_by_id` is scoped by owner. Scoped lookups return
None (or False) both when the id does not exist and when it belongs to
someone else; callers cannot tell the two apart.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from core import db

from .paging import PageRequest, order_by_clause

CASH_CARD_COLUMNS = "id, amount, owner"


async def find_by_id(card_id: int) -> dict[str, Any] | None:
    """
    Unscoped lookup. Not for request paths that return data to a caller.
    """
    return await db.fetch_one(
        f"""
        SELECT {CASH_CARD_COLUMNS}
        FROM cash_cards
        WHERE id = $1
        """,
        card_id,
    )


async def find_by_id_and_owner(card_id: int, *, owner: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {CASH_CARD_COLUMNS}
        FROM cash_cards
        WHERE id = $1
          AND owner = $2
        """,
        card_id,
        owner,
    )


async def exists_by_id_and_owner(card_id: int, *, owner: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM cash_cards
        WHERE id = $1
          AND owner = $2
        LIMIT 1
        """,
        card_id,
        owner,
    )
    return row is not None


async def owner_has_cards(owner: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM cash_cards
        WHERE owner = $1
        LIMIT 1
        """,
        owner,
    )
    return row is not None


async def count_by_owner(owner: str) -> int:
    n = await db.fetch_value(
        """
        SELECT count(*)
        FROM cash_cards
        WHERE owner = $1
        """,
        owner,
    )
    return int(n or 0)


async def find_by_owner(owner: str, page_request: PageRequest) -> list[dict[str, Any]]:
    """
    One page of the owner's cards.

    ORDER BY is interpolated, so it may only come from `order_by_clause`,
    which emits whitelisted column names.
    """
    return await db.fetch_all(
        f"""
        SELECT {CASH_CARD_COLUMNS}
        FROM cash_cards
        WHERE owner = $1
        ORDER BY {order_by_clause(page_request.sort)}
        LIMIT $2
        OFFSET $3
        """,
        owner,
        page_request.limit,
        page_request.offset,
    )


async def _insert(*, amount: Decimal, owner: str) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO cash_cards (amount, owner)
        VALUES ($1, $2)
        RETURNING {CASH_CARD_COLUMNS}
        """,
        amount,
        owner,
    )
    if row is None:
        raise RuntimeError("Failed to insert cash card.")
    return row


async def _update_amount(card_id: int, *, amount: Decimal, owner: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE cash_cards
        SET amount = $3
        WHERE id = $1
          AND owner = $2
        RETURNING {CASH_CARD_COLUMNS}
        """,
        card_id,
        owner,
        amount,
    )


async def save(*, amount: Decimal, owner: str, card_id: int | None = None) -> dict[str, Any] | None:
    """
    Insert a new card when `card_id` is None, otherwise update its amount.

    Updates are scoped by owner and never insert: a missing or foreign id
    returns None.
    """
    if card_id is None:
        return await _insert(amount=amount, owner=owner)
    return await _update_amount(card_id, amount=amount, owner=owner)


async def delete_by_id_and_owner(card_id: int, *, owner: str) -> bool:
    status_tag = await db.execute(
        """
        DELETE FROM cash_cards
        WHERE id = $1
          AND owner = $2
        """,
        card_id,
        owner,
    )
    return db.affected_rows(status_tag) > 0

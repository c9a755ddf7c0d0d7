"""
Pydantic schemas for cash card endpoints.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

# Matches the numeric(12, 2) column.
AMOUNT_MAX_DIGITS = 12
AMOUNT_DECIMAL_PLACES = 2


class CashCardCreateRequest(BaseModel):
    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    # Accepted for client convenience, never trusted: the store assigns the
    # id and the owner is always the authenticated principal.
    id: int | None = None
    owner: str | None = None


class CashCardUpdateRequest(CashCardCreateRequest):
    """
    Same shape as create; only `amount` is applied.
    """


class CashCardResponse(BaseModel):
    id: int
    amount: float
    owner: str

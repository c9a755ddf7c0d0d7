"""
Cash card business logic.

Every operation runs the ownership gate first and turns its decision into an
HTTP status. Records are always read and written scoped to the principal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status

from auth.schemas import Principal

from . import access, paging, repository, schemas

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CashCardPage:
    items: list[schemas.CashCardResponse]
    total: int


def _to_response(row: dict) -> schemas.CashCardResponse:
    return schemas.CashCardResponse(
        id=int(row["id"]),
        amount=float(row["amount"]),
        owner=str(row["owner"]),
    )


def _not_found(card_id: int | None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Cash card {card_id} not found.",
    )


def _raise_for_decision(decision: access.AccessDecision, card_id: int | None = None) -> None:
    if decision is access.AccessDecision.OK:
        return None
    if decision is access.AccessDecision.FORBIDDEN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Principal is not a card owner.",
        )
    raise _not_found(card_id)


async def get_cash_card(card_id: int, *, principal: Principal) -> schemas.CashCardResponse:
    _raise_for_decision(await access.decide_record_access(principal, card_id), card_id)

    row = await repository.find_by_id_and_owner(card_id, owner=principal.username)
    if row is None:
        # Deleted between the gate and the read.
        raise _not_found(card_id)
    return _to_response(row)


async def create_cash_card(
    payload: schemas.CashCardCreateRequest,
    *,
    principal: Principal,
) -> schemas.CashCardResponse:
    _raise_for_decision(await access.decide_collection_access(principal))

    if payload.owner is not None and payload.owner != principal.username:
        logger.info(
            "cashcard_owner_overridden requested=%s user=%s",
            payload.owner,
            principal.username,
        )

    row = await repository.save(amount=payload.amount, owner=principal.username)
    if row is None:
        raise RuntimeError("Failed to create cash card.")

    created = _to_response(row)
    logger.info("cashcard_created id=%s owner=%s", created.id, created.owner)
    return created


async def list_cash_cards(
    *,
    principal: Principal,
    page: int = 0,
    size: int | None = None,
    sort: list[str] | None = None,
) -> CashCardPage:
    _raise_for_decision(await access.decide_collection_access(principal))

    try:
        page_request = paging.build_page_request(page=page, size=size, sort=sort)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    rows = await repository.find_by_owner(principal.username, page_request)
    total = await repository.count_by_owner(principal.username)
    return CashCardPage(
        items=[_to_response(row) for row in rows],
        total=total,
    )


async def update_cash_card(
    card_id: int,
    payload: schemas.CashCardUpdateRequest,
    *,
    principal: Principal,
) -> schemas.CashCardResponse:
    """
    Replace the amount of an owned card. `id` and `owner` never change.
    """
    _raise_for_decision(await access.decide_record_access(principal, card_id), card_id)

    row = await repository.save(
        card_id=card_id,
        amount=payload.amount,
        owner=principal.username,
    )
    if row is None:
        raise _not_found(card_id)

    updated = _to_response(row)
    logger.info("cashcard_updated id=%s owner=%s", updated.id, updated.owner)
    return updated


async def delete_cash_card(card_id: int, *, principal: Principal) -> None:
    _raise_for_decision(await access.decide_record_access(principal, card_id), card_id)

    deleted = await repository.delete_by_id_and_owner(card_id, owner=principal.username)
    if not deleted:
        raise _not_found(card_id)
    logger.info("cashcard_deleted id=%s owner=%s", card_id, principal.username)

"""
Ownership gate for cash card requests.

Denial has two tiers:
- FORBIDDEN: the principal is not a card owner at all (missing role, or owns
  no cards). Returned for every id, so it reveals nothing about which ids exist.
- NOT_FOUND: the principal owns cards, but not this one. Missing ids and ids
  owned by someone else look identical.
"""

from __future__ import annotations

import enum
import logging

from auth import security
from auth.schemas import Principal
from core import db

from . import repository

logger = logging.getLogger(__name__)


class AccessDecision(str, enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


def is_card_owner(principal: Principal) -> bool:
    return principal.has_role(security.card_owner_role())


async def decide_collection_access(principal: Principal) -> AccessDecision:
    """
    Gate for create and list: only the card-owner role is required.
    """
    if not is_card_owner(principal):
        logger.info("access_denied decision=forbidden reason=role user=%s", principal.username)
        return AccessDecision.FORBIDDEN
    return AccessDecision.OK


async def decide_record_access(principal: Principal, card_id: int) -> AccessDecision:
    """
    Gate for single-record reads and writes.
    """
    if not is_card_owner(principal):
        logger.info("access_denied decision=forbidden reason=role user=%s", principal.username)
        return AccessDecision.FORBIDDEN

    if not await repository.owner_has_cards(principal.username):
        logger.info("access_denied decision=forbidden reason=no_cards user=%s", principal.username)
        return AccessDecision.FORBIDDEN

    if not db.fits_bigint(card_id):
        # No bigint column can hold it, so the card cannot exist.
        logger.debug("access_denied decision=not_found reason=out_of_range user=%s", principal.username)
        return AccessDecision.NOT_FOUND

    if not await repository.exists_by_id_and_owner(card_id, owner=principal.username):
        if logger.isEnabledFor(logging.DEBUG):
            # Server-side only; the caller gets a plain 404 either way.
            row = await repository.find_by_id(card_id)
            reason = "missing" if row is None else "foreign_owner"
            logger.debug(
                "access_denied decision=not_found reason=%s card_id=%s user=%s",
                reason,
                card_id,
                principal.username,
            )
        return AccessDecision.NOT_FOUND

    return AccessDecision.OK

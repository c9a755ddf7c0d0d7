"""
Cash card API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status

from auth import dependencies as auth_dependencies
from auth.schemas import Principal

from . import schemas, service

router = APIRouter(prefix="/cashcards")


@router.get("/{card_id}", response_model=schemas.CashCardResponse)
async def get_cash_card(
    card_id: int = Path(...),
    principal: Principal = Depends(auth_dependencies.get_current_principal),
) -> schemas.CashCardResponse:
    return await service.get_cash_card(card_id, principal=principal)


@router.get("", response_model=list[schemas.CashCardResponse])
async def list_cash_cards(
    response: Response,
    page: int = Query(0, ge=0),
    size: int | None = Query(None, ge=1),
    sort: list[str] | None = Query(None),
    principal: Principal = Depends(auth_dependencies.get_current_principal),
) -> list[schemas.CashCardResponse]:
    """
    List the caller's cards, `?page=0&size=20&sort=amount,asc` by default.

    Sizes above the configured maximum are clamped rather than rejected.
    """
    result = await service.list_cash_cards(
        principal=principal,
        page=page,
        size=size,
        sort=sort,
    )
    response.headers["X-Total-Count"] = str(result.total)
    return result.items


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_cash_card(
    request: Request,
    payload: schemas.CashCardCreateRequest,
    principal: Principal = Depends(auth_dependencies.get_current_principal),
) -> Response:
    created = await service.create_cash_card(payload, principal=principal)
    location = request.app.url_path_for("get_cash_card", card_id=str(created.id))
    return Response(status_code=status.HTTP_201_CREATED, headers={"Location": str(location)})


@router.put("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_cash_card(
    payload: schemas.CashCardUpdateRequest,
    card_id: int = Path(...),
    principal: Principal = Depends(auth_dependencies.get_current_principal),
) -> Response:
    await service.update_cash_card(card_id, payload, principal=principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cash_card(
    card_id: int = Path(...),
    principal: Principal = Depends(auth_dependencies.get_current_principal),
) -> Response:
    await service.delete_cash_card(card_id, principal=principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

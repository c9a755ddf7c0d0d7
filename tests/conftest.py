from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from auth import repository as auth_repository
from auth import security
from auth.schemas import Principal
from cashcards import repository as cashcards_repository
from cashcards.paging import PageRequest
from core import db
from main import app

PASSWORD = "password"

SEED_CARDS = [
    {"id": 99, "amount": Decimal("123.45"), "owner": "sarah1"},
    {"id": 100, "amount": Decimal("1.00"), "owner": "sarah1"},
    {"id": 102, "amount": Decimal("200.00"), "owner": "kumar2"},
]


class InMemoryCashCards:
    """
    Stand-in for `cashcards.repository` with the same call signatures.

    Arguments a bigint column could not take raise, as asyncpg does when
    encoding them.
    """

    def __init__(self, rows: list[dict]) -> None:
        self.rows = {int(r["id"]): dict(r) for r in rows}
        self.next_id = max(self.rows, default=0) + 1

    @staticmethod
    def _encode_bigint(*values: int) -> None:
        for value in values:
            if not db.fits_bigint(value):
                raise OverflowError(f"value out of int64 range: {value}")

    async def find_by_id(self, card_id: int) -> dict | None:
        self._encode_bigint(card_id)
        row = self.rows.get(card_id)
        return dict(row) if row is not None else None

    async def find_by_id_and_owner(self, card_id: int, *, owner: str) -> dict | None:
        self._encode_bigint(card_id)
        row = self.rows.get(card_id)
        if row is None or row["owner"] != owner:
            return None
        return dict(row)

    async def exists_by_id_and_owner(self, card_id: int, *, owner: str) -> bool:
        return await self.find_by_id_and_owner(card_id, owner=owner) is not None

    async def owner_has_cards(self, owner: str) -> bool:
        return any(r["owner"] == owner for r in self.rows.values())

    async def count_by_owner(self, owner: str) -> int:
        return sum(1 for r in self.rows.values() if r["owner"] == owner)

    async def find_by_owner(self, owner: str, page_request: PageRequest) -> list[dict]:
        self._encode_bigint(page_request.limit, page_request.offset)
        rows = [dict(r) for r in self.rows.values() if r["owner"] == owner]
        rows.sort(key=lambda r: r["id"])
        for order in reversed(page_request.sort):
            rows.sort(key=lambda r, col=order.column: r[col], reverse=order.direction == "desc")
        return rows[page_request.offset:page_request.offset + page_request.limit]

    async def save(self, *, amount: Decimal, owner: str, card_id: int | None = None) -> dict | None:
        if card_id is None:
            row = {"id": self.next_id, "amount": amount, "owner": owner}
            self.rows[row["id"]] = row
            self.next_id += 1
            return dict(row)
        self._encode_bigint(card_id)
        row = self.rows.get(card_id)
        if row is None or row["owner"] != owner:
            return None
        row["amount"] = amount
        return dict(row)

    async def delete_by_id_and_owner(self, card_id: int, *, owner: str) -> bool:
        self._encode_bigint(card_id)
        row = self.rows.get(card_id)
        if row is None or row["owner"] != owner:
            return False
        del self.rows[card_id]
        return True


@pytest.fixture(scope="session")
def password_hash() -> str:
    return security.hash_password(PASSWORD)


@pytest.fixture
def users(password_hash: str) -> dict[str, dict]:
    rows = [
        {"id": 1, "username": "sarah1", "roles": ["CARD-OWNER"], "is_active": True},
        {"id": 2, "username": "kumar2", "roles": ["CARD-OWNER"], "is_active": True},
        {"id": 3, "username": "hank-owns-no-cards", "roles": ["NON-OWNER"], "is_active": True},
        {"id": 4, "username": "newbie", "roles": ["CARD-OWNER"], "is_active": True},
        {"id": 5, "username": "retired", "roles": ["CARD-OWNER"], "is_active": False},
    ]
    return {r["username"]: {**r, "password_hash": password_hash} for r in rows}


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCashCards:
    fake = InMemoryCashCards(SEED_CARDS)
    for name in (
        "find_by_id",
        "find_by_id_and_owner",
        "exists_by_id_and_owner",
        "owner_has_cards",
        "count_by_owner",
        "find_by_owner",
        "save",
        "delete_by_id_and_owner",
    ):
        monkeypatch.setattr(cashcards_repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def user_store(monkeypatch: pytest.MonkeyPatch, users: dict[str, dict]) -> dict[str, dict]:
    async def get_user_by_username(username: str) -> dict | None:
        if "\x00" in username:
            # Postgres rejects NUL in text parameters.
            raise ValueError("invalid byte sequence for encoding \"UTF8\": 0x00")
        row = users.get(auth_repository.normalize_username(username))
        return dict(row) if row is not None else None

    monkeypatch.setattr(auth_repository, "get_user_by_username", get_user_by_username)
    return users


@pytest.fixture
def client(store: InMemoryCashCards, user_store: dict[str, dict]) -> TestClient:
    # Not used as a context manager: the lifespan (DB pool) is skipped.
    return TestClient(app)


@pytest.fixture
def sarah() -> Principal:
    return Principal(id=1, username="sarah1", roles=frozenset({"CARD-OWNER"}))


@pytest.fixture
def hank() -> Principal:
    return Principal(id=3, username="hank-owns-no-cards", roles=frozenset({"NON-OWNER"}))


@pytest.fixture
def newbie() -> Principal:
    return Principal(id=4, username="newbie", roles=frozenset({"CARD-OWNER"}))

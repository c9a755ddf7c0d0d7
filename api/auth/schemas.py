"""
Auth models.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Principal(BaseModel):
    """
    The authenticated user making the current request.
    """

    id: int
    username: str = Field(..., min_length=1, max_length=128)
    roles: frozenset[str] = frozenset()

    def has_role(self, role: str) -> bool:
        return role in self.roles

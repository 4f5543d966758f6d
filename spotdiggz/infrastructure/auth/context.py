from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from spotdiggz.application.errors import AuthError


@dataclass(slots=True)
class AuthContext:
    user_id: str
    claims: dict[str, Any]


def user_id_from_claims(claims: dict[str, Any]) -> str:
    """Firebase puts the uid in ``user_id``; fall back to ``sub``."""
    user_id = claims.get("user_id") or claims.get("sub")
    if not user_id:
        raise AuthError("Token missing subject")
    return str(user_id)

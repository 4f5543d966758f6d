from __future__ import annotations

import time
from typing import Any, Protocol

import httpx
from jose import jwt
from jose.exceptions import JOSEError

from spotdiggz.application.errors import AuthError

# Firebase ID tokens are signed with RS256 only
ALLOWED_ALGORITHMS = ["RS256"]


class TokenVerifier(Protocol):
    async def decode_token(self, token: str, *, issuer: str, audience: str) -> dict[str, Any]: ...


class OIDCJWKSClient:
    """Verifies Firebase ID tokens against the securetoken JWKS document."""

    def __init__(
        self,
        jwks_url: str,
        *,
        cache_ttl: int = 300,
        timeout: float = 5.0,
        static_jwks: dict[str, Any] | None = None,
    ) -> None:
        self.jwks_url = jwks_url
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self._jwks: dict[str, Any] | None = static_jwks
        self._last_fetch: float = 0.0

    async def _load_jwks(self) -> dict[str, Any]:
        if self._jwks and (time.time() - self._last_fetch) < self.cache_ttl:
            return self._jwks
        if self._jwks and self.cache_ttl <= 0:
            return self._jwks
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.jwks_url)
                response.raise_for_status()
                self._jwks = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise AuthError("Signing keys unavailable") from exc
        self._last_fetch = time.time()
        return self._jwks

    async def _get_key(self, kid: str) -> dict[str, Any]:
        jwks = await self._load_jwks()
        keys = jwks.get("keys", [])
        for key in keys:
            if key.get("kid") == kid:
                return key
        raise AuthError("Signing key not found for token")

    async def decode_token(
        self,
        token: str,
        *,
        issuer: str,
        audience: str,
    ) -> dict[str, Any]:
        try:
            header = jwt.get_unverified_header(token)
        except JOSEError as exc:
            raise AuthError("Invalid token header") from exc
        kid = header.get("kid")
        if not kid:
            raise AuthError("Token missing key identifier")
        key = await self._get_key(kid)
        try:
            return jwt.decode(
                token,
                key,
                algorithms=ALLOWED_ALGORITHMS,
                issuer=issuer,
                audience=audience,
            )
        except JOSEError as exc:
            raise AuthError("Token validation failed") from exc

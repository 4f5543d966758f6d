from __future__ import annotations

import logging
from typing import Iterable, Protocol

import httpx

from spotdiggz.application.errors import AuthDelegationError

logger = logging.getLogger(__name__)

METADATA_FLAVOR_HEADER = {"Metadata-Flavor": "Google"}


def truncate(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


class TokenSource(Protocol):
    name: str

    async def fetch(self) -> str | None: ...


class StaticTokenSource:
    """Token supplied through configuration, used for local runs."""

    def __init__(self, value: str | None, *, name: str = "static") -> None:
        self.name = name
        self._value = value

    async def fetch(self) -> str | None:
        return self._value or None


class MetadataTokenSource:
    """Access token of the instance's default service account."""

    name = "metadata"

    def __init__(self, http: httpx.AsyncClient, url: str) -> None:
        self.http = http
        self.url = url

    async def fetch(self) -> str | None:
        try:
            resp = await self.http.get(self.url, headers=METADATA_FLAVOR_HEADER)
        except (httpx.HTTPError, RuntimeError) as exc:
            logger.error("Failed to fetch metadata token: %r", exc)
            raise AuthDelegationError("Metadata token request failed") from exc
        if resp.status_code >= 400:
            logger.error("Metadata token error %s: %s", resp.status_code, truncate(resp.text))
            raise AuthDelegationError(
                "Metadata token request rejected", details={"status": resp.status_code}
            )
        try:
            token = resp.json()["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Failed to parse metadata token response: %r", exc)
            raise AuthDelegationError("Metadata token response malformed") from exc
        if not isinstance(token, str):
            raise AuthDelegationError("Metadata token response malformed")
        return token


class TokenChain:
    """Ordered token sources; the first non-empty value wins."""

    def __init__(self, sources: Iterable[TokenSource]) -> None:
        self.sources = list(sources)

    async def resolve(self) -> str:
        for source in self.sources:
            token = await source.fetch()
            if token:
                logger.debug("Signing token resolved from %s", source.name)
                return token
        raise AuthDelegationError("No bearer token available for signing")


def build_token_chain(
    http: httpx.AsyncClient, *, overrides: Iterable[str | None], metadata_url: str
) -> TokenChain:
    sources: list[TokenSource] = [
        StaticTokenSource(value, name=f"override[{index}]")
        for index, value in enumerate(overrides)
    ]
    sources.append(MetadataTokenSource(http, metadata_url))
    return TokenChain(sources)

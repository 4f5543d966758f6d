from __future__ import annotations

import base64
import binascii
import logging
from typing import Protocol

import httpx

from spotdiggz.application.errors import AuthDelegationError
from spotdiggz.infrastructure.storage.token_sources import TokenChain, truncate

logger = logging.getLogger(__name__)


class Signer(Protocol):
    async def sign(self, string_to_sign: str) -> str:
        """Return the RSA-SHA256 signature of ``string_to_sign`` as lowercase hex."""
        ...


class IAMCredentialsSigner:
    """Signs blobs with a service account key held by the IAM Credentials API.

    The private key never leaves Google; the API returns base64 signature
    bytes which are re-encoded as hex for the ``X-Goog-Signature`` parameter.
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        service_account_email: str,
        tokens: TokenChain,
        base_url: str = "https://iamcredentials.googleapis.com/v1",
    ) -> None:
        self.http = http
        self.service_account_email = service_account_email
        self.tokens = tokens
        self.base_url = base_url.rstrip("/")

    @property
    def sign_blob_url(self) -> str:
        return f"{self.base_url}/projects/-/serviceAccounts/{self.service_account_email}:signBlob"

    async def sign(self, string_to_sign: str) -> str:
        access_token = await self.tokens.resolve()
        payload = {"payload": base64.b64encode(string_to_sign.encode("utf-8")).decode("ascii")}
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            resp = await self.http.post(self.sign_blob_url, headers=headers, json=payload)
        except (httpx.HTTPError, RuntimeError) as exc:
            logger.error("signBlob request error: %r", exc)
            raise AuthDelegationError("signBlob request failed") from exc

        if resp.status_code >= 400:
            logger.error("signBlob error %s: %s", resp.status_code, truncate(resp.text))
            raise AuthDelegationError(
                "signBlob request rejected", details={"status": resp.status_code}
            )

        try:
            signed_blob = resp.json()["signedBlob"]
            signature = base64.b64decode(signed_blob, validate=True)
        except (ValueError, KeyError, TypeError, binascii.Error) as exc:
            logger.error("Failed to decode signBlob response: %r", exc)
            raise AuthDelegationError("signBlob response malformed") from exc
        if not signature:
            logger.error("signBlob response carried an empty signature")
            raise AuthDelegationError("signBlob response malformed")
        return signature.hex()

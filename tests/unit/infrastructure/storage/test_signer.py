from __future__ import annotations

import base64
import json

import httpx
import pytest

from spotdiggz.application.errors import AuthDelegationError
from spotdiggz.infrastructure.storage.signer import IAMCredentialsSigner
from spotdiggz.infrastructure.storage.token_sources import StaticTokenSource, TokenChain

EMAIL = "signer@sdz-dev.iam.gserviceaccount.com"


def make_signer(
    handler, token: str | None = "bearer-1"
) -> tuple[IAMCredentialsSigner, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    signer = IAMCredentialsSigner(
        http=http,
        service_account_email=EMAIL,
        tokens=TokenChain([StaticTokenSource(token)]),
        base_url="https://iam.test/v1/",
    )
    return signer, http


async def test_sign_posts_base64_payload_and_returns_hex():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        blob = base64.b64encode(bytes.fromhex("deadbeef")).decode()
        return httpx.Response(200, json={"keyId": "k1", "signedBlob": blob})

    signer, http = make_signer(handler)
    async with http:
        signature = await signer.sign("GOOG4-RSA-SHA256\nline2")

    assert signature == "deadbeef"
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"https://iam.test/v1/projects/-/serviceAccounts/{EMAIL}:signBlob"
    assert request.headers["Authorization"] == "Bearer bearer-1"
    body = json.loads(request.content)
    assert base64.b64decode(body["payload"]).decode() == "GOOG4-RSA-SHA256\nline2"


async def test_sign_rejected_status_raises():
    signer, http = make_signer(lambda request: httpx.Response(403, text="permission denied"))
    async with http:
        with pytest.raises(AuthDelegationError) as excinfo:
            await signer.sign("payload")
    assert excinfo.value.details == {"status": 403}


async def test_sign_server_error_is_not_retried():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503, text="unavailable")

    signer, http = make_signer(handler)
    async with http:
        with pytest.raises(AuthDelegationError):
            await signer.sign("payload")
    assert calls == 1


@pytest.mark.parametrize(
    "body",
    [{"signedBlob": "!!not-base64!!"}, {"signedBlob": ""}, {"other": "x"}, ["list"]],
)
async def test_sign_malformed_response_raises(body):
    signer, http = make_signer(lambda request: httpx.Response(200, json=body))
    async with http:
        with pytest.raises(AuthDelegationError):
            await signer.sign("payload")


async def test_sign_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    signer, http = make_signer(handler)
    async with http:
        with pytest.raises(AuthDelegationError):
            await signer.sign("payload")


async def test_sign_without_token_skips_request():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json={})

    signer, http = make_signer(handler, token=None)
    async with http:
        with pytest.raises(AuthDelegationError):
            await signer.sign("payload")
    assert calls == 0


async def test_sign_with_closed_client_raises():
    signer, http = make_signer(lambda request: httpx.Response(200, json={"signedBlob": "AA=="}))
    await http.aclose()
    with pytest.raises(AuthDelegationError):
        await signer.sign("payload")

from __future__ import annotations

from fastapi import Request

from spotdiggz.application.errors import AuthError, PermissionDenied
from spotdiggz.domain.value_objects.client_type import ClientType
from spotdiggz.infrastructure.auth.context import AuthContext
from spotdiggz.infrastructure.storage.ports import StorageService

CLIENT_HEADER = "X-SDZ-Client"


async def get_auth_context(request: Request) -> AuthContext:
    context = getattr(request.state, "auth_context", None)
    if context is None:
        raise AuthError("Authentication required")
    return context


def get_storage_service(request: Request) -> StorageService:
    service = getattr(request.app.state, "storage_service", None)
    if service is None:
        raise RuntimeError("Storage service not configured")
    return service


def require_mobile_client(request: Request) -> ClientType:
    raw = request.headers.get(CLIENT_HEADER)
    if raw is None:
        raise PermissionDenied("mobile client required (x-sdz-client)")
    client = ClientType.parse(raw)
    if client is None:
        raise PermissionDenied("invalid client type (ios/android only)")
    return client

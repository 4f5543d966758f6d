from __future__ import annotations

from typing import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from spotdiggz.application.errors import AuthError
from spotdiggz.config.settings import Settings
from spotdiggz.infrastructure.auth.context import AuthContext, user_id_from_claims

PUBLIC_PATHS: Iterable[str] = (
    "/sdz/health",
    "/docs",
    "/openapi.json",
    "/redoc",
)


class AuthMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next) -> Response:
        # Let CORS preflight pass without auth checks
        if request.method == "OPTIONS":
            return await call_next(request)
        if any(request.url.path.startswith(path) for path in PUBLIC_PATHS):
            return await call_next(request)

        try:
            authorization = request.headers.get("Authorization")
            if not authorization:
                raise AuthError("Missing Authorization header")
            scheme, _, token = authorization.partition(" ")
            if scheme.lower() != "bearer" or not token:
                raise AuthError("Invalid Authorization header")
            issuer = self.settings.auth_issuer
            audience = self.settings.auth_project_id
            if not issuer or not audience:
                raise AuthError("Authentication not configured")
            jwks_client = getattr(request.app.state, "jwks_client", None)
            if jwks_client is None:
                raise RuntimeError("JWKS client not configured")
            claims = await jwks_client.decode_token(token, issuer=issuer, audience=audience)
            request.state.auth_context = AuthContext(
                user_id=user_id_from_claims(claims),
                claims=claims,
            )
            return await call_next(request)
        except AuthError as exc:
            payload = {"code": exc.code, "message": exc.message}
            return JSONResponse(status_code=exc.status_code, content=payload)

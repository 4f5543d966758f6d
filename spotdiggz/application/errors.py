from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    code = "app_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class BadRequest(AppError):
    code = "bad_request"
    status_code = 400


class AuthError(AppError):
    code = "auth_error"
    status_code = 401


class PermissionDenied(AppError):
    code = "forbidden"
    status_code = 403


class InfrastructureError(AppError):
    """Internal failure. The message is logged, never sent to the client."""

    code = "infrastructure_error"
    status_code = 500


class AuthDelegationError(InfrastructureError):
    code = "auth_delegation_error"


class StorageNotConfiguredError(InfrastructureError):
    code = "storage_not_configured"

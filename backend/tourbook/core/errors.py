from __future__ import annotations

from typing import Any, Dict


class AppError(Exception):
    """Base for failures surfaced to API callers as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(AppError):
    status_code = 400


class PricingError(ValidationError):
    pass


class NotFoundError(AppError):
    status_code = 404


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class SignatureError(AuthorizationError):
    # payment providers expect a 400 on unverifiable webhooks
    status_code = 400


class ExternalServiceError(AppError):
    status_code = 502

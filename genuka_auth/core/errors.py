# genuka_auth/core/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class GenukaAuthError(Exception):
    """Base of every error this service renders as ``{"error", "code"}``."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class ValidationError(GenukaAuthError):
    code = "VALIDATION_ERROR"
    status_code = 422
    message = "Invalid request parameters"

    def __init__(self, message: Optional[str] = None, *, missing: tuple[str, ...] = (), **kw):
        self.missing = missing
        super().__init__(message, **kw)


class SignatureError(GenukaAuthError):
    code = "INVALID_SIGNATURE"
    status_code = 401
    message = "Invalid signature"


class UpstreamError(GenukaAuthError):
    code = "UPSTREAM_ERROR"
    status_code = 502
    message = "Provider request failed"

    def __init__(self, message: Optional[str] = None, *, status: Optional[int] = None, body: Optional[str] = None, **kw):
        self.status = status
        self.body = body
        super().__init__(message, **kw)


class TokenExchangeError(UpstreamError):
    code = "TOKEN_EXCHANGE_FAILED"
    status_code = 401
    message = "Failed to exchange authorization code"


class SessionError(GenukaAuthError):
    code = "UNAUTHORIZED"
    status_code = 401
    message = "Not authenticated"


class NotFoundError(GenukaAuthError):
    code = "COMPANY_NOT_FOUND"
    status_code = 404
    message = "Company not found"


class NoRefreshTokenError(GenukaAuthError):
    code = "NO_REFRESH_TOKEN"
    status_code = 401
    message = "No refresh token available. Please reinstall the app."

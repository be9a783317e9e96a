# asa_cli/http/errors.py
from __future__ import annotations

from typing import Optional


class AsaError(Exception):
    """Base class for every error the client raises on purpose."""


class ConfigError(AsaError):
    pass


class EncodingError(AsaError):
    """Request body could not be serialized. Nothing was sent."""


class TransportError(AsaError):
    """Connection/timeout/TLS failure below the HTTP layer."""


class DecodingError(AsaError):
    """Response body did not match the expected envelope or data shape."""


class AuthError(AsaError):
    """Access token could not be obtained or refreshed."""


class FilterParseError(AsaError, ValueError):
    def __init__(self, expr: str):
        super().__init__(f"invalid filter expression: {expr!r}")
        self.expr = expr


class APIError(AsaError):
    """
    Error reported by the remote API, either in an error envelope or as a
    bare non-2xx status.
    """

    def __init__(
        self,
        code: str,
        message: str,
        http_status: Optional[int] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.field = field
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.http_status:
            return f"API error (HTTP {self.http_status}) [{self.code}]: {self.message}"
        return f"API error [{self.code}]: {self.message}"


class RateLimitError(APIError):
    """HTTP 429. The only API error the retry policy re-attempts."""


def api_error_for(
    code: str,
    message: str,
    http_status: Optional[int] = None,
    field: Optional[str] = None,
) -> APIError:
    cls = RateLimitError if http_status == 429 else APIError
    return cls(code, message, http_status=http_status, field=field)

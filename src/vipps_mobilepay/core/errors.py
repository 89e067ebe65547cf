"""
Exception hierarchy shared by the outbound client and the webhook layer.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ApiError",
    "AuthError",
    "ConfigError",
    "DecodeError",
    "RouteError",
    "SignatureError",
    "TransportError",
    "VippsError",
]


class VippsError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(VippsError):
    """Raised when the supplied configuration is invalid."""


class AuthError(VippsError):
    """Raised when an access token could not be obtained."""


class TransportError(VippsError):
    """Raised when the HTTP request never produced a response."""


class DecodeError(VippsError):
    """Raised when a payload does not have the expected shape."""


class SignatureError(VippsError):
    """Raised when an inbound webhook fails authenticity checks."""


class RouteError(VippsError):
    """Raised when no handler (and no fallback) accepts an event."""


class ApiError(VippsError):
    """
    The provider answered with an HTTP error status.

    ``body`` and ``status_code`` always hold the raw response so callers can
    log diagnostics. ``title``, ``detail`` and ``code`` are only populated
    when the body was a problem-details document.
    """

    def __init__(
        self,
        status_code: int,
        body: bytes,
        *,
        title: Optional[str] = None,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.title = title
        self.detail = detail
        self.code = code
        self.status = status if status is not None else status_code
        super().__init__(self._describe())

    @property
    def is_problem(self) -> bool:
        return self.title is not None or self.detail is not None

    def _describe(self) -> str:
        if self.is_problem:
            return (
                f"API error: {self.title} - {self.detail} "
                f"(Code: {self.code}, Status: {self.status})"
            )
        text = self.body.decode("utf-8", errors="replace")
        return f"API error: status code {self.status_code}, body: {text}"

"""
Exceptions raised by Unical.

Every error surfaces to the immediate caller; this layer never retries.
The ``retryable`` flag only tells the caller whether a retry could help.
"""

from typing import Optional


class UnicalError(Exception):
    """Base exception for Unical operations."""

    retryable: bool = False
    recoverable: bool = False

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(UnicalError):
    """
    Invalid setup.

    Causes:
    - Registering a missing connector or one without a name
    - Missing client id/secret when constructing a connector
    """


class NotFoundError(UnicalError):
    """Unknown or unnamed connector at dispatch time."""


class UnsupportedOperationError(NotFoundError):
    """The resolved connector does not implement the requested operation."""


class ValidationError(UnicalError):
    """
    Malformed input, detected before any network call.

    Causes:
    - Auth object missing access_token, refresh_token or expiration_date
    - Packed channel id that does not split into two parts
    - Request params or options of the wrong type
    - Cronofy page token pointing outside the configured API
    """


class UpstreamError(UnicalError):
    """Failure reported by a backend API, including its token endpoint."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.status = status


class UpstreamAuthError(UpstreamError):
    """
    Authentication or authorization failure.

    Causes:
    - Invalid, expired or revoked credentials
    - Token refresh rejected by the provider
    - Insufficient scopes
    """


class UpstreamQuotaError(UpstreamError):
    """API quota exceeded."""

    retryable = True


class UpstreamNotFoundError(UpstreamError):
    """Event, calendar or channel not found upstream."""


class UpstreamConflictError(UpstreamError):
    """Upstream record was modified concurrently."""

    retryable = True


class UpstreamRateLimitError(UpstreamError):
    """Rate limit hit (429 response)."""

    retryable = True


class AlreadyRevokedError(UpstreamError):
    """
    The provider reports the token as already revoked or invalid.

    Callers revoking credentials can treat this as success.
    """

    recoverable = True

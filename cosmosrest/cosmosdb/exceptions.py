"""
Cosmos DB Exceptions.

Exception classes raised for failed Cosmos DB REST calls. Every remote
failure keeps the HTTP status and the provider error code so callers can
branch on them.

Author: CosmosREST Team
Date: 2026-10-12
"""

from typing import Any, Optional, Type

from cosmosrest.core.exceptions import ConfigurationError, CosmosRestError


class RemoteError(CosmosRestError):
    """Cosmos DB answered with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code
        code: Provider error code, if the body carried one
        body: Parsed JSON body, or the raw text when it was not JSON
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        code: Optional[str] = None,
        body: Any = None,
    ):
        """Initialize remote error.

        Args:
            message: Error message
            status_code: HTTP status code
            code: Provider error code
            body: Response body
        """
        super().__init__(message, code or "RemoteError")
        self.status_code = status_code
        self.code = code
        self.body = body

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"code={self.code!r}, message={self.message!r})"
        )


class AuthorizationError(RemoteError):
    """Request was rejected by the service (401/403)."""


class NotFoundError(RemoteError):
    """Resource does not exist (404)."""


class ConflictError(RemoteError):
    """Resource with the same id already exists (409)."""


class PreconditionFailedError(RemoteError):
    """ETag precondition did not hold (412)."""


class TooManyRequestsError(RemoteError):
    """Request rate is too large (429)."""


class MalformedResponseError(RemoteError):
    """Successful response whose body could not be parsed as JSON.

    Attributes:
        snippet: Leading part of the raw body, for diagnostics
    """

    def __init__(self, message: str, status_code: int, snippet: str = ""):
        """Initialize malformed response error.

        Args:
            message: Error message
            status_code: HTTP status code
            snippet: Leading part of the raw body
        """
        super().__init__(message, status_code, code="MalformedResponse", body=snippet)
        self.snippet = snippet


STATUS_ERRORS = {
    401: AuthorizationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    412: PreconditionFailedError,
    429: TooManyRequestsError,
}


def error_for_status(status_code: int) -> Type[RemoteError]:
    """Return the RemoteError subclass used for an HTTP status code."""
    return STATUS_ERRORS.get(status_code, RemoteError)


__all__ = [
    "ConfigurationError",
    "RemoteError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "PreconditionFailedError",
    "TooManyRequestsError",
    "MalformedResponseError",
    "error_for_status",
]

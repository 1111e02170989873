"""
Authentication exceptions for CosmosREST.

Author: CosmosREST Team
Date: 2026-10-12
"""

from cosmosrest.core.exceptions import CosmosRestError


class AuthenticationError(CosmosRestError):
    """Base exception for authorization token errors."""

    def __init__(self, message: str, error_code: str = "AuthenticationFailed"):
        super().__init__(message, error_code)


class InvalidMasterKeyError(AuthenticationError):
    """Raised when the master key is not valid Base64."""

    def __init__(self, message: str = "Master key is not valid Base64"):
        super().__init__(message, "InvalidMasterKey")

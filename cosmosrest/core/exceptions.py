"""
Base exceptions for CosmosREST.
"""

from typing import Iterable


class CosmosRestError(Exception):
    """Base exception for all CosmosREST errors.
    
    Attributes:
        message: Error message
        error_code: Machine-readable error code
    """
    
    def __init__(self, message: str, error_code: str = "InternalServerError"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ConfigurationError(CosmosRestError):
    """Required configuration is missing or invalid."""
    
    def __init__(self, message: str, missing: Iterable[str] = ()):
        """Initialize configuration error.
        
        Args:
            message: Error message
            missing: Names of the missing settings
        """
        super().__init__(message, "ConfigurationError")
        self.missing = list(missing)

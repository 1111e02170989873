"""
CosmosREST Authentication Module.

Builds master-key authorization tokens for Cosmos DB REST requests.

Author: CosmosREST Team
Date: 2026-10-12
"""

from cosmosrest.auth.exceptions import (
    AuthenticationError,
    InvalidMasterKeyError,
)
from cosmosrest.auth.masterkey import (
    build_string_to_sign,
    compute_signature,
    build_authorization_token,
    decode_master_key,
)

__all__ = [
    # Exceptions
    "AuthenticationError",
    "InvalidMasterKeyError",
    # Master-key auth
    "build_string_to_sign",
    "compute_signature",
    "build_authorization_token",
    "decode_master_key",
]

"""
Azure Cosmos DB REST Client.

Minimal client for the Cosmos DB SQL API: master-key request signing,
resource addressing, and document CRUD/query operations.

Author: CosmosREST Team
Date: 2026-10-12
"""

from .addressing import (
    ResourceAddress,
    ResourceAddresser,
    build_resource_id,
    build_resource_link,
)
from .client import CosmosClient
from .models import Document, QueryParameter, QueryResult, QuerySpec
from .response import parse_response
from .transport import CosmosRequest, RequestExecutor, format_http_date
from .exceptions import (
    ConfigurationError,
    RemoteError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
    PreconditionFailedError,
    TooManyRequestsError,
    MalformedResponseError,
)

__all__ = [
    # Client
    "CosmosClient",
    # Addressing
    "ResourceAddress",
    "ResourceAddresser",
    "build_resource_id",
    "build_resource_link",
    # Transport
    "CosmosRequest",
    "RequestExecutor",
    "format_http_date",
    "parse_response",
    # Models
    "Document",
    "QueryParameter",
    "QueryResult",
    "QuerySpec",
    # Exceptions
    "ConfigurationError",
    "RemoteError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "PreconditionFailedError",
    "TooManyRequestsError",
    "MalformedResponseError",
]

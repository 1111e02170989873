"""
Cosmos DB Request Executor.

Signs and sends a single REST request to Cosmos DB. Each call gets its own
x-ms-date and authorization token; there is no retry or backoff.

Author: CosmosREST Team
Date: 2026-10-12
"""

import json
import logging
from dataclasses import dataclass, field
from email.utils import format_datetime
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from cosmosrest.auth.masterkey import build_authorization_token
from cosmosrest.core.config_manager import CosmosConfig
from cosmosrest.core.logging_config import log_with_context

from .addressing import ResourceAddress
from .constants import (
    FLAG_TRUE,
    HEADER_ACCEPT,
    HEADER_ACTIVITY_ID,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_DATE,
    HEADER_IS_QUERY,
    HEADER_PARTITION_KEY,
    HEADER_REQUEST_CHARGE,
    HEADER_VERSION,
    MEDIA_TYPE_JSON,
    MEDIA_TYPE_QUERY_JSON,
)

logger = logging.getLogger(__name__)

# Sentinel for "no partition key header"; None is a valid partition key value
NO_PARTITION_KEY: Any = object()


def format_http_date(moment: Optional[datetime] = None) -> str:
    """Format a timestamp as an RFC 1123 date in GMT, independent of the locale."""
    moment = moment or datetime.now(timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def partition_key_header(partition_key: Any) -> str:
    """Encode a partition key value as a one-element JSON array."""
    return json.dumps([partition_key], separators=(",", ":"))


@dataclass
class CosmosRequest:
    """A single Cosmos DB REST request.

    Attributes:
        method: HTTP method
        address: Target link and signed resource id/type
        body: JSON-serializable body, or a pre-serialized string
        partition_key: Partition key value, or NO_PARTITION_KEY
        headers: Extra headers, forwarded verbatim
        is_query: Send as a SQL query (body must be {query, parameters})
    """

    method: str
    address: ResourceAddress
    body: Any = None
    partition_key: Any = NO_PARTITION_KEY
    headers: Dict[str, str] = field(default_factory=dict)
    is_query: bool = False


class RequestExecutor:
    """
    Sends signed requests to one Cosmos DB account.

    The executor owns its httpx.AsyncClient unless one is injected; injected
    clients are left open on aclose().
    """

    def __init__(
        self,
        config: CosmosConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize the executor.

        Args:
            config: Resolved connection settings
            http_client: Optional client, e.g. one built on httpx.MockTransport
            clock: Source of the request timestamp
        """
        self.config = config
        self._clock = clock
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()

    def build_url(self, link: str) -> str:
        return f"{self.config.endpoint}/{link}"

    def build_headers(self, request: CosmosRequest) -> Dict[str, str]:
        """
        Compute the headers for a request, including a fresh signature.

        Args:
            request: Request to sign

        Returns:
            Header mapping
        """
        date = format_http_date(self._clock())
        authorization = build_authorization_token(
            verb=request.method,
            resource_type=request.address.resource_type,
            resource_id=request.address.resource_id,
            date=date,
            master_key=self.config.master_key,
        )

        headers = httpx.Headers({
            HEADER_DATE: date,
            HEADER_VERSION: self.config.api_version,
            HEADER_AUTHORIZATION: authorization,
            HEADER_ACCEPT: MEDIA_TYPE_JSON,
        })
        headers.update(request.headers)

        if request.partition_key is not NO_PARTITION_KEY:
            headers[HEADER_PARTITION_KEY] = partition_key_header(request.partition_key)

        if request.is_query:
            headers[HEADER_IS_QUERY] = FLAG_TRUE
            headers[HEADER_CONTENT_TYPE] = MEDIA_TYPE_QUERY_JSON
        elif request.body is not None and HEADER_CONTENT_TYPE not in headers:
            headers[HEADER_CONTENT_TYPE] = MEDIA_TYPE_JSON

        return dict(headers.items())

    @staticmethod
    def serialize_body(body: Any) -> Optional[bytes]:
        if body is None:
            return None
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode("utf-8")
        return json.dumps(body).encode("utf-8")

    async def execute(self, request: CosmosRequest) -> httpx.Response:
        """
        Sign and send a request.

        Args:
            request: Request to send

        Returns:
            Raw response with its body read

        Raises:
            httpx.HTTPError: On network failure or timeout, unchanged
        """
        url = self.build_url(request.address.link)
        headers = self.build_headers(request)
        content = self.serialize_body(request.body)

        logger.debug(f"{request.method} {url}")

        response = await self._client.request(
            request.method,
            url,
            headers=headers,
            content=content,
        )
        await response.aread()

        log_with_context(
            logger,
            logging.DEBUG,
            f"{request.method} {request.address.link} -> {response.status_code}",
            activity_id=response.headers.get(HEADER_ACTIVITY_ID),
            request_charge=response.headers.get(HEADER_REQUEST_CHARGE),
        )
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

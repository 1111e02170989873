"""
Cosmos DB Client.

Asynchronous CRUD and query operations on documents, composed from the
resource addresser, the request executor and the response normalizer.

Author: CosmosREST Team
Date: 2026-10-12
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from cosmosrest.core.config_manager import CosmosConfig, resolve_config

from .addressing import ResourceAddresser
from .constants import (
    FLAG_TRUE,
    HEADER_CONTINUATION,
    HEADER_ENABLE_CROSS_PARTITION,
    HEADER_IS_UPSERT,
    HEADER_PREFER,
    HEADER_REQUEST_CHARGE,
    PREFER_RETURN_REPRESENTATION,
)
from .models import Document, QueryResult, QuerySpec
from .response import parse_response
from .transport import NO_PARTITION_KEY, CosmosRequest, RequestExecutor

logger = logging.getLogger(__name__)

Parameters = Optional[Union[Sequence[Any], Dict[str, Any]]]


def _parse_request_charge(value: Optional[str]) -> Optional[float]:
    """Parse x-ms-request-charge; unparseable values are reported as None."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring unparseable request charge: {value!r}")
        return None


class CosmosClient:
    """Client for documents in one Cosmos DB database.

    Every operation is a single signed request. Errors are never swallowed:
    failed responses raise RemoteError subclasses (NotFoundError for 404)
    and transport failures propagate as httpx.HTTPError.

    Example:
        async with CosmosClient() as client:
            note = await client.read_document("notes", "note-1", "u1")
    """

    def __init__(
        self,
        config: Optional[CosmosConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Connection settings; resolved from the environment when omitted
            http_client: Optional httpx.AsyncClient to send requests with

        Raises:
            ConfigurationError: If settings are resolved and one is missing
        """
        self.config = config or resolve_config()
        self.addresser = ResourceAddresser(self.config.database_id)
        self.executor = RequestExecutor(self.config, http_client=http_client)

    async def __aenter__(self) -> "CosmosClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.executor.aclose()

    def container_id(self, name: str) -> str:
        """Map a logical container name (e.g. "notes") to its configured id."""
        return self.config.container_id(name)

    async def _send(self, request: CosmosRequest) -> Any:
        response = await self.executor.execute(request)
        return parse_response(response)

    @staticmethod
    def _representation_headers(
        headers: Optional[Dict[str, str]],
        **extra: str,
    ) -> Dict[str, str]:
        merged = {HEADER_PREFER: PREFER_RETURN_REPRESENTATION, **extra}
        merged.update(headers or {})
        return merged

    async def query(
        self,
        container_id: str,
        query: str,
        parameters: Parameters = None,
        *,
        cross_partition: bool = False,
        partition_key: Any = NO_PARTITION_KEY,
        headers: Optional[Dict[str, str]] = None,
    ) -> QueryResult:
        """
        Run a SQL query and return the result page with its metadata.

        Args:
            container_id: Container identifier
            query: SQL query string
            parameters: ``[{"name": "@x", "value": ...}]`` or ``{"@x": ...}``
            cross_partition: Fan the query out across all partitions
            partition_key: Scope the query to one partition
            headers: Extra headers

        Returns:
            QueryResult
        """
        spec = QuerySpec.build(query, parameters)
        request_headers = dict(headers or {})
        if cross_partition:
            request_headers[HEADER_ENABLE_CROSS_PARTITION] = FLAG_TRUE

        request = CosmosRequest(
            method="POST",
            address=self.addresser.for_container(container_id),
            body=spec.to_body(),
            partition_key=partition_key,
            headers=request_headers,
            is_query=True,
        )
        response = await self.executor.execute(request)
        payload = parse_response(response)

        result = QueryResult.from_payload(
            payload,
            continuation=response.headers.get(HEADER_CONTINUATION),
            request_charge=_parse_request_charge(response.headers.get(HEADER_REQUEST_CHARGE)),
        )
        logger.debug(f"Query on '{container_id}' returned {result.row_count} row(s)")
        return result

    async def query_documents(
        self,
        container_id: str,
        query: str,
        parameters: Parameters = None,
        *,
        cross_partition: bool = False,
        partition_key: Any = NO_PARTITION_KEY,
        headers: Optional[Dict[str, str]] = None,
    ) -> List[Document]:
        """
        Run a SQL query and return the matching documents.

        Returns:
            List of documents, empty when nothing matched
        """
        result = await self.query(
            container_id,
            query,
            parameters,
            cross_partition=cross_partition,
            partition_key=partition_key,
            headers=headers,
        )
        return result.rows

    async def read_document(
        self,
        container_id: str,
        document_id: str,
        partition_key: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> Document:
        """
        Read a document by id.

        Raises:
            NotFoundError: If no document has this id and partition key
        """
        return await self._send(CosmosRequest(
            method="GET",
            address=self.addresser.for_document(container_id, document_id),
            partition_key=partition_key,
            headers=dict(headers or {}),
        ))

    async def create_document(
        self,
        container_id: str,
        document: Document,
        partition_key: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Document]:
        """
        Create a document and return the stored copy.

        Raises:
            ConflictError: If a document with the same id exists
        """
        return await self._send(CosmosRequest(
            method="POST",
            address=self.addresser.for_container(container_id),
            body=document,
            partition_key=partition_key,
            headers=self._representation_headers(headers),
        ))

    async def upsert_document(
        self,
        container_id: str,
        document: Document,
        partition_key: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Document]:
        """Create or replace a document by id and return the stored copy."""
        return await self._send(CosmosRequest(
            method="POST",
            address=self.addresser.for_container(container_id),
            body=document,
            partition_key=partition_key,
            headers=self._representation_headers(headers, **{HEADER_IS_UPSERT: FLAG_TRUE}),
        ))

    async def replace_document(
        self,
        container_id: str,
        document_id: str,
        document: Document,
        partition_key: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Document]:
        """
        Replace an existing document and return the stored copy.

        Raises:
            NotFoundError: If the document does not exist
        """
        return await self._send(CosmosRequest(
            method="PUT",
            address=self.addresser.for_document(container_id, document_id),
            body=document,
            partition_key=partition_key,
            headers=self._representation_headers(headers),
        ))

    async def delete_document(
        self,
        container_id: str,
        document_id: str,
        partition_key: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Delete a document.

        Raises:
            NotFoundError: If the document does not exist
        """
        await self._send(CosmosRequest(
            method="DELETE",
            address=self.addresser.for_document(container_id, document_id),
            partition_key=partition_key,
            headers=dict(headers or {}),
        ))
        logger.info(f"Deleted document '{document_id}' from '{container_id}'")

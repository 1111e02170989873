"""
Shared fixtures: an in-memory Cosmos DB endpoint served through
httpx.MockTransport.

The fake endpoint verifies every master-key signature against the resource id
derived from the request path, so a link/id mismatch fails with 401 exactly
like the real service.
"""

import base64
import hashlib
import json
import re
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote

import httpx
import pytest
import pytest_asyncio

from cosmosrest.auth.masterkey import build_string_to_sign, compute_signature
from cosmosrest.core.config_manager import CosmosConfig
from cosmosrest.cosmosdb.client import CosmosClient

MASTER_KEY = base64.b64encode(b"test-master-key-0123456789abcdef").decode()
ENDPOINT = "https://fake-account.documents.azure.com:443"
DATABASE_ID = "app"

_WHERE_EQUALS = re.compile(r"c\.(\w+)\s*=\s*(@\w+)")
_TOP = re.compile(r"SELECT\s+TOP\s+(\d+)", re.IGNORECASE)


def _json_response(status_code: int, payload: Any = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    if payload is None:
        return httpx.Response(status_code, headers=headers)
    return httpx.Response(status_code, json=payload, headers=headers)


def _error(status_code: int, code: str, message: str) -> httpx.Response:
    return _json_response(status_code, {"code": code, "message": message})


class FakeCosmosServer:
    """In-memory stand-in for one Cosmos DB database.

    Attributes:
        requests: Every request received, in order
        partition_keys: Container id -> partition key field name
    """

    def __init__(self, database_id: str = DATABASE_ID, master_key: str = MASTER_KEY):
        self.database_id = database_id
        self.master_key = master_key
        self.partition_keys: Dict[str, str] = {
            "notes": "userId",
            "users": "id",
            "lifePlans": "userId",
            "modelSettings": "id",
        }
        # {container_id: {(pk_json, doc_id): doc}}
        self._documents: Dict[str, Dict[Tuple[str, str], Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []

    # -- helpers ---------------------------------------------------------

    def documents(self, container_id: str) -> List[Dict[str, Any]]:
        return list(self._documents.get(container_id, {}).values())

    def _stamp(self, document: Dict[str, Any], container_id: str, rid: Optional[str] = None) -> Dict[str, Any]:
        rid = rid or hashlib.sha256(f"{container_id}:{document['id']}:{time.time()}".encode()).hexdigest()[:8]
        stored = dict(document)
        stored.update({
            "_rid": rid,
            "_self": f"dbs/{self.database_id}/colls/{container_id}/docs/{rid}/",
            "_etag": f'"{uuid.uuid4()}"',
            "_attachments": "attachments/",
            "_ts": int(time.time()),
        })
        return stored

    def _verify_signature(self, request: httpx.Request, resource_id: str) -> Optional[httpx.Response]:
        token = unquote(request.headers.get("authorization", ""))
        # Base64 signatures may contain "+", so no form decoding here
        fields = dict(part.split("=", 1) for part in token.split("&") if "=" in part)
        date = request.headers.get("x-ms-date", "")
        if fields.get("type") != "master" or fields.get("ver") != "1.0" or not date:
            return _error(401, "Unauthorized", "Required header 'authorization' is missing or malformed.")

        payload = build_string_to_sign(request.method, "docs", resource_id, date)
        expected = compute_signature(payload, self.master_key)
        if fields.get("sig") != expected:
            return _error(
                401,
                "Unauthorized",
                "The input authorization token can't serve the request. "
                f"The wrong key is being used or the expected payload is not built as per the protocol. "
                f"Server used the following payload to sign: '{payload}'",
            )
        return None

    def _partition_key(self, request: httpx.Request) -> Tuple[Optional[str], Any]:
        raw = request.headers.get("x-ms-documentdb-partitionkey")
        if raw is None:
            return None, None
        values = json.loads(raw)
        return raw, values[0]

    # -- dispatch --------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        path = request.url.path.strip("/")
        match = re.fullmatch(
            rf"dbs/{re.escape(self.database_id)}/colls/([^/]+)/docs(?:/([^/]+))?", path
        )
        if not match:
            return _error(404, "NotFound", f"Resource not found: {path}")
        container_id, document_id = match.group(1), match.group(2)

        if document_id is None:
            resource_id = f"dbs/{self.database_id}/colls/{container_id}".lower()
        else:
            resource_id = path.lower()
        if (failure := self._verify_signature(request, resource_id)) is not None:
            return failure

        if container_id not in self.partition_keys:
            return _error(404, "NotFound", f"Container '{container_id}' does not exist")
        container = self._documents.setdefault(container_id, {})

        if document_id is None:
            if request.headers.get("x-ms-documentdb-isquery") == "True":
                return self._query(request, container_id, container)
            return self._create_or_upsert(request, container_id, container)
        if request.method == "GET":
            return self._read(request, container, document_id)
        if request.method == "PUT":
            return self._replace(request, container_id, container, document_id)
        if request.method == "DELETE":
            return self._delete(request, container, document_id)
        return _error(405, "MethodNotAllowed", f"{request.method} not supported")

    def _body_response(self, request: httpx.Request, status_code: int, stored: Dict[str, Any]) -> httpx.Response:
        headers = {"x-ms-request-charge": "5.71", "x-ms-activity-id": str(uuid.uuid4())}
        if request.headers.get("Prefer") == "return=representation":
            return _json_response(status_code, stored, headers)
        return _json_response(status_code, None, headers)

    def _check_partition(self, request: httpx.Request, container_id: str, document: Dict[str, Any]) -> Optional[httpx.Response]:
        raw, value = self._partition_key(request)
        if raw is None:
            return _error(400, "BadRequest", "PartitionKey value must be supplied for this operation.")
        field = self.partition_keys[container_id]
        if document.get(field) != value:
            return _error(
                400,
                "BadRequest",
                "PartitionKey extracted from document doesn't match the one specified in the header.",
            )
        return None

    def _create_or_upsert(self, request, container_id, container) -> httpx.Response:
        if request.headers.get("content-type") != "application/json":
            return _error(415, "UnsupportedMediaType", "Unsupported content type")
        document = json.loads(request.content)
        if (failure := self._check_partition(request, container_id, document)) is not None:
            return failure

        raw, _ = self._partition_key(request)
        key = (raw, document["id"])
        upsert = request.headers.get("x-ms-documentdb-is-upsert") == "True"
        if key in container and not upsert:
            return _error(409, "Conflict", "Entity with the specified id already exists in the system.")

        status_code = 200 if key in container else 201
        rid = container[key]["_rid"] if key in container else None
        container[key] = self._stamp(document, container_id, rid)
        return self._body_response(request, status_code, container[key])

    def _read(self, request, container, document_id) -> httpx.Response:
        raw, _ = self._partition_key(request)
        stored = container.get((raw, document_id))
        if stored is None:
            return _error(404, "NotFound", "Entity with the specified id does not exist in the system.")
        return _json_response(200, stored)

    def _replace(self, request, container_id, container, document_id) -> httpx.Response:
        raw, _ = self._partition_key(request)
        key = (raw, document_id)
        if key not in container:
            return _error(404, "NotFound", "Entity with the specified id does not exist in the system.")
        if_match = request.headers.get("If-Match")
        if if_match and if_match != container[key]["_etag"]:
            return _error(412, "PreconditionFailed", "Operation cannot be performed because one of the specified precondition is not met.")
        document = json.loads(request.content)
        if (failure := self._check_partition(request, container_id, document)) is not None:
            return failure
        container[key] = self._stamp(document, container_id, container[key]["_rid"])
        return self._body_response(request, 200, container[key])

    def _delete(self, request, container, document_id) -> httpx.Response:
        raw, _ = self._partition_key(request)
        if container.pop((raw, document_id), None) is None:
            return _error(404, "NotFound", "Entity with the specified id does not exist in the system.")
        return httpx.Response(204)

    def _query(self, request, container_id, container) -> httpx.Response:
        if request.headers.get("content-type") != "application/query+json":
            return _error(400, "BadRequest", "The provided request content type is not supported.")
        spec = json.loads(request.content)
        params = {p["name"]: p["value"] for p in spec.get("parameters", [])}

        raw, _ = self._partition_key(request)
        cross = request.headers.get("x-ms-documentdb-query-enablecrosspartition") == "True"
        if raw is None and not cross:
            return _error(
                400,
                "BadRequest",
                "Cross partition query is required but disabled. Please set "
                "x-ms-documentdb-query-enablecrosspartition to true.",
            )

        rows = [
            doc for (pk, _), doc in container.items()
            if raw is None or pk == raw
        ]
        for field, param in _WHERE_EQUALS.findall(spec["query"]):
            rows = [doc for doc in rows if doc.get(field) == params.get(param)]
        if top := _TOP.search(spec["query"]):
            rows = rows[: int(top.group(1))]

        return _json_response(
            200,
            {"_rid": container_id, "Documents": rows, "_count": len(rows)},
            {"x-ms-request-charge": "2.9"},
        )


@pytest.fixture
def cosmos_config() -> CosmosConfig:
    """Configuration pointing at the fake account."""
    return CosmosConfig(endpoint=ENDPOINT, master_key=MASTER_KEY, database_id=DATABASE_ID)


@pytest.fixture
def cosmos_server() -> FakeCosmosServer:
    return FakeCosmosServer()


@pytest_asyncio.fixture
async def cosmos_client(cosmos_config, cosmos_server):
    """CosmosClient wired to the fake endpoint."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(cosmos_server.handle))
    client = CosmosClient(cosmos_config, http_client=http_client)
    yield client
    await http_client.aclose()

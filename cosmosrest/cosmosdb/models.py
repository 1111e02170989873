"""
Cosmos DB Models.

Pydantic models for query bodies and query results exchanged with the
Cosmos DB REST API. Documents themselves stay plain dictionaries.

Author: CosmosREST Team
Date: 2026-10-12
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator

Document = Dict[str, Any]


class QueryParameter(BaseModel):
    """Named parameter of a parameterized query.

    Attributes:
        name: Parameter name, including the leading '@'
        value: Any JSON value
    """

    name: str
    value: Any = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Parameter names must start with '@'.

        Raises:
            ValueError: If name does not start with '@'
        """
        if not v.startswith("@"):
            raise ValueError(f"Query parameter name must start with '@': {v}")
        return v


class QuerySpec(BaseModel):
    """Body of a query request.

    Attributes:
        query: SQL query string
        parameters: Query parameters
    """

    query: str
    parameters: List[QueryParameter] = Field(default_factory=list)

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Query cannot be empty")
        return v

    @classmethod
    def build(
        cls,
        query: str,
        parameters: Optional[Union[Sequence[Any], Dict[str, Any]]] = None,
    ) -> "QuerySpec":
        """Build a query spec from a parameter list or a name -> value mapping.

        Args:
            query: SQL query string
            parameters: ``[{"name": "@x", "value": 1}]``, QueryParameter
                instances, or ``{"@x": 1}``

        Returns:
            QuerySpec
        """
        if parameters is None:
            items: List[Any] = []
        elif isinstance(parameters, dict):
            items = [{"name": name, "value": value} for name, value in parameters.items()]
        else:
            items = list(parameters)
        return cls(query=query, parameters=items)

    def to_body(self) -> Dict[str, Any]:
        """Serialize to the ``{query, parameters}`` wire shape."""
        return self.model_dump(mode="json")


class QueryResult(BaseModel):
    """Query result page.

    Attributes:
        rows: Documents (or scalar values for SELECT VALUE) returned by the query
        row_count: Number of documents in this page
        continuation: Continuation token, if more pages exist
        request_charge: Request units consumed, if reported
    """

    rows: List[Any] = Field(default_factory=list)
    row_count: int = 0
    continuation: Optional[str] = None
    request_charge: Optional[float] = None

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        continuation: Optional[str] = None,
        request_charge: Optional[float] = None,
    ) -> "QueryResult":
        """Build a result from a parsed response body.

        A missing or non-list ``Documents`` field yields an empty result.
        """
        documents = payload.get("Documents") if isinstance(payload, dict) else None
        rows = documents if isinstance(documents, list) else []
        return cls(
            rows=rows,
            row_count=len(rows),
            continuation=continuation,
            request_charge=request_charge,
        )

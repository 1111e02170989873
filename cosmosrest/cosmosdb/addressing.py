"""
Cosmos DB Resource Addressing.

Builds resource links (the paths requests are sent to) and resource ids
(the lowercase links that are signed). Keeping both in one place guarantees
the signed id always matches the link it was derived from.

Author: CosmosREST Team
Date: 2026-10-12
"""

from dataclasses import dataclass

from .constants import RESOURCE_CONTAINERS, RESOURCE_DATABASES, RESOURCE_DOCUMENTS

_STRIP_CHARS = "/ \t\r\n\f\v"


def build_resource_link(*segments: str) -> str:
    """
    Join path segments into a resource link.

    Each segment is stripped of surrounding whitespace and slashes and empty
    segments are dropped, so the result never starts or ends with '/' and
    never contains '//'.

    Args:
        *segments: Alternating type/name segments, or whole sub-links

    Returns:
        Resource link, e.g. "dbs/app/colls/notes"
    """
    parts = []
    for segment in segments:
        # Inner slashes of a whole sub-link may still surround empty pieces
        for piece in str(segment).strip(_STRIP_CHARS).split("/"):
            piece = piece.strip(_STRIP_CHARS)
            if piece:
                parts.append(piece)
    return "/".join(parts)


def build_resource_id(*segments: str) -> str:
    """Build the lowercase resource id used as signature input."""
    return build_resource_link(*segments).lower()


@dataclass(frozen=True)
class ResourceAddress:
    """Where a request goes and what it is signed for.

    Attributes:
        link: Path appended to the endpoint
        resource_id: Lowercase link signed in the authorization token
        resource_type: Resource type signed in the authorization token
    """

    link: str
    resource_id: str
    resource_type: str = RESOURCE_DOCUMENTS


class ResourceAddresser:
    """Builds links and addresses for one database."""

    def __init__(self, database_id: str):
        self.database_id = database_id

    def database_link(self) -> str:
        return build_resource_link(RESOURCE_DATABASES, self.database_id)

    def container_link(self, container_id: str) -> str:
        return build_resource_link(self.database_link(), RESOURCE_CONTAINERS, container_id)

    def documents_link(self, container_id: str) -> str:
        return build_resource_link(self.container_link(container_id), RESOURCE_DOCUMENTS)

    def document_link(self, container_id: str, document_id: str) -> str:
        return build_resource_link(self.documents_link(container_id), document_id)

    def for_container(self, container_id: str) -> ResourceAddress:
        """
        Address collection-level document operations (query, create, upsert).

        The request targets ``.../colls/<container>/docs`` while the token is
        signed for the container link itself.
        """
        return ResourceAddress(
            link=self.documents_link(container_id),
            resource_id=build_resource_id(self.container_link(container_id)),
        )

    def for_document(self, container_id: str, document_id: str) -> ResourceAddress:
        """Address a single document (read, replace, delete)."""
        link = self.document_link(container_id, document_id)
        return ResourceAddress(link=link, resource_id=build_resource_id(link))

"""
Cosmos DB Response Normalization.

Turns raw HTTP responses into parsed JSON payloads or typed RemoteError
exceptions carrying the HTTP status and provider error code.

Author: CosmosREST Team
Date: 2026-10-12
"""

import json
import logging
from typing import Any, Optional, Tuple

import httpx

from .constants import (
    ERROR_MALFORMED_RESPONSE,
    ERROR_REQUEST_FAILED,
    MALFORMED_SNIPPET_LENGTH,
)
from .exceptions import MalformedResponseError, RemoteError, error_for_status

logger = logging.getLogger(__name__)

# Fields checked, in order, for a provider error message
_MESSAGE_FIELDS = ("message", "Message", "_message", "code")


def decode_body(text: str) -> Tuple[Any, bool]:
    """
    Parse a response body.

    Args:
        text: Raw response text

    Returns:
        Tuple of (parsed JSON or None, whether the text was valid JSON).
        An empty body counts as valid.
    """
    if not text:
        return None, True
    try:
        return json.loads(text), True
    except ValueError:
        return None, False


def extract_error_message(payload: Any) -> str:
    """Pick the provider message from an error body, or a generic fallback."""
    if isinstance(payload, dict):
        for field in _MESSAGE_FIELDS:
            value = payload.get(field)
            if value:
                return str(value)
    return ERROR_REQUEST_FAILED


def extract_error_code(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        code = payload.get("code") or payload.get("Code")
        if code:
            return str(code)
    return None


def build_remote_error(status_code: int, payload: Any, text: str) -> RemoteError:
    """Build the RemoteError subclass matching a failed response."""
    error_class = error_for_status(status_code)
    return error_class(
        extract_error_message(payload),
        status_code=status_code,
        code=extract_error_code(payload),
        body=payload if payload is not None else text,
    )


def parse_response(response: httpx.Response) -> Any:
    """
    Normalize a Cosmos DB response.

    Args:
        response: Raw HTTP response (body already read)

    Returns:
        Parsed JSON body, or None when the body is empty

    Raises:
        RemoteError: If the status is not 2xx (a subclass for 401/403, 404,
            409, 412 and 429)
        MalformedResponseError: If a 2xx body is not valid JSON
    """
    text = response.text
    payload, valid = decode_body(text)

    if not response.is_success:
        error = build_remote_error(response.status_code, payload, text)
        logger.warning(
            f"Cosmos DB request failed: {response.status_code} "
            f"code={error.code} message={error.message}"
        )
        raise error

    if not valid:
        snippet = text[:MALFORMED_SNIPPET_LENGTH]
        logger.error(f"Malformed Cosmos DB response ({response.status_code}): {snippet!r}")
        raise MalformedResponseError(
            ERROR_MALFORMED_RESPONSE,
            status_code=response.status_code,
            snippet=snippet,
        )

    return payload

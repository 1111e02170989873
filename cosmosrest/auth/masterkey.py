"""
Master-key authorization tokens for the Cosmos DB REST API.

Every request carries an ``authorization`` header built from an HMAC-SHA256
signature over a small canonical string:

    lower(verb)\\n
    lower(resource type)\\n
    resource id\\n
    lower(date)\\n
    \\n

The resource id is used as given. Callers pass the lowercase form of the
resource link (see ``cosmosrest.cosmosdb.addressing``); a mismatch is not
detectable here and only shows up as a 401 from the service.

Reference: https://learn.microsoft.com/en-us/rest/api/cosmos-db/access-control-on-cosmosdb-resources

Author: CosmosREST Team
Date: 2026-10-12
"""

import base64
import binascii
import hashlib
import hmac
import logging
from urllib.parse import quote

from cosmosrest.auth.exceptions import InvalidMasterKeyError

logger = logging.getLogger(__name__)

AUTH_TYPE_MASTER = "master"
AUTH_TOKEN_VERSION = "1.0"

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_string_to_sign(verb: str, resource_type: str, resource_id: str, date: str) -> str:
    """
    Build the canonical payload for a master-key signature.

    Args:
        verb: HTTP method (any case)
        resource_type: Resource type, e.g. "docs"
        resource_id: Lowercase resource id, used verbatim
        date: RFC 1123 date sent in x-ms-date

    Returns:
        Canonical string to sign
    """
    return (
        f"{verb.lower()}\n"
        f"{resource_type.lower()}\n"
        f"{resource_id}\n"
        f"{date.lower()}\n"
        "\n"
    )


def decode_master_key(master_key: str) -> bytes:
    """
    Decode a Base64 master key into raw key bytes.

    Raises:
        InvalidMasterKeyError: If the key is empty or not valid Base64
    """
    if not master_key:
        raise InvalidMasterKeyError("Master key is empty")
    try:
        return base64.b64decode(master_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidMasterKeyError(f"Master key is not valid Base64: {e}") from e


def compute_signature(string_to_sign: str, master_key: str) -> str:
    """
    Compute HMAC-SHA256 signature.

    Signature = Base64(HMAC-SHA256(UTF8(StringToSign), Base64Decode(MasterKey)))

    Args:
        string_to_sign: Canonical payload
        master_key: Base64-encoded master key

    Returns:
        Base64-encoded signature
    """
    key_bytes = decode_master_key(master_key)

    signature_bytes = hmac.new(
        key_bytes,
        string_to_sign.encode("utf-8"),
        hashlib.sha256
    ).digest()

    return base64.b64encode(signature_bytes).decode("utf-8")


def build_authorization_token(
    verb: str,
    resource_type: str,
    resource_id: str,
    date: str,
    master_key: str
) -> str:
    """
    Build the percent-encoded value of the ``authorization`` header.

    Args:
        verb: HTTP method
        resource_type: Resource type, e.g. "docs"
        resource_id: Lowercase resource id
        date: RFC 1123 date sent in x-ms-date
        master_key: Base64-encoded master key

    Returns:
        URL-encoded "type=master&ver=1.0&sig=<signature>"
    """
    string_to_sign = build_string_to_sign(verb, resource_type, resource_id, date)
    signature = compute_signature(string_to_sign, master_key)

    logger.debug(
        f"Signed {verb.upper()} {resource_type} for resource id '{resource_id}'"
    )

    token = f"type={AUTH_TYPE_MASTER}&ver={AUTH_TOKEN_VERSION}&sig={signature}"
    return quote(token, safe=_URI_COMPONENT_SAFE)

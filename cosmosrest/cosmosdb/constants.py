"""
Cosmos DB REST Constants

Header names, content types and protocol values used on the wire.

Author: CosmosREST Team
Date: 2026-10-12
"""

# Resource types
RESOURCE_DATABASES = "dbs"
RESOURCE_CONTAINERS = "colls"
RESOURCE_DOCUMENTS = "docs"

# Request headers
HEADER_DATE = "x-ms-date"
HEADER_VERSION = "x-ms-version"
HEADER_AUTHORIZATION = "authorization"
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_PARTITION_KEY = "x-ms-documentdb-partitionkey"
HEADER_IS_QUERY = "x-ms-documentdb-isquery"
HEADER_IS_UPSERT = "x-ms-documentdb-is-upsert"
HEADER_ENABLE_CROSS_PARTITION = "x-ms-documentdb-query-enablecrosspartition"
HEADER_PREFER = "Prefer"

# Response headers
HEADER_CONTINUATION = "x-ms-continuation"
HEADER_ACTIVITY_ID = "x-ms-activity-id"
HEADER_REQUEST_CHARGE = "x-ms-request-charge"

# Header values
FLAG_TRUE = "True"
PREFER_RETURN_REPRESENTATION = "return=representation"

# Content types
MEDIA_TYPE_JSON = "application/json"
MEDIA_TYPE_QUERY_JSON = "application/query+json"

# Error messages
ERROR_REQUEST_FAILED = "Cosmos DB request failed."
ERROR_MALFORMED_RESPONSE = "Cosmos DB returned a response body that is not valid JSON."

# Snippet length kept on MalformedResponseError
MALFORMED_SNIPPET_LENGTH = 200

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP method enumeration."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class QuerySerializationMethod(str, Enum):
    """How a query parameter value becomes its string form."""

    TO_STRING = "to_string"
    SERIALIZED = "serialized"


class PathSerializationMethod(str, Enum):
    """How a path parameter value becomes its string form."""

    TO_STRING = "to_string"
    SERIALIZED = "serialized"


class BodySerializationMethod(str, Enum):
    """Type of serialization that should be applied to the body.

    SERIALIZED uses the configured request body serializer (JSON by default).
    URL_ENCODED uses form URL encoding, the body must be a mapping.
    """

    SERIALIZED = "serialized"
    URL_ENCODED = "url_encoded"

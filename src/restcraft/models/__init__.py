from .enums import (
    BodySerializationMethod,
    HttpMethod,
    PathSerializationMethod,
    QuerySerializationMethod,
)
from .exceptions import (
    ApiException,
    InterfaceDefinitionError,
    InvalidBodyTypeError,
    MissingPathParameterError,
    RequestCancelledError,
    RestcraftError,
)
from .response import Response

__all__ = [
    "ApiException",
    "BodySerializationMethod",
    "HttpMethod",
    "InterfaceDefinitionError",
    "InvalidBodyTypeError",
    "MissingPathParameterError",
    "PathSerializationMethod",
    "QuerySerializationMethod",
    "RequestCancelledError",
    "Response",
    "RestcraftError",
]

from ._attributes import (
    Body,
    Header,
    HeaderMap,
    Path,
    Query,
    QueryMap,
    allow_any_status_code,
    delete,
    get,
    head,
    header,
    options,
    patch,
    post,
    put,
    request,
)
from ._builder import build_implementation
from ._rest_client import RestClient

__all__ = [
    "Body",
    "Header",
    "HeaderMap",
    "Path",
    "Query",
    "QueryMap",
    "RestClient",
    "allow_any_status_code",
    "build_implementation",
    "delete",
    "get",
    "head",
    "header",
    "options",
    "patch",
    "post",
    "put",
    "request",
]

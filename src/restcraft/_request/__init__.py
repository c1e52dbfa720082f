from ._cancellation import CancellationToken
from ._parameters import (
    BodyParameter,
    HeaderParameter,
    PathParameter,
    QueryMapParameter,
    QueryParameter,
    format_value,
)
from ._request_info import RequestInfo
from ._uri import build_uri, placeholders

__all__ = [
    "BodyParameter",
    "CancellationToken",
    "HeaderParameter",
    "PathParameter",
    "QueryMapParameter",
    "QueryParameter",
    "RequestInfo",
    "build_uri",
    "format_value",
    "placeholders",
]

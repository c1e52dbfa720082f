import re
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence
from urllib.parse import quote

from httpx import URL

from ..models.enums import PathSerializationMethod
from ..models.exceptions import MissingPathParameterError
from ._parameters import (
    KeyValuePair,
    PathParameter,
    QueryMapParameter,
    QueryParameter,
    format_value,
)

if TYPE_CHECKING:
    from ..serializers import SerializerSet
    from ._request_info import RequestInfo

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")


def placeholders(path: str) -> List[str]:
    """Returns the placeholder names of a path template, in order."""
    return PLACEHOLDER_PATTERN.findall(path)


def escape(value: str) -> str:
    return quote(value, safe="")


def build_uri(
    path: str,
    path_params: Sequence[PathParameter] = (),
    query_params: Iterable[QueryParameter] = (),
    query_map: Optional[QueryMapParameter] = None,
    *,
    serializers: Optional["SerializerSet"] = None,
    request_info: Optional["RequestInfo"] = None,
) -> URL:
    """Resolves a path template and its parameters into a URI.

    Relative templates stay relative: resolving them against the base address
    is left to the HTTP client. A query string written in the template is kept
    ahead of the flattened parameters.

    Args:
        path: Path template with ``{name}`` placeholders.
        path_params: Bindings for the placeholders; the first binding of a
            name wins.
        query_params: Query parameters, flattened in declaration order.
        query_map: Bulk query parameters, flattened after ``query_params``.
        serializers: Serializers used by parameters declared as SERIALIZED.
        request_info: The request being resolved, passed on to serializers.

    Returns:
        URL: The resolved URI.

    Raises:
        MissingPathParameterError: If a placeholder has no binding or is bound
            to None.

    Examples:
        >>> query_map = QueryMapParameter({"foo": ["bar", "baz"]})
        >>> str(build_uri("/foo", query_map=query_map))
        '/foo?foo=bar&foo=baz'
    """
    resolved_path = _substitute_path(path, path_params, serializers, request_info)

    query_serializer = serializers.query if serializers is not None else None
    pairs: List[KeyValuePair] = []
    for query_param in query_params:
        pairs.extend(query_param.serialize(query_serializer, request_info))
    if query_map is not None:
        pairs.extend(query_map.serialize(query_serializer, request_info))

    # a literal query in the template comes first, a fragment stays last
    uri, hash_sign, fragment = (resolved_path or "/").partition("#")
    if pairs:
        if "?" not in uri:
            uri += "?"
        elif not uri.endswith(("?", "&")):
            uri += "&"
        uri += "&".join(f"{escape(key)}={escape(value)}" for key, value in pairs)
    return URL(uri + hash_sign + fragment)


def _substitute_path(
    path: str,
    path_params: Sequence[PathParameter],
    serializers: Optional["SerializerSet"],
    request_info: Optional["RequestInfo"],
) -> str:
    bindings = {}
    for path_param in path_params:
        bindings.setdefault(path_param.name, path_param)

    def replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        path_param = bindings.get(name)
        if path_param is None:
            raise MissingPathParameterError(name, path)
        if path_param.value is None:
            raise MissingPathParameterError(
                name,
                path,
                f"Path parameter '{name}' is None; path segments cannot be omitted",
            )

        if path_param.method == PathSerializationMethod.SERIALIZED:
            if serializers is None:
                raise ValueError(
                    f"Path parameter '{name}' requires a path serializer but none is configured"
                )
            value = serializers.path.serialize_path_param(path_param.value, request_info)
        else:
            value = format_value(path_param.value)

        return escape(value) if path_param.url_encode else value

    return PLACEHOLDER_PATTERN.sub(replace, path)

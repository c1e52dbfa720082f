"""Decorators and parameter markers used to declare a client interface.

Methods are decorated with the HTTP verb and path template, parameters are
marked with ``typing.Annotated``:

```python
@header("User-Agent", "my-app")
class GitHubApi:
    @get("users/{user}/repos")
    async def list_repos(
        self,
        user: Annotated[str, Path()],
        sort: Annotated[Optional[str], Query()] = None,
        token: Annotated[Optional[str], Header("Authorization")] = None,
    ) -> list[Repository]: ...
```
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, TypeVar, Union

from ..models.enums import (
    BodySerializationMethod,
    HttpMethod,
    PathSerializationMethod,
    QuerySerializationMethod,
)

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C")

REQUEST_ATTRIBUTE = "__restcraft_request__"
HEADERS_ATTRIBUTE = "__restcraft_headers__"
ALLOW_ANY_STATUS_CODE_ATTRIBUTE = "__restcraft_allow_any_status_code__"


@dataclass(frozen=True)
class RequestAttribute:
    method: HttpMethod
    path: str


def request(method: Union[HttpMethod, str], path: str = "") -> Callable[[F], F]:
    """Declares the HTTP method and path template of an interface method."""
    http_method = HttpMethod(method.upper() if isinstance(method, str) else method)

    def decorator(func: F) -> F:
        setattr(func, REQUEST_ATTRIBUTE, RequestAttribute(http_method, path))
        return func

    return decorator


def _make_http_method_decorator(method: HttpMethod) -> Callable[..., Callable[[F], F]]:
    def method_decorator(path: str = "") -> Callable[[F], F]:
        return request(method, path)

    method_decorator.__name__ = method.value.lower()
    method_decorator.__doc__ = f"Declares a {method.value} request to ``path``."
    return method_decorator


get = _make_http_method_decorator(HttpMethod.GET)
post = _make_http_method_decorator(HttpMethod.POST)
put = _make_http_method_decorator(HttpMethod.PUT)
delete = _make_http_method_decorator(HttpMethod.DELETE)
patch = _make_http_method_decorator(HttpMethod.PATCH)
head = _make_http_method_decorator(HttpMethod.HEAD)
options = _make_http_method_decorator(HttpMethod.OPTIONS)


def header(name: str, value: Optional[str] = None) -> Callable[[C], C]:
    """Adds a static header to an interface class or to a single method.

    Stacked decorators keep their top-down order. On a method, a None value
    removes the header of the same name declared on the class.
    """
    if ":" in name:
        raise ValueError(f"Header name '{name}' must not contain a colon")

    def decorator(target: C) -> C:
        if isinstance(target, type):
            existing = target.__dict__.get(HEADERS_ATTRIBUTE, [])
        else:
            existing = getattr(target, HEADERS_ATTRIBUTE, [])
        headers: List[Tuple[str, Optional[str]]] = [(name, value), *existing]
        setattr(target, HEADERS_ATTRIBUTE, headers)
        return target

    return decorator


def allow_any_status_code(target: C) -> C:
    """Stops non-success responses from raising ApiException.

    Applies to a single method, or to every method of an interface class.
    """
    setattr(target, ALLOW_ANY_STATUS_CODE_ATTRIBUTE, True)
    return target


class ParameterMarker:
    """Base class of the markers placed in ``Annotated`` parameter metadata."""


@dataclass(frozen=True)
class Path(ParameterMarker):
    """Binds a parameter to the ``{name}`` placeholder of the path template.

    Args:
        name: Placeholder name, defaults to the parameter name.
        method: How the value becomes its string form.
        url_encode: Whether the value is percent-escaped.
    """

    name: Optional[str] = None
    method: PathSerializationMethod = PathSerializationMethod.TO_STRING
    url_encode: bool = True


@dataclass(frozen=True)
class Query(ParameterMarker):
    """Sends a parameter in the query string.

    Args:
        name: Query key, defaults to the parameter name.
        method: How the value becomes its string form.
    """

    name: Optional[str] = None
    method: QuerySerializationMethod = QuerySerializationMethod.TO_STRING


@dataclass(frozen=True)
class QueryMap(ParameterMarker):
    """Sends every entry of a mapping (or of ``(key, value)`` pairs) as query parameters."""

    method: QuerySerializationMethod = QuerySerializationMethod.TO_STRING


@dataclass(frozen=True)
class Header(ParameterMarker):
    name: str

    def __post_init__(self) -> None:
        if ":" in self.name:
            raise ValueError(f"Header name '{self.name}' must not contain a colon")


@dataclass(frozen=True)
class HeaderMap(ParameterMarker):
    """Sends every entry of a mapping as a header, overriding other headers."""


@dataclass(frozen=True)
class Body(ParameterMarker):
    method: BodySerializationMethod = BodySerializationMethod.SERIALIZED

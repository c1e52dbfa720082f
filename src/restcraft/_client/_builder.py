import functools
import inspect
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from types import UnionType
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Type,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .._request import CancellationToken, RequestInfo, placeholders
from ..models.exceptions import InterfaceDefinitionError
from ._attributes import (
    ALLOW_ANY_STATUS_CODE_ATTRIBUTE,
    HEADERS_ATTRIBUTE,
    REQUEST_ATTRIBUTE,
    Body,
    Header,
    HeaderMap,
    ParameterMarker,
    Path,
    Query,
    QueryMap,
    RequestAttribute,
)


class ParameterRole(str, Enum):
    PATH = "path"
    QUERY = "query"
    QUERY_MAP = "query_map"
    HEADER = "header"
    HEADER_MAP = "header_map"
    BODY = "body"
    CANCELLATION = "cancellation"


@dataclass(frozen=True)
class ParameterBinding:
    name: str
    role: ParameterRole
    marker: Optional[ParameterMarker] = None


@dataclass
class MethodDescriptor:
    """What the interface declares about one method."""

    name: str
    request: RequestAttribute
    signature: inspect.Signature
    bindings: List[ParameterBinding]
    return_type: Any = None
    headers: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    allow_any_status_code: bool = False

    def build_request_info(
        self,
        arguments: Dict[str, Any],
        class_headers: List[Tuple[str, Optional[str]]],
    ) -> RequestInfo:
        """Populates a RequestInfo from bound call arguments, in declaration order."""
        request_info = RequestInfo(
            self.request.method,
            self.request.path,
            return_type=self.return_type,
            allow_any_status_code=self.allow_any_status_code,
        )
        for key, value in class_headers:
            request_info.add_class_header(key, value)
        for key, value in self.headers:
            request_info.add_method_header(key, value)

        for binding in self.bindings:
            value = arguments[binding.name]
            marker = binding.marker

            if binding.role == ParameterRole.PATH:
                assert isinstance(marker, Path)
                request_info.add_path_parameter(
                    marker.name or binding.name,
                    value,
                    marker.method,
                    url_encode=marker.url_encode,
                )
            elif binding.role == ParameterRole.QUERY:
                query = marker if isinstance(marker, Query) else Query()
                request_info.add_query_parameter(
                    query.name, value, query.method, parameter_name=binding.name
                )
            elif binding.role == ParameterRole.QUERY_MAP:
                assert isinstance(marker, QueryMap)
                request_info.set_query_map(value, marker.method)
            elif binding.role == ParameterRole.HEADER:
                assert isinstance(marker, Header)
                request_info.add_header(marker.name, value)
            elif binding.role == ParameterRole.HEADER_MAP:
                request_info.set_header_map(value)
            elif binding.role == ParameterRole.BODY:
                assert isinstance(marker, Body)
                request_info.set_body(value, marker.method)
            elif binding.role == ParameterRole.CANCELLATION:
                request_info.set_cancellation_token(value)

        return request_info


_MARKER_ROLES = {
    Path: ParameterRole.PATH,
    Query: ParameterRole.QUERY,
    QueryMap: ParameterRole.QUERY_MAP,
    Header: ParameterRole.HEADER,
    HeaderMap: ParameterRole.HEADER_MAP,
    Body: ParameterRole.BODY,
}

_SINGLE_ROLES = (
    ParameterRole.QUERY_MAP,
    ParameterRole.HEADER_MAP,
    ParameterRole.BODY,
    ParameterRole.CANCELLATION,
)


def _is_union(annotation: Any) -> bool:
    return get_origin(annotation) in (Union, UnionType)


def _is_cancellation_token(annotation: Any) -> bool:
    if annotation is CancellationToken:
        return True
    if _is_union(annotation):
        return any(arg is CancellationToken for arg in get_args(annotation))
    return False


def _split_annotated(annotation: Any) -> Tuple[Any, Tuple[Any, ...]]:
    """Returns the base type and metadata of an Annotated hint, even inside Optional."""
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0], annotation.__metadata__
    if _is_union(annotation):
        for arg in get_args(annotation):
            if get_origin(arg) is Annotated:
                return get_args(arg)[0], arg.__metadata__
    return annotation, ()


def _bind_parameter(
    qualname: str, parameter: inspect.Parameter, annotation: Any
) -> ParameterBinding:
    if parameter.kind in (
        inspect.Parameter.VAR_POSITIONAL,
        inspect.Parameter.VAR_KEYWORD,
    ):
        raise InterfaceDefinitionError(
            f"{qualname}: variadic parameter '{parameter.name}' is not supported"
        )

    base, metadata = _split_annotated(annotation)
    markers = [m for m in metadata if isinstance(m, ParameterMarker)]

    if len(markers) > 1:
        raise InterfaceDefinitionError(
            f"{qualname}: parameter '{parameter.name}' has more than one role marker"
        )
    if markers:
        marker = markers[0]
        return ParameterBinding(parameter.name, _MARKER_ROLES[type(marker)], marker)
    if _is_cancellation_token(base):
        return ParameterBinding(parameter.name, ParameterRole.CANCELLATION)
    # unmarked parameters are query parameters named after the parameter
    return ParameterBinding(parameter.name, ParameterRole.QUERY)


def describe_method(
    func: Callable[..., Any], request_attribute: RequestAttribute
) -> MethodDescriptor:
    """Inspects one decorated method.

    Raises:
        InterfaceDefinitionError: If the method is not a coroutine function,
            or its parameters cannot be mapped onto a request.
    """
    qualname = func.__qualname__
    if not inspect.iscoroutinefunction(func):
        raise InterfaceDefinitionError(f"{qualname} must be declared with 'async def'")

    try:
        hints = get_type_hints(func, include_extras=True)
    except NameError as e:
        raise InterfaceDefinitionError(
            f"{qualname}: unable to resolve type hints: {e}"
        ) from e

    signature = inspect.signature(func)
    parameters = list(signature.parameters.values())[1:]  # self
    bindings = [
        _bind_parameter(qualname, parameter, hints.get(parameter.name, Any))
        for parameter in parameters
    ]

    for role in _SINGLE_ROLES:
        if sum(1 for binding in bindings if binding.role == role) > 1:
            raise InterfaceDefinitionError(
                f"{qualname}: more than one {role.value} parameter"
            )

    template_names = set(placeholders(request_attribute.path))
    path_names: List[str] = []
    for binding in bindings:
        if binding.role != ParameterRole.PATH:
            continue
        assert isinstance(binding.marker, Path)
        path_name = binding.marker.name or binding.name
        if path_name in path_names:
            raise InterfaceDefinitionError(
                f"{qualname}: more than one path parameter named '{path_name}'"
            )
        if path_name not in template_names:
            raise InterfaceDefinitionError(
                f"{qualname}: path parameter '{path_name}' has no placeholder in "
                f"'{request_attribute.path}'"
            )
        path_names.append(path_name)

    return MethodDescriptor(
        name=func.__name__,
        request=request_attribute,
        signature=signature,
        bindings=bindings,
        return_type=hints.get("return"),
        headers=list(getattr(func, HEADERS_ATTRIBUTE, [])),
        allow_any_status_code=getattr(func, ALLOW_ANY_STATUS_CODE_ATTRIBUTE, False),
    )


def _class_headers(interface: type) -> List[Tuple[str, Optional[str]]]:
    headers: List[Tuple[str, Optional[str]]] = []
    for klass in reversed(interface.__mro__):
        headers.extend(klass.__dict__.get(HEADERS_ATTRIBUTE, []))
    return headers


def _make_method(descriptor: MethodDescriptor, func: Callable[..., Any]):
    @functools.wraps(func)
    async def method(self, *args: Any, **kwargs: Any) -> Any:
        bound = descriptor.signature.bind(self, *args, **kwargs)
        bound.apply_defaults()
        request_info = descriptor.build_request_info(
            bound.arguments, self._class_headers
        )
        return await self._requester.resolve_and_dispatch(request_info)

    return method


@lru_cache(maxsize=None)
def build_implementation(interface: Type[Any]) -> Type[Any]:
    """Creates a subclass of ``interface`` implementing its request methods.

    The result is cached per interface. Instances are created with a
    Requester: ``implementation(requester)``.

    Raises:
        InterfaceDefinitionError: If the interface declares no request method
            or one of them is malformed.
    """
    if not isinstance(interface, type):
        raise InterfaceDefinitionError(f"{interface!r} is not a class")

    namespace: Dict[str, Any] = {}
    for name, func in inspect.getmembers(interface, inspect.isfunction):
        request_attribute = getattr(func, REQUEST_ATTRIBUTE, None)
        if request_attribute is None:
            continue
        descriptor = describe_method(func, request_attribute)
        if getattr(interface, ALLOW_ANY_STATUS_CODE_ATTRIBUTE, False):
            descriptor.allow_any_status_code = True
        namespace[name] = _make_method(descriptor, func)

    if not namespace:
        raise InterfaceDefinitionError(
            f"{interface.__qualname__} declares no request methods"
        )

    class_headers = _class_headers(interface)

    def __init__(self, requester) -> None:
        self._requester = requester
        self._class_headers = class_headers

    namespace["__init__"] = __init__
    namespace["__module__"] = interface.__module__
    namespace["__qualname__"] = f"{interface.__qualname__}Implementation"

    return type(f"{interface.__name__}Implementation", (interface,), namespace)

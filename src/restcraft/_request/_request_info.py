from typing import Any, List, Mapping, Optional, Union

from ..models.enums import (
    BodySerializationMethod,
    HttpMethod,
    PathSerializationMethod,
    QuerySerializationMethod,
)
from ._cancellation import CancellationToken
from ._parameters import (
    BodyParameter,
    HeaderParameter,
    PathParameter,
    QueryMapParameter,
    QueryMapSource,
    QueryParameter,
)


class RequestInfo:
    """Everything needed to build one outgoing request.

    A RequestInfo is created for every call, populated in parameter
    declaration order, then handed once to ``Requester.resolve_and_dispatch``.
    The method and path template are fixed at creation; every other field is
    filled through the ``add_*`` / ``set_*`` methods.

    Examples:
        ```python
        request_info = RequestInfo(HttpMethod.GET, "users/{user_id}/repos")
        request_info.add_path_parameter("user_id", 42)
        request_info.add_query_parameter("sort", "updated")
        request_info.add_header("Accept", "application/vnd.github+json")
        ```
    """

    def __init__(
        self,
        method: Union[HttpMethod, str],
        path: Optional[str],
        *,
        return_type: Any = None,
        allow_any_status_code: bool = False,
    ) -> None:
        self._method = HttpMethod(
            method.upper() if isinstance(method, str) else method
        )
        self._path = path or ""
        self.return_type = return_type
        self.allow_any_status_code = allow_any_status_code

        self.path_params: List[PathParameter] = []
        self.query_params: List[QueryParameter] = []
        self.query_map: Optional[QueryMapParameter] = None
        self.class_headers: List[HeaderParameter] = []
        self.method_headers: List[HeaderParameter] = []
        self.header_params: List[HeaderParameter] = []
        self.header_map: Optional[Mapping[str, Any]] = None
        self.body: Optional[BodyParameter] = None
        self.cancellation_token = CancellationToken.none()

    @property
    def method(self) -> HttpMethod:
        return self._method

    @property
    def path(self) -> str:
        return self._path

    def add_path_parameter(
        self,
        name: str,
        value: Any,
        method: PathSerializationMethod = PathSerializationMethod.TO_STRING,
        *,
        url_encode: bool = True,
    ) -> None:
        self.path_params.append(PathParameter(name, value, method, url_encode))

    def add_query_parameter(
        self,
        key: Optional[str],
        value: Any,
        method: QuerySerializationMethod = QuerySerializationMethod.TO_STRING,
        *,
        parameter_name: Optional[str] = None,
    ) -> None:
        """Appends a query parameter.

        Args:
            key: Name used in the query string. When None, ``parameter_name``
                is used once the parameter is flattened.
            value: Raw value; None values contribute nothing to the URI.
            method: How the value becomes its string form.
            parameter_name: Declared name of the method parameter.
        """
        self.query_params.append(QueryParameter(key, value, method, parameter_name))

    def set_query_map(
        self,
        query_map: Optional[QueryMapSource],
        method: QuerySerializationMethod = QuerySerializationMethod.TO_STRING,
    ) -> None:
        self.query_map = (
            QueryMapParameter(query_map, method) if query_map is not None else None
        )

    def add_header(self, key: str, value: Any) -> None:
        self.header_params.append(HeaderParameter(key, value))

    def set_header_map(self, header_map: Optional[Mapping[str, Any]]) -> None:
        self.header_map = header_map

    def add_class_header(self, key: str, value: Any) -> None:
        self.class_headers.append(HeaderParameter(key, value))

    def add_method_header(self, key: str, value: Any) -> None:
        self.method_headers.append(HeaderParameter(key, value))

    def set_body(
        self,
        value: Any,
        method: BodySerializationMethod = BodySerializationMethod.SERIALIZED,
    ) -> None:
        self.body = BodyParameter(value, method)

    def set_cancellation_token(self, token: Optional[CancellationToken]) -> None:
        self.cancellation_token = token or CancellationToken.none()

    def __repr__(self) -> str:
        return f"RequestInfo({self._method.value} {self._path!r})"

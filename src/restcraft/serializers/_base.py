from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Optional, Tuple

from httpx import Response

if TYPE_CHECKING:
    from .._request import RequestInfo


@dataclass(frozen=True)
class SerializedBody:
    """Body content produced by a RequestBodySerializer."""

    content: Optional[bytes]
    content_type: Optional[str] = None


class RequestBodySerializer(ABC):
    """Turns a request body into bytes.

    Implementations must be deterministic and safe for concurrent use.
    A None body may be serialized to no content or to a literal, depending on
    the format.
    """

    @abstractmethod
    def serialize_body(
        self, body: Any, request_info: Optional["RequestInfo"]
    ) -> SerializedBody: ...


class RequestQueryParamSerializer(ABC):
    """Turns a query parameter value into zero or more key/value pairs.

    Never called with a None value.
    """

    @abstractmethod
    def serialize_query_param(
        self, name: str, value: Any, request_info: Optional["RequestInfo"]
    ) -> Iterable[Tuple[str, str]]: ...


class RequestPathParamSerializer(ABC):
    """Turns a path parameter value into a string. Never called with None."""

    @abstractmethod
    def serialize_path_param(
        self, value: Any, request_info: Optional["RequestInfo"]
    ) -> str: ...


class ResponseDeserializer(ABC):
    """Turns response content into an instance of the declared response type."""

    @abstractmethod
    def deserialize(
        self,
        content: str,
        response: Response,
        response_type: Any,
        request_info: Optional["RequestInfo"],
    ) -> Any: ...

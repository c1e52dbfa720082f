from functools import lru_cache
from typing import TYPE_CHECKING, Any, Iterable, Optional, Tuple

from httpx import Response
from pydantic import TypeAdapter

from ._base import (
    RequestBodySerializer,
    RequestPathParamSerializer,
    RequestQueryParamSerializer,
    ResponseDeserializer,
    SerializedBody,
)

if TYPE_CHECKING:
    from .._request import RequestInfo

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# Any serializes by runtime type: models, dataclasses, dicts, datetimes...
_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


@lru_cache(maxsize=256)
def _adapter_for(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def to_json(value: Any) -> str:
    return _ANY_ADAPTER.dump_json(value, by_alias=True).decode("utf-8")


class JsonRequestBodySerializer(RequestBodySerializer):
    def serialize_body(
        self, body: Any, request_info: Optional["RequestInfo"]
    ) -> SerializedBody:
        if body is None:
            return SerializedBody(content=None)
        return SerializedBody(
            content=_ANY_ADAPTER.dump_json(body, by_alias=True),
            content_type=JSON_CONTENT_TYPE,
        )


class JsonRequestQueryParamSerializer(RequestQueryParamSerializer):
    def serialize_query_param(
        self, name: str, value: Any, request_info: Optional["RequestInfo"]
    ) -> Iterable[Tuple[str, str]]:
        return [(name, to_json(value))]


class JsonRequestPathParamSerializer(RequestPathParamSerializer):
    def serialize_path_param(
        self, value: Any, request_info: Optional["RequestInfo"]
    ) -> str:
        return to_json(value)


class JsonResponseDeserializer(ResponseDeserializer):
    """Validates JSON content against the declared response type with pydantic."""

    def deserialize(
        self,
        content: str,
        response: Response,
        response_type: Any,
        request_info: Optional["RequestInfo"],
    ) -> Any:
        try:
            adapter = _adapter_for(response_type)
        except TypeError:
            # unhashable type annotations cannot be cached
            adapter = TypeAdapter(response_type)
        return adapter.validate_json(content)

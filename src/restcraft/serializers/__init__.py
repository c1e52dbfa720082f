from dataclasses import dataclass, field

from ._base import (
    RequestBodySerializer,
    RequestPathParamSerializer,
    RequestQueryParamSerializer,
    ResponseDeserializer,
    SerializedBody,
)
from ._form import FORM_CONTENT_TYPE, form_fields, form_url_encode
from ._json import (
    JSON_CONTENT_TYPE,
    JsonRequestBodySerializer,
    JsonRequestPathParamSerializer,
    JsonRequestQueryParamSerializer,
    JsonResponseDeserializer,
)


@dataclass
class SerializerSet:
    """The serializers a Requester delegates to. Defaults to JSON everywhere."""

    body: RequestBodySerializer = field(default_factory=JsonRequestBodySerializer)
    query: RequestQueryParamSerializer = field(
        default_factory=JsonRequestQueryParamSerializer
    )
    path: RequestPathParamSerializer = field(
        default_factory=JsonRequestPathParamSerializer
    )
    response: ResponseDeserializer = field(default_factory=JsonResponseDeserializer)

    @classmethod
    def default(cls) -> "SerializerSet":
        return cls()


__all__ = [
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "JsonRequestBodySerializer",
    "JsonRequestPathParamSerializer",
    "JsonRequestQueryParamSerializer",
    "JsonResponseDeserializer",
    "RequestBodySerializer",
    "RequestPathParamSerializer",
    "RequestQueryParamSerializer",
    "ResponseDeserializer",
    "SerializedBody",
    "SerializerSet",
    "form_fields",
    "form_url_encode",
]

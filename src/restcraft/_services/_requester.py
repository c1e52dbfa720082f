from logging import getLogger
from typing import Any, Iterable, Optional, Tuple, get_args, get_origin

from httpx import URL, Headers
from httpx import Response as HttpxResponse

from .._request import HeaderParameter, RequestInfo, build_uri
from .._utils.constants import HEADER_CONTENT_TYPE
from ..models.enums import BodySerializationMethod
from ..models.exceptions import ApiException
from ..models.response import Response
from ..serializers import FORM_CONTENT_TYPE, SerializerSet, form_url_encode
from ._transport import Transport


class Requester:
    """Resolves populated RequestInfo instances and dispatches them.

    Every call goes through the same steps: the URI is built, the body is
    serialized, headers are merged, then the request is sent once through the
    transport and the response is mapped to the declared return shape. Nothing
    is retried here; retry policies belong to the transport.

    Args:
        transport: Sends the resolved requests.
        serializers: Serializers for bodies, query and path parameters, and
            responses. Defaults to JSON.
    """

    def __init__(
        self,
        transport: Transport,
        serializers: Optional[SerializerSet] = None,
    ) -> None:
        self._logger = getLogger("restcraft")
        self._transport = transport
        self._serializers = serializers or SerializerSet.default()

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def serializers(self) -> SerializerSet:
        return self._serializers

    async def resolve_and_dispatch(self, request_info: RequestInfo) -> Any:
        """Sends the request and returns what its declared return type asks for.

        | return_type        | result                                      |
        |--------------------|---------------------------------------------|
        | None               | None, after the status check                |
        | httpx.Response     | the raw response, status never checked      |
        | str / bytes        | the raw response content                    |
        | Response[T]        | a Response wrapper deserializing lazily     |
        | anything else      | the deserialized content                    |
        """
        return_type = request_info.return_type

        if return_type is None or return_type is type(None):
            return await self.request_void(request_info)
        if return_type is HttpxResponse:
            return await self.request_raw(request_info)
        if return_type is str:
            return await self.request_raw_string(request_info)
        if return_type is bytes:
            return await self.request_raw_bytes(request_info)
        if get_origin(return_type) is Response or return_type is Response:
            args = get_args(return_type)
            return await self.request_response(request_info, args[0] if args else Any)
        return await self.request(request_info, return_type)

    async def request_void(self, request_info: RequestInfo) -> None:
        await self._send_checked(request_info)

    async def request_raw(self, request_info: RequestInfo) -> HttpxResponse:
        return await self._send(request_info)

    async def request_raw_string(self, request_info: RequestInfo) -> str:
        response = await self._send_checked(request_info)
        return response.text

    async def request_raw_bytes(self, request_info: RequestInfo) -> bytes:
        response = await self._send_checked(request_info)
        return response.content

    async def request(self, request_info: RequestInfo, response_type: Any) -> Any:
        response = await self._send_checked(request_info)
        return self._deserialize(response, response_type, request_info)

    async def request_response(
        self, request_info: RequestInfo, response_type: Any
    ) -> Response[Any]:
        response = await self._send_checked(request_info)
        return Response(
            response,
            lambda: self._deserialize(response, response_type, request_info),
        )

    def build_uri(self, request_info: RequestInfo) -> URL:
        return build_uri(
            request_info.path,
            request_info.path_params,
            request_info.query_params,
            request_info.query_map,
            serializers=self._serializers,
            request_info=request_info,
        )

    def build_content(
        self, request_info: RequestInfo
    ) -> Tuple[Optional[bytes], Optional[str]]:
        """Serializes the body, returning its content and content type.

        Raises:
            InvalidBodyTypeError: If a URL_ENCODED body is not a mapping.
        """
        body = request_info.body
        if body is None:
            return None, None
        if body.method == BodySerializationMethod.URL_ENCODED:
            return form_url_encode(body.value), FORM_CONTENT_TYPE

        serialized = self._serializers.body.serialize_body(body.value, request_info)
        return serialized.content, serialized.content_type

    def build_headers(
        self, request_info: RequestInfo, content_type: Optional[str] = None
    ) -> Headers:
        """Merges the request headers.

        Later sources replace earlier ones for the same name: body content
        type, class headers, method headers, parameter headers, header map.
        A method header set to None removes the class header of that name.
        """
        headers = Headers()
        if content_type is not None:
            headers[HEADER_CONTENT_TYPE] = content_type

        _apply_headers(headers, request_info.class_headers)

        for header in request_info.method_headers:
            if header.value is None:
                headers.pop(header.key, None)
        _apply_headers(headers, request_info.method_headers)

        _apply_headers(headers, request_info.header_params)

        if request_info.header_map is not None:
            _apply_headers(
                headers,
                (
                    HeaderParameter(str(key), value)
                    for key, value in request_info.header_map.items()
                ),
            )
        return headers

    async def _send(self, request_info: RequestInfo) -> HttpxResponse:
        uri = self.build_uri(request_info)
        content, content_type = self.build_content(request_info)
        headers = self.build_headers(request_info, content_type)

        cancellation_token = request_info.cancellation_token
        cancellation_token.raise_if_cancelled()

        self._logger.debug(f"Request: {request_info.method.value} {uri}")
        response = await cancellation_token.run(
            self._transport.send(
                request_info.method.value,
                uri,
                headers=headers,
                content=content,
                cancellation_token=cancellation_token,
            )
        )
        self._logger.debug(
            f"Response: {response.status_code} for {request_info.method.value} {uri}"
        )
        return response

    async def _send_checked(self, request_info: RequestInfo) -> HttpxResponse:
        response = await self._send(request_info)
        if not request_info.allow_any_status_code and not response.is_success:
            raise ApiException(response)
        return response

    def _deserialize(
        self, response: HttpxResponse, response_type: Any, request_info: RequestInfo
    ) -> Any:
        return self._serializers.response.deserialize(
            response.text, response, response_type, request_info
        )


def _apply_headers(headers: Headers, header_params: Iterable[HeaderParameter]) -> None:
    for header in header_params:
        for key, value in header.serialize():
            headers[key] = value



import asyncio

import httpx
import pytest
from pydantic import BaseModel
from pytest_httpx import HTTPXMock

from restcraft import (
    ApiException,
    BodySerializationMethod,
    CancellationToken,
    HttpMethod,
    InvalidBodyTypeError,
    MissingPathParameterError,
    RequestCancelledError,
    RequestInfo,
    Requester,
    Response,
)
from restcraft._utils.constants import HEADER_USER_AGENT


class User(BaseModel):
    id: int
    name: str


class TestRequester:
    class TestReturnShapes:
        @pytest.mark.anyio
        async def test_void(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/items/1", method="DELETE")

            request_info = RequestInfo(HttpMethod.DELETE, "items/{id}")
            request_info.add_path_parameter("id", 1)

            assert await requester.request_void(request_info) is None

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers[HEADER_USER_AGENT].startswith("restcraft/")
            assert sent_request.headers["Accept"] == "application/json"

        @pytest.mark.anyio
        async def test_deserialized(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/users?name=jane%20doe",
                json={"id": 1, "name": "jane doe"},
            )

            request_info = RequestInfo(HttpMethod.GET, "users")
            request_info.add_query_parameter("name", "jane doe")

            user = await requester.request(request_info, User)

            assert user == User(id=1, name="jane doe")

        @pytest.mark.anyio
        async def test_raw_string_and_bytes(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/text", text="hello")
            httpx_mock.add_response(url=f"{base_url}/text", content=b"\x00\x01")

            request_info = RequestInfo(HttpMethod.GET, "text")

            assert await requester.request_raw_string(request_info) == "hello"
            assert await requester.request_raw_bytes(request_info) == b"\x00\x01"

        @pytest.mark.anyio
        async def test_raw_response_is_never_checked(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/missing", status_code=404)

            response = await requester.request_raw(
                RequestInfo(HttpMethod.GET, "missing")
            )

            assert response.status_code == 404

        @pytest.mark.anyio
        async def test_response_wrapper_deserializes_lazily(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/users/1",
                json={"id": 1, "name": "jane"},
                headers={"ETag": "abc"},
            )

            request_info = RequestInfo(HttpMethod.GET, "users/1")
            response = await requester.request_response(request_info, User)

            assert isinstance(response, Response)
            assert response.status_code == 200
            assert response.headers["ETag"] == "abc"
            assert response.string_content == '{"id":1,"name":"jane"}'
            content = response.get_content()
            assert content == User(id=1, name="jane")
            assert response.get_content() is content

        @pytest.mark.anyio
        @pytest.mark.parametrize(
            "return_type, expected",
            [
                (None, None),
                (str, '{"id":1,"name":"jane"}'),
                (bytes, b'{"id":1,"name":"jane"}'),
                (User, User(id=1, name="jane")),
                (dict, {"id": 1, "name": "jane"}),
            ],
        )
        async def test_resolve_and_dispatch(
            self,
            httpx_mock: HTTPXMock,
            requester: Requester,
            base_url: str,
            return_type,
            expected,
        ):
            httpx_mock.add_response(
                url=f"{base_url}/users/1", json={"id": 1, "name": "jane"}
            )

            request_info = RequestInfo(
                HttpMethod.GET, "users/1", return_type=return_type
            )

            assert await requester.resolve_and_dispatch(request_info) == expected

        @pytest.mark.anyio
        async def test_resolve_and_dispatch_response_types(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/users/1",
                json={"id": 1, "name": "jane"},
            )
            httpx_mock.add_response(
                url=f"{base_url}/users/1",
                json={"id": 1, "name": "jane"},
            )

            raw = await requester.resolve_and_dispatch(
                RequestInfo(HttpMethod.GET, "users/1", return_type=httpx.Response)
            )
            wrapped = await requester.resolve_and_dispatch(
                RequestInfo(HttpMethod.GET, "users/1", return_type=Response[User])
            )

            assert isinstance(raw, httpx.Response)
            assert wrapped.get_content() == User(id=1, name="jane")

    class TestStatusCheck:
        @pytest.mark.anyio
        async def test_error_status_raises_api_exception(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/users/1", status_code=404, text="not here"
            )

            with pytest.raises(ApiException) as exc_info:
                await requester.request(RequestInfo(HttpMethod.GET, "users/1"), User)

            error = exc_info.value
            assert error.status_code == 404
            assert error.request_method == "GET"
            assert error.request_uri == f"{base_url}/users/1"
            assert error.content == "not here"
            assert "Status Code: 404 Not Found" in str(error)

        @pytest.mark.anyio
        async def test_allow_any_status_code(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/users/1",
                status_code=404,
                json={"id": 0, "name": "nobody"},
            )

            request_info = RequestInfo(
                HttpMethod.GET, "users/1", allow_any_status_code=True
            )
            response = await requester.request_response(request_info, User)

            assert response.status_code == 404
            assert response.get_content().name == "nobody"

    class TestHeaders:
        @pytest.mark.anyio
        async def test_header_precedence(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/items")

            request_info = RequestInfo(HttpMethod.GET, "items")
            request_info.add_class_header("X-A", "class")
            request_info.add_class_header("X-B", "class")
            request_info.add_class_header("X-C", "class")
            request_info.add_class_header("X-Removed", "class")
            request_info.add_method_header("X-B", "method")
            request_info.add_method_header("X-Removed", None)
            request_info.add_header("x-c", "param")
            request_info.add_header("X-D", "param")
            request_info.set_header_map({"X-D": "map"})

            await requester.request_void(request_info)

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["X-A"] == "class"
            assert sent_request.headers["X-B"] == "method"
            assert sent_request.headers["X-C"] == "param"
            assert sent_request.headers["X-D"] == "map"
            assert "X-Removed" not in sent_request.headers

        def test_header_map_replaces_content_type(self, requester: Requester):
            request_info = RequestInfo(HttpMethod.POST, "items")
            request_info.set_header_map({"Content-Type": "text/plain"})

            headers = requester.build_headers(request_info, "application/json")

            assert headers["Content-Type"] == "text/plain"

        def test_none_header_values_are_omitted(self, requester: Requester):
            request_info = RequestInfo(HttpMethod.GET, "items")
            request_info.add_header("X-Token", None)

            assert "X-Token" not in requester.build_headers(request_info)

    class TestBody:
        @pytest.mark.anyio
        async def test_json_body(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/users", method="POST")

            request_info = RequestInfo(HttpMethod.POST, "users")
            request_info.set_body(User(id=1, name="jane"))
            await requester.request_void(request_info)

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.content == b'{"id":1,"name":"jane"}'
            assert sent_request.headers["Content-Type"] == (
                "application/json; charset=utf-8"
            )

        @pytest.mark.anyio
        async def test_url_encoded_body(
            self, httpx_mock: HTTPXMock, requester: Requester, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/login", method="POST")

            request_info = RequestInfo(HttpMethod.POST, "login")
            request_info.set_body(
                {"user": "jane", "scope": ["a", "b"]},
                BodySerializationMethod.URL_ENCODED,
            )
            await requester.request_void(request_info)

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.content == b"user=jane&scope=a&scope=b"
            assert sent_request.headers["Content-Type"] == (
                "application/x-www-form-urlencoded"
            )

    class TestFailuresBeforeSending:
        @pytest.mark.anyio
        async def test_invalid_url_encoded_body(self, recording_transport):
            requester = Requester(recording_transport)
            request_info = RequestInfo(HttpMethod.POST, "login")
            request_info.set_body("text", BodySerializationMethod.URL_ENCODED)

            with pytest.raises(InvalidBodyTypeError):
                await requester.request_void(request_info)
            assert recording_transport.sent == []

        @pytest.mark.anyio
        async def test_missing_path_parameter(self, recording_transport):
            requester = Requester(recording_transport)

            with pytest.raises(MissingPathParameterError):
                await requester.request_void(RequestInfo(HttpMethod.GET, "items/{id}"))
            assert recording_transport.sent == []

        @pytest.mark.anyio
        async def test_cancelled_token(self, recording_transport):
            requester = Requester(recording_transport)
            token = CancellationToken()
            token.cancel()
            request_info = RequestInfo(HttpMethod.GET, "items")
            request_info.set_cancellation_token(token)

            with pytest.raises(RequestCancelledError):
                await requester.request_void(request_info)
            assert recording_transport.sent == []

    class TestTransportErrors:
        @pytest.mark.anyio
        async def test_transport_error_reaches_the_caller(
            self, httpx_mock: HTTPXMock, requester: Requester
        ):
            error = httpx.ConnectError("refused")
            httpx_mock.add_exception(error)

            with pytest.raises(httpx.ConnectError) as exc_info:
                await requester.request(RequestInfo(HttpMethod.GET, "users/1"), User)

            assert exc_info.value is error

    class TestCancellation:
        @pytest.mark.anyio
        async def test_cancel_during_send(self, make_transport):
            release = asyncio.Event()
            transport = make_transport(release=release)
            requester = Requester(transport)
            token = CancellationToken()
            request_info = RequestInfo(HttpMethod.GET, "items")
            request_info.set_cancellation_token(token)

            async def cancel_when_sent() -> None:
                await transport.started.wait()
                token.cancel()

            canceller = asyncio.ensure_future(cancel_when_sent())
            with pytest.raises(RequestCancelledError):
                await requester.request_void(request_info)
            await canceller

            assert len(transport.sent) == 1
            assert not release.is_set()

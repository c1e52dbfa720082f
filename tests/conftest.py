import asyncio
from typing import List, Optional, Union

import pytest
from httpx import URL, Headers, Request, Response

from restcraft import CancellationToken, ClientConfig, HttpxTransport, Requester
from restcraft._utils.constants import ENV_BASE_URL, ENV_MAX_RETRIES, ENV_TIMEOUT


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv(ENV_BASE_URL, raising=False)
    monkeypatch.delenv(ENV_TIMEOUT, raising=False)
    monkeypatch.delenv(ENV_MAX_RETRIES, raising=False)


@pytest.fixture
def base_url() -> str:
    return "https://test.example.com"


@pytest.fixture
def config(base_url: str) -> ClientConfig:
    return ClientConfig(base_url=base_url)


@pytest.fixture
def transport(config: ClientConfig) -> HttpxTransport:
    return HttpxTransport(config)


@pytest.fixture
def requester(transport: HttpxTransport) -> Requester:
    return Requester(transport)


class RecordingTransport:
    """Transport that records what it is asked to send.

    Answers with ``response`` or, when ``release`` is given, blocks until the
    event is set.
    """

    def __init__(
        self,
        response: Optional[Response] = None,
        release: Optional[asyncio.Event] = None,
    ) -> None:
        self.response = response or Response(200)
        self.release = release
        self.sent: List[Request] = []
        self.started = asyncio.Event()
        self.closed = False

    async def send(
        self,
        method: str,
        url: Union[URL, str],
        *,
        headers: Headers,
        content: Optional[bytes],
        cancellation_token: CancellationToken,
    ) -> Response:
        request = Request(
            method, URL("https://fake.test").join(url), headers=headers, content=content
        )
        self.sent.append(request)
        self.started.set()
        if self.release is not None:
            await self.release.wait()
        self.response.request = request
        return self.response

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_transport():
    """Factory for RecordingTransport instances with a given answer."""
    return RecordingTransport

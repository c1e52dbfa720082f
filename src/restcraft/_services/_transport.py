import asyncio
import logging
import random
from datetime import datetime
from email.utils import parsedate_to_datetime
from logging import getLogger
from typing import Any, Optional, Protocol, Union, runtime_checkable

from httpx import (
    URL,
    AsyncClient,
    ConnectTimeout,
    Headers,
    Response,
    TimeoutException,
)
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from .._config import ClientConfig
from .._request import CancellationToken
from .._utils import get_httpx_client_kwargs, user_agent_value
from .._utils.constants import (
    DEFAULT_ACCEPT,
    HEADER_ACCEPT,
    HEADER_RETRY_AFTER,
    HEADER_USER_AGENT,
)


@runtime_checkable
class Transport(Protocol):
    """Sends one HTTP request and returns the fully read response.

    Implementations must be safe for concurrent use and should observe the
    cancellation token. Transport failures are raised as is.
    """

    async def send(
        self,
        method: str,
        url: Union[URL, str],
        *,
        headers: Headers,
        content: Optional[bytes],
        cancellation_token: CancellationToken,
    ) -> Response: ...

    async def aclose(self) -> None: ...


def is_retryable_exception(exception: BaseException) -> bool:
    return isinstance(exception, (ConnectTimeout, TimeoutException))


def is_retryable_status_code(response: Response) -> bool:
    return response.status_code >= 500 and response.status_code < 600


def _last_outcome(retry_state: RetryCallState) -> Any:
    # hand back the last response (or re-raise the last error) once attempts run out
    return retry_state.outcome.result()  # type: ignore[union-attr]


class HttpxTransport:
    """Transport backed by an ``httpx.AsyncClient``.

    Relative URIs are resolved against ``config.base_url`` by the client.
    When ``config.max_retries`` is above 0, timeouts and 5xx responses are
    retried with exponential backoff, and 429 responses are retried after the
    delay given by their Retry-After header.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        client: Optional[AsyncClient] = None,
    ) -> None:
        self._logger = getLogger("restcraft")
        self._config = config or ClientConfig()
        self._log_retry = before_sleep_log(self._logger, logging.WARNING)

        if client is None:
            client_kwargs = {
                **get_httpx_client_kwargs(self._config),
                "headers": Headers(self.default_headers),
            }
            client = AsyncClient(**client_kwargs)
        self._client = client

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            HEADER_ACCEPT: DEFAULT_ACCEPT,
            HEADER_USER_AGENT: user_agent_value(),
            **self._config.headers,
        }

    def _parse_retry_after(self, headers: Headers) -> float:
        """Parse Retry-After header (RFC 6585/7231).

        Args:
            headers: HTTP response headers

        Returns:
            float: Seconds to wait before retry (minimum 0.0, default 1.0 if missing/invalid).
                  RFC 7231 allows 0 to indicate immediate retry.
        """
        DEFAULT_RETRY_AFTER = 1.0
        retry_after = headers.get(HEADER_RETRY_AFTER)
        if not retry_after:
            return DEFAULT_RETRY_AFTER

        try:
            return max(float(retry_after), 0.0)
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after)
            delta = (retry_date - datetime.now(retry_date.tzinfo)).total_seconds()
            return max(delta, 0.0)
        except (ValueError, TypeError):
            return DEFAULT_RETRY_AFTER

    async def send(
        self,
        method: str,
        url: Union[URL, str],
        *,
        headers: Headers,
        content: Optional[bytes],
        cancellation_token: CancellationToken,
    ) -> Response:
        cancellation_token.raise_if_cancelled()

        retrying = AsyncRetrying(
            retry=(
                retry_if_exception(is_retryable_exception)
                | retry_if_result(is_retryable_status_code)
            ),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            stop=stop_after_attempt(self.max_retries + 1),
            before_sleep=self._before_retry,
            retry_error_callback=_last_outcome,
        )
        return await retrying(
            self._send_with_rate_limit,
            method,
            url,
            headers=headers,
            content=content,
            cancellation_token=cancellation_token,
        )

    async def _before_retry(self, retry_state: RetryCallState) -> None:
        self._log_retry(retry_state)
        outcome = retry_state.outcome
        if outcome is not None and not outcome.failed:
            # the retried response is discarded
            await outcome.result().aclose()

    async def _send_with_rate_limit(
        self,
        method: str,
        url: Union[URL, str],
        *,
        headers: Headers,
        content: Optional[bytes],
        cancellation_token: CancellationToken,
    ) -> Response:
        attempt = 0
        while True:
            cancellation_token.raise_if_cancelled()

            request = self._client.build_request(
                method, url, headers=headers, content=content
            )
            self._logger.debug(f"Sending: {request.method} {request.url}")
            response = await self._client.send(request)

            if response.status_code != 429 or attempt >= self.max_retries:
                return response

            retry_after = self._parse_retry_after(response.headers)
            jitter = random.uniform(0, 0.1 * retry_after)
            sleep_time = retry_after + jitter
            self._logger.warning(
                f"Rate limited (429). Retrying after {sleep_time:.2f}s "
                f"(attempt {attempt + 1}/{self.max_retries})"
            )
            await response.aclose()
            await asyncio.sleep(sleep_time)
            attempt += 1

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

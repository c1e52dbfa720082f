from typing import Callable, Generic, TypeVar

from httpx import Headers
from httpx import Response as HttpxResponse

T = TypeVar("T")

_UNSET = object()


class Response(Generic[T]):
    """Response of a request, with access to both the raw message and its content.

    Declare ``Response[T]`` as the return type of an interface method to get the
    status code and headers alongside the deserialized body. The body is only
    deserialized the first time ``get_content()`` is called.

    Examples:
        ```python
        @get("users/{user_id}")
        async def get_user(self, user_id: Annotated[int, Path()]) -> Response[User]: ...

        response = await api.get_user(1)
        if response.status_code == 200:
            user = response.get_content()
        ```
    """

    def __init__(
        self,
        response_message: HttpxResponse,
        content_deserializer: Callable[[], T],
    ) -> None:
        self.response_message = response_message
        self._content_deserializer = content_deserializer
        self._content = _UNSET

    @property
    def string_content(self) -> str:
        return self.response_message.text

    @property
    def status_code(self) -> int:
        return self.response_message.status_code

    @property
    def headers(self) -> Headers:
        return self.response_message.headers

    def get_content(self) -> T:
        """Deserializes the response body, caching the result."""
        if self._content is _UNSET:
            self._content = self._content_deserializer()
        return self._content  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Response(status_code={self.status_code})"

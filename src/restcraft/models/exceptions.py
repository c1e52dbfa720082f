from typing import Optional

from httpx import Headers, Request, Response


class RestcraftError(Exception):
    """Base class for every error raised by restcraft."""


class MissingPathParameterError(RestcraftError):
    """Raised when a path placeholder cannot be filled.

    Either no path parameter is bound to the placeholder, or the bound value
    is None. Path segments can never be omitted.
    """

    def __init__(self, placeholder: str, path: str, reason: Optional[str] = None):
        self.placeholder = placeholder
        self.path = path
        self.message = reason or (
            f"Unable to find a value for placeholder '{{{placeholder}}}' in path '{path}'"
        )
        super().__init__(self.message)


class InvalidBodyTypeError(RestcraftError, TypeError):
    """Raised when a URL encoded body is not a mapping of string keys to values."""

    def __init__(self, body_type: type):
        self.body_type = body_type
        self.message = (
            f"Body of type '{body_type.__name__}' cannot be URL encoded: "
            "it must be a mapping or a pydantic model"
        )
        super().__init__(self.message)


class RequestCancelledError(RestcraftError):
    """Raised when a request is cancelled through its cancellation token."""

    def __init__(self, message: str = "The request was cancelled"):
        self.message = message
        super().__init__(self.message)


class InterfaceDefinitionError(RestcraftError):
    """Raised when a client interface cannot be implemented."""


class ApiException(RestcraftError):
    """Raised when the server answers with a non-success status code."""

    def __init__(self, response: Response) -> None:
        try:
            request: Optional[Request] = response.request
        except RuntimeError:
            # responses built by hand (custom transports, tests) may lack a request
            request = None
        self.request_method = request.method if request is not None else "Unknown"
        self.request_uri = str(request.url) if request is not None else "Unknown"
        self.status_code = response.status_code
        self.reason_phrase = response.reason_phrase
        self.headers: Headers = response.headers
        self.content: Optional[str] = response.text if response.content else None
        self.response = response

        enriched_message = (
            f"\nRequest: {self.request_method} {self.request_uri}"
            f"\nStatus Code: {self.status_code} {self.reason_phrase}"
            f"\nResponse Content: {self.content or 'No content'}"
        )

        super().__init__(enriched_message)

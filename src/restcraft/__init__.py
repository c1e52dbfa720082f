"""Declarative asyncio HTTP clients.

Describe an API as a class of decorated ``async def`` methods and let
``RestClient`` implement it:

```python
from typing import Annotated

from restcraft import Path, Query, RestClient, get


class UsersApi:
    @get("users/{user_id}")
    async def get_user(self, user_id: Annotated[int, Path()]) -> User: ...

    @get("users")
    async def search(self, name: Annotated[str, Query("q")]) -> list[User]: ...


async with RestClient("https://api.example.com") as client:
    users = client.for_(UsersApi)
    user = await users.get_user(1)
```
"""

from ._client import (
    Body,
    Header,
    HeaderMap,
    Path,
    Query,
    QueryMap,
    RestClient,
    allow_any_status_code,
    delete,
    get,
    head,
    header,
    options,
    patch,
    post,
    put,
    request,
)
from ._config import ClientConfig
from ._request import CancellationToken, RequestInfo, build_uri
from ._services import HttpxTransport, Requester, Transport
from ._utils import setup_logging
from .models import (
    ApiException,
    BodySerializationMethod,
    HttpMethod,
    InterfaceDefinitionError,
    InvalidBodyTypeError,
    MissingPathParameterError,
    PathSerializationMethod,
    QuerySerializationMethod,
    RequestCancelledError,
    Response,
    RestcraftError,
)

__all__ = [
    "ApiException",
    "Body",
    "BodySerializationMethod",
    "CancellationToken",
    "ClientConfig",
    "Header",
    "HeaderMap",
    "HttpMethod",
    "HttpxTransport",
    "InterfaceDefinitionError",
    "InvalidBodyTypeError",
    "MissingPathParameterError",
    "Path",
    "PathSerializationMethod",
    "Query",
    "QueryMap",
    "QuerySerializationMethod",
    "RequestCancelledError",
    "RequestInfo",
    "Requester",
    "Response",
    "RestClient",
    "RestcraftError",
    "Transport",
    "allow_any_status_code",
    "build_uri",
    "delete",
    "get",
    "head",
    "header",
    "options",
    "patch",
    "post",
    "put",
    "request",
    "setup_logging",
]

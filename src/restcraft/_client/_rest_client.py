from typing import Any, Optional, Type, TypeVar

from .._config import ClientConfig
from .._services import HttpxTransport, Requester, Transport
from ..serializers import SerializerSet
from ._builder import build_implementation

T = TypeVar("T")


class RestClient:
    """Creates implementations of declared client interfaces.

    All implementations created by one RestClient share its transport and
    serializers, which are safe for concurrent use.

    Args:
        base_url: Address relative paths are resolved against. Overrides
            ``config.base_url`` and the RESTCRAFT_BASE_URL environment variable.
        config: Client settings, read from the environment when omitted.
        transport: Transport to send requests with. Defaults to an
            HttpxTransport built from ``config``.
        serializers: Serializers for bodies, parameters and responses.
            Defaults to JSON.

    Examples:
        ```python
        async with RestClient("https://api.github.com") as client:
            github = client.for_(GitHubApi)
            repos = await github.list_repos("octocat", sort="updated")
        ```
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        serializers: Optional[SerializerSet] = None,
    ) -> None:
        if config is None:
            config = ClientConfig.from_env(base_url=base_url)
        elif base_url is not None:
            config = config.model_copy(update={"base_url": base_url})

        self._config = config
        self._transport = transport or HttpxTransport(config)
        self._requester = Requester(self._transport, serializers)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def requester(self) -> Requester:
        return self._requester

    def for_(self, interface: Type[T]) -> T:
        """Returns an implementation of ``interface`` sending requests through this client.

        Raises:
            InterfaceDefinitionError: If the interface is malformed.
        """
        implementation = build_implementation(interface)
        return implementation(self._requester)

    @classmethod
    def create(cls, interface: Type[T], base_url: Optional[str] = None, **kwargs: Any) -> T:
        """Shorthand for ``RestClient(base_url, **kwargs).for_(interface)``."""
        return cls(base_url, **kwargs).for_(interface)

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

import os
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ._utils.constants import (
    DEFAULT_TIMEOUT,
    ENV_BASE_URL,
    ENV_MAX_RETRIES,
    ENV_TIMEOUT,
)


class ClientConfig(BaseModel):
    """Settings of the HTTP client behind a generated interface.

    Attributes:
        base_url: Address relative request paths are resolved against.
        timeout: Timeout in seconds applied to connect, read, write and pool.
        max_retries: Retries performed by the transport on timeouts, 5xx and
            429 responses. 0 disables retrying.
        follow_redirects: Whether redirects are followed.
        headers: Headers sent with every request.
    """

    base_url: Optional[str] = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_retries: int = Field(default=0, ge=0)
    follow_redirects: bool = True
    headers: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Builds a config from RESTCRAFT_* environment variables.

        Keyword arguments take precedence over the environment.
        """
        values = {}
        base_url = os.getenv(ENV_BASE_URL)
        if base_url:
            values["base_url"] = base_url
        timeout = os.getenv(ENV_TIMEOUT)
        if timeout:
            values["timeout"] = timeout
        max_retries = os.getenv(ENV_MAX_RETRIES)
        if max_retries:
            values["max_retries"] = max_retries

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)

from ._logs import logger, setup_logging
from ._ssl_context import create_ssl_context, get_httpx_client_kwargs
from ._user_agent import user_agent_value

__all__ = [
    "create_ssl_context",
    "get_httpx_client_kwargs",
    "logger",
    "setup_logging",
    "user_agent_value",
]

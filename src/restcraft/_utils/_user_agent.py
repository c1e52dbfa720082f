import importlib.metadata

from .constants import USER_AGENT_PREFIX


def user_agent_value() -> str:
    try:
        version = importlib.metadata.version("restcraft")
    except importlib.metadata.PackageNotFoundError:
        version = "unknown"

    return f"{USER_AGENT_PREFIX}/{version}"

import os
import ssl
from typing import TYPE_CHECKING, Any, Dict

from .constants import ENV_DISABLE_SSL_VERIFY

if TYPE_CHECKING:
    from .._config import ClientConfig


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    path = os.path.expandvars(path)
    path = os.path.expanduser(path)
    return path


def create_ssl_context():
    # Try truststore first (system certificates)
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        # Fallback to manual certificate configuration
        import certifi

        ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
        requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
        ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

        return ssl.create_default_context(
            cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
            capath=ssl_cert_dir,
        )


def get_httpx_client_kwargs(config: "ClientConfig") -> Dict[str, Any]:
    """Get the httpx client configuration for a client config."""
    client_kwargs: Dict[str, Any] = {
        "follow_redirects": config.follow_redirects,
        "timeout": config.timeout,
    }
    if config.base_url:
        client_kwargs["base_url"] = config.base_url

    disable_ssl_env = os.environ.get(ENV_DISABLE_SSL_VERIFY, "").lower()
    if disable_ssl_env in ("1", "true", "yes", "on"):
        client_kwargs["verify"] = False
    else:
        client_kwargs["verify"] = create_ssl_context()

    # HTTP_PROXY, HTTPS_PROXY, NO_PROXY are read by httpx itself
    return client_kwargs

# Environment variables
ENV_BASE_URL = "RESTCRAFT_BASE_URL"
ENV_TIMEOUT = "RESTCRAFT_TIMEOUT"
ENV_MAX_RETRIES = "RESTCRAFT_MAX_RETRIES"
ENV_DISABLE_SSL_VERIFY = "RESTCRAFT_DISABLE_SSL_VERIFY"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"
HEADER_RETRY_AFTER = "Retry-After"

# Defaults
DEFAULT_TIMEOUT = 30.0
DEFAULT_ACCEPT = "application/json"
USER_AGENT_PREFIX = "restcraft"

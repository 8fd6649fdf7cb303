# Environment variables
ENV_BASE_URL = "WS_BASE_URL"
ENV_LOG_LEVEL = "WS_LOG_LEVEL"

# Headers
HEADER_ACCEPT = "Accept"

# Logging
LOGGER_NAME = "wsrest"

# Defaults
DEFAULT_TIMEOUT = 30.0
DEFAULT_MIME_TYPE = "application/octet-stream"

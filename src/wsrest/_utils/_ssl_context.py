import os
import ssl
from typing import Any, Optional

from .constants import DEFAULT_TIMEOUT

CA_ENV_VARS = ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE")


def _env_path(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if not value:
        return None
    return os.path.expanduser(os.path.expandvars(value))


def create_ssl_context() -> ssl.SSLContext:
    """TLS context for clients created per call.

    Uses the system trust store through truststore when it is installed,
    otherwise the CA bundle named by the environment or certifi's bundle.
    """
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        import certifi

        cafile = next(
            (path for path in map(_env_path, CA_ENV_VARS) if path), certifi.where()
        )
        return ssl.create_default_context(
            cafile=cafile, capath=_env_path("SSL_CERT_DIR")
        )


def get_httpx_client_kwargs(timeout: Optional[float] = None) -> dict[str, Any]:
    """Keyword arguments for the ``AsyncClient`` a request opens for itself.

    Sessions supplied through the configuration are used as they are.
    """
    return {
        "verify": create_ssl_context(),
        "timeout": DEFAULT_TIMEOUT if timeout is None else timeout,
        "follow_redirects": True,
    }

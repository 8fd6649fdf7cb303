from ._logs import setup_logging
from ._params import Params, is_absolute_url, join_url, merge_params
from ._ssl_context import get_httpx_client_kwargs

__all__ = [
    "Params",
    "get_httpx_client_kwargs",
    "is_absolute_url",
    "join_url",
    "merge_params",
    "setup_logging",
]

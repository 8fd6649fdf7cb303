"""Promise-style REST calls on top of httpx and pydantic.

Create one ``WS`` per backend, configure it once, then await its calls:

```python
from wsrest import WS

ws = WS("https://api.example.com").add_mandatory_query_parameter("apiKey", "abc")
items = await ws.get("/items", params={"page": 1})
```
"""

from ._config import (
    ErrorExtractor,
    ParameterEncoding,
    RequestAdapter,
    WSConfig,
    WSHTTPVerb,
    WSLogLevel,
)
from ._future import WSFuture, resolve_on_main_thread
from ._multipart import WSMultiPartData
from ._network_indicator import NetworkActivityIndicator, network_activity_indicator
from ._parsing import parse_collection, parse_object, value_at_key_path
from ._request import WSRequest
from ._retry import RequestRetrier
from ._ws import WS
from .models.errors import WSHTTPError, WSParsingError

__all__ = [
    "WS",
    "WSConfig",
    "WSFuture",
    "WSHTTPError",
    "WSHTTPVerb",
    "WSLogLevel",
    "WSMultiPartData",
    "WSParsingError",
    "WSRequest",
    "ErrorExtractor",
    "NetworkActivityIndicator",
    "ParameterEncoding",
    "RequestAdapter",
    "RequestRetrier",
    "network_activity_indicator",
    "parse_collection",
    "parse_object",
    "resolve_on_main_thread",
    "value_at_key_path",
]

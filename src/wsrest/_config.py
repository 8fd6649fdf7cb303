import asyncio
from enum import Enum
from logging import getLogger
from typing import Any, Callable, Optional

from httpx import AsyncClient, Request
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ._network_indicator import NetworkActivityIndicator, network_activity_indicator
from ._retry import RequestRetrier
from ._utils.constants import DEFAULT_TIMEOUT, LOGGER_NAME

logger = getLogger(LOGGER_NAME)

ErrorExtractor = Callable[[Any], Optional[BaseException]]
"""Maps a parsed JSON body to a domain error, or ``None`` when the body is fine."""

RequestAdapter = Callable[[Request], Request]
"""Adjusts the outgoing httpx request (auth headers, signing, ...)."""


class WSHTTPVerb(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class WSLogLevel(str, Enum):
    """How much of each call is written to the ``wsrest`` logger."""

    OFF = "off"
    CALLS = "calls"
    CALLS_AND_RESPONSES = "calls_and_responses"


class ParameterEncoding(str, Enum):
    """Body encoding of parameters for verbs other than GET and DELETE."""

    FORM = "form"
    JSON = "json"


class WSConfig(BaseModel):
    """Settings shared by every call issued from one backend.

    Mutate it during application setup. Each request copies these values
    when it is built, so later changes never reach calls already issued.

    Assigning a field once calls have started logs a warning. In-place edits
    such as ``config.headers["X-Token"] = ...`` are not detected; they still
    only affect requests built afterwards.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_url: str
    headers: dict[str, str] = Field(default_factory=dict)
    mandatory_query_params: dict[str, Any] = Field(default_factory=dict)
    log_levels: WSLogLevel = WSLogLevel.OFF
    post_parameter_encoding: ParameterEncoding = ParameterEncoding.FORM
    shows_network_activity_indicator: bool = True
    network_activity_indicator: NetworkActivityIndicator = Field(
        default_factory=lambda: network_activity_indicator
    )
    # Used when a typed call does not pass its own key-path.
    default_collection_parsing_key_path: Optional[str] = None
    default_object_parsing_key_path: Optional[str] = None
    error_handler: Optional[ErrorExtractor] = None
    request_adapter: Optional[RequestAdapter] = None
    request_retrier: Optional[RequestRetrier] = None
    session: Optional[AsyncClient] = None
    timeout: float = DEFAULT_TIMEOUT
    main_loop: Optional[asyncio.AbstractEventLoop] = None

    _calls_started: bool = PrivateAttr(default=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_") and getattr(self, "_calls_started", False):
            logger.warning(
                f"Configuration field '{name}' changed after calls were issued; "
                "only requests built from now on will see it"
            )
        super().__setattr__(name, value)

    def mark_calls_started(self) -> None:
        self._calls_started = True

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, AsyncIterator, Optional

from httpx import AsyncClient, HTTPStatusError, Request, Response

from ._config import (
    ErrorExtractor,
    ParameterEncoding,
    RequestAdapter,
    WSHTTPVerb,
    WSLogLevel,
)
from ._future import WSFuture
from ._multipart import WSMultiPartData, multipart_fields, multipart_files
from ._network_indicator import NetworkActivityIndicator
from ._retry import RequestRetrier
from ._utils import Params, get_httpx_client_kwargs, join_url
from ._utils.constants import DEFAULT_TIMEOUT, HEADER_ACCEPT, LOGGER_NAME
from .models.errors import WSHTTPError, WSParsingError

logger = getLogger(LOGGER_NAME)

QUERY_VERBS = (WSHTTPVerb.GET, WSHTTPVerb.DELETE)

# Keeps fetch tasks alive until they finish.
_background_tasks: set["asyncio.Task[None]"] = set()


@dataclass
class WSRequest:
    """A single call, built from a configuration and executed once.

    All values are copies taken when the request was built. ``fetch`` may be
    called only once per request.
    """

    base_url: str = ""
    url: str = ""
    http_verb: WSHTTPVerb = WSHTTPVerb.GET
    params: Params = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    log_levels: WSLogLevel = WSLogLevel.OFF
    post_parameter_encoding: ParameterEncoding = ParameterEncoding.FORM
    shows_network_activity_indicator: bool = True
    network_activity_indicator: Optional[NetworkActivityIndicator] = None
    error_handler: Optional[ErrorExtractor] = None
    request_adapter: Optional[RequestAdapter] = None
    request_retrier: Optional[RequestRetrier] = None
    session: Optional[AsyncClient] = None
    timeout: float = DEFAULT_TIMEOUT
    returns_json: bool = True
    multipart_data: Optional[list[WSMultiPartData]] = None

    _fetched: bool = field(default=False, init=False, repr=False)

    @property
    def full_url(self) -> str:
        return join_url(self.base_url, self.url)

    @property
    def is_multipart(self) -> bool:
        return self.multipart_data is not None

    def build(self, client: AsyncClient) -> Request:
        """Build the httpx request sent by ``fetch``."""
        kwargs: dict[str, Any] = {"headers": self._request_headers()}

        if self.multipart_data is not None:
            kwargs["data"] = multipart_fields(self.params)
            kwargs["files"] = multipart_files(self.multipart_data)
        elif self.http_verb in QUERY_VERBS:
            kwargs["params"] = self.params
        elif self.params:
            if self.post_parameter_encoding == ParameterEncoding.JSON:
                kwargs["json"] = self.params
            else:
                kwargs["data"] = self.params

        request = client.build_request(
            self.http_verb.value, self.full_url, timeout=self.timeout, **kwargs
        )
        if self.request_adapter is not None:
            request = self.request_adapter(request)
        return request

    def fetch(self) -> WSFuture[Any]:
        """Send the request on the running loop.

        Returns:
            WSFuture: resolves to the parsed JSON body, or ``None`` when
            ``returns_json`` is off or the body is empty. Reports download
            progress as a fraction when the server sends a Content-Length.
        """
        if self._fetched:
            raise RuntimeError("A WSRequest can only be fetched once")
        self._fetched = True

        loop = asyncio.get_running_loop()
        future: WSFuture[Any] = WSFuture(loop=loop)
        task = loop.create_task(self._fetch(future))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

        def _cancel_task(done: "asyncio.Future[Any]") -> None:
            if done.cancelled():
                task.cancel()

        future.add_done_callback(_cancel_task)
        return future

    async def _fetch(self, future: WSFuture[Any]) -> None:
        indicator = (
            self.network_activity_indicator
            if self.shows_network_activity_indicator
            else None
        )
        if indicator is not None:
            indicator.start()
        try:
            result = await self._perform(future)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            if indicator is not None:
                indicator.stop()

    async def _perform(self, future: WSFuture[Any]) -> Any:
        async with self._client() as client:
            if self.request_retrier is None:
                response = await self._send(client, future)
            else:
                async for attempt in self.request_retrier.retrying(
                    before_sleep=self._log_retry
                ):
                    with attempt:
                        response = await self._send(client, future)
        return self._handle_response(response)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[AsyncClient]:
        if self.session is not None:
            yield self.session
            return
        async with AsyncClient(**get_httpx_client_kwargs(self.timeout)) as client:
            yield client

    async def _send(self, client: AsyncClient, future: WSFuture[Any]) -> Response:
        request = self.build(client)
        self._log_call(request)

        streamed = await client.send(request, stream=True)
        try:
            total = int(streamed.headers.get("Content-Length", 0) or 0)
            received = 0
            chunks: list[bytes] = []
            async for chunk in streamed.aiter_raw():
                chunks.append(chunk)
                received += len(chunk)
                if total:
                    future.set_progress(min(received / total, 1.0))
        finally:
            await streamed.aclose()

        response = Response(
            streamed.status_code,
            headers=streamed.headers,
            content=b"".join(chunks),
            request=streamed.request,
        )
        self._log_response(response)

        try:
            response.raise_for_status()
        except HTTPStatusError as e:
            payload = self._json_or_none(response) if self.returns_json else None
            domain_error = self._domain_error(payload)
            if domain_error is not None:
                raise domain_error from e
            raise WSHTTPError(e, payload) from e

        return response

    def _handle_response(self, response: Response) -> Any:
        if not self.returns_json or not response.content:
            return None
        try:
            json = response.json()
        except ValueError as e:
            raise WSParsingError(
                f"Invalid JSON in response from {response.request.url}"
            ) from e

        domain_error = self._domain_error(json)
        if domain_error is not None:
            raise domain_error
        return json

    def _domain_error(self, json: Any) -> Optional[BaseException]:
        if self.error_handler is None or json is None:
            return None
        return self.error_handler(json)

    def _request_headers(self) -> dict[str, str]:
        headers = dict(self.headers)
        if self.returns_json:
            headers.setdefault(HEADER_ACCEPT, "application/json")
        return headers

    @staticmethod
    def _json_or_none(response: Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def _log_call(self, request: Request) -> None:
        if self.log_levels == WSLogLevel.OFF:
            return
        logger.info(f"{request.method} {request.url}")
        if self.params:
            logger.info(f"params: {self.params}")

    def _log_response(self, response: Response) -> None:
        if self.log_levels != WSLogLevel.CALLS_AND_RESPONSES:
            return
        logger.info(f"{response.status_code} {response.request.url}")
        if self.returns_json:
            logger.info(f"{self._json_or_none(response)}")

    @staticmethod
    def _log_retry(retry_state: Any) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.debug(
            f"Retrying request (attempt {retry_state.attempt_number}) after: {error}"
        )

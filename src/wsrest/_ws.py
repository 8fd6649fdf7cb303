from logging import getLogger
from os import environ as env
from typing import Any, Optional, Sequence, TypeVar

from dotenv import load_dotenv

from ._config import WSConfig, WSHTTPVerb, WSLogLevel
from ._future import WSFuture, resolve_on_main_thread
from ._multipart import WSMultiPartData
from ._parsing import parse_collection, parse_object
from ._request import WSRequest
from ._utils import Params, merge_params, setup_logging
from ._utils.constants import DEFAULT_MIME_TYPE, ENV_BASE_URL, ENV_LOG_LEVEL, LOGGER_NAME

T = TypeVar("T")

load_dotenv()


class WS:
    """Webservice façade: one instance per backend.

    Every call builds a fresh ``WSRequest`` from ``config`` and returns a
    ``WSFuture`` resolved on the main event loop.

    Examples:
        ```python
        ws = WS("https://jsonplaceholder.typicode.com")
        ws.add_mandatory_query_parameter("apiKey", "abc")

        users = await ws.get("/users", params={"page": 1})
        ```
    """

    def __init__(self, base_url: Optional[str] = None, **config: Any) -> None:
        base_url_value = base_url or env.get(ENV_BASE_URL)
        if "log_levels" not in config and env.get(ENV_LOG_LEVEL):
            config["log_levels"] = WSLogLevel(env[ENV_LOG_LEVEL].lower())

        self.config = WSConfig(base_url=base_url_value, **config)  # type: ignore[arg-type]

        setup_logging(self.config.log_levels)
        self._logger = getLogger(LOGGER_NAME)
        self._logger.debug(f"CONFIG: {self.config.model_dump(exclude={'session', 'main_loop'})}")

    # Configuration

    def add_mandatory_query_parameter(self, key: str, value: Any) -> "WS":
        self._warn_if_started("mandatory_query_params")
        self.config.mandatory_query_params[key] = value
        return self

    def add_mandatory_query_parameters(self, params: Params) -> "WS":
        """Add several mandatory parameters, keeping keys already set."""
        self._warn_if_started("mandatory_query_params")
        for key, value in params.items():
            self.config.mandatory_query_params.setdefault(key, value)
        return self

    def _warn_if_started(self, name: str) -> None:
        if self.config._calls_started:
            self._logger.warning(
                f"Configuration field '{name}' changed after calls were issued; "
                "only requests built from now on will see it"
            )

    # Requests

    def default_request(self) -> WSRequest:
        c = self.config
        return WSRequest(
            base_url=c.base_url,
            headers=dict(c.headers),
            log_levels=c.log_levels,
            post_parameter_encoding=c.post_parameter_encoding,
            shows_network_activity_indicator=c.shows_network_activity_indicator,
            network_activity_indicator=c.network_activity_indicator,
            error_handler=c.error_handler,
            request_adapter=c.request_adapter,
            request_retrier=c.request_retrier,
            session=c.session,
            timeout=c.timeout,
        )

    def build_request(
        self,
        url: str,
        verb: WSHTTPVerb = WSHTTPVerb.GET,
        params: Optional[Params] = None,
    ) -> WSRequest:
        self.config.mark_calls_started()
        r = self.default_request()
        r.http_verb = verb
        r.url = url
        if not self.config.mandatory_query_params:
            r.params = dict(params or {})
        else:
            r.params = merge_params(params, self.config.mandatory_query_params)
        return r

    def multipart_request(
        self,
        url: str,
        params: Optional[Params],
        parts: Sequence[WSMultiPartData],
        verb: WSHTTPVerb = WSHTTPVerb.POST,
    ) -> WSRequest:
        r = self.build_request(url, verb=verb, params=params)
        r.multipart_data = list(parts)
        return r

    def _resolve(self, future: "WSFuture[T]") -> "WSFuture[T]":
        return resolve_on_main_thread(future, self.config.main_loop)

    def _call(
        self,
        verb: WSHTTPVerb,
        url: str,
        params: Optional[Params],
        returns_json: bool,
    ) -> WSFuture[Any]:
        r = self.build_request(url, verb=verb, params=params)
        r.returns_json = returns_json
        return self._resolve(r.fetch())

    # JSON and void calls

    def get(
        self, url: str, params: Optional[Params] = None, *, returns_json: bool = True
    ) -> WSFuture[Any]:
        """GET ``url``.

        Args:
            url: path appended to the base URL, or an absolute URL.
            params: query parameters, merged with the mandatory ones.
            returns_json: when False the body is ignored and the future
                resolves to ``None``.

        Returns:
            WSFuture: the parsed JSON body.
        """
        return self._call(WSHTTPVerb.GET, url, params, returns_json)

    def post(
        self, url: str, params: Optional[Params] = None, *, returns_json: bool = True
    ) -> WSFuture[Any]:
        return self._call(WSHTTPVerb.POST, url, params, returns_json)

    def put(
        self, url: str, params: Optional[Params] = None, *, returns_json: bool = True
    ) -> WSFuture[Any]:
        return self._call(WSHTTPVerb.PUT, url, params, returns_json)

    def patch(
        self, url: str, params: Optional[Params] = None, *, returns_json: bool = True
    ) -> WSFuture[Any]:
        return self._call(WSHTTPVerb.PATCH, url, params, returns_json)

    def delete(
        self, url: str, params: Optional[Params] = None, *, returns_json: bool = True
    ) -> WSFuture[Any]:
        return self._call(WSHTTPVerb.DELETE, url, params, returns_json)

    # Typed calls

    def _object_call(
        self,
        verb: WSHTTPVerb,
        url: str,
        model: type[T],
        params: Optional[Params],
        key_path: Optional[str],
    ) -> "WSFuture[T]":
        path = key_path if key_path is not None else self.config.default_object_parsing_key_path
        r = self.build_request(url, verb=verb, params=params)
        return self._resolve(r.fetch().then(lambda json: parse_object(json, model, path)))

    def get_object(
        self,
        url: str,
        model: type[T],
        params: Optional[Params] = None,
        *,
        key_path: Optional[str] = None,
    ) -> "WSFuture[T]":
        """GET ``url`` and validate the body, or the node at ``key_path``, as ``model``."""
        return self._object_call(WSHTTPVerb.GET, url, model, params, key_path)

    def post_object(
        self,
        url: str,
        model: type[T],
        params: Optional[Params] = None,
        *,
        key_path: Optional[str] = None,
    ) -> "WSFuture[T]":
        return self._object_call(WSHTTPVerb.POST, url, model, params, key_path)

    def put_object(
        self,
        url: str,
        model: type[T],
        params: Optional[Params] = None,
        *,
        key_path: Optional[str] = None,
    ) -> "WSFuture[T]":
        return self._object_call(WSHTTPVerb.PUT, url, model, params, key_path)

    def get_collection(
        self,
        url: str,
        model: type[T],
        params: Optional[Params] = None,
        *,
        key_path: Optional[str] = None,
    ) -> "WSFuture[list[T]]":
        """GET ``url`` and validate the list found at ``key_path`` as ``list[model]``.

        Falls back to ``config.default_collection_parsing_key_path`` when no
        key-path is given.
        """
        path = (
            key_path
            if key_path is not None
            else self.config.default_collection_parsing_key_path
        )
        r = self.build_request(url, verb=WSHTTPVerb.GET, params=params)
        return self._resolve(
            r.fetch().then(lambda json: parse_collection(json, model, path))
        )

    # Multipart

    def _multipart_call(
        self,
        verb: WSHTTPVerb,
        url: str,
        params: Optional[Params],
        parts: Sequence[WSMultiPartData],
    ) -> WSFuture[Any]:
        r = self.multipart_request(url, params, parts, verb=verb)
        return self._resolve(r.fetch())

    def post_multipart(
        self,
        url: str,
        params: Optional[Params] = None,
        *,
        name: str,
        data: bytes,
        file_name: str,
        mime_type: str = DEFAULT_MIME_TYPE,
    ) -> WSFuture[Any]:
        """Upload a single file as a multipart POST.

        Args:
            url: path appended to the base URL.
            params: sent as form fields next to the file.
            name: form field name of the file part.
            data: file content.
            file_name: file name announced to the server.
            mime_type: content type of the file part.
        """
        part = WSMultiPartData(name=name, data=data, file_name=file_name, mime_type=mime_type)
        return self._multipart_call(WSHTTPVerb.POST, url, params, [part])

    def post_multipart_parts(
        self,
        url: str,
        params: Optional[Params] = None,
        *,
        parts: Sequence[WSMultiPartData],
    ) -> WSFuture[Any]:
        return self._multipart_call(WSHTTPVerb.POST, url, params, parts)

    def put_multipart(
        self,
        url: str,
        params: Optional[Params] = None,
        *,
        name: str,
        data: bytes,
        file_name: str,
        mime_type: str = DEFAULT_MIME_TYPE,
    ) -> WSFuture[Any]:
        part = WSMultiPartData(name=name, data=data, file_name=file_name, mime_type=mime_type)
        return self._multipart_call(WSHTTPVerb.PUT, url, params, [part])

    def put_multipart_parts(
        self,
        url: str,
        params: Optional[Params] = None,
        *,
        parts: Sequence[WSMultiPartData],
    ) -> WSFuture[Any]:
        return self._multipart_call(WSHTTPVerb.PUT, url, params, parts)

    def patch_multipart(
        self,
        url: str,
        params: Optional[Params] = None,
        *,
        name: str,
        data: bytes,
        file_name: str,
        mime_type: str = DEFAULT_MIME_TYPE,
    ) -> WSFuture[Any]:
        part = WSMultiPartData(name=name, data=data, file_name=file_name, mime_type=mime_type)
        return self._multipart_call(WSHTTPVerb.PATCH, url, params, [part])

    def patch_multipart_parts(
        self,
        url: str,
        params: Optional[Params] = None,
        *,
        parts: Sequence[WSMultiPartData],
    ) -> WSFuture[Any]:
        return self._multipart_call(WSHTTPVerb.PATCH, url, params, parts)

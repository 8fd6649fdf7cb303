import httpx
import pytest

from wsrest import WS, ParameterEncoding, WSHTTPVerb, WSLogLevel, WSMultiPartData
from wsrest._utils import merge_params


class TestMergeParams:
    @pytest.mark.parametrize(
        "params, mandatory, expected",
        [
            ({}, {}, {}),
            ({"page": 1}, {}, {"page": 1}),
            ({}, {"apiKey": "abc"}, {"apiKey": "abc"}),
            ({"page": 1}, {"apiKey": "abc"}, {"page": 1, "apiKey": "abc"}),
            ({"apiKey": "override"}, {"apiKey": "abc"}, {"apiKey": "override"}),
            (None, {"apiKey": "abc"}, {"apiKey": "abc"}),
        ],
    )
    def test_caller_values_win(self, params, mandatory, expected):
        assert merge_params(params, mandatory) == expected

    def test_inputs_are_not_mutated(self):
        params = {"page": 1}
        mandatory = {"apiKey": "abc"}
        merge_params(params, mandatory)
        assert params == {"page": 1}
        assert mandatory == {"apiKey": "abc"}


class TestBuildRequest:
    def test_copies_configuration(self, ws: WS):
        def handler(json):
            return None

        def adapter(request: httpx.Request) -> httpx.Request:
            return request

        ws.config.headers = {"Authorization": "Bearer token"}
        ws.config.log_levels = WSLogLevel.CALLS
        ws.config.post_parameter_encoding = ParameterEncoding.JSON
        ws.config.shows_network_activity_indicator = False
        ws.config.error_handler = handler
        ws.config.request_adapter = adapter
        ws.config.timeout = 5.0

        r = ws.build_request("/items", WSHTTPVerb.POST, {"name": "foo"})

        assert r.base_url == "https://api.example.com"
        assert r.url == "/items"
        assert r.http_verb == WSHTTPVerb.POST
        assert r.params == {"name": "foo"}
        assert r.headers == {"Authorization": "Bearer token"}
        assert r.log_levels == WSLogLevel.CALLS
        assert r.post_parameter_encoding == ParameterEncoding.JSON
        assert r.shows_network_activity_indicator is False
        assert r.error_handler is handler
        assert r.request_adapter is adapter
        assert r.timeout == 5.0
        assert r.returns_json is True
        assert r.multipart_data is None

    def test_merges_mandatory_parameters(self, ws: WS):
        ws.add_mandatory_query_parameter("apiKey", "abc")
        r = ws.build_request("/items", params={"page": 1})
        assert r.params == {"page": 1, "apiKey": "abc"}

    def test_caller_value_overrides_mandatory(self, ws: WS):
        ws.add_mandatory_query_parameter("apiKey", "abc")
        r = ws.build_request("/items", params={"apiKey": "override"})
        assert r.params == {"apiKey": "override"}

    def test_later_configuration_changes_do_not_leak(self, ws: WS):
        ws.config.headers = {"X-Version": "1"}
        ws.add_mandatory_query_parameter("apiKey", "abc")
        first = ws.build_request("/items")

        ws.config.headers["X-Version"] = "2"
        ws.config.base_url = "https://other.example.com"
        ws.add_mandatory_query_parameter("apiKey", "def")
        second = ws.build_request("/items")

        assert first.headers == {"X-Version": "1"}
        assert first.base_url == "https://api.example.com"
        assert first.params == {"apiKey": "abc"}
        assert second.headers == {"X-Version": "2"}
        assert second.base_url == "https://other.example.com"
        assert second.params == {"apiKey": "def"}

    def test_requests_are_independent(self, ws: WS):
        first = ws.build_request("/a", params={"page": 1})
        second = ws.build_request("/b")
        first.headers["X-Only-First"] = "1"
        first.params["extra"] = True
        assert second.headers == {}
        assert second.params == {}
        assert ws.config.headers == {}

    def test_multipart_request_uses_given_verb(self, ws: WS):
        part = WSMultiPartData(name="file", data=b"x", file_name="x.txt")
        r = ws.multipart_request("/upload", None, [part], verb=WSHTTPVerb.PATCH)
        assert r.http_verb == WSHTTPVerb.PATCH
        assert r.multipart_data == [part]
        assert r.is_multipart


class TestBuildHttpxRequest:
    @pytest.mark.asyncio
    async def test_get_sends_query_parameters(self, ws: WS):
        ws.add_mandatory_query_parameter("apiKey", "abc")
        async with httpx.AsyncClient() as client:
            request = ws.build_request("/items", params={"page": 1}).build(client)

        assert request.method == "GET"
        assert request.url.scheme == "https"
        assert request.url.host == "api.example.com"
        assert request.url.path == "/items"
        assert dict(request.url.params) == {"page": "1", "apiKey": "abc"}

    @pytest.mark.asyncio
    async def test_delete_sends_query_parameters(self, ws: WS):
        async with httpx.AsyncClient() as client:
            request = ws.build_request("/items/1", WSHTTPVerb.DELETE, {"force": "true"}).build(
                client
            )
        assert request.method == "DELETE"
        assert request.url.params["force"] == "true"
        assert request.read() == b""

    @pytest.mark.asyncio
    async def test_post_form_body(self, ws: WS):
        async with httpx.AsyncClient() as client:
            request = ws.build_request("/items", WSHTTPVerb.POST, {"name": "foo"}).build(
                client
            )
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.read() == b"name=foo"
        assert not request.url.params

    @pytest.mark.asyncio
    async def test_post_json_body(self, ws: WS):
        ws.config.post_parameter_encoding = ParameterEncoding.JSON
        ws.add_mandatory_query_parameter("apiKey", "abc")
        async with httpx.AsyncClient() as client:
            request = ws.build_request("/items", WSHTTPVerb.PUT, {"name": "foo"}).build(
                client
            )
        assert request.method == "PUT"
        assert request.headers["Content-Type"] == "application/json"
        assert httpx.Response(200, content=request.read()).json() == {
            "name": "foo",
            "apiKey": "abc",
        }

    @pytest.mark.asyncio
    async def test_post_without_parameters_has_no_body(self, ws: WS):
        async with httpx.AsyncClient() as client:
            request = ws.build_request("/ping", WSHTTPVerb.POST).build(client)
        assert request.read() == b""

    @pytest.mark.asyncio
    async def test_absolute_url_is_kept(self, ws: WS):
        async with httpx.AsyncClient() as client:
            request = ws.build_request("https://cdn.example.com/file.json").build(client)
        assert str(request.url) == "https://cdn.example.com/file.json"

    @pytest.mark.asyncio
    async def test_headers_and_adapter(self, ws: WS):
        def sign(request: httpx.Request) -> httpx.Request:
            request.headers["X-Signature"] = "signed"
            return request

        ws.config.headers = {"Authorization": "Bearer token"}
        ws.config.request_adapter = sign
        async with httpx.AsyncClient() as client:
            request = ws.build_request("/items").build(client)

        assert request.headers["Authorization"] == "Bearer token"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["X-Signature"] == "signed"

    @pytest.mark.asyncio
    async def test_single_file_multipart_body(self, ws: WS):
        part = WSMultiPartData(
            name="avatar", data=b"\x89PNG-bytes", file_name="me.png", mime_type="image/png"
        )
        async with httpx.AsyncClient() as client:
            request = ws.multipart_request("/upload", None, [part]).build(client)

        content_type = request.headers["Content-Type"]
        assert content_type.startswith("multipart/form-data; boundary=")
        boundary = content_type.split("boundary=")[1].encode()

        body = request.read()
        assert body.count(b"--" + boundary + b"\r\n") == 1
        assert body.count(b"Content-Disposition") == 1
        assert b'name="avatar"; filename="me.png"' in body
        assert b"Content-Type: image/png" in body
        assert b"\x89PNG-bytes" in body

    @pytest.mark.asyncio
    async def test_multipart_parameters_are_form_fields(self, ws: WS):
        parts = [
            WSMultiPartData(name="first", data=b"1", file_name="1.txt", mime_type="text/plain"),
            WSMultiPartData(name="second", data=b"2", file_name="2.txt", mime_type="text/plain"),
        ]
        async with httpx.AsyncClient() as client:
            request = ws.multipart_request("/upload", {"album": 7}, parts).build(client)

        body = request.read()
        assert body.count(b"Content-Disposition") == 3
        assert b'name="album"\r\n\r\n7' in body
        assert body.index(b'name="first"') < body.index(b'name="second"')

    @pytest.mark.asyncio
    async def test_multipart_fields_render_like_form_fields(self, ws: WS):
        part = WSMultiPartData(name="file", data=b"x", file_name="x.txt")
        params = {"note": None, "flag": True, "tags": ["a", "b"], "meta": {"k": 1}}
        async with httpx.AsyncClient() as client:
            multipart = ws.multipart_request("/upload", params, [part]).build(client)
            form = ws.build_request("/upload", WSHTTPVerb.POST, params).build(client)

        body = multipart.read()
        assert b'name="note"\r\n\r\n\r\n' in body
        assert b'name="flag"\r\n\r\ntrue\r\n' in body
        assert b'name="tags"\r\n\r\na\r\n' in body
        assert b'name="tags"\r\n\r\nb\r\n' in body
        assert b"name=\"meta\"\r\n\r\n{'k': 1}\r\n" in body
        assert form.read() == (
            b"note=&flag=true&tags=a&tags=b&meta=%7B%27k%27%3A+1%7D"
        )

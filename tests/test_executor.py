"""Tests for the request executor: URL building, decoding and errors."""

import asyncio
import json

import httpx
import pytest

from fetchserp.config import ClientConfig
from fetchserp.errors import (
    APIError,
    DecodeError,
    FetchSerpError,
    RateLimitError,
    RequestTimeoutError,
    TransportError,
    UnauthorizedError,
)
from fetchserp.executor import RequestExecutor
from fetchserp.models import RequestDescriptor


def make_executor(transport, timeout=30000, base_url="https://api.test"):
    return RequestExecutor(
        ClientConfig(api_key="secret", base_url=base_url, timeout=timeout),
        transport=transport,
    )


class TestQueryEncoding:
    """Test query parameter encoding."""

    def test_list_values_repeat_with_brackets(self):
        """List values become repeated name[] entries in order."""
        request = RequestDescriptor("GET", "/api/v1/keywords_search_volume", {
            "keywords": ["a", "b"],
            "country": "us",
        })
        assert request.query_items() == [
            ("keywords[]", "a"),
            ("keywords[]", "b"),
            ("country", "us"),
        ]

    def test_none_values_are_skipped(self):
        request = RequestDescriptor("GET", "/api/v1/serp", {
            "query": "seo",
            "search_engine": None,
            "pages_number": None,
        })
        assert request.query_items() == [("query", "seo")]

    def test_scalars_become_strings(self):
        request = RequestDescriptor("GET", "/x", {"pages_number": 3, "flag": True, "off": False})
        assert request.query_items() == [
            ("pages_number", "3"),
            ("flag", "true"),
            ("off", "false"),
        ]

    def test_tuple_treated_as_sequence(self):
        request = RequestDescriptor("GET", "/x", {"keywords": ("x", "y")})
        assert request.query_items() == [("keywords[]", "x"), ("keywords[]", "y")]

    def test_unsupported_method_rejected(self):
        with pytest.raises(ValueError):
            RequestDescriptor("DELETE", "/api/v1/user")

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            RequestDescriptor("GET", "")

    def test_method_is_uppercased(self):
        assert RequestDescriptor("get", "/x").method == "GET"


class TestRequestShape:
    """Test what actually goes over the wire."""

    @pytest.mark.asyncio
    async def test_url_and_query_string(self, recorder):
        executor = make_executor(recorder.transport)
        await executor.execute(RequestDescriptor("GET", "/api/v1/keywords_search_volume", {
            "keywords": ["a", "b"],
        }))

        request = recorder.last
        assert request.url.scheme == "https"
        assert request.url.host == "api.test"
        assert request.url.path == "/api/v1/keywords_search_volume"
        assert request.url.params.multi_items() == [("keywords[]", "a"), ("keywords[]", "b")]

    @pytest.mark.asyncio
    async def test_trailing_slash_on_base_url(self, recorder):
        executor = make_executor(recorder.transport, base_url="https://api.test/")
        await executor.execute(RequestDescriptor("GET", "/api/v1/user"))
        assert recorder.last.url.path == "/api/v1/user"

    @pytest.mark.asyncio
    async def test_auth_and_content_type_headers(self, recorder):
        executor = make_executor(recorder.transport)
        await executor.execute(RequestDescriptor("GET", "/api/v1/user"))

        assert recorder.last.headers["Authorization"] == "Bearer secret"
        assert recorder.last.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_post_body_serialized_as_json(self, recorder):
        executor = make_executor(recorder.transport)
        await executor.execute(RequestDescriptor(
            "POST", "/api/v1/scrape_js", {"url": "https://example.com"}, {"js_script": "1+1"},
        ))

        request = recorder.last
        assert request.method == "POST"
        assert json.loads(request.content) == {"js_script": "1+1"}

    @pytest.mark.asyncio
    async def test_no_body_when_absent(self, recorder):
        executor = make_executor(recorder.transport)
        await executor.execute(RequestDescriptor("GET", "/api/v1/user"))
        assert recorder.last.content == b""

    @pytest.mark.asyncio
    async def test_exactly_one_call(self, recorder):
        executor = make_executor(recorder.transport)
        await executor.execute(RequestDescriptor("GET", "/api/v1/user"))
        assert recorder.calls == 1


class TestDecoding:
    """Test content-type based decoding."""

    @pytest.mark.asyncio
    async def test_json_response_parsed(self, recorder):
        recorder.respond(200, json={"result": 1})
        executor = make_executor(recorder.transport)

        assert await executor.execute(RequestDescriptor("GET", "/api/v1/user")) == {"result": 1}

    @pytest.mark.asyncio
    async def test_json_with_charset(self, recorder):
        recorder.respond(
            200, text='{"ok": true}',
            headers={"content-type": "application/json; charset=utf-8"},
        )
        executor = make_executor(recorder.transport)

        assert await executor.execute(RequestDescriptor("GET", "/x")) == {"ok": True}

    @pytest.mark.asyncio
    async def test_text_response_returned_raw(self, recorder):
        recorder.respond(200, text="<html>results</html>", headers={"content-type": "text/html"})
        executor = make_executor(recorder.transport)

        assert await executor.execute(RequestDescriptor("GET", "/api/v1/serp_html")) == "<html>results</html>"

    @pytest.mark.asyncio
    async def test_malformed_json_raises_decode_error(self, recorder):
        recorder.respond(200, text="{not json", headers={"content-type": "application/json"})
        executor = make_executor(recorder.transport)

        with pytest.raises(DecodeError) as exc_info:
            await executor.execute(RequestDescriptor("GET", "/x"))

        assert exc_info.value.status_code == 200
        assert exc_info.value.text == "{not json"


class TestErrorResponses:
    """Test non-2xx handling."""

    @pytest.mark.asyncio
    async def test_error_field_becomes_message(self, recorder):
        recorder.respond(404, json={"error": "not found"})
        executor = make_executor(recorder.transport)

        with pytest.raises(APIError) as exc_info:
            await executor.execute(RequestDescriptor("GET", "/api/v1/moz"))

        assert str(exc_info.value) == "not found"
        assert exc_info.value.status_code == 404
        assert exc_info.value.response == {"error": "not found"}

    @pytest.mark.asyncio
    async def test_reason_phrase_fallback(self, recorder):
        recorder.respond(500, json={"detail": "boom"})
        executor = make_executor(recorder.transport)

        with pytest.raises(APIError) as exc_info:
            await executor.execute(RequestDescriptor("GET", "/x"))

        assert str(exc_info.value) == "Internal Server Error"
        assert exc_info.value.response == {"detail": "boom"}

    @pytest.mark.asyncio
    async def test_text_error_body_kept(self, recorder):
        recorder.respond(502, text="upstream down")
        executor = make_executor(recorder.transport)

        with pytest.raises(APIError) as exc_info:
            await executor.execute(RequestDescriptor("GET", "/x"))

        assert str(exc_info.value) == "Bad Gateway"
        assert exc_info.value.response == "upstream down"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,error_type", [
        (401, UnauthorizedError),
        (403, UnauthorizedError),
        (429, RateLimitError),
        (400, APIError),
    ])
    async def test_status_classification(self, recorder, status, error_type):
        recorder.respond(status, json={"error": "nope"})
        executor = make_executor(recorder.transport)

        with pytest.raises(error_type) as exc_info:
            await executor.execute(RequestDescriptor("GET", "/x"))

        assert exc_info.value.status_code == status
        assert isinstance(exc_info.value, APIError)


class TestTransportFailures:
    """Test timeouts and network errors."""

    @pytest.mark.asyncio
    async def test_timeout_cancels_request(self):
        state = {"started": False, "finished": False}

        async def slow_handler(request):
            state["started"] = True
            await asyncio.sleep(1)
            state["finished"] = True
            return httpx.Response(200, json={"late": True})

        executor = make_executor(httpx.MockTransport(slow_handler), timeout=50)

        with pytest.raises(RequestTimeoutError) as exc_info:
            await executor.execute(RequestDescriptor("GET", "/api/v1/serp_js"))

        assert isinstance(exc_info.value, TransportError)
        assert exc_info.value.status_code is None

        # Give a late response the chance to land; it must not.
        await asyncio.sleep(1.2)
        assert state["started"] is True
        assert state["finished"] is False

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def failing_handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        executor = make_executor(httpx.MockTransport(failing_handler))

        with pytest.raises(TransportError) as exc_info:
            await executor.execute(RequestDescriptor("GET", "/api/v1/user"))

        assert not isinstance(exc_info.value, RequestTimeoutError)
        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_httpx_timeout_maps_to_timeout_error(self):
        def timeout_handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        executor = make_executor(httpx.MockTransport(timeout_handler))

        with pytest.raises(RequestTimeoutError):
            await executor.execute(RequestDescriptor("GET", "/api/v1/user"))


class TestConcurrency:
    """Concurrent calls on one executor are independent."""

    @pytest.mark.asyncio
    async def test_concurrent_calls(self):
        async def echo_handler(request):
            await asyncio.sleep(0.01)
            return httpx.Response(200, json={"query": request.url.params["query"]})

        executor = make_executor(httpx.MockTransport(echo_handler))

        results = await asyncio.gather(*[
            executor.execute(RequestDescriptor("GET", "/api/v1/serp", {"query": f"q{i}"}))
            for i in range(5)
        ])

        assert results == [{"query": f"q{i}"} for i in range(5)]

    def test_errors_share_base(self):
        for error_type in (APIError, DecodeError, TransportError):
            assert issubclass(error_type, FetchSerpError)

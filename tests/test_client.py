"""Tests for the Google Chat request dispatcher."""

import threading

import httpx
import pytest

from mcp_google_chat.api import client
from mcp_google_chat.api.auth import OAuthTokenProvider, StrategyKind
from mcp_google_chat.api.client import (
    ChatApiContext,
    get_api_context,
    is_client_initialized,
    make_api_request,
    set_api_context,
)
from mcp_google_chat.config import API_BASE_URL, REQUEST_TIMEOUT
from mcp_google_chat.exceptions import (
    AuthExpiredError,
    ConfigurationError,
    TransportError,
    UnexpectedError,
    UpstreamHTTPError,
)


class TestRequest:
    """Tests for a single dispatched request."""

    @pytest.mark.asyncio
    async def test_attaches_bearer_token(self, chat_api):
        """Every request carries the token from the provider."""
        await make_api_request("spaces")
        assert chat_api.last_request.headers["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_paths_resolve_against_base_url(self, chat_api):
        """Resource paths, including custom methods, are appended to the base URL."""
        await make_api_request("spaces:search", params={"query": "eng"})
        url = chat_api.last_request.url
        assert str(url).startswith(f"{API_BASE_URL}/spaces:search")
        assert url.params["query"] == "eng"

    @pytest.mark.asyncio
    async def test_json_body_only_for_write_methods(self, chat_api):
        """POST sends the body as JSON; GET sends none."""
        await make_api_request("spaces", method="POST", data={"displayName": "X"})
        assert chat_api.last_json == {"displayName": "X"}

        await make_api_request("spaces", method="GET", data={"ignored": True})
        assert chat_api.last_request.content == b""

    @pytest.mark.asyncio
    async def test_decodes_json(self, chat_api):
        """A JSON body is returned decoded."""
        chat_api.reply(json_body={"name": "spaces/AAAA"})
        assert await make_api_request("spaces/AAAA") == {"name": "spaces/AAAA"}

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self, chat_api):
        """DELETE responses without content decode to an empty dict."""
        chat_api.reply(204)
        assert await make_api_request("spaces/AAAA", method="DELETE") == {}

    @pytest.mark.asyncio
    async def test_non_json_success_is_wrapped(self, chat_api):
        """A 2xx body that is not JSON is returned as raw text."""
        chat_api.reply(200, content=b"plain text")
        assert await make_api_request("spaces") == {"status": "success", "raw_response": "plain text"}

    @pytest.mark.asyncio
    async def test_unsupported_method(self, chat_api):
        """Only the five REST verbs are accepted."""
        with pytest.raises(UnexpectedError, match="Unsupported method"):
            await make_api_request("spaces", method="HEAD")
        assert chat_api.requests == []


class TestFailures:
    """Tests for failures surfaced by the dispatcher."""

    @pytest.mark.asyncio
    async def test_http_error_carries_status_and_message(self, chat_api):
        """Non-2xx responses raise UpstreamHTTPError with the upstream message."""
        chat_api.reply(404, json_body={"error": {"code": 404, "message": "Space not found"}})

        with pytest.raises(UpstreamHTTPError) as excinfo:
            await make_api_request("spaces/missing")

        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "Space not found"
        assert excinfo.value.payload["error"]["code"] == 404

    @pytest.mark.asyncio
    async def test_http_error_with_non_json_body(self, chat_api):
        """An error body that is not JSON leaves the message empty."""
        chat_api.reply(502, content=b"<html>Bad Gateway</html>")

        with pytest.raises(UpstreamHTTPError) as excinfo:
            await make_api_request("spaces")

        assert excinfo.value.status_code == 502
        assert excinfo.value.message is None
        assert str(excinfo.value) == "API request failed: 502 - Unknown error"

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self, chat_api):
        """A failed attempt is surfaced after exactly one request."""
        chat_api.reply(503, json_body={"error": {"message": "unavailable"}})

        with pytest.raises(UpstreamHTTPError):
            await make_api_request("spaces")
        assert len(chat_api.requests) == 1

    @pytest.mark.asyncio
    async def test_timeout(self, chat_api):
        """Timeouts become TransportError of kind timeout."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        chat_api.handler = handler
        with pytest.raises(TransportError) as excinfo:
            await make_api_request("spaces")
        assert excinfo.value.kind == TransportError.TIMEOUT

    @pytest.mark.asyncio
    async def test_connection_refused(self, chat_api):
        """Connection failures become TransportError of kind network."""

        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        chat_api.handler = handler
        with pytest.raises(TransportError) as excinfo:
            await make_api_request("spaces")
        assert excinfo.value.kind == TransportError.NETWORK

    @pytest.mark.asyncio
    async def test_token_redacted_from_errors(self, chat_api):
        """A token echoed in a transport error is not propagated."""

        def handler(request):
            raise httpx.ConnectError("failed with test-token", request=request)

        chat_api.handler = handler
        with pytest.raises(TransportError) as excinfo:
            await make_api_request("spaces")
        assert "test-token" not in str(excinfo.value)
        assert "[REDACTED]" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_missing_token_fails_before_sending(self):
        """Without a token no request is made."""
        requests = []
        context = ChatApiContext(
            OAuthTokenProvider(None),
            transport=httpx.MockTransport(lambda r: requests.append(r) or httpx.Response(200)),
        )
        with pytest.raises(AuthExpiredError):
            await context.request("spaces")
        assert requests == []


class TestApiContext:
    """Tests for the process-wide client state."""

    def test_default_timeout(self):
        """The client applies the fixed request timeout."""
        context = ChatApiContext(OAuthTokenProvider("tok"))
        assert REQUEST_TIMEOUT == 30.0
        assert context._http_client.timeout.read == REQUEST_TIMEOUT
        assert context._http_client.timeout.connect == REQUEST_TIMEOUT

    def test_initialized_once(self, monkeypatch):
        """Credentials are resolved on first use and then memoized."""
        monkeypatch.setenv("GOOGLE_OAUTH_TOKEN", "env-token")
        assert not is_client_initialized()

        first = get_api_context()
        monkeypatch.setenv("GOOGLE_OAUTH_TOKEN", "changed")
        second = get_api_context()

        assert first is second
        assert first.strategy.kind is StrategyKind.OAUTH_TOKEN
        assert first.strategy.oauth_token == "env-token"
        assert is_client_initialized()

    def test_concurrent_first_use_shares_one_context(self, monkeypatch):
        """Threads racing on first use all see the same instance."""
        monkeypatch.setenv("GOOGLE_OAUTH_TOKEN", "env-token")
        calls = []
        original = client.resolve_credentials

        def counting_resolve(*args, **kwargs):
            calls.append(1)
            return original(*args, **kwargs)

        monkeypatch.setattr(client, "resolve_credentials", counting_resolve)

        results = []
        threads = [threading.Thread(target=lambda: results.append(get_api_context())) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert all(result is results[0] for result in results)

    def test_missing_credentials_raise(self):
        """First use without credentials raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            get_api_context()
        assert not is_client_initialized()

    def test_set_api_context_replaces_global(self):
        """An injected context is returned as-is."""
        context = ChatApiContext(OAuthTokenProvider("tok"))
        set_api_context(context)
        assert get_api_context() is context

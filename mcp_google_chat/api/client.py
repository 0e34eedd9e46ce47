# Copyright 2025 CNOE
# SPDX-License-Identifier: Apache-2.0

"""Google Chat API client

This module provides the single path every tool call goes through to reach the
Google Chat API. It attaches a fresh bearer token to each request, applies the
request timeout, and raises the package exceptions on failure. There is no
retry at this layer.
"""

import logging
import threading
from typing import Any, Dict, Optional

import httpx

from mcp_google_chat.api.auth import (
    CredentialStrategy,
    TokenProvider,
    build_token_provider,
    resolve_credentials,
)
from mcp_google_chat.config import API_BASE_URL, REQUEST_TIMEOUT
from mcp_google_chat.exceptions import TransportError, UnexpectedError, UpstreamHTTPError
from mcp_google_chat.utils.errors import extract_error_message

logger = logging.getLogger("mcp-google-chat")

SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
BODY_METHODS = ("POST", "PUT", "PATCH")


def _redact(text: str, token: Optional[str]) -> str:
    if token and token in text:
        return text.replace(token, "[REDACTED]")
    return text


class ChatApiContext:
    """Process-wide state for talking to Google Chat: credentials plus one HTTP client."""

    def __init__(
        self,
        token_provider: TokenProvider,
        strategy: Optional[CredentialStrategy] = None,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token_provider = token_provider
        self.strategy = strategy
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
        )

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        path: str,
        method: str = "GET",
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make a request to the Google Chat API

        Args:
            path: Resource path relative to the API base URL (e.g. 'spaces/AAAA')
            method: HTTP method (default: GET)
            data: JSON body for POST/PUT/PATCH requests (optional)
            params: Query parameters for the request (optional)

        Returns:
            The decoded JSON body, or an empty dict for empty responses

        Raises:
            UpstreamHTTPError: On any non-2xx response
            TransportError: On timeout or connection failure
            AuthExpiredError, AuthExchangeError: If no token can be obtained
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise UnexpectedError(f"Unsupported method: {method}")

        token = await self.token_provider.get_token()
        url = self.url_for(path)

        # DO NOT log headers, they carry the bearer token
        logger.debug(f"Preparing {method} request to {url}")
        if params:
            logger.debug(f"Request parameters: {params}")
        if data:
            logger.debug(f"Request data: {data}")

        request_kwargs: Dict[str, Any] = {
            "headers": {"Authorization": f"Bearer {token}"},
            "params": params or None,
        }
        if method in BODY_METHODS and data is not None:
            request_kwargs["json"] = data

        try:
            response = await self._http_client.request(method, url, **request_kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Request to {url} timed out")
            raise TransportError(TransportError.TIMEOUT, _redact(str(e), token)) from e
        except httpx.ConnectError as e:
            error_message = _redact(str(e), token)
            logger.error(f"Connection error: {error_message}")
            raise TransportError(TransportError.NETWORK, error_message) from e
        except httpx.RequestError as e:
            error_message = _redact(str(e), token)
            logger.error(f"Request error: {error_message}")
            raise UnexpectedError(error_message) from e

        logger.debug(f"Response status code: {response.status_code}")

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return {}
            try:
                return response.json()
            except ValueError:
                logger.warning("Request successful but could not parse JSON response")
                return {"status": "success", "raw_response": response.text}

        try:
            payload = response.json()
        except ValueError:
            payload = None
            logger.error(f"Error response (not JSON): {response.text[:200]}")
        else:
            logger.error(f"Error details: {payload}")
        raise UpstreamHTTPError(response.status_code, extract_error_message(payload), payload)

    async def aclose(self) -> None:
        await self._http_client.aclose()


_api_context: Optional[ChatApiContext] = None
_api_context_lock = threading.Lock()


def get_api_context() -> ChatApiContext:
    """Get the global ChatApiContext, creating it on first use.

    Credentials are resolved at most once; concurrent first callers share the
    same instance.

    Raises:
        ConfigurationError: If no usable credentials are configured.
    """
    global _api_context
    if _api_context is None:
        with _api_context_lock:
            if _api_context is None:
                strategy = resolve_credentials()
                _api_context = ChatApiContext(build_token_provider(strategy), strategy=strategy)
                logger.info(f"Google Chat API client initialized ({strategy.kind.value})")
    return _api_context


def set_api_context(context: Optional[ChatApiContext]) -> None:
    """Install (or clear, with None) the global ChatApiContext."""
    global _api_context
    with _api_context_lock:
        _api_context = context


def is_client_initialized() -> bool:
    return _api_context is not None


async def make_api_request(
    path: str,
    method: str = "GET",
    data: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """Send a request through the global ChatApiContext."""
    return await get_api_context().request(path, method=method, data=data, params=params)

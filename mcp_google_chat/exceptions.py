"""Exceptions raised by the Google Chat MCP request layer."""

from typing import Any, Optional


class GoogleChatError(Exception):
    """Base class for every failure raised by this package."""

    pass


class ConfigurationError(GoogleChatError):
    """Raised when credentials are missing or cannot be parsed."""

    pass


class AuthExpiredError(GoogleChatError):
    """Raised when the configured OAuth token is no longer available."""

    pass


class AuthExchangeError(GoogleChatError):
    """Raised when the service account exchange does not yield a token."""

    pass


class TransportError(GoogleChatError):
    """Raised when a request never produced an HTTP response.

    Attributes:
        kind: "timeout" when the request ran past its deadline, "network" when
            the host could not be resolved or refused the connection.
    """

    TIMEOUT = "timeout"
    NETWORK = "network"

    def __init__(self, kind: str, message: str):
        self.kind = kind
        super().__init__(message)


class UpstreamHTTPError(GoogleChatError):
    """Raised for any non-2xx response from the Google Chat API.

    Attributes:
        status_code: HTTP status returned by the API
        message: Error message extracted from the response body, if any
        payload: Decoded response body (or None when it was not JSON)
    """

    def __init__(self, status_code: int, message: Optional[str] = None, payload: Any = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(f"API request failed: {status_code} - {message or 'Unknown error'}")


class UnexpectedError(GoogleChatError):
    """Raised for failures that fit no other category."""

    pass

"""Error classification for Google Chat MCP tools.

Every failure raised while serving a tool call is turned into one message from
a fixed set. Agents key their retry behaviour off these strings, so the wording
must stay stable.
"""

from typing import Any, Optional

import httpx

from mcp_google_chat.exceptions import TransportError, UpstreamHTTPError


def extract_error_message(payload: Any) -> Optional[str]:
    """Pull the error message out of a Google API error body.

    Prefers ``error.message`` and falls back to a top-level ``message``.
    """
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if payload.get("message"):
        return str(payload["message"])
    return None


def _status_message(status: int, message: Optional[str]) -> str:
    message = message or "Unknown error"

    if status == 400:
        return f"Error: Bad request - {message}. Check your parameters and try again."
    if status == 401:
        return "Error: Authentication failed. Please check your credentials and ensure they have the required permissions."
    if status == 403:
        return f"Error: Permission denied - {message}. Ensure the app has the required Chat API scopes."
    if status == 404:
        return f"Error: Resource not found - {message}. Check that the space/message/member ID is correct."
    if status == 409:
        return f"Error: Conflict - {message}. The resource may already exist or be in an invalid state."
    if status == 429:
        return "Error: Rate limit exceeded. Please wait before making more requests."
    if status == 500:
        return "Error: Google Chat API server error. Please try again later."
    if status == 503:
        return "Error: Google Chat API is temporarily unavailable. Please try again later."
    return f"Error: API request failed ({status}) - {message}"


def _response_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def handle_api_error(error: BaseException) -> str:
    """Map any failure to a user-facing error message.

    Args:
        error: The exception raised while serving the tool call

    Returns:
        A display string starting with "Error:"
    """
    if isinstance(error, UpstreamHTTPError):
        return _status_message(error.status_code, error.message)
    if isinstance(error, httpx.HTTPStatusError):
        payload = _response_payload(error.response)
        return _status_message(error.response.status_code, extract_error_message(payload))

    if isinstance(error, TransportError):
        if error.kind == TransportError.TIMEOUT:
            return "Error: Request timed out. Please try again."
        return "Error: Unable to connect to Google Chat API. Check your network connection."
    if isinstance(error, httpx.TimeoutException):
        return "Error: Request timed out. Please try again."
    if isinstance(error, httpx.ConnectError):
        return "Error: Unable to connect to Google Chat API. Check your network connection."

    return f"Error: Unexpected error - {error}"

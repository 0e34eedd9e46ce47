"""Shared helpers for Google Chat tools."""

import logging
from typing import Annotated, Any, Dict, Optional

from mcp.types import CallToolResult, TextContent
from pydantic import Field

from mcp_google_chat.config import MAX_PAGE_SIZE, is_read_only_mode
from mcp_google_chat.models import ResponseFormat
from mcp_google_chat.utils.errors import handle_api_error

logger = logging.getLogger("mcp-google-chat-tools")

# Parameter types shared by several tools
ResponseFormatParam = Annotated[
    ResponseFormat,
    Field(description="Output format: 'markdown' for human-readable or 'json' for machine-readable"),
]
PageSizeParam = Annotated[
    int,
    Field(description=f"Maximum number of results to return (1-{MAX_PAGE_SIZE})", ge=1, le=MAX_PAGE_SIZE),
]
PageTokenParam = Annotated[
    Optional[str],
    Field(description="Token for pagination to get the next page of results"),
]
SpaceNameParam = Annotated[
    str,
    Field(description="The resource name of the space (e.g., 'spaces/AAAA1234567')", min_length=1),
]
MessageNameParam = Annotated[
    str,
    Field(description="The resource name of the message (e.g., 'spaces/AAAA/messages/BBBB')", min_length=1),
]


def success_result(text: str, structured: Optional[Dict[str, Any]] = None) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=text)],
        structuredContent=structured,
    )


def error_result(text: str) -> CallToolResult:
    return CallToolResult(isError=True, content=[TextContent(type="text", text=text)])


def failure(tool_name: str, error: Exception) -> CallToolResult:
    """Classify an exception raised while serving a tool and return it as a failed result."""
    message = handle_api_error(error)
    logger.error(f"{tool_name} failed: {message}")
    return error_result(message)


def read_only_guard(tool_name: str) -> Optional[CallToolResult]:
    """Return a failed result when write tools are disabled, otherwise None."""
    if is_read_only_mode():
        logger.warning(f"{tool_name} blocked: read-only mode is enabled")
        return error_result(
            "Error: Google Chat MCP is in read-only mode. Write operations are disabled. "
            "Set MCP_GOOGLE_CHAT_READ_ONLY=false to enable write operations."
        )
    return None


def query_params(**params: Any) -> Dict[str, Any]:
    """Build query parameters, dropping values that were not supplied.

    None, empty strings and False are left out, so optional flags are only
    sent when set.
    """
    return {key: value for key, value in params.items() if value is not None and value != "" and value is not False}

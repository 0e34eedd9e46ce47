"""
Google Chat MCP Server

This server provides a Model Context Protocol (MCP) interface to the Google
Chat API, allowing large language models and AI assistants to manage spaces,
messages, memberships, reactions and attachments.
"""

import logging
from typing import Any, Callable, List, Literal, Tuple

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.requests import Request
from starlette.responses import JSONResponse

from mcp_google_chat.config import SERVICE_NAME
from mcp_google_chat.tools import attachments, members, messages, reactions, spaces

logger = logging.getLogger("mcp-google-chat")

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)
CREATES = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=True)
UPDATES = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=True, openWorldHint=True)
DELETES = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True, openWorldHint=True)

# (handler, tool name, title, annotations)
TOOLS: List[Tuple[Callable[..., Any], str, str, ToolAnnotations]] = [
    # Spaces
    (spaces.list_spaces, "google_chat_list_spaces", "List Google Chat Spaces", READ_ONLY),
    (spaces.get_space, "google_chat_get_space", "Get Google Chat Space", READ_ONLY),
    (spaces.create_space, "google_chat_create_space", "Create Google Chat Space", CREATES),
    (spaces.update_space, "google_chat_update_space", "Update Google Chat Space", UPDATES),
    (spaces.delete_space, "google_chat_delete_space", "Delete Google Chat Space", DELETES),
    (spaces.search_spaces, "google_chat_search_spaces", "Search Google Chat Spaces", READ_ONLY),
    (spaces.find_direct_message, "google_chat_find_direct_message", "Find Direct Message Space", READ_ONLY),
    # Messages
    (messages.list_messages, "google_chat_list_messages", "List Google Chat Messages", READ_ONLY),
    (messages.get_message, "google_chat_get_message", "Get Google Chat Message", READ_ONLY),
    (messages.create_message, "google_chat_create_message", "Send Google Chat Message", CREATES),
    (messages.update_message, "google_chat_update_message", "Update Google Chat Message", UPDATES),
    (messages.delete_message, "google_chat_delete_message", "Delete Google Chat Message", DELETES),
    # Members
    (members.list_members, "google_chat_list_members", "List Google Chat Space Members", READ_ONLY),
    (members.get_member, "google_chat_get_member", "Get Google Chat Space Member", READ_ONLY),
    (members.create_member, "google_chat_create_member", "Add Google Chat Space Member", CREATES),
    (members.delete_member, "google_chat_delete_member", "Remove Google Chat Space Member", DELETES),
    # Reactions
    (reactions.list_reactions, "google_chat_list_reactions", "List Google Chat Message Reactions", READ_ONLY),
    (reactions.create_reaction, "google_chat_create_reaction", "Add Google Chat Reaction", CREATES),
    (reactions.delete_reaction, "google_chat_delete_reaction", "Remove Google Chat Reaction", DELETES),
    # Attachments
    (attachments.get_attachment, "google_chat_get_attachment", "Get Google Chat Attachment", READ_ONLY),
    (attachments.upload_attachment, "google_chat_upload_attachment", "Upload Google Chat Attachment", CREATES),
]


async def health_check(request: Request) -> JSONResponse:
    """Liveness probe served next to the MCP endpoint on HTTP transports."""
    return JSONResponse({"status": "ok", "service": SERVICE_NAME})


def register_tools(server: FastMCP) -> None:
    """Register every Google Chat tool on the given server."""
    for handler, name, title, annotations in TOOLS:
        server.add_tool(
            handler,
            name=name,
            title=title,
            annotations=annotations,
            structured_output=False,
        )
    logger.info(f"Registered {len(TOOLS)} Google Chat tools")


def create_server(
    host: str = "127.0.0.1",
    port: int = 8000,
    log_level: LogLevel = "WARNING",
    debug: bool = False,
) -> FastMCP:
    """Create and configure the Google Chat MCP server."""
    server = FastMCP(
        name="mcp-google-chat",
        host=host,
        port=port,
        debug=debug,
        log_level=log_level,
    )
    register_tools(server)
    server.custom_route("/health", methods=["GET"])(health_check)
    return server

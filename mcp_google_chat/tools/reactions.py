"""Reaction operations for Google Chat MCP"""

import logging
from typing import Annotated, Optional

from mcp.types import CallToolResult
from pydantic import Field

from mcp_google_chat.api.client import make_api_request
from mcp_google_chat.config import DEFAULT_PAGE_SIZE
from mcp_google_chat.models import Page, ResponseFormat
from mcp_google_chat.tools.common import (
    MessageNameParam,
    PageSizeParam,
    PageTokenParam,
    ResponseFormatParam,
    failure,
    query_params,
    read_only_guard,
    success_result,
)
from mcp_google_chat.utils.formatters import EntityKind, render_collection, render_entity

logger = logging.getLogger("mcp-google-chat-reactions")


async def list_reactions(
    message_name: MessageNameParam,
    page_size: PageSizeParam = DEFAULT_PAGE_SIZE,
    page_token: PageTokenParam = None,
    filter: Annotated[
        Optional[str],
        Field(description="Filter for reactions (e.g., 'emoji.unicode = \"\U0001F44D\"')"),
    ] = None,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """List reactions on a Google Chat message, grouped by emoji.

    Examples:
        - "List all reactions" -> message_name='spaces/AAAA/messages/BBBB'
    """
    logger.debug(f"list_reactions called with message_name={message_name}, page_size={page_size}")
    params = query_params(pageSize=page_size, pageToken=page_token, filter=filter)
    try:
        response = await make_api_request(f"{message_name}/reactions", method="GET", params=params)
        page = Page.from_response(response, "reactions")
        text = render_collection(page, EntityKind.REACTION, response_format)
    except Exception as e:
        return failure("google_chat_list_reactions", e)
    return success_result(text, page.to_structured("reactions"))


async def create_reaction(
    message_name: Annotated[str, Field(description="The resource name of the message to react to", min_length=1)],
    emoji: Annotated[str, Field(description="The emoji to use (unicode character, e.g., '\U0001F44D')", min_length=1)],
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Add a reaction to a Google Chat message.

    Note: A user can add each emoji only once per message. Adding the same emoji again fails.
    """
    blocked = read_only_guard("google_chat_create_reaction")
    if blocked:
        return blocked

    logger.debug(f"create_reaction called with message_name={message_name}")
    try:
        reaction = await make_api_request(
            f"{message_name}/reactions",
            method="POST",
            data={"emoji": {"unicode": emoji}},
        )
        text = render_entity(reaction, EntityKind.REACTION, response_format, heading="Reaction added successfully!")
    except Exception as e:
        return failure("google_chat_create_reaction", e)
    return success_result(text, reaction)


async def delete_reaction(
    reaction_name: Annotated[str, Field(description="The resource name of the reaction to delete", min_length=1)],
) -> CallToolResult:
    """Remove a reaction from a Google Chat message. Only your own reactions can be removed."""
    blocked = read_only_guard("google_chat_delete_reaction")
    if blocked:
        return blocked

    logger.debug(f"delete_reaction called with reaction_name={reaction_name}")
    try:
        await make_api_request(reaction_name, method="DELETE")
    except Exception as e:
        return failure("google_chat_delete_reaction", e)
    return success_result(
        f"Reaction `{reaction_name}` has been removed.",
        {"deleted": True, "reactionName": reaction_name},
    )

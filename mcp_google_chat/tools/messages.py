"""Message operations for Google Chat MCP"""

import logging
from typing import Annotated, Any, Dict, Optional

from mcp.types import CallToolResult
from pydantic import Field

from mcp_google_chat.api.client import make_api_request
from mcp_google_chat.config import DEFAULT_PAGE_SIZE
from mcp_google_chat.models import MessageReplyOption, Page, ResponseFormat
from mcp_google_chat.tools.common import (
    MessageNameParam,
    PageSizeParam,
    PageTokenParam,
    ResponseFormatParam,
    SpaceNameParam,
    failure,
    query_params,
    read_only_guard,
    success_result,
)
from mcp_google_chat.utils.formatters import EntityKind, render_collection, render_entity

logger = logging.getLogger("mcp-google-chat-messages")

MessageTextParam = Annotated[str, Field(description="The message text content", min_length=1, max_length=4096)]


async def list_messages(
    space_name: SpaceNameParam,
    page_size: PageSizeParam = DEFAULT_PAGE_SIZE,
    page_token: PageTokenParam = None,
    filter: Annotated[
        Optional[str],
        Field(description="Filter for messages (e.g., 'createTime > \"2023-01-01T00:00:00Z\"')"),
    ] = None,
    order_by: Annotated[Optional[str], Field(description="Order messages by a field (e.g., 'createTime desc')")] = None,
    show_deleted: Annotated[bool, Field(description="Whether to include deleted messages")] = False,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """List messages in a Google Chat space.

    Returns messages with sender, time and a preview of the content.

    Examples:
        - "List recent messages" -> space_name='spaces/AAAA'
        - "Get messages from today" -> space_name='spaces/AAAA',
          filter='createTime > "2024-01-01T00:00:00Z"'
    """
    logger.debug(f"list_messages called with space_name={space_name}, page_size={page_size}, page_token={page_token}")
    params = query_params(
        pageSize=page_size,
        pageToken=page_token,
        filter=filter,
        orderBy=order_by,
        showDeleted=show_deleted,
    )
    try:
        response = await make_api_request(f"{space_name}/messages", method="GET", params=params)
        page = Page.from_response(response, "messages")
        text = render_collection(page, EntityKind.MESSAGE, response_format)
    except Exception as e:
        return failure("google_chat_list_messages", e)
    return success_result(text, page.to_structured("messages"))


async def get_message(
    message_name: MessageNameParam,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Get details about a specific message, including sender, content, thread and reactions."""
    logger.debug(f"get_message called with message_name={message_name}")
    try:
        message = await make_api_request(message_name, method="GET")
        text = render_entity(message, EntityKind.MESSAGE, response_format)
    except Exception as e:
        return failure("google_chat_get_message", e)
    return success_result(text, message)


async def create_message(
    space_name: Annotated[str, Field(description="The resource name of the space to send the message to", min_length=1)],
    text: MessageTextParam,
    thread_key: Annotated[Optional[str], Field(description="Thread key to reply to a specific thread")] = None,
    thread_name: Annotated[Optional[str], Field(description="Thread name to reply to a specific thread")] = None,
    message_reply_option: Annotated[
        Optional[MessageReplyOption],
        Field(description="How to handle thread replies"),
    ] = None,
    message_id: Annotated[Optional[str], Field(description="Custom message ID (client-assigned)")] = None,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Send a message to a Google Chat space.

    Examples:
        - "Send a message" -> space_name='spaces/AAAA', text='Hello everyone!'
        - "Reply to a thread" -> space_name='spaces/AAAA', text='Reply',
          thread_name='spaces/AAAA/threads/BBBB'
    """
    blocked = read_only_guard("google_chat_create_message")
    if blocked:
        return blocked

    logger.debug(f"create_message called with space_name={space_name}, text length={len(text)}")

    message_data: Dict[str, Any] = {"text": text}
    if thread_key or thread_name:
        thread: Dict[str, Any] = {}
        if thread_key:
            thread["threadKey"] = thread_key
        if thread_name:
            thread["name"] = thread_name
        message_data["thread"] = thread

    params = query_params(
        messageReplyOption=MessageReplyOption(message_reply_option).value if message_reply_option else None,
        messageId=message_id,
    )

    try:
        message = await make_api_request(
            f"{space_name}/messages",
            method="POST",
            data=message_data,
            params=params or None,
        )
        rendered = render_entity(message, EntityKind.MESSAGE, response_format, heading="Message sent successfully!")
    except Exception as e:
        return failure("google_chat_create_message", e)
    return success_result(rendered, message)


async def update_message(
    message_name: Annotated[str, Field(description="The resource name of the message to update", min_length=1)],
    text: MessageTextParam,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Update the text of an existing message.

    Note: Only the text content can be updated. Cards and attachments cannot be modified.
    """
    blocked = read_only_guard("google_chat_update_message")
    if blocked:
        return blocked

    logger.debug(f"update_message called with message_name={message_name}, text length={len(text)}")
    try:
        message = await make_api_request(
            message_name,
            method="PATCH",
            data={"text": text},
            params={"updateMask": "text"},
        )
        rendered = render_entity(message, EntityKind.MESSAGE, response_format, heading="Message updated successfully!")
    except Exception as e:
        return failure("google_chat_update_message", e)
    return success_result(rendered, message)


async def delete_message(
    message_name: Annotated[str, Field(description="The resource name of the message to delete", min_length=1)],
    force: Annotated[bool, Field(description="Force delete even if it has replies")] = False,
) -> CallToolResult:
    """Delete a message from Google Chat.

    Warning: This action is irreversible.
    """
    blocked = read_only_guard("google_chat_delete_message")
    if blocked:
        return blocked

    logger.debug(f"delete_message called with message_name={message_name}, force={force}")
    try:
        await make_api_request(message_name, method="DELETE", params=query_params(force=force) or None)
    except Exception as e:
        return failure("google_chat_delete_message", e)
    return success_result(
        f"Message `{message_name}` has been deleted.",
        {"deleted": True, "messageName": message_name},
    )

"""Attachment operations for Google Chat MCP"""

import base64
import binascii
import logging
from typing import Annotated, Any, Dict

from mcp.types import CallToolResult
from pydantic import Field

from mcp_google_chat.api.client import make_api_request
from mcp_google_chat.models import ResponseFormat
from mcp_google_chat.tools.common import (
    ResponseFormatParam,
    error_result,
    failure,
    read_only_guard,
    success_result,
)
from mcp_google_chat.utils.formatters import EntityKind, render_entity

logger = logging.getLogger("mcp-google-chat-attachments")


async def get_attachment(
    attachment_name: Annotated[str, Field(description="The resource name of the attachment", min_length=1)],
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Get metadata about a message attachment, including its download URL."""
    logger.debug(f"get_attachment called with attachment_name={attachment_name}")
    try:
        attachment = await make_api_request(attachment_name, method="GET")
        text = render_entity(attachment, EntityKind.ATTACHMENT, response_format)
    except Exception as e:
        return failure("google_chat_get_attachment", e)
    return success_result(text, attachment)


async def upload_attachment(
    space_name: Annotated[str, Field(description="The resource name of the space to upload to", min_length=1)],
    filename: Annotated[str, Field(description="The filename for the attachment", min_length=1)],
    content_type: Annotated[str, Field(description="The MIME type of the file (e.g., 'image/png')", min_length=1)],
    content_base64: Annotated[str, Field(description="The file content encoded as base64", min_length=1)],
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Register an attachment upload in a Google Chat space.

    Only the file metadata (name, MIME type and decoded size) is sent. The
    returned attachment reference can be used when creating a message.
    """
    blocked = read_only_guard("google_chat_upload_attachment")
    if blocked:
        return blocked

    try:
        content = base64.b64decode(content_base64, validate=True)
    except (binascii.Error, ValueError):
        return error_result("Error: content_base64 is not valid base64-encoded data.")

    logger.debug(f"upload_attachment called with space_name={space_name}, filename={filename}, size={len(content)}")
    upload_data = {
        "filename": filename,
        "contentType": content_type,
        "contentLength": len(content),
    }
    try:
        response = await make_api_request(f"{space_name}/attachments:upload", method="POST", data=upload_data)
        data_ref = response.get("attachmentDataRef") or {}
        attachment: Dict[str, Any] = {
            "name": data_ref.get("resourceName", ""),
            "contentName": filename,
            "contentType": content_type,
        }
        if data_ref:
            attachment["attachmentDataRef"] = data_ref
        text = render_entity(
            attachment, EntityKind.ATTACHMENT, response_format, heading="Attachment uploaded successfully!"
        )
    except Exception as e:
        return failure("google_chat_upload_attachment", e)
    return success_result(text, attachment)

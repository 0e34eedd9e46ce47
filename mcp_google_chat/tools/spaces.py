"""Space operations for Google Chat MCP"""

import logging
from typing import Annotated, Any, Dict, List, Optional

from mcp.types import CallToolResult
from pydantic import Field

from mcp_google_chat.api.client import make_api_request
from mcp_google_chat.config import DEFAULT_PAGE_SIZE
from mcp_google_chat.models import Page, ResponseFormat, SpaceType
from mcp_google_chat.tools.common import (
    PageSizeParam,
    PageTokenParam,
    ResponseFormatParam,
    SpaceNameParam,
    error_result,
    failure,
    query_params,
    read_only_guard,
    success_result,
)
from mcp_google_chat.utils.formatters import EntityKind, render_collection, render_entity

logger = logging.getLogger("mcp-google-chat-spaces")

DisplayNameParam = Annotated[str, Field(description="Display name of the space", min_length=1, max_length=128)]
DescriptionParam = Annotated[Optional[str], Field(description="Description of the space", max_length=500)]
GuidelinesParam = Annotated[Optional[str], Field(description="Space guidelines", max_length=5000)]


async def _list_page(tool_name: str, path: str, params: Dict[str, Any], response_format: ResponseFormat) -> CallToolResult:
    try:
        response = await make_api_request(path, method="GET", params=params)
        page = Page.from_response(response, "spaces")
        text = render_collection(page, EntityKind.SPACE, response_format)
    except Exception as e:
        return failure(tool_name, e)
    return success_result(text, page.to_structured("spaces"))


async def list_spaces(
    page_size: PageSizeParam = DEFAULT_PAGE_SIZE,
    page_token: PageTokenParam = None,
    filter: Annotated[
        Optional[str],
        Field(description="Filter for spaces (e.g., 'spaceType = \"SPACE\"')"),
    ] = None,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """List spaces the authenticated user or app is a member of.

    Returns spaces with their names, display names, types and descriptions.
    Pass the pageToken from a previous response to get the next page.

    Examples:
        - "List all my spaces" -> no filter
        - "List only named spaces" -> filter='spaceType = "SPACE"'
    """
    logger.debug(f"list_spaces called with page_size={page_size}, page_token={page_token}, filter={filter}")
    params = query_params(pageSize=page_size, pageToken=page_token, filter=filter)
    return await _list_page("google_chat_list_spaces", "spaces", params, response_format)


async def get_space(
    space_name: SpaceNameParam,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Get details about a specific space.

    Returns the display name, type, description, member count and settings of
    the space (e.g., space_name='spaces/AAAA1234567').
    """
    logger.debug(f"get_space called with space_name={space_name}")
    try:
        space = await make_api_request(space_name, method="GET")
        text = render_entity(space, EntityKind.SPACE, response_format)
    except Exception as e:
        return failure("google_chat_get_space", e)
    return success_result(text, space)


async def create_space(
    display_name: DisplayNameParam,
    space_type: Annotated[SpaceType, Field(description="Type of space to create")] = SpaceType.SPACE,
    external_user_allowed: Annotated[bool, Field(description="Whether external users can join")] = False,
    description: DescriptionParam = None,
    guidelines: GuidelinesParam = None,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Create a new Google Chat space.

    Examples:
        - "Create a team space" -> display_name='Engineering Team'
        - "Create a space with description" -> display_name='Project X',
          description='Space for Project X discussions'
    """
    blocked = read_only_guard("google_chat_create_space")
    if blocked:
        return blocked

    logger.debug(f"create_space called with display_name={display_name}, space_type={space_type}")

    space_data: Dict[str, Any] = {
        "displayName": display_name,
        "spaceType": SpaceType(space_type).value,
        "externalUserAllowed": external_user_allowed,
    }
    if description or guidelines:
        space_details: Dict[str, Any] = {}
        if description is not None:
            space_details["description"] = description
        if guidelines is not None:
            space_details["guidelines"] = guidelines
        space_data["spaceDetails"] = space_details

    try:
        space = await make_api_request("spaces", method="POST", data=space_data)
        text = render_entity(space, EntityKind.SPACE, response_format, heading="Space created successfully!")
    except Exception as e:
        return failure("google_chat_create_space", e)
    return success_result(text, space)


async def update_space(
    space_name: SpaceNameParam,
    display_name: Annotated[Optional[str], Field(description="New display name", min_length=1, max_length=128)] = None,
    description: DescriptionParam = None,
    guidelines: GuidelinesParam = None,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Update the display name, description or guidelines of a space.

    Only the fields that are supplied are changed.

    Examples:
        - "Rename a space" -> space_name='spaces/AAAA', display_name='New Name'
        - "Update description" -> space_name='spaces/AAAA', description='Updated description'
    """
    blocked = read_only_guard("google_chat_update_space")
    if blocked:
        return blocked

    update_mask: List[str] = []
    space_data: Dict[str, Any] = {}

    if display_name:
        space_data["displayName"] = display_name
        update_mask.append("displayName")

    if description is not None or guidelines is not None:
        space_details: Dict[str, Any] = {}
        if description is not None:
            space_details["description"] = description
            update_mask.append("spaceDetails.description")
        if guidelines is not None:
            space_details["guidelines"] = guidelines
            update_mask.append("spaceDetails.guidelines")
        space_data["spaceDetails"] = space_details

    if not update_mask:
        return error_result("Error: At least one field must be provided to update.")

    logger.debug(f"update_space called with space_name={space_name}, update_mask={update_mask}")

    try:
        space = await make_api_request(
            space_name,
            method="PATCH",
            data=space_data,
            params={"updateMask": ",".join(update_mask)},
        )
        text = render_entity(space, EntityKind.SPACE, response_format, heading="Space updated successfully!")
    except Exception as e:
        return failure("google_chat_update_space", e)
    return success_result(text, space)


async def delete_space(
    space_name: Annotated[str, Field(description="The resource name of the space to delete", min_length=1)],
) -> CallToolResult:
    """Delete a Google Chat space. This action is irreversible.

    Warning: This permanently deletes the space and all its messages.
    """
    blocked = read_only_guard("google_chat_delete_space")
    if blocked:
        return blocked

    logger.debug(f"delete_space called with space_name={space_name}")
    try:
        await make_api_request(space_name, method="DELETE")
    except Exception as e:
        return failure("google_chat_delete_space", e)
    return success_result(
        f"Space `{space_name}` has been deleted.",
        {"deleted": True, "spaceName": space_name},
    )


async def search_spaces(
    query: Annotated[str, Field(description="Search query for finding spaces", min_length=1)],
    page_size: PageSizeParam = DEFAULT_PAGE_SIZE,
    page_token: PageTokenParam = None,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Search for spaces in the organization.

    Note: Requires domain-wide delegation for service accounts.

    Examples:
        - "Search for engineering spaces" -> query='engineering'
    """
    logger.debug(f"search_spaces called with query={query}, page_size={page_size}")
    params = query_params(query=query, pageSize=page_size, pageToken=page_token)
    return await _list_page("google_chat_search_spaces", "spaces:search", params, response_format)


async def find_direct_message(
    user_id: Annotated[
        str,
        Field(description="The user ID to find direct message with (e.g., 'users/123456789')", min_length=1),
    ],
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Find an existing direct message space with a specific user.

    Returns the direct message space if it exists, or an error if not found.
    """
    logger.debug(f"find_direct_message called with user_id={user_id}")
    try:
        space = await make_api_request("spaces:findDirectMessage", method="GET", params={"name": user_id})
        text = render_entity(space, EntityKind.SPACE, response_format)
    except Exception as e:
        return failure("google_chat_find_direct_message", e)
    return success_result(text, space)

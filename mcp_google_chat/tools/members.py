"""Membership operations for Google Chat MCP"""

import logging
from typing import Annotated, Optional

from mcp.types import CallToolResult
from pydantic import Field

from mcp_google_chat.api.client import make_api_request
from mcp_google_chat.config import DEFAULT_PAGE_SIZE
from mcp_google_chat.models import MembershipRole, Page, ResponseFormat
from mcp_google_chat.tools.common import (
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

logger = logging.getLogger("mcp-google-chat-members")


async def list_members(
    space_name: SpaceNameParam,
    page_size: PageSizeParam = DEFAULT_PAGE_SIZE,
    page_token: PageTokenParam = None,
    filter: Annotated[Optional[str], Field(description="Filter for members (e.g., 'member.type = \"HUMAN\"')")] = None,
    show_groups: Annotated[bool, Field(description="Whether to include Google Groups")] = False,
    show_invited: Annotated[bool, Field(description="Whether to include invited members")] = False,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """List members of a Google Chat space.

    Returns members with their names, roles and membership states.

    Examples:
        - "List all members" -> space_name='spaces/AAAA'
        - "List only humans" -> space_name='spaces/AAAA', filter='member.type = "HUMAN"'
        - "Include invited" -> space_name='spaces/AAAA', show_invited=True
    """
    logger.debug(f"list_members called with space_name={space_name}, page_size={page_size}, page_token={page_token}")
    params = query_params(
        pageSize=page_size,
        pageToken=page_token,
        filter=filter,
        showGroups=show_groups,
        showInvited=show_invited,
    )
    try:
        response = await make_api_request(f"{space_name}/members", method="GET", params=params)
        page = Page.from_response(response, "memberships")
        text = render_collection(page, EntityKind.MEMBER, response_format)
    except Exception as e:
        return failure("google_chat_list_members", e)
    return success_result(text, page.to_structured("memberships"))


async def get_member(
    member_name: Annotated[
        str,
        Field(description="The resource name of the membership (e.g., 'spaces/AAAA/members/BBBB')", min_length=1),
    ],
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Get details about a specific membership, including user info, role and state."""
    logger.debug(f"get_member called with member_name={member_name}")
    try:
        member = await make_api_request(member_name, method="GET")
        text = render_entity(member, EntityKind.MEMBER, response_format)
    except Exception as e:
        return failure("google_chat_get_member", e)
    return success_result(text, member)


async def create_member(
    space_name: Annotated[str, Field(description="The resource name of the space to add the member to", min_length=1)],
    user_id: Annotated[str, Field(description="The user ID to add (e.g., 'users/123456789')", min_length=1)],
    role: Annotated[MembershipRole, Field(description="The role for the member")] = MembershipRole.ROLE_MEMBER,
    response_format: ResponseFormatParam = ResponseFormat.MARKDOWN,
) -> CallToolResult:
    """Add a member to a Google Chat space.

    Examples:
        - "Add a member" -> space_name='spaces/AAAA', user_id='users/123456789'
        - "Add a manager" -> space_name='spaces/AAAA', user_id='users/123456789', role='ROLE_MANAGER'
    """
    blocked = read_only_guard("google_chat_create_member")
    if blocked:
        return blocked

    logger.debug(f"create_member called with space_name={space_name}, user_id={user_id}, role={role}")
    member_data = {
        "member": {"name": user_id, "type": "HUMAN"},
        "role": MembershipRole(role).value,
    }
    try:
        member = await make_api_request(f"{space_name}/members", method="POST", data=member_data)
        text = render_entity(member, EntityKind.MEMBER, response_format, heading="Member added successfully!")
    except Exception as e:
        return failure("google_chat_create_member", e)
    return success_result(text, member)


async def delete_member(
    member_name: Annotated[str, Field(description="The resource name of the membership to delete", min_length=1)],
) -> CallToolResult:
    """Remove a member from a Google Chat space.

    Removing a member also removes their access to the space's messages and history.
    """
    blocked = read_only_guard("google_chat_delete_member")
    if blocked:
        return blocked

    logger.debug(f"delete_member called with member_name={member_name}")
    try:
        await make_api_request(member_name, method="DELETE")
    except Exception as e:
        return failure("google_chat_delete_member", e)
    return success_result(
        f"Member `{member_name}` has been removed from the space.",
        {"deleted": True, "memberName": member_name},
    )

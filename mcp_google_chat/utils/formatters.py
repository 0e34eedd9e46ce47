"""Response rendering for Google Chat MCP tools.

Tool output comes in two modes. JSON mode echoes the API data verbatim.
Markdown mode renders a fixed layout per resource kind, clips long free text
in list views, adds a pagination footer, and cuts anything longer than
CHARACTER_LIMIT.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import ValidationError

from mcp_google_chat.config import CHARACTER_LIMIT, PREVIEW_LENGTH
from mcp_google_chat.models import (
    Attachment,
    ChatModel,
    Member,
    Message,
    Page,
    Reaction,
    ResponseFormat,
    Space,
)

logger = logging.getLogger("mcp-google-chat-formatters")

UNKNOWN_NAME = "unknown"
TRUNCATION_NOTICE = "\n\n---\n*Response truncated due to size limit. Use pagination to see more results.*"


def format_timestamp(timestamp: str) -> str:
    """Format an ISO-8601 timestamp as e.g. 'Jan 5, 2024, 02:30 PM' (UTC).

    Anything that does not parse is returned unchanged.
    """
    try:
        parsed = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return timestamp
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return f"{parsed:%b} {parsed.day}, {parsed.year}, {parsed:%I:%M %p}"


def truncate_response(text: str) -> str:
    """Cut text that exceeds CHARACTER_LIMIT and append the truncation notice."""
    if len(text) <= CHARACTER_LIMIT:
        return text
    return text[: CHARACTER_LIMIT - 100] + TRUNCATION_NOTICE


def clip(text: str, limit: int = PREVIEW_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


# Spaces

def _space_detail(space: Space) -> List[str]:
    lines = [
        f"## {space.display_name or 'Unnamed Space'}",
        f"- **Name**: {space.name or UNKNOWN_NAME}",
        f"- **Type**: {space.kind_label}",
    ]
    if space.description:
        lines.append(f"- **Description**: {space.description}")
    if space.membership_count is not None:
        lines.append(f"- **Members**: {space.membership_count.joined_direct_human_user_count or 0}")
    if space.create_time:
        lines.append(f"- **Created**: {format_timestamp(space.create_time)}")
    if space.threaded is not None:
        lines.append(f"- **Threaded**: {yes_no(space.threaded)}")
    if space.external_user_allowed is not None:
        lines.append(f"- **External Users Allowed**: {yes_no(space.external_user_allowed)}")
    return lines


def _space_item(space: Space) -> List[str]:
    lines = [
        f"## {space.display_name or 'Unnamed Space'}",
        f"- **ID**: `{space.name or UNKNOWN_NAME}`",
        f"- **Type**: {space.kind_label}",
    ]
    if space.description:
        lines.append(f"- **Description**: {clip(space.description)}")
    lines.append("")
    return lines


# Messages

def _message_detail(message: Message) -> List[str]:
    lines = ["## Message", f"- **ID**: `{message.name or UNKNOWN_NAME}`"]
    if message.sender:
        lines.append(f"- **From**: {message.sender.label}")
    if message.create_time:
        lines.append(f"- **Time**: {format_timestamp(message.create_time)}")
    if message.text:
        lines.extend(["", "### Content", message.text])
    if message.thread and message.thread.name:
        lines.extend(["", f"- **Thread**: `{message.thread.name}`"])
    if message.emoji_reaction_summaries:
        reactions = " ".join(
            f"{(summary.emoji.symbol if summary.emoji else '?')} ({summary.reaction_count or 0})"
            for summary in message.emoji_reaction_summaries
        )
        lines.append(f"- **Reactions**: {reactions}")
    return lines


def _message_item(message: Message) -> List[str]:
    sender = message.sender.label if message.sender else "Unknown"
    time = format_timestamp(message.create_time) if message.create_time else ""
    preview = clip(message.text) if message.text else "[No text content]"
    return [
        f"### {sender} - {time}",
        f"- **ID**: `{message.name or UNKNOWN_NAME}`",
        f"- **Content**: {preview}",
        "",
    ]


# Members

def _member_detail(member: Member) -> List[str]:
    lines = [
        f"## {member.label}",
        f"- **Membership ID**: `{member.name or UNKNOWN_NAME}`",
        f"- **State**: {member.state or 'Unknown'}",
        f"- **Role**: {member.role or 'Unknown'}",
    ]
    if member.member and member.member.type:
        lines.append(f"- **Type**: {member.member.type}")
    if member.create_time:
        lines.append(f"- **Joined**: {format_timestamp(member.create_time)}")
    return lines


def _member_item(member: Member) -> List[str]:
    return [
        f"## {member.label}",
        f"- **ID**: `{member.name or UNKNOWN_NAME}`",
        f"- **Role**: {member.role or 'Unknown'}",
        f"- **State**: {member.state or 'Unknown'}",
        "",
    ]


# Reactions

def _reaction_detail(reaction: Reaction) -> List[str]:
    return [f"{reaction.symbol} by {reaction.user_label} (`{reaction.name or UNKNOWN_NAME}`)"]


def _reaction_groups(reactions: List[Reaction]) -> List[str]:
    # dicts keep first-seen order, so groups follow the API order
    grouped: Dict[str, List[str]] = {}
    for reaction in reactions:
        grouped.setdefault(reaction.symbol, []).append(reaction.user_label)
    return [f"- {emoji} ({len(users)}): {', '.join(users)}" for emoji, users in grouped.items()]


# Attachments

def _attachment_detail(attachment: Attachment) -> List[str]:
    lines = ["## Attachment", f"- **Name**: `{attachment.name or UNKNOWN_NAME}`"]
    if attachment.content_name:
        lines.append(f"- **Filename**: {attachment.content_name}")
    if attachment.content_type:
        lines.append(f"- **Type**: {attachment.content_type}")
    if attachment.download_uri:
        lines.append(f"- **Download URL**: {attachment.download_uri}")
    if attachment.source:
        lines.append(f"- **Source**: {attachment.source}")
    return lines


def _raw_block(data: Any) -> List[str]:
    return ["```json", to_json(data), "```"]


def _each(item: Callable[[Any], List[str]]) -> Callable[[List[Any]], List[str]]:
    def render_all(entities: List[Any]) -> List[str]:
        lines: List[str] = []
        for entity in entities:
            lines.extend(item(entity))
        return lines

    return render_all


@dataclass(frozen=True)
class EntityView:
    """How one kind of resource is parsed and laid out in markdown."""

    model: Type[ChatModel]
    title: str
    collection_key: Optional[str]
    detail: Callable[[Any], List[str]]
    listing: Optional[Callable[[List[Any]], List[str]]] = None


class EntityKind(str, Enum):
    SPACE = "space"
    MESSAGE = "message"
    MEMBER = "member"
    REACTION = "reaction"
    ATTACHMENT = "attachment"


VIEWS: Dict[EntityKind, EntityView] = {
    EntityKind.SPACE: EntityView(Space, "Spaces", "spaces", _space_detail, _each(_space_item)),
    EntityKind.MESSAGE: EntityView(Message, "Messages", "messages", _message_detail, _each(_message_item)),
    EntityKind.MEMBER: EntityView(Member, "Members", "memberships", _member_detail, _each(_member_item)),
    EntityKind.REACTION: EntityView(Reaction, "Reactions", "reactions", _reaction_detail, _reaction_groups),
    EntityKind.ATTACHMENT: EntityView(Attachment, "Attachments", None, _attachment_detail),
}


def render_entity(
    entity: Dict[str, Any],
    kind: EntityKind,
    response_format: ResponseFormat = ResponseFormat.MARKDOWN,
    heading: Optional[str] = None,
) -> str:
    """Render a single resource.

    Args:
        entity: The resource as returned by the API
        kind: Which resource kind it is
        response_format: markdown (default) or json
        heading: Line placed above the markdown rendering (ignored for json)
    """
    if response_format == ResponseFormat.JSON:
        return to_json(entity)

    view = VIEWS[kind]
    try:
        lines = view.detail(view.model.model_validate(entity))
    except ValidationError as e:
        logger.warning(f"Unexpected {kind.value} shape, rendering raw data: {e}")
        lines = _raw_block(entity)
    if heading:
        lines = [heading, ""] + lines
    return truncate_response("\n".join(lines))


def render_collection(
    page: Page,
    kind: EntityKind,
    response_format: ResponseFormat = ResponseFormat.MARKDOWN,
) -> str:
    """Render one page of resources with a pagination footer when more exist."""
    view = VIEWS[kind]
    if view.listing is None or view.collection_key is None:
        raise ValueError(f"{kind.value} resources have no list rendering")

    if response_format == ResponseFormat.JSON:
        return to_json(page.to_structured(view.collection_key))

    if not page.items:
        return f"No {view.title.lower()} found."

    lines = [f"# {view.title} ({len(page.items)} results)", ""]
    try:
        lines.extend(view.listing([view.model.model_validate(item) for item in page.items]))
    except ValidationError as e:
        logger.warning(f"Unexpected {kind.value} shape in list, rendering raw data: {e}")
        lines.extend(_raw_block(page.items))

    if page.has_more:
        lines.append("---")
        lines.append(f"*More results available. Use pageToken: `{page.next_page_token}`*")

    return truncate_response("\n".join(lines))

"""Models for Google Chat resources

The API returns open-ended JSON objects. Each model declares the fields this
server reads; anything else the API sends is kept in ``model_extra`` so no data
is dropped when a model is built from a response.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ResponseFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"


class SpaceType(str, Enum):
    SPACE = "SPACE"
    GROUP_CHAT = "GROUP_CHAT"
    DIRECT_MESSAGE = "DIRECT_MESSAGE"


class MembershipRole(str, Enum):
    ROLE_UNSPECIFIED = "ROLE_UNSPECIFIED"
    ROLE_MEMBER = "ROLE_MEMBER"
    ROLE_MANAGER = "ROLE_MANAGER"


class MessageReplyOption(str, Enum):
    MESSAGE_REPLY_OPTION_UNSPECIFIED = "MESSAGE_REPLY_OPTION_UNSPECIFIED"
    REPLY_MESSAGE_FALLBACK_TO_NEW_THREAD = "REPLY_MESSAGE_FALLBACK_TO_NEW_THREAD"
    REPLY_MESSAGE_OR_FAIL = "REPLY_MESSAGE_OR_FAIL"


class ChatModel(BaseModel):
    """Base model: camelCase wire names, immutable, unknown keys preserved."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    @property
    def unrecognized_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class User(ChatModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    domain_id: Optional[str] = None
    type: Optional[str] = None
    is_anonymous: Optional[bool] = None

    @property
    def label(self) -> str:
        return self.display_name or self.name or "Unknown"


class SpaceDetails(ChatModel):
    description: Optional[str] = None
    guidelines: Optional[str] = None


class MembershipCount(ChatModel):
    joined_direct_human_user_count: Optional[int] = None
    joined_group_count: Optional[int] = None


class Space(ChatModel):
    name: Optional[str] = None
    type: Optional[str] = None
    space_type: Optional[str] = None
    single_user_bot_dm: Optional[bool] = None
    threaded: Optional[bool] = None
    display_name: Optional[str] = None
    external_user_allowed: Optional[bool] = None
    space_threading_state: Optional[str] = None
    space_details: Optional[SpaceDetails] = None
    space_history_state: Optional[str] = None
    import_mode: Optional[bool] = None
    create_time: Optional[str] = None
    admin_installed: Optional[bool] = None
    membership_count: Optional[MembershipCount] = None

    @property
    def kind_label(self) -> str:
        return self.space_type or self.type or "Unknown"

    @property
    def description(self) -> Optional[str]:
        return self.space_details.description if self.space_details else None


class Thread(ChatModel):
    name: Optional[str] = None
    thread_key: Optional[str] = None


class CustomEmoji(ChatModel):
    uid: Optional[str] = None


class Emoji(ChatModel):
    unicode: Optional[str] = None
    custom_emoji: Optional[CustomEmoji] = None

    @property
    def symbol(self) -> str:
        if self.unicode:
            return self.unicode
        if self.custom_emoji and self.custom_emoji.uid:
            return self.custom_emoji.uid
        return "?"


class EmojiReactionSummary(ChatModel):
    emoji: Optional[Emoji] = None
    reaction_count: Optional[int] = None


class AttachmentDataRef(ChatModel):
    resource_name: Optional[str] = None
    attachment_upload_token: Optional[str] = None


class DriveDataRef(ChatModel):
    drive_file_id: Optional[str] = None


class Attachment(ChatModel):
    name: Optional[str] = None
    content_name: Optional[str] = None
    content_type: Optional[str] = None
    attachment_data_ref: Optional[AttachmentDataRef] = None
    drive_data_ref: Optional[DriveDataRef] = None
    thumbnail_uri: Optional[str] = None
    download_uri: Optional[str] = None
    source: Optional[str] = None


class Message(ChatModel):
    name: Optional[str] = None
    sender: Optional[User] = None
    create_time: Optional[str] = None
    last_update_time: Optional[str] = None
    delete_time: Optional[str] = None
    text: Optional[str] = None
    formatted_text: Optional[str] = None
    thread: Optional[Thread] = None
    fallback_text: Optional[str] = None
    argument_text: Optional[str] = None
    thread_reply: Optional[bool] = None
    client_assigned_message_id: Optional[str] = None
    attachment: Optional[List[Attachment]] = None
    emoji_reaction_summaries: Optional[List[EmojiReactionSummary]] = None


class GroupMember(ChatModel):
    name: Optional[str] = None


class Member(ChatModel):
    name: Optional[str] = None
    state: Optional[str] = None
    role: Optional[str] = None
    member: Optional[User] = None
    group_member: Optional[GroupMember] = None
    create_time: Optional[str] = None
    delete_time: Optional[str] = None

    @property
    def label(self) -> str:
        if self.member:
            return self.member.label
        return "Unknown"


class Reaction(ChatModel):
    name: Optional[str] = None
    user: Optional[User] = None
    emoji: Optional[Emoji] = None

    @property
    def symbol(self) -> str:
        return self.emoji.symbol if self.emoji else "?"

    @property
    def user_label(self) -> str:
        return self.user.label if self.user else "Unknown"


@dataclass(frozen=True)
class Page:
    """One page of a list response."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    next_page_token: Optional[str] = None
    total_size: Optional[int] = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_page_token)

    @classmethod
    def from_response(cls, response: Dict[str, Any], key: str) -> "Page":
        return cls(
            items=list(response.get(key) or []),
            next_page_token=response.get("nextPageToken") or None,
            total_size=response.get("totalSize"),
        )

    def to_structured(self, key: str) -> Dict[str, Any]:
        """Wrap the page the way list tools echo it back to the caller."""
        structured: Dict[str, Any] = {"count": len(self.items)}
        if self.total_size is not None:
            structured["totalSize"] = self.total_size
        structured[key] = self.items
        structured["hasMore"] = self.has_more
        if self.next_page_token:
            structured["nextPageToken"] = self.next_page_token
        return structured

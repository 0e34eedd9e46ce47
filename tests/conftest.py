"""Shared pytest fixtures for Google Chat MCP tests."""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from mcp_google_chat.api.auth import OAuthTokenProvider
from mcp_google_chat.api.client import ChatApiContext, set_api_context

TEST_TOKEN = "test-token"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test without credentials and with write tools enabled."""
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.delenv("GOOGLE_SERVICE_ACCOUNT_JSON", raising=False)
    monkeypatch.delenv("GOOGLE_OAUTH_TOKEN", raising=False)
    monkeypatch.setenv("MCP_GOOGLE_CHAT_READ_ONLY", "false")
    set_api_context(None)
    yield
    set_api_context(None)


@dataclass
class FakeChatApi:
    """Records outbound requests and answers them from a queue of canned responses."""

    responses: List[httpx.Response] = field(default_factory=list)
    requests: List[httpx.Request] = field(default_factory=list)
    handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def reply(self, status_code: int = 200, json_body: Any = None, **kwargs) -> None:
        if json_body is not None:
            kwargs["json"] = json_body
        self.responses.append(httpx.Response(status_code, **kwargs))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={})

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last_request.content)


@pytest.fixture
def chat_api():
    """Install a ChatApiContext backed by an in-memory fake of the Google Chat API."""
    fake = FakeChatApi()
    context = ChatApiContext(OAuthTokenProvider(TEST_TOKEN), transport=httpx.MockTransport(fake))
    set_api_context(context)
    return fake


@pytest.fixture
def read_only(monkeypatch):
    monkeypatch.setenv("MCP_GOOGLE_CHAT_READ_ONLY", "true")


@pytest.fixture
def sample_space():
    return {
        "name": "spaces/AAAA",
        "displayName": "Engineering",
        "spaceType": "SPACE",
        "spaceDetails": {"description": "Team space", "guidelines": "Be kind"},
        "membershipCount": {"joinedDirectHumanUserCount": 7},
        "createTime": "2024-01-05T14:30:00Z",
        "threaded": False,
        "externalUserAllowed": True,
        "spaceUri": "https://chat.google.com/room/AAAA",
    }


@pytest.fixture
def sample_message():
    return {
        "name": "spaces/AAAA/messages/BBBB",
        "sender": {"name": "users/1", "displayName": "Ada Lovelace", "type": "HUMAN"},
        "createTime": "2024-01-05T14:30:00Z",
        "text": "Hello everyone!",
        "thread": {"name": "spaces/AAAA/threads/CCCC"},
        "emojiReactionSummaries": [{"emoji": {"unicode": "\U0001F44D"}, "reactionCount": 2}],
    }


@pytest.fixture
def sample_member():
    return {
        "name": "spaces/AAAA/members/1",
        "state": "JOINED",
        "role": "ROLE_MANAGER",
        "member": {"name": "users/1", "displayName": "Ada Lovelace", "type": "HUMAN"},
        "createTime": "2024-01-05T14:30:00Z",
    }

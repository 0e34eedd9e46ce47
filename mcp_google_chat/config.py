"""Configuration for Google Chat MCP

This module contains configuration constants that are used across the MCP server.
It's kept separate to avoid circular imports.
"""

import os

# Google Chat REST endpoint
API_BASE_URL = "https://chat.googleapis.com/v1"

# Outbound request timeout in seconds
REQUEST_TIMEOUT = 30.0

# Rendered markdown is cut past this many characters
CHARACTER_LIMIT = 25000

# Free text in list views is clipped to this many characters
PREVIEW_LENGTH = 100

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100

SERVICE_NAME = "google-chat-mcp-server"

# Credential sources, checked in this order
ENV_CREDENTIALS_PATH = "GOOGLE_APPLICATION_CREDENTIALS"
ENV_CREDENTIALS_JSON = "GOOGLE_SERVICE_ACCOUNT_JSON"
ENV_OAUTH_TOKEN = "GOOGLE_OAUTH_TOKEN"

AUTH_REMEDIATION = (
    "Authentication required. Set one of:\n"
    f"  - {ENV_CREDENTIALS_PATH}: Path to service account JSON file\n"
    f"  - {ENV_CREDENTIALS_JSON}: Service account JSON as a string\n"
    f"  - {ENV_OAUTH_TOKEN}: OAuth2 access token"
)

# Scopes requested during the service account token exchange
CHAT_SCOPES = [
    "https://www.googleapis.com/auth/chat.spaces",
    "https://www.googleapis.com/auth/chat.spaces.readonly",
    "https://www.googleapis.com/auth/chat.messages",
    "https://www.googleapis.com/auth/chat.messages.readonly",
    "https://www.googleapis.com/auth/chat.memberships",
    "https://www.googleapis.com/auth/chat.memberships.readonly",
    "https://www.googleapis.com/auth/chat.spaces.create",
    "https://www.googleapis.com/auth/chat.delete",
    "https://www.googleapis.com/auth/chat.import",
]


def is_read_only_mode() -> bool:
    """Return True when write tools are disabled through MCP_GOOGLE_CHAT_READ_ONLY."""
    return os.getenv("MCP_GOOGLE_CHAT_READ_ONLY", "false").lower() in ("true", "1", "yes")

# Copyright 2025 CNOE
# SPDX-License-Identifier: Apache-2.0

"""Google Chat credentials

This module selects the authentication strategy from the environment and
produces bearer tokens for outbound requests. Service account tokens are
exchanged through google-auth; OAuth tokens are used verbatim.
"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request

from mcp_google_chat.config import (
    AUTH_REMEDIATION,
    CHAT_SCOPES,
    ENV_CREDENTIALS_JSON,
    ENV_CREDENTIALS_PATH,
    ENV_OAUTH_TOKEN,
)
from mcp_google_chat.exceptions import (
    AuthExchangeError,
    AuthExpiredError,
    ConfigurationError,
)

logger = logging.getLogger("mcp-google-chat")


class StrategyKind(str, Enum):
    SERVICE_ACCOUNT_PATH = "service_account_path"
    SERVICE_ACCOUNT_JSON = "service_account_json"
    OAUTH_TOKEN = "oauth_token"


@dataclass(frozen=True)
class CredentialStrategy:
    """The one credential source selected for this process."""

    kind: StrategyKind
    source: str
    credentials_path: Optional[str] = None
    credentials_info: Optional[Dict[str, Any]] = field(default=None, repr=False)
    oauth_token: Optional[str] = field(default=None, repr=False)

    @property
    def is_service_account(self) -> bool:
        return self.kind in (StrategyKind.SERVICE_ACCOUNT_PATH, StrategyKind.SERVICE_ACCOUNT_JSON)


def resolve_credentials(environ: Optional[Mapping[str, str]] = None) -> CredentialStrategy:
    """Pick the authentication strategy from the available credential sources.

    Sources are checked in priority order: credential file path, inline
    credential JSON, then raw OAuth token. Empty values count as absent.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        The selected CredentialStrategy

    Raises:
        ConfigurationError: If no source is set, or the inline JSON is not a JSON object.
    """
    env = os.environ if environ is None else environ

    credentials_path = env.get(ENV_CREDENTIALS_PATH)
    if credentials_path:
        logger.info(f"Using service account credentials from {ENV_CREDENTIALS_PATH}")
        return CredentialStrategy(
            kind=StrategyKind.SERVICE_ACCOUNT_PATH,
            source=ENV_CREDENTIALS_PATH,
            credentials_path=credentials_path,
        )

    credentials_json = env.get(ENV_CREDENTIALS_JSON)
    if credentials_json:
        try:
            credentials_info = json.loads(credentials_json)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {ENV_CREDENTIALS_JSON}: must be valid JSON") from e
        if not isinstance(credentials_info, dict):
            raise ConfigurationError(f"Invalid {ENV_CREDENTIALS_JSON}: must be a JSON object")
        logger.info(f"Using service account credentials from {ENV_CREDENTIALS_JSON}")
        return CredentialStrategy(
            kind=StrategyKind.SERVICE_ACCOUNT_JSON,
            source=ENV_CREDENTIALS_JSON,
            credentials_info=credentials_info,
        )

    oauth_token = env.get(ENV_OAUTH_TOKEN)
    if oauth_token:
        logger.info(f"Using OAuth2 access token from {ENV_OAUTH_TOKEN}")
        return CredentialStrategy(
            kind=StrategyKind.OAUTH_TOKEN,
            source=ENV_OAUTH_TOKEN,
            oauth_token=oauth_token,
        )

    raise ConfigurationError(AUTH_REMEDIATION)


class TokenProvider:
    """Produces a bearer token for a single outbound request."""

    async def get_token(self) -> str:
        raise NotImplementedError


class OAuthTokenProvider(TokenProvider):
    """Returns the configured OAuth2 access token as-is."""

    def __init__(self, token: Optional[str]):
        self._token = token

    async def get_token(self) -> str:
        if not self._token:
            raise AuthExpiredError("OAuth2 token expired or invalid")
        return self._token


class ServiceAccountTokenProvider(TokenProvider):
    """Exchanges service account credentials for short-lived access tokens.

    google-auth tracks expiry on the credentials object, so a token is reused
    until it is no longer valid and then refreshed. The refresh itself is a
    blocking call and runs in a worker thread.
    """

    def __init__(self, credentials: Any, request: Optional[Any] = None):
        self._credentials = credentials
        self._request = request if request is not None else Request()
        self._refresh_lock = asyncio.Lock()

    async def get_token(self) -> str:
        async with self._refresh_lock:
            if not self._credentials.valid:
                logger.debug("Refreshing service account access token")
                try:
                    await asyncio.to_thread(self._credentials.refresh, self._request)
                except google.auth.exceptions.GoogleAuthError as e:
                    raise AuthExchangeError(f"Failed to obtain access token: {e}") from e

        token = self._credentials.token
        if not token:
            raise AuthExchangeError("Failed to obtain access token")
        return token


def load_service_account_credentials(strategy: CredentialStrategy) -> Any:
    """Load google-auth credentials for a service account strategy.

    Raises:
        ConfigurationError: If the credential file or document cannot be loaded.
    """
    try:
        if strategy.kind is StrategyKind.SERVICE_ACCOUNT_PATH:
            credentials, _ = google.auth.load_credentials_from_file(
                strategy.credentials_path, scopes=CHAT_SCOPES
            )
        else:
            credentials, _ = google.auth.load_credentials_from_dict(
                strategy.credentials_info, scopes=CHAT_SCOPES
            )
    except google.auth.exceptions.DefaultCredentialsError as e:
        raise ConfigurationError(f"Unable to load credentials from {strategy.source}: {e}") from e
    return credentials


def build_token_provider(strategy: CredentialStrategy) -> TokenProvider:
    """Create the token provider matching the resolved strategy."""
    if strategy.is_service_account:
        return ServiceAccountTokenProvider(load_service_account_credentials(strategy))
    return OAuthTokenProvider(strategy.oauth_token)

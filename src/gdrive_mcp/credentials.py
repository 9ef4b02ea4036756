"""OAuth credentials for the Google APIs.

The long-lived refresh token and the OAuth client that minted it are kept
in the OS keyring (macOS Keychain, Windows Credential Locker, or Linux
Secret Service) under the ``gdrive-mcp`` service. Environment variables are
the fallback for hosts without a keyring backend.

Each tool call exchanges the refresh token for a fresh access token; access
tokens are never persisted.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import keyring
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from keyring.errors import KeyringError
from loguru import logger

from gdrive_mcp.config import Settings
from gdrive_mcp.exceptions import CredentialsError

SCOPES = [
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/documents",
]
TOKEN_URI = "https://oauth2.googleapis.com/token"
REDIRECT_PORT = 48127

KEY_CLIENT_ID = "client_id"
KEY_CLIENT_SECRET = "client_secret"
KEY_REFRESH_TOKEN = "refresh_token"


@dataclass(frozen=True)
class StoredCredentials:
    """An OAuth client plus the refresh token it issued."""

    client_id: str
    client_secret: str
    refresh_token: str

    def to_google_credentials(self) -> Credentials:
        return Credentials(
            token=None,
            refresh_token=self.refresh_token,
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_uri=TOKEN_URI,
            scopes=SCOPES,
        )


def _keyring_get(service: str, name: str) -> str | None:
    try:
        return keyring.get_password(service, name)
    except KeyringError as e:
        logger.warning("Keyring unavailable, using environment: {}", e)
        return None


def load_credentials(settings: Settings) -> StoredCredentials:
    """Read credentials from the keyring, falling back to the environment.

    Each value is resolved on its own, so a partially populated keyring is
    completed from the environment.

    Raises:
        CredentialsError: Any of the three values is missing in both places
    """
    service = settings.keyring_service
    client_id = _keyring_get(service, KEY_CLIENT_ID) or settings.google_client_id
    client_secret = (
        _keyring_get(service, KEY_CLIENT_SECRET) or settings.google_client_secret
    )
    refresh_token = (
        _keyring_get(service, KEY_REFRESH_TOKEN) or settings.google_refresh_token
    )

    if not client_id or not client_secret or not refresh_token:
        raise CredentialsError(
            "Missing credentials. Please run: gdrive-mcp setup-auth "
            "--client-secrets <client_secret.json>"
        )
    return StoredCredentials(client_id, client_secret, refresh_token)


def store_credentials(credentials: StoredCredentials, service: str) -> None:
    """Save all three values to the OS keyring."""
    keyring.set_password(service, KEY_CLIENT_ID, credentials.client_id)
    keyring.set_password(service, KEY_CLIENT_SECRET, credentials.client_secret)
    keyring.set_password(service, KEY_REFRESH_TOKEN, credentials.refresh_token)
    logger.info("Credentials saved to OS keyring (service {})", service)


def refresh_access_token(credentials: StoredCredentials) -> str:
    """Exchange the refresh token for a short-lived access token.

    Raises:
        CredentialsError: Google rejected the refresh token or was unreachable
    """
    google_credentials = credentials.to_google_credentials()
    try:
        google_credentials.refresh(Request())
    except RefreshError as e:
        raise CredentialsError(
            f"Refresh token was rejected, run setup-auth again: {e}"
        ) from e
    except TransportError as e:
        raise CredentialsError(f"Could not reach Google to refresh token: {e}") from e

    token: str = google_credentials.token
    return token


async def get_access_token(settings: Settings) -> str:
    """Load stored credentials and refresh them off the event loop."""
    credentials = load_credentials(settings)
    return await asyncio.to_thread(refresh_access_token, credentials)


def run_setup_flow(client_secrets: Path, settings: Settings) -> StoredCredentials:
    """Run the installed-app consent flow and store the result.

    Opens the browser on the consent screen and waits for the redirect on
    ``localhost:48127``. Consent is always prompted so Google issues a
    refresh token even for a client that was authorized before.

    Args:
        client_secrets: ``client_secret.json`` of a Desktop OAuth client
        settings: Provides the keyring service name

    Returns:
        The stored credentials

    Raises:
        CredentialsError: The secrets file is missing or no refresh token
            was issued
    """
    if not client_secrets.exists():
        raise CredentialsError(f"Client secrets file not found: {client_secrets}")

    flow = InstalledAppFlow.from_client_secrets_file(str(client_secrets), scopes=SCOPES)
    google_credentials = flow.run_local_server(
        port=REDIRECT_PORT,
        access_type="offline",
        prompt="consent",
    )
    if not google_credentials.refresh_token:
        raise CredentialsError("No refresh token received. Please try again.")

    credentials = StoredCredentials(
        client_id=google_credentials.client_id,
        client_secret=google_credentials.client_secret,
        refresh_token=google_credentials.refresh_token,
    )
    store_credentials(credentials, settings.keyring_service)
    return credentials

#!/usr/bin/env python3
"""
Shared configuration utilities for the Drive ownership transfer tools.

This module provides shared functions for:
- Resolving the client secret and token file locations
- Reading the OAuth client secret file downloaded from Google Cloud Console
"""

import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import MalformedJSON, MissingCredentialsFile

DEFAULT_CREDENTIALS_FILE = "credentials.json"
DEFAULT_TOKEN_FILE = "token.json"

CREDENTIALS_PATH_ENV = "CREDENTIALS_PATH"
TOKEN_PATH_ENV = "TOKEN_PATH"
FILE_ID_ENV = "FILE_ID"
NEW_OWNER_EMAIL_ENV = "NEW_OWNER_EMAIL"

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Full read/write access to Drive is needed to change permissions
DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]


@dataclass(frozen=True)
class AppPaths:
    """Locations of the client secret file and the stored token."""

    credentials_path: str
    token_path: str


@dataclass(frozen=True)
class ClientSecrets:
    """OAuth client registration as issued by Google Cloud Console."""

    client_id: str
    client_secret: str
    redirect_uris: List[str] = field(default_factory=list)
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI

    @property
    def redirect_uri(self) -> str:
        return self.redirect_uris[0]


def resolve_paths(credentials_path: Optional[str] = None, token_path: Optional[str] = None,
                  environ: Optional[Dict[str, str]] = None) -> AppPaths:
    """
    Work out which files to use.

    An explicit argument wins, then the environment variable, then the
    default file name in the current directory.

    Args:
        credentials_path: Path given on the command line, if any
        token_path: Path given on the command line, if any
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Resolved AppPaths
    """
    if environ is None:
        environ = os.environ

    credentials = credentials_path or environ.get(CREDENTIALS_PATH_ENV) or DEFAULT_CREDENTIALS_FILE
    token = token_path or environ.get(TOKEN_PATH_ENV) or DEFAULT_TOKEN_FILE

    return AppPaths(
        credentials_path=os.path.expanduser(credentials),
        token_path=os.path.expanduser(token),
    )


def load_client_secrets(conf_path: str) -> ClientSecrets:
    """
    Read the OAuth client secret file.

    The file is the JSON downloaded from Google Cloud Console; desktop clients
    keep their settings under "installed" and web clients under "web".

    Args:
        conf_path: Path to credentials.json

    Returns:
        ClientSecrets for the registered client

    Raises:
        MissingCredentialsFile: The file does not exist
        MalformedJSON: The file is not a valid client secret document
    """
    if not os.path.exists(conf_path):
        raise MissingCredentialsFile(
            f"credentials.json not found at {conf_path}. "
            "Please download your OAuth credentials from Google Cloud Console"
        )

    try:
        with open(conf_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise MalformedJSON(f"Could not parse client secret file {conf_path}: {e}") from e

    if not isinstance(data, dict):
        raise MalformedJSON(f"Client secret file {conf_path} must contain a JSON object")

    section = data.get("installed") or data.get("web")
    if not isinstance(section, dict):
        raise MalformedJSON(f"Client secret file {conf_path} has no 'installed' or 'web' section")

    missing = [key for key in ("client_id", "client_secret") if not section.get(key)]
    redirect_uris = section.get("redirect_uris") or []
    if not isinstance(redirect_uris, list) or not redirect_uris:
        missing.append("redirect_uris")
    if missing:
        raise MalformedJSON(f"Client secret file {conf_path} is missing: {', '.join(missing)}")

    return ClientSecrets(
        client_id=section["client_id"],
        client_secret=section["client_secret"],
        redirect_uris=list(redirect_uris),
        auth_uri=section.get("auth_uri") or GOOGLE_AUTH_URI,
        token_uri=section.get("token_uri") or GOOGLE_TOKEN_URI,
    )

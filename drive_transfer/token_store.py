"""
Local storage for the OAuth credential record (token.json).

The record is written once by the interactive setup and read on every later
run. Nothing here refreshes or deletes it.
"""

import json
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from .errors import MalformedJSON, MissingTokenFile, TokenWriteError


@dataclass
class CredentialRecord:
    access_token: str
    refresh_token: Optional[str] = None
    expiry: Optional[str] = None
    token_type: str = "Bearer"
    scope: Optional[str] = None

    @classmethod
    def from_token_response(cls, token_data: Dict[str, Any],
                            now: Optional[datetime] = None) -> "CredentialRecord":
        """Build a record from the token endpoint's JSON response."""
        if now is None:
            now = datetime.now(timezone.utc)

        expiry = None
        expires_in = token_data.get("expires_in")
        if expires_in is not None:
            expiry = (now + timedelta(seconds=int(expires_in))).isoformat()

        return cls(
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token"),
            expiry=expiry,
            token_type=token_data.get("token_type", "Bearer"),
            scope=token_data.get("scope"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CredentialRecord":
        expiry = data.get("expiry")
        # Token files written by the Node.js googleapis client carry
        # expiry_date in epoch milliseconds instead
        if expiry is None and isinstance(data.get("expiry_date"), (int, float)):
            expiry = datetime.fromtimestamp(data["expiry_date"] / 1000, tz=timezone.utc).isoformat()

        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expiry=expiry,
            token_type=data.get("token_type") or "Bearer",
            scope=data.get("scope"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry,
            "token_type": self.token_type,
        }
        if self.scope is not None:
            data["scope"] = self.scope
        return data

    def expiry_time(self) -> Optional[datetime]:
        """Parse the expiry timestamp, or None if absent or unparseable."""
        if not self.expiry:
            return None
        expiry = self.expiry
        # fromisoformat only accepts a trailing Z from Python 3.11
        if expiry.endswith("Z"):
            expiry = expiry[:-1] + "+00:00"
        try:
            expiry_time = datetime.fromisoformat(expiry)
        except ValueError:
            return None
        if expiry_time.tzinfo is None:
            expiry_time = expiry_time.replace(tzinfo=timezone.utc)
        return expiry_time.astimezone(timezone.utc)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expiry_time = self.expiry_time()
        if expiry_time is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc)
        return now >= expiry_time


def load_token(token_path: str) -> CredentialRecord:
    """
    Read the stored credential record.

    Args:
        token_path: Path to token.json

    Returns:
        The stored CredentialRecord

    Raises:
        MissingTokenFile: No token has been stored yet
        MalformedJSON: The file is not a JSON object with an access_token
    """
    if not os.path.exists(token_path):
        raise MissingTokenFile(
            f"No stored token found at {token_path}. "
            "Please run the setup script first to generate a token: python -m drive_transfer.setup_token"
        )

    try:
        with open(token_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise MalformedJSON(f"Could not parse token file {token_path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("access_token"), str):
        raise MalformedJSON(f"Token file {token_path} has no access_token")

    if data.get("expiry") is not None and not isinstance(data["expiry"], str):
        raise MalformedJSON(f"Token file {token_path} has a non-string expiry")

    try:
        return CredentialRecord.from_dict(data)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedJSON(f"Token file {token_path} has an invalid expiry_date: {e}") from e


def save_token(record: CredentialRecord, token_path: str) -> None:
    """Write the credential record to token_path as JSON."""
    try:
        with open(token_path, "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f, indent=2)
    except OSError as e:
        raise TokenWriteError(f"Could not write token file {token_path}: {e}") from e

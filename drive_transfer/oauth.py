#!/usr/bin/env python3
"""
OAuth authorization for Google Drive.

Two ways to end up with an access token:
1. Interactive: build the consent URL, read the authorization code the user
   pastes back, exchange it at the token endpoint and store the result
2. Non-interactive: load the token stored by an earlier interactive run

Stored tokens are never refreshed. An expired token is sent as-is and the
Drive API rejects it with a 401.
"""

import urllib.parse
import webbrowser
from enum import Enum
from typing import Callable, List, Optional

import requests

from .config_utils import DRIVE_SCOPES, ClientSecrets
from .errors import AuthorizationExchangeFailure, AuthorizationStateError
from .token_store import CredentialRecord, load_token, save_token

CodeProvider = Callable[[str], str]


class AuthState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AWAITING_USER_CODE = "awaiting_user_code"
    AUTHENTICATED = "authenticated"


def prompt_for_code(prompt: str) -> str:
    """Read the authorization code from the console."""
    return input(prompt)


class Authorizer:
    """
    Tracks one authorization attempt.

    The state moves UNAUTHENTICATED -> AWAITING_USER_CODE -> AUTHENTICATED on
    the interactive path, or straight to AUTHENTICATED when a stored token is
    loaded.
    """

    def __init__(self, secrets: ClientSecrets, token_path: str, scopes: Optional[List[str]] = None):
        self.secrets = secrets
        self.token_path = token_path
        self.scopes = list(scopes or DRIVE_SCOPES)
        self.state = AuthState.UNAUTHENTICATED
        self.credentials: Optional[CredentialRecord] = None

    @property
    def access_token(self) -> str:
        if self.state is not AuthState.AUTHENTICATED or self.credentials is None:
            raise AuthorizationStateError("Not authenticated yet")
        return self.credentials.access_token

    def authorization_url(self) -> str:
        """Build the consent URL and start waiting for the user's code."""
        if self.state is AuthState.AUTHENTICATED:
            raise AuthorizationStateError("Already authenticated")

        params = {
            'client_id': self.secrets.client_id,
            'redirect_uri': self.secrets.redirect_uri,
            'response_type': 'code',
            'scope': ' '.join(self.scopes),
            # offline + consent forces Google to issue a refresh_token
            'access_type': 'offline',
            'prompt': 'consent',
        }
        self.state = AuthState.AWAITING_USER_CODE
        return f"{self.secrets.auth_uri}?{urllib.parse.urlencode(params)}"

    def exchange_code(self, code: str) -> CredentialRecord:
        """
        Exchange an authorization code for tokens and store them.

        Args:
            code: Authorization code pasted by the user

        Returns:
            The stored CredentialRecord

        Raises:
            AuthorizationStateError: No authorization URL was issued yet
            AuthorizationExchangeFailure: The token endpoint rejected the code,
                could not be reached, or returned no refresh_token
        """
        if self.state is not AuthState.AWAITING_USER_CODE:
            raise AuthorizationStateError(
                f"Cannot exchange a code while {self.state.value}; build the authorization URL first"
            )

        code = code.strip()
        if not code:
            raise AuthorizationExchangeFailure("No authorization code entered")

        print("\n🔄 Exchanging authorization code for access token...")

        data = {
            'grant_type': 'authorization_code',
            'code': code,
            'client_id': self.secrets.client_id,
            'client_secret': self.secrets.client_secret,
            'redirect_uri': self.secrets.redirect_uri,
        }

        try:
            response = requests.post(self.secrets.token_uri, data=data, timeout=30)
        except requests.exceptions.RequestException as e:
            raise AuthorizationExchangeFailure(f"Network error during token exchange: {e}") from e

        if response.status_code != 200:
            raise AuthorizationExchangeFailure(
                f"Token exchange failed: {response.status_code} {response.text}"
            )

        try:
            token_data = response.json()
        except ValueError as e:
            raise AuthorizationExchangeFailure(f"Token endpoint returned invalid JSON: {e}") from e

        if not token_data.get("access_token"):
            raise AuthorizationExchangeFailure("Token response contained no access_token")
        if not token_data.get("refresh_token"):
            raise AuthorizationExchangeFailure(
                "Token response contained no refresh_token. Remove this app's access at "
                "https://myaccount.google.com/permissions and run the setup again"
            )

        record = CredentialRecord.from_token_response(token_data)
        save_token(record, self.token_path)
        print(f"✅ Token stored to {self.token_path}")

        self.credentials = record
        self.state = AuthState.AUTHENTICATED
        return record

    def run_interactive(self, code_provider: CodeProvider = prompt_for_code,
                        open_browser: bool = False) -> CredentialRecord:
        """Show the consent URL, read the code and exchange it."""
        auth_url = self.authorization_url()
        print("📋 Authorize this app by visiting this URL:")
        print(f"   {auth_url}")

        if open_browser:
            try:
                webbrowser.open(auth_url)
            except webbrowser.Error as e:
                print(f"❌ Could not launch browser: {e}")
                print("   Please open the URL above manually")

        try:
            code = code_provider("\nEnter the code from that page here: ")
        except EOFError as e:
            raise AuthorizationExchangeFailure("No authorization code entered") from e
        return self.exchange_code(code)

    def load_stored(self) -> CredentialRecord:
        """
        Use the token stored by an earlier interactive run.

        Raises:
            MissingTokenFile: No token has been stored yet
            MalformedJSON: The token file cannot be parsed
        """
        if self.state is not AuthState.UNAUTHENTICATED:
            raise AuthorizationStateError(f"Cannot load a stored token while {self.state.value}")

        record = load_token(self.token_path)
        print("✅ Using stored authentication token")

        if record.is_expired():
            expiry_time = record.expiry_time()
            print(f"⚠️  Warning: stored token expired on {expiry_time.strftime('%Y-%m-%d %H:%M:%S %Z')}")
            print("   Requests may be rejected. To fix this, run: python -m drive_transfer.setup_token")

        self.credentials = record
        self.state = AuthState.AUTHENTICATED
        return record

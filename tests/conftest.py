"""
Pytest configuration and fixtures for the Drive ownership transfer tests.
"""

import json
from unittest.mock import MagicMock

import pytest

from drive_transfer.config_utils import ClientSecrets


def make_response(status_code=200, json_data=None, text=None):
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
        resp.text = text or ""
    else:
        resp.json.return_value = json_data
        resp.text = text if text is not None else json.dumps(json_data)
    return resp


def api_error(status_code, message, reason="notFound"):
    """Build a Google-style API error response."""
    return make_response(status_code, {
        "error": {
            "code": status_code,
            "message": message,
            "errors": [{"domain": "global", "reason": reason, "message": message}],
        }
    })


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run each test from an empty directory without path overrides."""
    for name in ("CREDENTIALS_PATH", "TOKEN_PATH", "FILE_ID", "NEW_OWNER_EMAIL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def client_secrets():
    return ClientSecrets(
        client_id="client-123.apps.googleusercontent.com",
        client_secret="s3cr3t",
        redirect_uris=["http://localhost"],
    )


@pytest.fixture
def credentials_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps({
        "installed": {
            "client_id": "client-123.apps.googleusercontent.com",
            "client_secret": "s3cr3t",
            "redirect_uris": ["http://localhost"],
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    }))
    return path


@pytest.fixture
def token_file(tmp_path):
    path = tmp_path / "token.json"
    path.write_text(json.dumps({
        "access_token": "ya29.stored",
        "refresh_token": "1//refresh",
        "expiry": "2099-01-01T00:00:00+00:00",
        "token_type": "Bearer",
    }))
    return path


@pytest.fixture
def session():
    """A requests.Session double; queue responses on session.request.side_effect."""
    return MagicMock()


def request_methods(session):
    """HTTP methods issued through a session double, in order."""
    return [c.args[0] for c in session.request.call_args_list]

import json
from datetime import datetime, timezone

import pytest

from drive_transfer.errors import MalformedJSON, MissingTokenFile, TokenWriteError
from drive_transfer.token_store import CredentialRecord, load_token, save_token


@pytest.mark.parametrize("record", [
    CredentialRecord("ya29.a", "1//r", "2025-07-23T05:50:44+00:00", "Bearer"),
    CredentialRecord("ya29.b", None, None, "Bearer"),
    CredentialRecord("ya29.c", "1//r", "2030-01-01T00:00:00+00:00", "Bearer", scope="https://www.googleapis.com/auth/drive"),
])
def test_save_then_load_returns_same_record(tmp_path, record):
    path = str(tmp_path / "token.json")
    save_token(record, path)
    assert load_token(path) == record


def test_saved_file_uses_token_json_field_names(tmp_path):
    path = tmp_path / "token.json"
    save_token(CredentialRecord("ya29.a", "1//r", "2030-01-01T00:00:00+00:00"), str(path))

    data = json.loads(path.read_text())

    assert data == {
        "access_token": "ya29.a",
        "refresh_token": "1//r",
        "expiry": "2030-01-01T00:00:00+00:00",
        "token_type": "Bearer",
    }


def test_load_missing_token_file(tmp_path):
    with pytest.raises(MissingTokenFile) as exc_info:
        load_token(str(tmp_path / "token.json"))
    assert "setup" in str(exc_info.value)


@pytest.mark.parametrize("content", [
    "",
    "[1, 2]",
    '{"refresh_token": "x"}',
    "{broken",
    '{"access_token": "ya29.a", "expiry": 1700000000}',
    '{"access_token": "ya29.a", "expiry_date": 1e20}',
])
def test_load_malformed_token_file(tmp_path, content):
    path = tmp_path / "token.json"
    path.write_text(content)
    with pytest.raises(MalformedJSON):
        load_token(str(path))


def test_save_into_missing_directory(tmp_path):
    with pytest.raises(TokenWriteError):
        save_token(CredentialRecord("ya29.a"), str(tmp_path / "missing" / "token.json"))


def test_load_accepts_node_expiry_date(tmp_path):
    path = tmp_path / "token.json"
    path.write_text(json.dumps({
        "access_token": "ya29.a",
        "refresh_token": "1//r",
        "scope": "https://www.googleapis.com/auth/drive",
        "token_type": "Bearer",
        "expiry_date": 1893456000000,
    }))

    record = load_token(str(path))

    assert record.expiry_time() == datetime(2030, 1, 1, tzinfo=timezone.utc)


def test_from_token_response_computes_expiry():
    now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    record = CredentialRecord.from_token_response(
        {"access_token": "ya29.a", "refresh_token": "1//r", "expires_in": 3599, "token_type": "Bearer"},
        now=now,
    )
    assert record.expiry == "2025-01-01T12:59:59+00:00"
    assert record.refresh_token == "1//r"


def test_is_expired():
    record = CredentialRecord("ya29.a", expiry="2025-01-01T12:00:00+00:00")
    assert record.is_expired(now=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))
    assert not record.is_expired(now=datetime(2025, 1, 1, 11, 59, tzinfo=timezone.utc))


def test_unknown_expiry_is_not_expired():
    assert not CredentialRecord("ya29.a").is_expired()
    assert not CredentialRecord("ya29.a", expiry="tomorrow").is_expired()


def test_expiry_with_trailing_z():
    record = CredentialRecord("ya29.a", expiry="2025-01-01T12:00:00Z")
    assert record.expiry_time() == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert record.is_expired(now=datetime(2025, 1, 1, 12, 0, 1, tzinfo=timezone.utc))

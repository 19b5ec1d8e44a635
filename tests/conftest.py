from unittest.mock import MagicMock

import pytest

from commitsheets.core.config import get_settings

API_URL = "https://api.bitbucket.org/2.0"

REQUIRED_ENV = {
    "BITBUCKET_WORKSPACE": "acme",
    "BITBUCKET_REPO_SLUG": "widgets",
    "BITBUCKET_ACCESS_TOKEN": "secret-token",
    "GOOGLE_SPREADSHEET_ID": "sheet-123",
}


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def required_env(monkeypatch):
    for key, value in REQUIRED_ENV.items():
        monkeypatch.setenv(key, value)
    return REQUIRED_ENV


@pytest.fixture
def commit_payload():
    """Factory for Bitbucket-shaped commit dicts."""

    def make(
        commit_hash,
        message="Fix the thing\n",
        author="Jane Doe <jane@example.com>",
        date="2024-01-15T10:30:00+00:00",
        parents=(),
        links=True,
    ):
        payload = {
            "hash": commit_hash,
            "message": message,
            "author": {"raw": author},
            "date": date,
            "parents": [{"hash": parent, "type": "commit"} for parent in parents],
        }
        if links:
            payload["links"] = {
                "html": {"href": f"https://bitbucket.org/acme/widgets/commits/{commit_hash}"},
                "diff": {"href": f"{API_URL}/repositories/acme/widgets/diff/{commit_hash}"},
            }
        return payload

    return make


@pytest.fixture
def sheets_client():
    """Stand-in for the googleapiclient sheets resource with an existing 'Commits' tab."""
    client = MagicMock()
    client.spreadsheets().get().execute.return_value = {
        "sheets": [
            {"properties": {"title": "Other", "sheetId": 1}},
            {"properties": {"title": "Commits", "sheetId": 42}},
        ]
    }
    client.spreadsheets().batchUpdate().execute.return_value = {
        "replies": [{"addSheet": {"properties": {"sheetId": 99}}}]
    }
    client.spreadsheets().values().clear().execute.return_value = {}
    client.spreadsheets().values().update().execute.return_value = {}
    # drop the calls made while wiring return values
    client.reset_mock(return_value=False, side_effect=False)
    return client

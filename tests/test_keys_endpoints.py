"""Tests for the API key CRUD endpoints."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from keydash.core.config import Settings
from keydash.core.errors import StoreError
from keydash.core.security import hash_api_key, mask_api_key
from keydash.main import app
from keydash.models.api_key import ApiKey

KEY_PATTERN = re.compile(r"^sk-[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[0-9a-f]{4}-[0-9a-f]{12}$")


def _create(client: TestClient, name: str = "test", limit: int = 1000) -> dict:
    response = client.post("/keys", json={"name": name, "limit": limit})
    assert response.status_code == 200
    return response.json()


# =============================================================================
# Create
# =============================================================================


def test_create_returns_plaintext_key_and_zero_usage(client: TestClient) -> None:
    body = _create(client, "test", 1000)

    assert body["name"] == "test"
    assert body["usage"] == 0
    assert body["usage_limit"] == 1000
    assert KEY_PATTERN.match(body["key"])
    assert body["id"]
    assert body["created_at"] == body["updated_at"]


def test_create_assigns_fresh_ids_and_keys(client: TestClient) -> None:
    first = _create(client)
    second = _create(client)

    assert first["id"] != second["id"]
    assert first["key"] != second["key"]


def test_create_stores_digest_not_plaintext(client: TestClient, db_session: Session) -> None:
    body = _create(client)

    stored = db_session.get(ApiKey, body["id"])

    assert stored is not None
    assert stored.key_hash == hash_api_key(body["key"])
    assert body["key"] not in (stored.key_hash, stored.key_hint)
    assert stored.key_hint == mask_api_key(body["key"])


def test_create_rejects_empty_name(client: TestClient) -> None:
    response = client.post("/keys", json={"name": "", "limit": 10})
    assert response.status_code == 422


def test_create_rejects_negative_limit(client: TestClient) -> None:
    response = client.post("/keys", json={"name": "test", "limit": -1})
    assert response.status_code == 422


# =============================================================================
# List / get
# =============================================================================


def test_list_returns_masked_keys_newest_first(client: TestClient, db_session: Session) -> None:
    now = datetime.now(timezone.utc)
    for index, name in enumerate(["oldest", "middle", "newest"]):
        created = now + timedelta(minutes=index)
        db_session.add(
            ApiKey(
                name=name,
                key_hash=hash_api_key(f"sk-{name}"),
                key_hint=mask_api_key(f"sk-{name}"),
                usage=0,
                usage_limit=100,
                created_at=created,
                updated_at=created,
            )
        )
    db_session.commit()

    response = client.get("/keys")

    assert response.status_code == 200
    body = response.json()
    assert [item["name"] for item in body] == ["newest", "middle", "oldest"]
    assert body[0]["key"] == mask_api_key("sk-newest")


def test_list_never_exposes_plaintext(client: TestClient) -> None:
    created = _create(client)

    listed = client.get("/keys").json()

    assert len(listed) == 1
    assert listed[0]["id"] == created["id"]
    assert listed[0]["key"] == mask_api_key(created["key"])
    assert listed[0]["key"].startswith("sk-" + "*" * 20)


def test_get_unknown_key_returns_404(client: TestClient) -> None:
    response = client.get("/keys/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "API key not found"}


# =============================================================================
# Rename
# =============================================================================


def test_rename_changes_only_name_and_updated_at(client: TestClient) -> None:
    created = _create(client, "before", 500)
    before = client.get(f"/keys/{created['id']}").json()

    response = client.put(f"/keys/{created['id']}", json={"name": "after"})

    assert response.status_code == 200
    assert response.json() == {"success": True}

    after = client.get(f"/keys/{created['id']}").json()
    assert after["name"] == "after"
    assert datetime.fromisoformat(after["updated_at"]) >= datetime.fromisoformat(before["updated_at"])
    for field in ("id", "key", "usage", "usage_limit", "created_at"):
        assert after[field] == before[field]


def test_rename_unknown_key_returns_404(client: TestClient) -> None:
    response = client.put("/keys/does-not-exist", json={"name": "x"})

    assert response.status_code == 404
    assert response.json() == {"error": "API key not found"}


def test_rename_rejects_empty_name(client: TestClient) -> None:
    created = _create(client)
    response = client.put(f"/keys/{created['id']}", json={"name": ""})
    assert response.status_code == 422


# =============================================================================
# Delete
# =============================================================================


def test_delete_removes_key_from_list(client: TestClient) -> None:
    kept = _create(client, "kept")
    removed = _create(client, "removed")

    response = client.delete(f"/keys/{removed['id']}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    ids = [item["id"] for item in client.get("/keys").json()]
    assert ids == [kept["id"]]


def test_delete_invalidates_key(client: TestClient) -> None:
    created = _create(client)
    client.delete(f"/keys/{created['id']}")

    response = client.post("/validate", json={"key": created["key"]})

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "invalid API key"}


def test_delete_unknown_key_returns_404(client: TestClient) -> None:
    response = client.delete("/keys/does-not-exist")
    assert response.status_code == 404


# =============================================================================
# Error mapping
# =============================================================================


@patch("keydash.routers.keys._api_key_repository")
def test_store_error_is_redacted(mock_repo: MagicMock, client: TestClient) -> None:
    mock_repo.list_all.side_effect = StoreError('relation "api_keys" does not exist')

    response = client.get("/keys")

    assert response.status_code == 500
    assert response.json() == {"error": "database operation failed"}
    assert "api_keys" not in response.text


@patch("keydash.routers.keys._api_key_repository")
def test_create_store_error_returns_500(mock_repo: MagicMock, client: TestClient) -> None:
    mock_repo.insert.side_effect = StoreError("duplicate key value")

    response = client.post("/keys", json={"name": "test", "limit": 10})

    assert response.status_code == 500
    assert response.json() == {"error": "database operation failed"}


def test_missing_credentials_return_configuration_error() -> None:
    unconfigured = Settings(store_url=None, store_token=None, _env_file=None)

    with patch("keydash.db.session.get_settings", return_value=unconfigured):
        response = TestClient(app).get("/keys")

    assert response.status_code == 500
    assert response.json() == {"error": "server configuration error"}

"""End-to-end flow against a real MongoDB and the in-memory fsspec filesystem.

Skipped when no MongoDB answers on ``MONGO_URI``.
"""

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from infrastructure.config import Settings, settings
from infrastructure.di.container import create_container
from interfaces.api import main
from interfaces.dependencies import get_container


@pytest.fixture
def mongo_settings() -> Settings:
    return settings.model_copy(
        update={
            "mongo_db": f"docuvault_test_{uuid4().hex[:8]}",
            "blob_base_url": f"memory://integration-{uuid4().hex}",
            "blob_chunk_size_bytes": 8,
            "notification_backend": "mongo",
        },
    )


@pytest.fixture
def mongo(mongo_settings):
    client = MongoClient(mongo_settings.mongo_uri, serverSelectionTimeoutMS=500)
    try:
        client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip("MongoDB is not available")

    yield client[mongo_settings.mongo_db]

    client.drop_database(mongo_settings.mongo_db)
    client.close()


@pytest.fixture
def users(mongo, mongo_settings) -> dict[str, str]:
    ids = {name: str(uuid4()) for name in ("owner", "friend", "hod", "outsider")}
    mongo[mongo_settings.mongo_users_collection].insert_many(
        [
            {"_id": ids["owner"], "name": "Olu", "role": "Student", "department_id": "cs"},
            {"_id": ids["friend"], "name": "Fey", "role": "Student", "department_id": "cs"},
            {"_id": ids["hod"], "name": "Hana", "role": "HoD", "department_id": "cs"},
            {"_id": ids["outsider"], "name": "Oz", "role": "Lecturer", "department_id": "bio"},
        ],
    )
    return ids


@pytest.fixture
def client(mongo_settings, users, monkeypatch):
    container = create_container(mongo_settings)
    monkeypatch.setattr(main, "get_container", lambda: container)
    main.app.dependency_overrides[get_container] = lambda: container

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.clear()


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


def test_upload_share_stream_delete(client, users, mongo, mongo_settings) -> None:
    # Upload
    uploaded = client.post(
        "/documents",
        headers=_as(users["owner"]),
        files={"file": ("notes.txt", b"0123456789abcdef", "text/plain")},
        data={"title": "Lecture notes", "visibility": "shared"},
    )
    assert uploaded.status_code == 201
    document_id = uploaded.json()["data"]["document_id"]

    # Friend has no access until shared; HoD of the department does
    stream_url = f"/files/stream/{document_id}"
    assert client.get(stream_url, headers=_as(users["friend"])).status_code == 403
    assert client.get(stream_url, headers=_as(users["hod"])).status_code == 200
    assert client.get(stream_url, headers=_as(users["outsider"])).status_code == 403

    shared = client.post(
        f"/documents/{document_id}/share",
        headers=_as(users["owner"]),
        json={"user_ids": [users["friend"], users["friend"], users["owner"]]},
    )
    result = shared.json()["data"]
    assert len(result["granted"]) == 1
    assert [e["error"] for e in result["errors"]] == ["already shared", "cannot share with self"]

    # Ranged read across chunk boundaries
    ranged = client.get(stream_url, headers={**_as(users["friend"]), "Range": "bytes=6-11"})
    assert ranged.status_code == 206
    assert ranged.content == b"6789ab"
    assert ranged.headers["content-range"] == "bytes 6-11/16"

    received = client.get("/shares/received", headers=_as(users["friend"])).json()["data"]
    assert [item["document"]["title"] for item in received["items"]] == ["Lecture notes"]

    notifications = mongo[mongo_settings.mongo_notifications_collection]
    assert notifications.count_documents({"receiver_id": users["friend"]}) == 1

    # Delete needs force while the grant exists
    conflict = client.delete(f"/documents/{document_id}", headers=_as(users["owner"]))
    assert conflict.status_code == 409
    deleted = client.delete(f"/documents/{document_id}?force=true", headers=_as(users["owner"]))
    report = deleted.json()["data"]
    assert report["blob_deleted"] is True
    assert report["shares_removed"] == 1

    assert client.get(stream_url, headers=_as(users["owner"])).status_code == 404
    assert mongo[mongo_settings.mongo_shares_collection].count_documents({}) == 0


def test_folder_cascade(client, users) -> None:
    owner = _as(users["owner"])
    folder = client.post("/folders", headers=owner, json={"name": "Term 1"}).json()["data"]

    for name in ("a.txt", "b.txt"):
        response = client.post(
            "/documents",
            headers=owner,
            files={"file": (name, b"content of " + name.encode(), "text/plain")},
            data={"folder_id": folder["folder_id"]},
        )
        assert response.status_code == 201

    folders = client.get("/folders", headers=owner).json()["data"]
    assert folders["items"][0]["document_count"] == 2

    conflict = client.delete(f"/folders/{folder['folder_id']}", headers=owner)
    assert conflict.status_code == 409
    assert conflict.json()["data"]["folder"]["document_count"] == 2

    deleted = client.delete(
        f"/folders/{folder['folder_id']}?delete_documents=true",
        headers=owner,
    )
    report = deleted.json()["data"]
    assert report["documents_processed"] == 2
    assert report["documents_deleted"] == 2
    assert report["errors"] == []

    remaining = client.get("/documents", headers=owner).json()["data"]
    assert remaining["total"] == 0

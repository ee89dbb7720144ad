from __future__ import annotations

import uuid
from datetime import timedelta
from pathlib import Path

from fastapi.testclient import TestClient

from tubely_backend.app import create_app
from tubely_backend.auth import make_jwt
from tubely_backend.records import get_video_store, set_video_store
from tubely_backend.settings import Settings, set_settings

SECRET = "read-secret"


def _make_settings(tmp_path: Path) -> Settings:
    return Settings(
        assets_root=tmp_path / "assets",
        records_root=tmp_path / "records",
        port=8091,
        jwt_secret=SECRET,
        s3_bucket="bucket",
        s3_region="us-east-1",
    )


def _bearer(user_id: uuid.UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_jwt(user_id, SECRET, timedelta(minutes=5))}"}


def test_read_video_returns_owned_record(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    set_settings(settings)
    set_video_store(None)
    owner = uuid.uuid4()
    video = get_video_store(settings).create_video(
        user_id=owner, title="Boots", description="unboxing"
    )

    client = TestClient(create_app())
    response = client.get(f"/api/videos/{video.id}", headers=_bearer(owner))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(video.id)
    assert body["user_id"] == str(owner)
    assert body["title"] == "Boots"
    assert body["video_url"] is None
    assert body["thumbnail_url"] is None

    set_settings(None)
    set_video_store(None)


def test_read_video_rejects_other_users(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    set_settings(settings)
    set_video_store(None)
    video = get_video_store(settings).create_video(user_id=uuid.uuid4(), title="Boots")

    client = TestClient(create_app())
    response = client.get(f"/api/videos/{video.id}", headers=_bearer(uuid.uuid4()))

    assert response.status_code == 403

    set_settings(None)
    set_video_store(None)

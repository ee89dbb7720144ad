"""Video metadata records and their JSON-file backed store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from .settings import Settings

logger = logging.getLogger(__name__)

_VIDEO_STORE: VideoStoreProtocol | None = None


class VideoNotFoundError(LookupError):
    """Raised when no record exists for the requested video id."""


class VideoStoreError(RuntimeError):
    """Raised when a record cannot be read from or written to storage."""


@dataclass(slots=True)
class Video:
    """Metadata describing an uploaded video and its published artefacts."""

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str
    created_at: datetime
    updated_at: datetime
    thumbnail_url: str | None = None
    video_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert the record into a JSON-serialisable dictionary."""
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "thumbnail_url": self.thumbnail_url,
            "video_url": self.video_url,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Video":
        """Reconstruct a record from a dictionary."""
        return cls(
            id=uuid.UUID(payload["id"]),
            user_id=uuid.UUID(payload["user_id"]),
            title=payload.get("title") or "",
            description=payload.get("description") or "",
            created_at=datetime.fromisoformat(payload["created_at"]),
            updated_at=datetime.fromisoformat(payload["updated_at"]),
            thumbnail_url=payload.get("thumbnail_url"),
            video_url=payload.get("video_url"),
        )


class VideoStoreProtocol(Protocol):
    """Operations the upload handlers need from the record store."""

    def get_video(self, video_id: uuid.UUID) -> Video:  # pragma: no cover - Protocol stub
        ...

    def update_video(self, video: Video) -> None:  # pragma: no cover - Protocol stub
        ...

    def create_video(
        self,
        *,
        user_id: uuid.UUID,
        title: str,
        description: str = "",
    ) -> Video:  # pragma: no cover - Protocol stub
        ...


@dataclass(slots=True)
class JsonVideoStore:
    """Stores one ``<video_id>.json`` document per record under a directory."""

    root: Path

    def _record_path(self, video_id: uuid.UUID) -> Path:
        return self.root / f"{video_id}.json"

    def get_video(self, video_id: uuid.UUID) -> Video:
        path = self._record_path(video_id)
        if not path.exists():
            raise VideoNotFoundError(f"video {video_id} does not exist")

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return Video.from_dict(payload)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise VideoStoreError(f"failed to read video record {path}") from exc

    def update_video(self, video: Video) -> None:
        path = self._record_path(video.id)
        if not path.exists():
            raise VideoNotFoundError(f"video {video.id} does not exist")

        video.updated_at = datetime.now(timezone.utc)
        self._write(path, video)

    def create_video(
        self,
        *,
        user_id: uuid.UUID,
        title: str,
        description: str = "",
    ) -> Video:
        now = datetime.now(timezone.utc)
        video = Video(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            description=description,
            created_at=now,
            updated_at=now,
        )
        self._write(self._record_path(video.id), video)
        logger.info(
            "Created video record",
            extra={"video_id": str(video.id), "user_id": str(user_id)},
        )
        return video

    def _write(self, path: Path, video: Video) -> None:
        """Replace the record atomically so readers never see a partial file."""
        content = json.dumps(video.to_dict(), indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(content)
                os.replace(temp_name, path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise VideoStoreError(f"failed to write video record {path}") from exc


def get_video_store(settings: Settings) -> VideoStoreProtocol:
    """Return a cached record store built from the provided settings."""
    global _VIDEO_STORE

    if _VIDEO_STORE is None:
        _VIDEO_STORE = JsonVideoStore(root=settings.records_root)

    return _VIDEO_STORE


def set_video_store(store: VideoStoreProtocol | None) -> None:
    """Override the cached record store, mainly for testing."""
    global _VIDEO_STORE
    _VIDEO_STORE = store


__all__ = [
    "JsonVideoStore",
    "Video",
    "VideoNotFoundError",
    "VideoStoreError",
    "VideoStoreProtocol",
    "get_video_store",
    "set_video_store",
]

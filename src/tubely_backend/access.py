"""Authorization gate shared by endpoints that act on a caller's own video."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status

from .auth import get_current_user_id
from .records import (
    Video,
    VideoNotFoundError,
    VideoStoreError,
    VideoStoreProtocol,
    get_video_store,
)
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OwnedVideo:
    """The authenticated caller together with a record they own."""

    user_id: uuid.UUID
    video: Video


def get_store(settings: Settings = Depends(get_settings)) -> VideoStoreProtocol:
    return get_video_store(settings)


def parse_video_id(video_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(video_id)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Invalid ID") from exc


def get_owned_video(
    video_id: uuid.UUID = Depends(parse_video_id),
    user_id: uuid.UUID = Depends(get_current_user_id),
    store: VideoStoreProtocol = Depends(get_store),
) -> OwnedVideo:
    """Fetch the target record and require that the caller owns it."""
    log_extra = {"video_id": str(video_id), "user_id": str(user_id)}

    try:
        video = store.get_video(video_id)
    except VideoNotFoundError as exc:
        logger.info("Video not found", extra=log_extra)
        raise HTTPException(
            status.HTTP_404_NOT_FOUND, detail="Couldn't find video"
        ) from exc
    except VideoStoreError as exc:
        logger.exception("Failed to load video record", extra=log_extra)
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Couldn't load video"
        ) from exc

    if video.user_id != user_id:
        logger.warning("Caller does not own video", extra=log_extra)
        raise HTTPException(
            status.HTTP_403_FORBIDDEN, detail="Not authorized to update this video"
        )

    return OwnedVideo(user_id=user_id, video=video)


__all__ = ["OwnedVideo", "get_owned_video", "get_store", "parse_video_id"]

# Read access to video records.

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from ..access import OwnedVideo, get_owned_video
from ..records import Video

router = APIRouter(prefix="/api/videos", tags=["videos"])


class VideoResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    created_at: datetime
    updated_at: datetime
    thumbnail_url: str | None = None
    video_url: str | None = None

    @classmethod
    def from_video(cls, video: Video) -> "VideoResponse":
        return cls(
            id=str(video.id),
            user_id=str(video.user_id),
            title=video.title,
            description=video.description,
            created_at=video.created_at,
            updated_at=video.updated_at,
            thumbnail_url=video.thumbnail_url,
            video_url=video.video_url,
        )


@router.get(
    "/{video_id}",
    response_model=VideoResponse,
    status_code=status.HTTP_200_OK,
    summary="Fetch a video record owned by the caller",
)
async def read_video(owned: OwnedVideo = Depends(get_owned_video)) -> VideoResponse:
    return VideoResponse.from_video(owned.video)


__all__ = ["VideoResponse", "router"]

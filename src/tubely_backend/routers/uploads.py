# Video and thumbnail upload endpoints.

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from ..access import OwnedVideo, get_owned_video, get_store
from ..media import (
    FastStartError,
    MediaProbeError,
    MediaProcessor,
    build_asset_url,
    classify_dimensions,
    extension_for_media_type,
    generate_asset_name,
    get_media_processor,
    write_asset,
)
from ..media.assets import THUMBNAIL_EXTENSIONS
from ..media.faststart import PROCESSED_SUFFIX
from ..records import VideoNotFoundError, VideoStoreError, VideoStoreProtocol
from ..settings import Settings, get_settings
from ..storage import (
    ObjectPublishError,
    ObjectPublisherProtocol,
    build_object_url,
    generate_video_key,
    get_object_publisher,
)
from ..uploads import receive_upload
from .videos import VideoResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["uploads"])

VIDEO_MEDIA_TYPES = frozenset({"video/mp4"})


def _get_publisher(
    settings: Settings = Depends(get_settings),
) -> ObjectPublisherProtocol:
    return get_object_publisher(settings)


def _get_processor(settings: Settings = Depends(get_settings)) -> MediaProcessor:
    return get_media_processor(settings)


def _internal_error(detail: str) -> HTTPException:
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def _save_record(
    store: VideoStoreProtocol, owned: OwnedVideo, artefact: str
) -> VideoResponse:
    """Persist the updated record; the stored artefact is left in place on failure."""
    try:
        store.update_video(owned.video)
    except (VideoNotFoundError, VideoStoreError) as exc:
        logger.exception(
            "Failed to update video record; stored artefact %s is unreferenced",
            artefact,
            extra={"video_id": str(owned.video.id), "user_id": str(owned.user_id)},
        )
        raise _internal_error("Couldn't update video") from exc

    return VideoResponse.from_video(owned.video)


def _publish_video(
    source: BinaryIO,
    *,
    media_type: str,
    settings: Settings,
    processor: MediaProcessor,
    publisher: ObjectPublisherProtocol,
) -> str:
    """Stage, remux, classify and upload a video, returning its object key.

    Staged and processed files are removed before returning, whatever the outcome.
    """
    staging_dir = settings.staging_root
    try:
        if staging_dir is not None:
            staging_dir.mkdir(parents=True, exist_ok=True)
        fd, staged_name = tempfile.mkstemp(
            prefix="tubely-upload-", suffix=".mp4", dir=staging_dir
        )
    except OSError as exc:
        logger.exception("Failed to create temporary file")
        raise _internal_error("Failed to create temporary file") from exc

    staged_path = Path(staged_name)
    processed_path = staged_path.with_name(staged_path.name + PROCESSED_SUFFIX)
    try:
        try:
            with os.fdopen(fd, "wb") as staged:
                shutil.copyfileobj(source, staged)
        except OSError as exc:
            logger.exception("Failed to stage uploaded video")
            raise _internal_error("Failed to copy video to temporary file") from exc

        try:
            processed_path = processor.repackage(staged_path)
        except (FastStartError, OSError) as exc:
            logger.exception("Fast-start processing failed")
            raise _internal_error("Failed to process video for fast start") from exc

        try:
            dimensions = processor.probe(staged_path)
        except (MediaProbeError, OSError) as exc:
            logger.exception("Aspect ratio probe failed")
            raise _internal_error("Failed to determine video aspect ratio") from exc

        key = generate_video_key(classify_dimensions(dimensions))
        try:
            publisher.put_object(key, processed_path, media_type)
        except ObjectPublishError as exc:
            logger.exception("Failed to upload video to object storage")
            raise _internal_error("Failed to upload video to S3") from exc
    finally:
        staged_path.unlink(missing_ok=True)
        processed_path.unlink(missing_ok=True)

    return key


async def upload_video(
    request: Request,
    owned: OwnedVideo = Depends(get_owned_video),
    settings: Settings = Depends(get_settings),
    store: VideoStoreProtocol = Depends(get_store),
    processor: MediaProcessor = Depends(_get_processor),
    publisher: ObjectPublisherProtocol = Depends(_get_publisher),
) -> VideoResponse:
    """Publish an MP4 for the caller's video and record its public URL."""
    async with receive_upload(
        request,
        field_name="video",
        max_bytes=settings.max_video_upload_bytes,
        allowed_types=VIDEO_MEDIA_TYPES,
        unsupported_detail="Invalid file type. Only MP4 videos are allowed.",
    ) as upload:
        key = await run_in_threadpool(
            _publish_video,
            upload.file.file,
            media_type=upload.media_type,
            settings=settings,
            processor=processor,
            publisher=publisher,
        )

    video_url = build_object_url(settings.s3_bucket, settings.s3_region, key)
    owned.video.video_url = video_url
    response = _save_record(store, owned, video_url)

    logger.info(
        "Published video %s",
        video_url,
        extra={"video_id": str(owned.video.id), "user_id": str(owned.user_id)},
    )
    return response


async def upload_thumbnail(
    request: Request,
    owned: OwnedVideo = Depends(get_owned_video),
    settings: Settings = Depends(get_settings),
    store: VideoStoreProtocol = Depends(get_store),
) -> VideoResponse:
    """Store a JPEG or PNG thumbnail under the assets directory."""
    async with receive_upload(
        request,
        field_name="thumbnail",
        max_bytes=settings.max_thumbnail_upload_bytes,
        allowed_types=THUMBNAIL_EXTENSIONS.keys(),
        unsupported_detail="Unsupported file type. Only JPEG and PNG are allowed.",
    ) as upload:
        filename = generate_asset_name() + extension_for_media_type(upload.media_type)
        try:
            await run_in_threadpool(
                write_asset, upload.file.file, settings.assets_root, filename
            )
        except OSError as exc:
            logger.exception(
                "Failed to save thumbnail",
                extra={"video_id": str(owned.video.id), "user_id": str(owned.user_id)},
            )
            raise _internal_error("Failed to save file to disk") from exc

    thumbnail_url = build_asset_url(settings.port, filename)
    owned.video.thumbnail_url = thumbnail_url
    response = _save_record(store, owned, str(settings.assets_root / filename))

    logger.info(
        "Stored thumbnail %s",
        thumbnail_url,
        extra={"video_id": str(owned.video.id), "user_id": str(owned.user_id)},
    )
    return response


router.add_api_route(
    "/video_upload/{video_id}",
    upload_video,
    methods=["POST"],
    status_code=status.HTTP_200_OK,
    response_model=VideoResponse,
    summary="Upload an MP4 video and publish it to object storage",
)
router.add_api_route(
    "/thumbnail_upload/{video_id}",
    upload_thumbnail,
    methods=["POST"],
    status_code=status.HTTP_200_OK,
    response_model=VideoResponse,
    summary="Upload a JPEG or PNG thumbnail for a video",
)

__all__ = ["VIDEO_MEDIA_TYPES", "router"]

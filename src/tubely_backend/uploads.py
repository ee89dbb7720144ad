"""Multipart intake for single-file upload endpoints."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Collection

from fastapi import HTTPException, Request, status
from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

logger = logging.getLogger(__name__)

_MEDIA_TYPE_PATTERN = re.compile(r"^[a-z0-9!#$&^_.+-]+/[a-z0-9!#$&^_.+-]+$")


class UploadTooLargeError(MultiPartException):
    """Raised while streaming once the body grows past the endpoint's limit."""

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"Upload exceeds the maximum size of {max_bytes} bytes.")
        self.max_bytes = max_bytes


@dataclass(slots=True)
class ReceivedUpload:
    """An uploaded file part together with its validated media type."""

    file: UploadFile
    media_type: str


def parse_media_type(content_type: str) -> str:
    """Return the lower-cased ``type/subtype`` of a Content-Type value."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not _MEDIA_TYPE_PATTERN.match(media_type):
        raise ValueError(f"malformed content type: {content_type!r}")
    return media_type


def _reject(detail: str) -> HTTPException:
    return HTTPException(status.HTTP_400_BAD_REQUEST, detail=detail)


def _check_declared_length(request: Request, max_bytes: int) -> None:
    declared = request.headers.get("content-length")
    if declared is None:
        return
    try:
        length = int(declared)
    except ValueError as exc:
        raise _reject("Invalid Content-Length header.") from exc
    if length > max_bytes:
        logger.info("Rejected upload of %d bytes (limit %d)", length, max_bytes)
        raise _reject(f"Upload exceeds the maximum size of {max_bytes} bytes.")


async def _limited_stream(request: Request, max_bytes: int) -> AsyncIterator[bytes]:
    """Yield body chunks, failing as soon as more than ``max_bytes`` arrive."""
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > max_bytes:
            logger.info(
                "Stopped reading upload after %d bytes (limit %d)", received, max_bytes
            )
            raise UploadTooLargeError(max_bytes)
        yield chunk


async def _parse_form(request: Request, max_bytes: int) -> FormData:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        return FormData()

    parser = MultiPartParser(request.headers, _limited_stream(request, max_bytes))
    try:
        return await parser.parse()
    except MultiPartException as exc:
        raise _reject(exc.message) from exc


@asynccontextmanager
async def receive_upload(
    request: Request,
    *,
    field_name: str,
    max_bytes: int,
    allowed_types: Collection[str],
    unsupported_detail: str,
) -> AsyncIterator[ReceivedUpload]:
    """Parse the request body and yield the named file part once it passes validation.

    The body is read only when this is entered, so callers can run their
    authorization checks first. The whole body, not just the file part, is
    capped at ``max_bytes`` while it is read. Parsed parts are closed on exit.
    """
    _check_declared_length(request, max_bytes)

    form = await _parse_form(request, max_bytes)
    try:
        upload = form.get(field_name)
        if not isinstance(upload, UploadFile):
            raise _reject(f"Unable to parse {field_name} file")

        content_type = upload.headers.get("content-type")
        if not content_type:
            raise _reject(f"Missing Content-Type for {field_name}")

        try:
            media_type = parse_media_type(content_type)
        except ValueError as exc:
            raise _reject("Invalid Content-Type format") from exc

        if media_type not in allowed_types:
            logger.info("Rejected %s with media type %s", field_name, media_type)
            raise _reject(unsupported_detail)

        yield ReceivedUpload(file=upload, media_type=media_type)
    finally:
        await form.close()


__all__ = [
    "ReceivedUpload",
    "UploadTooLargeError",
    "parse_media_type",
    "receive_upload",
]

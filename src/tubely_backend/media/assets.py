"""Helpers for thumbnails stored under the public assets directory."""

from __future__ import annotations

import base64
import secrets
import shutil
from pathlib import Path
from typing import BinaryIO

THUMBNAIL_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}

_NAME_ENTROPY_BYTES = 32


def extension_for_media_type(media_type: str) -> str:
    """Return the file extension used for an accepted thumbnail media type."""
    try:
        return THUMBNAIL_EXTENSIONS[media_type]
    except KeyError as exc:
        raise ValueError(f"unsupported thumbnail media type: {media_type}") from exc


def generate_asset_name() -> str:
    """Return a random URL-safe base64 name (no padding) for a stored asset."""
    raw = secrets.token_bytes(_NAME_ENTROPY_BYTES)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def write_asset(source: BinaryIO, assets_root: Path, filename: str) -> Path:
    """Copy the uploaded bytes verbatim to ``assets_root / filename``."""
    destination = assets_root / filename
    assets_root.mkdir(parents=True, exist_ok=True)
    with destination.open("xb") as buffer:
        try:
            shutil.copyfileobj(source, buffer)
        except BaseException:
            buffer.close()
            destination.unlink(missing_ok=True)
            raise
    return destination


def build_asset_url(port: int, filename: str) -> str:
    return f"http://localhost:{port}/assets/{filename}"


__all__ = [
    "THUMBNAIL_EXTENSIONS",
    "build_asset_url",
    "extension_for_media_type",
    "generate_asset_name",
    "write_asset",
]

# Application-wide configuration helpers.

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_SETTINGS_CACHE: Settings | None = None

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


@dataclass(slots=True)
class Settings:
    """Runtime configuration derived from environment variables."""

    assets_root: Path
    records_root: Path
    port: int
    jwt_secret: str
    s3_bucket: str
    s3_region: str
    staging_root: Path | None = None
    s3_endpoint_url: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    media_timeout_seconds: float | None = 300.0
    max_video_upload_bytes: int = 1 << 30
    max_thumbnail_upload_bytes: int = 10 << 20

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables with sensible defaults."""
        assets_override = os.getenv("TUBELY_ASSETS_ROOT")
        if assets_override:
            assets_root = Path(assets_override).expanduser()
        else:
            assets_root = _PROJECT_ROOT / "assets"

        records_override = os.getenv("TUBELY_RECORDS_ROOT")
        if records_override:
            records_root = Path(records_override).expanduser()
        else:
            records_root = _PROJECT_ROOT / "storage" / "videos"

        staging_override = os.getenv("TUBELY_STAGING_DIR")
        staging_root = (
            Path(staging_override).expanduser().resolve(strict=False)
            if staging_override
            else None
        )

        jwt_secret = os.getenv("TUBELY_JWT_SECRET", "change-me")
        jwt_algorithm = os.getenv("TUBELY_JWT_ALGORITHM", "HS256")
        s3_bucket = os.getenv("TUBELY_S3_BUCKET", "tubely-videos")
        s3_region = os.getenv("TUBELY_S3_REGION", "us-east-1")
        s3_endpoint_url = os.getenv("TUBELY_S3_ENDPOINT_URL") or None
        ffmpeg_path = os.getenv("TUBELY_FFMPEG_PATH", "ffmpeg")
        ffprobe_path = os.getenv("TUBELY_FFPROBE_PATH", "ffprobe")

        port_raw = os.getenv("TUBELY_PORT", "8091")
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise ValueError("TUBELY_PORT must be an integer.") from exc

        expire_raw = os.getenv("TUBELY_ACCESS_TOKEN_EXPIRE_MINUTES", "60")
        try:
            access_token_expire_minutes = int(expire_raw)
        except ValueError as exc:
            raise ValueError(
                "TUBELY_ACCESS_TOKEN_EXPIRE_MINUTES must be an integer."
            ) from exc

        timeout_raw = os.getenv("TUBELY_MEDIA_TIMEOUT", "300")
        media_timeout_seconds: float | None
        if timeout_raw in (None, "", "none", "None"):
            media_timeout_seconds = None
        else:
            try:
                media_timeout_seconds = float(timeout_raw)
            except ValueError as exc:
                raise ValueError(
                    "TUBELY_MEDIA_TIMEOUT must be numeric or empty."
                ) from exc

        max_video_raw = os.getenv("TUBELY_MAX_VIDEO_BYTES", str(1 << 30))
        try:
            max_video_upload_bytes = int(max_video_raw)
        except ValueError as exc:
            raise ValueError("TUBELY_MAX_VIDEO_BYTES must be an integer.") from exc

        max_thumbnail_raw = os.getenv("TUBELY_MAX_THUMBNAIL_BYTES", str(10 << 20))
        try:
            max_thumbnail_upload_bytes = int(max_thumbnail_raw)
        except ValueError as exc:
            raise ValueError(
                "TUBELY_MAX_THUMBNAIL_BYTES must be an integer."
            ) from exc

        return cls(
            assets_root=assets_root.resolve(strict=False),
            records_root=records_root.resolve(strict=False),
            port=port,
            jwt_secret=jwt_secret,
            s3_bucket=s3_bucket,
            s3_region=s3_region,
            staging_root=staging_root,
            s3_endpoint_url=s3_endpoint_url,
            jwt_algorithm=jwt_algorithm,
            access_token_expire_minutes=access_token_expire_minutes,
            ffmpeg_path=ffmpeg_path,
            ffprobe_path=ffprobe_path,
            media_timeout_seconds=media_timeout_seconds,
            max_video_upload_bytes=max_video_upload_bytes,
            max_thumbnail_upload_bytes=max_thumbnail_upload_bytes,
        )


def get_settings() -> Settings:
    """Return cached settings instance, constructing it on first access."""
    global _SETTINGS_CACHE

    if _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings.from_env()

    return _SETTINGS_CACHE


def set_settings(settings: Settings | None) -> None:
    """Override the cached settings value (mainly intended for tests)."""
    global _SETTINGS_CACHE
    _SETTINGS_CACHE = settings


__all__ = ["Settings", "get_settings", "set_settings"]

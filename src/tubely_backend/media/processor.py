"""Narrow interface the upload handlers use for media inspection and remuxing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..settings import Settings
from .config import MediaToolConfig
from .faststart import process_video_for_fast_start
from .probe import VideoDimensions, probe_video_dimensions

_MEDIA_PROCESSOR: MediaProcessor | None = None


class MediaProcessor(Protocol):
    """Operations on a staged media file."""

    def probe(self, source: Path) -> VideoDimensions | None:  # pragma: no cover - Protocol stub
        ...

    def repackage(self, source: Path) -> Path:  # pragma: no cover - Protocol stub
        ...


@dataclass(slots=True)
class FFmpegMediaProcessor:
    """Runs ffprobe and ffmpeg as child processes."""

    config: MediaToolConfig

    @classmethod
    def from_settings(cls, settings: Settings) -> "FFmpegMediaProcessor":
        return cls(
            config=MediaToolConfig(
                ffmpeg_path=settings.ffmpeg_path,
                ffprobe_path=settings.ffprobe_path,
                timeout_seconds=settings.media_timeout_seconds,
            )
        )

    def probe(self, source: Path) -> VideoDimensions | None:
        return probe_video_dimensions(source, config=self.config)

    def repackage(self, source: Path) -> Path:
        return process_video_for_fast_start(source, config=self.config)


def get_media_processor(settings: Settings) -> MediaProcessor:
    """Return a cached media processor built from the provided settings."""
    global _MEDIA_PROCESSOR

    if _MEDIA_PROCESSOR is None:
        _MEDIA_PROCESSOR = FFmpegMediaProcessor.from_settings(settings)

    return _MEDIA_PROCESSOR


def set_media_processor(processor: MediaProcessor | None) -> None:
    """Override the cached media processor, mainly for testing."""
    global _MEDIA_PROCESSOR
    _MEDIA_PROCESSOR = processor


__all__ = [
    "FFmpegMediaProcessor",
    "MediaProcessor",
    "get_media_processor",
    "set_media_processor",
]

"""Configuration shared by the external media tool helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class MediaToolConfig:
    """Locations of the ffmpeg binaries and the per-invocation time limit."""

    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    timeout_seconds: float | None = 300.0


__all__ = ["MediaToolConfig"]

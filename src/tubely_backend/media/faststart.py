"""FFmpeg remux that moves the MP4 index to the front of the file."""

from __future__ import annotations

import subprocess
from pathlib import Path

from .config import MediaToolConfig

PROCESSED_SUFFIX = ".processed"


class FastStartError(RuntimeError):
    """Raised when the fast-start remux fails."""


def process_video_for_fast_start(
    source: Path,
    *,
    config: MediaToolConfig | None = None,
) -> Path:
    """Copy the streams of ``source`` into ``<source>.processed`` with ``+faststart``."""
    if not source.exists():
        raise FileNotFoundError(f"video file does not exist: {source}")

    tool_config = config or MediaToolConfig()
    destination = source.with_name(source.name + PROCESSED_SUFFIX)

    command = [
        tool_config.ffmpeg_path,
        "-hide_banner",
        "-loglevel",
        "error",
        "-y",
        "-i",
        str(source),
        "-c",
        "copy",
        "-movflags",
        "faststart",
        "-f",
        "mp4",
        str(destination),
    ]

    try:
        subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
            timeout=tool_config.timeout_seconds,
        )
    except FileNotFoundError as exc:
        destination.unlink(missing_ok=True)
        raise FastStartError(
            "FFmpeg binary was not found. Set TUBELY_FFMPEG_PATH or install ffmpeg.",
        ) from exc
    except subprocess.TimeoutExpired as exc:
        destination.unlink(missing_ok=True)
        raise FastStartError(
            f"FFmpeg timed out after {exc.timeout} seconds",
        ) from exc
    except subprocess.CalledProcessError as exc:
        destination.unlink(missing_ok=True)
        raise FastStartError(
            f"FFmpeg failed with exit code {exc.returncode}: {exc.stderr}",
        ) from exc

    if not destination.exists():
        raise FastStartError(
            "FFmpeg reported success but no processed video was produced."
        )

    return destination


__all__ = ["FastStartError", "PROCESSED_SUFFIX", "process_video_for_fast_start"]

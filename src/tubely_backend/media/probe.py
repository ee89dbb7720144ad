"""FFprobe-based stream inspection and orientation classification."""

from __future__ import annotations

import json
import math
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .config import MediaToolConfig

ORIENTATION_LANDSCAPE = "landscape"
ORIENTATION_PORTRAIT = "portrait"
ORIENTATION_OTHER = "other"

_RATIO_TOLERANCE = 0.01
_LANDSCAPE_RATIO = 16 / 9
_PORTRAIT_RATIO = 9 / 16


class MediaProbeError(RuntimeError):
    """Raised when ffprobe cannot be run or its output cannot be understood."""


@dataclass(slots=True, frozen=True)
class VideoDimensions:
    """Pixel size of the first stream reported for a media file."""

    width: int
    height: int


def probe_video_dimensions(
    source: Path,
    *,
    config: MediaToolConfig | None = None,
) -> VideoDimensions | None:
    """Return the dimensions of the first stream, or ``None`` when there are no streams."""
    tool_config = config or MediaToolConfig()
    command = [
        tool_config.ffprobe_path,
        "-v",
        "error",
        "-print_format",
        "json",
        "-show_streams",
        str(source),
    ]

    try:
        completed = subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
            timeout=tool_config.timeout_seconds,
        )
    except FileNotFoundError as exc:
        raise MediaProbeError(
            "FFprobe binary was not found. Set TUBELY_FFPROBE_PATH or install ffmpeg.",
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise MediaProbeError(
            f"FFprobe timed out after {exc.timeout} seconds",
        ) from exc
    except subprocess.CalledProcessError as exc:
        raise MediaProbeError(
            f"FFprobe failed with exit code {exc.returncode}: {exc.stderr}",
        ) from exc

    try:
        payload = json.loads(completed.stdout)
    except json.JSONDecodeError as exc:
        raise MediaProbeError("FFprobe produced output that is not valid JSON") from exc

    streams = payload.get("streams") if isinstance(payload, dict) else None
    if streams is None:
        streams = []
    if not isinstance(streams, list):
        raise MediaProbeError("FFprobe output has an unexpected 'streams' value")
    if not streams:
        return None

    first = streams[0]
    try:
        # Audio-only streams carry no size; treat them as zero-sized.
        width = int(first.get("width", 0))
        height = int(first.get("height", 0))
    except (AttributeError, TypeError, ValueError) as exc:
        raise MediaProbeError("FFprobe reported non-numeric stream dimensions") from exc

    return VideoDimensions(width=width, height=height)


def classify_aspect_ratio(width: int, height: int) -> str:
    """Map pixel dimensions onto ``landscape``, ``portrait`` or ``other``."""
    if height <= 0 or width <= 0:
        return ORIENTATION_OTHER

    ratio = width / height
    if ratio > 1.0:
        if math.fabs(ratio - _LANDSCAPE_RATIO) < _RATIO_TOLERANCE:
            return ORIENTATION_LANDSCAPE
    elif math.fabs(ratio - _PORTRAIT_RATIO) < _RATIO_TOLERANCE:
        return ORIENTATION_PORTRAIT

    return ORIENTATION_OTHER


def classify_dimensions(dimensions: VideoDimensions | None) -> str:
    """Classify probed dimensions; a file without streams is ``other``."""
    if dimensions is None:
        return ORIENTATION_OTHER
    return classify_aspect_ratio(dimensions.width, dimensions.height)


def get_video_aspect_ratio(
    source: Path,
    *,
    config: MediaToolConfig | None = None,
) -> str:
    """Probe the file and classify the orientation of its first stream."""
    return classify_dimensions(probe_video_dimensions(source, config=config))


__all__ = [
    "MediaProbeError",
    "ORIENTATION_LANDSCAPE",
    "ORIENTATION_OTHER",
    "ORIENTATION_PORTRAIT",
    "VideoDimensions",
    "classify_aspect_ratio",
    "classify_dimensions",
    "get_video_aspect_ratio",
    "probe_video_dimensions",
]

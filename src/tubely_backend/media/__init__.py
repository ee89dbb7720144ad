"""Media processing helpers."""

from .assets import (
    build_asset_url,
    extension_for_media_type,
    generate_asset_name,
    write_asset,
)
from .config import MediaToolConfig
from .faststart import FastStartError, process_video_for_fast_start
from .probe import (
    MediaProbeError,
    VideoDimensions,
    classify_aspect_ratio,
    classify_dimensions,
    get_video_aspect_ratio,
    probe_video_dimensions,
)
from .processor import (
    FFmpegMediaProcessor,
    MediaProcessor,
    get_media_processor,
    set_media_processor,
)

__all__ = [
    "FFmpegMediaProcessor",
    "FastStartError",
    "MediaProbeError",
    "MediaProcessor",
    "MediaToolConfig",
    "VideoDimensions",
    "build_asset_url",
    "classify_aspect_ratio",
    "classify_dimensions",
    "extension_for_media_type",
    "generate_asset_name",
    "get_media_processor",
    "get_video_aspect_ratio",
    "probe_video_dimensions",
    "process_video_for_fast_start",
    "set_media_processor",
    "write_asset",
]

# Router modules are exported here for easier access.

from . import health, uploads, videos

__all__ = ["health", "uploads", "videos"]

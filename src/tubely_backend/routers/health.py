# Health-check endpoints.

from fastapi import APIRouter, Depends, status

from ..settings import Settings, get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def read_health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Readiness probe that also reports whether local storage directories exist."""
    return {
        "status": "ok",
        "assets": "ok" if settings.assets_root.is_dir() else "missing",
        "records": "ok" if settings.records_root.is_dir() else "missing",
    }

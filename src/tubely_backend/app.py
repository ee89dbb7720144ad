# Application factory and FastAPI setup.

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .routers import health, uploads, videos
from .settings import get_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    app = FastAPI(title="Tubely Backend", version="0.1.0")

    settings = get_settings()
    settings.assets_root.mkdir(parents=True, exist_ok=True)
    settings.records_root.mkdir(parents=True, exist_ok=True)
    app.state.settings = settings

    app.include_router(health.router)
    app.include_router(videos.router)
    app.include_router(uploads.router)
    app.mount("/assets", StaticFiles(directory=settings.assets_root), name="assets")
    return app

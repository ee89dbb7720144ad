# Entrypoint for running the FastAPI application with uv.

import logging

import uvicorn

from tubely_backend.settings import get_settings


def main() -> None:
    """Start the FastAPI server using uvicorn."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(
        "tubely_backend.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=get_settings().port,
        reload=False,
    )


if __name__ == "__main__":
    main()

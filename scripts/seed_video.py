"""CLI utility to create a video record and mint a bearer token for its owner."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import uuid
from datetime import timedelta
from pathlib import Path
from typing import Sequence

from tubely_backend.auth import make_jwt
from tubely_backend.records import get_video_store
from tubely_backend.settings import get_settings

PROJECT_ROOT = Path(__file__).resolve().parents[1]

logger = logging.getLogger("seed_video")


def _load_dotenv_if_needed() -> None:
    dotenv_path = PROJECT_ROOT / ".env"
    if not dotenv_path.exists():
        return

    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        cleaned = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, cleaned)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a video record and print a bearer token for its owner.",
    )
    parser.add_argument("title", help="Title of the new video record.")
    parser.add_argument("--description", default="", help="Optional description.")
    parser.add_argument(
        "--user-id",
        type=uuid.UUID,
        default=None,
        help="Owner of the record. A new id is generated when omitted.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    _load_dotenv_if_needed()
    args = _parse_args(argv)

    settings = get_settings()
    user_id = args.user_id or uuid.uuid4()
    store = get_video_store(settings)
    video = store.create_video(
        user_id=user_id, title=args.title, description=args.description
    )

    token = make_jwt(
        user_id,
        settings.jwt_secret,
        timedelta(minutes=settings.access_token_expire_minutes),
        algorithm=settings.jwt_algorithm,
    )
    logger.info("Seeded video %s for user %s", video.id, user_id)

    json.dump(
        {"video_id": str(video.id), "user_id": str(user_id), "token": token},
        sys.stdout,
        indent=2,
    )
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

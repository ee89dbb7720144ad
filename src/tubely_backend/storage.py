"""Object storage publishing for processed videos."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .settings import Settings

logger = logging.getLogger(__name__)

_OBJECT_PUBLISHER: ObjectPublisherProtocol | None = None

_KEY_ENTROPY_BYTES = 16


class ObjectPublishError(RuntimeError):
    """Raised when an object cannot be written to the bucket."""


class ObjectPublisherProtocol(Protocol):
    """Protocol describing the upload used for finished videos."""

    def put_object(
        self, key: str, source: Path, content_type: str
    ) -> None:  # pragma: no cover - Protocol stub
        ...


def generate_video_key(classification: str) -> str:
    """Return ``<classification>/<32 hex chars>.mp4`` from a secure random source."""
    return f"{classification}/{secrets.token_hex(_KEY_ENTROPY_BYTES)}.mp4"


def build_object_url(bucket: str, region: str, key: str) -> str:
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


@dataclass(slots=True)
class S3ObjectPublisher:
    """Thin wrapper around a boto3 S3 client bound to one bucket."""

    client: Any
    bucket: str
    region: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectPublisher":
        client = boto3.client(
            "s3",
            region_name=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
        )
        return cls(client=client, bucket=settings.s3_bucket, region=settings.s3_region)

    def put_object(self, key: str, source: Path, content_type: str) -> None:
        try:
            with source.open("rb") as body:
                self.client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                )
        except (BotoCoreError, ClientError, OSError) as exc:
            raise ObjectPublishError(
                f"failed to upload {source.name} to s3://{self.bucket}/{key}"
            ) from exc

        logger.info("Uploaded object to s3://%s/%s", self.bucket, key)


def get_object_publisher(settings: Settings) -> ObjectPublisherProtocol:
    """Return a cached publisher instance built from the provided settings."""
    global _OBJECT_PUBLISHER

    if _OBJECT_PUBLISHER is None:
        _OBJECT_PUBLISHER = S3ObjectPublisher.from_settings(settings)

    return _OBJECT_PUBLISHER


def set_object_publisher(publisher: ObjectPublisherProtocol | None) -> None:
    """Override the cached publisher instance, mainly for testing."""
    global _OBJECT_PUBLISHER
    _OBJECT_PUBLISHER = publisher


__all__ = [
    "ObjectPublishError",
    "ObjectPublisherProtocol",
    "S3ObjectPublisher",
    "build_object_url",
    "generate_video_key",
    "get_object_publisher",
    "set_object_publisher",
]

from __future__ import annotations

import re

import pytest
from botocore.exceptions import ClientError

from tubely_backend.storage import (
    ObjectPublishError,
    S3ObjectPublisher,
    build_object_url,
    generate_video_key,
)


class _StubS3Client:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self.error = error

    def put_object(self, **kwargs) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        body = kwargs.pop("Body")
        self.calls.append({**kwargs, "Body": body.read()})
        return {"ETag": '"etag"'}


def test_generate_video_key_format() -> None:
    key = generate_video_key("portrait")

    assert re.fullmatch(r"portrait/[0-9a-f]{32}\.mp4", key)
    assert generate_video_key("portrait") != key


def test_build_object_url() -> None:
    url = build_object_url("tubely-videos", "us-west-2", "landscape/abc.mp4")

    assert url == "https://tubely-videos.s3.us-west-2.amazonaws.com/landscape/abc.mp4"


def test_put_object_streams_file_with_content_type(tmp_path) -> None:
    source = tmp_path / "video.mp4.processed"
    source.write_bytes(b"mp4-bytes")
    client = _StubS3Client()
    publisher = S3ObjectPublisher(client=client, bucket="bucket", region="us-east-1")

    publisher.put_object("other/abc.mp4", source, "video/mp4")

    assert client.calls == [
        {
            "Bucket": "bucket",
            "Key": "other/abc.mp4",
            "ContentType": "video/mp4",
            "Body": b"mp4-bytes",
        }
    ]


def test_put_object_wraps_client_errors(tmp_path) -> None:
    source = tmp_path / "video.mp4"
    source.write_bytes(b"mp4-bytes")
    error = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
    )
    publisher = S3ObjectPublisher(
        client=_StubS3Client(error=error), bucket="bucket", region="us-east-1"
    )

    with pytest.raises(ObjectPublishError, match="s3://bucket/other/abc.mp4"):
        publisher.put_object("other/abc.mp4", source, "video/mp4")

from __future__ import annotations

import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from tubely_backend.media.config import MediaToolConfig
from tubely_backend.media.faststart import FastStartError, process_video_for_fast_start


def _create_video_file(tmp_path: Path) -> Path:
    video = tmp_path / "upload.mp4"
    video.write_bytes(b"fake-video-data")
    return video


def test_fast_start_invokes_ffmpeg_with_stream_copy(monkeypatch, tmp_path) -> None:
    video = _create_video_file(tmp_path)
    issued_commands: list[list[str]] = []

    def fake_run(command, check, capture_output, text, timeout):
        issued_commands.append(command)
        Path(command[-1]).write_bytes(b"remuxed")
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setattr("tubely_backend.media.faststart.subprocess.run", fake_run)

    result = process_video_for_fast_start(
        video, config=MediaToolConfig(ffmpeg_path="ffmpeg-binary")
    )

    command = issued_commands[0]
    assert command[0] == "ffmpeg-binary"
    assert command[command.index("-c") + 1] == "copy"
    assert command[command.index("-movflags") + 1] == "faststart"
    assert command[command.index("-f") + 1] == "mp4"
    assert result == tmp_path / "upload.mp4.processed"
    assert result.read_bytes() == b"remuxed"


def test_fast_start_failure_removes_partial_output(monkeypatch, tmp_path) -> None:
    video = _create_video_file(tmp_path)

    def fake_run(command, check, capture_output, text, timeout):
        Path(command[-1]).write_bytes(b"partial")
        raise subprocess.CalledProcessError(
            returncode=1, cmd=command, stderr="Invalid data found"
        )

    monkeypatch.setattr("tubely_backend.media.faststart.subprocess.run", fake_run)

    with pytest.raises(FastStartError, match="FFmpeg failed"):
        process_video_for_fast_start(video)

    assert not (tmp_path / "upload.mp4.processed").exists()


def test_fast_start_missing_ffmpeg(monkeypatch, tmp_path) -> None:
    video = _create_video_file(tmp_path)

    def fake_run(command, check, capture_output, text, timeout):
        raise FileNotFoundError("ffmpeg not found")

    monkeypatch.setattr("tubely_backend.media.faststart.subprocess.run", fake_run)

    with pytest.raises(FastStartError, match="FFmpeg binary was not found"):
        process_video_for_fast_start(video)


def test_fast_start_timeout(monkeypatch, tmp_path) -> None:
    video = _create_video_file(tmp_path)

    def fake_run(command, check, capture_output, text, timeout):
        raise subprocess.TimeoutExpired(cmd=command, timeout=timeout)

    monkeypatch.setattr("tubely_backend.media.faststart.subprocess.run", fake_run)

    with pytest.raises(FastStartError, match="timed out"):
        process_video_for_fast_start(video, config=MediaToolConfig(timeout_seconds=1))


def test_fast_start_without_output(monkeypatch, tmp_path) -> None:
    video = _create_video_file(tmp_path)

    def fake_run(command, check, capture_output, text, timeout):
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setattr("tubely_backend.media.faststart.subprocess.run", fake_run)

    with pytest.raises(FastStartError, match="no processed video"):
        process_video_for_fast_start(video)


def test_fast_start_requires_existing_source(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        process_video_for_fast_start(tmp_path / "missing.mp4")

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from music_server.config import Settings
from music_server.main import create_app

SONG_BYTES = bytes(i % 251 for i in range(1000))


def write_file(path: Path, data: bytes = b"x", mtime: float | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def music_root(tmp_path):
    """A small library plus a file outside it that must never be served."""
    root = tmp_path / "music"
    write_file(root / "song.mp3", SONG_BYTES, mtime=1_700_000_300)
    write_file(root / "Album A" / "01 intro.flac", b"flac" * 10, mtime=1_700_000_200)
    write_file(root / "Album A" / "cover.jpg", b"jpg", mtime=1_700_000_400)
    write_file(root / "deep" / "er" / "track.OGG", b"ogg", mtime=1_700_000_100)
    write_file(root / "notes.txt", b"text")
    write_file(tmp_path / "secret.txt", b"top secret")
    return root


@pytest.fixture
def settings(music_root):
    return Settings(music_dir=music_root, chunk_size=64)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c

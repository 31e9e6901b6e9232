"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from vidcat.db.connection import Database
from vidcat.db.schema import initialize

SAMPLE_CSV = """URL,Category,Format / Protocol,Notes
https://example.com/bunny/master.m3u8,Big Buck Bunny,HLS H.264 1080p,
https://cdn.example.org/tears/manifest.mpd,Tears of Steel,"DASH, HEVC, 2160p",HDR10 with subtitles
media.example.net/sintel.mp4,,AV1 3840x2160,"Dolby Vision, Live"
https://example.com/legacy.ts,Legacy,MPEG-2 480p,
"""


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".vidcat.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_csv_path(tmp_path):
    path = tmp_path / "assets.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path

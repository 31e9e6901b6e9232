"""Tests for the catalog source fetcher.

Network access is mocked at urllib.request.build_opener.
"""

from __future__ import annotations

import socket
import urllib.error
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from vidcat.catalog.fetcher import SourceFetchError, fetch_source, is_remote

_URL = "https://data.example.com/assets.csv"


def _response(body: bytes, content_type: str = "text/csv; charset=utf-8") -> MagicMock:
    resp = MagicMock()
    resp.headers = {"Content-Type": content_type}
    resp.read.side_effect = lambda n=-1: body if n < 0 else body[:n]
    return resp


def _opener(result=None, error: Exception | None = None):
    opener = MagicMock()
    if error is not None:
        opener.open.side_effect = error
    else:
        opener.open.return_value = result
    return patch("vidcat.catalog.fetcher.urllib.request.build_opener", return_value=opener)


# ---------------------------------------------------------------------------
# Remote
# ---------------------------------------------------------------------------


def test_fetch_remote_csv() -> None:
    with _opener(_response(b"\xef\xbb\xbfurl,category\nhttps://a/x,Y\n")):
        text = fetch_source(_URL)
    assert text.startswith("url,category")


def test_fetch_passes_timeout() -> None:
    with _opener(_response(b"a,b\n1,2\n")) as build:
        fetch_source(_URL, timeout=5)
    _, kwargs = build.return_value.open.call_args
    assert kwargs["timeout"] == 5


def test_http_error_is_fatal() -> None:
    err = urllib.error.HTTPError(_URL, 404, "Not Found", {}, None)
    with _opener(error=err), pytest.raises(SourceFetchError, match="404 Not Found"):
        fetch_source(_URL)


def test_url_error_is_fatal() -> None:
    with _opener(error=urllib.error.URLError("no route")), pytest.raises(SourceFetchError, match="no route"):
        fetch_source(_URL)


def test_timeout_is_fatal() -> None:
    with _opener(error=socket.timeout("timed out")), pytest.raises(SourceFetchError, match="Timed out after 2s"):
        fetch_source(_URL, timeout=2)


def test_rejects_html_content_type() -> None:
    with _opener(_response(b"<html>", "text/html")), pytest.raises(SourceFetchError, match="Content-Type"):
        fetch_source(_URL)


def test_rejects_oversized_body() -> None:
    with _opener(_response(b"x" * 2048)), pytest.raises(SourceFetchError, match="exceeds"):
        fetch_source(_URL, max_bytes=1024)


def test_rejects_empty_body() -> None:
    with _opener(_response(b"  \n")), pytest.raises(SourceFetchError, match="empty"):
        fetch_source(_URL)


def test_rejects_unsupported_scheme() -> None:
    with pytest.raises(SourceFetchError, match="Unsupported URL scheme 'ftp'"):
        fetch_source("ftp://data.example.com/assets.csv")


# ---------------------------------------------------------------------------
# Local
# ---------------------------------------------------------------------------


def test_fetch_local_file(sample_csv_path: Path) -> None:
    assert fetch_source(sample_csv_path).startswith("URL,Category")


def test_missing_local_file(tmp_path: Path) -> None:
    with pytest.raises(SourceFetchError, match="Cannot read"):
        fetch_source(tmp_path / "missing.csv")


def test_local_file_size_cap(tmp_path: Path) -> None:
    big = tmp_path / "big.csv"
    big.write_bytes(b"a" * 4096)
    with pytest.raises(SourceFetchError, match="exceeds"):
        fetch_source(big, max_bytes=1024)


def test_is_remote() -> None:
    assert is_remote(_URL)
    assert not is_remote("data/assets.csv")

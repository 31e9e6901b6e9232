"""Tests for row normalization (simple and structured schemas)."""

from __future__ import annotations

import hashlib

import pytest

from vidcat.catalog.models import Resolution
from vidcat.catalog.normalizer import (
    canonical_header,
    detect_schema,
    make_asset_id,
    normalize_row,
    normalize_structured_row,
    normalize_url,
    parse_host_scheme,
)


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------


def test_normalize_url_prepends_https() -> None:
    assert normalize_url("  example.com/v.mp4 ") == "https://example.com/v.mp4"


@pytest.mark.parametrize("url", ["http://a.example/x", "rtmp://a.example/live", "HTTPS://A.example/x"])
def test_normalize_url_keeps_existing_scheme(url: str) -> None:
    assert normalize_url(url) == url


def test_parse_host_scheme() -> None:
    assert parse_host_scheme("HTTP://Media.Example.com:8080/a") == ("media.example.com", "http")


def test_parse_host_scheme_accepts_international_host() -> None:
    assert parse_host_scheme("https://bücher.example/v.mp4") == ("bücher.example", "https")


@pytest.mark.parametrize(
    "url",
    [
        "https://",
        "https://host:notaport/x",
        "https://[::1/x",
        "https://exa mple.com/v.mp4",
        "https://a<b.example/v.mp4",
        "https://a{b}.example/v.mp4",
        "https://a^b.example/v.mp4",
        "https://a`b.example/v.mp4",
        "https://a..b.example/v.mp4",
        "https://" + "x" * 64 + ".example/v.mp4",
    ],
)
def test_parse_host_scheme_unknown_on_failure(url: str) -> None:
    assert parse_host_scheme(url) == ("unknown", "unknown")


def test_asset_id_is_truncated_sha256() -> None:
    url = "https://example.com/v.mp4"
    assert make_asset_id(url) == hashlib.sha256(url.encode()).hexdigest()[:16]
    assert len(make_asset_id(url)) == 16


# ---------------------------------------------------------------------------
# Simple schema
# ---------------------------------------------------------------------------


def test_normalize_row_hls_scenario() -> None:
    asset = normalize_row(["https://example.com/video.m3u8", "Test", "HLS H.264 1080p", ""])

    assert asset is not None
    assert asset.protocol == ["hls"]
    assert asset.codec == ["avc"]
    assert asset.resolution == Resolution(1920, 1080, "1080p")
    assert asset.hdr == "sdr"
    assert asset.host == "example.com"
    assert asset.scheme == "https"
    assert asset.category == "Test"


def test_normalize_row_defaults_scenario() -> None:
    asset = normalize_row(["example.com/v.mp4", "", "", "Live DRM encrypted"])

    assert asset is not None
    assert asset.url == "https://example.com/v.mp4"
    assert asset.category == "Uncategorized"
    assert "Live" in asset.features
    assert "DRM" in asset.features
    assert asset.protocol == ["file"]
    assert asset.container == "mp4"
    assert asset.notes == "Live DRM encrypted"


def test_normalize_row_id_depends_on_url_only() -> None:
    a = normalize_row(["example.com/v.mp4", "One", "HLS", ""])
    b = normalize_row(["https://example.com/v.mp4", "Two", "DASH", "other notes"])
    assert a is not None and b is not None
    assert a.id == b.id


def test_normalize_row_too_few_columns() -> None:
    assert normalize_row(["https://example.com/a.mp4", "Cat", "HLS"]) is None


def test_normalize_row_blank_url() -> None:
    assert normalize_row(["   ", "Cat", "HLS", ""]) is None


def test_normalize_row_ignores_extra_columns() -> None:
    asset = normalize_row(["https://e.example/a.mkv", "Cat", "VP9", "", "extra", "more"])
    assert asset is not None
    assert asset.codec == ["vp9"]
    assert asset.container == "mkv"


# ---------------------------------------------------------------------------
# Structured schema
# ---------------------------------------------------------------------------


def test_canonical_header_folds_aliases() -> None:
    assert canonical_header([" URL", "Protocols", "Codecs", "Feature"]) == [
        "url",
        "protocol",
        "codec",
        "features",
    ]


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (["id", "url", "protocol"], "structured"),
        (["url", "resolution.width", "resolution.height"], "structured"),
        (["URL", "Category", "Format / Protocol", "Notes"], "simple"),
        (["id", "host"], "simple"),
    ],
)
def test_detect_schema(header: list[str], expected: str) -> None:
    assert detect_schema(header) == expected


def test_structured_row_parses_lists_and_resolution() -> None:
    asset = normalize_structured_row(
        {
            "id": "ignored",
            "url": "cdn.example.com/a.mpd",
            "category": "Demo",
            "protocol": "DASH|hls|rtsp|dash",
            "codec": "hevc|prores",
            "resolution.width": "3840",
            "resolution.height": "2160",
            "hdr": "HDR10",
            "container": "mp4",
            "features": "Live | DRM",
            "notes": " n ",
        }
    )

    assert asset is not None
    assert asset.url == "https://cdn.example.com/a.mpd"
    assert asset.id == make_asset_id("https://cdn.example.com/a.mpd")
    assert asset.protocol == ["dash", "hls", "other"]
    assert asset.codec == ["hevc", "other"]
    assert asset.resolution == Resolution(3840, 2160, "4K")
    assert asset.hdr == "hdr10"
    assert asset.container == "mp4"
    assert asset.features == ["Live", "DRM"]
    assert asset.notes == "n"


def test_structured_row_fallbacks() -> None:
    asset = normalize_structured_row(
        {"url": "https://e.example/x", "hdr": "bogus", "container": "avi", "resolution.width": "abc"}
    )

    assert asset is not None
    assert asset.category == "Uncategorized"
    assert asset.protocol == ["file"]
    assert asset.codec == []
    assert asset.resolution is None
    assert asset.hdr == "sdr"
    assert asset.container is None


def test_structured_row_keeps_given_label() -> None:
    asset = normalize_structured_row(
        {"url": "https://e.example/x", "resolution.width": "1920", "resolution.height": "800", "resolution.label": "Scope"}
    )
    assert asset is not None
    assert asset.resolution == Resolution(1920, 800, "Scope")


def test_structured_row_blank_url() -> None:
    assert normalize_structured_row({"url": "  ", "category": "x"}) is None

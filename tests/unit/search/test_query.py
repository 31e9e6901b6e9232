"""Tests for the advanced query language."""

from __future__ import annotations

import pytest

from vidcat.catalog.models import Asset, Resolution
from vidcat.search.query import Operator, evaluate, filter_by_query, parse_query, tokenize_query


def _asset(**kw) -> Asset:
    base = dict(id="x", url="https://cdn.example.com/a", host="cdn.example.com", scheme="https")
    base.update(kw)
    return Asset(**base)


HLS_HEVC = _asset(protocol=["hls"], codec=["hevc"], category="Bunny")
HLS_AVC = _asset(protocol=["hls"], codec=["avc"], category="Tears", features=["Live"])
DASH_AV1 = _asset(
    protocol=["dash"],
    codec=["av1"],
    category="Dolby Vision Demo",
    hdr="dovi",
    resolution=Resolution(3840, 2160, "4K"),
)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def test_tokenize_keeps_quoted_spans() -> None:
    assert tokenize_query('hls "dolby vision demo" codec:av1') == ["hls", '"dolby vision demo"', "codec:av1"]


def test_parse_all_operator_kinds() -> None:
    ops = parse_query('protocol:hls AND NOT codec:hevc OR "exact phrase" bunny NOT live')
    assert ops == [
        Operator(type="FIELD", field="protocol", value="hls"),
        Operator(type="AND", value="AND"),
        Operator(type="FIELD", field="codec", value="hevc", negate=True),
        Operator(type="OR", value="OR"),
        Operator(type="EXACT", value="exact phrase"),
        Operator(type="TERM", value="bunny"),
        Operator(type="TERM", value="live", negate=True),
    ]


def test_parse_field_with_quoted_value() -> None:
    assert parse_query('category:"dolby vision"') == [
        Operator(type="FIELD", field="category", value="dolby vision")
    ]


def test_trailing_not_is_a_term() -> None:
    assert parse_query("hls NOT") == [Operator(type="TERM", value="hls"), Operator(type="TERM", value="NOT")]


def test_blank_query_parses_empty() -> None:
    assert parse_query("   ") == []


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def test_and_not_scenario() -> None:
    ops = parse_query("protocol:hls AND NOT codec:hevc")
    assert not evaluate(HLS_HEVC, ops)
    assert evaluate(HLS_AVC, ops)


def test_implicit_and_between_terms() -> None:
    assert evaluate(HLS_AVC, parse_query("hls avc"))
    assert not evaluate(HLS_AVC, parse_query("hls hevc"))


def test_or_mode() -> None:
    ops = parse_query("codec:hevc OR codec:av1")
    assert evaluate(HLS_HEVC, ops)
    assert evaluate(DASH_AV1, ops)
    assert not evaluate(HLS_AVC, ops)


def test_linear_left_to_right_without_precedence() -> None:
    # (hevc OR av1) AND live, not hevc OR (av1 AND live).
    ops = parse_query("codec:hevc OR codec:av1 AND features:live")
    assert not evaluate(HLS_HEVC, ops)


def test_exact_match_is_equality_not_substring() -> None:
    assert evaluate(DASH_AV1, parse_query('"dolby vision demo"'))
    assert not evaluate(DASH_AV1, parse_query('"dolby vision"'))


def test_term_substring_over_all_fields() -> None:
    assert evaluate(DASH_AV1, parse_query("vision"))
    assert evaluate(DASH_AV1, parse_query("4k"))


def test_plural_field_alias() -> None:
    assert evaluate(DASH_AV1, parse_query("codecs:av1"))


def test_unknown_field_never_matches() -> None:
    assert not evaluate(HLS_AVC, parse_query("bitrate:5000"))
    assert evaluate(HLS_AVC, parse_query("NOT bitrate:5000"))


@pytest.mark.parametrize("query", ["", "   "])
def test_filter_by_blank_query_returns_all(query: str) -> None:
    assets = [HLS_HEVC, HLS_AVC]
    assert filter_by_query(assets, query) == assets


def test_filter_by_query() -> None:
    assert filter_by_query([HLS_HEVC, HLS_AVC, DASH_AV1], "resolution:4k") == [DASH_AV1]

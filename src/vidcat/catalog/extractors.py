"""Keyword extractors for the free-text format/protocol and notes columns.

Every extractor is a pure function of ``(format_protocol, notes)`` and runs
over the lower-cased concatenation of both columns. Unrecognised phrasing
never raises; it resolves to the defaults below:

    protocol   ["file"]
    codec      []
    resolution None
    hdr        "sdr"
    container  None
    features   []

Keyword tables are ordered ``(patterns, result)`` tuples. A pattern is either
a substring or a tuple of substrings that must all be present.
"""

from __future__ import annotations

import re

from vidcat.catalog.models import Resolution

Pattern = str | tuple[str, ...]
Rule = tuple[tuple[Pattern, ...], str]

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

PROTOCOL_RULES: tuple[Rule, ...] = (
    (("hls",), "hls"),
    (("dash",), "dash"),
    (("cmaf",), "cmaf"),
    (("smooth", "mss"), "smooth"),
)

CODEC_RULES: tuple[Rule, ...] = (
    (("h.264", "avc"), "avc"),
    (("h.265", "hevc"), "hevc"),
    (("av1",), "av1"),
    (("vp9",), "vp9"),
    (("mpeg-2", "mpeg2"), "mpeg2"),
    (("vvc", "h.266"), "vvc"),
)

# Priority order: first match wins.
HDR_RULES: tuple[Rule, ...] = (
    (("dolby vision", "dovi"), "dovi"),
    (("hdr10",), "hdr10"),
    (("hlg",), "hlg"),
    (("hdr",), "hdr"),
)

# Priority order: first match wins. Matched against URL + text.
CONTAINER_RULES: tuple[Rule, ...] = (
    (("mp4",), "mp4"),
    ((".ts", "mpeg-ts"), "ts"),
    ((".mkv",), "mkv"),
    ((".webm",), "webm"),
    ((".mov",), "mov"),
    ((".yuv", "raw"), "yuv"),
)

FEATURE_RULES: tuple[Rule, ...] = (
    (("8k",), "8K"),
    (("stereo", "3d"), "Stereo"),
    ((("multi", "audio"),), "Multi-Audio"),
    (("subtitle", "caption"), "Subtitles"),
    (("drm", "encrypted"), "DRM"),
    (("live",), "Live"),
    (("vr", "360"), "VR/360"),
)

# (regex, width, height, label); first match wins.
RESOLUTION_PATTERNS: tuple[tuple[re.Pattern[str], int, int, str], ...] = (
    (re.compile(r"\b4320p\b", re.IGNORECASE), 7680, 4320, "8K"),
    (re.compile(r"\b2160p\b|4k|uhd", re.IGNORECASE), 3840, 2160, "4K"),
    (re.compile(r"\b1440p\b", re.IGNORECASE), 2560, 1440, "1440p"),
    (re.compile(r"\b1080p\b|fhd", re.IGNORECASE), 1920, 1080, "1080p"),
    (re.compile(r"\b720p\b|\bhd\b", re.IGNORECASE), 1280, 720, "720p"),
    (re.compile(r"\b480p\b", re.IGNORECASE), 854, 480, "480p"),
    (re.compile(r"\b360p\b", re.IGNORECASE), 640, 360, "360p"),
    (re.compile(r"\b240p\b", re.IGNORECASE), 426, 240, "240p"),
)

_DIMENSIONS_RE = re.compile(r"\b(\d{3,4})[×xX](\d{3,4})\b")

# (minimum height, label), checked top-down.
HEIGHT_LABELS: tuple[tuple[int, str], ...] = (
    (2160, "4K"),
    (1440, "1440p"),
    (1080, "1080p"),
    (720, "720p"),
    (480, "480p"),
    (360, "360p"),
    (240, "240p"),
)


# ---------------------------------------------------------------------------
# Rule evaluation
# ---------------------------------------------------------------------------


def _combined(*parts: str | None) -> str:
    return " ".join(p or "" for p in parts).lower()


def _pattern_hits(text: str, pattern: Pattern) -> bool:
    if isinstance(pattern, tuple):
        return all(part in text for part in pattern)
    return pattern in text


def _rule_hits(text: str, rule: Rule) -> bool:
    patterns, _ = rule
    return any(_pattern_hits(text, p) for p in patterns)


def first_match(text: str, rules: tuple[Rule, ...]) -> str | None:
    """Return the result of the first rule that matches *text*."""
    for rule in rules:
        if _rule_hits(text, rule):
            return rule[1]
    return None


def all_matches(text: str, rules: tuple[Rule, ...]) -> list[str]:
    """Return the results of every matching rule, in table order."""
    return [rule[1] for rule in rules if _rule_hits(text, rule)]


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def extract_protocols(format_protocol: str | None, notes: str | None) -> list[str]:
    """Streaming protocols mentioned in the text; never empty."""
    return all_matches(_combined(format_protocol, notes), PROTOCOL_RULES) or ["file"]


def extract_codecs(format_protocol: str | None, notes: str | None) -> list[str]:
    return all_matches(_combined(format_protocol, notes), CODEC_RULES)


def label_for_height(width: int, height: int) -> str:
    """Canonical resolution bucket for a frame *height*.

    Heights below 240 keep a literal ``WIDTHxHEIGHT`` label.
    """
    for min_height, label in HEIGHT_LABELS:
        if height >= min_height:
            return label
    return f"{width}x{height}"


def extract_resolution(format_protocol: str | None, notes: str | None) -> Resolution | None:
    """Named resolution first (``1080p``, ``4K``...), then a ``WxH`` literal."""
    text = " ".join(p or "" for p in (format_protocol, notes))

    for pattern, width, height, label in RESOLUTION_PATTERNS:
        if pattern.search(text):
            return Resolution(width=width, height=height, label=label)

    match = _DIMENSIONS_RE.search(text)
    if match:
        width, height = int(match.group(1)), int(match.group(2))
        return Resolution(width=width, height=height, label=label_for_height(width, height))

    return None


def extract_hdr(format_protocol: str | None, notes: str | None) -> str:
    return first_match(_combined(format_protocol, notes), HDR_RULES) or "sdr"


def extract_container(url: str | None, format_protocol: str | None, notes: str | None) -> str | None:
    return first_match(_combined(url, format_protocol, notes), CONTAINER_RULES)


def extract_features(format_protocol: str | None, notes: str | None) -> list[str]:
    return all_matches(_combined(format_protocol, notes), FEATURE_RULES)

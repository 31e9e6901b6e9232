"""Raw CSV row → Asset.

Two input shapes are accepted:

* simple rows ``(url, category, format_protocol, notes)`` whose metadata is
  derived by the keyword extractors;
* structured rows (header → value mappings) from a pre-normalized export,
  whose list columns use ``|`` as the only separator.

Either way the asset ID, host, and scheme are derived from the normalized
URL, so identity does not depend on which shape a row came from.
"""

from __future__ import annotations

import hashlib
import re
import urllib.parse
from collections.abc import Mapping, Sequence

from vidcat.catalog.extractors import (
    extract_codecs,
    extract_container,
    extract_features,
    extract_hdr,
    extract_protocols,
    extract_resolution,
    label_for_height,
)
from vidcat.catalog.models import CODECS, CONTAINERS, HDR_TAGS, PROTOCOLS, Asset, Resolution

MIN_COLUMNS = 4
ID_LENGTH = 16
LIST_SEPARATOR = "|"
DEFAULT_CATEGORY = "Uncategorized"
UNKNOWN = "unknown"

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)

# Characters no URL parser accepts inside a hostname.
_BAD_HOST_RE = re.compile(r"[\s<>\"{}|\\^`]")

# Structured-schema columns that mark a pre-normalized export.
_STRUCTURED_MARKERS = frozenset(
    {"id", "host", "scheme", "resolution.width", "resolution.height", "resolution.label", "hdr"}
)

# Header aliases accepted at the import boundary (plural → canonical).
_COLUMN_ALIASES = {
    "protocols": "protocol",
    "codecs": "codec",
    "feature": "features",
    "containers": "container",
}


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------


def normalize_url(url: str) -> str:
    """Strip *url* and prepend ``https://`` when it carries no scheme."""
    url = url.strip()
    if not _SCHEME_RE.match(url):
        url = "https://" + url
    return url


def parse_host_scheme(url: str) -> tuple[str, str]:
    """Return ``(host, scheme)`` for *url*, or ``("unknown", "unknown")``.

    Never raises: a URL that fails to parse or has no hostname yields the
    unknown pair instead.
    """
    try:
        parts = urllib.parse.urlsplit(url)
        host = parts.hostname
        # Accessing .port validates the netloc (raises on e.g. "host:abc").
        parts.port
    except ValueError:
        return UNKNOWN, UNKNOWN
    if not host or not parts.scheme or _BAD_HOST_RE.search(host):
        return UNKNOWN, UNKNOWN
    try:
        host.encode("idna")
    except UnicodeError:
        return UNKNOWN, UNKNOWN
    return host, parts.scheme.lower()


def make_asset_id(url: str) -> str:
    """Stable ID: first 16 hex chars of SHA-256 over the normalized URL."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:ID_LENGTH]


# ---------------------------------------------------------------------------
# Simple schema
# ---------------------------------------------------------------------------


def normalize_row(values: Sequence[str]) -> Asset | None:
    """Build an Asset from ``(url, category, format_protocol, notes)``.

    Returns None when the row has fewer than MIN_COLUMNS values or a blank
    URL; callers treat None as "skip this row". Extra columns are ignored.
    """
    if len(values) < MIN_COLUMNS:
        return None

    url, category, format_protocol, notes = (v or "" for v in values[:MIN_COLUMNS])
    if not url.strip():
        return None

    normalized = normalize_url(url)
    host, scheme = parse_host_scheme(normalized)

    return Asset(
        id=make_asset_id(normalized),
        url=normalized,
        host=host,
        scheme=scheme,
        category=category.strip() or DEFAULT_CATEGORY,
        protocol=extract_protocols(format_protocol, notes),
        codec=extract_codecs(format_protocol, notes),
        resolution=extract_resolution(format_protocol, notes),
        hdr=extract_hdr(format_protocol, notes),
        container=extract_container(normalized, format_protocol, notes),
        features=extract_features(format_protocol, notes),
        notes=notes.strip(),
    )


# ---------------------------------------------------------------------------
# Structured schema
# ---------------------------------------------------------------------------


def canonical_header(header: Sequence[str]) -> list[str]:
    """Lower-case header names and fold plural aliases onto canonical names."""
    names = [h.strip().lower() for h in header]
    return [_COLUMN_ALIASES.get(n, n) for n in names]


def detect_schema(header: Sequence[str]) -> str:
    """Return ``"structured"`` for a pre-normalized header, else ``"simple"``."""
    names = set(canonical_header(header))
    if "url" in names and names & _STRUCTURED_MARKERS:
        return "structured"
    return "simple"


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(LIST_SEPARATOR) if part.strip()]


def _vocab_list(value: str | None, vocabulary: tuple[str, ...]) -> list[str]:
    result: list[str] = []
    for item in _split_list(value):
        tag = item.lower()
        tag = tag if tag in vocabulary else "other"
        if tag not in result:
            result.append(tag)
    return result


def _parse_int(value: str | None) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _structured_resolution(record: Mapping[str, str]) -> Resolution | None:
    width = _parse_int(record.get("resolution.width"))
    height = _parse_int(record.get("resolution.height"))
    if not width or not height:
        return None
    label = (record.get("resolution.label") or "").strip() or label_for_height(width, height)
    return Resolution(width=width, height=height, label=label)


def normalize_structured_row(record: Mapping[str, str]) -> Asset | None:
    """Build an Asset from a pre-normalized header → value mapping.

    Keys must already be canonical (see canonical_header). Values outside the
    protocol/codec vocabularies become ``"other"``; unknown HDR tags fall back
    to ``"sdr"`` and unknown containers to None. Returns None for a blank URL.
    """
    url = (record.get("url") or "").strip()
    if not url:
        return None

    normalized = normalize_url(url)
    host, scheme = parse_host_scheme(normalized)

    hdr = (record.get("hdr") or "").strip().lower()
    container = (record.get("container") or "").strip().lower() or None

    return Asset(
        id=make_asset_id(normalized),
        url=normalized,
        host=host,
        scheme=scheme,
        category=(record.get("category") or "").strip() or DEFAULT_CATEGORY,
        protocol=_vocab_list(record.get("protocol"), PROTOCOLS) or ["file"],
        codec=_vocab_list(record.get("codec"), CODECS),
        resolution=_structured_resolution(record),
        hdr=hdr if hdr in HDR_TAGS else "sdr",
        container=container if container in CONTAINERS else None,
        features=_split_list(record.get("features")),
        notes=(record.get("notes") or "").strip(),
    )

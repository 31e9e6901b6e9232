"""Faceted filter engine.

Semantics:
  - within one facet, selected values are OR-ed (any selected value present);
  - across facets, constraints are AND-ed (every non-empty facet must match);
  - a facet with nothing selected imposes no constraint;
  - a non-blank free-text search must be a substring of the asset's
    searchable text.

All functions are pure; call them as often as needed on the same asset list.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from vidcat.catalog.models import FACETS, Asset

_CODEC_LABELS = {"avc": "H.264", "hevc": "HEVC"}
_HDR_LABELS = {"dovi": "Dolby Vision"}

# Label order: protocol, codec, resolution, hdr, container, scheme, host.
_LABEL_ORDER = ("protocol", "codec", "resolution", "hdr", "container", "scheme", "host")


@dataclass
class FilterState:
    """Active query: free-text search plus selected values per facet."""

    search: str = ""
    protocol: set[str] = field(default_factory=set)
    codec: set[str] = field(default_factory=set)
    resolution: set[str] = field(default_factory=set)
    hdr: set[str] = field(default_factory=set)
    container: set[str] = field(default_factory=set)
    host: set[str] = field(default_factory=set)
    scheme: set[str] = field(default_factory=set)

    def selected(self, facet: str) -> set[str]:
        if facet not in FACETS:
            raise KeyError(f"Unknown facet: {facet!r}")
        return getattr(self, facet)

    def toggle(self, facet: str, value: str) -> None:
        """Select *value* in *facet*, or deselect it if already selected."""
        values = self.selected(facet)
        if value in values:
            values.discard(value)
        else:
            values.add(value)

    def clear(self) -> None:
        self.search = ""
        for facet in FACETS:
            self.selected(facet).clear()


def searchable_text(asset: Asset) -> str:
    """Lower-cased text matched by the free-text search box."""
    parts = [
        asset.category,
        asset.host,
        asset.hdr or "",
        asset.container or "",
        asset.notes or "",
        asset.resolution.label if asset.resolution else "",
        *asset.protocol,
        *asset.codec,
        *asset.features,
    ]
    return " ".join(parts).lower()


def matches(asset: Asset, state: FilterState) -> bool:
    """True if *asset* passes the search term and every facet selection."""
    query = state.search.strip().lower()
    if query and query not in searchable_text(asset):
        return False

    for facet in FACETS:
        wanted = state.selected(facet)
        if wanted and not any(v in wanted for v in asset.facet_values(facet)):
            return False
    return True


def filter_assets(assets: Iterable[Asset], state: FilterState) -> list[Asset]:
    return [a for a in assets if matches(a, state)]


def active_filter_count(state: FilterState) -> int:
    """Number of selected facet values across all facets."""
    return sum(len(state.selected(facet)) for facet in FACETS)


def filter_label(facet: str, value: str) -> str:
    """Human-readable label for one selected facet value."""
    if facet == "codec":
        return _CODEC_LABELS.get(value, value.upper())
    if facet == "hdr":
        return _HDR_LABELS.get(value, value.upper())
    if facet in ("protocol", "container", "scheme"):
        return value.upper()
    return value


def active_filter_labels(state: FilterState) -> list[str]:
    labels: list[str] = []
    for facet in _LABEL_ORDER:
        labels.extend(filter_label(facet, v) for v in sorted(state.selected(facet)))
    return labels


def search_assets(assets: Iterable[Asset], query: str) -> list[Asset]:
    """Quick search: keep assets where any single field contains *query*.

    Unlike the FilterState search, the term is matched per field, never
    across the boundary between two fields.
    """
    term = query.strip().lower()
    if not term:
        return list(assets)
    return [
        a for a in assets if any(term in v.lower() for v in a.searchable_values())
    ]

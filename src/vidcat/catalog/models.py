"""Domain models for the video test asset catalog.

JSON keys follow the shape the portal UI consumes:
``{"assets": [...], "facetCounts": {...}, "metadata": {...}}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PROTOCOLS: tuple[str, ...] = ("hls", "dash", "cmaf", "smooth", "file", "other")
CODECS: tuple[str, ...] = ("avc", "hevc", "av1", "vp9", "mpeg2", "vvc", "other")
HDR_TAGS: tuple[str, ...] = ("hdr10", "hlg", "dovi", "hdr", "sdr")
CONTAINERS: tuple[str, ...] = ("mp4", "ts", "mkv", "webm", "mov", "yuv")

# Facet categories in the order they are counted, filtered, and labelled.
FACETS: tuple[str, ...] = ("protocol", "codec", "resolution", "hdr", "container", "host", "scheme")

CATALOG_VERSION = "1.0.0"

FacetCounts = dict[str, dict[str, int]]


@dataclass(frozen=True)
class Resolution:
    width: int
    height: int
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"width": self.width, "height": self.height, "label": self.label}


@dataclass
class Asset:
    """One catalog entry: a video test URL plus its derived metadata.

    ``id`` is derived from ``url`` alone, so two rows with the same URL
    describe the same logical asset.
    """

    id: str
    url: str
    host: str
    scheme: str
    category: str = "Uncategorized"
    protocol: list[str] = field(default_factory=lambda: ["file"])
    codec: list[str] = field(default_factory=list)
    resolution: Resolution | None = None
    hdr: str = "sdr"
    container: str | None = None
    features: list[str] = field(default_factory=list)
    notes: str = ""

    def facet_values(self, facet: str) -> list[str]:
        """Return this asset's values for *facet* (empty when it has none)."""
        if facet == "protocol":
            return list(self.protocol)
        if facet == "codec":
            return list(self.codec)
        if facet == "resolution":
            return [self.resolution.label] if self.resolution else []
        if facet == "hdr":
            return [self.hdr] if self.hdr else []
        if facet == "container":
            return [self.container] if self.container else []
        if facet == "host":
            return [self.host]
        if facet == "scheme":
            return [self.scheme]
        raise KeyError(f"Unknown facet: {facet!r}")

    def searchable_values(self) -> list[str]:
        """Flattened field values used by free-text and query matching."""
        values = [self.category, *self.protocol, *self.codec, self.host, self.hdr]
        if self.container:
            values.append(self.container)
        if self.resolution:
            values.append(self.resolution.label)
        values.extend(self.features)
        values.append(self.notes)
        return [v for v in values if v]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "host": self.host,
            "scheme": self.scheme,
            "category": self.category,
            "protocol": list(self.protocol),
            "codec": list(self.codec),
            "resolution": self.resolution.to_dict() if self.resolution else None,
            "hdr": self.hdr,
            "container": self.container,
            "features": list(self.features),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Asset:
        res = data.get("resolution")
        return cls(
            id=str(data["id"]),
            url=str(data["url"]),
            host=str(data.get("host") or "unknown"),
            scheme=str(data.get("scheme") or "unknown"),
            category=str(data.get("category") or "Uncategorized"),
            protocol=list(data.get("protocol") or ["file"]),
            codec=list(data.get("codec") or []),
            resolution=(
                Resolution(width=int(res["width"]), height=int(res["height"]), label=str(res["label"]))
                if res
                else None
            ),
            hdr=str(data.get("hdr") or "sdr"),
            container=data.get("container"),
            features=list(data.get("features") or []),
            notes=str(data.get("notes") or ""),
        )


@dataclass
class CatalogMetadata:
    total_assets: int
    build_timestamp: str
    source_url: str = ""
    version: str = CATALOG_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAssets": self.total_assets,
            "buildTimestamp": self.build_timestamp,
            "sourceUrl": self.source_url,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogMetadata:
        return cls(
            total_assets=int(data.get("totalAssets", 0)),
            build_timestamp=str(data.get("buildTimestamp", "")),
            source_url=str(data.get("sourceUrl") or ""),
            version=str(data.get("version", CATALOG_VERSION)),
        )


@dataclass
class Catalog:
    """Assets, facet histogram, and build metadata from one import pass."""

    assets: list[Asset]
    facet_counts: FacetCounts
    metadata: CatalogMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "assets": [a.to_dict() for a in self.assets],
            "facetCounts": {k: dict(v) for k, v in self.facet_counts.items()},
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Catalog:
        return cls(
            assets=[Asset.from_dict(a) for a in data.get("assets", [])],
            facet_counts={
                str(k): {str(v): int(n) for v, n in values.items()}
                for k, values in (data.get("facetCounts") or {}).items()
            },
            metadata=CatalogMetadata.from_dict(data.get("metadata") or {}),
        )

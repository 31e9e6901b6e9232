"""Quality scoring: a derived 0–100 ranking of an asset's technical profile.

Scores are computed on demand and never stored with the asset.

    protocol    0–20   best protocol
    codec       0–25   best codec (0 when unknown)
    resolution  0–20   bucketed by width (0 when unknown)
    hdr         0–15
    container   0–10   (0 when unknown)
    features    0–10   2 points per feature, capped
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from vidcat.catalog.models import Asset

FEATURES_MAX = 10
_POINTS_PER_FEATURE = 2

PROTOCOL_SCORES: dict[str, int] = {
    "cmaf": 20,
    "dash": 18,
    "hls": 16,
    "smooth": 12,
    "file": 8,
    "other": 5,
}

CODEC_SCORES: dict[str, int] = {
    "av1": 25,
    "vvc": 24,
    "hevc": 20,
    "vp9": 18,
    "avc": 15,
    "mpeg2": 8,
    "other": 5,
}

HDR_SCORES: dict[str, int] = {
    "dovi": 15,
    "hdr10": 12,
    "hlg": 10,
    "hdr": 8,
    "sdr": 5,
}

CONTAINER_SCORES: dict[str, int] = {
    "mp4": 10,
    "mkv": 9,
    "webm": 8,
    "mov": 7,
    "ts": 6,
    "yuv": 4,
    "other": 3,
}

# (minimum width, points), checked top-down; narrower frames score 3.
RESOLUTION_SCORES: tuple[tuple[int, int], ...] = (
    (7680, 20),
    (3840, 18),
    (2560, 15),
    (1920, 12),
    (1280, 8),
    (640, 5),
)
_RESOLUTION_FLOOR = 3

GRADES: tuple[tuple[int, str], ...] = (
    (90, "A+"),
    (85, "A"),
    (80, "B+"),
    (70, "B"),
    (60, "C+"),
    (50, "C"),
    (40, "D"),
)
GRADE_ORDER: tuple[str, ...] = ("A+", "A", "B+", "B", "C+", "C", "D", "F")


@dataclass(frozen=True)
class QualityScore:
    overall: int
    breakdown: dict[str, int]
    grade: str
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overall": self.overall,
            "breakdown": dict(self.breakdown),
            "grade": self.grade,
            "recommendations": list(self.recommendations),
        }


def _best(values: Iterable[str], table: dict[str, int]) -> int:
    return max((table.get(v, 0) for v in values), default=0)


def resolution_points(width: int) -> int:
    for min_width, points in RESOLUTION_SCORES:
        if width >= min_width:
            return points
    return _RESOLUTION_FLOOR


def grade_for(overall: int) -> str:
    for threshold, grade in GRADES:
        if overall >= threshold:
            return grade
    return "F"


def _recommendations(breakdown: dict[str, int], feature_count: int) -> list[str]:
    recs: list[str] = []
    if breakdown["protocol"] < 15:
        recs.append("Consider using DASH or HLS for better streaming compatibility")
    if breakdown["codec"] < 20:
        recs.append("Upgrade to HEVC or AV1 for better compression efficiency")
    if breakdown["resolution"] < 12:
        recs.append("Higher resolution content provides better viewing experience")
    if breakdown["hdr"] < 10:
        recs.append("HDR content offers enhanced visual quality")
    if feature_count < 3:
        recs.append("Additional features like adaptive bitrate improve user experience")
    return recs or ["Excellent quality asset with modern standards"]


def score_asset(asset: Asset) -> QualityScore:
    breakdown = {
        "protocol": _best(asset.protocol, PROTOCOL_SCORES),
        "codec": _best(asset.codec, CODEC_SCORES),
        "resolution": resolution_points(asset.resolution.width) if asset.resolution else 0,
        "hdr": HDR_SCORES.get(asset.hdr, 0),
        "container": CONTAINER_SCORES.get(asset.container, 0) if asset.container else 0,
        "features": min(len(asset.features) * _POINTS_PER_FEATURE, FEATURES_MAX),
    }
    overall = sum(breakdown.values())
    return QualityScore(
        overall=overall,
        breakdown=breakdown,
        grade=grade_for(overall),
        recommendations=_recommendations(breakdown, len(asset.features)),
    )


def score_assets(assets: Iterable[Asset]) -> list[tuple[Asset, QualityScore]]:
    return [(a, score_asset(a)) for a in assets]


def top_assets(assets: Iterable[Asset], limit: int = 5) -> list[tuple[Asset, QualityScore]]:
    """Highest-scoring assets first; equal scores keep catalog order."""
    scored = score_assets(assets)
    scored.sort(key=lambda pair: pair[1].overall, reverse=True)
    return scored[:limit]


def grade_distribution(assets: Iterable[Asset]) -> dict[str, int]:
    dist = {grade: 0 for grade in GRADE_ORDER}
    for _, score in score_assets(assets):
        dist[score.grade] += 1
    return dist

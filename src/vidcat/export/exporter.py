"""Asset export: CSV, JSON, TSV (spreadsheet) and plain-text reports.

List fields are joined with ``"; "`` in tabular formats. Quality scores and
recommendations are computed at export time when requested.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from datetime import date

from vidcat.catalog.models import Asset
from vidcat.scoring.quality import QualityScore, score_asset

FORMATS: dict[str, str] = {"csv": "csv", "json": "json", "tsv": "tsv", "excel": "xls", "txt": "txt"}
MIME_TYPES: dict[str, str] = {
    "csv": "text/csv",
    "json": "application/json",
    "tsv": "text/tab-separated-values",
    "excel": "application/vnd.ms-excel",
    "txt": "text/plain",
}

_COLUMNS: tuple[tuple[str, str], ...] = (
    ("ID", "id"),
    ("Category", "category"),
    ("URL", "url"),
    ("Host", "host"),
    ("Scheme", "scheme"),
    ("Protocols", "protocol"),
    ("Codecs", "codec"),
    ("Container", "container"),
    ("Resolution", "resolution"),
    ("HDR", "hdr"),
    ("Features", "features"),
    ("Notes", "notes"),
)
_TXT_RULE = "=" * 50


class ExportError(ValueError):
    """Raised for an unsupported export format or field."""


def export_filename(fmt: str, today: date | None = None) -> str:
    """``video-assets-YYYY-MM-DD.<ext>`` for *fmt*."""
    if fmt not in FORMATS:
        raise ExportError(f"Unsupported export format: {fmt!r}")
    day = (today or date.today()).isoformat()
    return f"video-assets-{day}.{FORMATS[fmt]}"


def resolution_text(asset: Asset) -> str:
    if asset.resolution is None:
        return ""
    return asset.resolution.label or f"{asset.resolution.width}x{asset.resolution.height}"


def _cell(asset: Asset, key: str) -> str:
    if key == "resolution":
        return resolution_text(asset)
    value = getattr(asset, key)
    if isinstance(value, list):
        return "; ".join(value)
    return value or ""


def _columns(fields: Sequence[str] | None) -> list[tuple[str, str]]:
    if not fields:
        return list(_COLUMNS)
    known = {key for _, key in _COLUMNS}
    unknown = [f for f in fields if f not in known]
    if unknown:
        raise ExportError(f"Unknown export field(s): {', '.join(unknown)}")
    return [(title, key) for title, key in _COLUMNS if key in fields]


def _rows(
    assets: Sequence[Asset],
    columns: list[tuple[str, str]],
    include_scores: bool,
    include_recommendations: bool,
) -> list[list[str]]:
    header = [title for title, _ in columns]
    if include_scores:
        header += ["Quality Score", "Quality Grade"]
    if include_recommendations:
        header.append("Recommendations")

    rows = [header]
    for asset in assets:
        row = [_cell(asset, key) for _, key in columns]
        score: QualityScore | None = (
            score_asset(asset) if include_scores or include_recommendations else None
        )
        if include_scores and score:
            row += [str(score.overall), score.grade]
        if include_recommendations and score:
            row.append("; ".join(score.recommendations))
        rows.append(row)
    return rows


def export_assets(
    assets: Sequence[Asset],
    fmt: str,
    *,
    include_scores: bool = False,
    include_recommendations: bool = False,
    fields: Sequence[str] | None = None,
) -> str:
    """Render *assets* in *fmt* (``csv``, ``json``, ``tsv``/``excel``, ``txt``).

    Args:
        assets: Assets to export, in output order.
        fmt: Output format name.
        include_scores: Append quality score + grade columns.
        include_recommendations: Append the recommendation list.
        fields: Restrict tabular/JSON output to these asset fields.

    Raises:
        ExportError: Unknown format or field name.
    """
    if fmt not in FORMATS:
        raise ExportError(f"Unsupported export format: {fmt!r}")
    columns = _columns(fields)

    if fmt == "json":
        return _to_json(assets, columns, include_scores, include_recommendations)
    if fmt == "txt":
        return _to_txt(assets)
    if not assets:
        return ""

    rows = _rows(assets, columns, include_scores, include_recommendations)
    buf = io.StringIO()
    if fmt == "csv":
        csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n").writerows(rows)
    else:
        csv.writer(buf, delimiter="\t", lineterminator="\n").writerows(rows)
    return buf.getvalue()


def _to_json(
    assets: Sequence[Asset],
    columns: list[tuple[str, str]],
    include_scores: bool,
    include_recommendations: bool,
) -> str:
    keys = [key for _, key in columns]
    out = []
    for asset in assets:
        data = asset.to_dict()
        record = {k: data[k] for k in keys}
        if include_scores or include_recommendations:
            score = score_asset(asset).to_dict()
            if not include_recommendations:
                score.pop("recommendations")
            record["qualityScore"] = score
        out.append(record)
    return json.dumps(out, indent=2, ensure_ascii=False)


def _to_txt(assets: Sequence[Asset]) -> str:
    blocks = []
    for asset in assets:
        score = score_asset(asset)
        lines = [
            f"ID: {asset.id}",
            f"Category: {asset.category}",
            f"URL: {asset.url}",
            f"Host: {asset.host}",
            f"Scheme: {asset.scheme}",
            f"Protocols: {', '.join(asset.protocol)}",
            f"Codecs: {', '.join(asset.codec) or 'Unknown'}",
            f"Container: {asset.container or 'Unknown'}",
            f"Resolution: {resolution_text(asset) or 'Unknown'}",
            f"HDR: {asset.hdr or 'sdr'}",
            f"Features: {', '.join(asset.features)}",
            f"Notes: {asset.notes or 'None'}",
            f"Quality Score: {score.overall} ({score.grade})",
            f"Recommendations: {'; '.join(score.recommendations)}",
        ]
        blocks.append("\n".join(lines))
    return f"\n\n{_TXT_RULE}\n\n".join(blocks)

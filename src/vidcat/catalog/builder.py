"""Catalog builder: raw CSV text → assets + facet counts + metadata.

One pass over the data rows: each line is tokenized and normalized, bad rows
are logged and skipped, and facet counters are incremented per produced
asset. A single malformed row never aborts the batch; a source that cannot
be fetched aborts the whole build.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

from vidcat.catalog.fetcher import DEFAULT_MAX_BYTES, DEFAULT_TIMEOUT, fetch_source
from vidcat.catalog.models import FACETS, Asset, Catalog, CatalogMetadata, FacetCounts
from vidcat.catalog.normalizer import (
    MIN_COLUMNS,
    canonical_header,
    detect_schema,
    normalize_row,
    normalize_structured_row,
)
from vidcat.catalog.tokenizer import split_lines, tokenize_line

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 100


class CatalogBuildError(ValueError):
    """Raised when the source text holds no data rows to build from."""


def count_facets(assets: Iterable[Asset]) -> FacetCounts:
    """Histogram of facet values, each facet ordered by descending count."""
    counters: dict[str, Counter[str]] = {facet: Counter() for facet in FACETS}
    for asset in assets:
        for facet in FACETS:
            counters[facet].update(asset.facet_values(facet))
    return {
        facet: dict(sorted(counter.items(), key=lambda kv: kv[1], reverse=True))
        for facet, counter in counters.items()
    }


def build_catalog(
    csv_text: str,
    source_url: str = "",
    *,
    on_progress: Callable[[int, int], None] | None = None,
) -> Catalog:
    """Build a Catalog from raw CSV text.

    Line 0 is the header. Its column names choose the schema: a
    pre-normalized header is read by name, anything else positionally as
    ``url, category, format_protocol, notes``.

    Args:
        csv_text: Full CSV text, header included.
        source_url: Recorded in the metadata.
        on_progress: Optional callback ``(rows_done, rows_total)``.

    Raises:
        CatalogBuildError: If there is no data row after the header.
    """
    lines = split_lines(csv_text)
    if len(lines) < 2:
        raise CatalogBuildError(
            "CSV source must have a header row and at least one data row."
        )

    header = [h.replace('"', "").strip() for h in lines[0].split(",")]
    schema = detect_schema(header)
    columns = canonical_header(header)
    total = len(lines) - 1
    logger.debug("Header %s → %s schema, %d rows", header, schema, total)

    assets: list[Asset] = []
    skipped = 0

    for row_no, line in enumerate(lines[1:], start=1):
        try:
            asset = _build_row(line, schema, columns, row_no)
        except Exception:  # one bad row must not abort the batch
            logger.exception("Error processing row %d; skipped", row_no)
            asset = None
        if asset is None:
            skipped += 1
        else:
            assets.append(asset)

        if on_progress is not None:
            on_progress(row_no, total)
        if row_no % _PROGRESS_EVERY == 0:
            logger.debug("Processed %d/%d rows", row_no, total)

    if skipped:
        logger.info("Skipped %d of %d rows", skipped, total)

    metadata = CatalogMetadata(
        total_assets=len(assets),
        build_timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        source_url=source_url,
    )
    return Catalog(assets=assets, facet_counts=count_facets(assets), metadata=metadata)


def _build_row(line: str, schema: str, columns: list[str], row_no: int) -> Asset | None:
    values = tokenize_line(line)

    if schema == "structured":
        record = dict(zip(columns, values))
        asset = normalize_structured_row(record)
        if asset is None:
            logger.warning("Skipping row %d: empty URL", row_no)
        return asset

    if len(values) < MIN_COLUMNS:
        logger.warning("Skipping row %d: insufficient columns (%d)", row_no, len(values))
        return None
    asset = normalize_row(values)
    if asset is None:
        logger.warning("Skipping row %d: empty URL", row_no)
    return asset


def load_catalog(
    source: str | Path,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_BYTES,
    on_progress: Callable[[int, int], None] | None = None,
) -> Catalog:
    """Fetch *source* (URL or path) and build a Catalog from it.

    Raises:
        SourceFetchError: If the source cannot be fetched (fatal).
        CatalogBuildError: If the source holds no data rows.
    """
    text = fetch_source(source, timeout=timeout, max_bytes=max_bytes)
    return build_catalog(text, source_url=str(source), on_progress=on_progress)

"""vidcat export: write (optionally filtered) assets as csv/json/tsv/excel/txt.

Usage:
  vidcat export --format csv
  vidcat export -f json --scores --recommendations --query 'protocol:hls'
  vidcat export -f tsv --field url --field category --stdout
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from vidcat.cli.common import console, load_cfg, resolve_catalog
from vidcat.cli.errors import err_export_failed
from vidcat.export.exporter import ExportError, export_assets, export_filename
from vidcat.search.filters import search_assets
from vidcat.search.query import filter_by_query


def export_cmd(
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="csv, json, tsv, excel, or txt."),
    ] = "csv",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: video-assets-<date>.<ext>)."),
    ] = None,
    stdout: Annotated[
        bool,
        typer.Option("--stdout", help="Print to stdout instead of writing a file."),
    ] = False,
    search: Annotated[
        str | None,
        typer.Option("--search", help="Keep assets where any field contains this text."),
    ] = None,
    query: Annotated[
        str | None,
        typer.Option("--query", "-q", help="Advanced query to filter exported assets."),
    ] = None,
    scores: Annotated[
        bool,
        typer.Option("--scores", help="Include quality score and grade."),
    ] = False,
    recommendations: Annotated[
        bool,
        typer.Option("--recommendations", help="Include quality recommendations."),
    ] = False,
    field: Annotated[
        list[str] | None,
        typer.Option("--field", help="Restrict to these asset fields (repeatable)."),
    ] = None,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", "-c", help="Catalog directory or catalog.json."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Store path (default: config store.db)."),
    ] = None,
) -> None:
    """Export catalog assets to a file."""
    fmt = fmt.lower()
    cfg = load_cfg()
    cat = resolve_catalog(catalog, db, cfg)

    assets = cat.assets
    if search:
        assets = search_assets(assets, search)
    if query:
        assets = filter_by_query(assets, query)

    try:
        content = export_assets(
            assets,
            fmt,
            include_scores=scores,
            include_recommendations=recommendations,
            fields=field or None,
        )
        target = output if output is not None else Path(export_filename(fmt))
    except ExportError as exc:
        console.print(err_export_failed(str(exc)))
        raise typer.Exit(1) from exc

    if stdout:
        typer.echo(content, nl=False)
        return

    target.write_text(content, encoding="utf-8")
    console.print(f"[green]✓[/] Exported {len(assets)} assets to {target}")

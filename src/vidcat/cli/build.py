"""vidcat build: fetch the CSV source and write the catalog JSON.

Usage:
  vidcat build
  vidcat build --source assets.csv --output public
  vidcat build --store --db .vidcat.db
  vidcat build --dry-run
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from vidcat.catalog.builder import CatalogBuildError, build_catalog
from vidcat.catalog.fetcher import SourceFetchError, fetch_source
from vidcat.catalog.io import write_catalog
from vidcat.catalog.models import Catalog
from vidcat.cli.common import console, load_cfg, open_db
from vidcat.cli.errors import err_build_failed, err_fetch_failed
from vidcat.db.repository import Repository

_SUMMARY_TOP = 5


def build_cmd(
    source: Annotated[
        str | None,
        typer.Option("--source", "-s", help="CSV source URL or local path (default: config source.url)."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory (default: config output.dir)."),
    ] = None,
    store: Annotated[
        bool,
        typer.Option("--store", help="Also import the catalog into the SQLite store."),
    ] = False,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Store path (default: config store.db). Implies --store."),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Fetch timeout in seconds (default: config source.timeout)."),
    ] = None,
    no_split: Annotated[
        bool,
        typer.Option("--no-split", help="Write catalog.json only, without the split files."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Build and summarise without writing anything."),
    ] = False,
) -> None:
    """Fetch the asset CSV and build the normalized catalog."""
    cfg = load_cfg()
    src = source or cfg.source.url
    out_dir = output if output is not None else Path(cfg.output.dir)
    fetch_timeout = timeout if timeout is not None else cfg.source.timeout

    console.print(f"[bold]→ {escape(src)}[/]")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=console,
    ) as prog:
        prog.add_task("  Fetching source…", total=None)
        try:
            text = fetch_source(src, timeout=fetch_timeout, max_bytes=cfg.source.max_bytes)
        except SourceFetchError as exc:
            console.print(err_fetch_failed(src, str(exc)))
            raise typer.Exit(1) from exc

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        transient=True,
        console=console,
    ) as prog:
        task = prog.add_task("  Normalizing rows…", total=None)

        def _advance(done: int, total: int) -> None:
            prog.update(task, completed=done, total=total)

        try:
            catalog = build_catalog(text, source_url=src, on_progress=_advance)
        except CatalogBuildError as exc:
            console.print(err_build_failed(src, str(exc)))
            raise typer.Exit(1) from exc

    _show_summary(catalog)

    if dry_run:
        console.print("[dim]Dry run: nothing written.[/]")
        return

    split = cfg.output.split_files and not no_split
    written = write_catalog(catalog, out_dir, split_files=split)
    for path in written:
        console.print(f"  [green]✓[/] {path}")

    if store or db is not None:
        db_path = db if db is not None else Path(cfg.store.db)
        conn = open_db(db_path)
        try:
            stored = Repository(conn).replace_catalog(catalog)
        finally:
            conn.close()
        console.print(f"  [green]✓[/] Stored {stored} distinct assets in {db_path}")


def _show_summary(catalog: Catalog) -> None:
    meta = catalog.metadata
    table = Table(show_header=True, box=None, padding=(0, 1))
    table.add_column("Facet", style="bold")
    table.add_column("Top values")

    for facet, counts in catalog.facet_counts.items():
        top = list(counts.items())[:_SUMMARY_TOP]
        table.add_row(facet, escape(", ".join(f"{v} ({n})" for v, n in top)) or "[dim]none[/]")

    console.print(
        Panel(
            table,
            title=f"[bold]Catalog[/] [dim]({meta.total_assets} assets, built {meta.build_timestamp})[/]",
            expand=False,
        )
    )

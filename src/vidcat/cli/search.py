"""vidcat search / facets / history / saved: querying the catalog.

Usage:
  vidcat search bunny
  vidcat search --protocol hls --protocol dash --hdr hdr10
  vidcat search --query 'protocol:hls AND NOT codec:hevc' --save "HLS no HEVC"
  vidcat facets --facet codec
  vidcat history
  vidcat saved list | run NAME_OR_ID | delete ID
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from vidcat.catalog.models import FACETS, Asset
from vidcat.cli.common import console, load_cfg, open_db, resolve_catalog
from vidcat.cli.errors import err_saved_not_found, err_unknown_facet
from vidcat.db.repository import Repository
from vidcat.search.filters import FilterState, active_filter_labels, filter_assets
from vidcat.search.query import filter_by_query

_CatalogOpt = Annotated[
    Path | None,
    typer.Option("--catalog", "-c", help="Catalog directory or catalog.json (default: config output.dir)."),
]
_DbOpt = Annotated[
    Path | None,
    typer.Option("--db", help="Store path (default: config store.db)."),
]


def _facet_opt(facet: str) -> object:
    return typer.Option(f"--{facet}", help=f"Keep assets with this {facet} (repeatable, OR-ed).")


def search_cmd(
    text: Annotated[
        str,
        typer.Argument(help="Free-text search over category, host, notes, and tags."),
    ] = "",
    protocol: Annotated[list[str] | None, _facet_opt("protocol")] = None,
    codec: Annotated[list[str] | None, _facet_opt("codec")] = None,
    resolution: Annotated[list[str] | None, _facet_opt("resolution")] = None,
    hdr: Annotated[list[str] | None, _facet_opt("hdr")] = None,
    container: Annotated[list[str] | None, _facet_opt("container")] = None,
    host: Annotated[list[str] | None, _facet_opt("host")] = None,
    scheme: Annotated[list[str] | None, _facet_opt("scheme")] = None,
    query: Annotated[
        str | None,
        typer.Option("--query", "-q", help="Advanced query, e.g. 'protocol:hls AND NOT codec:hevc'."),
    ] = None,
    save: Annotated[
        str | None,
        typer.Option("--save", help="Save --query under this name."),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Show at most N results."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print matching assets as JSON."),
    ] = False,
    catalog: _CatalogOpt = None,
    db: _DbOpt = None,
) -> None:
    """Filter the catalog by facets, free text, and advanced queries."""
    cfg = load_cfg()
    cat = resolve_catalog(catalog, db, cfg)

    state = FilterState(search=text)
    selections = {
        "protocol": protocol,
        "codec": codec,
        "resolution": resolution,
        "hdr": hdr,
        "container": container,
        "host": host,
        "scheme": scheme,
    }
    for facet, values in selections.items():
        state.selected(facet).update(values or [])

    results = filter_assets(cat.assets, state)
    if query:
        results = filter_by_query(results, query)

    recorded = query or text
    if recorded.strip() or save:
        conn = open_db(db if db is not None else Path(cfg.store.db))
        try:
            repo = Repository(conn)
            if recorded.strip():
                repo.add_history(recorded, limit=cfg.search.history_limit)
            if save:
                if not query:
                    console.print("[yellow]--save needs --query; nothing saved.[/]")
                else:
                    saved = repo.save_search(save, query)
                    console.print(f"[green]✓[/] Saved search '{escape(saved.name)}' ({saved.id})")
        finally:
            conn.close()

    shown = results[:limit] if limit else results
    if as_json:
        typer.echo(json.dumps([a.to_dict() for a in shown], indent=2, ensure_ascii=False))
        return

    labels = active_filter_labels(state)
    if labels:
        console.print(f"[dim]Filters: {escape(', '.join(labels))}[/]")
    _print_assets(shown, title=f"{len(results)} of {len(cat.assets)} assets")


def facets_cmd(
    facet: Annotated[
        str | None,
        typer.Option("--facet", "-f", help="Show only this facet."),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Values shown per facet."),
    ] = 10,
    catalog: _CatalogOpt = None,
    db: _DbOpt = None,
) -> None:
    """Show facet value counts for the catalog."""
    if facet is not None and facet not in FACETS:
        console.print(err_unknown_facet(facet, FACETS))
        raise typer.Exit(1)

    cfg = load_cfg()
    cat = resolve_catalog(catalog, db, cfg)

    for name in [facet] if facet else FACETS:
        counts = cat.facet_counts.get(name, {})
        table = Table(title=f"{name} ({len(counts)} values)", title_justify="left")
        table.add_column("Value")
        table.add_column("Assets", justify="right")
        for value, count in list(counts.items())[:limit]:
            table.add_row(escape(value), str(count))
        console.print(table)


def history_cmd(
    db: _DbOpt = None,
) -> None:
    """Show recent search queries, most recent first."""
    cfg = load_cfg()
    db_path = db if db is not None else Path(cfg.store.db)
    if not db_path.exists():
        console.print("[dim]No search history yet.[/]")
        return
    conn = open_db(db_path)
    try:
        history = Repository(conn).list_history()
    finally:
        conn.close()
    if not history:
        console.print("[dim]No search history yet.[/]")
        return
    for i, q in enumerate(history, start=1):
        console.print(f"  {i:>2}. {escape(q)}")


# ------------------------------------------------------------------
# Saved searches
# ------------------------------------------------------------------

saved_app = typer.Typer(help="Manage saved advanced searches.", no_args_is_help=True)


@saved_app.command("list")
def saved_list_cmd(db: _DbOpt = None) -> None:
    """List saved searches."""
    cfg = load_cfg()
    conn = open_db(db if db is not None else Path(cfg.store.db))
    try:
        searches = Repository(conn).list_saved_searches()
    finally:
        conn.close()

    if not searches:
        console.print("[dim]No saved searches.[/]")
        return

    table = Table(show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Query")
    table.add_column("Last used", style="dim")
    for s in searches:
        table.add_row(s.id, escape(s.name), escape(s.query), s.last_used or "")
    console.print(table)


@saved_app.command("run")
def saved_run_cmd(
    id_or_name: Annotated[str, typer.Argument(help="Saved search ID or name.")],
    as_json: Annotated[bool, typer.Option("--json", help="Print matching assets as JSON.")] = False,
    catalog: _CatalogOpt = None,
    db: _DbOpt = None,
) -> None:
    """Run a saved search against the catalog."""
    cfg = load_cfg()
    conn = open_db(db if db is not None else Path(cfg.store.db))
    try:
        repo = Repository(conn)
        saved = repo.find_saved_search(id_or_name)
        if saved is None:
            console.print(err_saved_not_found(id_or_name))
            raise typer.Exit(1)
        repo.touch_saved_search(saved.id)
        repo.add_history(saved.query, limit=cfg.search.history_limit)
    finally:
        conn.close()

    cat = resolve_catalog(catalog, db, cfg)
    results = filter_by_query(cat.assets, saved.query)
    if as_json:
        typer.echo(json.dumps([a.to_dict() for a in results], indent=2, ensure_ascii=False))
        return
    console.print(f"[dim]{escape(saved.name)}: {escape(saved.query)}[/]")
    _print_assets(results, title=f"{len(results)} of {len(cat.assets)} assets")


@saved_app.command("delete")
def saved_delete_cmd(
    search_id: Annotated[str, typer.Argument(help="Saved search ID.")],
    db: _DbOpt = None,
) -> None:
    """Delete a saved search."""
    cfg = load_cfg()
    conn = open_db(db if db is not None else Path(cfg.store.db))
    try:
        deleted = Repository(conn).delete_saved_search(search_id)
    finally:
        conn.close()
    if not deleted:
        console.print(err_saved_not_found(search_id))
        raise typer.Exit(1)
    console.print(f"[green]✓[/] Deleted saved search {search_id}")


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------


def _print_assets(assets: list[Asset], *, title: str) -> None:
    if not assets:
        console.print(f"[yellow]No matching assets.[/] [dim]({title})[/]")
        return

    table = Table(title=title, title_justify="left", show_header=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Category", style="bold")
    table.add_column("Protocol")
    table.add_column("Codec")
    table.add_column("Resolution")
    table.add_column("HDR")
    table.add_column("Container")
    table.add_column("Host", style="dim")
    for a in assets:
        table.add_row(
            a.id,
            escape(a.category),
            escape(", ".join(a.protocol)),
            escape(", ".join(a.codec)),
            escape(a.resolution.label) if a.resolution else "",
            escape(a.hdr),
            escape(a.container or ""),
            escape(a.host),
        )
    console.print(table)

"""vidcat rich error messages.

Every error shown to the user says what went wrong and the exact action
that fixes it.

Usage:
    from vidcat.cli.errors import err_no_catalog
    console.print(err_no_catalog(Path("public")))
    raise typer.Exit(1)
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape


def err_config(detail: str) -> str:
    """Invalid vidcat.yaml / global config."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {escape(detail)}\n"
        "  Fix vidcat.yaml (or ~/.vidcat/config.yaml) and retry."
    )


def err_fetch_failed(source: str, detail: str) -> str:
    """The CSV source could not be fetched or read."""
    return (
        f"[red]Error:[/] Cannot fetch asset source '{escape(source)}'.\n"
        f"  {escape(detail)}\n"
        "  Check the URL or path, or pass another one:  vidcat build --source PATH_OR_URL"
    )


def err_build_failed(source: str, detail: str) -> str:
    return (
        f"[red]Error:[/] Cannot build a catalog from '{escape(source)}'.\n"
        f"  {escape(detail)}\n"
        "  The source needs a header row and at least one data row."
    )


def err_no_catalog(catalog: Path, db: Path | None = None) -> str:
    """No built catalog at the given location."""
    where = f"'{catalog}'" if db is None else f"'{catalog}' or '{db}'"
    where = escape(where)
    return (
        f"[red]Error:[/] No catalog found at {where}.\n"
        "  Run:  vidcat build"
    )


def err_bad_catalog(path: Path, detail: str) -> str:
    return (
        f"[red]Error:[/] Catalog at '{escape(str(path))}' cannot be read.\n"
        f"  {escape(detail)}\n"
        "  Rebuild it:  vidcat build"
    )


def err_unknown_asset(asset_id: str) -> str:
    return (
        f"[red]Error:[/] No asset with ID '{escape(asset_id)}'.\n"
        "  List IDs with:  vidcat search --json"
    )


def err_unknown_facet(facet: str, known: tuple[str, ...]) -> str:
    return (
        f"[red]Error:[/] Unknown facet '{escape(facet)}'.\n"
        f"  Known facets: {', '.join(known)}"
    )


def err_export_failed(detail: str) -> str:
    return (
        f"[red]Error:[/] Export failed.\n"
        f"  {escape(detail)}\n"
        "  Formats: csv, json, tsv, excel, txt"
    )


def err_saved_not_found(id_or_name: str) -> str:
    return (
        f"[red]Error:[/] No saved search '{escape(id_or_name)}'.\n"
        "  List saved searches:  vidcat saved list"
    )


def err_report_target() -> str:
    return (
        "[red]Error:[/] Nothing to report on.\n"
        "  Pass --asset ID (from the catalog) or --url URL."
    )

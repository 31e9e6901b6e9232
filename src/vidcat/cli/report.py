"""vidcat report: draft an issue for a broken asset, contribution, or edit.

The draft is printed (or written as JSON); nothing is sent anywhere.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel

from vidcat.cli.common import console, load_cfg, resolve_catalog
from vidcat.cli.errors import err_report_target, err_unknown_asset
from vidcat.issues.drafts import ISSUE_TYPES, AssetReport, create_issue_draft, describe_asset


def report_cmd(
    issue_type: Annotated[
        str,
        typer.Option("--type", "-t", help=f"Issue type: {', '.join(ISSUE_TYPES)}."),
    ] = "broken",
    asset_id: Annotated[
        str | None,
        typer.Option("--asset", "-a", help="Catalog asset ID the issue is about."),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", help="Asset URL (for assets not in the catalog)."),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", help="Asset title (default: the asset category)."),
    ] = None,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="What is wrong, or what should change."),
    ] = "",
    reporter: Annotated[
        str | None,
        typer.Option("--reporter", help="Your name or contact (optional)."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the draft as JSON."),
    ] = False,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", "-c", help="Catalog directory or catalog.json."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Store path (default: config store.db)."),
    ] = None,
) -> None:
    """Draft an issue about a catalog asset."""
    if issue_type not in ISSUE_TYPES:
        console.print(
            f"[red]Error:[/] Unknown issue type '{escape(issue_type)}'.\n"
            f"  Use one of: {', '.join(ISSUE_TYPES)}"
        )
        raise typer.Exit(1)

    details = description
    if asset_id is not None:
        cat = resolve_catalog(catalog, db, load_cfg())
        asset = next((a for a in cat.assets if a.id == asset_id), None)
        if asset is None:
            console.print(err_unknown_asset(asset_id))
            raise typer.Exit(1)
        url = url or asset.url
        title = title or asset.category
        details = f"{description}\n\n{describe_asset(asset)}".strip()
    elif url is None:
        console.print(err_report_target())
        raise typer.Exit(1)

    draft = create_issue_draft(
        AssetReport(
            asset_url=url,
            asset_title=title or url,
            issue_type=issue_type,
            description=details,
            reporter=reporter,
        )
    )

    if as_json:
        typer.echo(json.dumps(draft.to_dict(), indent=2, ensure_ascii=False))
        return

    console.print(
        Panel(
            Markdown(draft.body),
            title=f"[bold]{escape(draft.title)}[/]",
            subtitle=f"[dim]labels: {', '.join(draft.labels)}[/]",
            expand=False,
        )
    )

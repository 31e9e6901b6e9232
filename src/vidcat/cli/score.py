"""vidcat score: quality ranking and per-asset score breakdown."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from vidcat.cli.common import console, load_cfg, resolve_catalog
from vidcat.cli.errors import err_unknown_asset
from vidcat.scoring.quality import GRADE_ORDER, grade_distribution, score_asset, top_assets


def score_cmd(
    asset_id: Annotated[
        str | None,
        typer.Option("--asset", "-a", help="Show the full breakdown for one asset ID."),
    ] = None,
    top: Annotated[
        int | None,
        typer.Option("--top", "-n", min=1, help="Number of top assets (default: config scoring.top_limit)."),
    ] = None,
    distribution: Annotated[
        bool,
        typer.Option("--distribution", help="Also show how many assets fall in each grade."),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print scores as JSON."),
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
    """Rank assets by quality score, or explain one asset's score."""
    cfg = load_cfg()
    cat = resolve_catalog(catalog, db, cfg)

    if asset_id is not None:
        asset = next((a for a in cat.assets if a.id == asset_id), None)
        if asset is None:
            console.print(err_unknown_asset(asset_id))
            raise typer.Exit(1)
        score = score_asset(asset)
        if as_json:
            typer.echo(json.dumps({"id": asset.id, **score.to_dict()}, indent=2))
            return
        lines = [f"Score: [bold]{score.overall}[/]/100  Grade: [bold]{score.grade}[/]", ""]
        lines += [f"  {k:<11} {v:>3}" for k, v in score.breakdown.items()]
        lines += ["", "Recommendations:"]
        lines += [f"  • {escape(r)}" for r in score.recommendations]
        console.print(Panel("\n".join(lines), title=f"[bold]{escape(asset.category)}[/] [dim]{asset.id}[/]", expand=False))
        return

    ranked = top_assets(cat.assets, limit=top or cfg.scoring.top_limit)
    dist = grade_distribution(cat.assets) if distribution else None

    if as_json:
        payload: dict = {
            "top": [{"id": a.id, "url": a.url, **s.to_dict()} for a, s in ranked],
        }
        if dist is not None:
            payload["distribution"] = dist
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"Top {len(ranked)} assets", title_justify="left")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Grade")
    table.add_column("Category")
    table.add_column("ID", style="dim", no_wrap=True)
    for rank, (asset, score) in enumerate(ranked, start=1):
        table.add_row(str(rank), str(score.overall), score.grade, escape(asset.category), asset.id)
    console.print(table)

    if dist is not None:
        console.print("  ".join(f"[bold]{g}[/] {dist[g]}" for g in GRADE_ORDER))

"""vidcat init: create the global config and an empty catalog store.

Usage:
  vidcat init
  vidcat init --db assets.db
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from vidcat.cli.common import console, load_cfg, open_db
from vidcat.config import ensure_global_config


def init_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Store path to create (default: config store.db)."),
    ] = None,
) -> None:
    """Write ~/.vidcat/config.yaml (if missing) and initialise the store."""
    cfg_path = ensure_global_config()
    console.print(f"  [green]✓[/] {cfg_path} (global config)")

    cfg = load_cfg()
    db_path = db if db is not None else Path(cfg.store.db)
    conn = open_db(db_path)
    conn.close()
    console.print(f"  [green]✓[/] {db_path} (catalog store)")

    console.print("\nNext steps:")
    console.print("  1. vidcat build --store     (fetch the CSV and fill the store)")
    console.print("  2. vidcat search -q \"...\"   (query the catalog)")

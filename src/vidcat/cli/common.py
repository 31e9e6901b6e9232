"""Shared CLI plumbing: config, store, and catalog loading."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import typer
from rich.console import Console

from vidcat.catalog.io import read_catalog
from vidcat.catalog.models import Catalog
from vidcat.cli.errors import err_bad_catalog, err_config, err_no_catalog
from vidcat.config import ConfigError, VidcatConfig, load_config
from vidcat.db.connection import Database
from vidcat.db.repository import Repository
from vidcat.db.schema import initialize

console = Console()


def load_cfg() -> VidcatConfig:
    """Load merged config, exiting with a readable error if it is invalid."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc


def open_db(db_path: Path) -> sqlite3.Connection:
    """Open (or create) the catalog store and run migrations."""
    db = Database(db_path)
    conn = db.connect()
    initialize(conn)
    return conn


def resolve_catalog(catalog: Path | None, db: Path | None, cfg: VidcatConfig) -> Catalog:
    """Load the catalog from JSON output, falling back to the store.

    ``--catalog`` wins when given. Without it the configured output
    directory is tried first, then the store.
    """
    catalog_path = catalog if catalog is not None else Path(cfg.output.dir)
    db_path = db if db is not None else Path(cfg.store.db)

    if catalog is not None or catalog_path.exists():
        try:
            return read_catalog(catalog_path)
        except FileNotFoundError:
            if catalog is not None:
                console.print(err_no_catalog(catalog_path))
                raise typer.Exit(1) from None
        except ValueError as exc:
            console.print(err_bad_catalog(catalog_path, str(exc)))
            raise typer.Exit(1) from exc

    if db_path.exists():
        conn = open_db(db_path)
        try:
            stored = Repository(conn).load_catalog()
        finally:
            conn.close()
        if stored is not None:
            return stored

    console.print(err_no_catalog(catalog_path, db_path))
    raise typer.Exit(1)

"""vidcat CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from vidcat.cli.build import build_cmd
from vidcat.cli.export import export_cmd
from vidcat.cli.init import init_cmd
from vidcat.cli.report import report_cmd
from vidcat.cli.score import score_cmd
from vidcat.cli.search import facets_cmd, history_cmd, saved_app, search_cmd


def _version() -> str:
    try:
        return importlib.metadata.version("vidcat")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"vidcat {_version()}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


app = typer.Typer(
    name="vidcat",
    help=(
        "vidcat: video test asset catalog.\n\n"
        "  vidcat build    Fetch the asset CSV and write the normalized catalog.\n"
        "  vidcat search   Filter by facets, free text, or advanced queries."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """vidcat: video test asset catalog."""
    _setup_logging(verbose)


app.command("init")(init_cmd)
app.command("build")(build_cmd)
app.command("search")(search_cmd)
app.command("facets")(facets_cmd)
app.command("score")(score_cmd)
app.command("export")(export_cmd)
app.command("report")(report_cmd)
app.command("history")(history_cmd)
app.add_typer(saved_app, name="saved")


@app.command("version")
def version_cmd() -> None:
    """Show the installed vidcat version."""
    typer.echo(f"vidcat {_version()}")


if __name__ == "__main__":
    app()

"""Tests for vidcat export."""

from __future__ import annotations

import csv
import io
import json
from datetime import date
from pathlib import Path

from typer.testing import CliRunner

from vidcat.cli.main import app

runner = CliRunner()


def test_export_csv_default_filename(built: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["export"])
    assert result.exit_code == 0, result.output

    target = tmp_path / f"video-assets-{date.today().isoformat()}.csv"
    rows = list(csv.reader(io.StringIO(target.read_text(encoding="utf-8"))))
    assert rows[0][0] == "ID"
    assert len(rows) == 5


def test_export_json_stdout_with_query(built: Path) -> None:
    result = runner.invoke(app, ["export", "-f", "json", "--stdout", "-q", "protocol:dash", "--scores"])
    assert result.exit_code == 0, result.output

    records = json.loads(result.output)
    assert [r["category"] for r in records] == ["Tears of Steel"]
    assert "qualityScore" in records[0]


def test_export_search_and_fields(built: Path, tmp_path: Path) -> None:
    out = tmp_path / "subset.tsv"
    result = runner.invoke(
        app, ["export", "-f", "tsv", "--search", "legacy", "--field", "url", "--field", "category", "-o", str(out)]
    )
    assert result.exit_code == 0, result.output
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines == ["Category\tURL", "Legacy\thttps://example.com/legacy.ts"]


def test_export_txt(built: Path) -> None:
    result = runner.invoke(app, ["export", "-f", "txt", "--stdout"])
    assert result.exit_code == 0, result.output
    assert result.output.count("Quality Score:") == 4


def test_export_unknown_format_exits_1(built: Path) -> None:
    result = runner.invoke(app, ["export", "-f", "pdf"])
    assert result.exit_code == 1
    assert "Export failed" in result.output


def test_export_unknown_field_exits_1(built: Path) -> None:
    result = runner.invoke(app, ["export", "--field", "bitrate", "--stdout"])
    assert result.exit_code == 1
    assert "bitrate" in result.output

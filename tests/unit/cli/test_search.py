"""Tests for vidcat search, facets, history, and saved searches."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from vidcat.cli.main import app
from vidcat.db.connection import Database
from vidcat.db.repository import Repository
from vidcat.db.schema import initialize

runner = CliRunner()


def _json_ids(output: str) -> list[str]:
    return [a["category"] for a in json.loads(output)]


def _repo(db_path: Path) -> Repository:
    conn = Database(db_path).connect()
    initialize(conn)
    return Repository(conn)


# ---------------------------------------------------------------------------
# vidcat search
# ---------------------------------------------------------------------------


def test_search_all(built: Path) -> None:
    result = runner.invoke(app, ["search", "--json"])
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)) == 4


def test_search_facets_or_within_and_across(built: Path) -> None:
    result = runner.invoke(app, ["search", "--json", "--protocol", "hls", "--protocol", "dash", "--codec", "hevc"])
    assert result.exit_code == 0, result.output
    assert _json_ids(result.output) == ["Tears of Steel"]


def test_search_free_text(built: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["search", "bunny", "--json", "--db", str(tmp_path / "s.db")])
    assert result.exit_code == 0, result.output
    assert _json_ids(result.output) == ["Big Buck Bunny"]


def test_search_advanced_query(built: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["search", "--json", "-q", "codec:hevc OR codec:av1", "--db", str(tmp_path / "s.db")]
    )
    assert result.exit_code == 0, result.output
    assert _json_ids(result.output) == ["Tears of Steel", "Uncategorized"]


def test_search_limit(built: Path) -> None:
    result = runner.invoke(app, ["search", "--json", "--limit", "2"])
    assert len(json.loads(result.output)) == 2


def test_search_table_output(built: Path) -> None:
    result = runner.invoke(app, ["search", "--hdr", "dovi"])
    assert result.exit_code == 0, result.output
    assert "1 of 4 assets" in result.output
    assert "Filters: Dolby Vision" in result.output


def test_search_no_results(built: Path) -> None:
    result = runner.invoke(app, ["search", "--container", "webm"])
    assert result.exit_code == 0
    assert "No matching assets" in result.output


def test_search_explicit_catalog_path(tmp_path: Path, built: Path) -> None:
    moved = tmp_path / "elsewhere"
    built.rename(moved)
    result = runner.invoke(app, ["search", "--json", "--catalog", str(moved / "catalog.json")])
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)) == 4


def test_search_without_catalog_exits_1() -> None:
    result = runner.invoke(app, ["search"])
    assert result.exit_code == 1
    assert "No catalog found" in result.output


def test_search_falls_back_to_store(tmp_path: Path, sample_csv_path: Path) -> None:
    db_path = tmp_path / "store.db"
    runner.invoke(app, ["build", "-s", str(sample_csv_path), "-o", "built", "--db", str(db_path)])

    result = runner.invoke(app, ["search", "--json", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)) == 4


def test_search_records_history_and_saves(built: Path, tmp_path: Path) -> None:
    db_path = tmp_path / "s.db"
    runner.invoke(app, ["search", "bunny", "--db", str(db_path)])
    result = runner.invoke(app, ["search", "-q", "protocol:hls", "--save", "HLS", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert "Saved search 'HLS'" in result.output

    repo = _repo(db_path)
    assert repo.list_history() == ["protocol:hls", "bunny"]
    assert [s.query for s in repo.list_saved_searches()] == ["protocol:hls"]


def test_search_save_without_query(built: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["search", "bunny", "--save", "x", "--db", str(tmp_path / "s.db")])
    assert result.exit_code == 0
    assert "--save needs --query" in result.output


# ---------------------------------------------------------------------------
# vidcat facets
# ---------------------------------------------------------------------------


def test_facets_single(built: Path) -> None:
    result = runner.invoke(app, ["facets", "--facet", "protocol"])
    assert result.exit_code == 0, result.output
    assert "protocol (3 values)" in result.output
    assert "codec" not in result.output


def test_facets_all(built: Path) -> None:
    result = runner.invoke(app, ["facets"])
    assert result.exit_code == 0, result.output
    for facet in ("protocol", "codec", "resolution", "hdr", "container", "host", "scheme"):
        assert f"{facet} (" in result.output


def test_facets_unknown_exits_1(built: Path) -> None:
    result = runner.invoke(app, ["facets", "--facet", "bitrate"])
    assert result.exit_code == 1
    assert "Unknown facet" in result.output


# ---------------------------------------------------------------------------
# vidcat history / saved
# ---------------------------------------------------------------------------


def test_history_empty(tmp_path: Path) -> None:
    result = runner.invoke(app, ["history", "--db", str(tmp_path / "none.db")])
    assert result.exit_code == 0
    assert "No search history" in result.output


def test_history_lists_recent_first(tmp_path: Path) -> None:
    db_path = tmp_path / "s.db"
    repo = _repo(db_path)
    repo.add_history("first")
    repo.add_history("second")
    repo._conn.close()

    result = runner.invoke(app, ["history", "--db", str(db_path)])
    assert result.exit_code == 0
    assert result.output.index("second") < result.output.index("first")


def test_history_prints_markup_like_queries_verbatim(tmp_path: Path) -> None:
    db_path = tmp_path / "s.db"
    repo = _repo(db_path)
    repo.add_history("category:[/x] [bold]")
    repo._conn.close()

    result = runner.invoke(app, ["history", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert "category:[/x] [bold]" in result.output


def test_saved_run_list_delete(built: Path, tmp_path: Path) -> None:
    db_path = tmp_path / "s.db"
    repo = _repo(db_path)
    saved = repo.save_search("no hevc", "NOT codec:hevc")
    repo._conn.close()

    listed = runner.invoke(app, ["saved", "list", "--db", str(db_path)])
    assert listed.exit_code == 0
    assert "no hevc" in listed.output

    ran = runner.invoke(app, ["saved", "run", "no hevc", "--json", "--db", str(db_path)])
    assert ran.exit_code == 0, ran.output
    assert _json_ids(ran.output) == ["Big Buck Bunny", "Uncategorized", "Legacy"]

    deleted = runner.invoke(app, ["saved", "delete", saved.id, "--db", str(db_path)])
    assert deleted.exit_code == 0
    assert _repo(db_path).list_saved_searches() == []


def test_saved_run_unknown_exits_1(built: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["saved", "run", "ghost", "--db", str(tmp_path / "s.db")])
    assert result.exit_code == 1
    assert "No saved search" in result.output


def test_saved_delete_unknown_exits_1(tmp_path: Path) -> None:
    result = runner.invoke(app, ["saved", "delete", "ghost", "--db", str(tmp_path / "s.db")])
    assert result.exit_code == 1

"""Fixtures for CLI tests: an isolated working directory and a built catalog."""

from __future__ import annotations

from pathlib import Path

import pytest

from vidcat.catalog.builder import build_catalog
from vidcat.catalog.io import write_catalog


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("vidcat.config._GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    for var in ("VIDCAT_SOURCE_URL", "VIDCAT_DB", "VIDCAT_OUTPUT_DIR"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def built(tmp_path: Path, sample_csv: str) -> Path:
    """Sample catalog written to ./public (the default output dir)."""
    out = tmp_path / "public"
    write_catalog(build_catalog(sample_csv, source_url="assets.csv"), out)
    return out

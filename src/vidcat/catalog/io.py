"""Catalog JSON output and reload.

Output directory layout:
  catalog.json    {"assets": [...], "facetCounts": {...}, "metadata": {...}}
  assets.json     assets only            (split_files=True)
  facets.json     facet counts only      (split_files=True)
  metadata.json   build metadata only    (split_files=True)
"""

from __future__ import annotations

import json
from pathlib import Path

from vidcat.catalog.models import Catalog

CATALOG_FILE = "catalog.json"
_SPLIT_FILES = ("assets.json", "facets.json", "metadata.json")


def write_catalog(catalog: Catalog, out_dir: Path, *, split_files: bool = True) -> list[Path]:
    """Write *catalog* into *out_dir* (created if missing).

    Returns:
        Paths of the files written.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    data = catalog.to_dict()

    written = [out_dir / CATALOG_FILE]
    _dump(data, written[0])

    if split_files:
        for name, key in zip(_SPLIT_FILES, ("assets", "facetCounts", "metadata")):
            path = out_dir / name
            _dump(data[key], path)
            written.append(path)
    return written


def read_catalog(path: Path) -> Catalog:
    """Load a catalog from a ``catalog.json`` file or an output directory.

    A directory without ``catalog.json`` is read from the split files.

    Raises:
        FileNotFoundError: If no catalog files exist at *path*.
        ValueError: If the JSON is malformed.
    """
    if path.is_dir():
        combined = path / CATALOG_FILE
        if combined.exists():
            return Catalog.from_dict(_load(combined))
        assets_path, facets_path, meta_path = (path / n for n in _SPLIT_FILES)
        if not assets_path.exists():
            raise FileNotFoundError(f"No catalog found in '{path}'")
        return Catalog.from_dict(
            {
                "assets": _load(assets_path),
                "facetCounts": _load(facets_path) if facets_path.exists() else {},
                "metadata": _load(meta_path) if meta_path.exists() else {},
            }
        )
    if not path.exists():
        raise FileNotFoundError(f"No catalog found at '{path}'")
    return Catalog.from_dict(_load(path))


def _dump(data: object, path: Path) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _load(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed catalog JSON in '{path}': {exc}") from exc

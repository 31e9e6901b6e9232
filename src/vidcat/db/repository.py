"""Repository for the local catalog store.

Single interface for: assets (keyed by asset id), facet counts, catalog
metadata, saved searches, and search history. A fresh import replaces the
whole catalog in one transaction.
"""

from __future__ import annotations

import json
import sqlite3
import uuid

from vidcat.catalog.builder import count_facets
from vidcat.catalog.models import FACETS, Asset, Catalog, CatalogMetadata, FacetCounts, Resolution
from vidcat.db.models import SavedSearch

_ASSET_COLUMNS = (
    "id, url, host, scheme, category, protocol, codec, res_width, res_height, "
    "res_label, hdr, container, features, notes"
)

DEFAULT_HISTORY_LIMIT = 10


class Repository:
    """Data access layer for the catalog store.

    Wraps an open sqlite3.Connection; the connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see vidcat.db.schema.initialize).
        """
        self._conn = conn

    # ------------------------------------------------------------------
    # Catalog import
    # ------------------------------------------------------------------

    def replace_catalog(self, catalog: Catalog) -> int:
        """Replace the stored catalog with *catalog*.

        Rows sharing an asset ID collapse into one stored asset (last row
        wins, first position kept). Facet counts and the metadata total are
        recounted over the distinct assets so they always agree with
        list_assets().

        Returns:
            Number of distinct assets stored.
        """
        distinct: dict[str, Asset] = {}
        for asset in catalog.assets:
            distinct[asset.id] = asset
        assets = list(distinct.values())
        facet_counts = count_facets(assets)

        with self._conn:
            self._conn.execute("DELETE FROM assets")
            self._conn.execute("DELETE FROM facet_counts")
            self._conn.execute("DELETE FROM catalog_metadata")

            self._conn.executemany(
                f"""
                INSERT INTO assets ({_ASSET_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [_asset_to_row(a) for a in assets],
            )

            self._conn.executemany(
                "INSERT INTO facet_counts (facet_type, facet_value, count) VALUES (?, ?, ?)",
                [
                    (facet, value, count)
                    for facet, values in facet_counts.items()
                    for value, count in values.items()
                ],
            )

            meta = catalog.metadata
            self._conn.execute(
                """
                INSERT INTO catalog_metadata (id, total_assets, build_timestamp, source_url, version)
                VALUES (1, ?, ?, ?, ?)
                """,
                (len(assets), meta.build_timestamp, meta.source_url, meta.version),
            )
        return self.count_assets()

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def get_asset(self, asset_id: str) -> Asset | None:
        """Return an asset by ID, or None if not found."""
        row = self._conn.execute(
            f"SELECT {_ASSET_COLUMNS} FROM assets WHERE id = ?", (asset_id,)
        ).fetchone()
        return _row_to_asset(row) if row else None

    def list_assets(self) -> list[Asset]:
        """Return all stored assets in import order."""
        rows = self._conn.execute(
            f"SELECT {_ASSET_COLUMNS} FROM assets ORDER BY rowid"
        ).fetchall()
        return [_row_to_asset(r) for r in rows]

    def count_assets(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM assets").fetchone()[0]

    # ------------------------------------------------------------------
    # Facets + metadata
    # ------------------------------------------------------------------

    def get_facet_counts(self) -> FacetCounts:
        """Stored facet counts, each facet ordered by descending count."""
        counts: FacetCounts = {facet: {} for facet in FACETS}
        rows = self._conn.execute(
            "SELECT facet_type, facet_value, count FROM facet_counts ORDER BY count DESC, rowid"
        ).fetchall()
        for row in rows:
            counts.setdefault(row["facet_type"], {})[row["facet_value"]] = row["count"]
        return counts

    def get_metadata(self) -> CatalogMetadata | None:
        row = self._conn.execute(
            "SELECT total_assets, build_timestamp, source_url, version FROM catalog_metadata WHERE id = 1"
        ).fetchone()
        if row is None:
            return None
        return CatalogMetadata(
            total_assets=row["total_assets"],
            build_timestamp=row["build_timestamp"],
            source_url=row["source_url"],
            version=row["version"],
        )

    def load_catalog(self) -> Catalog | None:
        """Reassemble the stored catalog, or None if nothing was imported."""
        meta = self.get_metadata()
        if meta is None:
            return None
        return Catalog(
            assets=self.list_assets(),
            facet_counts=self.get_facet_counts(),
            metadata=meta,
        )

    # ------------------------------------------------------------------
    # Saved searches
    # ------------------------------------------------------------------

    def save_search(self, name: str, query: str) -> SavedSearch:
        """Store a named advanced query and return it."""
        search_id = uuid.uuid4().hex[:12]
        self._conn.execute(
            "INSERT INTO saved_searches (id, name, query) VALUES (?, ?, ?)",
            (search_id, name, query),
        )
        self._conn.commit()
        saved = self.get_saved_search(search_id)
        assert saved is not None
        return saved

    def get_saved_search(self, search_id: str) -> SavedSearch | None:
        row = self._conn.execute(
            "SELECT id, name, query, created_at, last_used FROM saved_searches WHERE id = ?",
            (search_id,),
        ).fetchone()
        return _row_to_saved(row) if row else None

    def find_saved_search(self, id_or_name: str) -> SavedSearch | None:
        """Look up a saved search by ID, falling back to its name."""
        found = self.get_saved_search(id_or_name)
        if found is not None:
            return found
        row = self._conn.execute(
            "SELECT id, name, query, created_at, last_used FROM saved_searches "
            "WHERE name = ? ORDER BY rowid DESC LIMIT 1",
            (id_or_name,),
        ).fetchone()
        return _row_to_saved(row) if row else None

    def list_saved_searches(self) -> list[SavedSearch]:
        rows = self._conn.execute(
            "SELECT id, name, query, created_at, last_used FROM saved_searches ORDER BY rowid"
        ).fetchall()
        return [_row_to_saved(r) for r in rows]

    def touch_saved_search(self, search_id: str) -> None:
        """Reset last_used for *search_id* to now."""
        self._conn.execute(
            "UPDATE saved_searches SET last_used = datetime('now') WHERE id = ?", (search_id,)
        )
        self._conn.commit()

    def delete_saved_search(self, search_id: str) -> bool:
        """Delete a saved search. Returns False if it did not exist."""
        cur = self._conn.execute("DELETE FROM saved_searches WHERE id = ?", (search_id,))
        self._conn.commit()
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Search history
    # ------------------------------------------------------------------

    def add_history(self, query: str, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        """Record *query* as most recent, dropping duplicates and old entries."""
        query = query.strip()
        if not query:
            return
        with self._conn:
            self._conn.execute("DELETE FROM search_history WHERE query = ?", (query,))
            self._conn.execute("INSERT INTO search_history (query) VALUES (?)", (query,))
            self._conn.execute(
                """
                DELETE FROM search_history WHERE seq NOT IN (
                    SELECT seq FROM search_history ORDER BY seq DESC LIMIT ?
                )
                """,
                (limit,),
            )

    def list_history(self) -> list[str]:
        """Recent queries, most recent first."""
        rows = self._conn.execute(
            "SELECT query FROM search_history ORDER BY seq DESC"
        ).fetchall()
        return [r["query"] for r in rows]


# ------------------------------------------------------------------
# Row ↔ model helpers
# ------------------------------------------------------------------


def _asset_to_row(asset: Asset) -> tuple:
    res = asset.resolution
    return (
        asset.id,
        asset.url,
        asset.host,
        asset.scheme,
        asset.category,
        json.dumps(asset.protocol),
        json.dumps(asset.codec),
        res.width if res else None,
        res.height if res else None,
        res.label if res else None,
        asset.hdr,
        asset.container,
        json.dumps(asset.features),
        asset.notes,
    )


def _row_to_asset(row: sqlite3.Row) -> Asset:
    resolution = None
    if row["res_width"] is not None and row["res_height"] is not None:
        resolution = Resolution(
            width=row["res_width"], height=row["res_height"], label=row["res_label"] or ""
        )
    return Asset(
        id=row["id"],
        url=row["url"],
        host=row["host"],
        scheme=row["scheme"],
        category=row["category"],
        protocol=json.loads(row["protocol"]),
        codec=json.loads(row["codec"]),
        resolution=resolution,
        hdr=row["hdr"],
        container=row["container"],
        features=json.loads(row["features"]),
        notes=row["notes"],
    )


def _row_to_saved(row: sqlite3.Row) -> SavedSearch:
    return SavedSearch(
        id=row["id"],
        name=row["name"],
        query=row["query"],
        created_at=row["created_at"],
        last_used=row["last_used"],
    )

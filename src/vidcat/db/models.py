"""Row models for the catalog store that are not catalog entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SavedSearch:
    id: str
    name: str
    query: str
    created_at: str | None = None
    last_used: str | None = None

"""vidcat local catalog store."""

from vidcat.db.connection import Database
from vidcat.db.migrations import MIGRATIONS, run_migrations
from vidcat.db.models import SavedSearch
from vidcat.db.repository import Repository
from vidcat.db.schema import initialize

__all__ = [
    "Database",
    "MIGRATIONS",
    "Repository",
    "SavedSearch",
    "initialize",
    "run_migrations",
]

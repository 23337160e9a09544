"""
Persistance SQLite via SQLModel.

- database : engine, sessions, creation des tables
- models : tables (cache_entries, library_entries, recycle_records, ...)
- repositories : conversion modeles <-> entites du domaine
- hash_service : cle XXH3 du cache des sondes video
"""

from mediavault.infrastructure.persistence.database import (
    create_sqlite_engine,
    get_engine,
    get_session,
    init_db,
)
from mediavault.infrastructure.persistence.hash_service import probe_cache_key

__all__ = [
    "create_sqlite_engine",
    "get_engine",
    "get_session",
    "init_db",
    "probe_cache_key",
]

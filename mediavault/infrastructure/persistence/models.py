"""
Modeles SQLModel pour la base de donnees MediaVault.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- cache_entries: Index du cache adressable par contenu
- library_entries: Fichiers publies dans la bibliotheque
- recycle_records: Corbeille (elements deplaces, restaurables jusqu'a purge)
- classification_failures: Repertoires laisses en traitement manuel
- probe_cache: Resultats des sondes video par hash rapide

Les champs *_json stockent des structures serialisees en JSON.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


class UTCDateTime(TypeDecorator):
    """
    Datetime UTC avec fuseau.

    SQLite ne conserve pas le fuseau : la valeur est stockee en UTC sans
    fuseau et relue avec tzinfo=UTC. Une valeur naive est refusee.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("Datetime values must have timezone information")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class CacheEntryModel(SQLModel, table=True):
    """
    Modele representant une entree du cache.

    content_hash est unique : deux contenus identiques partagent une entree.
    L'id (uuid4 hex) nomme l'artefact sur disque.
    """

    __tablename__ = "cache_entries"

    id: str = Field(primary_key=True, max_length=32)
    content_hash: str = Field(unique=True, index=True)
    perceptual_hash: Optional[str] = Field(default=None, index=True)
    storage_path: str
    size_bytes: int
    asset_kind: str = Field(index=True)
    entity_key: Optional[str] = Field(default=None, index=True)
    reference_count: int = Field(default=1)
    created_at: datetime = Field(sa_type=UTCDateTime)
    last_used_at: datetime = Field(sa_type=UTCDateTime)
    deleted_at: Optional[datetime] = Field(default=None, index=True, sa_type=UTCDateTime)


class LibraryEntryModel(SQLModel, table=True):
    """Modele representant un fichier publie dans la bibliotheque."""

    __tablename__ = "library_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    cache_entry_id: str = Field(index=True)
    library_path: str = Field(unique=True, index=True)
    directory: str = Field(index=True)
    asset_kind: str
    content_hash: str
    published_at: datetime = Field(sa_type=UTCDateTime)


class RecycleRecordModel(SQLModel, table=True):
    """Modele representant un element de la corbeille."""

    __tablename__ = "recycle_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    original_path: str = Field(index=True)
    recycle_path: str
    is_directory: bool = False
    reason: Optional[str] = None
    recycled_at: datetime = Field(sa_type=UTCDateTime)
    restorable: bool = Field(default=True, index=True)
    restored_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    purged_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)


class ClassificationFailureModel(SQLModel, table=True):
    """
    Modele representant un repertoire en traitement manuel.

    evidence_json conserve les candidats examines (chemins, durees, confiances).
    """

    __tablename__ = "classification_failures"

    id: Optional[int] = Field(default=None, primary_key=True)
    directory: str = Field(unique=True, index=True)
    reason: str
    missing_json: Optional[str] = None
    evidence_json: Optional[str] = None
    recorded_at: datetime = Field(sa_type=UTCDateTime)

    @property
    def evidence(self) -> list[dict[str, Any]]:
        """Retourne les preuves deserialisees."""
        if self.evidence_json:
            return json.loads(self.evidence_json)
        return []

    @evidence.setter
    def evidence(self, value: list[dict[str, Any]]) -> None:
        """Serialise les preuves en JSON."""
        self.evidence_json = json.dumps(value)

    @property
    def missing(self) -> list[str]:
        if self.missing_json:
            return json.loads(self.missing_json)
        return []

    @missing.setter
    def missing(self, value: list[str]) -> None:
        self.missing_json = json.dumps(value)


class ProbeCacheModel(SQLModel, table=True):
    """Resultat memorise d'une sonde video, indexe par hash XXH3 echantillonne."""

    __tablename__ = "probe_cache"

    quick_hash: str = Field(primary_key=True)
    facts_json: str
    probed_at: datetime = Field(sa_type=UTCDateTime)

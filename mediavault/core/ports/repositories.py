"""
Interfaces ports pour les repositories.

Le cache exige de son index : insertion atomique, recherche par id,
recherche par hash fort et recherche par portee (entite, type d'asset)
pour les quasi-doublons perceptuels. Les compteurs de references sont
modifies par des mises a jour conditionnelles, jamais par lecture puis ecriture.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from mediavault.core.entities import (
    CacheEntry,
    ClassificationFailure,
    LibraryEntry,
    RecycleRecord,
)
from mediavault.core.value_objects import VideoStreamFacts


class ICacheEntryRepository(ABC):
    """Index du cache adressable par contenu."""

    @abstractmethod
    def get_by_id(self, entry_id: str) -> Optional[CacheEntry]:
        ...

    @abstractmethod
    def get_by_hash(self, content_hash: str) -> Optional[CacheEntry]:
        ...

    @abstractmethod
    def find_in_scope(self, entity_key: str, asset_kind: str) -> list[CacheEntry]:
        """Entrees d'une meme portee ayant un hash perceptuel."""
        ...

    @abstractmethod
    def insert(self, entry: CacheEntry) -> bool:
        """
        Insere une nouvelle entree.

        Retourne :
            False si l'id ou le hash fort existe deja (conflit d'unicite)
        """
        ...

    @abstractmethod
    def acquire(self, entry_id: str, now: datetime) -> bool:
        """Incremente le compteur de references et annule la suppression logique."""
        ...

    @abstractmethod
    def release(self, entry_id: str, now: datetime) -> Optional[int]:
        """
        Decremente le compteur de references (jamais sous 0).

        Retourne :
            Le nouveau compteur, ou None si l'entree n'existe pas
        """
        ...

    @abstractmethod
    def touch(self, entry_id: str, now: datetime) -> None:
        """Met a jour la date de dernier acces."""
        ...

    @abstractmethod
    def list_gc_candidates(self, cutoff: datetime) -> list[CacheEntry]:
        """Entrees sans reference supprimees logiquement avant cutoff."""
        ...

    @abstractmethod
    def delete_if_unchanged(self, entry_id: str, observed_deleted_at: datetime) -> bool:
        """
        Supprime une entree si elle est toujours non referencee et que sa date
        de suppression logique n'a pas change depuis l'observation.
        """
        ...

    @abstractmethod
    def list_all(self) -> list[CacheEntry]:
        ...


class ILibraryEntryRepository(ABC):
    """Publications dans la bibliotheque."""

    @abstractmethod
    def save(self, entry: LibraryEntry) -> LibraryEntry:
        """Sauvegarde une publication (remplace celle du meme chemin)."""
        ...

    @abstractmethod
    def get_by_path(self, library_path: Path) -> Optional[LibraryEntry]:
        ...

    @abstractmethod
    def list_by_directory(self, directory: Path) -> list[LibraryEntry]:
        ...


class IRecycleRecordRepository(ABC):
    """Elements de la corbeille."""

    @abstractmethod
    def save(self, record: RecycleRecord) -> RecycleRecord:
        ...

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[RecycleRecord]:
        ...

    @abstractmethod
    def list_all(self, include_inactive: bool = False) -> list[RecycleRecord]:
        ...


class IClassificationFailureRepository(ABC):
    """Traces des repertoires en traitement manuel."""

    @abstractmethod
    def save(self, failure: ClassificationFailure) -> ClassificationFailure:
        """Enregistre l'echec (remplace le precedent pour le meme repertoire)."""
        ...

    @abstractmethod
    def get_by_directory(self, directory: Path) -> Optional[ClassificationFailure]:
        ...

    @abstractmethod
    def delete_by_directory(self, directory: Path) -> bool:
        ...

    @abstractmethod
    def list_all(self) -> list[ClassificationFailure]:
        ...


class IProbeCacheRepository(ABC):
    """Memoisation des sondes video par hash rapide."""

    @abstractmethod
    def get(self, quick_hash: str) -> Optional[VideoStreamFacts]:
        ...

    @abstractmethod
    def save(self, quick_hash: str, facts: VideoStreamFacts) -> None:
        ...

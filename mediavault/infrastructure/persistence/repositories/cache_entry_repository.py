"""
Implementation SQLModel du repository CacheEntry.

Les compteurs de references et la suppression physique passent par des
UPDATE / DELETE conditionnels executes par SQLite : deux appelants concurrents
ne peuvent jamais lire puis ecrire une valeur perimee.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from mediavault.core.entities import CacheEntry
from mediavault.core.ports.repositories import ICacheEntryRepository
from mediavault.infrastructure.persistence.models import CacheEntryModel


class SQLModelCacheEntryRepository(ICacheEntryRepository):
    """
    Repository SQLModel pour l'index du cache.

    Conversion bidirectionnelle entre CacheEntry (domaine) et
    CacheEntryModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: CacheEntryModel) -> CacheEntry:
        return CacheEntry(
            id=model.id,
            content_hash=model.content_hash,
            storage_path=Path(model.storage_path),
            size_bytes=model.size_bytes,
            asset_kind=model.asset_kind,
            perceptual_hash=model.perceptual_hash,
            entity_key=model.entity_key,
            reference_count=model.reference_count,
            created_at=model.created_at,
            last_used_at=model.last_used_at,
            deleted_at=model.deleted_at,
        )

    def _to_model(self, entity: CacheEntry) -> CacheEntryModel:
        return CacheEntryModel(
            id=entity.id,
            content_hash=entity.content_hash,
            perceptual_hash=entity.perceptual_hash,
            storage_path=str(entity.storage_path),
            size_bytes=entity.size_bytes,
            asset_kind=entity.asset_kind,
            entity_key=entity.entity_key,
            reference_count=entity.reference_count,
            created_at=entity.created_at,
            last_used_at=entity.last_used_at or entity.created_at,
            deleted_at=entity.deleted_at,
        )

    def get_by_id(self, entry_id: str) -> Optional[CacheEntry]:
        """Recupere une entree par son identifiant."""
        model = self._session.get(CacheEntryModel, entry_id)
        if model:
            return self._to_entity(model)
        return None

    def get_by_hash(self, content_hash: str) -> Optional[CacheEntry]:
        """Recupere une entree par son hash fort."""
        statement = select(CacheEntryModel).where(
            CacheEntryModel.content_hash == content_hash
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def find_in_scope(self, entity_key: str, asset_kind: str) -> list[CacheEntry]:
        """Entrees d'une meme portee (entite, type) ayant un hash perceptuel."""
        statement = (
            select(CacheEntryModel)
            .where(CacheEntryModel.entity_key == entity_key)
            .where(CacheEntryModel.asset_kind == asset_kind)
            .where(CacheEntryModel.perceptual_hash.is_not(None))
            .order_by(CacheEntryModel.created_at)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def insert(self, entry: CacheEntry) -> bool:
        """Insere une entree ; False en cas de conflit sur l'id ou le hash fort."""
        self._session.add(self._to_model(entry))
        try:
            self._session.commit()
        except IntegrityError:
            self._session.rollback()
            return False
        return True

    def acquire(self, entry_id: str, now: datetime) -> bool:
        """Incremente le compteur et annule une eventuelle suppression logique."""
        statement = (
            update(CacheEntryModel)
            .where(CacheEntryModel.id == entry_id)
            .values(
                reference_count=CacheEntryModel.reference_count + 1,
                deleted_at=None,
                last_used_at=now,
            )
        )
        result = self._session.exec(statement)
        self._session.commit()
        return result.rowcount == 1

    def release(self, entry_id: str, now: datetime) -> Optional[int]:
        """
        Decremente le compteur, puis marque l'entree supprimee s'il atteint 0.

        Les deux mises a jour sont conditionnelles et commitees ensemble.
        """
        self._session.exec(
            update(CacheEntryModel)
            .where(CacheEntryModel.id == entry_id)
            .where(CacheEntryModel.reference_count > 0)
            .values(reference_count=CacheEntryModel.reference_count - 1)
        )
        self._session.exec(
            update(CacheEntryModel)
            .where(CacheEntryModel.id == entry_id)
            .where(CacheEntryModel.reference_count == 0)
            .where(CacheEntryModel.deleted_at.is_(None))
            .values(deleted_at=now)
        )
        self._session.commit()

        model = self._session.get(CacheEntryModel, entry_id)
        return model.reference_count if model else None

    def touch(self, entry_id: str, now: datetime) -> None:
        """Met a jour la date de dernier acces."""
        self._session.exec(
            update(CacheEntryModel)
            .where(CacheEntryModel.id == entry_id)
            .values(last_used_at=now)
        )
        self._session.commit()

    def list_gc_candidates(self, cutoff: datetime) -> list[CacheEntry]:
        """Entrees sans reference supprimees logiquement avant cutoff."""
        statement = (
            select(CacheEntryModel)
            .where(CacheEntryModel.reference_count == 0)
            .where(CacheEntryModel.deleted_at.is_not(None))
            .where(CacheEntryModel.deleted_at <= cutoff)
            .order_by(CacheEntryModel.deleted_at)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def delete_if_unchanged(self, entry_id: str, observed_deleted_at: datetime) -> bool:
        """
        Compare-and-delete : supprime la ligne seulement si elle n'a pas ete
        re-referencee (ou re-supprimee) depuis l'observation.
        """
        statement = (
            delete(CacheEntryModel)
            .where(CacheEntryModel.id == entry_id)
            .where(CacheEntryModel.reference_count == 0)
            .where(CacheEntryModel.deleted_at == observed_deleted_at)
        )
        result = self._session.exec(statement)
        self._session.commit()
        return result.rowcount == 1

    def list_all(self) -> list[CacheEntry]:
        """Liste toutes les entrees, des plus anciennes aux plus recentes."""
        statement = select(CacheEntryModel).order_by(CacheEntryModel.created_at)
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

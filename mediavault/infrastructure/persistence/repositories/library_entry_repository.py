"""Implementation SQLModel du repository LibraryEntry."""

from pathlib import Path
from typing import Optional

from sqlmodel import Session, select

from mediavault.core.entities import LibraryEntry
from mediavault.core.ports.repositories import ILibraryEntryRepository
from mediavault.infrastructure.persistence.models import LibraryEntryModel


class SQLModelLibraryEntryRepository(ILibraryEntryRepository):
    """Repository SQLModel pour les publications de la bibliotheque."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: LibraryEntryModel) -> LibraryEntry:
        return LibraryEntry(
            id=model.id,
            cache_entry_id=model.cache_entry_id,
            library_path=Path(model.library_path),
            directory=Path(model.directory),
            asset_kind=model.asset_kind,
            content_hash=model.content_hash,
            published_at=model.published_at,
        )

    def save(self, entry: LibraryEntry) -> LibraryEntry:
        """
        Sauvegarde une publication.

        Une publication existante pour le meme chemin est remplacee :
        la derniere publication reussie fait foi pour la restauration.
        """
        statement = select(LibraryEntryModel).where(
            LibraryEntryModel.library_path == str(entry.library_path)
        )
        model = self._session.exec(statement).first()

        if model:
            model.cache_entry_id = entry.cache_entry_id
            model.directory = str(entry.directory)
            model.asset_kind = entry.asset_kind
            model.content_hash = entry.content_hash
            model.published_at = entry.published_at
        else:
            model = LibraryEntryModel(
                cache_entry_id=entry.cache_entry_id,
                library_path=str(entry.library_path),
                directory=str(entry.directory),
                asset_kind=entry.asset_kind,
                content_hash=entry.content_hash,
                published_at=entry.published_at,
            )

        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def get_by_path(self, library_path: Path) -> Optional[LibraryEntry]:
        statement = select(LibraryEntryModel).where(
            LibraryEntryModel.library_path == str(library_path)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def list_by_directory(self, directory: Path) -> list[LibraryEntry]:
        """Publications d'un repertoire de bibliotheque, triees par chemin."""
        statement = (
            select(LibraryEntryModel)
            .where(LibraryEntryModel.directory == str(directory))
            .order_by(LibraryEntryModel.library_path)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

"""
Publication des artefacts du cache dans la bibliotheque, et restauration.

La publication copie chaque element vers son nom deterministe et enregistre
une LibraryEntry avec le hash fort courant de l'entree (une nouvelle
publication au meme chemin remplace l'enregistrement precedent).
La restauration recopie les fichiers absents ou modifies et ignore les autres.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from mediavault.core.clock import Clock, utc_now
from mediavault.core.entities import LibraryEntry
from mediavault.core.exceptions import (
    CacheEntryNotFound,
    CorruptionNotFound,
    IntegrityViolation,
)
from mediavault.core.ports.file_system import IFileSystem
from mediavault.core.ports.repositories import ILibraryEntryRepository
from mediavault.services.cache_store import CacheStore
from mediavault.services.library_naming import PublishItem, library_filename


@dataclass
class PublishResult:
    """
    Bilan d'une publication.

    Attributs :
        published : Chemins copies depuis le cache
        unchanged : Chemins deja identiques (copie evitee)
        errors : Messages d'erreur par element
    """

    published: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def paths(self) -> list[Path]:
        return self.published + self.unchanged


@dataclass
class RestoreResult:
    """Bilan d'une restauration de repertoire."""

    restored: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class PublisherService:
    """
    Publie et restaure les fichiers d'un repertoire de bibliotheque.

    Utilisation :
        publisher = PublisherService(cache_store, file_system, library_repository)
        publisher.publish(Path("/films/Matrix (1999)"), items, base="Matrix (1999)")
        publisher.restore(Path("/films/Matrix (1999)"))
    """

    def __init__(
        self,
        cache_store: CacheStore,
        file_system: IFileSystem,
        repository: ILibraryEntryRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._cache_store = cache_store
        self._file_system = file_system
        self._repository = repository
        self._clock = clock

    def publish(
        self,
        directory: Path,
        items: Sequence[PublishItem],
        base: Optional[str],
        short_names: bool = False,
    ) -> PublishResult:
        """
        Publie des elements du cache dans un repertoire.

        Args :
            directory : Repertoire de bibliotheque
            items : Elements a publier
            base : Nom de la video principale sans extension
            short_names : Mode noms courts (structure de disque)

        Retourne :
            PublishResult ; un element en echec n'interrompt pas les autres
        """
        result = PublishResult()

        for item in items:
            destination = directory / library_filename(item, base, short_names)
            try:
                entry = self._cache_store.get_entry(item.cache_entry_id)
            except CacheEntryNotFound as e:
                result.errors.append(str(e))
                logger.error(f"Publication impossible de {destination.name}: {e}")
                continue

            if self._file_system.calculate_hash(destination) == entry.content_hash:
                result.unchanged.append(destination)
            elif not self._file_system.exists(entry.storage_path):
                error = CorruptionNotFound(entry.id, entry.storage_path)
                result.errors.append(str(error))
                logger.error(str(error))
                continue
            elif self._file_system.copy(entry.storage_path, destination):
                result.published.append(destination)
            else:
                result.errors.append(f"copy failed: {destination}")
                logger.error(f"Copie echouee vers {destination}")
                continue

            self._repository.save(
                LibraryEntry(
                    cache_entry_id=entry.id,
                    library_path=destination,
                    directory=directory,
                    asset_kind=entry.asset_kind,
                    content_hash=entry.content_hash,
                    published_at=self._clock(),
                )
            )

        logger.info(
            f"Publication dans {directory.name}: {len(result.published)} copie(s), "
            f"{len(result.unchanged)} inchange(s), {len(result.errors)} erreur(s)"
        )
        return result

    def restore(self, directory: Path) -> RestoreResult:
        """
        Restaure les fichiers publies d'un repertoire depuis le cache.

        Les fichiers dont le hash correspond a la publication sont ignores ;
        les fichiers absents ou modifies sont recopies.
        """
        result = RestoreResult()

        for published in self._repository.list_by_directory(directory):
            if self._file_system.calculate_hash(published.library_path) == published.content_hash:
                result.skipped.append(published.library_path)
                continue

            try:
                entry = self._cache_store.get_entry(published.cache_entry_id)
                verification = self._cache_store.verify(published.library_path, entry)
            except (CacheEntryNotFound, IntegrityViolation) as e:
                result.errors.append(str(e))
                logger.error(f"Restauration impossible de {published.library_path.name}: {e}")
                continue

            if verification.healed:
                result.restored.append(published.library_path)
            else:
                result.skipped.append(published.library_path)

        logger.info(
            f"Restauration de {directory.name}: {len(result.restored)} restaure(s), "
            f"{len(result.skipped)} ignore(s), {len(result.errors)} erreur(s)"
        )
        return result

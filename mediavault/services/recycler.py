"""
Corbeille : deplacement reversible des fichiers et repertoires.

Chaque appel verifie que la cible n'est pas la video principale, ne la
contient pas et n'en fait pas partie. Cette verification est faite a
chaque appel, independamment de toute validation anterieure.
"""

import uuid
from datetime import timedelta
from pathlib import Path
from typing import Optional

from loguru import logger

from mediavault.core.clock import Clock, utc_now
from mediavault.core.entities import RecycleRecord
from mediavault.core.exceptions import (
    FileOperationError,
    RecycleRecordNotFound,
    RestoreConflict,
    UnsafeRecycleAttempt,
)
from mediavault.core.ports.file_system import IFileSystem
from mediavault.core.ports.repositories import IRecycleRecordRepository


def ensure_recyclable(target: Path, main_video: Path) -> None:
    """
    Refuse de recycler la video principale.

    Raises :
        UnsafeRecycleAttempt : cible egale a la video principale, repertoire
            la contenant, ou element d'une structure de disque principale
    """
    resolved_target = target.resolve()
    resolved_main = main_video.resolve()
    if (
        resolved_target == resolved_main
        or resolved_main.is_relative_to(resolved_target)
        or resolved_target.is_relative_to(resolved_main)
    ):
        error = UnsafeRecycleAttempt(target, main_video)
        logger.critical(str(error))
        raise error


class RecyclerService:
    """
    Gere la zone de recyclage.

    Utilisation :
        recycler = RecyclerService(Path("~/.mediavault/recycle"), file_system, repository)
        record = recycler.recycle(unknown_file, main_video, reason="unknown")
        recycler.restore(record.id)
    """

    def __init__(
        self,
        recycle_dir: Path,
        file_system: IFileSystem,
        repository: IRecycleRecordRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._recycle_dir = recycle_dir
        self._file_system = file_system
        self._repository = repository
        self._clock = clock

    def recycle(
        self, target: Path, main_video: Path, reason: Optional[str] = None
    ) -> RecycleRecord:
        """
        Deplace un fichier ou un repertoire dans la corbeille.

        Args :
            target : Element a recycler
            main_video : Video principale (ou racine de disque) a proteger
            reason : Motif enregistre

        Retourne :
            L'enregistrement cree

        Raises :
            UnsafeRecycleAttempt : la cible protege la video principale
            FileOperationError : deplacement impossible
        """
        ensure_recyclable(target, main_video)

        now = self._clock()
        batch = f"{now.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
        destination = self._recycle_dir / batch / target.name
        is_directory = target.is_dir()

        if not self._file_system.atomic_move(target, destination):
            raise FileOperationError("recycle", target)

        record = self._repository.save(
            RecycleRecord(
                original_path=target,
                recycle_path=destination,
                is_directory=is_directory,
                reason=reason,
                recycled_at=now,
            )
        )
        logger.info(f"Recycle: {target} -> {destination} ({reason or 'sans motif'})")
        return record

    def restore(self, record_id: int) -> RecycleRecord:
        """
        Replace un element recycle a son emplacement d'origine.

        Raises :
            RecycleRecordNotFound : enregistrement inconnu, purge ou deja restaure
            RestoreConflict : l'emplacement d'origine est occupe
        """
        record = self._get_restorable(record_id)
        if self._file_system.exists(record.original_path):
            raise RestoreConflict(record.original_path)

        if not self._file_system.atomic_move(record.recycle_path, record.original_path):
            raise FileOperationError("restore", record.recycle_path)

        self._remove_empty_batch(record.recycle_path.parent)
        record.restorable = False
        record.restored_at = self._clock()
        logger.info(f"Restaure depuis la corbeille: {record.original_path}")
        return self._repository.save(record)

    def purge(self, record_id: int) -> RecycleRecord:
        """Supprime definitivement un element de la corbeille."""
        record = self._get_restorable(record_id)
        if self._file_system.exists(record.recycle_path) and not self._file_system.delete(
            record.recycle_path
        ):
            raise FileOperationError("purge", record.recycle_path)

        self._remove_empty_batch(record.recycle_path.parent)
        record.restorable = False
        record.purged_at = self._clock()
        logger.info(f"Purge definitive: {record.recycle_path}")
        return self._repository.save(record)

    def purge_older_than(self, days: int) -> int:
        """
        Purge les elements recycles depuis plus de `days` jours.

        Retourne :
            Nombre d'elements purges
        """
        cutoff = self._clock() - timedelta(days=days)
        purged = 0
        for record in self._repository.list_all():
            if record.recycled_at is not None and record.recycled_at <= cutoff:
                self.purge(record.id)
                purged += 1
        logger.info(f"{purged} element(s) purge(s) de la corbeille (> {days} jours)")
        return purged

    def list_records(self, include_inactive: bool = False) -> list[RecycleRecord]:
        return self._repository.list_all(include_inactive=include_inactive)

    def _get_restorable(self, record_id: int) -> RecycleRecord:
        record = self._repository.get_by_id(record_id)
        if record is None or not record.restorable:
            raise RecycleRecordNotFound(record_id)
        return record

    def _remove_empty_batch(self, batch_dir: Path) -> None:
        if batch_dir.parent == self._recycle_dir and not self._file_system.list_directory(batch_dir):
            self._file_system.delete(batch_dir)

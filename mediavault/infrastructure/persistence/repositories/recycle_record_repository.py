"""Implementation SQLModel du repository RecycleRecord."""

from pathlib import Path
from typing import Optional

from sqlmodel import Session, select

from mediavault.core.entities import RecycleRecord
from mediavault.core.ports.repositories import IRecycleRecordRepository
from mediavault.infrastructure.persistence.models import RecycleRecordModel


class SQLModelRecycleRecordRepository(IRecycleRecordRepository):
    """Repository SQLModel pour la corbeille."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: RecycleRecordModel) -> RecycleRecord:
        return RecycleRecord(
            id=model.id,
            original_path=Path(model.original_path),
            recycle_path=Path(model.recycle_path),
            is_directory=model.is_directory,
            reason=model.reason,
            recycled_at=model.recycled_at,
            restorable=model.restorable,
            restored_at=model.restored_at,
            purged_at=model.purged_at,
        )

    def save(self, record: RecycleRecord) -> RecycleRecord:
        """Sauvegarde un element (insertion ou mise a jour par id)."""
        model = self._session.get(RecycleRecordModel, record.id) if record.id else None

        if model:
            model.restorable = record.restorable
            model.restored_at = record.restored_at
            model.purged_at = record.purged_at
            model.recycle_path = str(record.recycle_path)
        else:
            model = RecycleRecordModel(
                original_path=str(record.original_path),
                recycle_path=str(record.recycle_path),
                is_directory=record.is_directory,
                reason=record.reason,
                recycled_at=record.recycled_at,
                restorable=record.restorable,
            )

        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def get_by_id(self, record_id: int) -> Optional[RecycleRecord]:
        model = self._session.get(RecycleRecordModel, record_id)
        if model:
            return self._to_entity(model)
        return None

    def list_all(self, include_inactive: bool = False) -> list[RecycleRecord]:
        """Elements de la corbeille, les plus anciens d'abord."""
        statement = select(RecycleRecordModel).order_by(RecycleRecordModel.recycled_at)
        if not include_inactive:
            statement = statement.where(RecycleRecordModel.restorable == True)  # noqa: E712
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

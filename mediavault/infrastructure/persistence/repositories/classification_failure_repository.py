"""Implementation SQLModel du repository ClassificationFailure."""

import json
from pathlib import Path
from typing import Optional

from sqlmodel import Session, select

from mediavault.core.entities import ClassificationFailure
from mediavault.core.ports.repositories import IClassificationFailureRepository
from mediavault.infrastructure.persistence.models import ClassificationFailureModel


class SQLModelClassificationFailureRepository(IClassificationFailureRepository):
    """Repository SQLModel pour les repertoires en traitement manuel."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: ClassificationFailureModel) -> ClassificationFailure:
        return ClassificationFailure(
            id=model.id,
            directory=Path(model.directory),
            reason=model.reason,
            evidence=model.evidence,
            missing=model.missing,
            recorded_at=model.recorded_at,
        )

    def _get_model(self, directory: Path) -> Optional[ClassificationFailureModel]:
        statement = select(ClassificationFailureModel).where(
            ClassificationFailureModel.directory == str(directory)
        )
        return self._session.exec(statement).first()

    def save(self, failure: ClassificationFailure) -> ClassificationFailure:
        """Enregistre l'echec, en remplacant le precedent du meme repertoire."""
        model = self._get_model(failure.directory)
        if model is None:
            model = ClassificationFailureModel(
                directory=str(failure.directory),
                reason=failure.reason,
                recorded_at=failure.recorded_at,
            )
        model.reason = failure.reason
        model.recorded_at = failure.recorded_at
        model.evidence_json = json.dumps(failure.evidence)
        model.missing_json = json.dumps(failure.missing)

        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def get_by_directory(self, directory: Path) -> Optional[ClassificationFailure]:
        model = self._get_model(directory)
        if model:
            return self._to_entity(model)
        return None

    def delete_by_directory(self, directory: Path) -> bool:
        """Supprime la trace d'un repertoire finalement resolu."""
        model = self._get_model(directory)
        if model is None:
            return False
        self._session.delete(model)
        self._session.commit()
        return True

    def list_all(self) -> list[ClassificationFailure]:
        statement = select(ClassificationFailureModel).order_by(
            ClassificationFailureModel.recorded_at
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

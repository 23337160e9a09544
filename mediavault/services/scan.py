"""
Pipeline de scan d'un repertoire.

faits -> contexte -> detection de disque -> classification -> decision.
Un repertoire non resolu ne produit qu'une seule ecriture : la trace de
son echec de classification, avec les candidats examines.
"""

from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from mediavault.core.clock import Clock, utc_now
from mediavault.core.entities import ClassificationFailure
from mediavault.core.ports.repositories import IClassificationFailureRepository
from mediavault.core.value_objects import (
    CandidateEvidence,
    ClassificationResult,
    Escalate,
    ScanHint,
)
from mediavault.services.classification import DirectoryClassifier
from mediavault.services.fact_gathering import FactGatheringService


def evidence_to_dict(evidence: CandidateEvidence) -> dict[str, Any]:
    """Serialise la trace d'un candidat pour stockage JSON."""
    data = asdict(evidence)
    data["path"] = str(evidence.path)
    data["exclusion_keywords"] = list(evidence.exclusion_keywords)
    return data


class ScanService:
    """
    Scanne et classe un repertoire.

    Utilisation :
        service = ScanService(fact_gathering, classifier, failure_repository)
        result = service.scan(Path("/media/Inception (2010)"), ScanHint(provider_id="27205"))
    """

    def __init__(
        self,
        fact_gathering: FactGatheringService,
        classifier: DirectoryClassifier,
        failure_repository: IClassificationFailureRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._fact_gathering = fact_gathering
        self._classifier = classifier
        self._failure_repository = failure_repository
        self._clock = clock

    def scan(self, directory: Path, hint: Optional[ScanHint] = None) -> ClassificationResult:
        """
        Scanne un repertoire et enregistre son eventuel echec de classification.

        Args :
            directory : Chemin absolu du repertoire
            hint : Indication facultative (nom de la video principale, id fournisseur)

        Retourne :
            ClassificationResult
        """
        logger.info(f"Scan de {directory}")
        facts = self._fact_gathering.gather(directory)
        result = self._classifier.classify(facts, hint)

        if isinstance(result.decision, Escalate):
            self._failure_repository.save(
                ClassificationFailure(
                    directory=directory,
                    reason=result.decision.reason,
                    evidence=[evidence_to_dict(e) for e in result.decision.evidence],
                    missing=list(result.decision.missing),
                    recorded_at=self._clock(),
                )
            )
            logger.warning(f"Traitement manuel requis pour {directory.name}: {result.decision.reason}")
        elif self._failure_repository.delete_by_directory(directory):
            logger.info(f"Repertoire desormais resolu: {directory.name}")

        return result

    def list_failures(self) -> list[ClassificationFailure]:
        return self._failure_repository.list_all()

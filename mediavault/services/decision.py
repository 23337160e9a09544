"""
Porte de decision de traitement.

Traitement automatique si et seulement si une video principale est resolue
ET un identifiant de fournisseur est connu (indication de l'appelant ou NFO
verifie). Le resultat est une union etiquetee portant son raisonnement.
"""

from typing import Optional, Sequence

from mediavault.core.value_objects import (
    Automate,
    ClassificationStatus,
    Escalate,
    ProcessingDecision,
    ScanHint,
    TextClassification,
    UnknownFile,
    VideoClassification,
)

PROVIDER_ID_MISSING_REASON = "provider id not found"


def resolve_provider_id(
    hint: Optional[ScanHint], text: TextClassification
) -> Optional[str]:
    """Identifiant de fournisseur : l'indication de l'appelant prime sur les NFO."""
    if hint is not None and hint.provider_id:
        return hint.provider_id
    return text.provider_id


def decide(
    video: VideoClassification,
    provider_id: Optional[str],
    unknown: Sequence[UnknownFile],
) -> ProcessingDecision:
    """
    Decide du traitement d'un repertoire.

    Args :
        video : Resultat de la classification video
        provider_id : Identifiant de fournisseur resolu, s'il existe
        unknown : Fichiers non classes (non bloquants)

    Retourne :
        Automate (CAN_PROCESS / CAN_PROCESS_WITH_UNKNOWNS) ou Escalate
    """
    missing: list[str] = []
    reasons: list[str] = []

    if video.main_video is None:
        missing.append("main_video")
        reasons.append(video.failure_reason or "main video not identified")
    if not provider_id:
        missing.append("provider_id")
        reasons.append(PROVIDER_ID_MISSING_REASON)

    if missing:
        return Escalate(
            reason="; ".join(reasons),
            missing=tuple(missing),
            evidence=video.candidates,
        )

    if unknown:
        return Automate(
            status=ClassificationStatus.CAN_PROCESS_WITH_UNKNOWNS,
            confidence=80,
            reason=f"Main video and provider id resolved, {len(unknown)} unknown file(s) to recycle",
            unknown_files=tuple(u.path for u in unknown),
        )

    return Automate(
        status=ClassificationStatus.CAN_PROCESS,
        confidence=100,
        reason="Main video and provider id resolved, all files classified",
    )

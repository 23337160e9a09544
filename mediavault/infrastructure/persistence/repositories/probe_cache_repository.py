"""
Implementation SQLModel du cache des sondes video.

Les VideoStreamFacts sont serialises en JSON, indexes par le hash XXH3
echantillonne du fichier.
"""

import json
from dataclasses import asdict
from typing import Any, Optional

from loguru import logger
from sqlmodel import Session

from mediavault.core.clock import utc_now
from mediavault.core.ports.repositories import IProbeCacheRepository
from mediavault.core.value_objects import (
    AudioStream,
    SubtitleStream,
    VideoStream,
    VideoStreamFacts,
)
from mediavault.infrastructure.persistence.models import ProbeCacheModel


def _facts_from_dict(data: dict[str, Any]) -> VideoStreamFacts:
    return VideoStreamFacts(
        has_video_stream=data["has_video_stream"],
        has_audio_stream=data["has_audio_stream"],
        duration_seconds=data.get("duration_seconds"),
        video_streams=tuple(VideoStream(**s) for s in data.get("video_streams", [])),
        audio_streams=tuple(AudioStream(**s) for s in data.get("audio_streams", [])),
        subtitle_streams=tuple(
            SubtitleStream(**s) for s in data.get("subtitle_streams", [])
        ),
        container=data.get("container"),
    )


class SQLModelProbeCacheRepository(IProbeCacheRepository):
    """Repository SQLModel pour les resultats de sonde video."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, quick_hash: str) -> Optional[VideoStreamFacts]:
        """Retourne les faits memorises, None si absents ou illisibles."""
        model = self._session.get(ProbeCacheModel, quick_hash)
        if model is None:
            return None
        try:
            return _facts_from_dict(json.loads(model.facts_json))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Entree de cache de sonde illisible {quick_hash}: {e}")
            return None

    def save(self, quick_hash: str, facts: VideoStreamFacts) -> None:
        """Memorise (ou remplace) les faits d'un fichier."""
        model = self._session.get(ProbeCacheModel, quick_hash)
        facts_json = json.dumps(asdict(facts))
        now = utc_now()
        if model:
            model.facts_json = facts_json
            model.probed_at = now
        else:
            model = ProbeCacheModel(quick_hash=quick_hash, facts_json=facts_json, probed_at=now)
        self._session.add(model)
        self._session.commit()

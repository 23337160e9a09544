"""
Classifieur de repertoire.

Assemble les etapes pures : faits -> classifications independantes
(video, texte, image, audio, historique) -> decision. Les regles
transverses (noms toujours rejetes, repertoires historiques) sont des
entrees explicites.
"""

import dataclasses
from typing import Optional

from loguru import logger

from mediavault.core.value_objects import (
    ClassificationResult,
    ClassificationRules,
    DirectoryScanFacts,
    FileCategory,
    ScanHint,
    UnknownFile,
)
from mediavault.services.classification.audio import classify_audio
from mediavault.services.classification.image import classify_images
from mediavault.services.classification.legacy import classify_legacy
from mediavault.services.classification.text import classify_texts
from mediavault.services.classification.video import classify_videos
from mediavault.services.decision import decide, resolve_provider_id


class DirectoryClassifier:
    """
    Classe les fichiers d'un repertoire et decide de son traitement.

    Utilisation :
        classifier = DirectoryClassifier(ClassificationRules())
        result = classifier.classify(scan_facts, ScanHint(provider_id="603"))
    """

    def __init__(self, rules: Optional[ClassificationRules] = None) -> None:
        self._rules = rules or ClassificationRules()

    @property
    def rules(self) -> ClassificationRules:
        return self._rules

    def classify(
        self, scan: DirectoryScanFacts, hint: Optional[ScanHint] = None
    ) -> ClassificationResult:
        """
        Classe un repertoire.

        Args :
            scan : Faits du repertoire
            hint : Indication facultative de l'appelant

        Retourne :
            ClassificationResult immutable (identique pour un repertoire inchange)
        """
        rejected = [
            f for f in scan.files if f.name.lower() in self._rules.known_bad_filenames
        ]
        accepted = tuple(
            f for f in scan.files if f.name.lower() not in self._rules.known_bad_filenames
        )
        scan = dataclasses.replace(scan, files=accepted)

        video = classify_videos(scan, hint)
        text = classify_texts(scan)
        images = classify_images(scan, video.main_video)
        audio = classify_audio(scan)
        legacy = classify_legacy(scan)

        unknown = [
            *(UnknownFile(path=f.path, reasoning="Known-bad filename") for f in rejected),
            *(
                UnknownFile(path=f.path, reasoning="Unsupported file type")
                for f in scan.by_category(FileCategory.OTHER)
            ),
            *video.unknown,
            *text.unknown,
            *images.unknown,
            *audio.unknown,
        ]
        unknown.sort(key=lambda u: u.path)

        provider_id = resolve_provider_id(hint, text)
        decision = decide(video, provider_id, unknown)

        logger.info(
            f"Classification de {scan.directory.name}: {decision.status.value} "
            f"({decision.reason})"
        )

        return ClassificationResult(
            directory=scan.directory,
            decision=decision,
            main_video=video.main_video,
            disc=scan.disc,
            trailers=video.trailers,
            extras=video.extras,
            samples=video.samples,
            images=images.images,
            nfos=text.nfos,
            subtitles=text.subtitles,
            themes=audio.themes,
            legacy=legacy,
            unknown=tuple(unknown),
            provider_id=provider_id,
        )

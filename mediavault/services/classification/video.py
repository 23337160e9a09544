"""
Classification des videos : arbre de decision de la video principale.

Ordre d'evaluation (le premier cas applicable l'emporte) :
    1. structure de disque -> le sous-arbre est la video principale (100)
    2. indication de l'appelant correspondant a un candidat -> 100
    3. aucune video -> echec
    4. une seule video -> retenue (100) sauf mot-cle d'exclusion -> echec
    5. un seul candidat apres exclusion -> 95
    6. plusieurs candidats -> duree sondee la plus longue (90) ;
       egalite a 1 seconde pres -> echec ambigu
    7. tous les candidats exclus -> echec

La taille et la resolution ne departagent jamais : une bande-annonce peut
etre plus lourde ou mieux definie que le film, jamais plus longue.
"""

from typing import Optional, Sequence

from loguru import logger

from mediavault.core.exceptions import AmbiguousClassification
from mediavault.core.value_objects import (
    AssetKind,
    CandidateEvidence,
    ClassifiedFile,
    DirectoryScanFacts,
    FileCategory,
    FileFacts,
    ScanHint,
    UnknownFile,
    VideoClassification,
)

# Ecart de duree (secondes) en dessous duquel deux candidats sont a egalite
DURATION_TIE_TOLERANCE = 1.0

TIED_DURATION_REASON = "ambiguous main video: tied duration"
NO_DURATION_REASON = "ambiguous main video: no probed duration"


def select_by_duration(candidates: Sequence[FileFacts]) -> FileFacts:
    """
    Selectionne le candidat le plus long.

    Seuls le plus long et son suivant immediat sont compares : si leur ecart
    est inferieur ou egal a la tolerance, la selection est ambigue.

    Raises :
        AmbiguousClassification : egalite de duree, ou aucune duree sondee
    """
    ranked = sorted(candidates, key=lambda f: f.duration_seconds or 0.0, reverse=True)
    longest = ranked[0].duration_seconds or 0.0

    if longest <= 0:
        raise AmbiguousClassification(NO_DURATION_REASON, [f.path for f in ranked])

    if len(ranked) > 1:
        runner_up = ranked[1].duration_seconds or 0.0
        if longest - runner_up <= DURATION_TIE_TOLERANCE:
            tied = [
                f.path
                for f in ranked
                if longest - (f.duration_seconds or 0.0) <= DURATION_TIE_TOLERANCE
            ]
            raise AmbiguousClassification(TIED_DURATION_REASON, tied)

    return ranked[0]


def _evidence(video: FileFacts, confidence: int = 0) -> CandidateEvidence:
    return CandidateEvidence(
        path=video.path,
        duration_seconds=video.duration_seconds,
        excluded=video.filename.has_exclusion_keyword,
        exclusion_keywords=video.filename.exclusion_keywords,
        confidence=confidence,
    )


def _type_excluded(
    videos: Sequence[FileFacts],
) -> tuple[list[ClassifiedFile], list[ClassifiedFile], list[ClassifiedFile]]:
    """Repartit les videos exclues en bandes-annonces, extras et echantillons."""
    trailers: list[ClassifiedFile] = []
    extras: list[ClassifiedFile] = []
    samples: list[ClassifiedFile] = []

    for video in videos:
        keywords = video.filename.exclusion_keywords
        if "trailer" in keywords:
            trailers.append(
                ClassifiedFile(
                    path=video.path,
                    kind=AssetKind.TRAILER,
                    confidence=90,
                    reasoning="Exclusion keyword: trailer",
                )
            )
        elif "sample" in keywords:
            samples.append(
                ClassifiedFile(
                    path=video.path,
                    kind=AssetKind.EXTRA,
                    confidence=90,
                    reasoning="Exclusion keyword: sample",
                    detail="sample",
                )
            )
        else:
            extras.append(
                ClassifiedFile(
                    path=video.path,
                    kind=AssetKind.EXTRA,
                    confidence=90,
                    reasoning=f"Exclusion keyword: {keywords[0]}",
                    detail=keywords[0],
                )
            )

    return trailers, extras, samples


def classify_videos(
    scan: DirectoryScanFacts, hint: Optional[ScanHint] = None
) -> VideoClassification:
    """
    Determine la video principale d'un repertoire et le role des autres videos.

    Args :
        scan : Faits du repertoire (contexte calcule)
        hint : Indication facultative de l'appelant

    Retourne :
        VideoClassification ; main_video est None en cas d'echec
    """
    videos = scan.by_category(FileCategory.VIDEO)
    excluded = [v for v in videos if v.filename.has_exclusion_keyword]
    candidates = [v for v in videos if not v.filename.has_exclusion_keyword]
    trailers, extras, samples = _type_excluded(excluded)

    # 1. Structure de disque
    if scan.disc is not None:
        main = ClassifiedFile(
            path=scan.disc.root,
            kind=None,
            confidence=100,
            reasoning=f"Disc structure detected ({scan.disc.disc_type.value})",
        )
        unknown = tuple(
            UnknownFile(path=c.path, reasoning="Video file outside disc structure")
            for c in candidates
        )
        return VideoClassification(
            main_video=main,
            is_disc=True,
            trailers=tuple(trailers),
            extras=tuple(extras),
            samples=tuple(samples),
            unknown=unknown,
            candidates=tuple(_evidence(v) for v in videos),
        )

    selected: Optional[FileFacts] = None
    confidence = 0
    reasoning = ""
    failure: Optional[str] = None

    # 2. Indication de l'appelant
    if hint is not None and hint.main_filename:
        for candidate in candidates:
            if candidate.name == hint.main_filename:
                selected, confidence = candidate, 100
                reasoning = "Matches caller-provided main filename"
                break

    if selected is None:
        if not videos:
            # 3.
            failure = "no video files found"
        elif len(videos) == 1:
            # 4.
            only = videos[0]
            if only.filename.has_exclusion_keyword:
                keywords = ", ".join(only.filename.exclusion_keywords)
                failure = f"only video file carries exclusion keyword: {keywords}"
            else:
                selected, confidence = only, 100
                reasoning = "Only video file in directory"
        elif len(candidates) == 1:
            # 5.
            selected, confidence = candidates[0], 95
            reasoning = "Only candidate left after exclusion keywords"
        elif candidates:
            # 6.
            try:
                selected = select_by_duration(candidates)
                confidence = 90
                reasoning = (
                    f"Longest probed duration ({selected.duration_seconds:.0f}s) "
                    f"among {len(candidates)} candidates"
                )
            except AmbiguousClassification as e:
                logger.warning(f"Classification ambigue dans {scan.directory.name}: {e}")
                failure = e.reason
        else:
            # 7.
            failure = "all video files carry exclusion keywords"

    # Validation apres selection
    if selected is not None:
        if selected.video is None or not selected.video.has_video_stream:
            failure = f"main video failed validation: no probed video stream in {selected.name}"
            selected = None
        elif selected.filename.has_exclusion_keyword:
            failure = f"main video failed validation: exclusion keyword in {selected.name}"
            selected = None

    evidence = tuple(
        _evidence(v, confidence if selected is not None and v.path == selected.path else 0)
        for v in videos
    )

    if selected is None:
        logger.info(f"Pas de video principale pour {scan.directory.name}: {failure}")
        return VideoClassification(
            trailers=tuple(trailers),
            extras=tuple(extras),
            samples=tuple(samples),
            candidates=evidence,
            failure_reason=failure,
        )

    unknown = tuple(
        UnknownFile(path=c.path, reasoning="Video candidate not selected as main video")
        for c in candidates
        if c.path != selected.path
    )

    return VideoClassification(
        main_video=ClassifiedFile(
            path=selected.path,
            kind=None,
            confidence=confidence,
            reasoning=reasoning,
        ),
        trailers=tuple(trailers),
        extras=tuple(extras),
        samples=tuple(samples),
        unknown=unknown,
        candidates=evidence,
    )

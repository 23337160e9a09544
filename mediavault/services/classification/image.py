"""
Classification des images.

Les noms attendus derivent de la video principale : `{base}-{type}[N].ext`,
ou `{type}[N].ext` en mode noms courts (disque). Echelle de confiance :

    nom attendu exact ............ 90
    variante numerotee ........... 85
    nom generique (poster.jpg) ... 80
    mot-cle seul ................. 60 (+20 si ratio et dimensions valides)

Chaque image est evaluee contre les types dans un ordre fixe et attribuee
au premier type atteignant le seuil de 80, sans reevaluation ulterieure.
"""

import re
from typing import Optional

from mediavault.core.value_objects import (
    AUTO_CONFIDENCE_THRESHOLD,
    ClassifiedFile,
    DirectoryScanFacts,
    FileCategory,
    FileFacts,
    ImageClassification,
    UnknownFile,
)
from mediavault.services.classification.asset_specs import ASSET_SPECS, AssetSpec


def score_image(
    facts: FileFacts, spec: AssetSpec, basename: Optional[str]
) -> tuple[int, str]:
    """
    Evalue une image contre un type d'asset.

    Args :
        facts : Faits de l'image
        spec : Type evalue
        basename : Nom de la video principale sans extension (None en mode noms courts)

    Retourne :
        (confiance, raisonnement)
    """
    extension = facts.filesystem.extension
    if not spec.accepts_extension(extension):
        return 0, f"extension {extension} not allowed for {spec.kind.value}"

    stem = facts.filesystem.stem.lower()
    prefix = f"{basename.lower()}-" if basename else ""

    for token in spec.tokens:
        if stem == f"{prefix}{token}":
            return 90, f"Exact expected name {prefix}{token}{extension}"

    for token in spec.tokens:
        if re.fullmatch(rf"{re.escape(prefix)}{token}\d{{1,2}}", stem):
            return 85, f"Numbered variant of {prefix}{token}{extension}"

    if facts.name.lower() in spec.generic_names:
        return 80, f"Generic name {facts.name.lower()}"

    # Le titre lui-meme ne doit pas fournir le mot-cle
    searchable = stem[len(prefix):] if prefix and stem.startswith(prefix) else stem
    for token in spec.tokens:
        if token in searchable:
            if spec.dimensions_match(facts.image):
                return 80, f"Keyword '{token}' in filename, dimensions validated"
            return 60, f"Keyword '{token}' in filename, dimensions not validated"

    return 0, f"no {spec.kind.value} signal"


def classify_images(
    scan: DirectoryScanFacts, main_video: Optional[ClassifiedFile]
) -> ImageClassification:
    """
    Classe les images de premier niveau du repertoire.

    Sans video principale (ni disque), les noms attendus sont inconnus :
    toutes les images restent non classees.
    """
    images = scan.by_category(FileCategory.IMAGE)

    if main_video is None and scan.disc is None:
        return ImageClassification(
            unknown=tuple(
                UnknownFile(path=f.path, reasoning="No main video resolved, expected names unknown")
                for f in images
            )
        )

    basename = None if scan.disc is not None else main_video.path.stem

    classified: list[ClassifiedFile] = []
    unknown: list[UnknownFile] = []

    for facts in images:
        best_reasoning = "no asset type matched"
        for spec in ASSET_SPECS:
            confidence, reasoning = score_image(facts, spec, basename)
            if confidence >= AUTO_CONFIDENCE_THRESHOLD:
                classified.append(
                    ClassifiedFile(
                        path=facts.path,
                        kind=spec.kind,
                        confidence=confidence,
                        reasoning=reasoning,
                    )
                )
                break
            if confidence > 0 and best_reasoning == "no asset type matched":
                best_reasoning = f"{reasoning} ({confidence} < {AUTO_CONFIDENCE_THRESHOLD})"
        else:
            unknown.append(UnknownFile(path=facts.path, reasoning=best_reasoning))

    return ImageClassification(images=tuple(classified), unknown=tuple(unknown))

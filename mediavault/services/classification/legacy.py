"""
Classification du contenu des repertoires historiques.

Les images d'extrafanarts deviennent des fanarts, celles d'extrathumbs
des vignettes, a confiance 80. Chaque repertoire est ensuite recycle
d'un bloc a la publication pour ne jamais etre rescanne.
"""

from typing import Optional

from mediavault.core.value_objects import (
    AssetKind,
    ClassifiedFile,
    DirectoryScanFacts,
    FileCategory,
    LegacyClassification,
)


def legacy_kind(directory_name: str) -> Optional[AssetKind]:
    """Type d'asset des images d'un repertoire historique, d'apres son nom."""
    name = directory_name.lower()
    if "fanart" in name:
        return AssetKind.FANART
    if "thumb" in name:
        return AssetKind.THUMB
    return None


def classify_legacy(scan: DirectoryScanFacts) -> LegacyClassification:
    kinds = {info.path: legacy_kind(info.name) for info in scan.legacy_directories}

    images: list[ClassifiedFile] = []
    ignored = []
    for facts in scan.legacy_files:
        kind = next(
            (k for directory, k in kinds.items() if facts.path.is_relative_to(directory)),
            None,
        )
        if kind is not None and facts.category == FileCategory.IMAGE:
            images.append(
                ClassifiedFile(
                    path=facts.path,
                    kind=kind,
                    confidence=80,
                    reasoning=f"Image in legacy directory {facts.path.parent.name}",
                )
            )
        else:
            ignored.append(facts.path)

    return LegacyClassification(
        images=tuple(images),
        directories=tuple(info.path for info in scan.legacy_directories),
        ignored=tuple(ignored),
    )

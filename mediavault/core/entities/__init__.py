"""
Entités persistées du domaine.

- CacheEntry : artefact unique du cache adressable par contenu
- LibraryEntry : fichier publié dans la bibliothèque depuis une entrée du cache
- RecycleRecord : élément déplacé dans la corbeille, restaurable jusqu'à purge
- ClassificationFailure : trace d'un répertoire laissé en traitement manuel
"""

from mediavault.core.entities.cache import (
    CacheEntry,
    ClassificationFailure,
    LibraryEntry,
    RecycleRecord,
)

__all__ = [
    "CacheEntry",
    "ClassificationFailure",
    "LibraryEntry",
    "RecycleRecord",
]

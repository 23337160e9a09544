"""
Agregation du contexte de repertoire.

Point de jonction du pipeline : ne s'execute qu'une fois toutes les sondes
du repertoire terminees. Chaque fichier recoit sa position relative
(rang de taille, rang de duree) parmi les fichiers de sa categorie.
"""

import dataclasses
from collections import defaultdict
from typing import Sequence

from mediavault.core.value_objects import DirectoryContextFacts, FileCategory, FileFacts


def compute_directory_context(files: Sequence[FileFacts]) -> tuple[FileFacts, ...]:
    """
    Calcule le contexte de chaque fichier.

    Args :
        files : Faits de tous les fichiers du repertoire (sondes terminees)

    Retourne :
        Nouveaux FileFacts, dans le meme ordre, avec `context` renseigne
    """
    by_category: dict[FileCategory, list[FileFacts]] = defaultdict(list)
    for facts in files:
        by_category[facts.category].append(facts)

    contexts = {}
    for category, members in by_category.items():
        total_bytes = sum(f.filesystem.size_bytes for f in members)
        largest = max(f.filesystem.size_bytes for f in members)

        # Tri stable : a taille egale, l'ordre des noms departage les rangs
        size_sorted = sorted(members, key=lambda f: -f.filesystem.size_bytes)
        size_ranks = {f.path: rank for rank, f in enumerate(size_sorted, start=1)}

        with_duration = [f for f in members if f.duration_seconds]
        duration_sorted = sorted(with_duration, key=lambda f: -(f.duration_seconds or 0))
        duration_ranks = {f.path: rank for rank, f in enumerate(duration_sorted, start=1)}
        longest = duration_sorted[0].duration_seconds if duration_sorted else None

        for facts in members:
            size = facts.filesystem.size_bytes
            duration = facts.duration_seconds
            duration_rank = duration_ranks.get(facts.path)
            contexts[facts.path] = DirectoryContextFacts(
                size_rank=size_ranks[facts.path],
                is_largest=size == largest,
                percent_of_largest=round(100.0 * size / largest, 2) if largest else 100.0,
                duration_rank=duration_rank,
                is_longest=duration_rank is not None and duration == longest,
                percent_of_longest=(
                    round(100.0 * duration / longest, 2)
                    if duration and longest
                    else None
                ),
                category_count=len(members),
                category_total_bytes=total_bytes,
            )

    return tuple(dataclasses.replace(f, context=contexts[f.path]) for f in files)

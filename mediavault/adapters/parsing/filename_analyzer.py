"""
Analyse des noms de fichiers.

Une seule table ordonnee de regles (motif -> signal) est evaluee une fois
par nom de fichier et produit un FilenameFacts immutable. Le classifieur
ne manipule jamais directement d'expression reguliere.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mediavault.core.value_objects import FilenameFacts

# Mots-cles qui disqualifient une video comme video principale
EXCLUSION_KEYWORDS: tuple[str, ...] = (
    "trailer",
    "sample",
    "behindthescenes",
    "deleted",
    "featurette",
    "interview",
    "scene",
    "short",
)


def _token(alternatives: str) -> re.Pattern[str]:
    """Motif insensible a la casse, delimite par des caracteres non alphanumeriques."""
    return re.compile(rf"(?<![A-Za-z0-9])({alternatives})(?![A-Za-z0-9])", re.IGNORECASE)


@dataclass(frozen=True)
class FilenameRule:
    """
    Regle d'analyse : un motif et le signal qu'il alimente.

    Attributs :
        signal : Champ de FilenameFacts alimente
        pattern : Motif compile (groupe 1 = valeur extraite)
        label : Valeur fixe enregistree a la place du texte trouve
        multiple : Vrai si toutes les occurrences sont collectees
    """

    signal: str
    pattern: re.Pattern[str]
    label: Optional[str] = None
    multiple: bool = False


FILENAME_RULES: tuple[FilenameRule, ...] = (
    FilenameRule("year", re.compile(r"[(\[.](\d{4})[)\].]")),
    FilenameRule("resolution", _token(r"2160p|1080p|720p|480p|4K|UHD|HD")),
    FilenameRule("codec", _token(r"x264|x265|h\.?264|h\.?265|HEVC|AVC")),
    FilenameRule(
        "quality_tags",
        _token(r"BLURAY|REMUX|WEBRip|WEB-DL|HDTV|DVDRip|BRRip"),
        multiple=True,
    ),
    FilenameRule(
        "audio_tags",
        re.compile(r"(?<![A-Za-z0-9])(DTS|ATMOS|TrueHD|DD5\.1|DD\+|AAC|AC3)", re.IGNORECASE),
        multiple=True,
    ),
    FilenameRule(
        "edition",
        re.compile(r"(Director'?s?[ ._-]?Cut|Extended|Theatrical|Unrated|Remastered)", re.IGNORECASE),
    ),
    # Mots-cles d'exclusion : suffixes delimites par - ou _, "sample" seul partout
    FilenameRule("exclusion", re.compile(r"[-_](trailer)", re.IGNORECASE), label="trailer"),
    FilenameRule("exclusion", re.compile(r"(sample)", re.IGNORECASE), label="sample"),
    FilenameRule(
        "exclusion",
        re.compile(r"[-_](behindthescenes)", re.IGNORECASE),
        label="behindthescenes",
    ),
    FilenameRule("exclusion", re.compile(r"[-_](deleted)", re.IGNORECASE), label="deleted"),
    FilenameRule("exclusion", re.compile(r"[-_](featurette)", re.IGNORECASE), label="featurette"),
    FilenameRule("exclusion", re.compile(r"[-_](interview)", re.IGNORECASE), label="interview"),
    FilenameRule("exclusion", re.compile(r"[-_](scene)", re.IGNORECASE), label="scene"),
    FilenameRule("exclusion", re.compile(r"[-_](short)", re.IGNORECASE), label="short"),
)

# Suffixe numerique d'une variante (fanart2, Movie-trailer1), evalue sur le nom sans extension
_VARIANT_PATTERN = re.compile(r"(?<=[A-Za-z])(\d{1,2})$")


def analyze_filename(filename: str) -> FilenameFacts:
    """
    Extrait les signaux d'un nom de fichier.

    Fonction pure : le meme nom produit toujours les memes faits.

    Args :
        filename : Nom de fichier, avec extension

    Retourne :
        FilenameFacts immutable
    """
    single: dict[str, str] = {}
    collected: dict[str, list[str]] = {}

    for rule in FILENAME_RULES:
        matches = [m.group(1) for m in rule.pattern.finditer(filename)]
        if not matches:
            continue
        if rule.signal == "exclusion":
            values = collected.setdefault("exclusion", [])
            if rule.label not in values:
                values.append(rule.label)
        elif rule.multiple:
            values = collected.setdefault(rule.signal, [])
            for match in matches:
                if match.upper() not in (v.upper() for v in values):
                    values.append(match)
        elif rule.signal == "year":
            # Le dernier match : un titre peut lui-meme contenir une annee
            single[rule.signal] = matches[-1]
        else:
            single.setdefault(rule.signal, matches[0])

    variant_match = _VARIANT_PATTERN.search(Path(filename).stem)
    exclusions = tuple(collected.get("exclusion", ()))

    return FilenameFacts(
        year=int(single["year"]) if "year" in single else None,
        resolution=single.get("resolution"),
        codec=single.get("codec"),
        quality_tags=tuple(collected.get("quality_tags", ())),
        audio_tags=tuple(collected.get("audio_tags", ())),
        edition=single.get("edition"),
        has_exclusion_keyword=bool(exclusions),
        exclusion_keywords=exclusions,
        variant_number=int(variant_match.group(1)) if variant_match else None,
    )

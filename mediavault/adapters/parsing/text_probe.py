"""
Sonde texte : analyse des premiers octets d'un fichier.

Detecte les NFO (element racine XML, identifiants TMDB/IMDB) et les
sous-titres (motifs d'horodatage). Seul un echantillon est lu : un NFO
ou un sous-titre se reconnait a son debut.
"""

import re
from pathlib import Path
from typing import Optional

from mediavault.core.exceptions import ProbeFailure
from mediavault.core.ports.probes import ITextProbe
from mediavault.core.value_objects import TextFacts

DEFAULT_SAMPLE_BYTES = 10 * 1024

_XML_MARKERS = ("<?xml", "<movie>", "<movie ", "<tvshow>", "<tvshow ")

# Identifiants, du plus fiable au plus permissif
_TMDB_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<uniqueid[^>]*type=\"tmdb\"[^>]*>(\d+)</uniqueid>", re.IGNORECASE),
    re.compile(r"<tmdb>(\d+)</tmdb>", re.IGNORECASE),
    re.compile(r"<tmdbid>(\d+)</tmdbid>", re.IGNORECASE),
    re.compile(r"themoviedb\.org/movie/(\d+)", re.IGNORECASE),
    re.compile(r"tmdb[/:\s=]+(\d+)", re.IGNORECASE),
)

_IMDB_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<uniqueid[^>]*type=\"imdb\"[^>]*>(tt\d+)</uniqueid>", re.IGNORECASE),
    re.compile(r"<imdb>(tt\d+)</imdb>", re.IGNORECASE),
    re.compile(r"<imdbid>(tt\d+)</imdbid>", re.IGNORECASE),
    re.compile(r"imdb\.com/title/(tt\d+)", re.IGNORECASE),
    re.compile(r"\b(tt\d{7,})\b", re.IGNORECASE),
)

# SRT : 00:00:01,000 --> 00:00:04,000 ; ASS : Dialogue: 0,0:00:01.00,...
_TIMESTAMP_PATTERN = re.compile(r"\d{2}:\d{2}:\d{2}")

_LANGUAGE_PATTERN = re.compile(
    r"\.(en|eng|fr|fre|fra|de|ger|deu|es|spa|it|ita|pt|por|ja|jpn|zh|chi|nl|dut|ru|rus)"
    r"(?:\.forced)?\.(srt|ass|ssa|vtt|sub|idx)$",
    re.IGNORECASE,
)


def _first_match(patterns: tuple[re.Pattern[str], ...], content: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(content)
        if match:
            return match.group(1)
    return None


def inspect_text(filename: str, content: str) -> TextFacts:
    """
    Analyse un echantillon de texte deja decode.

    Args :
        filename : Nom du fichier (pour la langue des sous-titres)
        content : Echantillon decode

    Retourne :
        TextFacts
    """
    is_xml = any(marker in content for marker in _XML_MARKERS)
    tmdb_id = _first_match(_TMDB_PATTERNS, content)
    imdb_id = _first_match(_IMDB_PATTERNS, content)

    looks_like_subtitle = (
        "-->" in content
        or "Dialogue:" in content
        or _TIMESTAMP_PATTERN.search(content) is not None
    )

    language = None
    if looks_like_subtitle:
        language_match = _LANGUAGE_PATTERN.search(filename)
        if language_match:
            language = language_match.group(1).lower()

    return TextFacts(
        sample=content,
        tmdb_id=tmdb_id,
        imdb_id=imdb_id.lower() if imdb_id else None,
        looks_like_nfo=is_xml or tmdb_id is not None or imdb_id is not None,
        looks_like_subtitle=looks_like_subtitle,
        language=language,
    )


class TextSampleProbe(ITextProbe):
    """Implementation de ITextProbe lisant les premiers octets du fichier."""

    def __init__(self, sample_bytes: int = DEFAULT_SAMPLE_BYTES) -> None:
        self._sample_bytes = sample_bytes

    def probe(self, file_path: Path) -> TextFacts:
        """
        Lit l'echantillon et l'analyse.

        Raises :
            ProbeFailure : fichier illisible
        """
        try:
            with open(file_path, "rb") as f:
                raw = f.read(self._sample_bytes)
        except OSError as e:
            raise ProbeFailure(file_path, "text", str(e)) from e

        content = raw.decode("utf-8", errors="replace").lstrip("\ufeff")
        return inspect_text(file_path.name, content)

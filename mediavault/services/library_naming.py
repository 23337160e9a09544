"""
Convention de nommage de la bibliotheque.

    images ...... {base}-{type}{N}.ext   (mode disque : {type}{N}.ext)
    NFO ......... {base}.nfo             (mode disque : movie.nfo)
    sous-titres . {base}.{langue}.ext ou {base}.ext
    bandes-ann. . {base}-trailer{N}.ext
    extras ...... {base}-{nature}{N}.ext
    theme ....... theme{N}.ext

N est omis pour le premier element d'un type, puis vaut 1, 2...
Ces noms sont ceux que le classifieur d'images reconnait en retour.
"""

import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pathvalidate import sanitize_filename

from mediavault.core.value_objects import AssetKind

# Longueur maximale du nom de base (hors suffixes)
MAX_BASENAME_LENGTH = 200

# Nom de base utilise en mode noms courts (structure de disque)
DISC_BASENAME = "movie"

# Suffixe publie quand il differe du nom du type
_IMAGE_SUFFIXES: dict[AssetKind, str] = {
    AssetKind.DISCART: "disc",
}

SPECIAL_CHARS_TO_DASH = frozenset({":", "/", "\\", "*", '"', "<", ">", "|"})


@dataclass(frozen=True)
class PublishItem:
    """
    Element a publier depuis le cache.

    Attributs :
        cache_entry_id : Entree du cache source
        kind : Type d'asset
        extension : Extension publiee (avec le point)
        index : Rang dans son type (0 pour le premier)
        detail : Langue d'un sous-titre ou nature d'un extra
        source : Fichier d'origine dans le repertoire scanne
    """

    cache_entry_id: str
    kind: AssetKind
    extension: str
    index: int = 0
    detail: Optional[str] = None
    source: Optional[Path] = None


def sanitize_component(text: str) -> str:
    """
    Nettoie un composant de nom de fichier.

    Normalisation NFKC, caracteres reserves remplaces par un tiret,
    puis nettoyage multiplateforme par pathvalidate.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    for char in SPECIAL_CHARS_TO_DASH:
        text = text.replace(char, "-")
    text = sanitize_filename(text, platform="universal", replacement_text="")
    return text[:MAX_BASENAME_LENGTH]


def _number(index: int) -> str:
    return str(index) if index > 0 else ""


def library_filename(item: PublishItem, base: Optional[str], short_names: bool = False) -> str:
    """
    Nom publie d'un element.

    Args :
        item : Element a publier
        base : Nom de la video principale sans extension
        short_names : Mode noms courts (structure de disque)

    Retourne :
        Nom de fichier (sans repertoire)
    """
    extension = item.extension.lower()
    number = _number(item.index)
    clean_base = DISC_BASENAME if short_names or not base else sanitize_component(base)

    if item.kind.is_image:
        suffix = _IMAGE_SUFFIXES.get(item.kind, item.kind.value)
        if short_names:
            return f"{suffix}{number}{extension}"
        return f"{clean_base}-{suffix}{number}{extension}"

    if item.kind == AssetKind.NFO:
        return f"{clean_base}.nfo"

    if item.kind == AssetKind.SUBTITLE:
        if item.detail:
            return f"{clean_base}.{sanitize_component(item.detail)}{number}{extension}"
        return f"{clean_base}{number}{extension}"

    if item.kind == AssetKind.TRAILER:
        return f"{clean_base}-trailer{number}{extension}"

    if item.kind == AssetKind.EXTRA:
        nature = sanitize_component(item.detail or "extra")
        return f"{clean_base}-{nature}{number}{extension}"

    # Theme musical
    return f"theme{number}{extension}"

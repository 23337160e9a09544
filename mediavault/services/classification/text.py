"""
Classification des fichiers texte.

Filtre par extension, puis verification par le contenu : un .nfo doit
contenir un element racine XML ou un identifiant de fournisseur, un
sous-titre doit contenir un motif d'horodatage. Sans verification le
fichier reste inconnu.
"""

from mediavault.adapters.file_system import SUBTITLE_EXTENSIONS
from mediavault.core.value_objects import (
    AssetKind,
    ClassifiedFile,
    DirectoryScanFacts,
    FileCategory,
    TextClassification,
    UnknownFile,
)

NFO_EXTENSIONS = frozenset({".nfo"})


def classify_texts(scan: DirectoryScanFacts) -> TextClassification:
    """
    Classe les fichiers texte et collecte les identifiants des NFO verifies.

    Le NFO a l'emplacement attendu d'un disque est examine en premier :
    ses identifiants priment.
    """
    texts = scan.by_category(FileCategory.TEXT)
    expected_nfo = scan.disc.expected_nfo if scan.disc else None
    texts.sort(key=lambda f: (f.path != expected_nfo, f.name))

    nfos: list[ClassifiedFile] = []
    subtitles: list[ClassifiedFile] = []
    unknown: list[UnknownFile] = []
    tmdb_id = None
    imdb_id = None

    for facts in texts:
        extension = facts.filesystem.extension
        text = facts.text

        if extension in NFO_EXTENSIONS:
            if text is not None and text.looks_like_nfo:
                at_expected = expected_nfo is not None and facts.path == expected_nfo
                ids = [i for i in (text.tmdb_id, text.imdb_id) if i]
                nfos.append(
                    ClassifiedFile(
                        path=facts.path,
                        kind=AssetKind.NFO,
                        confidence=100 if at_expected else 90,
                        reasoning=(
                            "NFO verified by content"
                            + (f" (ids: {', '.join(ids)})" if ids else " (XML root)")
                            + (" at disc location" if at_expected else "")
                        ),
                    )
                )
                tmdb_id = tmdb_id or text.tmdb_id
                imdb_id = imdb_id or text.imdb_id
            else:
                unknown.append(
                    UnknownFile(path=facts.path, reasoning="NFO extension without XML root or provider id")
                )
        elif extension in SUBTITLE_EXTENSIONS:
            if text is not None and text.looks_like_subtitle:
                subtitles.append(
                    ClassifiedFile(
                        path=facts.path,
                        kind=AssetKind.SUBTITLE,
                        confidence=90,
                        reasoning="Subtitle timestamps found in content",
                        detail=text.language,
                    )
                )
            else:
                unknown.append(
                    UnknownFile(path=facts.path, reasoning="Subtitle extension without timestamps")
                )
        else:
            unknown.append(UnknownFile(path=facts.path, reasoning="Unrecognized text file"))

    return TextClassification(
        nfos=tuple(nfos),
        subtitles=tuple(subtitles),
        unknown=tuple(unknown),
        tmdb_id=tmdb_id,
        imdb_id=imdb_id,
    )

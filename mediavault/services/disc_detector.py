"""
Detection des structures de disque et des repertoires historiques.

S'execute avant la classification generale :
- un marqueur BDMV/index.bdmv ou VIDEO_TS/VIDEO_TS.IFO fait de tout le
  sous-arbre la video principale, avec un NFO attendu dans ce sous-arbre ;
- les repertoires historiques (extrafanarts, extrathumbs) sont listes en
  entier pour etre mis en cache puis recycles d'un bloc.
"""

from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from mediavault.core.value_objects import DiscStructureInfo, DiscType, LegacyDirectoryInfo

# (type, repertoire, marqueur, NFO attendu relatif au repertoire)
_DISC_MARKERS: tuple[tuple[DiscType, str, str, str], ...] = (
    (DiscType.BDMV, "BDMV", "index.bdmv", "index.nfo"),
    (DiscType.VIDEO_TS, "VIDEO_TS", "VIDEO_TS.IFO", "VIDEO_TS.nfo"),
)


def detect_disc_structure(directory: Path) -> Optional[DiscStructureInfo]:
    """
    Cherche un marqueur de disque a la racine du repertoire.

    Retourne :
        DiscStructureInfo, ou None pour un repertoire classique
    """
    for disc_type, subdir, marker, nfo in _DISC_MARKERS:
        root = directory / subdir
        marker_path = root / marker
        if marker_path.is_file():
            logger.info(f"Structure {disc_type.value} detectee dans {directory.name}")
            return DiscStructureInfo(
                disc_type=disc_type,
                root=root,
                marker=marker_path,
                expected_nfo=root / nfo,
            )
    return None


def scan_legacy_directories(
    directory: Path, names: Sequence[str]
) -> tuple[LegacyDirectoryInfo, ...]:
    """
    Liste les repertoires historiques et tout leur contenu (recursif, tout type).

    La comparaison des noms est insensible a la casse.
    """
    wanted = {name.lower() for name in names}
    found: list[LegacyDirectoryInfo] = []

    try:
        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning(f"Lecture impossible de {directory}: {e}")
        return ()

    for child in children:
        if not child.is_dir() or child.name.lower() not in wanted:
            continue
        files = tuple(sorted(p for p in child.rglob("*") if p.is_file()))
        logger.debug(f"Repertoire historique {child.name}: {len(files)} fichier(s)")
        found.append(LegacyDirectoryInfo(path=child, name=child.name.lower(), files=files))

    return tuple(found)

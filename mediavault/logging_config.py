"""
Logging de MediaVault via loguru.

Trois sorties :
- console : suivi des scans en couleur, au niveau configure
- journal JSON : tous les evenements (DEBUG compris, detail des sondes)
- journal d'integrite : avertissements et erreurs du cache, de la publication
  et de la corbeille, conserves a part pour l'audit
"""

import sys
from pathlib import Path

from loguru import logger

# Modules dont les incidents alimentent le journal d'integrite
INTEGRITY_MODULES: tuple[str, ...] = (
    "mediavault.services.cache_store",
    "mediavault.services.publisher",
    "mediavault.services.recycler",
)

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | "
    "<level>{message}</level>"
)


def integrity_log_path(log_file: Path) -> Path:
    """Chemin du journal d'integrite, a cote du journal principal."""
    return log_file.with_name(f"{log_file.stem}-integrity.jsonl")


def _is_integrity_record(record: dict) -> bool:
    return record["name"].startswith(INTEGRITY_MODULES)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/mediavault.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """
    Remplace les handlers loguru par ceux de MediaVault.

    Args :
        log_level : Niveau minimum affiche en console
        log_file : Journal JSON principal ; le journal d'integrite est cree a cote
        rotation_size : Taille declenchant la rotation des journaux
        retention_count : Nombre de journaux rotatifs conserves
    """
    logger.remove()
    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_options = dict(
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,  # sondes en parallele
    )
    logger.add(log_file, level="DEBUG", **file_options)
    logger.add(
        integrity_log_path(log_file),
        level="WARNING",
        filter=_is_integrity_record,
        **file_options,
    )

    logger.debug(f"Journaux : {log_file}, {integrity_log_path(log_file)}")

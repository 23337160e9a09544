"""
Exceptions metier de MediaVault.

Chaque classe correspond a une categorie d'erreur distincte :
- ProbeFailure : l'extraction d'un fichier a echoue (fait absent, jamais bloquant)
- AmbiguousClassification : plusieurs candidats a egalite pour un role unique
- IntegrityViolation : hash d'un fichier publie ou d'un artefact ne correspond plus
- CacheEntryNotFound : identifiant absent de l'index
- CorruptionNotFound : identifiant present dans l'index mais artefact absent du disque
- UnsafeRecycleAttempt : tentative de recycler la video principale
- CacheWriteError : ecriture d'un artefact impossible
- FileOperationError : copie ou deplacement impossible (publication, corbeille)
"""

from pathlib import Path
from typing import Optional, Sequence


class MediaVaultError(Exception):
    """Classe de base de toutes les erreurs MediaVault."""


class ProbeFailure(MediaVaultError):
    """Echec d'une sonde sur un fichier (media corrompu, image illisible, timeout)."""

    def __init__(self, path: Path, probe: str, reason: str) -> None:
        """
        Initialise l'erreur.

        Args :
            path : Fichier sonde
            probe : Nom de la sonde (video, image, text)
            reason : Cause de l'echec
        """
        self.path = path
        self.probe = probe
        self.reason = reason
        super().__init__(f"{probe} probe failed for {path.name}: {reason}")


class AmbiguousClassification(MediaVaultError):
    """Plusieurs candidats sont a egalite sur le critere decisif."""

    def __init__(self, reason: str, tied: Sequence[Path]) -> None:
        self.reason = reason
        self.tied = tuple(tied)
        names = ", ".join(p.name for p in self.tied)
        super().__init__(f"{reason} ({names})")


class IntegrityViolation(MediaVaultError):
    """Le hash fort recalcule ne correspond pas au hash enregistre."""

    def __init__(self, path: Path, expected: str, actual: Optional[str]) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Integrity violation on {path}: expected {expected}, got {actual or 'missing'}"
        )


class CacheEntryNotFound(MediaVaultError):
    """Identifiant inconnu de l'index du cache."""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Cache entry not found: {entry_id}")


class CorruptionNotFound(MediaVaultError):
    """L'index reference un artefact absent du disque (perte de donnees anterieure)."""

    def __init__(self, entry_id: str, storage_path: Path) -> None:
        self.entry_id = entry_id
        self.storage_path = storage_path
        super().__init__(
            f"Cache entry {entry_id} is indexed but missing on disk: {storage_path}"
        )


class CacheEntryTooLarge(MediaVaultError):
    """Contenu au-dela du plafond configure pour une entree du cache."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Content of {size} bytes exceeds cache ceiling of {limit} bytes")


class UnsafeRecycleAttempt(MediaVaultError):
    """Tentative de recycler la video principale (ou un repertoire qui la contient)."""

    def __init__(self, target: Path, main_video: Path) -> None:
        self.target = target
        self.main_video = main_video
        super().__init__(f"Refusing to recycle {target}: protects main video {main_video}")


class RecycleRecordNotFound(MediaVaultError):
    """Element de corbeille inconnu ou deja purge."""

    def __init__(self, record_id: int) -> None:
        self.record_id = record_id
        super().__init__(f"Recycle record not found or not restorable: {record_id}")


class RestoreConflict(MediaVaultError):
    """Le chemin d'origine est deja occupe lors d'une restauration de corbeille."""

    def __init__(self, original_path: Path) -> None:
        self.original_path = original_path
        super().__init__(f"Cannot restore, path already exists: {original_path}")


class CacheWriteError(MediaVaultError):
    """L'artefact n'a pas pu etre ecrit dans le cache."""

    def __init__(self, storage_path: Path) -> None:
        self.storage_path = storage_path
        super().__init__(f"Unable to write cache artifact: {storage_path}")


class FileOperationError(MediaVaultError):
    """Une operation fichier (copie, deplacement, suppression) a echoue."""

    def __init__(self, operation: str, path: Path) -> None:
        self.operation = operation
        self.path = path
        super().__init__(f"File operation '{operation}' failed for {path}")

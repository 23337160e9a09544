"""
Interface des operations sur le systeme de fichiers.

Les services du cache, de publication et de recyclage passent par ce port ;
les tests peuvent ainsi simuler des echecs d'E/S.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class IFileSystem(ABC):
    """Operations fichiers utilisees par le cache, la publication et le recyclage."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        ...

    @abstractmethod
    def list_directory(self, directory: Path) -> list[Path]:
        """Liste les entrees d'un repertoire (non recursif), triees par nom."""
        ...

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Lit le contenu complet d'un fichier."""
        ...

    @abstractmethod
    def write_atomic(self, data: bytes, destination: Path) -> bool:
        """Ecrit un fichier via un fichier temporaire puis un renommage atomique."""
        ...

    @abstractmethod
    def copy(self, source: Path, destination: Path) -> bool:
        """Copie un fichier, en creant les repertoires parents."""
        ...

    @abstractmethod
    def atomic_move(self, source: Path, destination: Path) -> bool:
        """Deplace un fichier ou un repertoire de maniere atomique."""
        ...

    @abstractmethod
    def delete(self, path: Path) -> bool:
        """Supprime un fichier ou un repertoire complet."""
        ...

    @abstractmethod
    def calculate_hash(self, path: Path) -> Optional[str]:
        """Calcule le hash SHA-256 complet d'un fichier, None si illisible."""
        ...

    @abstractmethod
    def get_size(self, path: Path) -> int:
        """Recupere la taille d'un fichier en octets (0 si absent)."""
        ...

    @abstractmethod
    def same_file(self, first: Path, second: Path) -> bool:
        """Verifie si deux chemins designent le meme fichier (False si l'un est absent)."""
        ...

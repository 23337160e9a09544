"""
Adaptateur pour les operations sur le systeme de fichiers.

Implementation concrete de IFileSystem pour les operations fichiers reelles.
Fournit egalement les tables d'extensions utilisees pour categoriser les fichiers.
"""

import hashlib
import os
import shutil
import uuid
from pathlib import Path
from typing import Optional

from mediavault.core.ports.file_system import IFileSystem
from mediavault.core.value_objects import FileCategory

# Extensions supportees, par categorie
VIDEO_EXTENSIONS: frozenset[str] = frozenset({
    ".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm", ".m4v",
    ".mpg", ".mpeg", ".m2ts", ".ts", ".vob", ".ogv", ".3gp",
})

IMAGE_EXTENSIONS: frozenset[str] = frozenset({
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff",
})

TEXT_EXTENSIONS: frozenset[str] = frozenset({
    ".nfo", ".srt", ".ass", ".ssa", ".vtt", ".sub", ".idx", ".txt",
})

SUBTITLE_EXTENSIONS: frozenset[str] = frozenset({
    ".srt", ".ass", ".ssa", ".vtt", ".sub", ".idx",
})

AUDIO_EXTENSIONS: frozenset[str] = frozenset({
    ".mp3", ".flac", ".m4a", ".aac", ".ogg", ".wav", ".wma",
})

# Taille du chunk pour le calcul de hash (1 MB)
HASH_CHUNK_SIZE: int = 1024 * 1024


def categorize(path: Path) -> FileCategory:
    """Determine la categorie d'un fichier d'apres son extension."""
    extension = path.suffix.lower()
    if extension in VIDEO_EXTENSIONS:
        return FileCategory.VIDEO
    if extension in IMAGE_EXTENSIONS:
        return FileCategory.IMAGE
    if extension in TEXT_EXTENSIONS:
        return FileCategory.TEXT
    if extension in AUDIO_EXTENSIONS:
        return FileCategory.AUDIO
    return FileCategory.OTHER


def sha256_bytes(data: bytes) -> str:
    """Hash fort SHA-256 d'un contenu en memoire."""
    return hashlib.sha256(data).hexdigest()


class FileSystemAdapter(IFileSystem):
    """
    Implementation de IFileSystem pour le systeme de fichiers reel.

    Les operations d'ecriture retournent un booleen plutot que de lever :
    les services decident du traitement de l'echec.
    """

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    def list_directory(self, directory: Path) -> list[Path]:
        """
        Liste les entrees d'un repertoire, triees par nom.

        Le tri rend la classification d'un repertoire inchange reproductible.
        Retourne une liste vide si le repertoire est illisible.
        """
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError:
            return []

    def read_bytes(self, path: Path) -> bytes:
        """Lit le contenu complet d'un fichier (leve OSError si illisible)."""
        return path.read_bytes()

    def write_atomic(self, data: bytes, destination: Path) -> bool:
        """
        Ecrit un fichier de maniere atomique.

        Le contenu est ecrit dans un fichier temporaire du meme repertoire,
        puis renomme avec os.replace : un lecteur ne voit jamais un fichier partiel.
        """
        temp = destination.with_name(f".tmp_{uuid.uuid4().hex}_{destination.name}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with open(temp, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp, destination)
            return True
        except OSError:
            if temp.exists():
                temp.unlink()
            return False

    def copy(self, source: Path, destination: Path) -> bool:
        """
        Copie un fichier de la source vers la destination.

        Passe par un fichier temporaire : une copie interrompue ne laisse
        jamais de fichier tronque a la destination.
        """
        temp = destination.with_name(f".tmp_{uuid.uuid4().hex}_{destination.name}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, temp)
            os.replace(temp, destination)
            return True
        except (OSError, shutil.Error):
            if temp.exists():
                temp.unlink()
            return False

    def atomic_move(self, source: Path, destination: Path) -> bool:
        """
        Deplace un fichier ou un repertoire de maniere atomique.

        Utilise os.replace sur le meme filesystem. Pour un deplacement
        cross-filesystem, copie vers un nom temporaire puis renomme.

        Args :
            source : Chemin source (fichier ou repertoire)
            destination : Chemin de destination

        Retourne :
            True si le deplacement a reussi, False sinon.
        """
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)

            try:
                os.replace(source, destination)
            except OSError:
                temp = destination.with_name(f".tmp_{uuid.uuid4().hex}_{destination.name}")
                try:
                    if source.is_dir():
                        shutil.copytree(source, temp)
                        os.replace(temp, destination)
                        shutil.rmtree(source)
                    else:
                        shutil.copy2(source, temp)
                        os.replace(temp, destination)
                        source.unlink()
                except (OSError, shutil.Error):
                    if temp.is_dir():
                        shutil.rmtree(temp, ignore_errors=True)
                    elif temp.exists():
                        temp.unlink()
                    raise

            return True
        except (OSError, shutil.Error):
            return False

    def delete(self, path: Path) -> bool:
        """Supprime un fichier ou un repertoire complet."""
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
            return True
        except OSError:
            return False

    def calculate_hash(self, path: Path) -> Optional[str]:
        """
        Calcule le hash SHA-256 complet du fichier.

        Lecture par chunks : les fichiers du cache peuvent etre volumineux.
        """
        try:
            hasher = hashlib.sha256()
            with open(path, "rb") as f:
                for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                    hasher.update(chunk)
            return hasher.hexdigest()
        except OSError:
            return None

    def get_size(self, path: Path) -> int:
        """
        Recupere la taille du fichier en octets.

        Retourne 0 si le fichier n'existe pas.
        """
        try:
            return path.stat().st_size
        except OSError:
            return 0

    def same_file(self, first: Path, second: Path) -> bool:
        """
        Verifie si deux chemins designent le meme fichier.

        Comparaison par inode : sur un systeme de fichiers insensible a la
        casse, movie.nfo et Movie.nfo sont le meme fichier.
        """
        try:
            return os.path.samefile(first, second)
        except OSError:
            return False

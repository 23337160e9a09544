"""
Sonde image basee sur Pillow.

Fournit les dimensions, le format et la transparence d'une image, ainsi
qu'un hash perceptuel (difference hash 64 bits) utilise uniquement pour
detecter les quasi-doublons dans le cache.
"""

import io
from pathlib import Path
from typing import Optional

from loguru import logger
from PIL import Image, UnidentifiedImageError

from mediavault.core.exceptions import ProbeFailure
from mediavault.core.ports.probes import IImageProbe
from mediavault.core.value_objects import ImageFacts

# Cote du hash : 8x8 bits
DHASH_SIZE = 8


def difference_hash(image: Image.Image, hash_size: int = DHASH_SIZE) -> str:
    """
    Calcule le difference hash d'une image.

    L'image est convertie en niveaux de gris, reduite a (hash_size + 1) x hash_size,
    puis chaque pixel est compare a son voisin de droite.

    Retourne :
        Hash hexadecimal (16 caracteres pour hash_size = 8)
    """
    grey = image.convert("L").resize((hash_size + 1, hash_size), Image.Resampling.BILINEAR)
    pixels = grey.tobytes()
    value = 0
    for row in range(hash_size):
        offset = row * (hash_size + 1)
        for col in range(hash_size):
            value = (value << 1) | (1 if pixels[offset + col] > pixels[offset + col + 1] else 0)
    return f"{value:0{hash_size * hash_size // 4}x}"


def hamming_distance(hash_a: str, hash_b: str) -> int:
    """Nombre de bits differents entre deux hash hexadecimaux de meme longueur."""
    if len(hash_a) != len(hash_b):
        raise ValueError("Hashes must have identical length for Hamming distance")
    return bin(int(hash_a, 16) ^ int(hash_b, 16)).count("1")


class PillowImageProbe(IImageProbe):
    """Implementation de IImageProbe avec Pillow."""

    def probe(self, file_path: Path) -> ImageFacts:
        """
        Lit l'en-tete de l'image (sans decoder tous les pixels).

        Raises :
            ProbeFailure : fichier absent ou format non reconnu
        """
        try:
            with Image.open(file_path) as img:
                width, height = img.size
                has_alpha = img.mode in ("RGBA", "LA", "PA") or (
                    img.mode == "P" and "transparency" in img.info
                )
                return ImageFacts(
                    width=width,
                    height=height,
                    format=img.format,
                    has_alpha=has_alpha,
                )
        except (OSError, UnidentifiedImageError) as e:
            raise ProbeFailure(file_path, "image", str(e)) from e

    def perceptual_hash(self, data: bytes) -> Optional[str]:
        """Hash perceptuel d'un contenu image, None si le contenu n'est pas decodable."""
        try:
            with Image.open(io.BytesIO(data)) as img:
                return difference_hash(img)
        except (OSError, UnidentifiedImageError) as e:
            logger.debug(f"Hash perceptuel impossible : {e}")
            return None

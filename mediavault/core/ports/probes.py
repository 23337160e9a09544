"""
Interfaces des sondes de faits.

Une sonde lit un seul fichier, sans effet de bord ni etat partage, et peut
donc s'executer en parallele sur les fichiers d'un meme repertoire.
En cas d'echec elle leve ProbeFailure ; l'appelant marque alors le fait
comme absent sans interrompre le repertoire.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from mediavault.core.value_objects import ImageFacts, TextFacts, VideoStreamFacts


class IVideoProbe(ABC):
    """Interface d'extraction des flux d'un fichier video."""

    @abstractmethod
    def probe(self, file_path: Path) -> VideoStreamFacts:
        """
        Extrait les flux, durees et codecs d'un fichier video.

        Raises :
            ProbeFailure : fichier illisible, corrompu ou delai depasse
        """
        ...


class IImageProbe(ABC):
    """Interface d'analyse des images."""

    @abstractmethod
    def probe(self, file_path: Path) -> ImageFacts:
        """
        Lit dimensions, format et transparence d'une image.

        Raises :
            ProbeFailure : image illisible
        """
        ...

    @abstractmethod
    def perceptual_hash(self, data: bytes) -> Optional[str]:
        """Calcule le hash perceptuel d'une image, None si le contenu n'est pas une image."""
        ...


class ITextProbe(ABC):
    """Interface d'analyse du debut d'un fichier texte."""

    @abstractmethod
    def probe(self, file_path: Path) -> TextFacts:
        """
        Lit l'echantillon initial et y cherche identifiants et horodatages.

        Raises :
            ProbeFailure : fichier illisible
        """
        ...

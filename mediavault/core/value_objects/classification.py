"""
Objets valeur du resultat de classification.

Le pipeline est une suite d'etapes pures : faits -> classifications
independantes (video, texte, image, audio, historique) -> decision.
Chaque etape retourne un objet immutable, ce qui rend la classification
d'un meme repertoire inchange strictement reproductible.

La decision de traitement est une union etiquetee (Automate | Escalate)
qui porte son propre raisonnement.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from mediavault.core.value_objects.file_facts import DiscStructureInfo


class ClassificationStatus(Enum):
    """Statut global d'un repertoire apres classification."""

    CAN_PROCESS = "can_process"
    CAN_PROCESS_WITH_UNKNOWNS = "can_process_with_unknowns"
    MANUAL_REQUIRED = "manual_required"


class AssetKind(str, Enum):
    """Role semantique d'un fichier utile, aussi type d'entree du cache."""

    POSTER = "poster"
    FANART = "fanart"
    BANNER = "banner"
    CLEARLOGO = "clearlogo"
    CLEARART = "clearart"
    DISCART = "discart"
    LANDSCAPE = "landscape"
    THUMB = "thumb"
    KEYART = "keyart"
    NFO = "nfo"
    SUBTITLE = "subtitle"
    TRAILER = "trailer"
    EXTRA = "extra"
    THEME = "theme"

    @property
    def is_image(self) -> bool:
        return self in IMAGE_KINDS


# Ordre de priorite fixe pour le typage des images
IMAGE_KINDS: tuple[AssetKind, ...] = (
    AssetKind.POSTER,
    AssetKind.FANART,
    AssetKind.BANNER,
    AssetKind.CLEARLOGO,
    AssetKind.CLEARART,
    AssetKind.DISCART,
    AssetKind.LANDSCAPE,
    AssetKind.THUMB,
    AssetKind.KEYART,
)

# Seuil d'acceptation automatique
AUTO_CONFIDENCE_THRESHOLD = 80


@dataclass(frozen=True)
class ClassifiedFile:
    """
    Fichier auquel un role a ete attribue.

    Attributs :
        path : Chemin du fichier (ou du sous-arbre pour un disque)
        kind : Role attribue (None pour la video principale)
        confidence : Confiance 0-100
        reasoning : Explication lisible de l'attribution
        detail : Precision du role (type d'extra, langue de sous-titre)
    """

    path: Path
    kind: Optional[AssetKind]
    confidence: int
    reasoning: str
    detail: Optional[str] = None


@dataclass(frozen=True)
class UnknownFile:
    """Fichier non classe, programme pour le recyclage a la publication."""

    path: Path
    reasoning: str


@dataclass(frozen=True)
class CandidateEvidence:
    """Trace d'un candidat video, conservee pour l'arbitrage humain."""

    path: Path
    duration_seconds: Optional[float]
    excluded: bool
    exclusion_keywords: tuple[str, ...] = ()
    confidence: int = 0


@dataclass(frozen=True)
class VideoClassification:
    """
    Resultat de l'arbre de decision video.

    main_video est None si aucune video principale n'a pu etre retenue ;
    failure_reason explique alors pourquoi.
    """

    main_video: Optional[ClassifiedFile] = None
    is_disc: bool = False
    trailers: tuple[ClassifiedFile, ...] = ()
    extras: tuple[ClassifiedFile, ...] = ()
    samples: tuple[ClassifiedFile, ...] = ()
    unknown: tuple[UnknownFile, ...] = ()
    candidates: tuple[CandidateEvidence, ...] = ()
    failure_reason: Optional[str] = None


@dataclass(frozen=True)
class TextClassification:
    """Fichiers texte verifies par leur contenu."""

    nfos: tuple[ClassifiedFile, ...] = ()
    subtitles: tuple[ClassifiedFile, ...] = ()
    unknown: tuple[UnknownFile, ...] = ()
    tmdb_id: Optional[str] = None
    imdb_id: Optional[str] = None

    @property
    def provider_id(self) -> Optional[str]:
        return self.tmdb_id or self.imdb_id


@dataclass(frozen=True)
class ImageClassification:
    """Images typees (premier type atteignant le seuil) et images inconnues."""

    images: tuple[ClassifiedFile, ...] = ()
    unknown: tuple[UnknownFile, ...] = ()


@dataclass(frozen=True)
class AudioClassification:
    themes: tuple[ClassifiedFile, ...] = ()
    unknown: tuple[UnknownFile, ...] = ()


@dataclass(frozen=True)
class LegacyClassification:
    """
    Contenu des repertoires historiques.

    Les images utiles sont mises en cache ; chaque repertoire est ensuite
    recycle d'un bloc, quels que soient les autres fichiers qu'il contient.
    """

    images: tuple[ClassifiedFile, ...] = ()
    directories: tuple[Path, ...] = ()
    ignored: tuple[Path, ...] = ()


@dataclass(frozen=True)
class ClassificationRules:
    """
    Regles transverses passees explicitement au classifieur.

    Attributs :
        known_bad_filenames : Noms (minuscules) toujours classes inconnus
        legacy_directories : Noms (minuscules) des repertoires historiques
    """

    known_bad_filenames: frozenset[str] = frozenset({"thumbs.db", ".ds_store", "desktop.ini"})
    legacy_directories: tuple[str, ...] = ("extrafanarts", "extrathumbs")

    @classmethod
    def from_names(
        cls, known_bad_filenames: Iterable[str], legacy_directories: Iterable[str]
    ) -> "ClassificationRules":
        """Construit les regles depuis la configuration (comparaison insensible a la casse)."""
        return cls(
            known_bad_filenames=frozenset(n.lower() for n in known_bad_filenames),
            legacy_directories=tuple(n.lower() for n in legacy_directories),
        )


@dataclass(frozen=True)
class Automate:
    """Decision automatique : le repertoire peut etre traite sans intervention."""

    status: ClassificationStatus
    confidence: int
    reason: str
    unknown_files: tuple[Path, ...] = ()


@dataclass(frozen=True)
class Escalate:
    """
    Decision manuelle : le traitement automatique est suspendu.

    Attributs :
        reason : Raison principale, lisible
        missing : Exigences non satisfaites (main_video, provider_id)
        evidence : Candidats video examines, avec leur confiance
    """

    reason: str
    missing: tuple[str, ...] = ()
    evidence: tuple[CandidateEvidence, ...] = ()

    @property
    def status(self) -> ClassificationStatus:
        return ClassificationStatus.MANUAL_REQUIRED

    @property
    def confidence(self) -> int:
        return 0


ProcessingDecision = Union[Automate, Escalate]


@dataclass(frozen=True)
class ClassificationResult:
    """
    Resultat complet de la classification d'un repertoire.

    Les listes par type d'image sont exposees en proprietes calculees
    a partir de `images`.
    """

    directory: Path
    decision: ProcessingDecision
    main_video: Optional[ClassifiedFile] = None
    disc: Optional[DiscStructureInfo] = None
    trailers: tuple[ClassifiedFile, ...] = ()
    extras: tuple[ClassifiedFile, ...] = ()
    samples: tuple[ClassifiedFile, ...] = ()
    images: tuple[ClassifiedFile, ...] = ()
    nfos: tuple[ClassifiedFile, ...] = ()
    subtitles: tuple[ClassifiedFile, ...] = ()
    themes: tuple[ClassifiedFile, ...] = ()
    legacy: LegacyClassification = field(default_factory=LegacyClassification)
    unknown: tuple[UnknownFile, ...] = ()
    provider_id: Optional[str] = None

    @property
    def status(self) -> ClassificationStatus:
        return self.decision.status

    @property
    def is_automatic(self) -> bool:
        return isinstance(self.decision, Automate)

    @property
    def short_names(self) -> bool:
        """Mode noms courts (disque) : images sans prefixe de titre."""
        return self.disc is not None

    def of_kind(self, kind: AssetKind) -> tuple[ClassifiedFile, ...]:
        return tuple(image for image in self.images if image.kind == kind)

    @property
    def posters(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.POSTER)

    @property
    def fanart(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.FANART)

    @property
    def banners(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.BANNER)

    @property
    def clearlogos(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.CLEARLOGO)

    @property
    def cleararts(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.CLEARART)

    @property
    def discarts(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.DISCART)

    @property
    def landscapes(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.LANDSCAPE)

    @property
    def thumbs(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.THUMB)

    @property
    def keyarts(self) -> tuple[ClassifiedFile, ...]:
        return self.of_kind(AssetKind.KEYART)

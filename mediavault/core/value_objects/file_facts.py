"""
Objets valeur decrivant les faits collectes sur un fichier.

Chaque sonde produit une sous-partie independante (systeme de fichiers,
nom de fichier, flux video, image, texte). Le contexte de repertoire est
ajoute en dernier, une fois toutes les sondes soeurs terminees.

Tous ces objets sont immutables : une etape du pipeline retourne de
nouveaux faits (dataclasses.replace) plutot que de modifier les existants.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class FileCategory(Enum):
    """Categorie d'un fichier deduite de son extension."""

    VIDEO = "video"
    IMAGE = "image"
    TEXT = "text"
    AUDIO = "audio"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True)
class FilesystemFacts:
    """
    Faits issus du systeme de fichiers (stat + decoupage du chemin).

    Attributs :
        path : Chemin absolu du fichier
        filename : Nom complet (avec extension)
        stem : Nom sans extension
        extension : Extension en minuscules, point inclus (".mkv")
        size_bytes : Taille en octets
        modified_at : Date de modification (timestamp POSIX)
        created_at : Date de creation ou de changement d'inode (timestamp POSIX)
        category : Categorie deduite de l'extension
    """

    path: Path
    filename: str
    stem: str
    extension: str
    size_bytes: int
    modified_at: float
    created_at: float
    category: FileCategory


@dataclass(frozen=True)
class FilenameFacts:
    """
    Signaux extraits du nom de fichier par l'analyseur.

    Attributs :
        year : Annee entre parentheses, crochets ou points
        resolution : Jeton de resolution (1080p, 4K...)
        codec : Jeton de codec (x264, HEVC...)
        quality_tags : Tags de source (BLURAY, WEB-DL...)
        audio_tags : Tags audio (DTS, ATMOS...)
        edition : Edition (Extended, Director's Cut...)
        has_exclusion_keyword : Vrai si un mot-cle d'exclusion est present
        exclusion_keywords : Mots-cles d'exclusion detectes, dans l'ordre de la table
        variant_number : Suffixe numerique de variante (fanart2 -> 2)
    """

    year: Optional[int] = None
    resolution: Optional[str] = None
    codec: Optional[str] = None
    quality_tags: tuple[str, ...] = ()
    audio_tags: tuple[str, ...] = ()
    edition: Optional[str] = None
    has_exclusion_keyword: bool = False
    exclusion_keywords: tuple[str, ...] = ()
    variant_number: Optional[int] = None


@dataclass(frozen=True)
class VideoStream:
    """Piste video d'un conteneur."""

    codec: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    frame_rate: Optional[float] = None
    hdr_format: Optional[str] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class AudioStream:
    """Piste audio d'un conteneur."""

    codec: Optional[str] = None
    channels: Optional[int] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class SubtitleStream:
    """Piste de sous-titres integree au conteneur."""

    codec: Optional[str] = None
    language: Optional[str] = None
    forced: bool = False


@dataclass(frozen=True)
class VideoStreamFacts:
    """
    Faits techniques extraits par la sonde video.

    Attributs :
        has_video_stream : Au moins une piste video decodable
        has_audio_stream : Au moins une piste audio
        duration_seconds : Duree en secondes (None si inconnue)
        video_streams : Pistes video
        audio_streams : Pistes audio
        subtitle_streams : Pistes de sous-titres
        container : Format du conteneur (Matroska, MPEG-4...)
    """

    has_video_stream: bool
    has_audio_stream: bool
    duration_seconds: Optional[float] = None
    video_streams: tuple[VideoStream, ...] = ()
    audio_streams: tuple[AudioStream, ...] = ()
    subtitle_streams: tuple[SubtitleStream, ...] = ()
    container: Optional[str] = None

    @property
    def resolution(self) -> Optional[tuple[int, int]]:
        """Resolution de la premiere piste video, si connue."""
        for stream in self.video_streams:
            if stream.width and stream.height:
                return stream.width, stream.height
        return None


@dataclass(frozen=True)
class ImageFacts:
    """
    Faits extraits par la sonde image.

    Attributs :
        width : Largeur en pixels
        height : Hauteur en pixels
        format : Format detecte (JPEG, PNG...)
        has_alpha : Presence d'un canal de transparence
    """

    width: int
    height: int
    format: Optional[str] = None
    has_alpha: bool = False

    @property
    def aspect_ratio(self) -> float:
        """Rapport largeur / hauteur."""
        return self.width / self.height if self.height else 0.0


@dataclass(frozen=True)
class TextFacts:
    """
    Faits extraits des premiers octets d'un fichier texte.

    Attributs :
        sample : Echantillon decode (premiers octets)
        tmdb_id : Identifiant TMDB detecte
        imdb_id : Identifiant IMDB detecte (tt...)
        looks_like_nfo : Element racine XML de type NFO present
        looks_like_subtitle : Motif d'horodatage de sous-titres present
        language : Langue detectee depuis le nom (Movie.fr.srt -> "fr")
    """

    sample: str = ""
    tmdb_id: Optional[str] = None
    imdb_id: Optional[str] = None
    looks_like_nfo: bool = False
    looks_like_subtitle: bool = False
    language: Optional[str] = None

    @property
    def has_provider_id(self) -> bool:
        """Vrai si un identifiant de fournisseur a ete detecte."""
        return self.tmdb_id is not None or self.imdb_id is not None


@dataclass(frozen=True)
class DirectoryContextFacts:
    """
    Position relative d'un fichier parmi ses voisins de meme categorie.

    Les rangs commencent a 1 (le plus grand / le plus long).
    """

    size_rank: int
    is_largest: bool
    percent_of_largest: float
    duration_rank: Optional[int] = None
    is_longest: bool = False
    percent_of_longest: Optional[float] = None
    category_count: int = 0
    category_total_bytes: int = 0


@dataclass(frozen=True)
class FileFacts:
    """
    Agregat de tous les faits connus sur un fichier.

    Les sous-parties optionnelles sont absentes quand la sonde correspondante
    ne s'applique pas ou a echoue.
    """

    filesystem: FilesystemFacts
    filename: FilenameFacts = field(default_factory=FilenameFacts)
    video: Optional[VideoStreamFacts] = None
    image: Optional[ImageFacts] = None
    text: Optional[TextFacts] = None
    context: Optional[DirectoryContextFacts] = None

    @property
    def path(self) -> Path:
        return self.filesystem.path

    @property
    def name(self) -> str:
        return self.filesystem.filename

    @property
    def category(self) -> FileCategory:
        return self.filesystem.category

    @property
    def duration_seconds(self) -> Optional[float]:
        return self.video.duration_seconds if self.video else None


class DiscType(Enum):
    """Structure de disque optique reconnue."""

    BDMV = "bdmv"
    VIDEO_TS = "video_ts"


@dataclass(frozen=True)
class DiscStructureInfo:
    """
    Resultat de la detection de structure de disque.

    Attributs :
        disc_type : BDMV ou VIDEO_TS
        root : Sous-arbre formant la video principale (dir/BDMV)
        marker : Fichier marqueur trouve (index.bdmv, VIDEO_TS.IFO)
        expected_nfo : Emplacement attendu du NFO dans le sous-arbre
    """

    disc_type: DiscType
    root: Path
    marker: Path
    expected_nfo: Path


@dataclass(frozen=True)
class LegacyDirectoryInfo:
    """Repertoire historique (extrafanarts...) et tous les fichiers qu'il contient."""

    path: Path
    name: str
    files: tuple[Path, ...] = ()


@dataclass(frozen=True)
class DirectoryScanFacts:
    """
    Faits de tout un repertoire, entree du classifieur.

    Attributs :
        directory : Repertoire scanne
        files : Faits des fichiers de premier niveau, tries par nom
        disc : Structure de disque detectee, si presente
        legacy_directories : Repertoires historiques, avec les faits de leurs fichiers
        legacy_files : Faits des fichiers contenus dans les repertoires historiques
    """

    directory: Path
    files: tuple[FileFacts, ...] = ()
    disc: Optional[DiscStructureInfo] = None
    legacy_directories: tuple[LegacyDirectoryInfo, ...] = ()
    legacy_files: tuple[FileFacts, ...] = ()

    def by_category(self, category: FileCategory) -> list[FileFacts]:
        return [f for f in self.files if f.category == category]


@dataclass(frozen=True)
class ScanHint:
    """
    Indication facultative fournie par l'appelant.

    Ne fait qu'augmenter la confiance : jamais necessaire a la justesse.

    Attributs :
        main_filename : Nom exact attendu pour la video principale
        provider_id : Identifiant de fournisseur deja connu (opaque)
    """

    main_filename: Optional[str] = None
    provider_id: Optional[str] = None

"""
Service de collecte des faits d'un repertoire.

Les sondes s'executent en parallele sur les fichiers d'un meme repertoire ;
le contexte de repertoire n'est calcule qu'apres la jonction de toutes les
sondes. Un echec de sonde rend seulement le fait correspondant absent.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from mediavault.adapters.file_system import categorize
from mediavault.adapters.parsing.filename_analyzer import analyze_filename
from mediavault.core.exceptions import ProbeFailure
from mediavault.core.ports.probes import IImageProbe, ITextProbe, IVideoProbe
from mediavault.core.ports.repositories import IProbeCacheRepository
from mediavault.core.value_objects import (
    DirectoryScanFacts,
    FileCategory,
    FileFacts,
    FilesystemFacts,
    ImageFacts,
    TextFacts,
    VideoStreamFacts,
)
from mediavault.infrastructure.persistence.hash_service import probe_cache_key
from mediavault.services.directory_context import compute_directory_context
from mediavault.services.disc_detector import detect_disc_structure, scan_legacy_directories


class FactGatheringService:
    """
    Collecte les faits de tous les fichiers d'un repertoire.

    Utilisation :
        service = FactGatheringService(video_probe, image_probe, text_probe)
        scan_facts = service.gather(Path("/media/Movie (2010)"))
    """

    def __init__(
        self,
        video_probe: IVideoProbe,
        image_probe: IImageProbe,
        text_probe: ITextProbe,
        probe_cache: Optional[IProbeCacheRepository] = None,
        max_workers: int = 4,
        legacy_directories: Sequence[str] = ("extrafanarts", "extrathumbs"),
    ) -> None:
        """
        Initialise le service avec ses sondes.

        Args :
            video_probe : Sonde video (pymediainfo)
            image_probe : Sonde image (Pillow)
            text_probe : Sonde texte
            probe_cache : Cache optionnel des sondes video par hash rapide
            max_workers : Nombre de sondes simultanees
            legacy_directories : Noms des repertoires historiques a lister
        """
        self._video_probe = video_probe
        self._image_probe = image_probe
        self._text_probe = text_probe
        self._probe_cache = probe_cache
        # La session SQLModel du cache de sondes n'est pas thread-safe
        self._probe_cache_lock = threading.Lock()
        self._max_workers = max_workers
        self._legacy_directories = tuple(legacy_directories)

    def gather(self, directory: Path) -> DirectoryScanFacts:
        """
        Collecte les faits d'un repertoire.

        Seuls les fichiers de premier niveau sont classes ; les sous-arbres
        de disque et les repertoires historiques sont traites a part.
        """
        disc = detect_disc_structure(directory)
        legacy = scan_legacy_directories(directory, self._legacy_directories)

        try:
            top_level = sorted(
                (p for p in directory.iterdir() if p.is_file()), key=lambda p: p.name
            )
        except OSError as e:
            logger.error(f"Repertoire illisible {directory}: {e}")
            top_level = []

        # Le NFO d'un disque vit dans le sous-arbre, mais se classe avec le reste
        if disc is not None and disc.expected_nfo.is_file():
            top_level.append(disc.expected_nfo)

        legacy_paths = [path for info in legacy for path in info.files]

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            file_futures = [executor.submit(self.gather_file, p) for p in top_level]
            legacy_futures = [executor.submit(self.gather_file, p) for p in legacy_paths]
            # Jonction : toutes les sondes doivent etre terminees
            files = [f.result() for f in file_futures]
            legacy_files = [f.result() for f in legacy_futures]

        files_with_context = compute_directory_context(
            [f for f in files if f is not None]
        )

        logger.info(
            f"Faits collectes pour {directory.name}: {len(files_with_context)} fichier(s), "
            f"disque={disc.disc_type.value if disc else 'non'}, "
            f"historiques={len(legacy_paths)}"
        )

        return DirectoryScanFacts(
            directory=directory,
            files=files_with_context,
            disc=disc,
            legacy_directories=legacy,
            legacy_files=tuple(f for f in legacy_files if f is not None),
        )

    def gather_file(self, path: Path) -> Optional[FileFacts]:
        """
        Collecte les faits d'un fichier.

        Retourne None uniquement si le fichier a disparu entre le listage et le stat.
        """
        try:
            stat = path.stat()
        except OSError as e:
            logger.warning(f"Stat impossible pour {path.name}: {e}")
            return None

        category = categorize(path)
        filesystem = FilesystemFacts(
            path=path,
            filename=path.name,
            stem=path.stem,
            extension=path.suffix.lower(),
            size_bytes=stat.st_size,
            modified_at=stat.st_mtime,
            created_at=stat.st_ctime,
            category=category,
        )

        video: Optional[VideoStreamFacts] = None
        image: Optional[ImageFacts] = None
        text: Optional[TextFacts] = None

        try:
            if category == FileCategory.VIDEO:
                video = self._probe_video(path)
            elif category == FileCategory.IMAGE:
                image = self._image_probe.probe(path)
            elif category == FileCategory.TEXT:
                text = self._text_probe.probe(path)
        except ProbeFailure as e:
            logger.warning(f"Sonde en echec, fait absent : {e}")

        return FileFacts(
            filesystem=filesystem,
            filename=analyze_filename(path.name),
            video=video,
            image=image,
            text=text,
        )

    def _probe_video(self, path: Path) -> VideoStreamFacts:
        """Sonde video, avec memoisation par cle de fichier si un cache est fourni."""
        if self._probe_cache is None:
            return self._video_probe.probe(path)

        try:
            cache_key = probe_cache_key(path)
        except OSError as e:
            raise ProbeFailure(path, "video", str(e)) from e

        with self._probe_cache_lock:
            cached = self._probe_cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Sonde video en cache pour {path.name}")
            return cached

        facts = self._video_probe.probe(path)
        with self._probe_cache_lock:
            self._probe_cache.save(cache_key, facts)
        return facts

"""
Cache adressable par contenu.

Chaque artefact est stocke une seule fois sous un nom derive d'un uuid,
`{cache_dir}/{type}/{id[:2]}/{id}{ext}`, et indexe en base par son hash
fort. Les contenus identiques partagent une entree (compteur de references) ;
les images quasi identiques ne sont fusionnees qu'au sein d'une meme portee
(entite, type d'asset).

Le ramasse-miettes ne supprime que les entrees sans reference, supprimees
logiquement depuis plus longtemps que la retention, et seulement si l'entree
n'a pas change depuis son observation (compare-and-delete).
"""

import uuid
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from mediavault.adapters.file_system import sha256_bytes
from mediavault.adapters.parsing.image_probe import hamming_distance
from mediavault.core.clock import Clock, utc_now
from mediavault.core.entities import CacheEntry
from mediavault.core.exceptions import (
    CacheEntryNotFound,
    CacheEntryTooLarge,
    CacheWriteError,
    CorruptionNotFound,
    IntegrityViolation,
)
from mediavault.core.ports.file_system import IFileSystem
from mediavault.core.ports.probes import IImageProbe
from mediavault.core.ports.repositories import ICacheEntryRepository
from mediavault.core.value_objects import AssetKind

# Nombre de tentatives d'insertion en cas de collision d'identifiant
MAX_INSERT_ATTEMPTS = 3


@dataclass(frozen=True)
class VerifyResult:
    """
    Resultat de la verification d'un fichier publie.

    Attributs :
        library_path : Fichier verifie
        healed : Vrai si le fichier a ete recopie depuis le cache
        expected : Hash fort attendu
        actual : Hash constate avant reparation (None si absent)
    """

    library_path: Path
    healed: bool
    expected: str
    actual: Optional[str]


@dataclass
class GarbageCollectionResult:
    """Bilan d'un passage du ramasse-miettes."""

    deleted: int = 0
    freed_bytes: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CacheStats:
    """Statistiques de l'index du cache."""

    entry_count: int
    referenced_count: int
    soft_deleted_count: int
    total_bytes: int
    by_kind: dict[str, int]


@dataclass
class StoreVerification:
    """Bilan de la verification complete du cache."""

    checked: int = 0
    missing: list[str] = field(default_factory=list)
    corrupted: list[str] = field(default_factory=list)

    @property
    def is_healthy(self) -> bool:
        return not self.missing and not self.corrupted


class CacheStore:
    """
    Stockage des artefacts de bibliotheque (images, NFO, sous-titres, bandes-annonces...).

    Utilisation :
        store = CacheStore(repository, file_system, image_probe, Path("~/.mediavault/cache"))
        entry = store.put(poster_bytes, AssetKind.POSTER, ".jpg", entity_key="tmdb:603")
        data = store.get(entry.id)
    """

    def __init__(
        self,
        repository: ICacheEntryRepository,
        file_system: IFileSystem,
        image_probe: IImageProbe,
        cache_dir: Path,
        max_entry_bytes: int = 512 * 1024 * 1024,
        phash_max_distance: int = 4,
        clock: Clock = utc_now,
    ) -> None:
        """
        Initialise le cache.

        Args :
            repository : Index des entrees
            file_system : Operations fichiers
            image_probe : Sonde image (hash perceptuel)
            cache_dir : Racine du stockage des artefacts
            max_entry_bytes : Taille maximale d'un artefact
            phash_max_distance : Distance de Hamming maximale entre quasi-doublons
            clock : Horloge (injectee pour les tests)
        """
        self._repository = repository
        self._file_system = file_system
        self._image_probe = image_probe
        self._cache_dir = cache_dir
        self._max_entry_bytes = max_entry_bytes
        self._phash_max_distance = phash_max_distance
        self._clock = clock

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def storage_path_for(
        self, kind: AssetKind, entry_id: str, extension: Optional[str] = None
    ) -> Path:
        """Chemin de stockage d'un artefact, reparti par type puis par prefixe d'id."""
        suffix = ""
        if extension:
            suffix = extension.lower() if extension.startswith(".") else f".{extension.lower()}"
        return self._cache_dir / kind.value / entry_id[:2] / f"{entry_id}{suffix}"

    def put(
        self,
        data: bytes,
        kind: Union[AssetKind, str],
        extension: Optional[str] = None,
        entity_key: Optional[str] = None,
    ) -> CacheEntry:
        """
        Stocke un contenu et retourne son entree.

        Un contenu deja present (meme hash fort) ou une image quasi identique
        dans la meme portee reutilise l'entree existante et incremente son
        compteur de references.

        Raises :
            CacheEntryTooLarge : contenu au-dela du plafond configure
            CacheWriteError : ecriture de l'artefact impossible
        """
        kind = AssetKind(kind)
        if len(data) > self._max_entry_bytes:
            raise CacheEntryTooLarge(len(data), self._max_entry_bytes)

        content_hash = sha256_bytes(data)

        reused = self._acquire_by_hash(content_hash)
        if reused is not None:
            logger.debug(f"Contenu deja en cache ({kind.value}): {reused.id}")
            return reused

        perceptual_hash = None
        if kind.is_image:
            perceptual_hash = self._image_probe.perceptual_hash(data)
            if perceptual_hash and entity_key:
                reused = self._acquire_near_duplicate(perceptual_hash, kind, entity_key)
                if reused is not None:
                    return reused

        for _ in range(MAX_INSERT_ATTEMPTS):
            entry_id = uuid.uuid4().hex
            storage_path = self.storage_path_for(kind, entry_id, extension)

            if not self._file_system.write_atomic(data, storage_path):
                raise CacheWriteError(storage_path)

            now = self._clock()
            entry = CacheEntry(
                id=entry_id,
                content_hash=content_hash,
                storage_path=storage_path,
                size_bytes=len(data),
                asset_kind=kind.value,
                perceptual_hash=perceptual_hash,
                entity_key=entity_key,
                reference_count=1,
                created_at=now,
                last_used_at=now,
            )
            if self._repository.insert(entry):
                logger.info(f"Nouvelle entree de cache {kind.value}: {entry_id} ({len(data)} octets)")
                return entry

            # Conflit : un autre ecrivain a indexe le meme contenu, ou collision d'id
            self._file_system.delete(storage_path)
            reused = self._acquire_by_hash(content_hash)
            if reused is not None:
                logger.debug(f"Ecriture concurrente du meme contenu, reutilisation de {reused.id}")
                return reused

        raise CacheWriteError(storage_path)

    def put_file(
        self,
        path: Path,
        kind: Union[AssetKind, str],
        entity_key: Optional[str] = None,
    ) -> CacheEntry:
        """Stocke le contenu d'un fichier, en conservant son extension."""
        kind = AssetKind(kind)
        size = self._file_system.get_size(path)
        if size > self._max_entry_bytes:
            raise CacheEntryTooLarge(size, self._max_entry_bytes)
        return self.put(self._file_system.read_bytes(path), kind, path.suffix, entity_key)

    def get(self, entry_id: str) -> bytes:
        """
        Lit le contenu d'une entree.

        Raises :
            CacheEntryNotFound : identifiant inconnu de l'index
            CorruptionNotFound : entree indexee mais artefact absent du disque
        """
        entry = self._repository.get_by_id(entry_id)
        if entry is None:
            raise CacheEntryNotFound(entry_id)

        if not self._file_system.exists(entry.storage_path):
            error = CorruptionNotFound(entry_id, entry.storage_path)
            logger.error(str(error))
            raise error

        try:
            data = self._file_system.read_bytes(entry.storage_path)
        except OSError as e:
            error = CorruptionNotFound(entry_id, entry.storage_path)
            logger.error(f"{error}: {e}")
            raise error from e

        self._repository.touch(entry_id, self._clock())
        return data

    def get_entry(self, entry_id: str) -> CacheEntry:
        """Recupere l'entree d'index (CacheEntryNotFound si inconnue)."""
        entry = self._repository.get_by_id(entry_id)
        if entry is None:
            raise CacheEntryNotFound(entry_id)
        return entry

    def acquire(self, entry_id: str) -> CacheEntry:
        """Ajoute une reference a une entree existante."""
        if not self._repository.acquire(entry_id, self._clock()):
            raise CacheEntryNotFound(entry_id)
        return self.get_entry(entry_id)

    def release(self, entry_id: str) -> int:
        """
        Retire une reference. A zero, l'entree est supprimee logiquement
        et devient eligible au ramasse-miettes apres la retention.

        Retourne :
            Le nouveau compteur de references
        """
        count = self._repository.release(entry_id, self._clock())
        if count is None:
            raise CacheEntryNotFound(entry_id)
        if count == 0:
            logger.debug(f"Entree de cache sans reference: {entry_id}")
        return count

    def verify(self, library_path: Path, entry: CacheEntry) -> VerifyResult:
        """
        Verifie un fichier publie contre son entree de cache, et le repare si besoin.

        Un ecart est journalise comme violation d'integrite puis corrige en
        recopiant l'artefact du cache.

        Raises :
            IntegrityViolation : l'artefact du cache est lui-meme absent ou corrompu
        """
        actual = self._file_system.calculate_hash(library_path)
        if actual == entry.content_hash:
            return VerifyResult(library_path, False, entry.content_hash, actual)

        violation = IntegrityViolation(library_path, entry.content_hash, actual)
        logger.warning(f"{violation}, reparation depuis le cache")

        cached = self._file_system.calculate_hash(entry.storage_path)
        if cached != entry.content_hash:
            cache_violation = IntegrityViolation(entry.storage_path, entry.content_hash, cached)
            logger.error(f"Artefact du cache inutilisable: {cache_violation}")
            raise cache_violation

        if not self._file_system.copy(entry.storage_path, library_path):
            logger.error(f"Reparation impossible de {library_path}")
            raise violation

        logger.info(f"Fichier repare depuis le cache: {library_path}")
        return VerifyResult(library_path, True, entry.content_hash, actual)

    def garbage_collect(self, retention: timedelta) -> GarbageCollectionResult:
        """
        Supprime les entrees sans reference dont la suppression logique
        est plus ancienne que la retention.

        Une entree re-referencee (ou re-supprimee) entre l'observation et la
        suppression est ignoree.
        """
        result = GarbageCollectionResult()
        cutoff = self._clock() - retention

        for entry in self._repository.list_gc_candidates(cutoff):
            if entry.deleted_at is None:
                continue
            if not self._repository.delete_if_unchanged(entry.id, entry.deleted_at):
                logger.debug(f"Entree modifiee depuis l'observation, ignoree: {entry.id}")
                result.skipped += 1
                continue

            if self._file_system.exists(entry.storage_path) and not self._file_system.delete(
                entry.storage_path
            ):
                result.errors.append(f"{entry.id}: unable to delete {entry.storage_path}")
                logger.error(f"Suppression impossible de l'artefact {entry.storage_path}")

            result.deleted += 1
            result.freed_bytes += entry.size_bytes

        logger.info(
            f"Ramasse-miettes: {result.deleted} entree(s) supprimee(s), "
            f"{result.freed_bytes} octets liberes, {result.skipped} ignoree(s)"
        )
        return result

    def stats(self) -> CacheStats:
        """Statistiques agregees de l'index."""
        entries = self._repository.list_all()
        by_kind: dict[str, int] = {}
        for entry in entries:
            by_kind[entry.asset_kind] = by_kind.get(entry.asset_kind, 0) + 1
        return CacheStats(
            entry_count=len(entries),
            referenced_count=sum(1 for e in entries if e.reference_count > 0),
            soft_deleted_count=sum(1 for e in entries if e.is_soft_deleted),
            total_bytes=sum(e.size_bytes for e in entries),
            by_kind=by_kind,
        )

    def verify_store(self) -> StoreVerification:
        """Parcourt l'index et signale les artefacts absents ou corrompus."""
        report = StoreVerification()
        for entry in self._repository.list_all():
            report.checked += 1
            if not self._file_system.exists(entry.storage_path):
                report.missing.append(entry.id)
                logger.error(str(CorruptionNotFound(entry.id, entry.storage_path)))
                continue
            actual = self._file_system.calculate_hash(entry.storage_path)
            if actual != entry.content_hash:
                report.corrupted.append(entry.id)
                logger.error(str(IntegrityViolation(entry.storage_path, entry.content_hash, actual)))
        return report

    def _acquire_by_hash(self, content_hash: str) -> Optional[CacheEntry]:
        existing = self._repository.get_by_hash(content_hash)
        if existing is None:
            return None
        if not self._repository.acquire(existing.id, self._clock()):
            # Supprimee par le ramasse-miettes entre la lecture et l'increment
            return None
        return self._repository.get_by_id(existing.id)

    def _acquire_near_duplicate(
        self, perceptual_hash: str, kind: AssetKind, entity_key: str
    ) -> Optional[CacheEntry]:
        """Reutilise l'image la plus proche de la meme portee, si assez proche."""
        best: Optional[CacheEntry] = None
        best_distance = self._phash_max_distance + 1
        for candidate in self._repository.find_in_scope(entity_key, kind.value):
            if not candidate.perceptual_hash or len(candidate.perceptual_hash) != len(perceptual_hash):
                continue
            distance = hamming_distance(perceptual_hash, candidate.perceptual_hash)
            if distance < best_distance:
                best, best_distance = candidate, distance

        if best is None or not self._repository.acquire(best.id, self._clock()):
            return None

        logger.info(
            f"Quasi-doublon {kind.value} pour {entity_key} (distance {best_distance}), "
            f"reutilisation de {best.id}"
        )
        return self._repository.get_by_id(best.id)

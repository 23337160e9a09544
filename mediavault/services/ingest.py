"""
Integration d'un repertoire classe automatiquement.

Apres une decision Automate, les fichiers utiles sont mis en cache (NFO,
sous-titres, bandes-annonces, extras hors echantillons, theme, images et
images historiques). La finalisation publie ces elements puis recycle les
fichiers inconnus, les repertoires historiques et, pour une publication
sur place, les originaux remplaces par leur nom publie.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from mediavault.core.exceptions import (
    CacheEntryTooLarge,
    CacheWriteError,
    FileOperationError,
)
from mediavault.core.ports.file_system import IFileSystem
from mediavault.core.value_objects import (
    AssetKind,
    ClassificationResult,
    ClassifiedFile,
    Escalate,
)
from mediavault.services.cache_store import CacheStore
from mediavault.services.library_naming import PublishItem
from mediavault.services.publisher import PublisherService, PublishResult
from mediavault.services.recycler import RecyclerService


@dataclass
class IngestPlan:
    """
    Elements mis en cache pour un repertoire, prets a etre publies.

    Attributs :
        result : Classification d'origine
        items : Elements a publier
        errors : Fichiers n'ayant pas pu etre mis en cache
    """

    result: ClassificationResult
    items: list[PublishItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class FinalizeResult:
    """Bilan de la finalisation : publication puis recyclage."""

    publish: PublishResult
    recycled: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def entity_key_for(result: ClassificationResult) -> str:
    """Portee des quasi-doublons : l'identifiant fournisseur, sinon le repertoire."""
    if result.provider_id:
        return f"provider:{result.provider_id}"
    return f"directory:{result.directory}"


class IngestService:
    """
    Met en cache, publie et nettoie un repertoire resolu.

    Utilisation :
        plan = ingest.ingest(result)
        ingest.finalize(plan)
    """

    def __init__(
        self,
        cache_store: CacheStore,
        publisher: PublisherService,
        recycler: RecyclerService,
        file_system: IFileSystem,
    ) -> None:
        self._cache_store = cache_store
        self._publisher = publisher
        self._recycler = recycler
        self._file_system = file_system

    def ingest(self, result: ClassificationResult) -> IngestPlan:
        """
        Met en cache les fichiers utiles d'un repertoire resolu.

        Raises :
            ValueError : la classification n'autorise pas le traitement automatique
        """
        if isinstance(result.decision, Escalate):
            raise ValueError(f"{result.directory} requires manual processing")

        plan = IngestPlan(result=result)
        entity_key = entity_key_for(result)
        counters: dict[tuple[AssetKind, Optional[str]], int] = {}

        def add(files: Iterable[ClassifiedFile], kind: Optional[AssetKind] = None) -> None:
            for classified in files:
                asset_kind = kind or classified.kind
                detail = classified.detail
                key = (asset_kind, detail if asset_kind in (AssetKind.SUBTITLE, AssetKind.EXTRA) else None)
                try:
                    entry = self._cache_store.put_file(classified.path, asset_kind, entity_key)
                except (OSError, CacheEntryTooLarge, CacheWriteError) as e:
                    plan.errors.append(f"{classified.path.name}: {e}")
                    logger.error(f"Mise en cache impossible de {classified.path.name}: {e}")
                    continue
                index = counters.get(key, 0)
                counters[key] = index + 1
                plan.items.append(
                    PublishItem(
                        cache_entry_id=entry.id,
                        kind=asset_kind,
                        extension=classified.path.suffix.lower(),
                        index=index,
                        detail=detail,
                        source=classified.path,
                    )
                )

        # Un seul NFO publie par repertoire
        add(result.nfos[:1], AssetKind.NFO)
        add(result.subtitles, AssetKind.SUBTITLE)
        add(result.trailers, AssetKind.TRAILER)
        add(result.extras, AssetKind.EXTRA)
        add(result.themes, AssetKind.THEME)
        add(result.images)
        add(result.legacy.images)

        logger.info(
            f"{len(plan.items)} element(s) mis en cache pour {result.directory.name}"
            + (f", {len(plan.errors)} erreur(s)" if plan.errors else "")
        )
        return plan

    def finalize(self, plan: IngestPlan, library_dir: Optional[Path] = None) -> FinalizeResult:
        """
        Publie les elements du plan puis recycle ce qui n'a plus sa place.

        Args :
            plan : Plan issu de ingest()
            library_dir : Repertoire de publication (par defaut, le repertoire scanne)
        """
        result = plan.result
        directory = library_dir or result.directory
        main_video = result.main_video.path
        base = None if result.short_names else main_video.stem

        published = self._publisher.publish(directory, plan.items, base, result.short_names)
        finalized = FinalizeResult(publish=published)

        # Le sous-arbre du disque appartient a la video principale ; les
        # repertoires historiques sont recycles en entier
        disc_root = result.disc.root if result.disc is not None else None
        protected_roots = list(result.legacy.directories)
        if disc_root is not None:
            protected_roots.append(disc_root)

        def is_protected(path: Path) -> bool:
            return any(path.is_relative_to(root) for root in protected_roots)

        targets: list[tuple[Path, str]] = []
        for unknown in result.unknown:
            if disc_root is not None and unknown.path.is_relative_to(disc_root):
                logger.warning(f"Fichier inconnu conserve dans le disque : {unknown.path}")
                continue
            if is_protected(unknown.path):
                continue
            targets.append((unknown.path, "unknown"))
        targets += [(d, "legacy_directory") for d in result.legacy.directories]

        if directory == result.directory:
            for item in plan.items:
                source = item.source
                if source is None or is_protected(source):
                    continue
                if any(self._file_system.same_file(source, p) for p in published.paths):
                    continue
                targets.append((source, "replaced"))

        for target, reason in targets:
            if not target.exists():
                continue
            try:
                self._recycler.recycle(target, main_video, reason)
                finalized.recycled.append(target)
            except FileOperationError as e:
                finalized.errors.append(str(e))
                logger.error(str(e))

        logger.info(
            f"Finalisation de {result.directory.name}: "
            f"{len(published.paths)} publie(s), {len(finalized.recycled)} recycle(s)"
        )
        return finalized

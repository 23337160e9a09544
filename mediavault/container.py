"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI.
Inclut les sondes, les repositories SQLModel et les services du cache.
"""

from datetime import timedelta

from dependency_injector import containers, providers

from .adapters.file_system import FileSystemAdapter
from .adapters.parsing.image_probe import PillowImageProbe
from .adapters.parsing.mediainfo_extractor import MediaInfoExtractor
from .adapters.parsing.text_probe import TextSampleProbe
from .config import Settings
from .core.value_objects import ClassificationRules
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.repositories import (
    SQLModelCacheEntryRepository,
    SQLModelClassificationFailureRepository,
    SQLModelLibraryEntryRepository,
    SQLModelProbeCacheRepository,
    SQLModelRecycleRecordRepository,
)
from .services.cache_store import CacheStore
from .services.classification import DirectoryClassifier
from .services.fact_gathering import FactGatheringService
from .services.ingest import IngestService
from .services.publisher import PublisherService
from .services.recycler import RecyclerService
from .services.scan import ScanService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        result = container.scan_service().scan(directory)
        store = container.cache_store()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session factory - nouvelle session a chaque appel
    session = providers.Factory(lambda: next(get_session()))

    # Adapters - implementations concretes des ports
    file_system = providers.Singleton(FileSystemAdapter)
    video_probe = providers.Singleton(
        MediaInfoExtractor,
        timeout_seconds=config.provided.video_probe_timeout_seconds,
        max_workers=config.provided.probe_workers,
    )
    image_probe = providers.Singleton(PillowImageProbe)
    text_probe = providers.Singleton(
        TextSampleProbe,
        sample_bytes=config.provided.text_sample_bytes,
    )

    # Repositories - Factory pour nouvelle instance avec session fraiche
    cache_entry_repository = providers.Factory(
        SQLModelCacheEntryRepository,
        session=session,
    )
    library_entry_repository = providers.Factory(
        SQLModelLibraryEntryRepository,
        session=session,
    )
    recycle_record_repository = providers.Factory(
        SQLModelRecycleRecordRepository,
        session=session,
    )
    classification_failure_repository = providers.Factory(
        SQLModelClassificationFailureRepository,
        session=session,
    )
    probe_cache_repository = providers.Factory(
        SQLModelProbeCacheRepository,
        session=session,
    )

    # Regles de classification (stateless - Singleton)
    classification_rules = providers.Singleton(
        ClassificationRules.from_names,
        known_bad_filenames=config.provided.known_bad_filenames,
        legacy_directories=config.provided.legacy_directories,
    )
    classifier = providers.Singleton(DirectoryClassifier, rules=classification_rules)

    # Pipeline de scan - Factory car depend de repositories (sessions fraiches)
    fact_gathering_service = providers.Factory(
        FactGatheringService,
        video_probe=video_probe,
        image_probe=image_probe,
        text_probe=text_probe,
        probe_cache=probe_cache_repository,
        max_workers=config.provided.probe_workers,
        legacy_directories=config.provided.legacy_directories,
    )
    scan_service = providers.Factory(
        ScanService,
        fact_gathering=fact_gathering_service,
        classifier=classifier,
        failure_repository=classification_failure_repository,
    )

    # Cache, publication et corbeille
    cache_store = providers.Factory(
        CacheStore,
        repository=cache_entry_repository,
        file_system=file_system,
        image_probe=image_probe,
        cache_dir=config.provided.cache_dir,
        max_entry_bytes=config.provided.max_cache_entry_bytes,
        phash_max_distance=config.provided.phash_max_distance,
    )
    publisher_service = providers.Factory(
        PublisherService,
        cache_store=cache_store,
        file_system=file_system,
        repository=library_entry_repository,
    )
    recycler_service = providers.Factory(
        RecyclerService,
        recycle_dir=config.provided.recycle_dir,
        file_system=file_system,
        repository=recycle_record_repository,
    )
    ingest_service = providers.Factory(
        IngestService,
        cache_store=cache_store,
        publisher=publisher_service,
        recycler=recycler_service,
        file_system=file_system,
    )

    # Retention du ramasse-miettes
    gc_retention = providers.Factory(
        lambda days: timedelta(days=days),
        days=config.provided.gc_retention_days,
    )

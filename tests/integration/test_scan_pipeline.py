"""
Tests d'integration du pipeline complet avec les vrais adaptateurs.

Seule la sonde video est simulee (pas de fichiers video reels) :
FileSystemAdapter, sonde image Pillow, sonde texte, repositories SQLModel,
cache, publication et corbeille sont les implementations reelles.
"""

from pathlib import Path
from typing import Callable

import pytest

from mediavault.adapters.file_system import FileSystemAdapter
from mediavault.adapters.parsing.image_probe import PillowImageProbe
from mediavault.adapters.parsing.text_probe import TextSampleProbe
from mediavault.core.value_objects import AssetKind, ClassificationStatus, ScanHint
from mediavault.infrastructure.persistence.repositories import (
    SQLModelCacheEntryRepository,
    SQLModelClassificationFailureRepository,
    SQLModelLibraryEntryRepository,
    SQLModelProbeCacheRepository,
    SQLModelRecycleRecordRepository,
)
from mediavault.services.cache_store import CacheStore
from mediavault.services.classification import DirectoryClassifier
from mediavault.services.fact_gathering import FactGatheringService
from mediavault.services.ingest import IngestService
from mediavault.services.publisher import PublisherService
from mediavault.services.recycler import RecyclerService
from mediavault.services.scan import ScanService

NFO = "<movie>\n  <title>Movie</title>\n  <tmdbid>27205</tmdbid>\n</movie>\n"


@pytest.fixture
def durations() -> dict[str, float]:
    """Durees sondees par nom de fichier, renseignees par chaque test."""
    return {}


@pytest.fixture
def scan_service(session, clock, mock_video_probe, make_video, durations) -> ScanService:
    mock_video_probe.probe.side_effect = lambda path: make_video(durations[path.name])
    fact_gathering = FactGatheringService(
        mock_video_probe,
        PillowImageProbe(),
        TextSampleProbe(),
        probe_cache=SQLModelProbeCacheRepository(session),
    )
    return ScanService(
        fact_gathering,
        DirectoryClassifier(),
        SQLModelClassificationFailureRepository(session),
        clock,
    )


@pytest.fixture
def ingest_service(session, clock, tmp_path: Path) -> IngestService:
    file_system = FileSystemAdapter()
    store = CacheStore(
        SQLModelCacheEntryRepository(session),
        file_system,
        PillowImageProbe(),
        tmp_path / "cache",
        clock=clock,
    )
    publisher = PublisherService(store, file_system, SQLModelLibraryEntryRepository(session), clock)
    recycler = RecyclerService(
        tmp_path / "recycle", file_system, SQLModelRecycleRecordRepository(session), clock
    )
    return IngestService(store, publisher, recycler, file_system)


@pytest.fixture
def movie_dir(tmp_path: Path, make_image: Callable[..., Path], durations) -> Path:
    """Film, bande-annonce, poster et fanart generiques, NFO avec identifiant."""
    directory = tmp_path / "library" / "Movie"
    directory.mkdir(parents=True)
    (directory / "Movie.mkv").write_bytes(b"M" * 8192)
    (directory / "Movie-trailer.mkv").write_bytes(b"T" * 16384)
    (directory / "movie.nfo").write_text(NFO)
    make_image(directory / "poster.jpg", (2000, 3000), seed=1)
    make_image(directory / "fanart.jpg", (1920, 1080), seed=2)
    durations.update({"Movie.mkv": 5400.0, "Movie-trailer.mkv": 120.0})
    return directory


class TestScanScenarios:
    def test_complete_movie_directory(self, scan_service: ScanService, movie_dir: Path) -> None:
        result = scan_service.scan(movie_dir)

        assert result.status == ClassificationStatus.CAN_PROCESS
        assert result.main_video.path == movie_dir / "Movie.mkv"
        # La bande-annonce est plus lourde, mais plus courte
        assert [t.path.name for t in result.trailers] == ["Movie-trailer.mkv"]
        assert [(p.path.name, p.confidence) for p in result.posters] == [("poster.jpg", 80)]
        assert [(f.path.name, f.confidence) for f in result.fanart] == [("fanart.jpg", 80)]
        assert [n.path.name for n in result.nfos] == ["movie.nfo"]
        assert result.provider_id == "27205"

    def test_tied_durations_require_manual_processing(
        self, scan_service: ScanService, tmp_path: Path, durations
    ) -> None:
        directory = tmp_path / "Twins"
        directory.mkdir()
        (directory / "Version A.mkv").write_bytes(b"A" * 1024)
        (directory / "Version B.mkv").write_bytes(b"B" * 2048)
        (directory / "movie.nfo").write_text(NFO)
        durations.update({"Version A.mkv": 5400.0, "Version B.mkv": 5400.0})

        result = scan_service.scan(directory)

        assert result.status == ClassificationStatus.MANUAL_REQUIRED
        assert result.decision.reason == "ambiguous main video: tied duration"
        failures = scan_service.list_failures()
        assert [f.directory for f in failures] == [directory]
        assert {e["path"] for e in failures[0].evidence} == {
            str(directory / "Version A.mkv"),
            str(directory / "Version B.mkv"),
        }

    def test_disc_structure(
        self, scan_service: ScanService, tmp_path: Path, make_image: Callable[..., Path]
    ) -> None:
        directory = tmp_path / "Disc Movie"
        (directory / "BDMV" / "STREAM").mkdir(parents=True)
        (directory / "BDMV" / "index.bdmv").write_bytes(b"INDX0200")
        (directory / "BDMV" / "STREAM" / "00000.m2ts").write_bytes(b"stream")
        make_image(directory / "poster.jpg", (1000, 1426), seed=3)

        result = scan_service.scan(directory, ScanHint(provider_id="27205"))

        assert result.status == ClassificationStatus.CAN_PROCESS
        assert result.main_video.path == directory / "BDMV"
        assert result.main_video.confidence == 100
        assert result.short_names
        assert [(p.path.name, p.confidence) for p in result.posters] == [("poster.jpg", 90)]

    def test_missing_provider_id(self, scan_service: ScanService, movie_dir: Path) -> None:
        (movie_dir / "movie.nfo").unlink()

        result = scan_service.scan(movie_dir)

        assert result.status == ClassificationStatus.MANUAL_REQUIRED
        assert result.decision.missing == ("provider_id",)


class TestProcessDirectory:
    def test_scan_ingest_and_finalize(
        self, scan_service: ScanService, ingest_service: IngestService, movie_dir: Path
    ) -> None:
        (movie_dir / "Thumbs.db").write_bytes(b"\x00\x01")
        result = scan_service.scan(movie_dir)
        assert result.status == ClassificationStatus.CAN_PROCESS_WITH_UNKNOWNS

        plan = ingest_service.ingest(result)
        finalized = ingest_service.finalize(plan)

        assert {item.kind for item in plan.items} == {
            AssetKind.NFO,
            AssetKind.TRAILER,
            AssetKind.POSTER,
            AssetKind.FANART,
        }
        assert sorted(p.name for p in movie_dir.iterdir()) == [
            "Movie-fanart.jpg",
            "Movie-poster.jpg",
            "Movie-trailer.mkv",
            "Movie.mkv",
            "Movie.nfo",
        ]
        assert sorted(p.name for p in finalized.recycled) == [
            "Thumbs.db",
            "fanart.jpg",
            "movie.nfo",
            "poster.jpg",
        ]

        # Un nouveau scan reconnait les noms publies comme noms attendus exacts
        rescan = scan_service.scan(movie_dir)
        assert rescan.status == ClassificationStatus.CAN_PROCESS
        assert [(p.path.name, p.confidence) for p in rescan.posters] == [("Movie-poster.jpg", 90)]

    def test_unverified_disc_nfo_stays_in_disc(
        self,
        scan_service: ScanService,
        ingest_service: IngestService,
        tmp_path: Path,
        make_image: Callable[..., Path],
    ) -> None:
        directory = tmp_path / "Disc Movie"
        (directory / "BDMV" / "STREAM").mkdir(parents=True)
        (directory / "BDMV" / "index.bdmv").write_bytes(b"INDX0200")
        (directory / "BDMV" / "STREAM" / "00000.m2ts").write_bytes(b"stream")
        (directory / "BDMV" / "index.nfo").write_text("just some release notes, no xml")
        make_image(directory / "poster.jpg", (1000, 1426), seed=3)

        result = scan_service.scan(directory, ScanHint(provider_id="27205"))
        assert result.status == ClassificationStatus.CAN_PROCESS_WITH_UNKNOWNS
        assert [u.path for u in result.unknown] == [directory / "BDMV" / "index.nfo"]

        finalized = ingest_service.finalize(ingest_service.ingest(result))

        assert finalized.errors == []
        assert finalized.recycled == []
        assert (directory / "BDMV" / "index.nfo").exists()
        assert (directory / "BDMV" / "STREAM" / "00000.m2ts").exists()
        assert (directory / "poster.jpg").exists()

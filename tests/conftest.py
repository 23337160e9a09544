"""
Fixtures pytest partagees pour les tests MediaVault.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires
- Base SQLite en memoire et session SQLModel
- Fabriques de faits (FileFacts, DirectoryScanFacts) pour les classifieurs
- Fabrique d'images reelles via Pillow
"""

import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator, Optional
from unittest.mock import MagicMock

import pytest
from PIL import Image
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from mediavault.adapters.file_system import categorize
from mediavault.adapters.parsing.filename_analyzer import analyze_filename
from mediavault.config import Settings
from mediavault.core.ports.probes import IImageProbe, ITextProbe, IVideoProbe
from mediavault.core.value_objects import (
    DirectoryScanFacts,
    DiscStructureInfo,
    FileFacts,
    FilesystemFacts,
    ImageFacts,
    LegacyDirectoryInfo,
    TextFacts,
    VideoStreamFacts,
)
from mediavault.infrastructure.persistence import models  # noqa: F401
from mediavault.services.directory_context import compute_directory_context

MOVIE_DIR = Path("/media/Films/Inception (2010)")


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isoles dans tmp_path (le fichier .env est ignore)."""
    return Settings(
        _env_file=None,
        cache_dir=tmp_path / "cache",
        recycle_dir=tmp_path / "recycle",
        database_url=f"sqlite:///{tmp_path}/test.db",
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def engine():
    """Engine SQLite en memoire partage par toutes les sessions du test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


class FakeClock:
    """Horloge controlable pour les tests de retention."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_video_probe() -> MagicMock:
    return MagicMock(spec=IVideoProbe)


@pytest.fixture
def mock_image_probe() -> MagicMock:
    mock = MagicMock(spec=IImageProbe)
    mock.perceptual_hash.return_value = None
    return mock


@pytest.fixture
def mock_text_probe() -> MagicMock:
    return MagicMock(spec=ITextProbe)


@pytest.fixture
def make_video() -> Callable[..., VideoStreamFacts]:
    """Fabrique de faits video minimaux : make_video(8880)."""

    def _make(duration: Optional[float], has_video_stream: bool = True) -> VideoStreamFacts:
        return VideoStreamFacts(
            has_video_stream=has_video_stream,
            has_audio_stream=True,
            duration_seconds=duration,
        )

    return _make


@pytest.fixture
def make_facts() -> Callable[..., FileFacts]:
    """
    Fabrique de FileFacts.

    Usage:
        make_facts("Inception.mkv", size=8_000_000_000, video=make_video(8880))
    """

    def _make(
        name: str,
        size: int = 1024,
        directory: Path = MOVIE_DIR,
        video: Optional[VideoStreamFacts] = None,
        image: Optional[ImageFacts] = None,
        text: Optional[TextFacts] = None,
        path: Optional[Path] = None,
    ) -> FileFacts:
        file_path = path or directory / name
        return FileFacts(
            filesystem=FilesystemFacts(
                path=file_path,
                filename=file_path.name,
                stem=file_path.stem,
                extension=file_path.suffix.lower(),
                size_bytes=size,
                modified_at=0.0,
                created_at=0.0,
                category=categorize(file_path),
            ),
            filename=analyze_filename(file_path.name),
            video=video,
            image=image,
            text=text,
        )

    return _make


@pytest.fixture
def make_scan() -> Callable[..., DirectoryScanFacts]:
    """Fabrique de DirectoryScanFacts, contexte de repertoire calcule."""

    def _make(
        files: list[FileFacts],
        directory: Path = MOVIE_DIR,
        disc: Optional[DiscStructureInfo] = None,
        legacy_directories: tuple[LegacyDirectoryInfo, ...] = (),
        legacy_files: tuple[FileFacts, ...] = (),
    ) -> DirectoryScanFacts:
        return DirectoryScanFacts(
            directory=directory,
            files=compute_directory_context(sorted(files, key=lambda f: f.name)),
            disc=disc,
            legacy_directories=legacy_directories,
            legacy_files=legacy_files,
        )

    return _make


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """
    Fabrique d'images reelles.

    Usage:
        make_image(tmp_path / "poster.jpg", (1000, 1426), seed=3)
    """

    def _make(
        path: Path,
        size: tuple[int, int] = (1000, 1426),
        seed: int = 0,
        mode: str = "RGB",
    ) -> Path:
        # Grille 9x8 de couleurs aleatoires : une graine donne un hash perceptuel distinct
        rng = random.Random(seed)
        alpha = (128,) if mode == "RGBA" else ()
        grid = Image.new(mode, (9, 8))
        grid.putdata(
            [tuple(rng.randrange(256) for _ in range(3)) + alpha for _ in range(72)]
        )
        path.parent.mkdir(parents=True, exist_ok=True)
        grid.resize(size, Image.Resampling.NEAREST).save(path)
        return path

    return _make

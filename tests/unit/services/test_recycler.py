"""
Tests unitaires pour la corbeille et la garde de la video principale.
"""

from pathlib import Path

import pytest

from mediavault.adapters.file_system import FileSystemAdapter
from mediavault.core.exceptions import (
    RecycleRecordNotFound,
    RestoreConflict,
    UnsafeRecycleAttempt,
)
from mediavault.infrastructure.persistence.repositories import SQLModelRecycleRecordRepository
from mediavault.services.recycler import RecyclerService, ensure_recyclable


@pytest.fixture
def movie_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "Inception (2010)"
    directory.mkdir()
    (directory / "Inception (2010).mkv").write_bytes(b"main")
    (directory / "sample.txt").write_bytes(b"junk")
    legacy = directory / "extrafanarts"
    legacy.mkdir()
    (legacy / "fanart1.jpg").write_bytes(b"img")
    return directory


@pytest.fixture
def main_video(movie_dir: Path) -> Path:
    return movie_dir / "Inception (2010).mkv"


@pytest.fixture
def recycle_dir(tmp_path: Path) -> Path:
    return tmp_path / "recycle"


@pytest.fixture
def recycler(session, clock, recycle_dir: Path) -> RecyclerService:
    return RecyclerService(recycle_dir, FileSystemAdapter(), SQLModelRecycleRecordRepository(session), clock)


class TestEnsureRecyclable:
    def test_main_video_itself(self, main_video: Path) -> None:
        with pytest.raises(UnsafeRecycleAttempt):
            ensure_recyclable(main_video, main_video)

    def test_directory_containing_main_video(self, movie_dir: Path, main_video: Path) -> None:
        with pytest.raises(UnsafeRecycleAttempt):
            ensure_recyclable(movie_dir, main_video)

    def test_path_spelled_differently(self, movie_dir: Path, main_video: Path) -> None:
        with pytest.raises(UnsafeRecycleAttempt):
            ensure_recyclable(movie_dir / "extrafanarts" / ".." / main_video.name, main_video)

    def test_file_inside_disc_structure(self, tmp_path: Path) -> None:
        disc_root = tmp_path / "Movie" / "BDMV"
        with pytest.raises(UnsafeRecycleAttempt):
            ensure_recyclable(disc_root / "STREAM" / "00000.m2ts", disc_root)

    def test_sibling_is_allowed(self, movie_dir: Path, main_video: Path) -> None:
        ensure_recyclable(movie_dir / "sample.txt", main_video)


class TestRecycle:
    def test_file_is_moved_and_recorded(
        self, recycler: RecyclerService, movie_dir: Path, main_video: Path, recycle_dir: Path
    ) -> None:
        target = movie_dir / "sample.txt"

        record = recycler.recycle(target, main_video, reason="unknown")

        assert not target.exists()
        assert record.recycle_path.read_bytes() == b"junk"
        assert record.recycle_path.is_relative_to(recycle_dir)
        assert record.recycle_path.parent.name.startswith("20240601_120000_")
        assert record.reason == "unknown"
        assert not record.is_directory
        assert record.id is not None

    def test_directory_is_moved_as_a_whole(
        self, recycler: RecyclerService, movie_dir: Path, main_video: Path
    ) -> None:
        record = recycler.recycle(movie_dir / "extrafanarts", main_video, reason="legacy_directory")

        assert record.is_directory
        assert (record.recycle_path / "fanart1.jpg").exists()
        assert not (movie_dir / "extrafanarts").exists()

    def test_unsafe_target_is_left_in_place(
        self, recycler: RecyclerService, main_video: Path, recycle_dir: Path
    ) -> None:
        with pytest.raises(UnsafeRecycleAttempt):
            recycler.recycle(main_video, main_video)

        assert main_video.exists()
        assert recycler.list_records() == []

    def test_same_name_twice_does_not_collide(
        self, recycler: RecyclerService, movie_dir: Path, main_video: Path
    ) -> None:
        first = recycler.recycle(movie_dir / "sample.txt", main_video)
        (movie_dir / "sample.txt").write_bytes(b"again")
        second = recycler.recycle(movie_dir / "sample.txt", main_video)

        assert first.recycle_path != second.recycle_path
        assert first.recycle_path.exists() and second.recycle_path.exists()


class TestRestore:
    def test_restore(self, recycler: RecyclerService, movie_dir: Path, main_video: Path, clock) -> None:
        record = recycler.recycle(movie_dir / "sample.txt", main_video)
        clock.advance(minutes=5)

        restored = recycler.restore(record.id)

        assert (movie_dir / "sample.txt").read_bytes() == b"junk"
        assert not restored.restorable
        assert restored.restored_at == clock.now
        assert not record.recycle_path.parent.exists()

    def test_restore_twice(self, recycler: RecyclerService, movie_dir: Path, main_video: Path) -> None:
        record = recycler.recycle(movie_dir / "sample.txt", main_video)
        recycler.restore(record.id)

        with pytest.raises(RecycleRecordNotFound):
            recycler.restore(record.id)

    def test_restore_conflict(self, recycler: RecyclerService, movie_dir: Path, main_video: Path) -> None:
        record = recycler.recycle(movie_dir / "sample.txt", main_video)
        (movie_dir / "sample.txt").write_bytes(b"new file")

        with pytest.raises(RestoreConflict):
            recycler.restore(record.id)
        assert (movie_dir / "sample.txt").read_bytes() == b"new file"
        assert record.recycle_path.exists()

    def test_unknown_record(self, recycler: RecyclerService) -> None:
        with pytest.raises(RecycleRecordNotFound):
            recycler.restore(999)


class TestPurge:
    def test_purge(self, recycler: RecyclerService, movie_dir: Path, main_video: Path) -> None:
        record = recycler.recycle(movie_dir / "extrafanarts", main_video)

        purged = recycler.purge(record.id)

        assert purged.purged_at is not None
        assert not record.recycle_path.exists()
        assert recycler.list_records() == []
        assert len(recycler.list_records(include_inactive=True)) == 1
        with pytest.raises(RecycleRecordNotFound):
            recycler.restore(record.id)

    def test_purge_older_than(
        self, recycler: RecyclerService, movie_dir: Path, main_video: Path, clock
    ) -> None:
        old = recycler.recycle(movie_dir / "sample.txt", main_video)
        clock.advance(days=20)
        recent = recycler.recycle(movie_dir / "extrafanarts", main_video)
        clock.advance(days=15)

        assert recycler.purge_older_than(30) == 1

        assert not old.recycle_path.exists()
        assert recent.recycle_path.exists()
        assert [r.id for r in recycler.list_records()] == [recent.id]

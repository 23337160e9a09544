"""
Tests unitaires pour les commandes CLI.

Le Container est patche dans helpers.py, la ou le decorateur
@with_container() l'instancie.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from mediavault.core.entities import RecycleRecord
from mediavault.core.exceptions import UnsafeRecycleAttempt
from mediavault.core.value_objects import (
    Automate,
    CandidateEvidence,
    ClassificationResult,
    ClassificationStatus,
    ClassifiedFile,
    Escalate,
)
from mediavault.main import app
from mediavault.services.cache_store import GarbageCollectionResult, StoreVerification
from mediavault.services.ingest import FinalizeResult, IngestPlan
from mediavault.services.publisher import PublishResult

runner = CliRunner()


@pytest.fixture
def mock_container():
    with patch("mediavault.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        container_instance.database.init = MagicMock()
        yield container_instance


@pytest.fixture
def automatic_result(tmp_path: Path) -> ClassificationResult:
    return ClassificationResult(
        directory=tmp_path,
        decision=Automate(ClassificationStatus.CAN_PROCESS, 100, "Main video and provider id resolved"),
        main_video=ClassifiedFile(tmp_path / "Inception (2010).mkv", None, 100, "Only video file"),
        provider_id="27205",
    )


@pytest.fixture
def manual_result(tmp_path: Path) -> ClassificationResult:
    evidence = (
        CandidateEvidence(tmp_path / "CD1.mkv", 3600.0, False),
        CandidateEvidence(tmp_path / "CD2.mkv", 3600.5, False),
    )
    return ClassificationResult(
        directory=tmp_path,
        decision=Escalate("ambiguous main video: tied duration", ("main_video",), evidence),
    )


class TestScanCommand:
    def test_automatic(self, mock_container, automatic_result, tmp_path: Path) -> None:
        mock_container.scan_service.return_value.scan.return_value = automatic_result

        result = runner.invoke(app, ["scan", str(tmp_path), "--provider-id", "27205"])

        assert result.exit_code == 0
        assert "can_process" in result.output
        hint = mock_container.scan_service.return_value.scan.call_args.args[1]
        assert hint.provider_id == "27205"
        assert hint.main_filename is None

    def test_manual_exits_with_error(self, mock_container, manual_result, tmp_path: Path) -> None:
        mock_container.scan_service.return_value.scan.return_value = manual_result

        result = runner.invoke(app, ["scan", str(tmp_path)])

        assert result.exit_code == 1
        assert "CD2.mkv" in result.output
        assert mock_container.scan_service.return_value.scan.call_args.args[1] is None

    def test_missing_directory(self, mock_container, tmp_path: Path) -> None:
        result = runner.invoke(app, ["scan", str(tmp_path / "absent")])
        assert result.exit_code != 0
        mock_container.scan_service.assert_not_called()


class TestProcessCommand:
    def test_manual_result_changes_nothing(self, mock_container, manual_result, tmp_path: Path) -> None:
        mock_container.scan_service.return_value.scan.return_value = manual_result

        result = runner.invoke(app, ["process", str(tmp_path)])

        assert result.exit_code == 1
        mock_container.ingest_service.assert_not_called()

    def test_automatic_result_is_ingested(
        self, mock_container, automatic_result, tmp_path: Path
    ) -> None:
        mock_container.scan_service.return_value.scan.return_value = automatic_result
        ingest = mock_container.ingest_service.return_value
        plan = IngestPlan(result=automatic_result)
        ingest.ingest.return_value = plan
        ingest.finalize.return_value = FinalizeResult(
            publish=PublishResult(published=[tmp_path / "Inception (2010)-poster.jpg"]),
            recycled=[tmp_path / "notes.url"],
        )

        result = runner.invoke(app, ["process", str(tmp_path)])

        assert result.exit_code == 0
        ingest.finalize.assert_called_once_with(plan, None)
        assert "1 fichier(s) publie(s)" in result.output


class TestCacheCommands:
    def test_verify_unhealthy(self, mock_container) -> None:
        mock_container.cache_store.return_value.verify_store.return_value = StoreVerification(
            checked=2, missing=["abc"]
        )

        result = runner.invoke(app, ["verify"])

        assert result.exit_code == 1
        assert "abc" in result.output

    def test_gc_with_explicit_retention(self, mock_container) -> None:
        store = mock_container.cache_store.return_value
        store.garbage_collect.return_value = GarbageCollectionResult(deleted=2, freed_bytes=2048)

        result = runner.invoke(app, ["gc", "--retention-days", "7"])

        assert result.exit_code == 0
        assert store.garbage_collect.call_args.args[0].days == 7
        assert "2 entree(s) supprimee(s)" in result.output


class TestRecycleCommands:
    def test_unsafe_recycle(self, mock_container, tmp_path: Path) -> None:
        target = tmp_path / "movie.mkv"
        target.write_bytes(b"x")
        mock_container.recycler_service.return_value.recycle.side_effect = UnsafeRecycleAttempt(
            target, target
        )

        result = runner.invoke(app, ["recycle", str(target), "--main-video", str(target)])

        assert result.exit_code == 1

    def test_purge_requires_a_target(self, mock_container) -> None:
        result = runner.invoke(app, ["recycle-purge"])
        assert result.exit_code == 2

    def test_list(self, mock_container) -> None:
        mock_container.recycler_service.return_value.list_records.return_value = [
            RecycleRecord(
                original_path=Path("/media/notes.url"),
                recycle_path=Path("/recycle/notes.url"),
                reason="unknown",
                id=1,
            )
        ]

        result = runner.invoke(app, ["recycle-list"])

        assert result.exit_code == 0
        assert "unknown" in result.output

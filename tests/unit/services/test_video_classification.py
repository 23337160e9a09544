"""
Tests unitaires pour l'arbre de decision de la video principale.
"""

from pathlib import Path

import pytest

from mediavault.core.exceptions import AmbiguousClassification
from mediavault.core.value_objects import AssetKind, DiscStructureInfo, DiscType, ScanHint
from mediavault.services.classification.video import (
    NO_DURATION_REASON,
    TIED_DURATION_REASON,
    classify_videos,
    select_by_duration,
)

DIRECTORY = Path("/media/Films/Inception (2010)")


class TestSelectByDuration:
    def test_longest_wins(self, make_facts, make_video) -> None:
        long = make_facts("a.mkv", video=make_video(7200))
        short = make_facts("b.mkv", video=make_video(5400))
        assert select_by_duration([short, long]) is long

    def test_tie_within_one_second(self, make_facts, make_video) -> None:
        a = make_facts("a.mkv", video=make_video(7200.0))
        b = make_facts("b.mkv", video=make_video(7199.2))
        c = make_facts("c.mkv", video=make_video(60))

        with pytest.raises(AmbiguousClassification) as exc_info:
            select_by_duration([a, b, c])

        assert exc_info.value.reason == TIED_DURATION_REASON
        assert set(exc_info.value.tied) == {a.path, b.path}

    def test_no_probed_duration(self, make_facts, make_video) -> None:
        a = make_facts("a.mkv", video=None)
        b = make_facts("b.mkv", video=make_video(None))

        with pytest.raises(AmbiguousClassification) as exc_info:
            select_by_duration([a, b])

        assert exc_info.value.reason == NO_DURATION_REASON


class TestDecisionTree:
    def test_single_video(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([make_facts("Inception (2010).mkv", video=make_video(8880))])

        result = classify_videos(scan)

        assert result.main_video.path.name == "Inception (2010).mkv"
        assert result.main_video.confidence == 100
        assert result.failure_reason is None

    def test_single_candidate_after_exclusion(self, make_facts, make_scan, make_video) -> None:
        """La bande-annonce plus lourde n'est jamais retenue."""
        scan = make_scan([
            make_facts("Inception (2010).mkv", size=4_000, video=make_video(8880)),
            make_facts("Inception (2010)-trailer.mkv", size=9_000, video=make_video(150)),
        ])

        result = classify_videos(scan)

        assert result.main_video.path.name == "Inception (2010).mkv"
        assert result.main_video.confidence == 95
        assert [t.path.name for t in result.trailers] == ["Inception (2010)-trailer.mkv"]
        assert result.trailers[0].kind == AssetKind.TRAILER

    def test_longest_candidate_wins_over_largest(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([
            make_facts("Inception.mkv", size=4_000, video=make_video(8880)),
            make_facts("Promo.mkv", size=9_000, video=make_video(150)),
        ])

        result = classify_videos(scan)

        assert result.main_video.path.name == "Inception.mkv"
        assert result.main_video.confidence == 90
        assert [u.path.name for u in result.unknown] == ["Promo.mkv"]

    def test_tied_durations_fail(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([
            make_facts("Inception CD1.mkv", video=make_video(3600.0)),
            make_facts("Inception CD2.mkv", video=make_video(3600.5)),
        ])

        result = classify_videos(scan)

        assert result.main_video is None
        assert result.failure_reason == TIED_DURATION_REASON
        assert {c.path.name for c in result.candidates} == {"Inception CD1.mkv", "Inception CD2.mkv"}

    def test_hint_selects_candidate(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([
            make_facts("Inception CD1.mkv", video=make_video(3600.0)),
            make_facts("Inception CD2.mkv", video=make_video(3600.5)),
        ])

        result = classify_videos(scan, ScanHint(main_filename="Inception CD2.mkv"))

        assert result.main_video.path.name == "Inception CD2.mkv"
        assert result.main_video.confidence == 100

    def test_hint_without_match_is_ignored(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([make_facts("Inception.mkv", video=make_video(8880))])

        result = classify_videos(scan, ScanHint(main_filename="Other.mkv"))

        assert result.main_video.path.name == "Inception.mkv"

    def test_no_video(self, make_facts, make_scan) -> None:
        result = classify_videos(make_scan([make_facts("poster.jpg")]))
        assert result.main_video is None
        assert result.failure_reason == "no video files found"

    def test_only_video_is_a_trailer(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([make_facts("Inception-trailer.mkv", video=make_video(150))])

        result = classify_videos(scan)

        assert result.main_video is None
        assert "exclusion keyword" in result.failure_reason

    def test_all_excluded(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([
            make_facts("Inception-trailer.mkv", video=make_video(150)),
            make_facts("Inception-featurette.mkv", video=make_video(600)),
        ])

        result = classify_videos(scan)

        assert result.main_video is None
        assert result.failure_reason == "all video files carry exclusion keywords"
        assert [e.detail for e in result.extras] == ["featurette"]

    def test_selected_video_without_stream_fails_validation(self, make_facts, make_scan) -> None:
        """Une sonde en echec laisse le fait absent : la validation echoue."""
        scan = make_scan([make_facts("Inception.mkv", video=None)])

        result = classify_videos(scan)

        assert result.main_video is None
        assert "failed validation" in result.failure_reason

    def test_samples_are_kept_apart(self, make_facts, make_scan, make_video) -> None:
        scan = make_scan([
            make_facts("Inception.mkv", video=make_video(8880)),
            make_facts("Inception-sample.mkv", video=make_video(60)),
        ])

        result = classify_videos(scan)

        assert [s.detail for s in result.samples] == ["sample"]
        assert result.extras == ()


class TestDiscStructure:
    def test_disc_root_is_main_video(self, make_facts, make_scan, make_video) -> None:
        root = DIRECTORY / "BDMV"
        disc = DiscStructureInfo(
            disc_type=DiscType.BDMV,
            root=root,
            marker=root / "index.bdmv",
            expected_nfo=root / "index.nfo",
        )
        scan = make_scan(
            [make_facts("Bonus.mkv", video=make_video(600))],
            directory=DIRECTORY,
            disc=disc,
        )

        result = classify_videos(scan)

        assert result.is_disc
        assert result.main_video.path == root
        assert result.main_video.confidence == 100
        assert [u.path.name for u in result.unknown] == ["Bonus.mkv"]

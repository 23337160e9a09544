"""
Tests unitaires pour le classifieur de repertoire et la porte de decision.
"""

from pathlib import Path

import pytest

from mediavault.core.value_objects import (
    AssetKind,
    Automate,
    CandidateEvidence,
    ClassificationRules,
    ClassificationStatus,
    ClassifiedFile,
    Escalate,
    ImageFacts,
    LegacyDirectoryInfo,
    ScanHint,
    TextClassification,
    TextFacts,
    UnknownFile,
    VideoClassification,
)
from mediavault.services.classification import DirectoryClassifier
from mediavault.services.decision import decide, resolve_provider_id

DIRECTORY = Path("/media/Films/Inception (2010)")
MAIN = ClassifiedFile(path=DIRECTORY / "Inception (2010).mkv", kind=None, confidence=100, reasoning="")


class TestDecide:
    def test_automate_when_everything_resolved(self) -> None:
        decision = decide(VideoClassification(main_video=MAIN), "27205", [])

        assert isinstance(decision, Automate)
        assert decision.status == ClassificationStatus.CAN_PROCESS
        assert decision.confidence == 100

    def test_unknowns_lower_confidence(self) -> None:
        unknown = [UnknownFile(path=DIRECTORY / "x.bin", reasoning="Unsupported file type")]

        decision = decide(VideoClassification(main_video=MAIN), "27205", unknown)

        assert decision.status == ClassificationStatus.CAN_PROCESS_WITH_UNKNOWNS
        assert decision.confidence == 80
        assert decision.unknown_files == (DIRECTORY / "x.bin",)

    def test_missing_provider_id(self) -> None:
        decision = decide(VideoClassification(main_video=MAIN), None, [])

        assert isinstance(decision, Escalate)
        assert decision.missing == ("provider_id",)
        assert decision.reason == "provider id not found"
        assert decision.confidence == 0

    def test_missing_both_keeps_evidence(self) -> None:
        evidence = (CandidateEvidence(path=DIRECTORY / "a.mkv", duration_seconds=10.0, excluded=False),)
        video = VideoClassification(candidates=evidence, failure_reason="ambiguous main video: tied duration")

        decision = decide(video, None, [])

        assert decision.missing == ("main_video", "provider_id")
        assert decision.reason.startswith("ambiguous main video: tied duration; ")
        assert decision.evidence == evidence


class TestResolveProviderId:
    def test_hint_wins(self) -> None:
        text = TextClassification(tmdb_id="27205")
        assert resolve_provider_id(ScanHint(provider_id="603"), text) == "603"

    def test_falls_back_to_nfo(self) -> None:
        text = TextClassification(imdb_id="tt1375666")
        assert resolve_provider_id(ScanHint(main_filename="a.mkv"), text) == "tt1375666"

    def test_none_when_absent(self) -> None:
        assert resolve_provider_id(None, TextClassification()) is None


@pytest.fixture
def movie_files(make_facts, make_video):
    """Repertoire de film typique : video, bande-annonce, NFO, poster."""
    return [
        make_facts("Inception (2010).mkv", size=8_000_000_000, video=make_video(8880)),
        make_facts("Inception (2010)-trailer.mkv", size=90_000_000, video=make_video(150)),
        make_facts(
            "Inception (2010).nfo",
            text=TextFacts(looks_like_nfo=True, tmdb_id="27205"),
        ),
        make_facts("Inception (2010)-poster.jpg", image=ImageFacts(1000, 1426, "JPEG")),
    ]


class TestDirectoryClassifier:
    def test_complete_directory_is_automatic(self, movie_files, make_scan) -> None:
        result = DirectoryClassifier().classify(make_scan(movie_files))

        assert result.is_automatic
        assert result.status == ClassificationStatus.CAN_PROCESS
        assert result.main_video.path.name == "Inception (2010).mkv"
        assert [t.path.name for t in result.trailers] == ["Inception (2010)-trailer.mkv"]
        assert [p.path.name for p in result.posters] == ["Inception (2010)-poster.jpg"]
        assert result.provider_id == "27205"
        assert result.unknown == ()

    def test_no_nfo_needs_hint(self, movie_files, make_scan) -> None:
        files = [f for f in movie_files if f.filesystem.extension != ".nfo"]

        manual = DirectoryClassifier().classify(make_scan(files))
        automatic = DirectoryClassifier().classify(make_scan(files), ScanHint(provider_id="27205"))

        assert manual.status == ClassificationStatus.MANUAL_REQUIRED
        assert manual.decision.missing == ("provider_id",)
        assert automatic.is_automatic

    def test_known_bad_and_unsupported_files_are_unknown(
        self, movie_files, make_facts, make_scan
    ) -> None:
        files = movie_files + [make_facts("Thumbs.db"), make_facts("movie.url")]

        result = DirectoryClassifier().classify(make_scan(files))

        reasons = {u.path.name: u.reasoning for u in result.unknown}
        assert reasons == {"Thumbs.db": "Known-bad filename", "movie.url": "Unsupported file type"}
        assert result.status == ClassificationStatus.CAN_PROCESS_WITH_UNKNOWNS

    def test_custom_known_bad_names(self, movie_files, make_facts, make_scan) -> None:
        rules = ClassificationRules.from_names(["Poster-Backup.JPG"], ["extrafanarts"])
        files = movie_files + [make_facts("poster-backup.jpg", image=ImageFacts(1000, 1426, "JPEG"))]

        result = DirectoryClassifier(rules).classify(make_scan(files))

        assert result.unknown == (
            UnknownFile(path=DIRECTORY / "poster-backup.jpg", reasoning="Known-bad filename"),
        )

    def test_theme_music(self, movie_files, make_facts, make_scan) -> None:
        files = movie_files + [make_facts("theme.mp3"), make_facts("soundtrack.mp3")]

        result = DirectoryClassifier().classify(make_scan(files))

        assert [t.kind for t in result.themes] == [AssetKind.THEME]
        assert [u.path.name for u in result.unknown] == ["soundtrack.mp3"]

    def test_legacy_directories(self, movie_files, make_facts, make_scan) -> None:
        legacy_dir = DIRECTORY / "extrafanarts"
        legacy_image = make_facts(
            "fanart1.jpg", path=legacy_dir / "fanart1.jpg", image=ImageFacts(1920, 1080, "JPEG")
        )
        legacy_text = make_facts("notes.txt", path=legacy_dir / "notes.txt")
        scan = make_scan(
            movie_files,
            legacy_directories=(
                LegacyDirectoryInfo(legacy_dir, "extrafanarts", (legacy_image.path, legacy_text.path)),
            ),
            legacy_files=(legacy_image, legacy_text),
        )

        result = DirectoryClassifier().classify(scan)

        assert [(i.path.name, i.kind, i.confidence) for i in result.legacy.images] == [
            ("fanart1.jpg", AssetKind.FANART, 80)
        ]
        assert result.legacy.directories == (legacy_dir,)
        assert result.legacy.ignored == (legacy_text.path,)
        # Le contenu historique ne compte pas comme inconnu
        assert result.unknown == ()

    def test_classification_is_repeatable(self, movie_files, make_facts, make_scan) -> None:
        files = movie_files + [make_facts("readme.txt", text=TextFacts(sample="hi"))]
        classifier = DirectoryClassifier()

        assert classifier.classify(make_scan(files)) == classifier.classify(make_scan(list(reversed(files))))

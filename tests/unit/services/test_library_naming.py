"""
Tests unitaires pour la convention de nommage de la bibliotheque.
"""

from pathlib import Path

import pytest

from mediavault.core.value_objects import AssetKind, ImageFacts
from mediavault.services.classification.asset_specs import SPECS_BY_KIND
from mediavault.services.classification.image import score_image
from mediavault.services.library_naming import (
    PublishItem,
    library_filename,
    sanitize_component,
)

BASE = "Inception (2010)"


def item(kind: AssetKind, extension: str, index: int = 0, detail: str | None = None) -> PublishItem:
    return PublishItem(cache_entry_id="id", kind=kind, extension=extension, index=index, detail=detail)


class TestSanitizeComponent:
    def test_plain_title_is_kept(self) -> None:
        assert sanitize_component(BASE) == BASE

    def test_reserved_characters_become_dashes(self) -> None:
        assert sanitize_component("Mission: Impossible") == "Mission- Impossible"
        assert sanitize_component("AC/DC") == "AC-DC"

    def test_unicode_is_normalized(self) -> None:
        assert sanitize_component("Alien³") == "Alien3"

    def test_truncated(self) -> None:
        assert len(sanitize_component("a" * 500)) == 200

    def test_empty(self) -> None:
        assert sanitize_component("") == ""


class TestLibraryFilename:
    @pytest.mark.parametrize(
        "publish_item,expected",
        [
            (item(AssetKind.POSTER, ".jpg"), f"{BASE}-poster.jpg"),
            (item(AssetKind.FANART, ".JPG", index=1), f"{BASE}-fanart1.jpg"),
            (item(AssetKind.DISCART, ".png"), f"{BASE}-disc.png"),
            (item(AssetKind.NFO, ".nfo"), f"{BASE}.nfo"),
            (item(AssetKind.SUBTITLE, ".srt", detail="fr"), f"{BASE}.fr.srt"),
            (item(AssetKind.SUBTITLE, ".srt", index=1, detail="fr"), f"{BASE}.fr1.srt"),
            (item(AssetKind.SUBTITLE, ".srt"), f"{BASE}.srt"),
            (item(AssetKind.TRAILER, ".mkv"), f"{BASE}-trailer.mkv"),
            (item(AssetKind.TRAILER, ".mkv", index=2), f"{BASE}-trailer2.mkv"),
            (item(AssetKind.EXTRA, ".mkv", detail="featurette"), f"{BASE}-featurette.mkv"),
            (item(AssetKind.EXTRA, ".mkv"), f"{BASE}-extra.mkv"),
            (item(AssetKind.THEME, ".mp3"), "theme.mp3"),
        ],
    )
    def test_names(self, publish_item: PublishItem, expected: str) -> None:
        assert library_filename(publish_item, BASE) == expected

    def test_short_names(self) -> None:
        assert library_filename(item(AssetKind.POSTER, ".jpg"), BASE, short_names=True) == "poster.jpg"
        assert library_filename(item(AssetKind.FANART, ".jpg", 2), None, short_names=True) == "fanart2.jpg"
        assert library_filename(item(AssetKind.NFO, ".nfo"), None, short_names=True) == "movie.nfo"

    def test_base_is_sanitized(self) -> None:
        name = library_filename(item(AssetKind.POSTER, ".jpg"), "Mission: Impossible (1996)")
        assert name == "Mission- Impossible (1996)-poster.jpg"

    @pytest.mark.parametrize(
        "kind,extension,facts",
        [
            (AssetKind.POSTER, ".jpg", ImageFacts(1000, 1426, "JPEG")),
            (AssetKind.FANART, ".jpg", ImageFacts(1920, 1080, "JPEG")),
            (AssetKind.CLEARLOGO, ".png", ImageFacts(800, 310, "PNG", True)),
            (AssetKind.DISCART, ".png", ImageFacts(1000, 1000, "PNG", True)),
            (AssetKind.KEYART, ".jpg", ImageFacts(1000, 1426, "JPEG")),
        ],
    )
    def test_published_names_are_recognized(
        self, make_facts, kind: AssetKind, extension: str, facts: ImageFacts
    ) -> None:
        """Un nom publie est reconnu comme nom attendu exact lors d'un nouveau scan."""
        name = library_filename(item(kind, extension), BASE)
        confidence, _ = score_image(make_facts(name, image=facts), SPECS_BY_KIND[kind], BASE)
        assert confidence == 90

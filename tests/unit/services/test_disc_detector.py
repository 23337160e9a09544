"""
Tests unitaires pour la detection de disque et des repertoires historiques.
"""

from pathlib import Path

from mediavault.core.value_objects import DiscType
from mediavault.services.disc_detector import detect_disc_structure, scan_legacy_directories


class TestDiscDetection:
    def test_bluray_structure(self, tmp_path: Path) -> None:
        (tmp_path / "BDMV").mkdir()
        (tmp_path / "BDMV" / "index.bdmv").write_bytes(b"INDX")

        disc = detect_disc_structure(tmp_path)

        assert disc is not None
        assert disc.disc_type == DiscType.BDMV
        assert disc.root == tmp_path / "BDMV"
        assert disc.expected_nfo == tmp_path / "BDMV" / "index.nfo"

    def test_dvd_structure(self, tmp_path: Path) -> None:
        (tmp_path / "VIDEO_TS").mkdir()
        (tmp_path / "VIDEO_TS" / "VIDEO_TS.IFO").write_bytes(b"DVDVIDEO")

        disc = detect_disc_structure(tmp_path)

        assert disc.disc_type == DiscType.VIDEO_TS
        assert disc.expected_nfo == tmp_path / "VIDEO_TS" / "VIDEO_TS.nfo"

    def test_directory_without_marker(self, tmp_path: Path) -> None:
        (tmp_path / "BDMV").mkdir()
        assert detect_disc_structure(tmp_path) is None


class TestLegacyDirectories:
    def test_lists_all_files_recursively(self, tmp_path: Path) -> None:
        legacy = tmp_path / "ExtraFanarts"
        (legacy / "nested").mkdir(parents=True)
        (legacy / "fanart1.jpg").write_bytes(b"x")
        (legacy / "nested" / "notes.txt").write_text("x")
        (tmp_path / "other").mkdir()

        found = scan_legacy_directories(tmp_path, ["extrafanarts", "extrathumbs"])

        assert len(found) == 1
        assert found[0].name == "extrafanarts"
        assert {p.name for p in found[0].files} == {"fanart1.jpg", "notes.txt"}

    def test_unreadable_directory(self, tmp_path: Path) -> None:
        assert scan_legacy_directories(tmp_path / "absent", ["extrafanarts"]) == ()

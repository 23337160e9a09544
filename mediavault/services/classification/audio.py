"""Classification des fichiers audio : seul le theme musical est reconnu."""

from mediavault.core.value_objects import (
    AssetKind,
    AudioClassification,
    ClassifiedFile,
    DirectoryScanFacts,
    FileCategory,
    UnknownFile,
)


def classify_audio(scan: DirectoryScanFacts) -> AudioClassification:
    themes: list[ClassifiedFile] = []
    unknown: list[UnknownFile] = []

    for facts in scan.by_category(FileCategory.AUDIO):
        if facts.filesystem.stem.lower() == "theme":
            themes.append(
                ClassifiedFile(
                    path=facts.path,
                    kind=AssetKind.THEME,
                    confidence=100,
                    reasoning="Theme music filename",
                )
            )
        else:
            unknown.append(UnknownFile(path=facts.path, reasoning="Unrecognized audio file"))

    return AudioClassification(themes=tuple(themes), unknown=tuple(unknown))

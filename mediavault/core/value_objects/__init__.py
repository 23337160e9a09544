"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- FileFacts et ses sous-parties : faits collectes par les sondes
- DirectoryScanFacts : faits d'un repertoire complet
- ScanHint : indication facultative de l'appelant
- ClassificationResult : resultat de classification d'un repertoire
- Automate / Escalate : decision de traitement (union etiquetee)
"""

from mediavault.core.value_objects.classification import (
    AUTO_CONFIDENCE_THRESHOLD,
    IMAGE_KINDS,
    AssetKind,
    AudioClassification,
    Automate,
    CandidateEvidence,
    ClassificationResult,
    ClassificationRules,
    ClassificationStatus,
    ClassifiedFile,
    Escalate,
    ImageClassification,
    LegacyClassification,
    ProcessingDecision,
    TextClassification,
    UnknownFile,
    VideoClassification,
)
from mediavault.core.value_objects.file_facts import (
    AudioStream,
    DirectoryContextFacts,
    DirectoryScanFacts,
    DiscStructureInfo,
    DiscType,
    FileCategory,
    FileFacts,
    FilenameFacts,
    FilesystemFacts,
    ImageFacts,
    LegacyDirectoryInfo,
    ScanHint,
    SubtitleStream,
    TextFacts,
    VideoStream,
    VideoStreamFacts,
)

__all__ = [
    # Faits
    "AudioStream",
    "DirectoryContextFacts",
    "DirectoryScanFacts",
    "DiscStructureInfo",
    "DiscType",
    "FileCategory",
    "FileFacts",
    "FilenameFacts",
    "FilesystemFacts",
    "ImageFacts",
    "LegacyDirectoryInfo",
    "ScanHint",
    "SubtitleStream",
    "TextFacts",
    "VideoStream",
    "VideoStreamFacts",
    # Classification
    "AUTO_CONFIDENCE_THRESHOLD",
    "IMAGE_KINDS",
    "AssetKind",
    "AudioClassification",
    "Automate",
    "CandidateEvidence",
    "ClassificationResult",
    "ClassificationRules",
    "ClassificationStatus",
    "ClassifiedFile",
    "Escalate",
    "ImageClassification",
    "LegacyClassification",
    "ProcessingDecision",
    "TextClassification",
    "UnknownFile",
    "VideoClassification",
]

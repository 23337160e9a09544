"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Ports sondes : IVideoProbe, IImageProbe, ITextProbe
Port système de fichiers : IFileSystem
Ports repository : ICacheEntryRepository, ILibraryEntryRepository,
IRecycleRecordRepository, IClassificationFailureRepository, IProbeCacheRepository
"""

from mediavault.core.ports.file_system import IFileSystem
from mediavault.core.ports.probes import IImageProbe, ITextProbe, IVideoProbe
from mediavault.core.ports.repositories import (
    ICacheEntryRepository,
    IClassificationFailureRepository,
    ILibraryEntryRepository,
    IProbeCacheRepository,
    IRecycleRecordRepository,
)

__all__ = [
    # Sondes
    "IImageProbe",
    "ITextProbe",
    "IVideoProbe",
    # Système de fichiers
    "IFileSystem",
    # Repositories
    "ICacheEntryRepository",
    "IClassificationFailureRepository",
    "ILibraryEntryRepository",
    "IProbeCacheRepository",
    "IRecycleRecordRepository",
]

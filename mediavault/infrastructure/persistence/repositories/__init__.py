"""
Repositories SQLModel.

Chaque repository implemente un port de core/ports/repositories.py
et convertit les modeles de table en entites du domaine.
"""

from mediavault.infrastructure.persistence.repositories.cache_entry_repository import (
    SQLModelCacheEntryRepository,
)
from mediavault.infrastructure.persistence.repositories.classification_failure_repository import (
    SQLModelClassificationFailureRepository,
)
from mediavault.infrastructure.persistence.repositories.library_entry_repository import (
    SQLModelLibraryEntryRepository,
)
from mediavault.infrastructure.persistence.repositories.probe_cache_repository import (
    SQLModelProbeCacheRepository,
)
from mediavault.infrastructure.persistence.repositories.recycle_record_repository import (
    SQLModelRecycleRecordRepository,
)

__all__ = [
    "SQLModelCacheEntryRepository",
    "SQLModelClassificationFailureRepository",
    "SQLModelLibraryEntryRepository",
    "SQLModelProbeCacheRepository",
    "SQLModelRecycleRecordRepository",
]

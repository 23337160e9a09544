"""
Entités du cache, de la bibliothèque et de la corbeille.

Ces dataclasses sont converties depuis/vers les modèles SQLModel par les
repositories ; le domaine ne manipule jamais directement les tables.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


@dataclass
class CacheEntry:
    """
    Artefact stocké une seule fois dans le cache.

    Le chemin de stockage et les octets sont immuables après création.
    Le nom sur disque dérive de l'identifiant, jamais du hash : deux images
    légitimement distinctes d'un même type (fanart1, fanart2) ne sont pas fusionnées.

    Attributs :
        id : Identifiant unique (uuid4 hexadécimal)
        content_hash : Hash fort SHA-256 (intégrité et détection de changement)
        storage_path : Chemin de l'artefact dans le cache
        size_bytes : Taille en octets
        asset_kind : Type d'asset (poster, fanart, nfo...)
        perceptual_hash : Hash perceptuel 64 bits (images uniquement)
        entity_key : Portée des comparaisons de quasi-doublons (ex: répertoire ou tmdb id)
        reference_count : Nombre de références logiques (>= 0)
        created_at : Date de première utilisation
        last_used_at : Date du dernier accès
        deleted_at : Date de suppression logique (reference_count tombé à 0)
    """

    id: str
    content_hash: str
    storage_path: Path
    size_bytes: int
    asset_kind: str
    perceptual_hash: Optional[str] = None
    entity_key: Optional[str] = None
    reference_count: int = 1
    created_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_soft_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass
class LibraryEntry:
    """
    Fichier publié dans la bibliothèque.

    Attributs :
        id : Identifiant base de données
        cache_entry_id : Entrée du cache source
        library_path : Chemin publié (unique)
        directory : Répertoire de bibliothèque
        asset_kind : Type d'asset
        content_hash : Hash fort de l'entrée au moment de la publication
        published_at : Date de publication
    """

    cache_entry_id: str
    library_path: Path
    directory: Path
    asset_kind: str
    content_hash: str
    id: Optional[int] = None
    published_at: Optional[datetime] = None


@dataclass
class RecycleRecord:
    """
    Élément déplacé dans la corbeille.

    Attributs :
        id : Identifiant base de données
        original_path : Emplacement d'origine
        recycle_path : Emplacement dans la zone de recyclage
        is_directory : Vrai pour un répertoire recyclé d'un bloc
        reason : Motif du recyclage (unknown, legacy_directory...)
        recycled_at : Date du recyclage
        restorable : Faux une fois purgé ou restauré
        restored_at : Date de restauration
        purged_at : Date de purge physique
    """

    original_path: Path
    recycle_path: Path
    is_directory: bool = False
    reason: Optional[str] = None
    id: Optional[int] = None
    recycled_at: Optional[datetime] = None
    restorable: bool = True
    restored_at: Optional[datetime] = None
    purged_at: Optional[datetime] = None


@dataclass
class ClassificationFailure:
    """
    Trace d'un répertoire en traitement manuel.

    Seule écriture autorisée pour un répertoire non résolu.
    """

    directory: Path
    reason: str
    evidence: list[dict[str, Any]] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    id: Optional[int] = None
    recorded_at: Optional[datetime] = None

"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe MEDIAVAULT_,
et peut optionnellement être fournie via un fichier .env.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de mediavault/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe MEDIAVAULT_.
    Exemple : MEDIAVAULT_VIDEO_PROBE_TIMEOUT_SECONDS=60

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="MEDIAVAULT_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Chemins (avec expansion ~)
    cache_dir: Path = Field(default=Path("~/.mediavault/cache"))
    recycle_dir: Path = Field(default=Path("~/.mediavault/recycle"))

    # Base de données (index du cache, publications, corbeille)
    database_url: str = Field(default="sqlite:///mediavault.db")

    # Sondes
    video_probe_timeout_seconds: float = Field(default=30.0, gt=0)
    probe_workers: int = Field(default=4, ge=1)
    text_sample_bytes: int = Field(default=10 * 1024, ge=256)

    # Cache
    max_cache_entry_mb: int = Field(default=512, ge=1)
    phash_max_distance: int = Field(default=4, ge=0, le=64)
    gc_retention_days: int = Field(default=30, ge=0)

    # Regles de classification (entrees explicites du classifieur)
    legacy_directories: list[str] = Field(default=["extrafanarts", "extrathumbs"])
    known_bad_filenames: list[str] = Field(
        default=["thumbs.db", ".ds_store", "desktop.ini"]
    )

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/mediavault.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("cache_dir", "recycle_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def max_cache_entry_bytes(self) -> int:
        """Taille maximale d'une entree du cache, en octets."""
        return self.max_cache_entry_mb * 1024 * 1024

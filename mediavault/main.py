"""
Point d'entree CLI de MediaVault.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    cache_stats,
    gc,
    process,
    recycle,
    recycle_list,
    recycle_purge,
    recycle_restore,
    restore,
    scan,
    verify,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="mediavault",
    help="Classification et cache des repertoires de medias",
)
container = Container()

# Pipeline de classification
app.command()(scan)
app.command()(process)
app.command()(restore)

# Maintenance du cache
app.command()(verify)
app.command()(gc)
app.command(name="cache-stats")(cache_stats)

# Corbeille
app.command()(recycle)
app.command(name="recycle-restore")(recycle_restore)
app.command(name="recycle-purge")(recycle_purge)
app.command(name="recycle-list")(recycle_list)


def get_config() -> Settings:
    """Recupere les parametres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"Cache : {config.cache_dir}")
    typer.echo(f"Corbeille : {config.recycle_dir}")
    typer.echo(f"Base de donnees : {config.database_url}")
    typer.echo(f"Timeout sonde video : {config.video_probe_timeout_seconds}s")
    typer.echo(f"Sondes simultanees : {config.probe_workers}")
    typer.echo(f"Taille max d'une entree : {config.max_cache_entry_mb} MB")
    typer.echo(f"Distance perceptuelle max : {config.phash_max_distance}")
    typer.echo(f"Retention GC : {config.gc_retention_days} jours")
    typer.echo(f"Repertoires historiques : {', '.join(config.legacy_directories)}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"MediaVault v{__version__}")


def main() -> None:
    """Point d'entree de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    # Initialise la base de donnees (cree les tables si necessaire)
    container.database.init()

    logger.info(f"Demarrage de MediaVault v{__version__}")

    app()


if __name__ == "__main__":
    main()

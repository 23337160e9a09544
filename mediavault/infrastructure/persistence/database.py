"""
Configuration de la base de donnees SQLite pour MediaVault.

Ce module fournit :
- Engine SQLite avec configuration adaptee au multi-thread (sondes en parallele)
- Session factory avec context manager
- Fonction d'initialisation des tables

La base de donnees est configuree via MEDIAVAULT_DATABASE_URL (defaut: sqlite:///mediavault.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine

# Engine global - initialise lors du premier appel a get_engine()
_engine: Optional[Engine] = None


def create_sqlite_engine(db_url: str) -> Engine:
    """
    Cree un engine SQLite.

    Cree le repertoire parent si l'URL designe un fichier.
    """
    if db_url.startswith("sqlite:///") and not db_url.startswith("sqlite:///:memory:"):
        db_path = Path(db_url.replace("sqlite:///", ""))
        db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def get_engine() -> Engine:
    """
    Retourne l'engine SQLite, en le creant si necessaire.

    Utilise la configuration de l'application pour le chemin de la BDD.
    """
    global _engine
    if _engine is None:
        from mediavault.config import Settings

        _engine = create_sqlite_engine(Settings().database_url)
    return _engine


def get_session() -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation avec next() :
        session = next(get_session())

    Yields :
        Session SQLModel connectee a l'engine SQLite
    """
    with Session(get_engine()) as session:
        yield session


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialise la base de donnees en creant toutes les tables.

    Les modeles sont importes ici pour enregistrer leurs metadonnees
    dans SQLModel.metadata sans import circulaire.
    """
    from mediavault.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())

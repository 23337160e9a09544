"""
Commandes CLI de maintenance du cache (verify, gc, cache-stats).
"""

from datetime import timedelta
from typing import Annotated, Optional

import typer
from rich.table import Table

from mediavault.adapters.cli.helpers import console, format_size, with_container


def verify() -> None:
    """Verifie que chaque entree du cache a son artefact intact."""
    _verify()


@with_container()
def _verify(container) -> None:
    report = container.cache_store().verify_store()
    console.print(f"{report.checked} entree(s) verifiee(s)")
    for entry_id in report.missing:
        console.print(f"[red]Artefact absent[/red] {entry_id}")
    for entry_id in report.corrupted:
        console.print(f"[red]Artefact corrompu[/red] {entry_id}")
    if not report.is_healthy:
        raise typer.Exit(1)
    console.print("[green]Cache sain[/green]")


def gc(
    retention_days: Annotated[
        Optional[int],
        typer.Option("--retention-days", help="Retention apres suppression logique (defaut: config)"),
    ] = None,
) -> None:
    """Supprime les entrees du cache sans reference depuis plus que la retention."""
    _gc(retention_days)


@with_container()
def _gc(container, retention_days: Optional[int]) -> None:
    retention = (
        timedelta(days=retention_days) if retention_days is not None else container.gc_retention()
    )
    result = container.cache_store().garbage_collect(retention)
    console.print(
        f"{result.deleted} entree(s) supprimee(s), {format_size(result.freed_bytes)} liberes, "
        f"{result.skipped} ignoree(s)"
    )
    for error in result.errors:
        console.print(f"[red]  {error}[/red]")


def cache_stats() -> None:
    """Affiche les statistiques du cache."""
    _cache_stats()


@with_container()
def _cache_stats(container) -> None:
    stats = container.cache_store().stats()

    table = Table(title="Cache", show_header=True)
    table.add_column("Type", style="cyan")
    table.add_column("Entrees", justify="right")
    for kind, count in sorted(stats.by_kind.items()):
        table.add_row(kind, str(count))
    console.print(table)

    console.print(
        f"Total : {stats.entry_count} entree(s), {format_size(stats.total_bytes)}, "
        f"{stats.referenced_count} referencee(s), {stats.soft_deleted_count} en attente de GC"
    )

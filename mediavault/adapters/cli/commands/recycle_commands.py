"""
Commandes CLI de la corbeille (recycle, recycle-restore, recycle-purge, recycle-list).
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from mediavault.adapters.cli.helpers import console, with_container
from mediavault.core.exceptions import (
    FileOperationError,
    RecycleRecordNotFound,
    RestoreConflict,
    UnsafeRecycleAttempt,
)


def recycle(
    target: Annotated[
        Path, typer.Argument(exists=True, resolve_path=True, help="Fichier ou repertoire a recycler")
    ],
    main_video: Annotated[
        Path,
        typer.Option("--main-video", resolve_path=True, help="Video principale a proteger"),
    ],
    reason: Annotated[Optional[str], typer.Option("--reason", help="Motif")] = None,
) -> None:
    """Deplace un element dans la corbeille."""
    _recycle(target, main_video, reason)


@with_container()
def _recycle(container, target: Path, main_video: Path, reason: Optional[str]) -> None:
    try:
        record = container.recycler_service().recycle(target, main_video, reason)
    except (UnsafeRecycleAttempt, FileOperationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    console.print(f"[green]Recycle[/green] #{record.id} -> {record.recycle_path}")


def recycle_restore(
    record_id: Annotated[int, typer.Argument(help="Identifiant de l'element")],
) -> None:
    """Replace un element recycle a son emplacement d'origine."""
    _recycle_restore(record_id)


@with_container()
def _recycle_restore(container, record_id: int) -> None:
    try:
        record = container.recycler_service().restore(record_id)
    except (RecycleRecordNotFound, RestoreConflict, FileOperationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    console.print(f"[green]Restaure[/green] {record.original_path}")


def recycle_purge(
    record_id: Annotated[
        Optional[int], typer.Argument(help="Identifiant de l'element (ou --older-than)")
    ] = None,
    older_than: Annotated[
        Optional[int], typer.Option("--older-than", help="Purge les elements plus vieux que N jours")
    ] = None,
) -> None:
    """Supprime definitivement des elements de la corbeille."""
    if record_id is None and older_than is None:
        console.print("[red]Indiquer un identifiant ou --older-than[/red]")
        raise typer.Exit(2)
    _recycle_purge(record_id, older_than)


@with_container()
def _recycle_purge(container, record_id: Optional[int], older_than: Optional[int]) -> None:
    recycler = container.recycler_service()
    if record_id is not None:
        try:
            record = recycler.purge(record_id)
        except (RecycleRecordNotFound, FileOperationError) as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1) from e
        console.print(f"Purge #{record.id} ({record.original_path.name})")
    if older_than is not None:
        count = recycler.purge_older_than(older_than)
        console.print(f"{count} element(s) purge(s)")


def recycle_list(
    all_records: Annotated[
        bool, typer.Option("--all", "-a", help="Inclure les elements restaures ou purges")
    ] = False,
) -> None:
    """Liste le contenu de la corbeille."""
    _recycle_list(all_records)


@with_container()
def _recycle_list(container, all_records: bool) -> None:
    records = container.recycler_service().list_records(include_inactive=all_records)
    if not records:
        console.print("[yellow]Corbeille vide.[/yellow]")
        return

    table = Table(title="Corbeille", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Origine", style="cyan")
    table.add_column("Motif")
    table.add_column("Date")
    table.add_column("Etat")
    for record in records:
        if record.purged_at:
            state = "[dim]purge[/dim]"
        elif record.restored_at:
            state = "[dim]restaure[/dim]"
        else:
            state = "[green]restaurable[/green]"
        recycled_at = record.recycled_at.strftime("%Y-%m-%d %H:%M") if record.recycled_at else "-"
        table.add_row(str(record.id), str(record.original_path), record.reason or "-", recycled_at, state)
    console.print(table)

"""
Commandes CLI du pipeline de classification (scan, process, restore).
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.panel import Panel
from rich.table import Table

from mediavault.adapters.cli.helpers import console, suppress_loguru, with_container
from mediavault.core.value_objects import (
    ClassificationResult,
    ClassificationStatus,
    Escalate,
    ScanHint,
)

_STATUS_STYLES = {
    ClassificationStatus.CAN_PROCESS: "green",
    ClassificationStatus.CAN_PROCESS_WITH_UNKNOWNS: "yellow",
    ClassificationStatus.MANUAL_REQUIRED: "red",
}

DirectoryArgument = Annotated[
    Path,
    typer.Argument(exists=True, file_okay=False, resolve_path=True, help="Repertoire a traiter"),
]
MainOption = Annotated[
    Optional[str],
    typer.Option("--main", "-m", help="Nom du fichier de la video principale"),
]
ProviderOption = Annotated[
    Optional[str],
    typer.Option("--provider-id", "-p", help="Identifiant fournisseur (tmdb, imdb...)"),
]


def _hint(main: Optional[str], provider_id: Optional[str]) -> Optional[ScanHint]:
    if main is None and provider_id is None:
        return None
    return ScanHint(main_filename=main, provider_id=provider_id)


def display_result(result: ClassificationResult) -> None:
    """Affiche le resultat d'une classification."""
    style = _STATUS_STYLES[result.status]
    lines = [
        f"Statut : [{style}]{result.status.value}[/{style}] (confiance {result.decision.confidence})",
        f"Raison : {result.decision.reason}",
        f"Video principale : {result.main_video.path.name if result.main_video else '-'}",
        f"Identifiant fournisseur : {result.provider_id or '-'}",
    ]
    console.print(Panel("\n".join(lines), title=result.directory.name, border_style=style))

    table = Table(title="Fichiers classes", show_header=True)
    table.add_column("Fichier", style="cyan")
    table.add_column("Type")
    table.add_column("Confiance", justify="right")
    table.add_column("Raisonnement", style="dim")

    groups = (
        ("trailer", result.trailers),
        ("extra", result.extras),
        ("sample", result.samples),
        ("nfo", result.nfos),
        ("subtitle", result.subtitles),
        ("theme", result.themes),
    )
    for label, files in groups:
        for f in files:
            table.add_row(f.path.name, label, str(f.confidence), f.reasoning)
    for f in (*result.images, *result.legacy.images):
        table.add_row(f.path.name, f.kind.value, str(f.confidence), f.reasoning)
    for u in result.unknown:
        table.add_row(u.path.name, "[red]inconnu[/red]", "-", u.reasoning)
    console.print(table)

    if isinstance(result.decision, Escalate) and result.decision.evidence:
        evidence = Table(title="Candidats video", show_header=True)
        evidence.add_column("Fichier", style="cyan")
        evidence.add_column("Duree (s)", justify="right")
        evidence.add_column("Exclu")
        for candidate in result.decision.evidence:
            duration = f"{candidate.duration_seconds:.0f}" if candidate.duration_seconds else "-"
            excluded = ", ".join(candidate.exclusion_keywords) if candidate.excluded else ""
            evidence.add_row(candidate.path.name, duration, excluded)
        console.print(evidence)


def scan(
    directory: DirectoryArgument,
    main: MainOption = None,
    provider_id: ProviderOption = None,
) -> None:
    """Classe les fichiers d'un repertoire sans rien modifier."""
    _scan(directory, _hint(main, provider_id))


@with_container()
def _scan(container, directory: Path, hint: Optional[ScanHint]) -> None:
    with suppress_loguru():
        result = container.scan_service().scan(directory, hint)
    display_result(result)
    if not result.is_automatic:
        raise typer.Exit(1)


def process(
    directory: DirectoryArgument,
    main: MainOption = None,
    provider_id: ProviderOption = None,
    library_dir: Annotated[
        Optional[Path],
        typer.Option("--library", "-l", help="Repertoire de publication (defaut: sur place)"),
    ] = None,
) -> None:
    """Classe, met en cache, publie et recycle un repertoire."""
    _process(directory, _hint(main, provider_id), library_dir)


@with_container()
def _process(
    container, directory: Path, hint: Optional[ScanHint], library_dir: Optional[Path]
) -> None:
    result = container.scan_service().scan(directory, hint)
    display_result(result)
    if not result.is_automatic:
        console.print("[red]Traitement manuel requis, aucune modification effectuee.[/red]")
        raise typer.Exit(1)

    ingest = container.ingest_service()
    plan = ingest.ingest(result)
    finalized = ingest.finalize(plan, library_dir)

    console.print(
        f"[green]{len(finalized.publish.published)} fichier(s) publie(s)[/green], "
        f"{len(finalized.publish.unchanged)} inchange(s), "
        f"{len(finalized.recycled)} recycle(s)"
    )
    errors = plan.errors + finalized.publish.errors + finalized.errors
    for error in errors:
        console.print(f"[red]  {error}[/red]")
    if errors:
        raise typer.Exit(1)


def restore(
    directory: Annotated[
        Path, typer.Argument(resolve_path=True, help="Repertoire de bibliotheque a restaurer")
    ],
) -> None:
    """Restaure les fichiers publies absents ou modifies depuis le cache."""
    _restore(directory)


@with_container()
def _restore(container, directory: Path) -> None:
    result = container.publisher_service().restore(directory)
    for path in result.restored:
        console.print(f"[green]Restaure[/green] {path.name}")
    console.print(
        f"{len(result.restored)} restaure(s), {len(result.skipped)} intact(s), "
        f"{len(result.errors)} erreur(s)"
    )
    for error in result.errors:
        console.print(f"[red]  {error}[/red]")
    if result.errors:
        raise typer.Exit(1)

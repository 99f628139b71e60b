# latex_thebib/cli/refactor_cli.py

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from latex_thebib.config.settings import settings, validate_subdir
from latex_thebib.errors import ThebibError
from latex_thebib.refactor.pipeline import analyze, run_refactor

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _check_subdir(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return validate_subdir(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def refactor(
    file: Path = typer.Option(
        ...,
        "--file",
        "-f",
        help="Master TeX file (root of the include tree).",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0.0,
        help="Normalized edit distance for duplicate entries. Defaults to settings.threshold (0.3).",
    ),
    subdir: Optional[str] = typer.Option(
        None,
        "--subdir",
        "-s",
        callback=_check_subdir,
        help="Folder next to each file receiving its rewritten copy. Defaults to settings.subdir ('cleaned').",
    ),
    skip_missing: bool = typer.Option(
        False,
        "--skip-missing",
        help=(
            "Skip include targets that cannot be found instead of aborting. "
            "Defaults to settings.skip_missing_includes."
        ),
    ),
) -> None:
    """
    Deduplicate the thebibliography of a document tree, keep only cited
    entries (in citation order) and write the rewritten files.
    """
    try:
        report = run_refactor(
            file,
            threshold=threshold,
            subdir=subdir,
            skip_missing=True if skip_missing else None,
        )
    except ThebibError as exc:
        console.print(f"[red]ERROR:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1)

    for key, canonical in sorted(report.remap.items()):
        console.print(f"  merged [bold]{escape(key)}[/bold] -> {escape(canonical)}", highlight=False)

    for key in report.missing_keys:
        console.print(
            f"[yellow]Cited key without bibliography entry:[/yellow] {escape(key)}",
            highlight=False,
        )

    for source, target in report.missing_includes:
        console.print(
            f"[yellow]Skipped missing include:[/yellow] {escape(target)} (from {escape(str(source))})",
            highlight=False,
        )

    console.print(
        f"[green]Wrote {len(report.written)} file(s); "
        f"{len(report.minimal_bib)} bibliography entries kept.[/green]"
    )
    for path in report.written:
        console.print(f"  {escape(str(path))}", highlight=False)


def duplicates(
    file: Path = typer.Option(
        ...,
        "--file",
        "-f",
        help="Master TeX file (root of the include tree).",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0.0,
        help="Normalized edit distance for duplicate entries. Defaults to settings.threshold.",
    ),
    skip_missing: bool = typer.Option(
        False,
        "--skip-missing",
        help=(
            "Skip include targets that cannot be found instead of aborting. "
            "Defaults to settings.skip_missing_includes."
        ),
    ),
) -> None:
    """
    List groups of bibliography entries that would be merged. Nothing is written.
    """
    try:
        extraction, result = analyze(
            file,
            threshold,
            skip_missing=True if skip_missing else None,
        )
    except ThebibError as exc:
        console.print(f"[red]ERROR:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1)

    groups = result.duplicate_clusters
    if not groups:
        console.print("[green]No duplicate bibliography entries found.[/green]")
        return

    console.print(
        f"[bold]{len(groups)} duplicate group(s) "
        f"(threshold={threshold if threshold is not None else settings.threshold}):[/bold]"
    )
    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Canonical")
    tbl.add_column("Duplicates")
    tbl.add_column("Text")

    for members in groups:
        canonical = extraction.entries[members[0]]
        others = [extraction.entries[i].key for i in members[1:]]
        tbl.add_row(escape(canonical.key), escape(", ".join(others)), escape(canonical.text))

    console.print(tbl)

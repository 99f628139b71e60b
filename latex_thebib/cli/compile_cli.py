# latex_thebib/cli/compile_cli.py

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from latex_thebib.compiler.formatter import CompileOptions, compile_file
from latex_thebib.config.settings import settings
from latex_thebib.errors import ThebibError

console = Console()


def compile_bib(
    file: Path = typer.Option(
        ...,
        "--file",
        "-f",
        help="Master BibTeX file.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output TeX file. If omitted, the result is printed to stdout.",
    ),
    publisher: bool = typer.Option(
        False,
        "--publisher",
        "-p",
        help="Add a 'Publisher' segment to each entry.",
    ),
    sort: bool = typer.Option(
        False,
        "--sort",
        help="Sort entries by year, most recent first.",
    ),
    aslist: bool = typer.Option(
        False,
        "--aslist",
        "-a",
        help="Compile as an enumerate list instead of a thebibliography.",
    ),
    cite_prefix: str = typer.Option(
        "",
        "--cite-prefix",
        "-c",
        help="Prefix added to each \\bibitem label.",
    ),
) -> None:
    """
    Compile a BibTeX file into legacy thebibliography TeX code.
    """
    options = CompileOptions(
        publisher=publisher,
        sort=sort,
        aslist=aslist,
        cite_prefix=cite_prefix,
    )

    try:
        formatted = compile_file(file, options)
    except ThebibError as exc:
        console.print(f"[red]ERROR:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1)

    if output is None:
        # Plain echo: rich would re-wrap and interpret the TeX.
        typer.echo(formatted)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(formatted, encoding=settings.encoding)
    console.print(f"[green]Bibliography written to[/green] {escape(str(output))}", highlight=False)

# latex_thebib/cli/main.py

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from latex_thebib.cli import compile_cli, refactor_cli
from latex_thebib.config.settings import settings

app = typer.Typer(help="Tools for legacy LaTeX documents using thebibliography.")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug details.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log warnings and errors.",
    ),
) -> None:
    """
    Configure logging; the level defaults to settings.log_level.
    """
    level = settings.log_level
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


app.command("refactor")(refactor_cli.refactor)
app.command("duplicates")(refactor_cli.duplicates)
app.command("compile")(compile_cli.compile_bib)

if __name__ == "__main__":
    app()

# latex_thebib/errors.py

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class ThebibError(Exception):
    """
    Base class for every failure the refactor/compile commands report.

    The CLI catches this type, prints the message and exits with code 1.
    """


class SourceReadError(ThebibError):
    """A root or included source file could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")


class IncludeNotFoundError(ThebibError):
    """
    An \\input/\\include/\\includeonly target did not resolve to a file.

    `tried` lists every candidate path checked, in order.
    """

    def __init__(self, source: Path | str, target: str, tried: Sequence[Path]) -> None:
        self.source = Path(source)
        self.target = target
        self.tried = list(tried)
        super().__init__(
            f"{self.source}: included file '{target}' not found "
            f"(tried {', '.join(str(p) for p in self.tried)})"
        )


class IncludeCycleError(ThebibError):
    """A file includes one of its own ancestors."""

    def __init__(self, chain: Sequence[Path]) -> None:
        self.chain = list(chain)
        super().__init__(
            "Include cycle: " + " -> ".join(str(p) for p in self.chain)
        )


class LatexParseError(ThebibError):
    """Malformed LaTeX around a token the parser depends on."""

    def __init__(self, path: Path | str | None, token: str, reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.token = token
        self.reason = reason
        where = f"{self.path}: " if self.path is not None else ""
        super().__init__(f"{where}{reason} near '{token}'")


class BibtexParseError(ThebibError):
    """The BibTeX source could not be parsed."""

    def __init__(self, path: Path | str | None, reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = reason
        where = f"{self.path}: " if self.path is not None else ""
        super().__init__(f"{where}{reason}")


class MissingFieldError(ThebibError):
    """A BibTeX entry lacks a field the formatter requires."""

    def __init__(self, key: str, field: str, reason: str = "missing field") -> None:
        self.key = key
        self.field = field
        super().__init__(f"Entry '{key}': {reason} '{field}'")

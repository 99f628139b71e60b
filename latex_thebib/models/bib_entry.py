# latex_thebib/models/bib_entry.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class BibEntry:
    """
    A single `\\bibitem{key} text` record.

    `source` is the file the entry was read from, if known. Entries with
    the same key found in different files stay distinct objects until
    clustering collapses them.
    """

    key: str
    text: str
    source: Optional[Path] = None

    def to_latex(self) -> str:
        return f"\\bibitem{{{self.key}}} {self.text}"

    def __str__(self) -> str:
        return self.to_latex()

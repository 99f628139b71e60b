# latex_thebib/models/citation.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Sequence


CITE_KINDS = ("cite", "citet", "citep")


@dataclass(frozen=True)
class Citation:
    """
    One matched citation command.

    keys:
        Keys in the order written. May contain duplicates before cleaning.
    kind:
        Command name without backslash: "cite", "citet" or "citep".
    raw:
        Exact source substring that was matched; used as replacement anchor.
    """

    keys: List[str] = field(default_factory=list)
    kind: str = "cite"
    raw: str = ""

    def with_keys(self, keys: Sequence[str]) -> "Citation":
        """Return a copy carrying `keys`; `kind` and `raw` are kept."""
        return replace(self, keys=list(keys))

    def to_latex(self) -> str:
        return f"\\{self.kind}{{{','.join(self.keys)}}}"

    def __str__(self) -> str:
        return self.to_latex()

# latex_thebib/parsing/latex_parser.py

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from latex_thebib.errors import IncludeNotFoundError, LatexParseError
from latex_thebib.models import CITE_KINDS, BibEntry, Citation
from latex_thebib.parsing.normalizer import clean_bib_text

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Citations and includes are matched by one pattern so that their relative
# order in a file is the match order.
COMMAND_RE = re.compile(
    r"\\(?P<kind>citet|citep|cite|includeonly|include|input)\{(?P<content>[^}]+)\}"
)
INCLUDE_RE = re.compile(r"\\(?P<kind>includeonly|include|input)\{(?P<content>[^}]+)\}")

BEGIN_BIB = "\\begin{thebibliography}"
END_BIB = "\\end{thebibliography}"

_BIBITEM_SPLIT_RE = re.compile(r"\\bibitem(?![a-zA-Z@])")
_BIBITEM_BODY_RE = re.compile(
    r"^\s*(?:\[[^\]]*\])?\s*\{(?P<key>[^}]*)\}(?P<text>.*)$", re.DOTALL
)
# Optional width argument right after \begin{thebibliography}
_BIB_WIDTH_RE = re.compile(r"\s*\{[^}]*\}")


class Command(NamedTuple):
    kind: str
    content: str
    raw: str


# ---------------------------------------------------------------------------
# Citations / includes
# ---------------------------------------------------------------------------


def iter_commands(text: str) -> Iterator[Command]:
    """Yield citation and include commands in source order."""
    for m in COMMAND_RE.finditer(text):
        yield Command(m.group("kind"), m.group("content"), m.group(0))


def iter_includes(text: str) -> Iterator[Command]:
    for m in INCLUDE_RE.finditer(text):
        yield Command(m.group("kind"), m.group("content"), m.group(0))


def is_citation(command: Command) -> bool:
    return command.kind in CITE_KINDS


def parse_citation(command: Command, path: Optional[Path] = None) -> Citation:
    """
    Build a Citation from a matched `\\cite{a, b}` style command.

    Keys are comma-split and trimmed; empty keys are dropped.
    """
    keys = [k.strip() for k in command.content.split(",")]
    keys = [k for k in keys if k]
    if not keys:
        raise LatexParseError(path, command.raw, "citation without any key")
    return Citation(keys=keys, kind=command.kind, raw=command.raw)


def include_targets(command: Command) -> List[str]:
    """
    File names referenced by an include command.

    `\\includeonly` takes a comma-separated list; `\\input` and `\\include`
    take a single name.
    """
    if command.kind == "includeonly":
        parts = command.content.split(",")
    else:
        parts = [command.content]
    return [p.strip() for p in parts if p.strip()]


def resolve_include(source: Path | str, target: str, extensions: Sequence[str]) -> Path:
    """
    Resolve an include target relative to the directory of `source`.

    Each suffix in `extensions` is tried in order; the first existing file wins.
    """
    base = Path(source).parent
    tried: List[Path] = []
    for ext in extensions:
        candidate = base / (target + ext)
        tried.append(candidate)
        if candidate.is_file():
            return candidate
    raise IncludeNotFoundError(source, target, tried)


# ---------------------------------------------------------------------------
# thebibliography blocks
# ---------------------------------------------------------------------------


def find_thebibliography(text: str, path: Optional[Path] = None) -> List[Tuple[int, int]]:
    """
    Return (start, end) spans of every thebibliography environment, in order.

    A block starts at `\\begin{thebibliography}` and ends right after the
    next `\\end{thebibliography}`.
    """
    spans: List[Tuple[int, int]] = []
    pos = 0
    while True:
        start = text.find(BEGIN_BIB, pos)
        if start < 0:
            return spans
        end = text.find(END_BIB, start + len(BEGIN_BIB))
        if end < 0:
            raise LatexParseError(path, BEGIN_BIB, "unterminated thebibliography environment")
        end += len(END_BIB)
        spans.append((start, end))
        pos = end


def _block_body(block: str) -> str:
    body = block[len(BEGIN_BIB):-len(END_BIB)]
    m = _BIB_WIDTH_RE.match(body)
    if m:
        body = body[m.end():]
    return body


def parse_bibitems(block: str, path: Optional[Path] = None) -> List[BibEntry]:
    """
    Parse the `\\bibitem{key} text` children of one thebibliography block.

    Text runs until the next `\\bibitem` or the end of the block and is
    passed through clean_bib_text. Anything before the first `\\bibitem`
    (e.g. `\\newblock` setup) is ignored.
    """
    chunks = _BIBITEM_SPLIT_RE.split(_block_body(block))
    entries: List[BibEntry] = []
    for chunk in chunks[1:]:
        m = _BIBITEM_BODY_RE.match(chunk)
        if m is None:
            raise LatexParseError(
                path,
                "\\bibitem" + chunk.strip()[:40],
                "bibitem without a {key}",
            )
        entries.append(
            BibEntry(
                key=m.group("key").strip(),
                text=clean_bib_text(m.group("text").strip()),
                source=path,
            )
        )
    return entries


def parse_bibliography(text: str, path: Optional[Path] = None) -> List[BibEntry]:
    """All bibliography entries of every thebibliography block in `text`."""
    entries: List[BibEntry] = []
    for start, end in find_thebibliography(text, path):
        entries.extend(parse_bibitems(text[start:end], path))
    return entries


def replace_thebibliography(text: str, block: str, path: Optional[Path] = None) -> str:
    """Replace every thebibliography environment in `text` with `block`."""
    spans = find_thebibliography(text, path)
    if not spans:
        return text

    out: List[str] = []
    pos = 0
    for start, end in spans:
        out.append(text[pos:start])
        out.append(block)
        pos = end
    out.append(text[pos:])
    return "".join(out)

# latex_thebib/compiler/formatter.py

"""
BibTeX records -> legacy `thebibliography` (or enumerate) TeX code.

Each entry becomes one line:

    \\bibitem{key} \\textsc{J. Doe \\& R. Roe} \\textit{Title}, Journal \\textbf{3}(2):1--9 (2020)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from pydantic import BaseModel

from latex_thebib.errors import MissingFieldError
from latex_thebib.models import BibtexRecord
from latex_thebib.parsing.bibtex_parser import load_bibtex_file
from latex_thebib.parsing.normalizer import clean_bib_text
from latex_thebib.refactor.rewriter import thebibliography_size

logger = logging.getLogger(__name__)


class CompileOptions(BaseModel):
    """
    publisher:  append a "- Publisher" segment when the entry has one.
    sort:       sort by year, most recent first.
    aslist:     emit an enumerate list instead of a bibliography.
    cite_prefix: prepended to every \\bibitem label.
    """

    publisher: bool = False
    sort: bool = False
    aslist: bool = False
    cite_prefix: str = ""


def format_author(name: str) -> str:
    """`Doe, John Paul` -> `J. P. Doe`; names without a comma are kept."""
    parts = name.split(", ")
    last = parts[0].strip()
    if len(parts) < 2:
        return last

    initials = ". ".join(tok[0].upper() for tok in parts[1].split(" ") if tok)
    if not initials:
        return last
    return f"{initials}. {last}"


def format_all_authors(authors: str) -> str:
    names = [format_author(a) for a in authors.split(" and ")]
    if len(names) == 1:
        return f"\\textsc{{{names[0]}}}"
    return f"\\textsc{{{', '.join(names[:-1])} \\& {names[-1]}}}"


def format_volume(record: BibtexRecord) -> str:
    """
    `\\textbf{volume}(number):pages`, built from whichever parts exist.

    The most significant present part takes the bold slot.
    """
    parts = [
        record.get(name)
        for name in ("pages", "number", "volume")
        if record.get(name)
    ]
    out = ""
    if parts:
        out += f"\\textbf{{{parts.pop()}}}"
    if parts:
        out += f"({parts.pop()})"
    if parts:
        out += f":{parts.pop()}"
    return out


def _required(record: BibtexRecord, field: str) -> str:
    value = record.get(field)
    if value is None:
        raise MissingFieldError(record.key, field)
    return value


def _year(record: BibtexRecord) -> int:
    raw = _required(record, "year")
    try:
        return int(raw.strip())
    except ValueError:
        raise MissingFieldError(record.key, "year", reason="non-numeric") from None


def sort_by_year(records: Sequence[BibtexRecord]) -> List[BibtexRecord]:
    """Most recent first; entries of the same year keep their file order."""
    return sorted(records, key=_year, reverse=True)


def format_record(record: BibtexRecord, position: int, options: CompileOptions) -> str:
    """One cleaned entry line; `position` is 1-based and only used by aslist."""
    if options.aslist:
        label = f"\\item[({position})] "
    else:
        label = f"\\bibitem{{{options.cite_prefix}{record.key}}}"

    elements = [
        label,
        format_all_authors(_required(record, "author")),
        f"\\textit{{{_required(record, 'title')}}},",
        record.get("journal", ""),
        format_volume(record),
    ]
    if options.publisher:
        publisher = record.get("publisher")
        elements.append(f"- {publisher}" if publisher else "")
    elements.append(f"({_required(record, 'year')})")

    return clean_bib_text(" ".join(elements))


def compile_bibliography(records: Sequence[BibtexRecord], options: CompileOptions) -> str:
    """
    Render all records as one TeX environment.
    """
    records = list(records)
    if options.sort:
        records = sort_by_year(records)

    if options.aslist:
        out = "\\begin{enumerate}\n"
    else:
        out = f"\\begin{{thebibliography}}{{{thebibliography_size(len(records))}}}\n\n"

    for n, record in enumerate(records, start=1):
        out += format_record(record, n, options) + "\n\n"

    out += "\\end{enumerate}" if options.aslist else "\\end{thebibliography}"

    logger.info("Compiled %d BibTeX entries", len(records))
    return out


def compile_file(path: Path | str, options: CompileOptions) -> str:
    """Read a .bib file and compile it."""
    return compile_bibliography(load_bibtex_file(path), options)

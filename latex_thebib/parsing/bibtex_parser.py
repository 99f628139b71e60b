# latex_thebib/parsing/bibtex_parser.py

"""
BibTeX -> BibtexRecord adapter.

Field extraction itself is delegated to `bibtexparser`; this module only
normalizes its output (lower-cased field names, stripped outer braces,
entries without a key dropped) and maps failures to BibtexParseError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import bibtexparser
from bibtexparser.bparser import BibTexParser

from latex_thebib.errors import BibtexParseError
from latex_thebib.models import BibtexRecord
from latex_thebib.parsing.normalizer import read_tex_stripped

logger = logging.getLogger(__name__)


def strip_outer_braces(value: str) -> str:
    """
    Remove one pair of wrapping braces or quotes if they enclose the whole value.

    `{A} and {B}` is left alone: its first brace closes before the end.
    """
    value = value.strip()
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1].strip()
    if len(value) < 2 or value[0] != "{" or value[-1] != "}":
        return value

    depth = 0
    for i, ch in enumerate(value):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0 and i != len(value) - 1:
                return value
    return value[1:-1].strip()


def _make_parser() -> BibTexParser:
    parser = BibTexParser(common_strings=True)
    parser.ignore_nonstandard_types = False
    parser.homogenize_fields = False
    return parser


def parse_bibtex(text: str, path: Optional[Path] = None) -> List[BibtexRecord]:
    """
    Parse BibTeX source into records, preserving file order.
    """
    try:
        database = bibtexparser.loads(text, parser=_make_parser())
    except Exception as exc:  # noqa: BLE001 - bibtexparser raises assorted types
        raise BibtexParseError(path, f"invalid BibTeX: {exc}") from exc

    records: List[BibtexRecord] = []
    for raw in database.entries:
        key = (raw.get("ID") or "").strip()
        if not key:
            logger.warning("Skipping BibTeX entry without a key in %s", path or "<text>")
            continue

        fields: Dict[str, str] = {}
        for name, value in raw.items():
            if name in {"ENTRYTYPE", "ID"} or value is None:
                continue
            # BibTeX treats any whitespace run as one space
            fields[name.lower()] = strip_outer_braces(" ".join(str(value).split()))

        records.append(
            BibtexRecord(
                key=key,
                entry_type=(raw.get("ENTRYTYPE") or "misc").lower().strip(),
                fields=fields,
            )
        )

    logger.info("Parsed %d BibTeX entries from %s", len(records), path or "<text>")
    return records


def load_bibtex_file(path: Path | str, encoding: Optional[str] = None) -> List[BibtexRecord]:
    """Read a .bib file through the TeX normalizer and parse it."""
    path = Path(path)
    return parse_bibtex(read_tex_stripped(path, encoding=encoding), path)

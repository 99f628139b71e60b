# latex_thebib/parsing/normalizer.py

"""
Text normalization applied to every source file before parsing.

- `%` comments are removed; an escaped `\\%` survives untouched.
- Lines that consist only of a comment are dropped.
- Runs of blank lines are folded so no three newlines appear in a row.

`clean_bib_text` is the per-entry whitespace/markup cleanup shared by the
refactor and compile commands.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from latex_thebib.config.settings import settings
from latex_thebib.errors import SourceReadError

logger = logging.getLogger(__name__)

# Stand-in for `\%` while comments are cut; must never occur in real sources.
_PERCENT_PLACEHOLDER = "\x00THEBIB-ESCAPED-PERCENT\x00"


def dedup_token(text: str, token: str, reps: int) -> str:
    """
    Fold every run of `reps` (or more) consecutive `token`s down to `reps - 1`.

    Repeats until a full pass changes nothing, so arbitrarily long runs
    collapse.
    """
    if reps < 2 or not token:
        return text

    run = token * reps
    shorter = token * (reps - 1)
    while True:
        folded = text.replace(run, shorter)
        if folded == text:
            return text
        text = folded


def strip_tex_comments(text: str) -> str:
    """
    Remove LaTeX comments and fold blank-line runs.

    Each line is trimmed; lines starting with `%` are dropped entirely,
    otherwise everything from the first unescaped `%` on is cut. Blank
    lines already present are kept (they are paragraph breaks) but at
    most one blank line survives in a row.
    """
    protected = text.replace("\\%", _PERCENT_PLACEHOLDER)

    lines = []
    for line in protected.split("\n"):
        line = line.strip()
        if line.startswith("%"):
            continue
        lines.append(line.split("%", 1)[0].strip())

    folded = dedup_token("\n".join(lines), "\n", 3)
    return folded.replace(_PERCENT_PLACEHOLDER, "\\%")


def read_tex_stripped(path: Path | str, encoding: Optional[str] = None) -> str:
    """
    Read a TeX/BibTeX file and return its comment-free, normalized text.

    Raises SourceReadError when the file cannot be read or decoded.
    """
    encoding = encoding or settings.encoding
    path = Path(path)
    try:
        raw = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(path, str(exc)) from exc

    logger.debug("Read %s (%d chars)", path, len(raw))
    return strip_tex_comments(raw)


def clean_bib_text(text: str) -> str:
    """
    Collapse whitespace and normalize font markup in bibliography text.

    Applies, until a full pass changes nothing:
      - double spaces -> single space
      - `\\it ` -> `\\em `
      - CR, LF and TAB -> space
    """
    while True:
        cleaned = (
            text.replace("  ", " ")
            .replace("\\it ", "\\em ")
            .replace("\n", " ")
            .replace("\r", " ")
            .replace("\t", " ")
        )
        if cleaned == text:
            return text
        text = cleaned

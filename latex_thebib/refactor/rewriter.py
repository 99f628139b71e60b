# latex_thebib/refactor/rewriter.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from latex_thebib.config.settings import settings, validate_subdir
from latex_thebib.errors import IncludeNotFoundError
from latex_thebib.models import BibEntry, Citation
from latex_thebib.parsing.latex_parser import (
    COMMAND_RE,
    include_targets,
    iter_includes,
    replace_thebibliography,
    resolve_include,
)
from latex_thebib.parsing.normalizer import read_tex_stripped
from latex_thebib.refactor.extractor import check_cycle

logger = logging.getLogger(__name__)


def thebibliography_size(count: int) -> int:
    """
    Smallest 9, 99, 999, ... that is >= count (0 for an empty bibliography).

    LaTeX only uses this argument for the label width.
    """
    size = 0
    while size < count:
        size = size * 10 + 9
    return size


def format_thebibliography(entries: Sequence[BibEntry]) -> str:
    items = "\n\n".join(e.to_latex() for e in entries)
    return (
        f"\\begin{{thebibliography}}{{{thebibliography_size(len(entries))}}}\n"
        f"{items}\n"
        f"\\end{{thebibliography}}"
    )


@dataclass(frozen=True)
class RewriteContext:
    """
    Read-only state shared by every file of one rewrite pass.
    """

    minimal_bib: Tuple[BibEntry, ...]
    citations: Tuple[Citation, ...]
    subdir: str

    @classmethod
    def build(
        cls,
        minimal_bib: Sequence[BibEntry],
        citations: Sequence[Citation],
        subdir: Optional[str] = None,
    ) -> "RewriteContext":
        return cls(
            minimal_bib=tuple(minimal_bib),
            citations=tuple(citations),
            subdir=validate_subdir(subdir or settings.subdir),
        )

    @property
    def replacements(self) -> Dict[str, str]:
        """Original citation text -> rewritten citation text."""
        return {c.raw: c.to_latex() for c in self.citations}

    @property
    def bibliography_block(self) -> str:
        return format_thebibliography(self.minimal_bib)


def output_path(path: Path | str, subdir: str) -> Path:
    """`dir/name.tex` -> `dir/<subdir>/name.tex`."""
    path = Path(path)
    return path.parent / subdir / path.name


def rewrite_text(text: str, context: RewriteContext, path: Optional[Path] = None) -> str:
    """
    Apply the citation rewrite and bibliography replacement to one file's text.

    Citations are substituted in a single scan, so a rewritten citation is
    never matched again.
    """
    replacements = context.replacements

    def _sub(m):
        raw = m.group(0)
        return replacements.get(raw, raw)

    text = COMMAND_RE.sub(_sub, text)
    return replace_thebibliography(text, context.bibliography_block, path)


def rewrite(
    path: Path | str,
    context: RewriteContext,
    *,
    extensions: Optional[Sequence[str]] = None,
    skip_missing: Optional[bool] = None,
    encoding: Optional[str] = None,
) -> List[Path]:
    """
    Rewrite `path` and, recursively, every file it includes.

    Each file is re-read from its original location and written to
    `<its dir>/<subdir>/<its name>`. Returns the written paths in order.
    """
    if extensions is None:
        extensions = settings.include_extensions
    if skip_missing is None:
        skip_missing = settings.skip_missing_includes

    written: List[Path] = []
    _rewrite_into(
        Path(path),
        context,
        written,
        ancestors=[],
        extensions=list(extensions),
        skip_missing=skip_missing,
        encoding=encoding or settings.encoding,
    )
    return written


def _rewrite_into(
    path: Path,
    context: RewriteContext,
    written: List[Path],
    *,
    ancestors: List[Path],
    extensions: List[str],
    skip_missing: bool,
    encoding: str,
) -> None:
    check_cycle(path, ancestors)

    contents = rewrite_text(read_tex_stripped(path, encoding=encoding), context, path)

    target = output_path(path, context.subdir)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(contents, encoding=encoding)
    written.append(target)
    logger.info("Wrote %s", target)

    stack = ancestors + [path]
    for command in iter_includes(contents):
        for name in include_targets(command):
            try:
                child = resolve_include(path, name, extensions)
            except IncludeNotFoundError:
                if not skip_missing:
                    raise
                logger.warning("%s: skipping missing include '%s'", path, name)
                continue

            _rewrite_into(
                child,
                context,
                written,
                ancestors=stack,
                extensions=extensions,
                skip_missing=skip_missing,
                encoding=encoding,
            )

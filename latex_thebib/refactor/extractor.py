# latex_thebib/refactor/extractor.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from latex_thebib.config.settings import settings
from latex_thebib.errors import IncludeCycleError, IncludeNotFoundError
from latex_thebib.models import BibEntry, Citation
from latex_thebib.parsing.latex_parser import (
    include_targets,
    is_citation,
    iter_commands,
    parse_bibliography,
    parse_citation,
    resolve_include,
)
from latex_thebib.parsing.normalizer import read_tex_stripped

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """
    Everything found while walking an include tree.

    citations:
        In global order: in-order, depth-first over the include tree.
    entries:
        Bibliography entries; each file's own entries come before those of
        the files it includes.
    files:
        Every file read, in visit order (a file included twice appears twice).
    missing_includes:
        (source, target) pairs skipped because the target could not be resolved.
    """

    citations: List[Citation] = field(default_factory=list)
    entries: List[BibEntry] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)
    missing_includes: List[Tuple[Path, str]] = field(default_factory=list)


def check_cycle(path: Path, ancestors: Sequence[Path]) -> None:
    """Raise IncludeCycleError if `path` is already on the include stack."""
    resolved = path.resolve()
    for i, ancestor in enumerate(ancestors):
        if ancestor.resolve() == resolved:
            raise IncludeCycleError(list(ancestors[i:]) + [path])


def extract(
    path: Path | str,
    *,
    extensions: Optional[Sequence[str]] = None,
    skip_missing: Optional[bool] = None,
    encoding: Optional[str] = None,
) -> ExtractionResult:
    """
    Collect citations and bibliography entries from `path` and every file it
    includes, recursively.

    Citations are taken in match order within a file; when an include
    directive is met, the whole included subtree is extracted right there.
    """
    if extensions is None:
        extensions = settings.include_extensions
    if skip_missing is None:
        skip_missing = settings.skip_missing_includes

    result = ExtractionResult()
    _extract_into(
        Path(path),
        result,
        ancestors=[],
        extensions=list(extensions),
        skip_missing=skip_missing,
        encoding=encoding,
    )
    logger.info(
        "Extracted %d citations and %d bibliography entries from %d files",
        len(result.citations),
        len(result.entries),
        len(result.files),
    )
    return result


def _extract_into(
    path: Path,
    result: ExtractionResult,
    *,
    ancestors: List[Path],
    extensions: List[str],
    skip_missing: bool,
    encoding: Optional[str],
) -> None:
    check_cycle(path, ancestors)

    contents = read_tex_stripped(path, encoding=encoding)
    result.files.append(path)
    result.entries.extend(parse_bibliography(contents, path))

    stack = ancestors + [path]
    for command in iter_commands(contents):
        if is_citation(command):
            result.citations.append(parse_citation(command, path))
            continue

        for target in include_targets(command):
            try:
                child = resolve_include(path, target, extensions)
            except IncludeNotFoundError:
                if not skip_missing:
                    raise
                logger.warning("%s: skipping missing include '%s'", path, target)
                result.missing_includes.append((path, target))
                continue

            _extract_into(
                child,
                result,
                ancestors=stack,
                extensions=extensions,
                skip_missing=skip_missing,
                encoding=encoding,
            )

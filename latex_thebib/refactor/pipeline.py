# latex_thebib/refactor/pipeline.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from latex_thebib.config.settings import settings, validate_subdir
from latex_thebib.graph.clustering import cluster
from latex_thebib.models import BibEntry, Citation, ClusterResult
from latex_thebib.refactor.extractor import ExtractionResult, extract
from latex_thebib.refactor.planner import plan
from latex_thebib.refactor.rewriter import RewriteContext, rewrite

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Public result type
# -----------------------------------------------------------------------------

@dataclass
class RefactorReport:
    """
    Summary of one refactor run:

    - extraction: raw citations/entries/files as found in the sources
    - clusters: duplicate detection result (remap + canonical entries)
    - clean_citations / minimal_bib: what was written
    - written: output files, in write order
    """
    extraction: ExtractionResult
    clusters: ClusterResult
    clean_citations: List[Citation]
    minimal_bib: List[BibEntry]
    written: List[Path] = field(default_factory=list)

    @property
    def remap(self) -> Dict[str, str]:
        return self.clusters.remap

    @property
    def missing_keys(self) -> List[str]:
        found = {e.key for e in self.clusters.canonical_entries}
        return [e.key for e in self.minimal_bib if e.key not in found]

    @property
    def missing_includes(self) -> List[Tuple[Path, str]]:
        return self.extraction.missing_includes


def analyze(
    path: Path | str,
    threshold: Optional[float] = None,
    *,
    skip_missing: Optional[bool] = None,
) -> Tuple[ExtractionResult, ClusterResult]:
    """
    Extraction + clustering only; nothing is written.
    """
    if threshold is None:
        threshold = settings.threshold

    extraction = extract(path, skip_missing=skip_missing)
    return extraction, cluster(extraction.entries, threshold)


def run_refactor(
    path: Path | str,
    threshold: Optional[float] = None,
    subdir: Optional[str] = None,
    *,
    skip_missing: Optional[bool] = None,
) -> RefactorReport:
    """
    Extractor -> clustering -> planner -> tree rewriter for the document
    rooted at `path`.
    """
    path = Path(path)
    subdir = validate_subdir(subdir or settings.subdir)

    extraction, clusters = analyze(path, threshold, skip_missing=skip_missing)
    clean_citations, minimal_bib = plan(
        extraction.citations,
        clusters.canonical_entries,
        clusters.remap,
    )

    context = RewriteContext.build(minimal_bib, clean_citations, subdir)
    written = rewrite(path, context, skip_missing=skip_missing)

    logger.info(
        "Refactored %s: %d files written, %d entries kept",
        path,
        len(written),
        len(minimal_bib),
    )
    return RefactorReport(
        extraction=extraction,
        clusters=clusters,
        clean_citations=clean_citations,
        minimal_bib=minimal_bib,
        written=written,
    )

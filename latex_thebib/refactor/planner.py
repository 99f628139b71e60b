# latex_thebib/refactor/planner.py

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from latex_thebib.config.settings import settings
from latex_thebib.models import BibEntry, Citation

logger = logging.getLogger(__name__)


def dedup_preserving_order(items: Iterable[str]) -> List[str]:
    seen = set()
    unique: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def remap_citation(citation: Citation, remap: Mapping[str, str]) -> Citation:
    """
    Replace each key by its canonical key and drop repeats within the citation.

    Keys absent from `remap` pass through unchanged.
    """
    keys = (remap.get(k, k) for k in citation.keys)
    return citation.with_keys(dedup_preserving_order(keys))


def citation_order(citations: Iterable[Citation]) -> List[str]:
    """Distinct keys in first-seen order: citation by citation, left to right."""
    return dedup_preserving_order(k for c in citations for k in c.keys)


def plan(
    citations: Sequence[Citation],
    canonical_entries: Sequence[BibEntry],
    remap: Mapping[str, str],
    missing_text: Optional[str] = None,
) -> Tuple[List[Citation], List[BibEntry]]:
    """
    Compute cleaned citations and the minimal bibliography.

    The minimal bibliography holds exactly the keys cited (after remapping),
    in first-citation order. A cited key without a canonical entry is kept
    with `missing_text` as its text rather than failing the run.
    """
    if missing_text is None:
        missing_text = settings.missing_entry_text

    clean_citations = [remap_citation(c, remap) for c in citations]

    texts: Dict[str, str] = {e.key: e.text for e in canonical_entries}
    minimal_bib: List[BibEntry] = []
    for key in citation_order(clean_citations):
        text = texts.get(key)
        if text is None:
            logger.warning("No bibliography entry for cited key '%s'", key)
            text = missing_text
        minimal_bib.append(BibEntry(key=key, text=text))

    logger.info(
        "Minimal bibliography: %d of %d canonical entries cited",
        sum(1 for e in minimal_bib if e.key in texts),
        len(texts),
    )
    return clean_citations, minimal_bib

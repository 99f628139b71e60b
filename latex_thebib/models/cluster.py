# latex_thebib/models/cluster.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .bib_entry import BibEntry


@dataclass
class ClusterResult:
    """
    Output of bibliography clustering.

    remap:
        key -> canonical key, for every non-canonical key of a cluster.
        A key never maps to itself.
    canonical_entries:
        One entry per cluster, sorted by key (bookkeeping order only; the
        final bibliography follows first-citation order).
    clusters:
        Entry indices per cluster, canonical first, ordered by canonical index.
    """

    remap: Dict[str, str] = field(default_factory=dict)
    canonical_entries: List[BibEntry] = field(default_factory=list)
    clusters: List[List[int]] = field(default_factory=list)

    def canonical_key(self, key: str) -> str:
        return self.remap.get(key, key)

    @property
    def duplicate_clusters(self) -> List[List[int]]:
        return [c for c in self.clusters if len(c) > 1]

# latex_thebib/graph/clustering.py

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

import networkx as nx

from latex_thebib.graph.similarity import build_similarity_graph
from latex_thebib.models import BibEntry, ClusterResult

logger = logging.getLogger(__name__)


def connected_clusters(G: nx.Graph) -> List[List[int]]:
    """
    Connected components as sorted index lists, ordered by their smallest index.

    Sorting makes the result independent of set iteration order.
    """
    components = [sorted(c) for c in nx.connected_components(G)]
    components.sort(key=lambda c: c[0])
    return components


def cluster(entries: Sequence[BibEntry], threshold: float) -> ClusterResult:
    """
    Group near-duplicate bibliography entries and pick one canonical per group.

    The canonical member of a cluster is the entry extracted first (lowest
    index). Every other member's key maps to the canonical key, except
    members that already carry the canonical key.

    Parameters
    ----------
    entries:
        Bibliography entries in extraction order.
    threshold:
        Maximum normalized edit distance for two texts to count as duplicates.
    """
    G = build_similarity_graph(entries, threshold)
    clusters = connected_clusters(G)

    remap: Dict[str, str] = {}
    canonical_entries: List[BibEntry] = []

    for members in clusters:
        canonical = entries[members[0]]
        canonical_entries.append(canonical)
        for idx in members[1:]:
            key = entries[idx].key
            if key == canonical.key:
                continue
            remap[key] = canonical.key

    canonical_entries.sort(key=lambda e: e.key)

    logger.info(
        "Clustered %d bibliography entries into %d references (%d keys remapped)",
        len(entries),
        len(clusters),
        len(remap),
    )
    return ClusterResult(
        remap=remap,
        canonical_entries=canonical_entries,
        clusters=clusters,
    )

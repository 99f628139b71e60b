# latex_thebib/graph/similarity.py

from __future__ import annotations

import logging
from typing import Sequence

import networkx as nx
from rapidfuzz.distance import Levenshtein

from latex_thebib.models import BibEntry

logger = logging.getLogger(__name__)


def edit_distance(a: str, b: str) -> int:
    """
    Character-level Levenshtein distance (unit cost insert/delete/substitute).

    Works on code points, so multi-byte scripts count one per character.
    """
    return int(Levenshtein.distance(a, b))


def normalized_distance(a: str, b: str) -> float:
    """
    2 * edit_distance(a, b) / (len(a) + len(b)).

    0.0 means identical, 1.0 means nothing in common (for equal lengths).
    Two empty strings are identical.
    """
    total = len(a) + len(b)
    if total == 0:
        return 0.0
    return 2.0 * edit_distance(a, b) / total


def build_similarity_graph(entries: Sequence[BibEntry], threshold: float) -> nx.Graph:
    """
    Undirected graph over entry indices.

    Every entry is a node. An edge joins i and j when their texts are within
    `threshold` normalized distance, or when they share the same key (same-key
    entries always end up in one cluster, whatever their texts).
    """
    G = nx.Graph()
    G.add_nodes_from(range(len(entries)))

    for i, ei in enumerate(entries):
        for j in range(i + 1, len(entries)):
            ej = entries[j]
            if ei.key == ej.key:
                G.add_edge(i, j, distance=None, same_key=True)
                continue

            d = normalized_distance(ei.text, ej.text)
            if d <= threshold:
                logger.debug(
                    "Duplicate candidates %s ~ %s (distance=%.3f)", ei.key, ej.key, d
                )
                G.add_edge(i, j, distance=d, same_key=False)

    return G

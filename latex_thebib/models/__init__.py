# latex_thebib/models/__init__.py

from .bib_entry import BibEntry
from .bibtex_record import BibtexRecord
from .citation import CITE_KINDS, Citation
from .cluster import ClusterResult

__all__ = ["BibEntry", "BibtexRecord", "CITE_KINDS", "Citation", "ClusterResult"]

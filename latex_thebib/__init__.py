# latex_thebib/__init__.py

"""
Tools for legacy LaTeX documents that carry a manual ``thebibliography``:

- ``refactor``: deduplicate bibliography entries across an include tree,
  canonicalize citation keys and keep only cited entries, in citation order.
- ``compile``: turn a BibTeX file into ``thebibliography`` (or list) TeX code.
"""

__version__ = "0.3.0"

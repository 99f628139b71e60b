# latex_thebib/models/bibtex_record.py

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field


class BibtexRecord(BaseModel):
    """
    One parsed BibTeX entry: `@entry_type{key, field = value, ...}`.

    Field names are lower-cased; values have their outer braces/quotes removed.
    """

    key: str
    entry_type: str = "misc"
    fields: Dict[str, str] = Field(default_factory=dict)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.fields.get(name.lower(), default)

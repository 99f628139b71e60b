from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_INCLUDE_EXTENSIONS: List[str] = ["", ".tex", ".latex", ".bib", ".bbl"]
MISSING_ENTRY_TEXT = "ERROR, BIBENTRY NOT FOUND."


def validate_subdir(value: str) -> str:
    """
    Output folders are always a single flat sibling of each source file.

    Reject anything that would write over the sources or escape the tree.
    """
    value = value.strip()
    if not value or value in (".", ".."):
        raise ValueError(f"subdir must name a folder, got {value!r}")
    if "/" in value or "\\" in value:
        raise ValueError(f"subdir must be a single path component, got {value!r}")
    return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="THEBIB_",
    )

    # ------------------------------------------------------------------
    # Refactor
    # ------------------------------------------------------------------
    threshold: float = Field(
        default=0.3,
        ge=0.0,
        description=(
            "Normalized edit distance at or below which two bibliography "
            "entries are treated as the same reference."
        ),
    )

    subdir: str = Field(
        default="cleaned",
        description="Folder (next to each source file) receiving the rewritten files.",
    )

    include_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE_EXTENSIONS),
        description="Suffixes tried, in order, when resolving \\input/\\include targets.",
    )

    missing_entry_text: str = Field(
        default=MISSING_ENTRY_TEXT,
        description="Text written for a cited key that has no \\bibitem anywhere.",
    )

    skip_missing_includes: bool = Field(
        default=False,
        description=(
            "If True, an include target that cannot be resolved is logged and "
            "skipped instead of aborting the run."
        ),
    )

    # ------------------------------------------------------------------
    # I/O / runtime
    # ------------------------------------------------------------------
    encoding: str = Field(
        default="utf-8",
        description="Encoding used to read and write TeX/BibTeX files.",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level used by the CLI.",
    )

    @field_validator("subdir")
    @classmethod
    def _check_subdir(cls, value: str) -> str:
        return validate_subdir(value)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Singleton-style accessor so we only construct Settings once.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()

"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class AmbiguityPolicy(Enum):
    """What to do when profile-of markers name more than one base type."""

    FIRST_DECLARED = "first-declared"
    ERROR = "error"


@dataclass(frozen=True)
class ClassifierSettings:
    """Tunable classifier behaviour."""

    ambiguity_policy: AmbiguityPolicy = AmbiguityPolicy.FIRST_DECLARED
    structural_fallback: bool = True
    cache_results: bool = True


@dataclass(frozen=True)
class Configuration:
    """Validated configuration file contents."""

    path: Path
    classification: ClassifierSettings = field(default_factory=ClassifierSettings)
    schema_paths: tuple[Path, ...] = ()

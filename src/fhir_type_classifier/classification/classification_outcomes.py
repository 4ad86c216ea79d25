"""Classification domain entities and errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from fhir_type_classifier.base_types.base_type_catalog import BaseType


class ClassificationError(Exception):
    """Base class for failures of a single classification call."""


class MalformedSchemaError(ClassificationError):
    """Raised when a descriptor's profile-of markers cannot be resolved consistently."""


class AmbiguousProfileError(MalformedSchemaError):
    """Raised under the strict policy when markers name several base types."""


class InvalidArgumentError(ClassificationError, ValueError):
    """Raised for arguments outside the classifier's closed input domain."""


class ClassificationResult(Enum):
    """Relationship between one descriptor and one base type."""

    EXACT = "exact"
    PROFILE = "profile"
    UNRELATED = "unrelated"


@dataclass(frozen=True)
class TypeResolution:
    """Everything the classifier knows about one descriptor.

    At most one of `exact` and `profile_of` is set.
    """

    exact: BaseType | None = None
    profile_of: BaseType | None = None

    def __post_init__(self) -> None:
        if self.exact is not None and self.profile_of is not None:
            raise ValueError("A descriptor cannot be both exact and a profile.")

    @property
    def base_type(self) -> BaseType | None:
        return self.exact or self.profile_of

    def result_for(self, target: BaseType) -> ClassificationResult:
        if self.exact is target:
            return ClassificationResult.EXACT
        if self.profile_of is target:
            return ClassificationResult.PROFILE
        return ClassificationResult.UNRELATED


def require_base_type(value: Any) -> BaseType:
    """Coerce a base type argument, failing fast on anything outside the enumeration."""
    if isinstance(value, BaseType):
        return value
    if isinstance(value, str):
        found = BaseType.from_reference(value)
        if found is not None:
            return found
    raise InvalidArgumentError(f"Unknown base type: {value!r}")

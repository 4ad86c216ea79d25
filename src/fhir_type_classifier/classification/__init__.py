"""Classification domain exports."""

from .classification_outcomes import (
    AmbiguousProfileError,
    ClassificationError,
    ClassificationResult,
    InvalidArgumentError,
    MalformedSchemaError,
    TypeResolution,
    require_base_type,
)
from .descriptor_classifier import DescriptorClassifier
from .fhir_type_predicates import (
    classify,
    configure_default_classifier,
    default_classifier,
    is_exact,
    is_exact_or_profile,
    is_profile,
)
from .instance_classifier import InstanceClassifier, descriptor_of

__all__ = [
    "AmbiguousProfileError",
    "ClassificationError",
    "ClassificationResult",
    "InvalidArgumentError",
    "MalformedSchemaError",
    "TypeResolution",
    "require_base_type",
    "DescriptorClassifier",
    "InstanceClassifier",
    "descriptor_of",
    "classify",
    "configure_default_classifier",
    "default_classifier",
    "is_exact",
    "is_exact_or_profile",
    "is_profile",
]

"""Record-instance classification service."""

from __future__ import annotations

from fhir_type_classifier.base_types.base_type_catalog import BaseType
from fhir_type_classifier.schema_descriptors.descriptor_models import (
    SchemaDescriptor,
    SchemaRecord,
)

from .classification_outcomes import ClassificationResult, InvalidArgumentError, TypeResolution
from .descriptor_classifier import DescriptorClassifier


class InstanceClassifier:
    """Classifies record instances by delegating on their descriptor.

    Field values never influence the answer.
    """

    def __init__(self, descriptor_classifier: DescriptorClassifier) -> None:
        self._descriptor_classifier = descriptor_classifier

    def classify(self, instance: SchemaRecord, target: BaseType | str) -> ClassificationResult:
        return self._descriptor_classifier.classify(descriptor_of(instance), target)

    def is_exact(self, instance: SchemaRecord, target: BaseType | str) -> bool:
        return self._descriptor_classifier.is_exact(descriptor_of(instance), target)

    def is_profile(self, instance: SchemaRecord, target: BaseType | str) -> bool:
        return self._descriptor_classifier.is_profile(descriptor_of(instance), target)

    def is_exact_or_profile(self, instance: SchemaRecord, target: BaseType | str) -> bool:
        return self._descriptor_classifier.is_exact_or_profile(descriptor_of(instance), target)

    def resolve(self, instance: SchemaRecord) -> TypeResolution:
        return self._descriptor_classifier.resolve(descriptor_of(instance))


def descriptor_of(instance: SchemaRecord) -> SchemaDescriptor:
    """Return the descriptor of a record instance."""
    accessor = getattr(instance, "descriptor", None)
    if not callable(accessor):
        raise InvalidArgumentError(f"Not a record instance: {instance!r}")
    descriptor = accessor()
    if not isinstance(descriptor, SchemaDescriptor):
        raise InvalidArgumentError(
            f"{type(instance).__name__}.descriptor() did not return a schema descriptor."
        )
    return descriptor

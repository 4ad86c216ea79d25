"""Version-independent FHIR type tests over descriptors or record instances.

These predicates answer "is this a CodeableConcept, or a profile of one"
without naming any generated resource or profile type. They use a process
default classifier over the default base-type registry, which must be
populated with `initialize_base_types()` first.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from fhir_type_classifier.base_types.base_type_catalog import BaseType
from fhir_type_classifier.base_types.type_registry import default_registry
from fhir_type_classifier.configuration.runtime_settings import ClassifierSettings
from fhir_type_classifier.schema_descriptors.descriptor_loading import SchemaCatalog
from fhir_type_classifier.schema_descriptors.descriptor_models import (
    SchemaDescriptor,
    SchemaRecord,
)

from .classification_outcomes import ClassificationResult
from .descriptor_classifier import DescriptorClassifier
from .instance_classifier import descriptor_of

Classifiable = SchemaDescriptor | SchemaRecord
Predicate = Callable[[Classifiable], bool]

_DEFAULT_LOCK = threading.Lock()
_default_classifier: DescriptorClassifier | None = None


def configure_default_classifier(
    catalog: SchemaCatalog | None = None, settings: ClassifierSettings | None = None
) -> DescriptorClassifier:
    """Replace the process default classifier, e.g. after loading a descriptor catalog."""
    global _default_classifier
    classifier = DescriptorClassifier(default_registry(), catalog=catalog, settings=settings)
    with _DEFAULT_LOCK:
        _default_classifier = classifier
    return classifier


def default_classifier() -> DescriptorClassifier:
    global _default_classifier
    with _DEFAULT_LOCK:
        if _default_classifier is None:
            _default_classifier = DescriptorClassifier(default_registry())
        return _default_classifier


def classify(subject: Classifiable, target: BaseType | str) -> ClassificationResult:
    return default_classifier().classify(_as_descriptor(subject), target)


def is_exact(subject: Classifiable, target: BaseType | str) -> bool:
    return default_classifier().is_exact(_as_descriptor(subject), target)


def is_profile(subject: Classifiable, target: BaseType | str) -> bool:
    return default_classifier().is_profile(_as_descriptor(subject), target)


def is_exact_or_profile(subject: Classifiable, target: BaseType | str) -> bool:
    return default_classifier().is_exact_or_profile(_as_descriptor(subject), target)


def _as_descriptor(subject: Classifiable) -> SchemaDescriptor:
    if isinstance(subject, SchemaDescriptor):
        return subject
    return descriptor_of(subject)


def _exact_predicate(base_type: BaseType) -> Predicate:
    def predicate(subject: Classifiable) -> bool:
        return is_exact(subject, base_type)

    predicate.__doc__ = f"True when `subject` is the canonical {base_type.value} type."
    return predicate


def _profile_predicate(base_type: BaseType) -> Predicate:
    def predicate(subject: Classifiable) -> bool:
        return is_profile(subject, base_type)

    predicate.__doc__ = f"True when `subject` is a profile of {base_type.value}."
    return predicate


def _type_or_profile_predicate(base_type: BaseType) -> Predicate:
    def predicate(subject: Classifiable) -> bool:
        return is_exact_or_profile(subject, base_type)

    predicate.__doc__ = f"True when `subject` is {base_type.value} or a profile of it."
    return predicate


is_bundle = _exact_predicate(BaseType.BUNDLE)
is_profile_of_bundle = _profile_predicate(BaseType.BUNDLE)
is_type_or_profile_of_bundle = _type_or_profile_predicate(BaseType.BUNDLE)

is_codeable_concept = _exact_predicate(BaseType.CODEABLE_CONCEPT)
is_profile_of_codeable_concept = _profile_predicate(BaseType.CODEABLE_CONCEPT)
is_type_or_profile_of_codeable_concept = _type_or_profile_predicate(BaseType.CODEABLE_CONCEPT)

is_coding = _exact_predicate(BaseType.CODING)
is_profile_of_coding = _profile_predicate(BaseType.CODING)
is_type_or_profile_of_coding = _type_or_profile_predicate(BaseType.CODING)

is_code = _exact_predicate(BaseType.CODE)
is_profile_of_code = _profile_predicate(BaseType.CODE)
is_type_or_profile_of_code = _type_or_profile_predicate(BaseType.CODE)

is_extension = _exact_predicate(BaseType.EXTENSION)
is_profile_of_extension = _profile_predicate(BaseType.EXTENSION)
is_type_or_profile_of_extension = _type_or_profile_predicate(BaseType.EXTENSION)

is_boolean = _exact_predicate(BaseType.BOOLEAN)
is_string = _exact_predicate(BaseType.STRING)
is_integer = _exact_predicate(BaseType.INTEGER)
is_positive_int = _exact_predicate(BaseType.POSITIVE_INT)
is_unsigned_int = _exact_predicate(BaseType.UNSIGNED_INT)
is_decimal = _exact_predicate(BaseType.DECIMAL)
is_date_time = _exact_predicate(BaseType.DATE_TIME)
is_date = _exact_predicate(BaseType.DATE)
is_time = _exact_predicate(BaseType.TIME)
is_quantity = _exact_predicate(BaseType.QUANTITY)
is_simple_quantity = _exact_predicate(BaseType.SIMPLE_QUANTITY)

"""Base type enumeration tests."""

from __future__ import annotations

import pytest
from fhir_type_classifier.base_types import (
    COMPOSITE_BASE_TYPES,
    BaseType,
    ScalarKind,
    TypeCategory,
    build_canonical_descriptors,
)


def test_enumeration_is_closed_over_sixteen_base_types() -> None:
    assert len(BaseType) == 16
    assert set(COMPOSITE_BASE_TYPES) == {
        BaseType.BUNDLE,
        BaseType.CODEABLE_CONCEPT,
        BaseType.CODING,
        BaseType.CODE,
        BaseType.EXTENSION,
    }


@pytest.mark.parametrize(
    ("base_type", "url"),
    [
        (BaseType.CODEABLE_CONCEPT, "http://hl7.org/fhir/StructureDefinition/CodeableConcept"),
        (BaseType.CODE, "http://hl7.org/fhir/StructureDefinition/code"),
        (BaseType.DATE_TIME, "http://hl7.org/fhir/StructureDefinition/dateTime"),
        (BaseType.SIMPLE_QUANTITY, "http://hl7.org/fhir/StructureDefinition/SimpleQuantity"),
    ],
)
def test_structure_definition_urls_follow_fhir_naming(base_type: BaseType, url: str) -> None:
    assert base_type.url == url
    assert BaseType.from_reference(url) is base_type


def test_from_reference_accepts_enum_and_type_names() -> None:
    assert BaseType.from_reference("POSITIVE_INT") is BaseType.POSITIVE_INT
    assert BaseType.from_reference("PositiveInt") is BaseType.POSITIVE_INT
    assert BaseType.from_reference("positiveint") is BaseType.POSITIVE_INT
    assert BaseType.from_reference("Observation") is None
    assert BaseType.from_reference("http://hl7.org/fhir/StructureDefinition/Patient") is None


def test_primitives_carry_scalar_kinds_and_composites_do_not() -> None:
    assert BaseType.BOOLEAN.scalar_kind is ScalarKind.BOOL
    assert BaseType.DECIMAL.scalar_kind is ScalarKind.STRING
    assert BaseType.DATE_TIME.scalar_kind is ScalarKind.INT64
    for base_type in COMPOSITE_BASE_TYPES:
        assert base_type.category is TypeCategory.COMPOSITE
    assert BaseType.QUANTITY.category is TypeCategory.PRIMITIVE
    assert BaseType.CODING.scalar_kind is None


def test_canonical_shapes_cover_every_base_type_with_its_url() -> None:
    canonicals = build_canonical_descriptors()

    assert set(canonicals) == set(BaseType)
    for base_type, descriptor in canonicals.items():
        assert descriptor.url == base_type.url
        assert descriptor.full_name == f"google.fhir.r4.core.{base_type.value}"


def test_primitive_canonical_value_field_matches_scalar_kind() -> None:
    canonicals = build_canonical_descriptors()

    for base_type, descriptor in canonicals.items():
        kind = base_type.scalar_kind
        if kind is None:
            continue
        value_field = descriptor.find_field("value") or descriptor.find_field("value_us")
        assert value_field is not None
        assert value_field.type_name == kind.value
        assert value_field.required


def test_bundle_canonical_exposes_nested_entry_contract() -> None:
    bundle = build_canonical_descriptors()[BaseType.BUNDLE]

    entry = bundle.find_nested_type("Entry")
    assert entry is not None
    entry_field = bundle.find_field("entry")
    assert entry_field is not None
    assert entry_field.is_repeated
    assert entry_field.message_type is entry
    assert [field.name for field in entry.fields if field.required] == ["resource"]

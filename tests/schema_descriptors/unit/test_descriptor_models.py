"""Schema descriptor entity tests."""

from __future__ import annotations

import pytest
from fhir_type_classifier.schema_descriptors import (
    PROFILE_BASE,
    STRUCTURE_DEFINITION_URL,
    Cardinality,
    FieldDescriptor,
    RecordInstance,
    SchemaDescriptor,
)


def test_descriptors_compare_by_identity() -> None:
    first = SchemaDescriptor(full_name="example.Same")
    second = SchemaDescriptor(full_name="example.Same")

    assert first == first
    assert first != second
    assert len({first, second}) == 2


def test_annotation_values_preserve_declaration_order() -> None:
    descriptor = SchemaDescriptor(
        full_name="example.Profiled",
        annotations={
            STRUCTURE_DEFINITION_URL: "http://example.org/profiled",
            PROFILE_BASE: ["Coding", "CodeableConcept"],
        },
    )

    assert descriptor.url == "http://example.org/profiled"
    assert descriptor.annotation_values(PROFILE_BASE) == ("Coding", "CodeableConcept")
    assert descriptor.annotation_values("missing") == ()
    assert SchemaDescriptor(full_name="example.Plain").url is None


def test_iter_descriptors_walks_nested_types_depth_first() -> None:
    leaf = SchemaDescriptor(full_name="example.Outer.Inner.Leaf")
    inner = SchemaDescriptor(full_name="example.Outer.Inner", nested_types=(leaf,))
    sibling = SchemaDescriptor(full_name="example.Outer.Sibling")
    outer = SchemaDescriptor(full_name="example.Outer", nested_types=(inner, sibling))

    names = [item.name for item in outer.iter_descriptors()]
    assert names == ["Outer", "Inner", "Leaf", "Sibling"]
    assert outer.find_nested_type("Sibling") is sibling


def test_record_instance_reports_its_descriptor() -> None:
    descriptor = SchemaDescriptor(
        full_name="example.Coded",
        fields=(
            FieldDescriptor(name="codes", type_name="string", cardinality=Cardinality.REPEATED),
        ),
    )

    record = RecordInstance(schema=descriptor, values={"codes": ["a", "b"]})

    assert record.descriptor() is descriptor
    codes = descriptor.find_field("codes")
    assert codes is not None and codes.is_repeated


def test_annotations_are_read_only_copies_of_caller_data() -> None:
    markers = ["Coding"]
    source = {PROFILE_BASE: markers}
    descriptor = SchemaDescriptor(full_name="example.Guarded", annotations=source)

    source[PROFILE_BASE] = ["Extension"]
    markers.append("CodeableConcept")

    assert descriptor.annotation_values(PROFILE_BASE) == ("Coding",)
    with pytest.raises(TypeError):
        descriptor.annotations[PROFILE_BASE] = "Extension"  # type: ignore[index]

"""Built-in canonical descriptors for every base type, modelled on FHIR R4 core."""

from __future__ import annotations

from fhir_type_classifier.schema_descriptors.descriptor_models import (
    STRUCTURE_DEFINITION_URL,
    Cardinality,
    FieldDescriptor,
    SchemaDescriptor,
)

from .base_type_catalog import FHIR_STRUCTURE_DEFINITION_PREFIX, BaseType

CORE_PACKAGE = "google.fhir.r4.core"

_EXTENSION_NAME = f"{CORE_PACKAGE}.Extension"


def _field(
    name: str,
    type_ref: str | SchemaDescriptor,
    *,
    repeated: bool = False,
    required: bool = False,
) -> FieldDescriptor:
    message_type = type_ref if isinstance(type_ref, SchemaDescriptor) else None
    type_name = type_ref.full_name if isinstance(type_ref, SchemaDescriptor) else type_ref
    return FieldDescriptor(
        name=name,
        type_name=type_name,
        cardinality=Cardinality.REPEATED if repeated else Cardinality.SINGULAR,
        required=required,
        message_type=message_type,
    )


def _element_fields() -> tuple[FieldDescriptor, ...]:
    # Extension refers back to itself, so the reference stays by name.
    return (
        _field("id", "string"),
        _field("extension", _EXTENSION_NAME, repeated=True),
    )


def _descriptor(
    name: str,
    fields: tuple[FieldDescriptor, ...],
    *,
    url_name: str | None = None,
    nested_types: tuple[SchemaDescriptor, ...] = (),
) -> SchemaDescriptor:
    annotations: dict[str, str] = {}
    if url_name is not None:
        annotations[STRUCTURE_DEFINITION_URL] = FHIR_STRUCTURE_DEFINITION_PREFIX + url_name
    return SchemaDescriptor(
        full_name=f"{CORE_PACKAGE}.{name}",
        fields=_element_fields() + fields,
        nested_types=nested_types,
        annotations=annotations,
    )


def _primitive(base_type: BaseType, *value_fields: FieldDescriptor) -> SchemaDescriptor:
    return _descriptor(base_type.value, value_fields, url_name=base_type.url.rsplit("/", 1)[-1])


def build_canonical_descriptors() -> dict[BaseType, SchemaDescriptor]:
    """Build one fresh canonical descriptor per base type."""
    boolean = _primitive(BaseType.BOOLEAN, _field("value", "bool", required=True))
    string = _primitive(BaseType.STRING, _field("value", "string", required=True))
    integer = _primitive(BaseType.INTEGER, _field("value", "int32", required=True))
    positive_int = _primitive(BaseType.POSITIVE_INT, _field("value", "uint32", required=True))
    unsigned_int = _primitive(BaseType.UNSIGNED_INT, _field("value", "uint32", required=True))
    decimal = _primitive(BaseType.DECIMAL, _field("value", "string", required=True))
    date_time = _primitive(
        BaseType.DATE_TIME,
        _field("value_us", "int64", required=True),
        _field("timezone", "string"),
        _field("precision", "enum"),
    )
    date = _primitive(
        BaseType.DATE,
        _field("value_us", "int64", required=True),
        _field("timezone", "string"),
        _field("precision", "enum"),
    )
    time = _primitive(
        BaseType.TIME,
        _field("value_us", "int64", required=True),
        _field("precision", "enum"),
    )
    code = _primitive(BaseType.CODE, _field("value", "string", required=True))
    uri = _descriptor("Uri", (_field("value", "string", required=True),), url_name="uri")

    extension_value = SchemaDescriptor(
        full_name=f"{_EXTENSION_NAME}.ValueX",
        fields=(
            _field("boolean", boolean),
            _field("code", code),
            _field("date", date),
            _field("date_time", date_time),
            _field("decimal", decimal),
            _field("integer", integer),
            _field("positive_int", positive_int),
            _field("string_value", string),
            _field("time", time),
            _field("unsigned_int", unsigned_int),
            _field("uri", uri),
        ),
    )
    extension = _descriptor(
        "Extension",
        (
            _field("url", uri, required=True),
            _field("value", extension_value),
        ),
        url_name="Extension",
        nested_types=(extension_value,),
    )
    coding = _descriptor(
        "Coding",
        (
            _field("system", uri, required=True),
            _field("version", string),
            _field("code", code, required=True),
            _field("display", string),
            _field("user_selected", boolean),
        ),
        url_name="Coding",
    )
    codeable_concept = _descriptor(
        "CodeableConcept",
        (
            _field("coding", coding, repeated=True, required=True),
            _field("text", string, required=True),
        ),
        url_name="CodeableConcept",
    )
    quantity = _descriptor(
        "Quantity",
        (
            _field("value", decimal),
            _field("comparator", code),
            _field("unit", string),
            _field("system", uri),
            _field("code", code),
        ),
        url_name="Quantity",
    )
    simple_quantity = _descriptor(
        "SimpleQuantity",
        (
            _field("value", decimal),
            _field("unit", string),
            _field("system", uri),
            _field("code", code),
        ),
        url_name="SimpleQuantity",
    )
    bundle = _build_bundle(code=code, uri=uri, string=string, unsigned_int=unsigned_int)

    return {
        BaseType.BUNDLE: bundle,
        BaseType.CODEABLE_CONCEPT: codeable_concept,
        BaseType.CODING: coding,
        BaseType.CODE: code,
        BaseType.EXTENSION: extension,
        BaseType.BOOLEAN: boolean,
        BaseType.STRING: string,
        BaseType.INTEGER: integer,
        BaseType.POSITIVE_INT: positive_int,
        BaseType.UNSIGNED_INT: unsigned_int,
        BaseType.DECIMAL: decimal,
        BaseType.DATE_TIME: date_time,
        BaseType.DATE: date,
        BaseType.TIME: time,
        BaseType.QUANTITY: quantity,
        BaseType.SIMPLE_QUANTITY: simple_quantity,
    }


def _build_bundle(
    *,
    code: SchemaDescriptor,
    uri: SchemaDescriptor,
    string: SchemaDescriptor,
    unsigned_int: SchemaDescriptor,
) -> SchemaDescriptor:
    bundle_name = f"{CORE_PACKAGE}.Bundle"
    # Resources are opaque here; only the name matters for shape checks.
    contained_resource = SchemaDescriptor(full_name=f"{CORE_PACKAGE}.ContainedResource")
    link = SchemaDescriptor(
        full_name=f"{bundle_name}.Link",
        fields=(
            _field("relation", string, required=True),
            _field("url", uri, required=True),
        ),
    )
    entry = SchemaDescriptor(
        full_name=f"{bundle_name}.Entry",
        fields=(
            _field("link", link, repeated=True),
            _field("full_url", uri),
            _field("resource", contained_resource, required=True),
        ),
    )
    return _descriptor(
        "Bundle",
        (
            _field("type", code, required=True),
            _field("total", unsigned_int),
            _field("link", link, repeated=True),
            _field("entry", entry, repeated=True, required=True),
        ),
        url_name="Bundle",
        nested_types=(link, entry),
    )

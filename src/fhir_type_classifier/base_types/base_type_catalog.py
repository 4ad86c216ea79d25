"""Closed enumeration of the FHIR base types the classifier reasons about."""

from __future__ import annotations

from enum import Enum

FHIR_STRUCTURE_DEFINITION_PREFIX = "http://hl7.org/fhir/StructureDefinition/"


class TypeCategory(Enum):
    """Composite types support structural profile detection; primitives do not."""

    COMPOSITE = "composite"
    PRIMITIVE = "primitive"


class ScalarKind(Enum):
    """Wire-level kind of a primitive's value field."""

    BOOL = "bool"
    STRING = "string"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    ENUM = "enum"


SCALAR_TYPE_NAMES = frozenset(kind.value for kind in ScalarKind)


class BaseType(Enum):
    """Canonical structural categories.

    The value is the FHIR type name used in structure definition URLs.
    """

    BUNDLE = "Bundle"
    CODEABLE_CONCEPT = "CodeableConcept"
    CODING = "Coding"
    CODE = "Code"
    EXTENSION = "Extension"
    BOOLEAN = "Boolean"
    STRING = "String"
    INTEGER = "Integer"
    POSITIVE_INT = "PositiveInt"
    UNSIGNED_INT = "UnsignedInt"
    DECIMAL = "Decimal"
    DATE_TIME = "DateTime"
    DATE = "Date"
    TIME = "Time"
    QUANTITY = "Quantity"
    SIMPLE_QUANTITY = "SimpleQuantity"

    @property
    def url(self) -> str:
        return FHIR_STRUCTURE_DEFINITION_PREFIX + _URL_NAMES.get(self, self.value)

    @property
    def category(self) -> TypeCategory:
        if self in COMPOSITE_BASE_TYPES:
            return TypeCategory.COMPOSITE
        return TypeCategory.PRIMITIVE

    @property
    def scalar_kind(self) -> ScalarKind | None:
        return _SCALAR_KINDS.get(self)

    @classmethod
    def from_reference(cls, reference: str) -> BaseType | None:
        """Look up a base type by enum name, FHIR type name or structure definition URL."""
        text = reference.strip()
        if text.startswith(FHIR_STRUCTURE_DEFINITION_PREFIX):
            return _BY_URL.get(text)
        for member in cls:
            if text in (member.name, member.value) or text.lower() == member.value.lower():
                return member
        return None


# FHIR primitive type names are lower camel case in their URLs.
_URL_NAMES = {
    BaseType.CODE: "code",
    BaseType.BOOLEAN: "boolean",
    BaseType.STRING: "string",
    BaseType.INTEGER: "integer",
    BaseType.POSITIVE_INT: "positiveInt",
    BaseType.UNSIGNED_INT: "unsignedInt",
    BaseType.DECIMAL: "decimal",
    BaseType.DATE_TIME: "dateTime",
    BaseType.DATE: "date",
    BaseType.TIME: "time",
}

_SCALAR_KINDS = {
    BaseType.BOOLEAN: ScalarKind.BOOL,
    BaseType.STRING: ScalarKind.STRING,
    BaseType.INTEGER: ScalarKind.INT32,
    BaseType.POSITIVE_INT: ScalarKind.UINT32,
    BaseType.UNSIGNED_INT: ScalarKind.UINT32,
    BaseType.DECIMAL: ScalarKind.STRING,
    BaseType.DATE_TIME: ScalarKind.INT64,
    BaseType.DATE: ScalarKind.INT64,
    BaseType.TIME: ScalarKind.INT64,
}

COMPOSITE_BASE_TYPES = (
    BaseType.BUNDLE,
    BaseType.CODEABLE_CONCEPT,
    BaseType.CODING,
    BaseType.CODE,
    BaseType.EXTENSION,
)

_BY_URL = {member.url: member for member in BaseType}

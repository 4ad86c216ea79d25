"""Schema descriptor entities."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol

STRUCTURE_DEFINITION_URL = "fhir_structure_definition_url"
PROFILE_BASE = "fhir_profile_base"


class Cardinality(Enum):
    """How many values a field may carry."""

    SINGULAR = "singular"
    REPEATED = "repeated"


@dataclass(frozen=True, eq=False)
class FieldDescriptor:
    """One field of a schema descriptor.

    `type_name` is either a scalar kind (``string``, ``bool``...) or the full
    name of the referenced message descriptor, which is then also available
    as `message_type`.
    """

    name: str
    type_name: str
    cardinality: Cardinality = Cardinality.SINGULAR
    required: bool = False
    message_type: SchemaDescriptor | None = None

    @property
    def is_repeated(self) -> bool:
        return self.cardinality is Cardinality.REPEATED


@dataclass(frozen=True, eq=False)
class SchemaDescriptor:
    """Static definition of a structured record type.

    Equality and hashing are by identity: a descriptor is created once when
    its schema is loaded and stays valid for the process lifetime.
    """

    full_name: str
    fields: tuple[FieldDescriptor, ...] = ()
    nested_types: tuple[SchemaDescriptor, ...] = ()
    annotations: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Annotations are read-only once the descriptor exists.
        frozen = {
            key: tuple(value) if isinstance(value, list) else value
            for key, value in self.annotations.items()
        }
        object.__setattr__(self, "annotations", MappingProxyType(frozen))

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1]

    @property
    def url(self) -> str | None:
        value = self.annotations.get(STRUCTURE_DEFINITION_URL)
        return value if isinstance(value, str) else None

    def annotation(self, key: str) -> Any:
        return self.annotations.get(key)

    def annotation_values(self, key: str) -> tuple[Any, ...]:
        """Return the values declared under `key` in declaration order."""
        value = self.annotations.get(key)
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(value)
        return (value,)

    def find_field(self, name: str) -> FieldDescriptor | None:
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        return None

    def find_nested_type(self, name: str) -> SchemaDescriptor | None:
        for nested in self.nested_types:
            if nested.name == name or nested.full_name == name:
                return nested
        return None

    def iter_descriptors(self) -> Iterator[SchemaDescriptor]:
        """Yield this descriptor followed by all nested descriptors, depth first."""
        yield self
        for nested in self.nested_types:
            yield from nested.iter_descriptors()

    def __repr__(self) -> str:
        return f"SchemaDescriptor({self.full_name!r})"


class SchemaRecord(Protocol):
    """Anything that can report the descriptor of its own schema."""

    def descriptor(self) -> SchemaDescriptor: ...


@dataclass(frozen=True)
class RecordInstance:
    """Concrete record: a descriptor plus field values."""

    schema: SchemaDescriptor
    values: Mapping[str, Any] = field(default_factory=dict)

    def descriptor(self) -> SchemaDescriptor:
        return self.schema

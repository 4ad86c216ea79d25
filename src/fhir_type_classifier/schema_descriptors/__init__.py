"""Schema descriptor exports."""

from .descriptor_models import (
    PROFILE_BASE,
    STRUCTURE_DEFINITION_URL,
    Cardinality,
    FieldDescriptor,
    RecordInstance,
    SchemaDescriptor,
    SchemaRecord,
)
from .descriptor_loading import (
    SchemaCatalog,
    SchemaError,
    load_schema_catalog,
    parse_schema_catalog,
)

__all__ = [
    "PROFILE_BASE",
    "STRUCTURE_DEFINITION_URL",
    "Cardinality",
    "FieldDescriptor",
    "RecordInstance",
    "SchemaDescriptor",
    "SchemaRecord",
    "SchemaCatalog",
    "SchemaError",
    "load_schema_catalog",
    "parse_schema_catalog",
]

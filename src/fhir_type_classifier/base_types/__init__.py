"""Base-type registry exports."""

from .base_type_catalog import (
    COMPOSITE_BASE_TYPES,
    FHIR_STRUCTURE_DEFINITION_PREFIX,
    SCALAR_TYPE_NAMES,
    BaseType,
    ScalarKind,
    TypeCategory,
)
from .canonical_shapes import CORE_PACKAGE, build_canonical_descriptors
from .type_registry import (
    BaseTypeRegistry,
    InitializationOrderError,
    RegistryError,
    RegistryFrozenError,
    default_registry,
    initialize_base_types,
)

__all__ = [
    "BaseType",
    "ScalarKind",
    "TypeCategory",
    "COMPOSITE_BASE_TYPES",
    "FHIR_STRUCTURE_DEFINITION_PREFIX",
    "SCALAR_TYPE_NAMES",
    "CORE_PACKAGE",
    "build_canonical_descriptors",
    "BaseTypeRegistry",
    "RegistryError",
    "InitializationOrderError",
    "RegistryFrozenError",
    "default_registry",
    "initialize_base_types",
]

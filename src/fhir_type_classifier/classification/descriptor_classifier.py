"""Descriptor-level base type classification service.

Everything here is derived from descriptor metadata: the registered
canonical descriptors, the ``fhir_profile_base`` markers a profile declares,
and, for composite types, the shape of the descriptor's fields. No generated
resource or profile code is ever consulted.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from fhir_type_classifier.base_types.base_type_catalog import COMPOSITE_BASE_TYPES, BaseType
from fhir_type_classifier.base_types.type_registry import BaseTypeRegistry
from fhir_type_classifier.configuration.runtime_settings import (
    AmbiguityPolicy,
    ClassifierSettings,
)
from fhir_type_classifier.schema_descriptors.descriptor_loading import SchemaCatalog
from fhir_type_classifier.schema_descriptors.descriptor_models import (
    PROFILE_BASE,
    FieldDescriptor,
    SchemaDescriptor,
)

from .classification_outcomes import (
    AmbiguousProfileError,
    ClassificationResult,
    InvalidArgumentError,
    MalformedSchemaError,
    TypeResolution,
    require_base_type,
)

_LOGGER = logging.getLogger("fhir_type_classifier.classification")
_LOGGER.addHandler(logging.NullHandler())

_ShapePairs = frozenset[tuple[int, int]]

# Code has the same shape as every string-valued primitive; like the other
# primitives it is only recognized through markers.
_STRUCTURAL_BASE_TYPES = tuple(
    base_type for base_type in COMPOSITE_BASE_TYPES if base_type is not BaseType.CODE
)


class DescriptorClassifier:
    """Classifies schema descriptors against the closed set of base types."""

    def __init__(
        self,
        registry: BaseTypeRegistry,
        catalog: SchemaCatalog | None = None,
        settings: ClassifierSettings | None = None,
    ) -> None:
        self._registry = registry
        self._catalog = catalog if catalog is not None else SchemaCatalog()
        self._settings = settings or ClassifierSettings()
        self._cache: dict[SchemaDescriptor, TypeResolution] = {}
        self._cache_lock = threading.Lock()

    @property
    def registry(self) -> BaseTypeRegistry:
        return self._registry

    @property
    def settings(self) -> ClassifierSettings:
        return self._settings

    def classify(
        self, descriptor: SchemaDescriptor, target: BaseType | str
    ) -> ClassificationResult:
        base_type = require_base_type(target)
        self._registry.canonical(base_type)
        return self.resolve(descriptor).result_for(base_type)

    def is_exact(self, descriptor: SchemaDescriptor, target: BaseType | str) -> bool:
        return self.classify(descriptor, target) is ClassificationResult.EXACT

    def is_profile(self, descriptor: SchemaDescriptor, target: BaseType | str) -> bool:
        return self.classify(descriptor, target) is ClassificationResult.PROFILE

    def is_exact_or_profile(self, descriptor: SchemaDescriptor, target: BaseType | str) -> bool:
        return self.classify(descriptor, target) is not ClassificationResult.UNRELATED

    def base_type_of(self, descriptor: SchemaDescriptor) -> BaseType | None:
        return self.resolve(descriptor).base_type

    def resolve(self, descriptor: SchemaDescriptor) -> TypeResolution:
        """Return the exact base type or profiled base type of `descriptor`.

        Raises:
          InvalidArgumentError: If `descriptor` is not a schema descriptor.
          MalformedSchemaError: If the profile-of markers form a cycle.
          AmbiguousProfileError: If the markers name several base types and
            the ambiguity policy is `error`.
        """
        if not isinstance(descriptor, SchemaDescriptor):
            raise InvalidArgumentError(f"Not a schema descriptor: {descriptor!r}")
        if not self._settings.cache_results:
            return self._compute(descriptor)
        cached = self._cache.get(descriptor)
        if cached is not None:
            return cached
        resolution = self._compute(descriptor)
        # Concurrent misses compute identical values; keep whichever lands first.
        with self._cache_lock:
            return self._cache.setdefault(descriptor, resolution)

    def _compute(self, descriptor: SchemaDescriptor) -> TypeResolution:
        exact = self._registry.find_exact(descriptor)
        if exact is not None:
            return TypeResolution(exact=exact)
        if descriptor.annotation_values(PROFILE_BASE):
            return TypeResolution(profile_of=self._profile_base(descriptor, (descriptor,)))
        if self._settings.structural_fallback and not self._is_core_type(descriptor):
            for base_type in _STRUCTURAL_BASE_TYPES:
                # Composites missing from a partial registry are simply not candidates.
                if not self._registry.is_registered(base_type):
                    continue
                canonical = self._registry.canonical(base_type)
                if self._is_structurally_compatible(descriptor, canonical, frozenset()):
                    _LOGGER.debug(
                        "%s is a structural profile of %s", descriptor.full_name, base_type.value
                    )
                    return TypeResolution(profile_of=base_type)
        return TypeResolution()

    def _is_core_type(self, descriptor: SchemaDescriptor) -> bool:
        return self._registry.find_descriptor(descriptor.full_name) is not None

    def _profile_base(
        self, descriptor: SchemaDescriptor, chain: tuple[SchemaDescriptor, ...]
    ) -> BaseType | None:
        candidates: list[BaseType] = []
        for marker in descriptor.annotation_values(PROFILE_BASE):
            base_type = self._marker_target(descriptor, marker, chain)
            if base_type is not None and base_type not in candidates:
                candidates.append(base_type)
        if len(candidates) > 1:
            self._report_ambiguity(descriptor, candidates)
        return candidates[0] if candidates else None

    def _marker_target(
        self, owner: SchemaDescriptor, marker: Any, chain: tuple[SchemaDescriptor, ...]
    ) -> BaseType | None:
        base_type = self._registry.lookup_reference(marker)
        if base_type is not None:
            return base_type

        if isinstance(marker, SchemaDescriptor):
            target: SchemaDescriptor | None = marker
        elif isinstance(marker, str):
            target = self._catalog.find(marker)
        else:
            raise MalformedSchemaError(
                f"{owner.full_name} declares an unsupported profile-of marker: {marker!r}"
            )

        if target is None:
            _LOGGER.warning(
                "%s is marked as a profile of unknown type %s", owner.full_name, marker
            )
            return None
        if target in chain:
            names = " -> ".join(item.full_name for item in (*chain, target))
            raise MalformedSchemaError(f"Profile-of cycle detected: {names}")
        if not target.annotation_values(PROFILE_BASE):
            _LOGGER.warning(
                "%s is marked as a profile of %s, which is neither a base type nor a profile",
                owner.full_name,
                target.full_name,
            )
            return None
        return self._profile_base(target, (*chain, target))

    def _report_ambiguity(self, descriptor: SchemaDescriptor, candidates: list[BaseType]) -> None:
        names = ", ".join(candidate.value for candidate in candidates)
        if self._settings.ambiguity_policy is AmbiguityPolicy.ERROR:
            raise AmbiguousProfileError(
                f"{descriptor.full_name} is marked as a profile of several base types: {names}"
            )
        _LOGGER.warning(
            "%s is marked as a profile of several base types (%s); using %s",
            descriptor.full_name,
            names,
            candidates[0].value,
        )

    def _is_structurally_compatible(
        self, candidate: SchemaDescriptor, canonical: SchemaDescriptor, seen: _ShapePairs
    ) -> bool:
        """True when `candidate` keeps every required field of `canonical`."""
        pair = (id(candidate), id(canonical))
        if pair in seen:
            return True
        seen = seen | {pair}
        for required in canonical.fields:
            if not required.required:
                continue
            present = candidate.find_field(required.name)
            if present is None:
                return False
            if present.is_repeated and not required.is_repeated:
                return False
            if not self._field_type_compatible(present, required, seen):
                return False
        return True

    def _field_type_compatible(
        self, present: FieldDescriptor, required: FieldDescriptor, seen: _ShapePairs
    ) -> bool:
        if present.type_name == required.type_name:
            return True
        if present.message_type is None:
            return False

        field_base = self._registry.base_type_named(required.type_name)
        if field_base is not None:
            if self._declared_profile_base(present.message_type) is field_base:
                return True
            if field_base not in _STRUCTURAL_BASE_TYPES:
                return False
            expected: SchemaDescriptor | None = self._registry.canonical(field_base)
        else:
            expected = required.message_type
        if expected is None:
            return False
        return self._is_structurally_compatible(present.message_type, expected, seen)

    def _declared_profile_base(self, descriptor: SchemaDescriptor) -> BaseType | None:
        if not descriptor.annotation_values(PROFILE_BASE):
            return None
        return self._profile_base(descriptor, (descriptor,))

"""Process-wide registry of canonical base-type descriptors."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from fhir_type_classifier.schema_descriptors.descriptor_models import SchemaDescriptor

from .base_type_catalog import BaseType
from .canonical_shapes import build_canonical_descriptors

_LOGGER = logging.getLogger("fhir_type_classifier.registry")
_LOGGER.addHandler(logging.NullHandler())


class RegistryError(Exception):
    """Raised when the base-type registry is used inconsistently."""


class InitializationOrderError(RegistryError):
    """Raised when a base type is looked up before it has been registered."""


class RegistryFrozenError(RegistryError):
    """Raised when a registered or frozen entry would be changed."""


class BaseTypeRegistry:
    """Maps each base type to its canonical descriptor.

    Writers take a lock and publish fresh dictionaries, so readers never
    need one. Registering the same descriptor twice is a no-op; entries are
    never replaced or removed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._canonicals: dict[BaseType, SchemaDescriptor] = {}
        self._by_name: dict[str, BaseType] = {}
        self._by_url: dict[str, BaseType] = {}
        self._known: dict[str, SchemaDescriptor] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, base_type: BaseType, descriptor: SchemaDescriptor) -> None:
        if not isinstance(base_type, BaseType):
            raise RegistryError(f"Not a base type: {base_type!r}")
        if not isinstance(descriptor, SchemaDescriptor):
            raise RegistryError(f"Not a schema descriptor: {descriptor!r}")
        with self._lock:
            existing = self._canonicals.get(base_type)
            if existing is not None:
                if existing is descriptor or existing.full_name == descriptor.full_name:
                    return
                raise RegistryFrozenError(
                    f"{base_type.value} is already registered as {existing.full_name}"
                )
            if self._frozen:
                raise RegistryFrozenError(
                    f"Registry is frozen; cannot register {base_type.value}"
                )
            owner = self._by_name.get(descriptor.full_name)
            if owner is not None:
                raise RegistryError(
                    f"{descriptor.full_name} is already canonical for {owner.value}"
                )
            self._canonicals = {**self._canonicals, base_type: descriptor}
            self._by_name = {**self._by_name, descriptor.full_name: base_type}
            if descriptor.url:
                self._by_url = {**self._by_url, descriptor.url: base_type}
            self._known = _index_reachable(descriptor, dict(self._known))
        _LOGGER.debug("Registered %s as canonical %s", descriptor.full_name, base_type.value)

    def populate(self, canonicals: Mapping[BaseType, SchemaDescriptor]) -> None:
        for base_type, descriptor in canonicals.items():
            self.register(base_type, descriptor)

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    def is_registered(self, base_type: BaseType) -> bool:
        return base_type in self._canonicals

    def canonical(self, base_type: BaseType) -> SchemaDescriptor:
        """Return the canonical descriptor, failing fast when it was never registered."""
        descriptor = self._canonicals.get(base_type)
        if descriptor is None:
            raise InitializationOrderError(
                f"No canonical descriptor registered for {base_type.value}; "
                "populate the base-type registry before classifying."
            )
        return descriptor

    def find_exact(self, descriptor: SchemaDescriptor) -> BaseType | None:
        """Return the base type `descriptor` is canonical for, if any."""
        return self._by_name.get(descriptor.full_name)

    def base_type_named(self, full_name: str) -> BaseType | None:
        return self._by_name.get(full_name)

    def find_descriptor(self, full_name: str) -> SchemaDescriptor | None:
        """Return a canonical descriptor or any core type reachable from one."""
        return self._known.get(full_name)

    def lookup_reference(self, reference: Any) -> BaseType | None:
        """Resolve a profile-of marker value that directly names a base type."""
        if isinstance(reference, BaseType):
            return reference
        if isinstance(reference, SchemaDescriptor):
            return self.find_exact(reference)
        if isinstance(reference, str):
            text = reference.strip()
            found = self._by_url.get(text) or self._by_name.get(text)
            if found is not None:
                return found
            return BaseType.from_reference(text)
        return None


_DEFAULT_REGISTRY = BaseTypeRegistry()
_INITIALIZE_LOCK = threading.Lock()


def default_registry() -> BaseTypeRegistry:
    return _DEFAULT_REGISTRY


def initialize_base_types(registry: BaseTypeRegistry | None = None) -> BaseTypeRegistry:
    """Populate `registry` (the process default when omitted) with built-in shapes and freeze it.

    Safe to call repeatedly and from several threads; only the first call
    does any work.
    """
    target = registry if registry is not None else _DEFAULT_REGISTRY
    with _INITIALIZE_LOCK:
        if target.frozen:
            return target
        target.populate(build_canonical_descriptors())
        target.freeze()
    _LOGGER.info("Base-type registry initialized with %d canonical descriptors", len(BaseType))
    return target


def _index_reachable(
    root: SchemaDescriptor, known: dict[str, SchemaDescriptor]
) -> dict[str, SchemaDescriptor]:
    pending = [root]
    while pending:
        descriptor = pending.pop()
        if descriptor.full_name in known:
            continue
        known[descriptor.full_name] = descriptor
        pending.extend(descriptor.nested_types)
        pending.extend(
            field.message_type for field in descriptor.fields if field.message_type is not None
        )
    return known

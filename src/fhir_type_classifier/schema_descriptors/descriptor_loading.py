"""Descriptor file loading and catalog service."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from fhir_type_classifier.base_types.base_type_catalog import SCALAR_TYPE_NAMES, BaseType

from .descriptor_models import (
    PROFILE_BASE,
    STRUCTURE_DEFINITION_URL,
    Cardinality,
    FieldDescriptor,
    SchemaDescriptor,
)

if TYPE_CHECKING:
    from fhir_type_classifier.base_types.type_registry import BaseTypeRegistry


class SchemaError(Exception):
    """Raised for descriptor document parsing or reference resolution failures."""


class SchemaCatalog:
    """Loaded descriptors, addressable by full name or structure definition URL."""

    def __init__(self, descriptors: Iterable[SchemaDescriptor] = ()) -> None:
        self._top_level = tuple(descriptors)
        self._by_reference: dict[str, SchemaDescriptor] = {}
        for root in self._top_level:
            for descriptor in root.iter_descriptors():
                self._by_reference.setdefault(descriptor.full_name, descriptor)
                if descriptor.url:
                    self._by_reference.setdefault(descriptor.url, descriptor)

    def find(self, reference: str) -> SchemaDescriptor | None:
        return self._by_reference.get(reference.strip())

    def __iter__(self) -> Iterator[SchemaDescriptor]:
        return iter(self._top_level)

    def __len__(self) -> int:
        return len(self._top_level)


@dataclass(frozen=True)
class _FieldDraft:
    name: str
    type_ref: str
    cardinality: Cardinality
    required: bool


@dataclass(frozen=True)
class _DescriptorDraft:
    full_name: str
    annotations: Mapping[str, Any]
    fields: tuple[_FieldDraft, ...]
    nested: tuple[_DescriptorDraft, ...]


def parse_schema_catalog(text: str, *, registry: BaseTypeRegistry) -> SchemaCatalog:
    """Parse one YAML or JSON descriptor document."""
    return _build_catalog(_parse_document(text, source="<inline>"), registry)


def load_schema_catalog(
    paths: Path | str | Sequence[Path | str], *, registry: BaseTypeRegistry
) -> SchemaCatalog:
    """Load descriptor files into one catalog; references may cross files."""
    if isinstance(paths, (str, Path)):
        paths = [paths]
    entries: list[Any] = []
    for raw_path in paths:
        path = Path(raw_path)
        if not path.exists():
            raise SchemaError(f"Descriptor file not found: {path}")
        entries.extend(_parse_document(path.read_text(encoding="utf-8"), source=str(path)))
    return _build_catalog(entries, registry)


def _parse_document(text: str, *, source: str) -> list[Any]:
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid descriptor document {source}: {exc}") from exc
    if parsed is None:
        return []
    if isinstance(parsed, Mapping):
        parsed = parsed.get("descriptors", [])
    if not isinstance(parsed, list):
        raise SchemaError(f"Descriptor document {source} must list descriptors.")
    return parsed


def _build_catalog(entries: list[Any], registry: BaseTypeRegistry) -> SchemaCatalog:
    drafts = [_parse_descriptor(entry, parent=None) for entry in entries]
    index: dict[str, _DescriptorDraft] = {}
    for draft in drafts:
        _index_draft(draft, index)
    builder = _DescriptorBuilder(index, registry)
    return SchemaCatalog(builder.build(draft.full_name) for draft in drafts)


def _index_draft(draft: _DescriptorDraft, index: dict[str, _DescriptorDraft]) -> None:
    if draft.full_name in index:
        raise SchemaError(f"Duplicate descriptor name: {draft.full_name}")
    index[draft.full_name] = draft
    for nested in draft.nested:
        _index_draft(nested, index)


def _parse_descriptor(entry: Any, *, parent: str | None) -> _DescriptorDraft:
    if not isinstance(entry, Mapping):
        raise SchemaError("Descriptor entries must be mappings.")
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise SchemaError("Descriptor entries require a name.")
    full_name = name.strip() if parent is None else f"{parent}.{name.strip()}"

    annotations = entry.get("annotations") or {}
    if not isinstance(annotations, Mapping):
        raise SchemaError(f"{full_name}: annotations must be a mapping.")
    annotations = dict(annotations)
    if entry.get("url"):
        annotations[STRUCTURE_DEFINITION_URL] = str(entry["url"])
    if entry.get("profile_of"):
        annotations[PROFILE_BASE] = entry["profile_of"]

    raw_fields = entry.get("fields") or []
    if not isinstance(raw_fields, list):
        raise SchemaError(f"{full_name}: fields must be a list.")
    raw_nested = entry.get("nested_types") or []
    if not isinstance(raw_nested, list):
        raise SchemaError(f"{full_name}: nested_types must be a list.")

    fields = tuple(_parse_field(raw, owner=full_name) for raw in raw_fields)
    seen: set[str] = set()
    for field_draft in fields:
        if field_draft.name in seen:
            raise SchemaError(f"{full_name}: duplicate field '{field_draft.name}'.")
        seen.add(field_draft.name)

    return _DescriptorDraft(
        full_name=full_name,
        annotations=annotations,
        fields=fields,
        nested=tuple(_parse_descriptor(raw, parent=full_name) for raw in raw_nested),
    )


def _parse_field(raw: Any, *, owner: str) -> _FieldDraft:
    if not isinstance(raw, Mapping) or "name" not in raw:
        raise SchemaError(f"{owner}: field definitions must include a name.")
    type_ref = raw.get("type")
    if not isinstance(type_ref, str) or not type_ref.strip():
        raise SchemaError(f"{owner}.{raw['name']}: field type must be a non-empty string.")
    return _FieldDraft(
        name=str(raw["name"]),
        type_ref=type_ref.strip(),
        cardinality=Cardinality.REPEATED if raw.get("repeated") else Cardinality.SINGULAR,
        required=bool(raw.get("required", False)),
    )


class _DescriptorBuilder:
    """Builds frozen descriptors bottom-up, resolving field type references."""

    def __init__(self, index: Mapping[str, _DescriptorDraft], registry: BaseTypeRegistry) -> None:
        self._index = index
        self._registry = registry
        self._built: dict[str, SchemaDescriptor] = {}
        self._in_progress: set[str] = set()

    def build(self, full_name: str) -> SchemaDescriptor:
        built = self._built.get(full_name)
        if built is not None:
            return built
        draft = self._index[full_name]
        self._in_progress.add(full_name)
        try:
            nested = tuple(self.build(child.full_name) for child in draft.nested)
            fields = tuple(self._build_field(draft, field_draft) for field_draft in draft.fields)
        finally:
            self._in_progress.discard(full_name)
        descriptor = SchemaDescriptor(
            full_name=full_name,
            fields=fields,
            nested_types=nested,
            annotations=draft.annotations,
        )
        self._built[full_name] = descriptor
        return descriptor

    def _build_field(self, owner: _DescriptorDraft, draft: _FieldDraft) -> FieldDescriptor:
        type_name, message_type = self._resolve_type(owner, draft)
        return FieldDescriptor(
            name=draft.name,
            type_name=type_name,
            cardinality=draft.cardinality,
            required=draft.required,
            message_type=message_type,
        )

    def _resolve_type(
        self, owner: _DescriptorDraft, draft: _FieldDraft
    ) -> tuple[str, SchemaDescriptor | None]:
        reference = draft.type_ref
        if reference in SCALAR_TYPE_NAMES:
            return reference, None

        local_name = self._find_local(owner, reference)
        if local_name is not None:
            # Recursive references cannot be materialized on frozen descriptors.
            if local_name in self._in_progress:
                return local_name, None
            return local_name, self.build(local_name)

        base_type = self._registry.base_type_named(reference) or BaseType.from_reference(
            reference
        )
        if base_type is not None:
            if not self._registry.is_registered(base_type):
                raise SchemaError(
                    f"{owner.full_name}.{draft.name}: "
                    f"base type {base_type.value} is not registered."
                )
            canonical = self._registry.canonical(base_type)
            return canonical.full_name, canonical

        core_type = self._registry.find_descriptor(reference)
        if core_type is not None:
            return core_type.full_name, core_type

        raise SchemaError(f"{owner.full_name}.{draft.name}: unknown field type '{reference}'.")

    def _find_local(self, owner: _DescriptorDraft, reference: str) -> str | None:
        # Innermost scope first, the same way protobuf resolves relative names.
        scope = owner.full_name
        while scope:
            candidate = f"{scope}.{reference}"
            if candidate in self._index:
                return candidate
            scope = scope.rpartition(".")[0]
        if reference in self._index:
            return reference
        return None

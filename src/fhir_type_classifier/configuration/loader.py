"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import AmbiguityPolicy, ClassifierSettings, Configuration


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    classification = _parse_classification_section(parsed.get("classification"))
    schema_paths = _parse_schemas_section(parsed.get("schemas"), path.parent)

    return Configuration(path=path, classification=classification, schema_paths=schema_paths)


def _parse_classification_section(value: Any) -> ClassifierSettings:
    if value is None:
        return ClassifierSettings()
    section = _require_mapping(value, "classification")
    policy_raw = _require_non_empty_string(
        section.get("ambiguous_profile_policy", AmbiguityPolicy.FIRST_DECLARED.value),
        "classification.ambiguous_profile_policy",
    ).lower()
    try:
        policy = AmbiguityPolicy(policy_raw)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in AmbiguityPolicy)
        raise ConfigurationError(
            f"classification.ambiguous_profile_policy must be one of: {allowed}."
        ) from exc
    return ClassifierSettings(
        ambiguity_policy=policy,
        structural_fallback=_require_bool(
            section.get("structural_fallback", True), "classification.structural_fallback"
        ),
        cache_results=_require_bool(
            section.get("cache_results", True), "classification.cache_results"
        ),
    )


def _parse_schemas_section(value: Any, base_path: Path) -> tuple[Path, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigurationError("schemas must be a list of descriptor files.")
    paths: list[Path] = []
    for entry in value:
        if isinstance(entry, Mapping):
            entry = entry.get("path")
        raw_path = _require_non_empty_string(entry, "schemas[].path")
        schema_path = _resolve_path(base_path, raw_path)
        if not schema_path.exists():
            raise ConfigurationError(f"Descriptor file not found: {schema_path}")
        paths.append(schema_path)
    return tuple(paths)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value

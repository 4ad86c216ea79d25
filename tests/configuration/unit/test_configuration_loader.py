"""Configuration loader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fhir_type_classifier.configuration.loader import ConfigurationError, load_configuration
from fhir_type_classifier.configuration.runtime_settings import AmbiguityPolicy


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_empty_configuration_uses_defaults(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "fhir-types.yaml", "")

    configuration = load_configuration(config_path)

    assert configuration.path == config_path
    assert configuration.classification.ambiguity_policy is AmbiguityPolicy.FIRST_DECLARED
    assert configuration.classification.structural_fallback is True
    assert configuration.classification.cache_results is True
    assert configuration.schema_paths == ()


def test_loads_classification_settings_and_relative_schema_paths(tmp_path: Path) -> None:
    schemas_dir = tmp_path / "schemas"
    schemas_dir.mkdir()
    _write_file(schemas_dir / "profiles.yaml", "descriptors: []\n")
    _write_file(schemas_dir / "extensions.json", '{"descriptors": []}')
    config_path = _write_file(
        tmp_path / "fhir-types.yaml",
        """
classification:
  ambiguous_profile_policy: ERROR
  structural_fallback: false
  cache_results: false
schemas:
  - path: schemas/profiles.yaml
  - schemas/extensions.json
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.classification.ambiguity_policy is AmbiguityPolicy.ERROR
    assert configuration.classification.structural_fallback is False
    assert configuration.classification.cache_results is False
    assert configuration.schema_paths == (
        (schemas_dir / "profiles.yaml").resolve(),
        (schemas_dir / "extensions.json").resolve(),
    )


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("- a\n- b\n", "root must be a mapping"),
        ("classification: 3\n", "'classification' must be a mapping"),
        ("classification:\n  ambiguous_profile_policy: last\n", "must be one of"),
        ("classification:\n  structural_fallback: maybe\n", "must be true or false"),
        ("schemas: profiles.yaml\n", "must be a list"),
        ("schemas:\n  - path: missing.yaml\n", "Descriptor file not found"),
        ("schemas:\n  - {}\n", "must be a string"),
        ("classification: [\n", "Failed to parse"),
    ],
)
def test_invalid_configuration_raises(tmp_path: Path, contents: str, message: str) -> None:
    config_path = _write_file(tmp_path / "fhir-types.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)


def test_missing_configuration_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_configuration(tmp_path / "absent.yaml")

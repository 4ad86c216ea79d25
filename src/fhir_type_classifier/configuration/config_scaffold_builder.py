"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "fhir-types.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Classifier configuration template for fhir-type-classifier.
# Every value below is optional; the defaults are shown.

classification:
  # first-declared: use the first base type named by the profile-of markers
  #                 and log a warning when several distinct ones are named.
  # error:          fail the classification call instead.
  ambiguous_profile_policy: "first-declared"
  # Treat unmarked composites that keep a base type's required fields as profiles.
  structural_fallback: true
  # Memoize results per descriptor.
  cache_results: true

# Descriptor files (YAML or JSON), resolved relative to this file.
schemas:
  # - path: "profiles.yaml"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML classifier configuration template with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()

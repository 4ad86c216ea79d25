"""Module entry point for `python -m fhir_type_classifier`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

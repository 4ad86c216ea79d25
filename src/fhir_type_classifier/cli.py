"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from fhir_type_classifier.base_types import (
    BaseType,
    RegistryError,
    default_registry,
    initialize_base_types,
)
from fhir_type_classifier.classification import (
    ClassificationError,
    DescriptorClassifier,
    require_base_type,
)
from fhir_type_classifier.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ClassifierSettings,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from fhir_type_classifier.schema_descriptors import SchemaError, load_schema_catalog


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="fhir-type-classifier")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
    help="Log level for classification diagnostics",
)
def cli(log_level: str) -> None:
    """Structural FHIR base-type classifier."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML classifier configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML classifier configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="base-types")
def base_types() -> None:
    """List the base types with their URL, category and scalar kind."""
    for base_type in BaseType:
        scalar = base_type.scalar_kind.value if base_type.scalar_kind else "-"
        click.echo(f"{base_type.value}\t{base_type.category.value}\t{scalar}\t{base_type.url}")


@cli.command(name="classify")
@click.option(
    "--schema",
    "schema_paths",
    multiple=True,
    type=click.Path(path_type=str),
    help="Descriptor file (YAML or JSON); may be repeated",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to YAML classifier configuration file",
)
@click.option(
    "--target",
    "target",
    required=False,
    help="Only report the relationship to this base type",
)
def classify(schema_paths: tuple[str, ...], config_path: str | None, target: str | None) -> None:
    """Classify every descriptor in the given descriptor files."""
    try:
        settings = ClassifierSettings()
        paths: list[Path] = [Path(path) for path in schema_paths]
        if config_path:
            configuration = load_configuration(config_path)
            settings = configuration.classification
            paths = [*configuration.schema_paths, *paths]
        if not paths:
            raise CliError("No descriptor files given; use --schema or a config with schemas.")
        target_type = require_base_type(target) if target else None

        registry = initialize_base_types(default_registry())
        catalog = load_schema_catalog(paths, registry=registry)
        classifier = DescriptorClassifier(registry, catalog=catalog, settings=settings)
        for descriptor in catalog:
            if target_type is not None:
                result = classifier.classify(descriptor, target_type)
                click.echo(f"{descriptor.full_name}\t{result.value}")
                continue
            resolution = classifier.resolve(descriptor)
            if resolution.exact is not None:
                click.echo(f"{descriptor.full_name}\texact\t{resolution.exact.value}")
            elif resolution.profile_of is not None:
                click.echo(f"{descriptor.full_name}\tprofile\t{resolution.profile_of.value}")
            else:
                click.echo(f"{descriptor.full_name}\tunrelated")
    except (ConfigurationError, SchemaError, ClassificationError, RegistryError) as exc:
        raise CliError(str(exc)) from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

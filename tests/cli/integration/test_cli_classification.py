"""CLI classification integration tests."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner
from fhir_type_classifier.cli import cli


def _sample_path() -> Path:
    return Path(__file__).resolve().parents[3] / "samples" / "sample-profiles.yaml"


def test_classify_command_prints_resolution_per_descriptor() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["classify", "--schema", str(_sample_path())])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "example.profiles.LoincCoding\tprofile\tCoding" in lines
    assert "example.profiles.VitalSignsBundle\tprofile\tBundle" in lines
    assert "example.profiles.PatientSummary\tunrelated" in lines


def test_classify_command_reports_single_target(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["classify", "--schema", str(_sample_path()), "--target", "CodeableConcept"]
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "example.profiles.BodySiteConcept\tprofile" in lines
    assert "example.profiles.LoincCoding\tunrelated" in lines


def test_classify_command_honours_configuration(tmp_path: Path) -> None:
    config_path = tmp_path / "fhir-types.yaml"
    config_path.write_text(
        f"classification:\n  structural_fallback: false\nschemas:\n  - path: {_sample_path()}\n",
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["classify", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "example.profiles.BodySiteConcept\tunrelated" in lines
    assert "example.profiles.RaceExtension\tprofile\tExtension" in lines


def test_base_types_command_lists_every_base_type() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["base-types"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 16
    assert (
        "PositiveInt\tprimitive\tuint32\thttp://hl7.org/fhir/StructureDefinition/positiveInt"
        in lines
    )
    assert "Coding\tcomposite\t-\thttp://hl7.org/fhir/StructureDefinition/Coding" in lines


def test_generate_config_command_writes_template(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "fhir-types.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert output_path.exists()
    assert str(output_path.resolve()) in result.output

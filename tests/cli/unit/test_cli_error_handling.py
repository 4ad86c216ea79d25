"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from fhir_type_classifier.cli import main


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["classify", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_classify_without_descriptor_files_reports_error(capsys) -> None:
    exit_code = main(["classify"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "No descriptor files given" in captured.err


def test_unknown_target_reports_error(tmp_path: Path, capsys) -> None:
    schema_path = tmp_path / "profiles.yaml"
    schema_path.write_text("- name: example.X\n  profile_of: Coding\n", encoding="utf-8")

    exit_code = main(["classify", "--schema", str(schema_path), "--target", "Observation"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Unknown base type: 'Observation'" in captured.err


def test_profile_cycle_reports_malformed_schema(tmp_path: Path, capsys) -> None:
    schema_path = tmp_path / "cycle.yaml"
    schema_path.write_text(
        "- name: example.A\n  profile_of: example.B\n"
        "- name: example.B\n  profile_of: example.A\n",
        encoding="utf-8",
    )

    exit_code = main(["classify", "--schema", str(schema_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Profile-of cycle detected" in captured.err
    assert "Traceback" not in captured.err


def test_generate_config_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    output_path = tmp_path / "fhir-types.yaml"
    output_path.write_text("existing", encoding="utf-8")

    exit_code = main(["generate-config", "--output", str(output_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "already exists" in captured.err

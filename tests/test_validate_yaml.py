#!/usr/bin/env python3
"""Tests for validate_yaml schema validation."""

from pathlib import Path

from validate_yaml import load_schema, main, validate_vehicle_file

SAMPLE = Path(__file__).parent.parent / "vehicles" / "corolla.yaml"


class TestLoadSchema:
    """Tests for load_schema function."""

    def test_returns_dict(self):
        schema = load_schema()
        assert isinstance(schema, dict)

    def test_has_expected_structure(self):
        properties = load_schema()["properties"]
        assert "car" in properties
        assert "records" in properties
        assert "items" in properties


class TestValidateVehicleFile:
    """Tests for validate_vehicle_file function."""

    def test_sample_vehicle_is_valid(self):
        assert validate_vehicle_file(SAMPLE, load_schema()) == []

    def test_valid_minimal_returns_no_errors(self, tmp_path):
        path = tmp_path / "valid.yaml"
        path.write_text("""
car:
  make: Tesla
  model: Model 3
  fuelType: electric
""")
        assert validate_vehicle_file(path, load_schema()) == []

    def test_unquoted_dates_are_valid(self, tmp_path):
        path = tmp_path / "dates.yaml"
        path.write_text("""
car:
  make: Toyota
  model: Corolla
records:
  - type: Oil Change
    date: 2024-03-02
    mileage: 40150
""")
        assert validate_vehicle_file(path, load_schema()) == []

    def test_missing_required_car_field_returns_errors(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("""
car:
  make: Toyota
  # model missing
""")
        errors = validate_vehicle_file(path, load_schema())
        assert any("Schema validation" in e for e in errors)

    def test_negative_mileage_reports_path(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("""
car:
  make: Toyota
  model: Corolla
records:
  - type: Oil Change
    date: '2024-03-02'
    mileage: -1
""")
        errors = validate_vehicle_file(path, load_schema())
        assert "  at path: records.0.mileage" in errors

    def test_unknown_key_returns_errors(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("""
car:
  make: Toyota
  model: Corolla
rules: []
""")
        assert validate_vehicle_file(path, load_schema())

    def test_invalid_yaml_returns_parse_error(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("""
car:
  make: Toyota
  invalid: [unclosed
""")
        errors = validate_vehicle_file(path, load_schema())
        assert any("YAML" in e for e in errors)

    def test_nonexistent_file_returns_errors(self, tmp_path):
        errors = validate_vehicle_file(tmp_path / "missing.yaml", load_schema())
        assert len(errors) == 1
        assert errors[0].startswith("Error:")


class TestMain:
    def test_reports_each_file(self, tmp_path, capsys):
        good = tmp_path / "good.yaml"
        good.write_text("car:\n  make: Tesla\n  model: Model 3\n")
        bad = tmp_path / "bad.yaml"
        bad.write_text("car:\n  make: Tesla\n")

        assert main([str(good), str(bad)]) == 1
        out = capsys.readouterr().out
        assert "OK: good.yaml" in out
        assert "FAIL: bad.yaml" in out

    def test_all_valid(self, capsys):
        assert main([str(SAMPLE)]) == 0

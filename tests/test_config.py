"""Tests for configuration settings and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from luis_predict.config import (
    ConfigError,
    ConfigValidationError,
    ConfigValidator,
    DirectoryValidationError,
    Settings,
)


@pytest.fixture
def input_folder(tmp_path):
    folder = tmp_path / "test_files"
    folder.mkdir()
    return folder


def test_valid_configuration_passes(input_folder):
    ConfigValidator.validate_all(input_folder)

    assert ConfigValidator.is_valid(input_folder)


def test_missing_keys_are_reported_together(monkeypatch, input_folder):
    monkeypatch.setattr(Settings, "LUIS_ENDPOINT_BASE_URI", None)
    monkeypatch.setattr(Settings, "LUIS_PREDICTION_KEY", "")

    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigValidator.validate_all(input_folder)

    assert exc_info.value.missing_keys == ["LUIS_ENDPOINT_BASE_URI", "LUIS_PREDICTION_KEY"]
    assert not ConfigValidator.is_valid(input_folder)


@pytest.mark.parametrize(
    ("attribute", "value"),
    [
        ("LUIS_APP_ID", "my-app"),
        ("LUIS_MODEL_SLOT", "beta"),
        ("LUIS_POLL_INTERVAL", "soon"),
        ("LUIS_POLL_INTERVAL", "0"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch, input_folder, attribute, value):
    monkeypatch.setattr(Settings, attribute, value)

    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigValidator.validate_all(input_folder)

    assert exc_info.value.config_key == attribute


def test_slot_name_is_case_insensitive(monkeypatch, input_folder):
    monkeypatch.setattr(Settings, "LUIS_MODEL_SLOT", "Staging")

    ConfigValidator.validate_all(input_folder)


def test_missing_input_folder_is_rejected(tmp_path):
    with pytest.raises(DirectoryValidationError) as exc_info:
        ConfigValidator.validate_all(tmp_path / "absent")

    assert exc_info.value.directory_path == str(tmp_path / "absent")
    assert exc_info.value.config_key == "TEST_FILES_FOLDER"


def test_input_folder_must_be_a_directory(tmp_path):
    path = tmp_path / "file.txt"
    path.write_text("x")

    with pytest.raises(DirectoryValidationError):
        ConfigValidator.validate_input_folder(path)


def test_input_folder_is_optional_when_not_required(tmp_path):
    ConfigValidator.validate_all(tmp_path / "absent", require_input=False)


def test_poll_interval_parses_seconds(monkeypatch):
    monkeypatch.setattr(Settings, "LUIS_POLL_INTERVAL", "2.5")

    assert Settings.poll_interval() == 2.5


def test_unparsable_poll_interval_raises_config_error(monkeypatch):
    monkeypatch.setattr(Settings, "LUIS_POLL_INTERVAL", "fast")

    with pytest.raises(ConfigError) as exc_info:
        Settings.poll_interval()

    assert exc_info.value.config_key == "LUIS_POLL_INTERVAL"


def test_output_folder_defaults_below_input(tmp_path):
    assert Settings.output_folder_for(tmp_path) == tmp_path / "output"


def test_output_folder_setting_wins(monkeypatch, tmp_path):
    monkeypatch.setattr(Settings, "OUTPUT_FOLDER", "elsewhere")

    assert Settings.output_folder_for(tmp_path) == Path("elsewhere")

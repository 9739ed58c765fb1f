import datetime
from pathlib import Path

import pytest

from hygiene.config import (
    DEFAULT_COPYRIGHT_OWNER,
    SETTINGS_FILE_NAME,
    Settings,
    SettingsError,
    load_settings,
)


def test_defaults_without_override_file(tmp_path):
    settings = load_settings(tmp_path)
    assert settings == Settings()
    assert settings.copyright_owner == DEFAULT_COPYRIGHT_OWNER
    assert settings.source is None
    assert settings.current_year == datetime.date.today().year


def test_override_file_replaces_owner(tmp_path):
    (tmp_path / SETTINGS_FILE_NAME).write_text("copyright_owner: Acme Corp\n", encoding="utf-8")
    settings = load_settings(tmp_path)
    assert settings.copyright_owner == "Acme Corp"
    assert settings.source == tmp_path / SETTINGS_FILE_NAME
    # Untouched fields keep their defaults
    assert settings.focus_markers == Settings().focus_markers


def test_explicit_settings_path(tmp_path):
    path = tmp_path / "custom.yml"
    path.write_text("focus_markers: FIt(\nyear: 2020\n", encoding="utf-8")
    settings = load_settings(tmp_path, path)
    assert settings.focus_markers == ["FIt("]
    assert settings.current_year == 2020


def test_explicit_settings_path_must_exist(tmp_path):
    with pytest.raises(SettingsError, match="does not exist"):
        load_settings(tmp_path, tmp_path / "missing.yml")


def test_empty_override_file(tmp_path):
    (tmp_path / SETTINGS_FILE_NAME).write_text("", encoding="utf-8")
    settings = load_settings(tmp_path)
    assert settings.copyright_owner == DEFAULT_COPYRIGHT_OWNER


@pytest.mark.parametrize("content, message", [
    ("owner: Acme\n", "Unknown setting 'owner'"),
    ("copyright_owner: 42\n", "must be a non-empty string"),
    ("header_files: {a: 1}\n", "must be a list of strings"),
    ("year: soon\n", "must be an integer"),
    ("- just\n- a list\n", "Expected a mapping"),
    ("copyright_owner: [unclosed\n", "Failed to parse"),
])
def test_invalid_override_file(tmp_path, content, message):
    (tmp_path / SETTINGS_FILE_NAME).write_text(content, encoding="utf-8")
    with pytest.raises(SettingsError, match=message):
        load_settings(tmp_path)

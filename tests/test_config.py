"""
Tests for settings loading.
"""

import json
import os

import pytest

from respview.config import Config

ENV_VARS = ("NO_COLOR", "RESPVIEW_COLOR", "RESPVIEW_COLOR_DEPTH", "RESPVIEW_SNIFF_THRESHOLD")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = Config(config_dir=str(tmp_path), load_env=False)
    assert config.settings == Config.DEFAULT_CONFIG
    assert config.color is True
    assert config.color_depth == "256"
    assert config.sniff_threshold == 0.5
    assert config.show_summary is True


def test_config_file_merged_over_defaults(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({
        "color": False,
        "sniff_threshold": 0.7,
        "unknown_key": 1,
    }))
    config = Config(config_dir=str(tmp_path), load_env=False)
    assert config.color is False
    assert config.sniff_threshold == 0.7
    assert config.show_summary is True
    assert "unknown_key" not in config.settings


def test_corrupted_config_file_uses_defaults(tmp_path):
    (tmp_path / "config.json").write_text("{not json")
    config = Config(config_dir=str(tmp_path), load_env=False)
    assert config.settings == Config.DEFAULT_CONFIG


def test_non_object_config_file_uses_defaults(tmp_path):
    (tmp_path / "config.json").write_text("[1, 2]")
    config = Config(config_dir=str(tmp_path), load_env=False)
    assert config.settings == Config.DEFAULT_CONFIG


def test_config_file_is_never_written(tmp_path):
    Config(config_dir=str(tmp_path), load_env=False)
    assert not (tmp_path / "config.json").exists()


def test_no_color_env(tmp_path, monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    assert Config(config_dir=str(tmp_path), load_env=False).color is False


def test_respview_color_env(tmp_path, monkeypatch):
    monkeypatch.setenv("RESPVIEW_COLOR", "off")
    assert Config(config_dir=str(tmp_path), load_env=False).color is False
    monkeypatch.setenv("RESPVIEW_COLOR", "maybe")
    assert Config(config_dir=str(tmp_path), load_env=False).color is True


def test_env_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(json.dumps({"color_depth": "256"}))
    monkeypatch.setenv("RESPVIEW_COLOR_DEPTH", "TrueColor")
    assert Config(config_dir=str(tmp_path), load_env=False).color_depth == "truecolor"


def test_invalid_values_fall_back(tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(json.dumps({
        "color_depth": "16",
        "sniff_threshold": "high",
    }))
    config = Config(config_dir=str(tmp_path), load_env=False)
    assert config.color_depth == "256"
    assert config.sniff_threshold == 0.5

    monkeypatch.setenv("RESPVIEW_SNIFF_THRESHOLD", "abc")
    assert Config(config_dir=str(tmp_path), load_env=False).sniff_threshold == 0.5


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("RESPVIEW_SNIFF_THRESHOLD=0.9\n")
    monkeypatch.chdir(tmp_path)
    try:
        config = Config(config_dir=str(tmp_path / "cfg"))
        assert config.sniff_threshold == 0.9
    finally:
        os.environ.pop("RESPVIEW_SNIFF_THRESHOLD", None)

"""Tests for configuration loading."""

from pathlib import Path

import tomllib

import config as config_module
from config import Config, load_config, parse_config


class TestParseConfig:
    """Tests for parse_config."""

    def test_defaults_for_empty_file(self):
        config = parse_config({})

        assert config.base_dir == Path.home() / "data" / "pennywise"
        assert config.db_path == Path.home() / "data" / "pennywise" / "db" / "pennywise.db"
        assert config.db_busy_timeout == 5.0
        assert config.log_level == "INFO"

    def test_overrides(self, tmp_path):
        config = parse_config(
            {
                "base_dir": str(tmp_path),
                "database": {"filename": "other.db", "busy_timeout": 1},
                "logging": {"level": "DEBUG"},
            }
        )

        assert config.db_path == tmp_path / "db" / "other.db"
        assert config.db_busy_timeout == 1.0
        assert config.log_level == "DEBUG"
        assert config.log_dir == tmp_path / "logs"


class TestLoadConfig:
    """Tests for load_config."""

    def test_writes_default_config_when_missing(self, tmp_path, monkeypatch):
        config_path = tmp_path / ".config" / "pennywise.toml"
        monkeypatch.setattr(config_module, "get_config_path", lambda: config_path)

        config = load_config()

        assert config == Config.default()
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        assert data["database"]["filename"] == "pennywise.db"
        assert data["logging"]["level"] == "INFO"

    def test_round_trips_written_config(self, tmp_path, monkeypatch):
        config_path = tmp_path / ".config" / "pennywise.toml"
        monkeypatch.setattr(config_module, "get_config_path", lambda: config_path)

        first = load_config()
        second = load_config()

        assert first == second

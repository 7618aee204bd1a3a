#
# tests/unit/test_config.py
#
"""
Tests for configuration loading and validation.
"""

import logging
from pathlib import Path

import pytest

from caserunner.config import CaserunnerConfig, load_config, load_optional_config
from caserunner.config.models import GlobalConfig, RunnerConfig
from caserunner.exceptions import ConfigurationError


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "caserunner.toml"
    path.write_text(content)
    return path


class TestLoadConfig:
    """Test load_config."""

    def test_valid_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CASERUNNER_LOG_LEVEL", raising=False)
        path = write_config(
            tmp_path,
            '[global]\nlog_level = "debug"\n\n[runner]\nlog_events = false\nrequire_assertions = true\n',
        )

        config = load_config(path)

        assert config.global_config.log_level == "debug"
        assert config.global_config.numeric_log_level == logging.DEBUG
        assert config.runner == RunnerConfig(log_events=False, require_assertions=True)
        assert config.config_file_path == path

    def test_missing_sections_use_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CASERUNNER_LOG_LEVEL", raising=False)
        config = load_config(write_config(tmp_path, ""))

        assert config.global_config == GlobalConfig()
        assert config.runner == RunnerConfig()

    def test_environment_overrides_log_level(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CASERUNNER_LOG_LEVEL", "ERROR")
        config = load_config(write_config(tmp_path, '[global]\nlog_level = "DEBUG"\n'))

        assert config.global_config.log_level == "ERROR"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_config(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(write_config(tmp_path, '[global\nlog_level = "DEBUG"'))

    @pytest.mark.parametrize(
        "content",
        [
            '[global]\nlog_level = "LOUD"\n',
            '[runner]\nlog_events = "yes"\n',
            "[runner]\nunknown_option = 1\n",
        ],
    )
    def test_invalid_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, content: str) -> None:
        monkeypatch.delenv("CASERUNNER_LOG_LEVEL", raising=False)
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(write_config(tmp_path, content))

    def test_section_must_be_table(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="must be a table"):
            load_config(write_config(tmp_path, 'runner = "fast"\n'))


def test_optional_config_defaults() -> None:
    assert load_optional_config(None) == CaserunnerConfig()

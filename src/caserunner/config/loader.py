#
# config/loader.py
#
"""
Loads caserunner configuration from a TOML file.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

import structlog

from caserunner.config.models import CaserunnerConfig, GlobalConfig, RunnerConfig
from caserunner.exceptions import ConfigurationError
from caserunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("config.loader")

ENV_LOG_LEVEL = "CASERUNNER_LOG_LEVEL"


def _section(data: dict[str, Any], name: str, config_path: Path) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"Section [{name}] in '{config_path}' must be a table.")
    return section


def load_config(config_path: Path) -> CaserunnerConfig:
    """
    Load, validate and return the configuration stored at ``config_path``.

    The ``CASERUNNER_LOG_LEVEL`` environment variable overrides
    ``global.log_level`` from the file.
    """
    config_path = Path(config_path)
    log.debug("Loading configuration", path=str(config_path), emoji_key="config")

    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file '{config_path}' does not exist.")

    try:
        with config_path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in '{config_path}': {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read '{config_path}': {e}") from e

    global_data = dict(_section(data, "global", config_path))
    runner_data = _section(data, "runner", config_path)

    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        log.debug("Log level overridden from environment", log_level=env_level)
        global_data["log_level"] = env_level

    try:
        config = CaserunnerConfig(
            global_config=GlobalConfig(**global_data),
            runner=RunnerConfig(**runner_data),
            config_file_path=config_path,
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration in '{config_path}': {e}") from e

    log.info("Configuration loaded", path=str(config_path), emoji_key="config")
    return config


def load_optional_config(config_path: Path | None) -> CaserunnerConfig:
    """Load ``config_path`` when given, otherwise return the defaults."""
    if config_path is None:
        return CaserunnerConfig()
    return load_config(config_path)


# 🔼⚙️

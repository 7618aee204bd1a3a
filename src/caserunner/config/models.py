#
# config/models.py
#
"""
Attrs-based data models for caserunner configuration structure.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import define, field


def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_bool(inst: Any, attr: Any, value: bool) -> None:
    if not isinstance(value, bool):
        raise ValueError(f"Field '{attr.name}' must be a boolean, got {value!r}")


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for caserunner."""
    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class RunnerConfig:
    """Settings for `caserunner run`."""
    # Attach a LoggingListener to every case run from the CLI.
    log_events: bool = field(default=True, validator=_validate_bool)
    # Fail a passing run that never executed an assertion.
    require_assertions: bool = field(default=False, validator=_validate_bool)


@define(frozen=True, slots=True)
class CaserunnerConfig:
    """Root configuration object for the caserunner application."""
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    runner: RunnerConfig = field(factory=RunnerConfig)
    config_file_path: Path | None = field(default=None)


# 🔼⚙️

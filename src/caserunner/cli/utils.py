# src/caserunner/cli/utils.py

import logging
from pathlib import Path

import click
import structlog

from caserunner.telemetry.logger import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)

# In `--help` order.
_LOGGING_OPTIONS = (
    click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="CASERUNNER_LOG_LEVEL",
        help="Logging level; wins over the config file.",
    ),
    click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="CASERUNNER_LOG_FILE",
        help="Also write JSON log lines to this file.",
    ),
    click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="CASERUNNER_JSON_LOGS",
        help="Render console logs (stderr) as JSON.",
    ),
)


def logging_options(f):
    """Attach the shared logging options to a command or group."""
    for option in reversed(_LOGGING_OPTIONS):
        f = option(f)
    return f


def config_path_option(default: Path | None = None):
    """The `-c/--config-path` option shared by every command that reads configuration."""
    return click.option(
        "-c",
        "--config-path",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
        default=default,
        show_default=default is not None,
        envvar="CASERUNNER_CONF",
        help="caserunner TOML configuration file.",
        show_envvar=True,
    )


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "INFO",
) -> None:
    """
    Configure logging for a command.

    Values given to the command itself win over the ones the top-level
    group stored in ``ctx.obj``, which win over ``default_log_level``.
    """
    group_settings = ctx.obj or {}
    level_name = (local_log_level or group_settings.get("LOG_LEVEL") or default_log_level).upper()
    log_file = local_log_file or group_settings.get("LOG_FILE")
    json_logs = local_json_logs if local_json_logs is not None else group_settings.get("JSON_LOGS", False)

    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level_name, level = "INFO", logging.INFO

    core_setup_logging(level=level, json_logs=bool(json_logs), log_file=log_file)
    log.debug("Command logging ready", command=ctx.info_name, level=level_name, log_file=log_file or "console")

# ⚙️🛠️

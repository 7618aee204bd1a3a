# src/caserunner/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from caserunner.cli.utils import config_path_option, logging_options, setup_logging_from_context
from caserunner.config import load_config
from caserunner.exceptions import ConfigurationError
from caserunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")

DEFAULT_CONFIG_PATH = Path("caserunner.toml")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""


@config_cli.command(name="show")
@config_path_option(default=DEFAULT_CONFIG_PATH)
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path, **kwargs):
    """Load, validate, and display the configuration."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        default_log_level="WARNING",
    )

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.error("Configuration rejected", path=str(config_path), error=str(e))
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(1)

    log.debug("Showing configuration", path=str(config_path), emoji_key="config")
    click.echo(pretty_repr(config, expand_all=True))

# 🔼⚙️

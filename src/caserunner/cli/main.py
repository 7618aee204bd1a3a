# src/caserunner/cli/main.py

"""
Command line entry point: the `caserunner` click group and its shared
logging options.
"""

from importlib.metadata import PackageNotFoundError, version

import click
import structlog

from caserunner.cli.config_cmds import config_cli
from caserunner.cli.run_cmds import list_cmd, run_cmd
from caserunner.cli.utils import logging_options, setup_logging_from_context
from caserunner.telemetry import StructLogger

try:
    __version__ = version("caserunner")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="caserunner")
@logging_options
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, json_logs: bool | None):
    """
    Caserunner: run the test methods of a single test case.

    Configuration precedence: CLI options > Environment Variables > Config File > Defaults.
    """
    # Subcommands read these back as the fallback for their own options.
    ctx.ensure_object(dict).update(
        LOG_LEVEL=log_level,
        LOG_FILE=log_file,
        JSON_LOGS=bool(json_logs),
    )
    setup_logging_from_context(ctx, default_log_level="WARNING")


for command in (config_cli, list_cmd, run_cmd):
    cli.add_command(command)

if __name__ == "__main__":
    cli()

# 🖥️⚙️

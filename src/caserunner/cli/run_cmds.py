# src/caserunner/cli/run_cmds.py

"""
`caserunner run` and `caserunner list` commands.
"""

import importlib
import importlib.util
import sys
from pathlib import Path

import click
import structlog

from caserunner.case import TestCase
from caserunner.cli.utils import config_path_option, logging_options, setup_logging_from_context
from caserunner.config import CaserunnerConfig, load_optional_config
from caserunner.exceptions import CaserunnerError
from caserunner.listeners import LoggingListener
from caserunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")

EXIT_FAILURE = 1
EXIT_ERROR = 2


def load_case_class(target: str) -> type[TestCase]:
    """
    Import the test case class named by ``target``.

    ``target`` is ``path/to/file.py:ClassName`` or ``package.module:ClassName``.
    """
    module_ref, sep, class_name = target.rpartition(":")
    if not sep or not module_ref or not class_name:
        raise CaserunnerError(f"Invalid target '{target}'. Expected 'file.py:ClassName' or 'module:ClassName'.")

    try:
        if module_ref.endswith(".py"):
            path = Path(module_ref).resolve()
            if not path.is_file():
                raise CaserunnerError(f"Test case file '{module_ref}' does not exist.")
            spec = importlib.util.spec_from_file_location(path.stem, path)
            module = importlib.util.module_from_spec(spec)
            sys.modules[spec.name] = module
            spec.loader.exec_module(module)
        else:
            module = importlib.import_module(module_ref)
    except CaserunnerError:
        raise
    except Exception as e:
        log.error("Failed to import test case module", target=target, error=str(e))
        raise CaserunnerError(f"Cannot import '{module_ref}': {type(e).__name__}: {e}") from e

    case_class = getattr(module, class_name, None)
    if not (isinstance(case_class, type) and issubclass(case_class, TestCase)):
        raise CaserunnerError(f"'{class_name}' in '{module_ref}' is not a TestCase subclass.")
    log.debug("Loaded test case class", target=target, case=case_class.__qualname__)
    return case_class


def _create_case(target: str, config: CaserunnerConfig) -> TestCase:
    case = load_case_class(target)()
    if config.runner.log_events:
        case.add_listener(LoggingListener())
    return case


def _describe_failure(error: BaseException) -> str:
    lines = [f"Failure: {type(error).__name__}: {error}"]
    lines.extend(getattr(error, "__notes__", []))
    return "\n".join(lines)


@click.command(
    name="run",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@config_path_option()
@logging_options
@click.argument("target")
@click.argument("case_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_cmd(ctx: click.Context, target: str, case_args: tuple[str, ...], config_path: Path | None, **kwargs):
    """
    Run the test methods of TARGET (file.py:ClassName or module:ClassName).

    Arguments after TARGET are passed to the test case, e.g.
    `--method=testAdd` runs a single method.
    """
    config, case = _prepare(ctx, target, config_path, kwargs)

    failure: BaseException | None = None
    try:
        case.run(argv=[target, *case_args])
    except CaserunnerError as e:
        log.error("Test case is misdeclared", target=target, error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)
    except Exception as e:
        failure = e

    if failure is not None:
        click.echo(_describe_failure(failure), err=True)
        ctx.exit(EXIT_FAILURE)

    if config.runner.require_assertions and case.context.forgot_assertions:
        click.echo("Error: This test forgets to execute an assertion.", err=True)
        ctx.exit(EXIT_FAILURE)


@click.command(name="list")
@config_path_option()
@logging_options
@click.argument("target")
@click.pass_context
def list_cmd(ctx: click.Context, target: str, config_path: Path | None, **kwargs):
    """Print the test methods of TARGET as [name1,name2,...]."""
    _, case = _prepare(ctx, target, config_path, kwargs)
    case.run(argv=[target, TestCase.LIST_METHODS])
    click.echo()


def _prepare(ctx: click.Context, target: str, config_path: Path | None, kwargs: dict) -> tuple[CaserunnerConfig, TestCase]:
    try:
        config = load_optional_config(config_path)
    except CaserunnerError as e:
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(EXIT_ERROR)

    setup_logging_from_context(
        ctx,
        local_log_level=(
            kwargs.get("log_level")
            or (ctx.obj or {}).get("LOG_LEVEL")
            or (config.global_config.log_level if config_path else None)
        ),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        default_log_level="WARNING",
    )

    try:
        case = _create_case(target, config)
    except CaserunnerError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)
    return config, case

# 🔼⚙️

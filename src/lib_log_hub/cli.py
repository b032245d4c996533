"""Click command line for inspecting and demonstrating the logging core.

Purpose
-------
Offer ``lib_log_hub info`` (metadata banner) and ``lib_log_hub demo`` (one
event per severity rendered through the Rich console sink) so packaging
checks and operators can exercise an installed distribution.

Contents
--------
* :func:`cli` – root group handling ``--version`` and ``.env`` loading.
* :func:`cli_info`, :func:`cli_demo` – subcommands.
* :func:`main` – test-friendly runner returning an exit code.
"""

from __future__ import annotations

import os
from typing import Sequence

import click

from . import __init__conf__
from . import config as log_config
from .adapters import RichConsoleSink
from .domain import LoggerConfig, LogLevel
from .runtime import Dispatcher

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

_LEVEL_CHOICES = [level.name for level in LogLevel]


def summary_info() -> str:
    """Return the metadata banner printed by ``info``.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load the nearest .env before running commands (overrides {log_config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool | None) -> None:
    """Root command; prints the banner when no subcommand is given."""

    if log_config.should_use_dotenv(explicit=use_dotenv, env_value=os.getenv(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata so users can inspect installation details."""

    click.echo(summary_info(), nl=False)


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--min-level",
    type=click.Choice(_LEVEL_CHOICES, case_sensitive=False),
    default=LogLevel.TRACE.name,
    show_default=True,
    help="Lowest severity that passes the threshold filter.",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI colours in the console sink.")
@click.option("--named", "logger_name", default=None, help="Emit through a named view with this name.")
def cli_demo(min_level: str, no_color: bool, logger_name: str | None) -> None:
    """Emit one event per severity through the Rich console sink."""

    config = LoggerConfig(min_level=LogLevel.from_name(min_level), capture_traces=False)
    with Dispatcher().init(config, sinks=[RichConsoleSink(no_color=no_color)], release=False) as dispatcher:
        target = dispatcher.named(logger_name) if logger_name else dispatcher
        for level in LogLevel:
            target.log(level, f"demo {level.name.lower()} message", metadata={"demo": True})
        retained = len(dispatcher.buffered_events())
        click.echo(f"retained {retained} event(s) at or above {dispatcher.config.min_level.name}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Click group without exiting the interpreter.

    Examples
    --------
    >>> main(["--version"])  # doctest: +ELLIPSIS
    lib_log_hub version ...
    0
    """

    args = list(argv) if argv is not None else None
    try:
        cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.ClickException as error:
        error.show()
        return error.exit_code
    except click.exceptions.Exit as exit_signal:
        return exit_signal.exit_code
    except click.exceptions.Abort:
        return 1
    return 0


__all__ = ["cli", "cli_demo", "cli_info", "main", "summary_info"]

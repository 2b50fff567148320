from collections.abc import Callable
from pathlib import Path
from typing import Any
from typing import TypeVar

import click
from click_option_group import optgroup

from imbue.ccsw.data_types import FrozenModel
from imbue.ccsw.data_types import OutputOptions
from imbue.ccsw.primitives import OutputFormat
from imbue.ccsw.utils.logging import console_level_from_verbose_and_quiet
from imbue.ccsw.utils.logging import log_span
from imbue.ccsw.utils.logging import setup_logging

# Constant for the "Common" option group name used across all commands
COMMON_OPTIONS_GROUP_NAME = "Common"

TDecorated = TypeVar("TDecorated", bound=Callable[..., Any])


class CommonCliOptions(FrozenModel):
    """Options added to every command by @add_common_options."""

    output_format: str
    quiet: bool
    verbose: int
    log_file: str | None


def add_common_options(command: TDecorated) -> TDecorated:
    """Decorator to add common options to a command.

    Adds the following options in the "Common" option group:
    - --format: Output format (human/json)
    - -q, --quiet: Suppress console output
    - -v, --verbose: Increase verbosity
    - --log-file: Override log file path
    """
    # Decorators apply bottom to top, so the group is started last
    command = optgroup.option(
        "--log-file",
        type=click.Path(),
        default=None,
        help="Path to log file (overrides default ~/.ccsw/logs/<timestamp>-<pid>.json)",
    )(command)
    command = optgroup.option(
        "-v", "--verbose", count=True, help="Increase verbosity; -v for DEBUG, -vv for TRACE"
    )(command)
    command = optgroup.option("-q", "--quiet", is_flag=True, help="Suppress all console output")(command)
    command = optgroup.option(
        "--format",
        "output_format",
        type=click.Choice(["human", "json"], case_sensitive=False),
        default="human",
        show_default=True,
        help="Output format for command results",
    )(command)
    command = optgroup.group(COMMON_OPTIONS_GROUP_NAME)(command)

    return command


def add_project_dir_option(command: TDecorated) -> TDecorated:
    """Decorator to add --project-dir, the directory holding .claude/ and .gitignore."""
    return click.option(
        "--project-dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=Path("."),
        show_default=True,
        help="Project whose .claude/settings.json is edited",
    )(command)


def setup_command_context(ctx: click.Context, command_name: str) -> OutputOptions:
    """Set up logging for a command.

    Call this at the top of each command to parse common options, set up logging,
    and enter a log span for the command lifetime.
    """
    common_opts = CommonCliOptions(
        output_format=ctx.params["output_format"],
        quiet=ctx.params["quiet"],
        verbose=ctx.params["verbose"],
        log_file=ctx.params.get("log_file"),
    )
    output_opts = OutputOptions(
        output_format=OutputFormat(common_opts.output_format.upper()),
        console_level=console_level_from_verbose_and_quiet(common_opts.verbose, common_opts.quiet),
        log_file_path=Path(common_opts.log_file) if common_opts.log_file else None,
    )

    setup_logging(output_opts)

    span = log_span("Started {} command", command_name)
    ctx.with_resource(span)

    return output_opts

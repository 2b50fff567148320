from pathlib import Path
from typing import Any

import click

from imbue.ccsw.api import get_status
from imbue.ccsw.cli.common_opts import add_common_options
from imbue.ccsw.cli.common_opts import add_project_dir_option
from imbue.ccsw.cli.common_opts import setup_command_context
from imbue.ccsw.cli.output import emit_status


@click.command(name="status")
@add_project_dir_option
@add_common_options
@click.pass_context
def status(ctx: click.Context, project_dir: Path, **_common: Any) -> None:
    """Show which providers are configured for this project."""
    output_opts = setup_command_context(ctx, "status")
    emit_status(output_opts, get_status(project_dir))

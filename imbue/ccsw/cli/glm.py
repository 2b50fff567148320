from pathlib import Path
from typing import Any

import click

from imbue.ccsw.api import disable_glm
from imbue.ccsw.api import enable_glm
from imbue.ccsw.cli.common_opts import add_common_options
from imbue.ccsw.cli.common_opts import add_project_dir_option
from imbue.ccsw.cli.common_opts import setup_command_context
from imbue.ccsw.cli.output import emit_activation_result
from imbue.ccsw.cli.output import emit_deactivation_result


@click.command(name="glm-on")
@add_project_dir_option
@add_common_options
@click.pass_context
def glm_on(ctx: click.Context, project_dir: Path, **_common: Any) -> None:
    """Configure .claude/settings.json to use GLM.

    Requires a key stored with 'ccsw set-glm-key'. Adds .claude/settings.json
    to .gitignore so the key is never committed.
    """
    output_opts = setup_command_context(ctx, "glm-on")
    result = enable_glm(project_dir)
    emit_activation_result(output_opts, result)


@click.command(name="glm-off")
@add_project_dir_option
@add_common_options
@click.pass_context
def glm_off(ctx: click.Context, project_dir: Path, **_common: Any) -> None:
    """Remove the GLM configuration from .claude/settings.json.

    Only the keys written by glm-on are removed. The file is deleted if
    nothing else is left in it.
    """
    output_opts = setup_command_context(ctx, "glm-off")
    result = disable_glm(project_dir)
    emit_deactivation_result(output_opts, result)

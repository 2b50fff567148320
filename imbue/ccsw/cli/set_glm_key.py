from typing import Any

import click

from imbue.ccsw.api import set_glm_key as store_key
from imbue.ccsw.cli.common_opts import add_common_options
from imbue.ccsw.cli.common_opts import setup_command_context
from imbue.ccsw.cli.output import emit_key_stored
from imbue.ccsw.primitives import GlmApiKey


@click.command(name="set-glm-key")
@click.argument("key")
@add_common_options
@click.pass_context
def set_glm_key(ctx: click.Context, key: str, **_common: Any) -> None:
    """Store the GLM API key locally in ~/.ccsw/config.json.

    The key is stored in plaintext, readable only by the current user, and
    replaces any previously stored key.

    Examples:

      ccsw set-glm-key sk-abc123
    """
    output_opts = setup_command_context(ctx, "set-glm-key")
    if not key.strip():
        raise click.BadParameter("API key cannot be empty", param_hint="KEY")
    credentials_path = store_key(GlmApiKey(key.strip()))
    emit_key_stored(output_opts, credentials_path)

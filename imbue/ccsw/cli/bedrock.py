from pathlib import Path
from typing import Any

import click

from imbue.ccsw.api import disable_bedrock
from imbue.ccsw.api import enable_bedrock
from imbue.ccsw.cli.common_opts import add_common_options
from imbue.ccsw.cli.common_opts import add_project_dir_option
from imbue.ccsw.cli.common_opts import setup_command_context
from imbue.ccsw.cli.output import emit_activation_result
from imbue.ccsw.cli.output import emit_deactivation_result
from imbue.ccsw.primitives import AwsProfileName
from imbue.ccsw.primitives import AwsRegion
from imbue.ccsw.profiles import DEFAULT_AWS_PROFILE
from imbue.ccsw.profiles import DEFAULT_AWS_REGION


def _parse_aws_profile(ctx: click.Context, param: click.Parameter, value: str | None) -> AwsProfileName | None:
    if value is None:
        return None
    try:
        return AwsProfileName(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _parse_aws_region(ctx: click.Context, param: click.Parameter, value: str | None) -> AwsRegion | None:
    if value is None:
        return None
    try:
        return AwsRegion(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.command(name="bedrock-on")
@click.option(
    "-p",
    "--profile",
    "aws_profile",
    default=None,
    callback=_parse_aws_profile,
    help=f"AWS profile name (default: {DEFAULT_AWS_PROFILE})",
)
@click.option(
    "-r",
    "--region",
    "aws_region",
    default=None,
    callback=_parse_aws_region,
    help=f"AWS region (default: {DEFAULT_AWS_REGION})",
)
@add_project_dir_option
@add_common_options
@click.pass_context
def bedrock_on(
    ctx: click.Context,
    aws_profile: AwsProfileName | None,
    aws_region: AwsRegion | None,
    project_dir: Path,
    **_common: Any,
) -> None:
    """Configure .claude/settings.json to use AWS Bedrock.

    Examples:

      ccsw bedrock-on

      ccsw bedrock-on --profile dev --region us-east-1
    """
    output_opts = setup_command_context(ctx, "bedrock-on")
    result = enable_bedrock(project_dir, aws_profile, aws_region)
    emit_activation_result(output_opts, result)


@click.command(name="bedrock-off")
@add_project_dir_option
@add_common_options
@click.pass_context
def bedrock_off(ctx: click.Context, project_dir: Path, **_common: Any) -> None:
    """Remove the AWS Bedrock configuration from .claude/settings.json.

    The top-level model setting is removed along with the Bedrock env keys.
    """
    output_opts = setup_command_context(ctx, "bedrock-off")
    result = disable_bedrock(project_dir)
    emit_deactivation_result(output_opts, result)

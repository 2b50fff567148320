import click

from imbue.ccsw.cli.bedrock import bedrock_off
from imbue.ccsw.cli.bedrock import bedrock_on
from imbue.ccsw.cli.glm import glm_off
from imbue.ccsw.cli.glm import glm_on
from imbue.ccsw.cli.set_glm_key import set_glm_key
from imbue.ccsw.cli.status import status


@click.group()
@click.version_option(package_name="ccsw")
def cli() -> None:
    """ccsw: manage GLM and AWS Bedrock settings for Claude Code."""


cli.add_command(set_glm_key)
cli.add_command(glm_on)
cli.add_command(glm_off)
cli.add_command(bedrock_on)
cli.add_command(bedrock_off)
cli.add_command(status)

import json
from pathlib import Path
from typing import Any
from typing import Final
from typing import assert_never

import click
from loguru import logger

from imbue.ccsw.data_types import ActivationResult
from imbue.ccsw.data_types import DeactivationResult
from imbue.ccsw.data_types import OutputOptions
from imbue.ccsw.data_types import ProviderStatus
from imbue.ccsw.primitives import OutputFormat
from imbue.ccsw.primitives import ProviderName
from imbue.ccsw.settings_file import SETTINGS_RELATIVE_PATH

PROVIDER_DISPLAY_NAMES: Final[dict[ProviderName, str]] = {
    ProviderName.GLM: "GLM",
    ProviderName.BEDROCK: "Bedrock",
}


def write_human_line(output_opts: OutputOptions, message: str, *args: Any) -> None:
    """Write a progress line in human mode; JSON mode stays silent until the final result."""
    if output_opts.output_format == OutputFormat.HUMAN:
        logger.info(message, *args)


def emit_final_json(data: dict[str, Any]) -> None:
    click.echo(json.dumps(data))


def emit_key_stored(output_opts: OutputOptions, credentials_path: Path) -> None:
    match output_opts.output_format:
        case OutputFormat.JSON:
            emit_final_json({"stored": True, "credentials_path": str(credentials_path)})
        case OutputFormat.HUMAN:
            write_human_line(output_opts, "GLM API Key stored successfully.")
        case _ as unreachable:
            assert_never(unreachable)


def emit_activation_result(output_opts: OutputOptions, result: ActivationResult) -> None:
    match output_opts.output_format:
        case OutputFormat.JSON:
            emit_final_json(result.model_dump(mode="json"))
        case OutputFormat.HUMAN:
            if result.provider == ProviderName.GLM:
                write_human_line(output_opts, "Created/Updated {}", SETTINGS_RELATIVE_PATH)
            else:
                write_human_line(
                    output_opts,
                    "Created/Updated {} with {} settings",
                    SETTINGS_RELATIVE_PATH,
                    PROVIDER_DISPLAY_NAMES[result.provider],
                )
            if result.is_gitignore_updated:
                write_human_line(output_opts, "Added {} to .gitignore", SETTINGS_RELATIVE_PATH)
            else:
                write_human_line(output_opts, "{} already in .gitignore", SETTINGS_RELATIVE_PATH)
        case _ as unreachable:
            assert_never(unreachable)


def emit_deactivation_result(output_opts: OutputOptions, result: DeactivationResult) -> None:
    match output_opts.output_format:
        case OutputFormat.JSON:
            emit_final_json(result.model_dump(mode="json"))
        case OutputFormat.HUMAN:
            if not result.is_settings_found:
                write_human_line(output_opts, "{} does not exist. Nothing to do.", SETTINGS_RELATIVE_PATH)
            elif result.is_settings_removed:
                write_human_line(output_opts, "Removed {} as it became empty.", SETTINGS_RELATIVE_PATH)
            else:
                write_human_line(
                    output_opts,
                    "Updated {} (removed {} keys).",
                    SETTINGS_RELATIVE_PATH,
                    PROVIDER_DISPLAY_NAMES[result.provider],
                )
        case _ as unreachable:
            assert_never(unreachable)


def emit_status(output_opts: OutputOptions, status: ProviderStatus) -> None:
    match output_opts.output_format:
        case OutputFormat.JSON:
            emit_final_json(status.model_dump(mode="json"))
        case OutputFormat.HUMAN:
            if status.active_providers:
                names = ", ".join(PROVIDER_DISPLAY_NAMES[p] for p in status.active_providers)
                write_human_line(output_opts, "Active providers: {}", names)
            else:
                write_human_line(output_opts, "Active providers: none")
            write_human_line(output_opts, "GLM API Key stored: {}", "yes" if status.is_glm_key_stored else "no")
            write_human_line(
                output_opts,
                "{} in .gitignore: {}",
                SETTINGS_RELATIVE_PATH,
                "yes" if status.is_gitignore_entry_present else "no",
            )
            if len(status.active_providers) > 1:
                logger.warning("More than one provider is on; Claude Code will see a mix of their settings")
        case _ as unreachable:
            assert_never(unreachable)

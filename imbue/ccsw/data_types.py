from pathlib import Path
from typing import Final

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator

from imbue.ccsw.primitives import LogLevel
from imbue.ccsw.primitives import OutputFormat
from imbue.ccsw.primitives import ProviderName

# Name of the settings section that holds environment variables for Claude Code
ENV_SECTION_KEY: Final[str] = "env"


class FrozenModel(BaseModel):
    """Base class for immutable pydantic models that prevent attribute mutation after construction."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=False,
    )


class ProfileOwnership(FrozenModel):
    """The exact settings keys a provider profile writes, and therefore removes."""

    env_keys: tuple[str, ...] = Field(description="Keys owned inside the env section")
    top_level_keys: tuple[str, ...] = Field(default=(), description="Keys owned at the top level of settings")


class ProviderProfile(FrozenModel):
    """A resolved set of literal settings for one provider, ready to be applied."""

    name: ProviderName = Field(description="Provider this profile configures")
    env_fields: dict[str, str] = Field(description="Values written into the env section, in order")
    top_level_fields: dict[str, str] = Field(
        default_factory=dict,
        description="Values written at the top level of settings (e.g. model)",
    )
    ownership: ProfileOwnership = Field(description="Keys removed when this provider is switched off")

    @model_validator(mode="after")
    def _validate_ownership_matches_fields(self) -> "ProviderProfile":
        """Deactivation must remove exactly what activation wrote."""
        if set(self.env_fields) != set(self.ownership.env_keys):
            raise ValueError(
                f"env fields {sorted(self.env_fields)} do not match owned env keys {sorted(self.ownership.env_keys)}"
            )
        if set(self.top_level_fields) != set(self.ownership.top_level_keys):
            raise ValueError(
                f"top-level fields {sorted(self.top_level_fields)} do not match owned top-level keys "
                f"{sorted(self.ownership.top_level_keys)}"
            )
        return self


class ActivationResult(FrozenModel):
    """Outcome of switching a provider on for a project."""

    provider: ProviderName = Field(description="Provider that was switched on")
    settings_path: Path = Field(description="Settings file that was written")
    is_settings_created: bool = Field(description="Whether the settings file did not exist beforehand")
    is_gitignore_updated: bool = Field(description="Whether the ignore entry had to be appended")


class DeactivationResult(FrozenModel):
    """Outcome of switching a provider off for a project."""

    provider: ProviderName = Field(description="Provider that was switched off")
    settings_path: Path = Field(description="Settings file that was examined")
    is_settings_found: bool = Field(description="Whether there was a settings file to edit")
    is_settings_removed: bool = Field(default=False, description="Whether the settings file was deleted")


class ProviderStatus(FrozenModel):
    """Which providers are switched on for a project."""

    settings_path: Path = Field(description="Settings file that was examined")
    active_providers: tuple[ProviderName, ...] = Field(description="Providers whose owned env keys are all present")
    is_glm_key_stored: bool = Field(description="Whether a GLM API key is in the credential store")
    is_gitignore_entry_present: bool = Field(description="Whether the settings file is listed in .gitignore")


class OutputOptions(FrozenModel):
    """Options for command output formatting and logging."""

    output_format: OutputFormat = Field(
        default=OutputFormat.HUMAN,
        description="Output format for command results",
    )
    console_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Log level for console output",
    )
    log_file_path: Path | None = Field(
        default=None,
        description="Override path for log file",
    )

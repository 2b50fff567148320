"""Static provider definitions.

Each provider is described by its literal settings. The keys a provider owns
are derived from the same tables that supply the values, so switching a
provider off removes exactly what switching it on wrote.
"""

from collections.abc import Mapping
from typing import Final

from imbue.ccsw.data_types import ProfileOwnership
from imbue.ccsw.data_types import ProviderProfile
from imbue.ccsw.primitives import AwsProfileName
from imbue.ccsw.primitives import AwsRegion
from imbue.ccsw.primitives import GlmApiKey
from imbue.ccsw.primitives import ProviderName

MODEL_KEY: Final[str] = "model"

# GLM serves an Anthropic-compatible API; the auth token is filled in from the credential store
GLM_AUTH_TOKEN_KEY: Final[str] = "ANTHROPIC_AUTH_TOKEN"
GLM_ENV_FIELDS: Final[Mapping[str, str | None]] = {
    "ANTHROPIC_BASE_URL": "https://api.z.ai/api/anthropic",
    GLM_AUTH_TOKEN_KEY: None,
    "API_TIMEOUT_MS": "3000000",
    "ANTHROPIC_DEFAULT_SONNET_MODEL": "glm-4.7",
    "ANTHROPIC_DEFAULT_OPUS_MODEL": "glm-4.7",
    "ANTHROPIC_DEFAULT_HAIKU_MODEL": "glm-4.5-air",
    "IS_DEMO": "true",
}

DEFAULT_AWS_PROFILE: Final[str] = "sjmbrprofile"
DEFAULT_AWS_REGION: Final[str] = "eu-west-1"
BEDROCK_AWS_PROFILE_KEY: Final[str] = "AWS_PROFILE"
BEDROCK_AWS_REGION_KEY: Final[str] = "AWS_REGION"
BEDROCK_ENV_FIELDS: Final[Mapping[str, str | None]] = {
    "CLAUDE_CODE_USE_BEDROCK": "1",
    BEDROCK_AWS_PROFILE_KEY: None,
    BEDROCK_AWS_REGION_KEY: None,
    "IS_DEMO": "true",
}
BEDROCK_TOP_LEVEL_FIELDS: Final[Mapping[str, str]] = {
    MODEL_KEY: "eu.anthropic.claude-opus-4-5-20251101-v1:0",
}

OWNERSHIP_BY_PROVIDER: Final[Mapping[ProviderName, ProfileOwnership]] = {
    ProviderName.GLM: ProfileOwnership(env_keys=tuple(GLM_ENV_FIELDS)),
    ProviderName.BEDROCK: ProfileOwnership(
        env_keys=tuple(BEDROCK_ENV_FIELDS),
        top_level_keys=tuple(BEDROCK_TOP_LEVEL_FIELDS),
    ),
}


def get_profile_ownership(provider: ProviderName) -> ProfileOwnership:
    return OWNERSHIP_BY_PROVIDER[provider]


def _fill_env_fields(template: Mapping[str, str | None], values: Mapping[str, str]) -> dict[str, str]:
    """Resolve the None placeholders in a template, keeping the template's key order."""
    resolved: dict[str, str] = {}
    for key, literal in template.items():
        if literal is not None:
            resolved[key] = literal
        else:
            resolved[key] = values[key]
    return resolved


def build_glm_profile(api_key: GlmApiKey) -> ProviderProfile:
    return ProviderProfile(
        name=ProviderName.GLM,
        env_fields=_fill_env_fields(GLM_ENV_FIELDS, {GLM_AUTH_TOKEN_KEY: api_key.get_secret_value()}),
        ownership=get_profile_ownership(ProviderName.GLM),
    )


def build_bedrock_profile(
    aws_profile: AwsProfileName | None = None,
    aws_region: AwsRegion | None = None,
) -> ProviderProfile:
    """Build the Bedrock profile, falling back to the default AWS profile and region."""
    values = {
        BEDROCK_AWS_PROFILE_KEY: aws_profile if aws_profile is not None else DEFAULT_AWS_PROFILE,
        BEDROCK_AWS_REGION_KEY: aws_region if aws_region is not None else DEFAULT_AWS_REGION,
    }
    return ProviderProfile(
        name=ProviderName.BEDROCK,
        env_fields=_fill_env_fields(BEDROCK_ENV_FIELDS, {k: str(v) for k, v in values.items()}),
        top_level_fields=dict(BEDROCK_TOP_LEVEL_FIELDS),
        ownership=get_profile_ownership(ProviderName.BEDROCK),
    )

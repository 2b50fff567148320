"""Apply and reverse provider profiles on a project's .claude/settings.json.

The settings file is shared with the user and with other tools, so every
operation preserves keys it does not own. Empty structures are never left
behind: an env section that becomes empty is dropped, and a settings object
that becomes empty is deleted from disk.
"""

import json
from pathlib import Path
from typing import Any
from typing import Final

from loguru import logger

from imbue.ccsw.data_types import ActivationResult
from imbue.ccsw.data_types import DeactivationResult
from imbue.ccsw.data_types import ENV_SECTION_KEY
from imbue.ccsw.data_types import ProfileOwnership
from imbue.ccsw.data_types import ProviderProfile
from imbue.ccsw.errors import SettingsParseError
from imbue.ccsw.gitignore import ensure_gitignore_entry
from imbue.ccsw.primitives import ProviderName
from imbue.ccsw.profiles import OWNERSHIP_BY_PROVIDER
from imbue.ccsw.utils.file_utils import atomic_write
from imbue.ccsw.utils.logging import log_span

# Relative path of the settings file, also used verbatim as the .gitignore entry
SETTINGS_RELATIVE_PATH: Final[str] = ".claude/settings.json"


def get_settings_path(project_dir: Path) -> Path:
    return project_dir / SETTINGS_RELATIVE_PATH


def _parse_settings(content: str) -> dict[str, Any]:
    """Parse settings content, raising ValueError unless it is a JSON object."""
    raw = json.loads(content)
    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
    return raw


def read_settings_leniently(settings_path: Path) -> dict[str, Any]:
    """Load settings for activation.

    Returns an empty object if the file is missing or cannot be parsed. A
    malformed file is discarded in full (it is about to be overwritten).
    """
    if not settings_path.exists():
        return {}

    try:
        return _parse_settings(settings_path.read_text())
    except ValueError as e:
        logger.warning("Ignoring unreadable settings file {} and starting fresh: {}", settings_path, e)
        return {}


def read_settings_strictly(settings_path: Path) -> dict[str, Any]:
    """Load settings that must be edited precisely.

    The caller must check that the file exists. Raises SettingsParseError if
    the content is not a JSON object.
    """
    try:
        return _parse_settings(settings_path.read_text())
    except ValueError as e:
        raise SettingsParseError(settings_path, str(e)) from e


def write_settings(settings_path: Path, settings: dict[str, Any]) -> None:
    """Persist settings as 2-space indented JSON with a trailing newline."""
    atomic_write(settings_path, json.dumps(settings, indent=2) + "\n")


def apply_profile(settings: dict[str, Any], profile: ProviderProfile) -> dict[str, Any]:
    """Return a copy of settings with the profile's fields upserted.

    Profile values overwrite any existing value under the same key. An env
    section that is missing or not an object is replaced by a fresh one.
    """
    updated = dict(settings)
    existing_env = updated.get(ENV_SECTION_KEY)
    if isinstance(existing_env, dict):
        env = dict(existing_env)
    else:
        if existing_env is not None:
            logger.warning("Replacing non-object {} section in settings", ENV_SECTION_KEY)
        env = {}

    env.update(profile.env_fields)
    updated[ENV_SECTION_KEY] = env
    updated.update(profile.top_level_fields)
    return updated


def remove_profile(settings: dict[str, Any], ownership: ProfileOwnership) -> dict[str, Any]:
    """Return a copy of settings without the owned keys.

    Owned keys that are already absent are skipped. The env section is dropped
    once it is empty. Owned top-level keys are removed whatever their value.
    """
    updated = dict(settings)
    env = updated.get(ENV_SECTION_KEY)
    if isinstance(env, dict):
        remaining_env = {key: value for key, value in env.items() if key not in ownership.env_keys}
        if remaining_env:
            updated[ENV_SECTION_KEY] = remaining_env
        else:
            del updated[ENV_SECTION_KEY]

    for key in ownership.top_level_keys:
        updated.pop(key, None)
    return updated


def is_profile_active(settings: dict[str, Any], ownership: ProfileOwnership) -> bool:
    """A profile is active when every key it owns in the env section is present."""
    env = settings.get(ENV_SECTION_KEY)
    if not isinstance(env, dict):
        return False
    return all(key in env for key in ownership.env_keys)


def detect_active_providers(settings: dict[str, Any]) -> tuple[ProviderName, ...]:
    return tuple(
        provider for provider, ownership in OWNERSHIP_BY_PROVIDER.items() if is_profile_active(settings, ownership)
    )


def activate_profile(project_dir: Path, profile: ProviderProfile) -> ActivationResult:
    """Switch a provider on: upsert its fields and make sure git ignores the settings file."""
    settings_path = get_settings_path(project_dir)
    with log_span("Activating {} profile in {}", profile.name, settings_path):
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        is_settings_created = not settings_path.exists()
        settings = read_settings_leniently(settings_path)
        write_settings(settings_path, apply_profile(settings, profile))
        is_gitignore_updated = ensure_gitignore_entry(project_dir, SETTINGS_RELATIVE_PATH)

    return ActivationResult(
        provider=profile.name,
        settings_path=settings_path,
        is_settings_created=is_settings_created,
        is_gitignore_updated=is_gitignore_updated,
    )


def deactivate_profile(project_dir: Path, provider: ProviderName) -> DeactivationResult:
    """Switch a provider off, deleting the settings file if nothing else remains in it.

    The .gitignore entry is left alone.
    """
    settings_path = get_settings_path(project_dir)
    if not settings_path.exists():
        logger.debug("No settings file at {}, nothing to deactivate", settings_path)
        return DeactivationResult(provider=provider, settings_path=settings_path, is_settings_found=False)

    with log_span("Deactivating {} profile in {}", provider, settings_path):
        settings = read_settings_strictly(settings_path)
        updated = remove_profile(settings, OWNERSHIP_BY_PROVIDER[provider])
        if updated:
            write_settings(settings_path, updated)
            is_settings_removed = False
        else:
            settings_path.unlink()
            is_settings_removed = True

    return DeactivationResult(
        provider=provider,
        settings_path=settings_path,
        is_settings_found=True,
        is_settings_removed=is_settings_removed,
    )

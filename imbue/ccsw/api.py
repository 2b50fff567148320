from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from imbue.ccsw.credentials import load_glm_api_key
from imbue.ccsw.credentials import store_glm_api_key
from imbue.ccsw.data_types import ActivationResult
from imbue.ccsw.data_types import DeactivationResult
from imbue.ccsw.data_types import ProviderStatus
from imbue.ccsw.errors import MissingApiKeyError
from imbue.ccsw.errors import SettingsWriteError
from imbue.ccsw.gitignore import has_gitignore_entry
from imbue.ccsw.gitignore import read_gitignore
from imbue.ccsw.primitives import AwsProfileName
from imbue.ccsw.primitives import AwsRegion
from imbue.ccsw.primitives import GlmApiKey
from imbue.ccsw.primitives import ProviderName
from imbue.ccsw.profiles import build_bedrock_profile
from imbue.ccsw.profiles import build_glm_profile
from imbue.ccsw.settings_file import SETTINGS_RELATIVE_PATH
from imbue.ccsw.settings_file import activate_profile
from imbue.ccsw.settings_file import deactivate_profile
from imbue.ccsw.settings_file import detect_active_providers
from imbue.ccsw.settings_file import get_settings_path
from imbue.ccsw.settings_file import read_settings_strictly


@contextmanager
def _os_errors_as_command_errors(action: str) -> Iterator[None]:
    """Turn filesystem failures into a reportable error for the current command."""
    try:
        yield
    except OSError as e:
        raise SettingsWriteError(action, e) from e


def set_glm_key(api_key: GlmApiKey, credentials_path: Path | None = None) -> Path:
    with _os_errors_as_command_errors("storing key"):
        return store_glm_api_key(api_key, credentials_path)


def enable_glm(project_dir: Path, credentials_path: Path | None = None) -> ActivationResult:
    """Point Claude Code at GLM for this project.

    Raises MissingApiKeyError, before touching any project file, if no key is stored.
    """
    with _os_errors_as_command_errors("running glm-on"):
        api_key = load_glm_api_key(credentials_path)
        if api_key is None:
            raise MissingApiKeyError()
        return activate_profile(project_dir, build_glm_profile(api_key))


def disable_glm(project_dir: Path) -> DeactivationResult:
    with _os_errors_as_command_errors("running glm-off"):
        return deactivate_profile(project_dir, ProviderName.GLM)


def enable_bedrock(
    project_dir: Path,
    aws_profile: AwsProfileName | None = None,
    aws_region: AwsRegion | None = None,
) -> ActivationResult:
    with _os_errors_as_command_errors("running bedrock-on"):
        return activate_profile(project_dir, build_bedrock_profile(aws_profile, aws_region))


def disable_bedrock(project_dir: Path) -> DeactivationResult:
    with _os_errors_as_command_errors("running bedrock-off"):
        return deactivate_profile(project_dir, ProviderName.BEDROCK)


def get_status(project_dir: Path, credentials_path: Path | None = None) -> ProviderStatus:
    """Report which providers are on, without modifying anything."""
    settings_path = get_settings_path(project_dir)
    with _os_errors_as_command_errors("reading status"):
        settings = read_settings_strictly(settings_path) if settings_path.exists() else {}
        gitignore_content = read_gitignore(project_dir)
        is_glm_key_stored = load_glm_api_key(credentials_path) is not None

    return ProviderStatus(
        settings_path=settings_path,
        active_providers=detect_active_providers(settings),
        is_glm_key_stored=is_glm_key_stored,
        is_gitignore_entry_present=has_gitignore_entry(gitignore_content, SETTINGS_RELATIVE_PATH),
    )

import json
from pathlib import Path
from typing import Any
from typing import Final

from loguru import logger

from imbue.ccsw.errors import CredentialStoreError
from imbue.ccsw.primitives import GlmApiKey
from imbue.ccsw.utils.file_utils import atomic_write
from imbue.ccsw.utils.logging import CONFIG_DIR_NAME
from imbue.ccsw.utils.logging import log_span

CONFIG_FILE_NAME: Final[str] = "config.json"
GLM_API_KEY_FIELD: Final[str] = "glmApiKey"

# The record holds a plaintext secret, so only the owner may read it
_CREDENTIAL_FILE_MODE: Final[int] = 0o600


def get_credentials_dir() -> Path:
    """Get the ccsw config directory path (~/.ccsw/)."""
    return Path.home() / CONFIG_DIR_NAME


def get_credentials_path() -> Path:
    """Get the credential record path (~/.ccsw/config.json)."""
    return get_credentials_dir() / CONFIG_FILE_NAME


def load_credential_record(path: Path) -> dict[str, Any]:
    """Load the credential record from disk.

    Returns an empty record if the file does not exist.
    Raises CredentialStoreError if the file exists but is not a UTF-8 encoded JSON object.
    """
    if not path.exists():
        return {}

    with path.open(encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except ValueError as e:
            raise CredentialStoreError(path, str(e)) from e

    if not isinstance(raw, dict):
        raise CredentialStoreError(path, f"expected a JSON object, got {type(raw).__name__}")
    return raw


def save_credential_record(path: Path, record: dict[str, Any]) -> None:
    """Write the credential record to disk, creating the config directory if needed."""
    atomic_write(path, json.dumps(record, indent=2) + "\n", new_file_mode=_CREDENTIAL_FILE_MODE)


def store_glm_api_key(api_key: GlmApiKey, path: Path | None = None) -> Path:
    """Persist the GLM API key, replacing any previously stored value.

    Other fields in the record are left untouched. Returns the record path.
    """
    record_path = path if path is not None else get_credentials_path()
    with log_span("Storing GLM API key in {}", record_path):
        record = load_credential_record(record_path)
        if GLM_API_KEY_FIELD in record:
            logger.debug("Replacing previously stored GLM API key")
        record[GLM_API_KEY_FIELD] = api_key.get_secret_value()
        save_credential_record(record_path, record)
    return record_path


def load_glm_api_key(path: Path | None = None) -> GlmApiKey | None:
    """Return the stored GLM API key, or None if it was never set.

    An empty string counts as unset. Any other non-string value is rejected.
    """
    record_path = path if path is not None else get_credentials_path()
    value = load_credential_record(record_path).get(GLM_API_KEY_FIELD)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise CredentialStoreError(record_path, f"{GLM_API_KEY_FIELD} must be a string, got {type(value).__name__}")
    return GlmApiKey(value)

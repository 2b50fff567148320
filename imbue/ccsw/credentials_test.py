import json
import os
import stat
from pathlib import Path

import pytest

from imbue.ccsw.credentials import get_credentials_path
from imbue.ccsw.credentials import load_credential_record
from imbue.ccsw.credentials import load_glm_api_key
from imbue.ccsw.credentials import store_glm_api_key
from imbue.ccsw.errors import CredentialStoreError
from imbue.ccsw.primitives import GlmApiKey


def test_credentials_path_is_under_home() -> None:
    assert get_credentials_path() == Path.home() / ".ccsw" / "config.json"


def test_load_glm_api_key_returns_none_when_never_set() -> None:
    assert load_glm_api_key() is None
    assert not get_credentials_path().exists()


def test_store_glm_api_key_creates_record_and_directory() -> None:
    path = store_glm_api_key(GlmApiKey("abc123"))

    assert path == get_credentials_path()
    assert json.loads(path.read_text()) == {"glmApiKey": "abc123"}


def test_store_then_load_glm_api_key() -> None:
    store_glm_api_key(GlmApiKey("abc123"))

    api_key = load_glm_api_key()

    assert api_key is not None
    assert api_key.get_secret_value() == "abc123"


def test_store_glm_api_key_overwrites_previous_value() -> None:
    store_glm_api_key(GlmApiKey("first"))
    store_glm_api_key(GlmApiKey("second"))

    api_key = load_glm_api_key()
    assert api_key is not None
    assert api_key.get_secret_value() == "second"


def test_store_glm_api_key_preserves_other_fields(tmp_path: Path) -> None:
    path = tmp_path / "custom" / "config.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"other": "value"}))

    store_glm_api_key(GlmApiKey("abc123"), path)

    assert load_credential_record(path) == {"other": "value", "glmApiKey": "abc123"}


def test_new_credential_record_is_private() -> None:
    path = store_glm_api_key(GlmApiKey("abc123"))

    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_existing_credential_record_keeps_its_permissions() -> None:
    path = get_credentials_path()
    path.parent.mkdir(parents=True)
    path.write_text("{}")
    os.chmod(path, 0o640)

    store_glm_api_key(GlmApiKey("abc123"))

    assert stat.S_IMODE(path.stat().st_mode) == 0o640


def test_empty_stored_key_counts_as_absent() -> None:
    path = get_credentials_path()
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"glmApiKey": ""}))

    assert load_glm_api_key() is None


@pytest.mark.parametrize("content", [b"{oops", b"[]", b'"just a string"', b'{"glmApiKey": "\xff"}'])
def test_malformed_credential_record_raises(content: bytes) -> None:
    path = get_credentials_path()
    path.parent.mkdir(parents=True)
    path.write_bytes(content)

    with pytest.raises(CredentialStoreError):
        load_glm_api_key()

    with pytest.raises(CredentialStoreError):
        store_glm_api_key(GlmApiKey("abc123"))

    assert path.read_bytes() == content


@pytest.mark.parametrize("value", [{"a": 1}, 42, True, ["abc123"]])
def test_non_string_stored_key_raises(value: object) -> None:
    path = get_credentials_path()
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"glmApiKey": value}))

    with pytest.raises(CredentialStoreError, match="glmApiKey must be a string"):
        load_glm_api_key()

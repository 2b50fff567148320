import json
from pathlib import Path

from click.testing import CliRunner

from imbue.ccsw.conftest import read_settings_fixture
from imbue.ccsw.conftest import write_settings_fixture
from imbue.ccsw.main import cli


def _invoke(*args: str) -> tuple[int, str]:
    result = CliRunner().invoke(cli, list(args))
    return result.exit_code, result.output


class TestSetGlmKeyCommand:
    def test_stores_key(self) -> None:
        exit_code, output = _invoke("set-glm-key", "abc123")

        assert exit_code == 0, output
        assert "GLM API Key stored successfully." in output
        assert json.loads((Path.home() / ".ccsw" / "config.json").read_text()) == {"glmApiKey": "abc123"}

    def test_rejects_blank_key(self) -> None:
        exit_code, output = _invoke("set-glm-key", "   ")

        assert exit_code == 2
        assert not (Path.home() / ".ccsw" / "config.json").exists()

    def test_json_output_does_not_leak_key(self) -> None:
        exit_code, output = _invoke("set-glm-key", "abc123", "--format", "json")

        assert exit_code == 0, output
        assert json.loads(output)["stored"] is True
        assert "abc123" not in output


class TestGlmCommands:
    def test_glm_on_without_key_exits_with_error(self, tmp_path: Path) -> None:
        exit_code, output = _invoke("glm-on")

        assert exit_code == 1
        assert "GLM API Key not found" in output
        assert "ccsw set-glm-key" in output
        assert not (tmp_path / ".claude").exists()
        assert not (tmp_path / ".gitignore").exists()

    def test_glm_on_then_off(self, tmp_path: Path) -> None:
        _invoke("set-glm-key", "abc123")

        exit_code, output = _invoke("glm-on")

        assert exit_code == 0, output
        assert "Created/Updated .claude/settings.json" in output
        assert "Added .claude/settings.json to .gitignore" in output
        env = read_settings_fixture(tmp_path)["env"]
        assert env["ANTHROPIC_AUTH_TOKEN"] == "abc123"
        assert len(env) == 7
        assert (tmp_path / ".gitignore").read_text() == ".claude/settings.json\n"

        exit_code, output = _invoke("glm-off")

        assert exit_code == 0, output
        assert "Removed .claude/settings.json as it became empty." in output
        assert not (tmp_path / ".claude" / "settings.json").exists()
        assert (tmp_path / ".gitignore").read_text() == ".claude/settings.json\n"

    def test_glm_on_twice_reports_existing_gitignore_entry(self) -> None:
        _invoke("set-glm-key", "abc123")
        _invoke("glm-on")

        exit_code, output = _invoke("glm-on")

        assert exit_code == 0, output
        assert ".claude/settings.json already in .gitignore" in output

    def test_glm_off_without_settings(self) -> None:
        exit_code, output = _invoke("glm-off")

        assert exit_code == 0, output
        assert ".claude/settings.json does not exist. Nothing to do." in output

    def test_glm_off_keeps_unrelated_settings(self, tmp_path: Path) -> None:
        write_settings_fixture(tmp_path, {"theme": "dark"})
        _invoke("set-glm-key", "abc123")
        _invoke("glm-on")

        exit_code, output = _invoke("glm-off")

        assert exit_code == 0, output
        assert "Updated .claude/settings.json (removed GLM keys)." in output
        assert read_settings_fixture(tmp_path) == {"theme": "dark"}

    def test_glm_off_fails_on_malformed_settings(self, tmp_path: Path) -> None:
        settings_path = write_settings_fixture(tmp_path, "{")

        exit_code, output = _invoke("glm-off")

        assert exit_code == 1
        assert "Failed to parse settings file" in output
        assert settings_path.read_text() == "{"

    def test_glm_on_with_project_dir(self, project_dir: Path) -> None:
        _invoke("set-glm-key", "abc123")

        exit_code, output = _invoke("glm-on", "--project-dir", str(project_dir))

        assert exit_code == 0, output
        assert read_settings_fixture(project_dir)["env"]["ANTHROPIC_AUTH_TOKEN"] == "abc123"

    def test_glm_on_fails_cleanly_on_undecodable_credential_file(self, tmp_path: Path) -> None:
        credentials_path = tmp_path / ".ccsw" / "config.json"
        credentials_path.parent.mkdir()
        credentials_path.write_bytes(b'{"glmApiKey": "\xff"}')

        exit_code, output = _invoke("glm-on")

        assert exit_code == 1
        assert "Failed to parse credential file" in output
        assert not (tmp_path / ".claude").exists()


class TestBedrockCommands:
    def test_bedrock_on_with_defaults(self, tmp_path: Path) -> None:
        exit_code, output = _invoke("bedrock-on")

        assert exit_code == 0, output
        assert "Created/Updated .claude/settings.json with Bedrock settings" in output
        settings = read_settings_fixture(tmp_path)
        assert settings["env"]["AWS_PROFILE"] == "sjmbrprofile"
        assert settings["env"]["AWS_REGION"] == "eu-west-1"
        assert settings["model"] == "eu.anthropic.claude-opus-4-5-20251101-v1:0"

    def test_bedrock_on_and_off_preserve_existing_settings(self, tmp_path: Path) -> None:
        write_settings_fixture(tmp_path, {"foo": 1, "env": {"bar": "baz"}})

        exit_code, output = _invoke("bedrock-on", "--profile", "dev", "-r", "us-east-1")

        assert exit_code == 0, output
        assert read_settings_fixture(tmp_path) == {
            "foo": 1,
            "env": {
                "bar": "baz",
                "CLAUDE_CODE_USE_BEDROCK": "1",
                "AWS_PROFILE": "dev",
                "AWS_REGION": "us-east-1",
                "IS_DEMO": "true",
            },
            "model": "eu.anthropic.claude-opus-4-5-20251101-v1:0",
        }

        exit_code, output = _invoke("bedrock-off")

        assert exit_code == 0, output
        assert "Updated .claude/settings.json (removed Bedrock keys)." in output
        assert read_settings_fixture(tmp_path) == {"foo": 1, "env": {"bar": "baz"}}

    def test_bedrock_on_with_undecodable_gitignore(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_bytes(b"\xff\xfe junk")

        exit_code, output = _invoke("bedrock-on")

        assert exit_code == 0, output
        assert "Added .claude/settings.json to .gitignore" in output
        assert (tmp_path / ".gitignore").read_bytes() == b"\xff\xfe junk\n.claude/settings.json\n"

    def test_bedrock_on_rejects_blank_region(self) -> None:
        exit_code, output = _invoke("bedrock-on", "--region", " ")

        assert exit_code == 2

    def test_bedrock_on_json_output(self, tmp_path: Path) -> None:
        exit_code, output = _invoke("bedrock-on", "--format", "json")

        assert exit_code == 0, output
        data = json.loads(output)
        assert data["provider"] == "bedrock"
        assert data["is_settings_created"] is True
        assert data["is_gitignore_updated"] is True


class TestStatusCommand:
    def test_status_reports_active_provider(self) -> None:
        _invoke("bedrock-on")

        exit_code, output = _invoke("status")

        assert exit_code == 0, output
        assert "Active providers: Bedrock" in output
        assert "GLM API Key stored: no" in output
        assert ".claude/settings.json in .gitignore: yes" in output

    def test_status_json_output(self) -> None:
        exit_code, output = _invoke("status", "--format", "json")

        assert exit_code == 0, output
        assert json.loads(output)["active_providers"] == []


def test_quiet_suppresses_progress_output() -> None:
    exit_code, output = _invoke("bedrock-on", "-q")

    assert exit_code == 0, output
    assert output == ""


def test_version() -> None:
    exit_code, output = _invoke("--version")

    assert exit_code == 0, output
    assert "1.0.0" in output

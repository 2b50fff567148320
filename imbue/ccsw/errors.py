from pathlib import Path

from click import ClickException


class CcswError(ClickException):
    """Base exception for all user-facing ccsw errors.

    Subclasses can provide a user_help_text attribute with additional context
    to help the user resolve the error. The CLI appends it to the message.
    """

    user_help_text: str | None = None

    def format_message(self) -> str:
        if self.user_help_text:
            return str(self) + "  [" + self.user_help_text + "]"
        return str(self)


class MissingApiKeyError(CcswError):
    """Raised when a provider needs an API key that has not been stored yet."""

    user_help_text = 'Please run "ccsw set-glm-key [KEY]" first.'

    def __init__(self) -> None:
        super().__init__("GLM API Key not found.")


class CredentialStoreError(CcswError):
    """Raised when the global credential record cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to parse credential file {path}: {reason}")
        self.user_help_text = f"Fix or delete {path} and store the key again."


class SettingsParseError(CcswError, ValueError):
    """Raised when the project settings file exists but is not a valid JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to parse settings file {path}: {reason}")
        self.user_help_text = "Fix the JSON by hand; ccsw will not rewrite a file it cannot read."


class SettingsWriteError(CcswError):
    """Raised when reading or writing a project or credential file fails at the OS level."""

    def __init__(self, action: str, error: OSError) -> None:
        self.action = action
        super().__init__(f"Error {action}: {error.strerror or error}")

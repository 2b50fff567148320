from pathlib import Path
from typing import Final

from loguru import logger

from imbue.ccsw.utils.file_utils import append_text

GITIGNORE_FILE_NAME: Final[str] = ".gitignore"


def get_gitignore_path(project_dir: Path) -> Path:
    return project_dir / GITIGNORE_FILE_NAME


def read_gitignore(project_dir: Path) -> str:
    """Return the project's .gitignore content, or an empty string if there is none.

    Bytes that are not valid UTF-8 are kept as surrogate escapes so that line matching
    still works and nothing already in the file is lost.
    """
    gitignore_path = get_gitignore_path(project_dir)
    if not gitignore_path.exists():
        return ""
    return gitignore_path.read_text(encoding="utf-8", errors="surrogateescape")


def has_gitignore_entry(content: str, entry: str) -> bool:
    """Check for the entry as a whole line, ignoring surrounding whitespace."""
    return any(line.strip() == entry for line in content.splitlines())


def ensure_gitignore_entry(project_dir: Path, entry: str) -> bool:
    """Append entry to the project's .gitignore unless it is already listed.

    A newline is inserted first when the existing content does not end with one.
    Returns True if the file was changed.
    """
    gitignore_path = get_gitignore_path(project_dir)
    content = read_gitignore(project_dir)

    if has_gitignore_entry(content, entry):
        logger.debug("{} already lists {}", gitignore_path, entry)
        return False

    separator = "\n" if content and not content.endswith("\n") else ""
    append_text(gitignore_path, f"{separator}{entry}\n")
    logger.debug("Appended {} to {}", entry, gitignore_path)
    return True

import os
import stat
import tempfile
from pathlib import Path


def atomic_write(path: Path, content: str, new_file_mode: int | None = None) -> None:
    """Write content to a file atomically using a temp file and rename.

    Readers never see a partially-written file: the content goes to a temp file
    in the same directory, is fsynced, then replaces the target with os.replace.

    An existing file keeps its permissions. A new file gets new_file_mode when
    given, otherwise the mode of the temp file (0600).

    The caller is responsible for catching OSError if the write fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    existing_mode: int | None = None
    try:
        existing_mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        pass
    target_mode = existing_mode if existing_mode is not None else new_file_mode

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp_file:
        tmp_file.write(content)
        tmp_file.flush()
        os.fsync(tmp_file.fileno())
        tmp_path = Path(tmp_file.name)

    try:
        if target_mode is not None:
            os.chmod(tmp_path, target_mode)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def append_text(path: Path, content: str) -> None:
    """Append content to a text file, creating it if needed."""
    with path.open("a") as f:
        f.write(content)

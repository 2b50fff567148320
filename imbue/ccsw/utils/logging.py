import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any
from typing import Final

from loguru import logger

from imbue.ccsw.data_types import OutputOptions
from imbue.ccsw.primitives import LogLevel

# 256-color codes chosen to be readable on both light and dark backgrounds
WARNING_COLOR: Final[str] = "\x1b[1;38;5;178m"
ERROR_COLOR: Final[str] = "\x1b[1;38;5;196m"
DEBUG_COLOR: Final[str] = "\x1b[38;5;33m"
TRACE_COLOR: Final[str] = "\x1b[38;5;99m"
RESET_COLOR: Final[str] = "\x1b[0m"

CONFIG_DIR_NAME: Final[str] = ".ccsw"
DEFAULT_LOG_DIR_NAME: Final[str] = "logs"
DEFAULT_MAX_LOG_FILES: Final[int] = 50
DEFAULT_MAX_LOG_SIZE_MB: Final[int] = 5


def _dynamic_stdout_sink(message: Any) -> None:
    """Loguru sink that resolves sys.stdout at write time.

    logger.add(sys.stdout) would capture the stream object once, which breaks
    when the stream is later replaced (click's CliRunner, pytest capture).
    """
    sys.stdout.write(str(message))
    sys.stdout.flush()


def _format_user_message(record: Any) -> str:
    """Format user-facing log messages, adding colored prefixes for warnings and errors.

    The record parameter is a loguru Record TypedDict, but the type is only available
    in type stubs so we use Any here.
    """
    level_name = record["level"].name
    if level_name == "WARNING":
        return f"{WARNING_COLOR}WARNING: {{message}}{RESET_COLOR}\n"
    if level_name == "ERROR":
        return f"{ERROR_COLOR}ERROR: {{message}}{RESET_COLOR}\n"
    if level_name == "DEBUG":
        return f"{DEBUG_COLOR}{{message}}{RESET_COLOR}\n"
    if level_name == "TRACE":
        return f"{TRACE_COLOR}{{message}}{RESET_COLOR}\n"
    return "{message}\n"


def get_default_log_dir() -> Path:
    """Get the default log directory (~/.ccsw/logs/)."""
    return Path.home() / CONFIG_DIR_NAME / DEFAULT_LOG_DIR_NAME


def console_level_from_verbose_and_quiet(verbose: int, quiet: bool) -> LogLevel:
    """Map the -v/-q flags onto a console log level."""
    if quiet:
        return LogLevel.NONE
    if verbose >= 2:
        return LogLevel.TRACE
    if verbose == 1:
        return LogLevel.DEBUG
    return LogLevel.INFO


def setup_logging(output_opts: OutputOptions) -> None:
    """Configure loguru for a single command invocation.

    Sets up:
    - stdout logging for user-facing messages at the console level
    - JSON file logging at DEBUG, either to log_file_path or to
      ~/.ccsw/logs/<timestamp>-<pid>.json
    - rotation of old files in the default log directory
    """
    logger.remove()

    if output_opts.console_level != LogLevel.NONE:
        logger.add(
            _dynamic_stdout_sink,
            level=str(output_opts.console_level),
            format=_format_user_message,
            colorize=False,
            diagnose=False,
        )

    if output_opts.log_file_path is not None:
        log_file = output_opts.log_file_path.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        log_dir = None
    else:
        log_dir = get_default_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        log_file = log_dir / f"{timestamp}-{os.getpid()}.json"

    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        diagnose=False,
        rotation=f"{DEFAULT_MAX_LOG_SIZE_MB} MB",
    )

    # Only prune our own directory; a custom path may sit next to unrelated .json files
    if log_dir is not None:
        rotate_old_logs(log_dir, DEFAULT_MAX_LOG_FILES)


def rotate_old_logs(log_dir: Path, max_files: int) -> None:
    """Remove the least-recently-modified log files beyond max_files.

    Another ccsw process may be rotating at the same time, so files that vanish
    or cannot be removed are skipped.
    """
    try:
        log_files = sorted(log_dir.glob("*.json"), key=lambda p: p.stat().st_mtime, reverse=True)
    except OSError:
        return

    for old_log in log_files[max_files:]:
        try:
            old_log.unlink()
        except OSError:
            continue


@contextmanager
def log_span(message: str, *args: Any, **context: Any) -> Iterator[None]:
    """Log a debug message on entry and a trace message with timing on exit.

    Keyword arguments are passed to logger.contextualize so that all log messages
    within the span include the extra context fields.
    """
    with logger.contextualize(**context):
        logger.debug(message, *args)
        start_time = time.monotonic()
        try:
            yield
        except BaseException:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [failed after {:.5f} sec]", *args, elapsed)
            raise
        else:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [done in {:.5f} sec]", *args, elapsed)

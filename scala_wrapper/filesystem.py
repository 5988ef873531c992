"""Filesystem helpers for scala-wrapper."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

MAX_FILE_SIZE_ENV_VAR = "SCALA_WRAPPER_MAX_FILE_SIZE"


def get_max_file_size(default: int | None = None) -> int | None:
    """Resolve the maximum allowed chapter file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int | None: Maximum allowed file size in bytes, or `default`.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["SCALA_WRAPPER_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path, stop_at: Path | None = None) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.
        stop_at: Directory at which the walk up the parents stops; it is not
            itself inspected.

    Returns:
        bool: True when a symlink is encountered, otherwise False.

    Examples:
        contains_symlink(Path("/tmp/book/src/link.md"), stop_at=Path("/tmp/book/src"))
    """
    for candidate in (path, *path.parents):
        if stop_at is not None and candidate == stop_at:
            break
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def resolve_within(raw_path: str, base_dir: Path) -> Path:
    """Resolve a relative path and make sure it stays under a base directory.

    Args:
        raw_path: Path relative to `base_dir`, as written in the book manifest.
        base_dir: Directory that must contain the result.

    Returns:
        Path: Absolute path below `base_dir`.

    Raises:
        ValueError: If the path is absolute, escapes `base_dir`, or traverses a
            symlink.

    Examples:
        resolve_within("chapter_1.md", Path("book/src").resolve())
    """
    path = Path(raw_path)
    if path.is_absolute():
        raise ValueError(f"{raw_path} must be relative to {base_dir}.")

    candidate = base_dir / path
    if contains_symlink(candidate, stop_at=base_dir):
        raise ValueError(f"Symlinks are not supported for security reasons: {candidate}")

    resolved = candidate.resolve()
    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{raw_path} is outside of the source directory {base_dir}."
        raise ValueError(error_message) from error

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.

    Examples:
        stat_result = collect_file_stat(Path("src/intro.md"))
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Args:
        stat_result: File stat used to determine size in bytes.
        max_size: Maximum allowed size in bytes.
        filepath: Path to the file being checked.

    Returns:
        None.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8. Line endings are kept
            as found in the file.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("src/SUMMARY.md")) as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def read_text_file(filepath: Path, max_size: int) -> str:
    """Read a UTF-8 text file after checking its type and size.

    Raises:
        IOError: If the file is not a regular file, is too large, cannot be
            read, or is not valid UTF-8.
    """
    stat_result = collect_file_stat(filepath)
    enforce_file_size(stat_result, max_size, filepath)
    try:
        with safe_read(filepath) as file:
            return file.read()
    except UnicodeDecodeError as error:
        raise IOError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error


def write_atomic(filepath: Path, content: str):
    """Write a file by replacing it with a fully written temporary file.

    Args:
        filepath: Destination path; parent directories are created.
        content: Text to write in UTF-8.

    Returns:
        None.

    Raises:
        IOError: If the destination cannot be written.

    Examples:
        write_atomic(Path("book/intro.md"), "# Intro\\n")
    """
    temp_path: Path | None = None
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)

            # Ensure the temporary file is flushed and synced before the swap
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        # Replace the destination with the temporary file (atomic operation)
        os.replace(temp_path, filepath)
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                Path(temp_path).unlink(missing_ok=True)
            except OSError:
                pass

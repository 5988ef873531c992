"""Configuration loading and management."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .constants import (
    BOOK_CONFIG_FILE,
    DEFAULT_BUILD_DIR,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_SRC_DIR,
    PREPROCESSOR_NAME,
)


@dataclass
class BookConfig:
    """Configuration of a book and of this preprocessor.

    Attributes:
        title: Title of the book, if any.
        src: Directory holding `SUMMARY.md` and the chapters, relative to the
            book root.
        build_dir: Directory receiving the processed chapters, relative to the
            book root.
        max_file_size: Maximum chapter file size in bytes that will be read.

    Examples:
        BookConfig(title="Scala by Example", build_dir="out")
    """

    title: str | None = None
    src: str = DEFAULT_SRC_DIR
    build_dir: str = DEFAULT_BUILD_DIR

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`build.build-dir` must not be empty")
    """


# TOML key path -> `BookConfig` field
_KNOWN_KEYS: dict[tuple[str, ...], str] = {
    ("book", "title"): "title",
    ("book", "src"): "src",
    ("build", "build-dir"): "build_dir",
    ("preprocessor", PREPROCESSOR_NAME, "max-file-size"): "max_file_size",
}

_MISSING = object()


def load_config(book_root: Path) -> BookConfig:
    """Load configuration from the `book.toml` of a book.

    Reads the keys this tool understands and ignores the rest, so a
    `book.toml` shared with other tooling stays valid. Returns default values
    when the file is absent.

    Args:
        book_root: Root directory of the book.

    Returns:
        BookConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the file cannot be read or decoded, or a known key has
            an invalid value.

    Examples:
        load_config(Path("docs"))
    """
    config_file = book_root / BOOK_CONFIG_FILE
    if not config_file.exists():
        return BookConfig()

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError) as error:
        raise ConfigError(f"Cannot read {config_file}: {error}") from error

    values = {}
    for key_path, field_name in _KNOWN_KEYS.items():
        value = _extract_value(data, key_path)
        if value is not _MISSING:
            values[field_name] = value

    config = replace(BookConfig(), **values)
    validate_config(config)
    return config


def _extract_value(data: object, key_path: tuple[str, ...]) -> object:
    current = data
    for key in key_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def validate_config(config: BookConfig) -> None:
    """Validate a `BookConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If directories are empty or not strings, the title is not
            a string, or the file size limit is not a positive integer.

    Examples:
        validate_config(BookConfig(src="chapters"))
    """
    if config.title is not None and not isinstance(config.title, str):
        raise ConfigError("`book.title` must be a string")

    for key, value in (("book.src", config.src), ("build.build-dir", config.build_dir)):
        if not isinstance(value, str):
            raise ConfigError(f"`{key}` must be a string")
        if not value.strip():
            raise ConfigError(f"`{key}` must not be empty")

    _ensure_positive_integer(
        f"preprocessor.{PREPROCESSOR_NAME}.max-file-size", config.max_file_size
    )


def apply_overrides(config: BookConfig, **overrides: object) -> BookConfig:
    """Apply override values to a `BookConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        BookConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `BookConfig`.

    Examples:
        updated = apply_overrides(config, max_file_size=1024)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(book_root: Path, **overrides: object) -> BookConfig:
    """Load, override, and validate configuration.

    Args:
        book_root: Root directory of the book.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        BookConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path("docs"), max_file_size=get_max_file_size(default=None))
    """
    config = load_config(book_root)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive_integer(key: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"`{key}` must be an integer")
    if value <= 0:
        raise ConfigError(f"`{key}` must be a positive integer")

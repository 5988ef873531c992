from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from scala_wrapper.config import (
    BookConfig,
    ConfigError,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_book_toml(base: Path, body: str) -> Path:
    path = base / "book.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_defaults_when_book_toml_missing(tmp_path: Path):
    assert load_config(tmp_path) == BookConfig()


def test_loads_known_keys(tmp_path: Path):
    _write_book_toml(
        tmp_path,
        """
        [book]
        title = "Scala by Example"
        authors = ["Someone"]
        src = "chapters"

        [build]
        build-dir = "out"
        create-missing = false

        [preprocessor.scala-wrapper-preprocessor]
        max-file-size = 2048

        [output.html]
        """,
    )

    assert load_config(tmp_path) == BookConfig(
        title="Scala by Example", src="chapters", build_dir="out", max_file_size=2048
    )


def test_invalid_toml_raises(tmp_path: Path):
    _write_book_toml(tmp_path, "[book\n")

    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("[book]\ntitle = 3\n", "`book.title` must be a string"),
        ("[book]\nsrc = \"\"\n", "`book.src` must not be empty"),
        ("[build]\nbuild-dir = 1\n", "`build.build-dir` must be a string"),
        ("[preprocessor.scala-wrapper-preprocessor]\nmax-file-size = 0\n", "positive integer"),
        ("[preprocessor.scala-wrapper-preprocessor]\nmax-file-size = true\n", "must be an integer"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str, message: str):
    _write_book_toml(tmp_path, body)

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_validate_config_accepts_defaults():
    validate_config(BookConfig())


def test_apply_overrides_ignores_none():
    config = BookConfig()

    assert apply_overrides(config, max_file_size=None) is config
    assert apply_overrides(config, max_file_size=5).max_file_size == 5


def test_build_config_applies_and_validates_overrides(tmp_path: Path):
    _write_book_toml(tmp_path, "[build]\nbuild-dir = \"out\"\n")

    config = build_config(tmp_path, max_file_size=10)
    assert config.build_dir == "out"
    assert config.max_file_size == 10

    with pytest.raises(ConfigError):
        build_config(tmp_path, max_file_size=-1)

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def make_book(tmp_path: Path):
    """Writes a book layout under `tmp_path` and returns its root."""

    def _make_book(summary: str, chapters: dict[str, str], book_toml: str | None = None) -> Path:
        root = tmp_path / "book-root"
        src = root / "src"
        src.mkdir(parents=True)
        (src / "SUMMARY.md").write_text(textwrap.dedent(summary).lstrip(), encoding="utf-8")
        for relative_path, content in chapters.items():
            target = src / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        if book_toml is not None:
            (root / "book.toml").write_text(textwrap.dedent(book_toml).lstrip(), encoding="utf-8")
        return root

    return _make_book

"""The `object wrapper` stripping preprocessor."""

from __future__ import annotations

from collections.abc import Callable

import click

from .book import Book, Chapter, PreprocessorContext
from .constants import PREPROCESSOR_NAME
from .exceptions import ChapterError, SerializationError
from .parser import parse_events
from .serializer import render_events
from .wrapper import strip_wrappers


def _echo_diagnostic(message: str) -> None:
    click.echo(message, err=True)


class ScalaWrapper:
    """Preprocessor removing `object wrapper` scaffolds from Scala examples.

    Args:
        diagnostic: Callback receiving progress messages; defaults to stderr.

    Examples:
        ScalaWrapper().run(ctx, book)
    """

    name = PREPROCESSOR_NAME

    def __init__(self, diagnostic: Callable[[str], None] | None = None):
        self._diagnostic = diagnostic or _echo_diagnostic

    def remove_wrappers(self, chapter: Chapter) -> str:
        """Return the content of a chapter with wrapper scaffolds removed.

        Raises:
            ChapterError: If the filtered events cannot be rendered back to
                Markdown.
        """
        events = strip_wrappers(parse_events(chapter.content))
        try:
            return render_events(events)
        except SerializationError as error:
            raise ChapterError(self.name, chapter.name, str(error)) from error

    def run(self, ctx: PreprocessorContext, book: Book) -> Book:
        """Rewrite every chapter of `book` in place.

        Stops at the first chapter that fails; chapters rewritten before it
        keep their new content.

        Raises:
            ChapterError: If a chapter cannot be rendered back to Markdown.
        """
        self._diagnostic(f"Running '{self.name}' preprocessor")
        for chapter in book.iter_chapters():
            self._diagnostic(f"{self.name}: processing chapter '{chapter.name}'")
            chapter.content = self.remove_wrappers(chapter)
        return book

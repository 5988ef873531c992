"""Package-specific exception types."""

from __future__ import annotations


class PreprocessorError(Exception):
    """Base class for errors raised while preprocessing a book."""


class SerializationError(PreprocessorError):
    """Raised when an event stream cannot be rendered back to markdown."""


class ChapterError(PreprocessorError):
    """Raised when a preprocessor cannot render a chapter back to Markdown.

    Args:
        preprocessor: Name of the preprocessor that failed.
        chapter: Name of the chapter being processed.
        reason: Description of the underlying failure.
    """

    def __init__(self, preprocessor: str, chapter: str, reason: str):
        self.preprocessor = preprocessor
        self.chapter = chapter
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Markdown serialization failed within {self.preprocessor} "
            f"(chapter '{self.chapter}'): {self.reason}"
        )


class BookError(Exception):
    """Raised when a book cannot be loaded or its output cannot be written."""

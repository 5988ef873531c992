"""
scala-wrapper: strips `object wrapper` scaffolds from Scala code in books.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    scala-wrapper docs/

Library Usage:
    from scala_wrapper import parse_events, render_events, strip_wrappers

    content = Path("src/chapter_1.md").read_text()
    stripped = render_events(strip_wrappers(parse_events(content)))
"""

from .book import Book, Chapter, MDBook, PreprocessorContext, parse_summary
from .exceptions import BookError, ChapterError, PreprocessorError, SerializationError
from .models import BlockEnd, BlockStart, CodeBlockKind, Other, Text, TransformState, WrapperState
from .parser import parse_events
from .preprocessor import ScalaWrapper
from .serializer import render_events
from .wrapper import is_wrapper_end, is_wrapper_start, strip_wrappers, transition

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_events",
    "strip_wrappers",
    "render_events",
    "transition",
    "is_wrapper_start",
    "is_wrapper_end",
    "ScalaWrapper",
    # Book host
    "Book",
    "Chapter",
    "MDBook",
    "PreprocessorContext",
    "parse_summary",
    # Data models
    "BlockStart",
    "BlockEnd",
    "CodeBlockKind",
    "Other",
    "Text",
    "TransformState",
    "WrapperState",
    # Exceptions
    "BookError",
    "ChapterError",
    "PreprocessorError",
    "SerializationError",
    # Version
    "__version__",
]

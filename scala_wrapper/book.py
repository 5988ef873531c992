"""Book model, manifest loading, and the build driver."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Union

from .config import BookConfig, ConfigError, build_config
from .constants import SUMMARY_FILE
from .exceptions import BookError
from .filesystem import get_max_file_size, read_text_file, resolve_within, write_atomic

SUMMARY_LINK_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)(?:(?P<bullet>[-*])[ \t]+)?\[(?P<title>[^\]]*)\]\((?P<path>[^)]*)\)\s*$"
)
SUMMARY_PART_PATTERN = re.compile(r"^#{1,6}[ \t]+(?P<title>.+?)\s*#*\s*$")
SUMMARY_SEPARATOR_PATTERN = re.compile(r"^[ \t]*-{3,}[ \t]*$")


@dataclass
class Chapter:
    """A chapter of a book.

    Attributes:
        name: Chapter title, used in diagnostics.
        content: Markdown source of the chapter.
        path: Location relative to the source directory; None for drafts.
        number: Section number for numbered chapters, e.g. ``(2, 1)``.
        parent_names: Titles of the enclosing chapters, outermost first.
        sub_items: Nested chapters.
    """

    name: str
    content: str = ""
    path: Path | None = None
    number: tuple[int, ...] | None = None
    parent_names: list[str] = field(default_factory=list)
    sub_items: list[BookItem] = field(default_factory=list)

    @property
    def is_draft(self) -> bool:
        return self.path is None


@dataclass(frozen=True)
class Separator:
    pass


@dataclass(frozen=True)
class PartTitle:
    title: str


BookItem = Union[Chapter, Separator, PartTitle]


@dataclass
class Book:
    """Ordered collection of book items.

    Attributes:
        items: Top-level items in reading order.
    """

    items: list[BookItem] = field(default_factory=list)

    def iter_chapters(self) -> Iterator[Chapter]:
        """Yield every chapter depth-first, parents before their children."""
        stack = list(reversed(self.items))
        while stack:
            item = stack.pop()
            if isinstance(item, Chapter):
                yield item
                stack.extend(reversed(item.sub_items))


@dataclass
class PreprocessorContext:
    """Information handed to preprocessors alongside the book.

    Attributes:
        root: Root directory of the book.
        config: Loaded book configuration.
        renderer: Name of the renderer the book is being built for.
    """

    root: Path
    config: BookConfig
    renderer: str = "markdown"


class Preprocessor(Protocol):
    name: str

    def run(self, ctx: PreprocessorContext, book: Book) -> Book: ...


def _numbered_level(indent: str, indent_widths: list[int]) -> int:
    """Map the indentation of a numbered entry to its nesting depth."""
    width = len(indent.expandtabs(4))
    while indent_widths and indent_widths[-1] > width:
        indent_widths.pop()
    if not indent_widths or indent_widths[-1] < width:
        indent_widths.append(width)
    return len(indent_widths) - 1


def parse_summary(summary: str) -> list[BookItem]:
    """Parse the structure of a `SUMMARY.md` manifest.

    Recognizes prefix and suffix chapters (``[Title](path.md)``), numbered
    chapters nested by indentation (``- [Title](path.md)``), draft chapters
    with an empty link target, part titles, and ``---`` separators. A leading
    ``# Summary`` title and any other line are ignored. Chapter content is not
    loaded.

    Args:
        summary: Text of the manifest.

    Returns:
        list[BookItem]: Top-level items with nested chapters in `sub_items`.

    Examples:
        parse_summary("# Summary\\n\\n- [Intro](intro.md)\\n")
    """
    items: list[BookItem] = []
    # Chapters currently open at each nesting depth of the numbered list
    open_chapters: list[Chapter] = []
    indent_widths: list[int] = []
    top_level_count = 0
    seen_title = False

    for line in summary.splitlines():
        if not line.strip():
            continue

        part_match = SUMMARY_PART_PATTERN.match(line)
        if part_match:
            if not seen_title:
                # The manifest's own title
                seen_title = True
                continue
            items.append(PartTitle(title=part_match.group("title")))
            open_chapters.clear()
            indent_widths.clear()
            continue
        seen_title = True

        if SUMMARY_SEPARATOR_PATTERN.match(line):
            items.append(Separator())
            open_chapters.clear()
            indent_widths.clear()
            continue

        link_match = SUMMARY_LINK_PATTERN.match(line)
        if not link_match:
            continue

        raw_path = link_match.group("path").strip()
        chapter = Chapter(
            name=link_match.group("title").strip(),
            path=Path(raw_path) if raw_path else None,
        )

        if link_match.group("bullet") is None:
            items.append(chapter)
            open_chapters.clear()
            indent_widths.clear()
            continue

        level = _numbered_level(link_match.group("indent"), indent_widths)
        del open_chapters[level:]

        if open_chapters:
            parent = open_chapters[-1]
            siblings = [item for item in parent.sub_items if isinstance(item, Chapter)]
            chapter.number = (*parent.number, len(siblings) + 1)
            chapter.parent_names = [*parent.parent_names, parent.name]
            parent.sub_items.append(chapter)
        else:
            top_level_count += 1
            chapter.number = (top_level_count,)
            items.append(chapter)
        open_chapters.append(chapter)

    return items


def load_book(src_dir: Path, max_file_size: int) -> Book:
    """Load the manifest and every chapter of a book.

    Args:
        src_dir: Directory holding `SUMMARY.md` and the chapter files.
        max_file_size: Maximum size in bytes of any file that is read.

    Returns:
        Book: Book whose chapters carry their Markdown content. Draft chapters
            have empty content.

    Raises:
        BookError: If the manifest or a chapter cannot be read, or a chapter
            path leaves the source directory.
    """
    src_dir = src_dir.resolve()
    try:
        summary = read_text_file(src_dir / SUMMARY_FILE, max_file_size)
    except IOError as error:
        raise BookError(f"Couldn't load {SUMMARY_FILE}: {error}") from error

    book = Book(items=parse_summary(summary))
    for chapter in book.iter_chapters():
        if chapter.is_draft:
            continue
        try:
            chapter_path = resolve_within(str(chapter.path), src_dir)
            chapter.content = read_text_file(chapter_path, max_file_size)
        except (ValueError, IOError) as error:
            raise BookError(f"Couldn't load chapter '{chapter.name}': {error}") from error

    return book


class MDBook:
    """A loaded book ready to be preprocessed and written out.

    Examples:
        book = MDBook.load(Path("docs"))
        book.with_preprocessor(ScalaWrapper())
        book.build()
    """

    def __init__(self, root: Path, config: BookConfig, book: Book):
        self.root = root
        self.config = config
        self.book = book
        self.preprocessors: list[Preprocessor] = []

    @classmethod
    def load(cls, root: Path) -> MDBook:
        """Load configuration, manifest, and chapters of the book at `root`.

        Raises:
            BookError: If the root is not a directory or the book cannot be read.
            ConfigError: If `book.toml` or the environment override is invalid.
        """
        root = Path(root).expanduser()
        if not root.is_dir():
            raise BookError(f"{root} is not a book directory.")
        root = root.resolve()

        try:
            max_file_size = get_max_file_size(default=None)
        except ValueError as error:
            raise ConfigError(str(error)) from error
        config = build_config(root, max_file_size=max_file_size)

        book = load_book(root / config.src, config.max_file_size)
        return cls(root, config, book)

    def with_preprocessor(self, preprocessor: Preprocessor) -> MDBook:
        self.preprocessors.append(preprocessor)
        return self

    @property
    def build_dir(self) -> Path:
        return self.root / self.config.build_dir

    def build(self, renderer: str = "markdown", warn: Callable[[str], None] | None = None):
        """Run every registered preprocessor, then write the chapters out.

        Each non-draft chapter is written to the build directory at its path
        relative to the source directory.

        Args:
            renderer: Name of the renderer passed to preprocessors.
            warn: Optional callback for non-fatal messages.

        Returns:
            None.

        Raises:
            PreprocessorError: If a preprocessor fails; nothing is written.
            BookError: If a chapter cannot be written.
        """
        ctx = PreprocessorContext(root=self.root, config=self.config, renderer=renderer)
        book = self.book
        for preprocessor in self.preprocessors:
            book = preprocessor.run(ctx, book)
        self.book = book

        build_dir = self.build_dir.resolve()
        written = 0
        for chapter in book.iter_chapters():
            if chapter.is_draft:
                continue
            try:
                destination = resolve_within(str(chapter.path), build_dir)
                write_atomic(destination, chapter.content)
            except (ValueError, IOError) as error:
                raise BookError(f"Couldn't write chapter '{chapter.name}': {error}") from error
            written += 1

        if written == 0 and warn is not None:
            warn(f"Warning: {self.root} has no chapters to write")

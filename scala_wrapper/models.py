"""Data models for scala-wrapper."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class ParserState(Enum):
    """Parser states used while scanning Markdown content.

    Attributes:
        NORMAL: Default state for regular text.
        IN_FENCED_CODE: Inside a fenced code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()


class ContainerKind(Enum):
    """Markdown blocks that may hold a fenced code block.

    Attributes:
        BLOCK_QUOTE: A `>` block quote.
        LIST_ITEM: A bullet or ordered list item.
    """

    BLOCK_QUOTE = auto()
    LIST_ITEM = auto()


@dataclass(frozen=True)
class Container:
    """An open block quote or list item.

    Attributes:
        kind: Type of the container.
        content_columns: Indentation a line needs to stay inside a list item.
    """

    kind: ContainerKind
    content_columns: int = 0


@dataclass(frozen=True)
class CodeBlockKind:
    """Describe a fenced code block.

    Attributes:
        language: Fence info string without surrounding whitespace, or None
            when it is empty.
        opening: Raw opening fence line, including its line ending.
    """

    language: str | None
    opening: str


@dataclass(frozen=True)
class BlockStart:
    kind: CodeBlockKind


@dataclass(frozen=True)
class BlockEnd:
    """End of a fenced code block.

    Attributes:
        kind: Block being closed.
        closing: Raw closing fence line; empty when the fence was never closed.
    """

    kind: CodeBlockKind
    closing: str = ""


@dataclass(frozen=True)
class Text:
    """A run of code block text.

    Attributes:
        run: Text as seen by consumers, with container markers and fence
            indentation removed.
        prefix: Container markers and fence indentation removed from the
            source line.
    """

    run: str
    prefix: str = ""


@dataclass(frozen=True)
class Other:
    """Markdown source outside fenced code blocks, kept verbatim."""

    passthrough: str


Event = Union[BlockStart, BlockEnd, Text, Other]


@dataclass
class ParserContext:
    """Encapsulate parser state while walking Markdown text.

    Attributes:
        state: Current parser state.
        fence_char: Fence character that opened a fenced code block, if any.
        fence_length: Number of fence characters that opened the block.
        fence_indent_columns: Indentation width preceding the opening fence.
        block: Kind of the open fenced block, if any.
        containers: Block quotes and list items enclosing the current line,
            outermost first.
    """

    state: ParserState = ParserState.NORMAL
    fence_char: str | None = None
    fence_length: int = 0
    fence_indent_columns: int = 0
    block: CodeBlockKind | None = None
    containers: list[Container] = field(default_factory=list)


class WrapperState(Enum):
    """States of the wrapper-stripping transform.

    Attributes:
        OUTSIDE: Not inside a target-language code block.
        FIRST_LINE: Inside a target block, first line not yet classified.
        INSIDE_WRAPPED: First line opened a wrapper; closing lines are dropped.
        INSIDE_UNWRAPPED: First line was ordinary code; everything passes.
    """

    OUTSIDE = auto()
    FIRST_LINE = auto()
    INSIDE_WRAPPED = auto()
    INSIDE_UNWRAPPED = auto()


@dataclass(frozen=True)
class TransformState:
    """Snapshot of the wrapper-stripping state machine.

    Attributes:
        state: Current machine state.
        pending: Text runs held back until the first line is complete.
        at_line_start: Whether the next run begins a physical line.
        suppressing_line: Whether the rest of a dropped closing line is being
            discarded.
    """

    state: WrapperState = WrapperState.OUTSIDE
    pending: tuple[Text, ...] = field(default=())
    at_line_start: bool = True
    suppressing_line: bool = False

"""Markdown parsing into a stream of code block events."""

from __future__ import annotations

from collections.abc import Iterator

from .constants import (
    BLOCK_QUOTE_PATTERN,
    CLOSING_FENCE_MAX_INDENT,
    CODE_FENCE_PATTERN,
    LINE_PATTERN,
    LIST_ITEM_MAX_SPACING,
    LIST_ITEM_PATTERN,
)
from .models import (
    BlockEnd,
    BlockStart,
    CodeBlockKind,
    Container,
    ContainerKind,
    Event,
    Other,
    ParserContext,
    ParserState,
    Text,
)


def _leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns to match Markdown
    indentation rules.

    Args:
        line: Line whose leading whitespace should be measured.

    Returns:
        int: Number of columns occupied by the leading whitespace.

    Examples:
        _leading_whitespace_columns("    text")  # 4
        _leading_whitespace_columns("\ttext")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def _split_lines(content: str) -> list[str]:
    """Split text into lines ending in LF, CRLF, or a lone CR.

    Other characters that `str.splitlines` treats as line boundaries, such as
    form feeds or U+2028, stay inside their line.

    Examples:
        _split_lines("a\\rb\\r\\nc")  # ["a\\r", "b\\r\\n", "c"]
    """
    return LINE_PATTERN.findall(content)


def _info_language(info: str) -> str | None:
    """Return the language tag of a fence info string.

    The whole info string is the tag, so ```` ```scala mdoc ```` is not a
    `scala` block.

    Examples:
        _info_language(" scala ")  # "scala"
        _info_language("")  # None
    """
    return info.strip() or None


def _consume_indent(text: str, columns: int) -> int | None:
    """Count the characters of `text` that make up `columns` of indentation.

    Blank lines count as indented enough.

    Returns:
        int | None: Number of leading characters to remove, or None when the
            line is indented less than `columns`.

    Examples:
        _consume_indent("   x", 2)  # 2
        _consume_indent(" x", 2)  # None
    """
    consumed = 0
    width = 0
    while width < columns and consumed < len(text) and text[consumed] in " \t":
        width += 1 if text[consumed] == " " else 4 - (width % 4)
        consumed += 1
    if width >= columns or not text[consumed:].strip(" \t\r\n"):
        return consumed
    return None


def _match_containers(containers: list[Container], line: str) -> tuple[int, int]:
    """Match a line against the open block quotes and list items.

    Args:
        containers: Open containers, outermost first.
        line: Line being scanned.

    Returns:
        tuple[int, int]: How many containers the line continues, and the
            length of the prefix their markers and indentation occupy.
    """
    position = 0
    for depth, container in enumerate(containers):
        rest = line[position:]
        if container.kind is ContainerKind.BLOCK_QUOTE:
            marker = BLOCK_QUOTE_PATTERN.match(rest)
            consumed = marker.end() if marker else None
        else:
            consumed = _consume_indent(rest, container.content_columns)
        if consumed is None:
            return depth, position
        position += consumed
    return len(containers), position


def _open_container(text: str) -> tuple[Container, int] | None:
    """Detect a block quote marker or list item marker at the start of text.

    Returns:
        tuple[Container, int] | None: The new container and the number of
            characters its marker occupies, or None.

    Examples:
        _open_container("> quote")  # (Container(BLOCK_QUOTE), 2)
        _open_container("10. item")  # (Container(LIST_ITEM, 4), 4)
    """
    quote = BLOCK_QUOTE_PATTERN.match(text)
    if quote:
        return Container(ContainerKind.BLOCK_QUOTE), quote.end()

    item = LIST_ITEM_PATTERN.match(text)
    if not item:
        return None

    spacing = item.group("spacing")
    empty_item = not text[item.end():].strip("\r\n")
    if not spacing and not empty_item:
        return None

    marker_width = len(item.group("marker"))
    if empty_item or len(spacing) > LIST_ITEM_MAX_SPACING:
        # Content starts one column after the marker
        consumed = marker_width + min(len(spacing), 1)
        return Container(ContainerKind.LIST_ITEM, marker_width + 1), consumed
    return Container(ContainerKind.LIST_ITEM, marker_width + len(spacing)), item.end()


def _scan_containers(ctx: ParserContext, line: str) -> int:
    """Update the open containers for a line outside fenced code.

    Returns:
        int: Length of the container prefix of the line.
    """
    depth, position = _match_containers(ctx.containers, line)
    del ctx.containers[depth:]
    while True:
        opened = _open_container(line[position:])
        if opened is None:
            return position
        container, consumed = opened
        ctx.containers.append(container)
        position += consumed


def _try_open_fence(ctx: ParserContext, line: str, start: int = 0) -> bool:
    """Detect the start of a fenced code block.

    Args:
        ctx: Parser context to update when a fence opens.
        line: Current line being scanned.
        start: Offset of the line content after any container prefix.

    Returns:
        bool: True when the line begins a fence and the context is updated.

    Examples:
        _try_open_fence(ParserContext(), "```scala\n")  # True
        _try_open_fence(ParserContext(), "> ```scala\n", start=2)  # True
    """
    if ctx.state is not ParserState.NORMAL:
        return False

    fence_match = CODE_FENCE_PATTERN.match(line[start:].rstrip("\r\n"))
    if not fence_match:
        return False

    indent_columns = _leading_whitespace_columns(fence_match.group("indent"))
    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    fence_sequence = fence_match.group("fence")
    info = fence_match.group("info")
    # Backtick fences may not carry backticks in their info string
    if fence_sequence[0] == "`" and "`" in info:
        return False

    ctx.state = ParserState.IN_FENCED_CODE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    ctx.fence_indent_columns = indent_columns
    ctx.block = CodeBlockKind(language=_info_language(info), opening=line)
    return True


def _reset_fence(ctx: ParserContext):
    ctx.state = ParserState.NORMAL
    ctx.fence_char = None
    ctx.fence_length = 0
    ctx.fence_indent_columns = 0
    ctx.block = None


def _try_close_fence(ctx: ParserContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    Args:
        ctx: Parser context describing the active fence.
        line: Current line being scanned, without its container prefix.

    Returns:
        bool: True when the line closes the fence; otherwise False.

    Examples:
        ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=3)
        _try_close_fence(ctx, "```\n")
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or ctx.fence_char is None:
        return False

    indent_columns = _leading_whitespace_columns(line)
    stripped_line = line.lstrip(" \t")
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    if stripped_line[fence_run_length:].strip(" \t\r\n"):
        return False

    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    _reset_fence(ctx)
    return True


def _code_text(line: str, indent_columns: int, prefix: str = "") -> Text:
    """Build the text event for one line of a fenced block body.

    Removes up to `indent_columns` leading spaces, the indentation of the
    opening fence, and keeps them after `prefix` as the event prefix.

    Examples:
        _code_text("    val x = 1\n", 2)  # Text(run="  val x = 1\n", prefix="  ")
        _code_text("val x = 1\n", 0, "> ")  # Text(run="val x = 1\n", prefix="> ")
    """
    removed = 0
    while removed < indent_columns and removed < len(line) and line[removed] == " ":
        removed += 1
    return Text(run=line[removed:], prefix=prefix + line[:removed])


def parse_events(content: str) -> Iterator[Event]:
    """Turn Markdown content into a stream of events.

    Fenced code blocks become `BlockStart`, one `Text` per body line, and
    `BlockEnd`. Fences nested in block quotes or list items are found too;
    the container markers of each body line go into the `Text` prefix.
    Consecutive lines outside fenced blocks are grouped into a single `Other`
    event. Joining the raw text carried by the events reproduces `content`
    exactly.

    Args:
        content: The markdown content to parse.

    Yields:
        Event: Parsed events in document order. A fence left open at the end
            of the content, or by the end of its block quote or list item, is
            closed by a `BlockEnd` with an empty closing line.

    Examples:
        list(parse_events("```scala\\nval x = 1\\n```\\n"))
    """
    ctx = ParserContext()
    passthrough: list[str] = []

    for line in _split_lines(content):
        # Tracks fenced code blocks (``` or ~~~, including info strings)
        if ctx.state is ParserState.IN_FENCED_CODE:
            depth, position = _match_containers(ctx.containers, line)
            if depth == len(ctx.containers):
                block = ctx.block
                if _try_close_fence(ctx, line[position:]):
                    yield BlockEnd(kind=block, closing=line)
                else:
                    yield _code_text(line[position:], ctx.fence_indent_columns, line[:position])
                continue
            # The enclosing block quote or list item ended
            yield BlockEnd(kind=ctx.block)
            _reset_fence(ctx)

        position = _scan_containers(ctx, line)
        if _try_open_fence(ctx, line, position):
            if passthrough:
                yield Other(passthrough="".join(passthrough))
                passthrough = []
            yield BlockStart(kind=ctx.block)
            continue

        passthrough.append(line)

    if passthrough:
        yield Other(passthrough="".join(passthrough))

    if ctx.state is ParserState.IN_FENCED_CODE:
        yield BlockEnd(kind=ctx.block)

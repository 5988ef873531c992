"""Rendering of event streams back to Markdown text."""

from __future__ import annotations

from collections.abc import Iterable

from .exceptions import SerializationError
from .models import BlockEnd, BlockStart, CodeBlockKind, Event, Other, Text


def render_events(events: Iterable[Event]) -> str:
    """Render an event stream back to Markdown.

    Every event contributes its raw source text, so content that was not
    dropped from the stream comes back unchanged.

    Args:
        events: Events in document order.

    Returns:
        str: The rendered Markdown.

    Raises:
        SerializationError: If blocks are nested, closed without being opened,
            closed by the wrong end event, left open, or an event type is
            unknown.

    Examples:
        render_events(parse_events(content)) == content  # True
    """
    parts: list[str] = []
    open_block: CodeBlockKind | None = None

    for position, event in enumerate(events):
        if isinstance(event, Other):
            parts.append(event.passthrough)
        elif isinstance(event, Text):
            parts.append(event.prefix + event.run)
        elif isinstance(event, BlockStart):
            if open_block is not None:
                raise SerializationError(
                    f"event {position}: code block opened while another block is still open"
                )
            open_block = event.kind
            parts.append(event.kind.opening)
        elif isinstance(event, BlockEnd):
            if open_block is None:
                raise SerializationError(f"event {position}: code block end without a start")
            if event.kind != open_block:
                raise SerializationError(
                    f"event {position}: code block end does not match the open block"
                )
            open_block = None
            parts.append(event.closing)
        else:
            raise SerializationError(f"event {position}: unsupported event {event!r}")

    if open_block is not None:
        raise SerializationError("code block was never closed")

    return "".join(parts)

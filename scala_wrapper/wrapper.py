"""Removal of `object wrapper` scaffolds from Scala code blocks.

A Scala example that has to compile on its own is often nested in a scaffold:

    object wrapper {
      val x = 1
    }

Only the inner lines matter to a reader. The transform below drops the line
opening the scaffold when it is the first line of a `scala` code block, and
every line of that block starting with a closing brace. Anything it cannot
classify is passed through.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace

from .constants import (
    LINE_BREAK_PATTERN,
    TARGET_LANGUAGE,
    WRAPPER_END_PATTERN,
    WRAPPER_START_PATTERN,
)
from .models import BlockEnd, BlockStart, Event, Text, TransformState, WrapperState

_OUTSIDE = TransformState()


def is_wrapper_start(text: str) -> bool:
    """Check whether text declares the wrapper object.

    Examples:
        is_wrapper_start("object wrapper {\\n")  # True
        is_wrapper_start("  private object wrapper extends App {")  # True
        is_wrapper_start("object Wrapper {")  # False
    """
    return WRAPPER_START_PATTERN.search(text) is not None


def is_wrapper_end(text: str) -> bool:
    """Check whether text starts with the closing brace of a scaffold.

    Only the first character counts; indented braces are left alone.

    Examples:
        is_wrapper_end("}\\n")  # True
        is_wrapper_end("  }")  # False
    """
    return WRAPPER_END_PATTERN.match(text) is not None


def _line_break_end(run: str) -> int:
    """Return the offset just past the first line ending of `run`, or -1."""
    line_break = LINE_BREAK_PATTERN.search(run)
    return line_break.end() if line_break else -1


def _ends_line(run: str) -> bool:
    return run.endswith(("\n", "\r"))


def _resolve_first_line(current: TransformState) -> tuple[Event, ...]:
    """Release or drop runs held back while reading a first line."""
    if not current.pending:
        return ()
    first_line = "".join(text.run for text in current.pending)
    if is_wrapper_start(first_line):
        return ()
    return current.pending


def _first_line_text(
    current: TransformState, event: Text
) -> tuple[TransformState, tuple[Event, ...]]:
    pending = current.pending + (event,)
    if _line_break_end(event.run) < 0:
        return replace(current, pending=pending), ()

    first_line = "".join(text.run for text in pending)
    at_line_start = _ends_line(event.run)
    if is_wrapper_start(first_line):
        return TransformState(state=WrapperState.INSIDE_WRAPPED, at_line_start=at_line_start), ()
    return (
        TransformState(state=WrapperState.INSIDE_UNWRAPPED, at_line_start=at_line_start),
        pending,
    )


def _wrapped_text(
    current: TransformState, event: Text
) -> tuple[TransformState, tuple[Event, ...]]:
    run = event.run
    line_ends = _ends_line(run)
    line_break_end = _line_break_end(run)

    if current.suppressing_line:
        # Rest of a dropped closing line
        if line_break_end in (-1, len(run)):
            return replace(current, at_line_start=line_ends, suppressing_line=not line_ends), ()
        return replace(current, at_line_start=line_ends, suppressing_line=False), (event,)

    if current.at_line_start and is_wrapper_end(run):
        return (
            replace(current, at_line_start=line_ends, suppressing_line=line_break_end < 0),
            (),
        )

    return replace(current, at_line_start=line_ends), (event,)


def transition(current: TransformState, event: Event) -> tuple[TransformState, tuple[Event, ...]]:
    """Advance the wrapper-stripping state machine by one event.

    Args:
        current: State before the event.
        event: Incoming event.

    Returns:
        tuple[TransformState, tuple[Event, ...]]: The next state and the events
            to emit, in order. Runs of an incomplete first line are held back
            and emitted (or dropped) once the line is complete.

    Examples:
        state, emitted = transition(TransformState(), BlockStart(kind))
    """
    if isinstance(event, BlockStart):
        released = _resolve_first_line(current)
        if event.kind.language == TARGET_LANGUAGE:
            return TransformState(state=WrapperState.FIRST_LINE), (*released, event)
        return replace(current, pending=()), (*released, event)

    if isinstance(event, BlockEnd):
        return _OUTSIDE, (*_resolve_first_line(current), event)

    if not isinstance(event, Text):
        return current, (event,)

    if current.state is WrapperState.FIRST_LINE:
        return _first_line_text(current, event)
    if current.state is WrapperState.INSIDE_WRAPPED:
        return _wrapped_text(current, event)
    return current, (event,)


def strip_wrappers(events: Iterable[Event]) -> Iterator[Event]:
    """Drop wrapper scaffold lines from Scala code blocks in an event stream.

    Args:
        events: Events produced by the parser for one chapter.

    Yields:
        Event: The filtered events.

    Examples:
        render_events(strip_wrappers(parse_events(content)))
    """
    state = TransformState()
    for event in events:
        state, emitted = transition(state, event)
        yield from emitted
    yield from _resolve_first_line(state)

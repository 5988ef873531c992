from scala_wrapper.models import (
    CodeBlockKind,
    ParserContext,
    ParserState,
    Text,
    TransformState,
    WrapperState,
)


def test_parser_state_members():
    assert list(ParserState) == [ParserState.NORMAL, ParserState.IN_FENCED_CODE]


def test_parser_context_defaults():
    ctx = ParserContext()

    assert ctx.state is ParserState.NORMAL
    assert ctx.fence_char is None
    assert ctx.fence_length == 0
    assert ctx.fence_indent_columns == 0
    assert ctx.block is None
    assert ctx.containers == []


def test_wrapper_state_members():
    assert list(WrapperState) == [
        WrapperState.OUTSIDE,
        WrapperState.FIRST_LINE,
        WrapperState.INSIDE_WRAPPED,
        WrapperState.INSIDE_UNWRAPPED,
    ]


def test_transform_state_defaults():
    state = TransformState()

    assert state.state is WrapperState.OUTSIDE
    assert state.pending == ()
    assert state.at_line_start is True
    assert state.suppressing_line is False


def test_events_compare_by_value():
    assert Text("x\n") == Text("x\n")
    assert Text("x\n", prefix="  ") != Text("x\n")
    assert CodeBlockKind("scala", "```scala\n") == CodeBlockKind("scala", "```scala\n")

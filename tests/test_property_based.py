from __future__ import annotations

import string

from hypothesis import assume, given
from hypothesis import strategies as st

from scala_wrapper.models import Text
from scala_wrapper.parser import parse_events
from scala_wrapper.serializer import render_events
from scala_wrapper.wrapper import is_wrapper_end, is_wrapper_start, strip_wrappers

# Line content that can never form or close a fence
safe_text = st.text(
    alphabet=string.ascii_letters + string.digits + " {}()=.,;:/*#-_>\"'\t",
    max_size=40,
)
body_line = safe_text.map(lambda text: f"  {text}\n")


def _strip(content: str) -> str:
    return render_events(strip_wrappers(parse_events(content)))


@given(st.text())
def test_is_wrapper_start_needs_the_declaration(text: str):
    assume("object wrapper" not in text)
    assert is_wrapper_start(text) is False


@given(st.text())
def test_is_wrapper_end_true_for_leading_brace(rest: str):
    assert is_wrapper_end("}" + rest) is True


@given(st.text(min_size=1))
def test_is_wrapper_end_false_without_leading_brace(text: str):
    assume(not text.startswith("}"))
    assert is_wrapper_end(text) is False


@given(st.text())
def test_parse_then_render_reproduces_any_content(content: str):
    assert render_events(parse_events(content)) == content


@given(
    st.lists(
        st.one_of(
            safe_text.map(lambda text: f"{text}\n"),
            st.sampled_from(
                ["```java\n", "```\n", "~~~rust\n", "~~~\n", "object wrapper {\n", "}\n"]
            ),
        ),
        max_size=30,
    )
)
def test_content_without_scala_blocks_passes_through(lines: list[str]):
    content = "".join(lines)
    assert _strip(content) == content


@given(st.lists(body_line, max_size=10), safe_text)
def test_unwrapped_scala_blocks_keep_every_line(body: list[str], first: str):
    assume(not is_wrapper_start(first))
    content = "```scala\n" + f"{first}\n" + "".join(body) + "}\n```\n"
    assert _strip(content) == content


@given(st.lists(body_line, max_size=10), st.sampled_from(["", "private ", "  "]))
def test_wrapped_scala_blocks_keep_only_the_body(body: list[str], modifier: str):
    opening = f"{modifier}object wrapper {{\n"
    content = "Before\n\n```scala\n" + opening + "".join(body) + "}\n```\nAfter\n"
    expected = "Before\n\n```scala\n" + "".join(body) + "```\nAfter\n"
    assert _strip(content) == expected


@given(st.lists(st.text(min_size=1, max_size=8), min_size=1, max_size=12))
def test_fragmented_wrapper_lines_are_stripped(fragments: list[str]):
    assume(all("\n" not in fragment and "\r" not in fragment for fragment in fragments))
    body = "".join(fragments)
    assume(not body.startswith("}"))
    events = [Text("object "), Text("wrapper {"), Text("\n")]
    events += [Text(fragment) for fragment in fragments] + [Text("\n"), Text("}"), Text("\n")]
    parsed = list(parse_events("```scala\n```\n"))
    stream = [parsed[0], *events, parsed[-1]]

    rendered = render_events(strip_wrappers(stream))
    assert rendered == f"```scala\n{body}\n```\n"

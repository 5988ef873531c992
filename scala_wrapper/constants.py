"""Constants used across the scala-wrapper package."""

from __future__ import annotations

import re

PREPROCESSOR_NAME = "scala-wrapper-preprocessor"
TARGET_LANGUAGE = "scala"

# Wrapper scaffold patterns
WRAPPER_START_PATTERN = re.compile(r"object wrapper.*{")
WRAPPER_END_PATTERN = re.compile(r"^}")

# Markdown line endings are LF, CRLF, or a lone CR
LINE_PATTERN = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+")
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

# Markdown patterns
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSING_FENCE_MAX_INDENT = 3
BLOCK_QUOTE_PATTERN = re.compile(r"^ {0,3}>[ \t]?")
LIST_ITEM_PATTERN = re.compile(r"^(?P<marker> {0,3}(?:[-+*]|\d{1,9}[.)]))(?P<spacing>[ \t]*)")
LIST_ITEM_MAX_SPACING = 4

# Book layout defaults
BOOK_CONFIG_FILE = "book.toml"
SUMMARY_FILE = "SUMMARY.md"
DEFAULT_SRC_DIR = "src"
DEFAULT_BUILD_DIR = "book"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

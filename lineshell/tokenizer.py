#!/usr/bin/env python3
"""Whitespace tokenizer with single/double quote grouping"""

import shlex
import sys
from typing import List

from .exceptions import TokenizationError


LINE_TERMINATORS = "\r\n"

# Every character str.isspace() accepts, so tokens split where str.strip() trims
WHITESPACE = "".join(chr(c) for c in range(sys.maxunicode + 1) if chr(c).isspace())


def strip_terminators(line: str) -> str:
    return line.rstrip(LINE_TERMINATORS)


def tokenize(line: str) -> List[str]:
    """
    Split a line on whitespace. A token wrapped in matching quotes keeps its
    inner whitespace; an unterminated quote is an error.

    Backslashes are ordinary characters and '#' does not start a comment.
    """
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace = WHITESPACE
    lexer.whitespace_split = True
    lexer.commenters = ""
    lexer.escape = ""
    try:
        return list(lexer)
    except ValueError as e:
        raise TokenizationError(f"Malformed input: {e}", line) from e

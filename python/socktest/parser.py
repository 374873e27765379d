"""Command-line tokenising and numeric argument helpers for socktest."""

from __future__ import annotations

import shlex
from typing import List, Mapping

# Separators accepted between tokens in addition to whitespace.
EXTRA_DELIMITERS = ",="


def split_command(line: str) -> List[str]:
    """Lower-case ``line`` and split it on whitespace, commas and ``=``."""
    if not line:
        return []
    lexer = shlex.shlex(line.lower(), posix=True)
    lexer.whitespace += EXTRA_DELIMITERS
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        return list(lexer)
    except ValueError as exc:
        # Return the raw line as a single token so callers can raise a friendlier error.
        return [line.strip(), f"#parse-error:{exc}"]


def parse_int(text: str) -> int:
    """Parse an integer the way C's ``%i`` does (``0x`` hex, leading-zero octal)."""
    value = text.strip()
    sign = 1
    if value and value[0] in "+-":
        sign = -1 if value[0] == "-" else 1
        value = value[1:]
    if len(value) > 1 and value[0] == "0" and value[1] not in "xXbBoO":
        return sign * int(value, 8)
    return sign * int(value, 0)


def named_value(text: str, names: Mapping[str, int]) -> int:
    """Translate a symbolic option value, falling back to a number."""
    key = text.strip().lower()
    if key in names:
        return names[key]
    try:
        return parse_int(key)
    except ValueError:
        raise ValueError(f"{text} is not a recognized option value.") from None

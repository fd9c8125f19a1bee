"""Splitting of User-Agent strings into tokens.

Top-level tokens are separated by whitespace outside parentheses, so
``"(Windows NT 10.0; Win64; x64)"`` stays a single token. A parenthetical
token is further split on semicolons into sub-tokens.

Parentheses are not validated: unbalanced or nested groups split however the
patterns happen to match.
"""

from __future__ import annotations

import re

# Whitespace not followed by "...)" without an opening parenthesis in between
TOKEN_SEPARATOR = re.compile(r"\s+(?![^\(]+\))")

GROUP_SEPARATOR = re.compile(r"\s*;\s*")

_LINE_BREAKS = str.maketrans({"\r": "\0", "\n": "\0"})


def sanitize(text: str) -> str:
    """Replace line breaks with NUL so they never act as separators."""
    return text.translate(_LINE_BREAKS)


def split_tokens(text: str) -> list[str]:
    """Split a User-Agent string into top-level tokens.

    Examples
    --------
    >>> split_tokens("Mozilla/5.0 (Windows NT 10.0) Chrome/1.0")
    ['Mozilla/5.0', '(Windows NT 10.0)', 'Chrome/1.0']
    """
    return TOKEN_SEPARATOR.split(text)


def is_group(token: str) -> bool:
    return token.startswith("(") and token.endswith(")")


def split_group(token: str) -> list[str]:
    """Split a parenthetical token into its semicolon-separated sub-tokens."""
    return GROUP_SEPARATOR.split(token.lstrip("(").rstrip(")"))

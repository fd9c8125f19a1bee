"""Extraction of OS fragments from Apple and Linux descriptors."""

from __future__ import annotations

import re

# Version number preceded by whitespace or a slash, e.g. "10_3_3" or "2.4.0"
VERSION_PATTERN = re.compile(r"(?<=[\s/])\d+(?:[._]\d+)*")


def parse_apple_os(text: str) -> str | None:
    """Build an Apple OS fragment such as ``"Mac OS X/11_2_3"`` or ``"iOS/5_1_1"``.

    Returns None when ``text`` carries no version.
    """
    match = VERSION_PATTERN.search(text)
    if match is None:
        return None
    index = text.rfind("Mac OS", 0, match.start())
    if index == -1:
        return "iOS/" + match.group()
    return text[index : match.start() - 1] + "/" + match.group()


def parse_linux_os(text: str) -> str:
    """Build a Linux-like OS fragment, e.g. ``"Ubuntu/20.04"`` or ``"Linux"``."""
    match = VERSION_PATTERN.search(text)
    if match is None:
        return text.split(" ")[0]
    return text[: match.start() - 1] + "/" + match.group()

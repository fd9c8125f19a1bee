"""Parsing of "Name/X.Y.Z" fragments."""

from __future__ import annotations

import re

from .models import ClientInfo, FamilyVersion

_COMPONENT_SEPARATOR = re.compile(r"[._]")


def split_fragment(text: str) -> tuple[str, int | None, int | None, int | None]:
    """Split a fragment into family, major, minor and patch.

    Parameters
    ----------
    text : str
        Fragment such as ``"Chrome/89.0.4389.82"``, ``"iOS/5_1_1"`` or ``"Linux"``.

    Returns
    -------
    tuple[str, int | None, int | None, int | None]
        Family followed by up to three version components. Parsing stops at
        the first component that is missing or not a decimal integer, so a
        later component is never set without the earlier ones.

    Examples
    --------
    >>> split_fragment("Opera/9.60")
    ('Opera', 9, 60, None)
    >>> split_fragment("Mobile/9B206")
    ('Mobile', None, None, None)
    """
    parts = text.split("/")
    family = parts[0]
    components: list[int | None] = [None, None, None]
    if len(parts) > 1:
        for index, value in enumerate(_COMPONENT_SEPARATOR.split(parts[1])[:3]):
            if not value.isdecimal():
                break
            components[index] = int(value)
    return family, components[0], components[1], components[2]


def parse_fragment(text: str) -> FamilyVersion:
    """Parse a fragment into a :class:`FamilyVersion`."""
    return FamilyVersion(*split_fragment(text))


def parse_client(text: str, language: str | None = None) -> ClientInfo:
    """Parse a fragment into a :class:`ClientInfo` carrying ``language``."""
    return ClientInfo(*split_fragment(text), language=language)


def render(item: FamilyVersion) -> str:
    """Render family and version, e.g. ``"Chrome 89.0.4389"``.

    Families starting with ``Windows`` are rendered without the version.
    """
    return str(item)

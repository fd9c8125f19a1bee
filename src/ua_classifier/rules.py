"""Heuristic classification rules.

The engine is a fold over the top-level tokens of a User-Agent string. The
state is an immutable :class:`Accumulator`; every rule returns a new one.
Rules are kept in ordered lists and the first rule whose predicate holds is
applied, so the priority of each heuristic is its position in the list.

Tokens are visited in three stages:

1. the first token names the client unless it is the ``Mozilla/`` marker;
2. the second token, when parenthetical, is the OS/device descriptor and is
   scanned with :data:`DESCRIPTOR_RULES`; any other token goes through
   :data:`TOKEN_RULES`;
3. the last token may name the client through :data:`TRAILING_RULES`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from decimal import Decimal
from functools import reduce
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, NamedTuple, Sequence

from .models import DeviceFamily
from .os_parsers import VERSION_PATTERN, parse_apple_os, parse_linux_os
from .signatures import match_signature
from .tokenizer import is_group, split_group

LANGUAGE_PATTERN = re.compile(r"[a-z]{2}(?:-[A-Z]{2})?")

# Capital letter not at the start and not after whitespace
WORD_BOUNDARY = re.compile(r"(?<!^)(?<!\s)([A-Z])")

TRIDENT_VERSION = re.compile(r"\d+(?:\.\d+)?")

# Internet Explorer version = Trident version + 4
TRIDENT_OFFSET = 4

WINDOWS_VERSIONS: Mapping[str, str] = MappingProxyType(
    {
        "Windows NT 5.0": "Windows 2000",
        "Windows NT 5.1": "Windows XP",
        "Windows NT 5.2": "Windows Server 2003",
        "Windows NT 6.0": "Windows Vista",
        "Windows NT 6.1": "Windows 7",
        "Windows NT 6.2": "Windows 8",
        "Windows NT 6.3": "Windows 8.1",
        "Windows NT 10.0": "Windows 10",
    }
)


@dataclass(frozen=True)
class Accumulator:
    """Facts collected while walking the tokens.

    Attributes
    ----------
    os : str | None
        OS fragment, e.g. ``"Android/7.0"``
    client : str | None
        Client fragment, e.g. ``"SamsungBrowser/7.4"``
    language : str | None
        Locale code, e.g. ``"en"`` or ``"zh-CN"``
    chrome : str | None
        ``Chrome/...`` token, used when the string ends with ``Safari/...``
    family : DeviceFamily
        Device family
    company, brand, model : str | None
        Device details
    """

    os: str | None = None
    client: str | None = None
    language: str | None = None
    chrome: str | None = None
    family: DeviceFamily = DeviceFamily.COMPUTER
    company: str | None = None
    brand: str | None = None
    model: str | None = None


@dataclass(frozen=True)
class Cursor:
    """Position of one token within its sequence."""

    items: tuple[str, ...]
    index: int

    @property
    def text(self) -> str:
        return self.items[self.index]

    @property
    def is_last(self) -> bool:
        return self.index + 1 == len(self.items)

    @property
    def previous(self) -> str | None:
        return self.items[self.index - 1] if self.index > 0 else None

    @property
    def next(self) -> str | None:
        return None if self.is_last else self.items[self.index + 1]


Predicate = Callable[[Accumulator, Cursor], bool]
Action = Callable[[Accumulator, Cursor], Accumulator]


class Rule(NamedTuple):
    """A named heuristic.

    ``consumes`` is the number of tokens the rule uses, counting the current
    one; rules that read the following token as a value consume two.
    """

    name: str
    applies: Predicate
    apply: Action
    consumes: int = 1


def apply_first(
    rules: Sequence[Rule], state: Accumulator, cursor: Cursor
) -> tuple[Accumulator, Rule | None]:
    """Apply the first rule whose predicate holds."""
    for rule in rules:
        if rule.applies(state, cursor):
            return rule.apply(state, cursor), rule
    return state, None


def cursors(items: Sequence[str]) -> Iterator[Cursor]:
    frozen = tuple(items)
    return (Cursor(frozen, index) for index in range(len(frozen)))


# Helpers ---------------------------------------------------------------------


def starts_with(prefix: str) -> Predicate:
    return lambda state, cursor: cursor.text.startswith(prefix)


def equals_ignore_case(value: str) -> Predicate:
    folded = value.casefold()
    return lambda state, cursor: cursor.text.casefold() == folded


def set_family(family: DeviceFamily) -> Action:
    return lambda state, cursor: replace(state, family=family)


def _apple_device(family: DeviceFamily | None) -> Action:
    def action(state: Accumulator, cursor: Cursor) -> Accumulator:
        state = replace(
            state,
            company="Apple",
            brand=cursor.text,
            family=state.family if family is None else family,
        )
        if cursor.next is not None:
            state = replace(state, os=parse_apple_os(cursor.next))
        return state

    return action


def _bot_url(state: Accumulator, cursor: Cursor) -> Accumulator:
    client = state.client if cursor.previous is None else cursor.previous
    return replace(state, family=DeviceFamily.BOT, client=client)


def _windows(state: Accumulator, cursor: Cursor) -> Accumulator:
    name = WINDOWS_VERSIONS.get(cursor.text, cursor.text)
    return replace(state, os=name + "/" + cursor.text.split(" ")[-1])


def _trident(state: Accumulator, cursor: Cursor) -> Accumulator:
    version = cursor.text.split("/")[1]
    if not TRIDENT_VERSION.fullmatch(version):
        return state
    return replace(state, client=f"MSIE/{Decimal(version) + TRIDENT_OFFSET}")


def _x11(state: Accumulator, cursor: Cursor) -> Accumulator:
    if cursor.next is None:
        return state
    return replace(state, os=parse_linux_os(cursor.next))


def _device_descriptor(state: Accumulator, cursor: Cursor) -> Accumulator:
    """Read the last descriptor sub-token as an OS fragment or a device model.

    ``"Tizen 2.4.0"`` carries a version and becomes the OS; ``"SAMSUNG
    SM-T585 Build/NRD90M"`` yields company ``Samsung`` and model ``SM-T585``,
    after which the signature table may refine family, company and brand.
    """
    text = cursor.text
    if VERSION_PATTERN.search(text):
        return replace(state, os=text.replace(" ", "/"))

    words = text.split(" Build/")[0].split(" ")
    company = words[0].capitalize() if len(words) > 1 else state.company
    model = words[-1]
    state = replace(state, company=company, model=model)

    rule = match_signature(model)
    if rule is None:
        return state
    return replace(
        state,
        family=rule.family,
        company=rule.company if rule.company is not None else state.company,
        brand=rule.brand if rule.brand is not None else state.brand,
    )


# Descriptor sub-tokens, e.g. "(Linux; Android 7.0; SAMSUNG SM-T585 Build/NRD90M)"

DESCRIPTOR_RULES: tuple[Rule, ...] = (
    Rule(
        "bot_url_alone",
        lambda state, cursor: len(cursor.items) == 1
        and cursor.text.startswith("+http"),
        set_family(DeviceFamily.BOT),
    ),
    Rule("bot_url", starts_with("+http"), _bot_url),
    Rule(
        "language",
        lambda state, cursor: LANGUAGE_PATTERN.fullmatch(cursor.text) is not None,
        lambda state, cursor: replace(state, language=cursor.text),
    ),
    Rule("windows", starts_with("Windows "), _windows),
    Rule(
        "msie",
        starts_with("MSIE "),
        lambda state, cursor: replace(state, client=cursor.text.replace(" ", "/")),
    ),
    Rule("trident", starts_with("Trident/"), _trident),
    Rule("mobile", equals_ignore_case("Mobile"), set_family(DeviceFamily.MOBILE)),
    Rule("tablet", equals_ignore_case("Tablet"), set_family(DeviceFamily.TABLET)),
    Rule("smart_tv", equals_ignore_case("SMART-TV"), set_family(DeviceFamily.TV)),
    Rule(
        "apple_tv",
        equals_ignore_case("Apple TV"),
        lambda state, cursor: replace(state, company="Apple", family=DeviceFamily.TV),
    ),
    Rule(
        "macintosh",
        equals_ignore_case("Macintosh"),
        _apple_device(None),
        consumes=2,
    ),
    Rule(
        "iphone",
        equals_ignore_case("iPhone"),
        _apple_device(DeviceFamily.MOBILE),
        consumes=2,
    ),
    Rule(
        "ipad",
        lambda state, cursor: cursor.text.casefold() in {"ipad", "ipod"},
        _apple_device(DeviceFamily.TABLET),
        consumes=2,
    ),
    Rule("x11", lambda state, cursor: cursor.text == "X11", _x11, consumes=2),
    Rule(
        "linux",
        lambda state, cursor: state.os is None and cursor.text.startswith("Linux"),
        lambda state, cursor: replace(state, os=parse_linux_os(cursor.text)),
    ),
    Rule(
        "android",
        starts_with("Android"),
        lambda state, cursor: replace(
            state, family=DeviceFamily.MOBILE, os=cursor.text.replace(" ", "/")
        ),
    ),
    # Gecko release version, not authoritative
    Rule("release_version", starts_with("rv:"), lambda state, cursor: state),
    Rule("device", lambda state, cursor: cursor.is_last, _device_descriptor),
)


def _upgrade_family(marker: str, family: DeviceFamily) -> Rule:
    return Rule(
        marker.lower(),
        lambda state, cursor: state.family is DeviceFamily.COMPUTER
        and marker in cursor.text,
        set_family(family),
    )


# Top-level tokens other than the descriptor

TOKEN_RULES: tuple[Rule, ...] = (
    Rule(
        "language",
        starts_with("Language/"),
        lambda state, cursor: replace(state, language=cursor.text.split("/")[1]),
    ),
    Rule(
        "chrome",
        starts_with("Chrome/"),
        lambda state, cursor: replace(state, chrome=cursor.text),
    ),
    Rule(
        "firefox_ios",
        starts_with("FxiOS/"),
        lambda state, cursor: replace(
            state, client=cursor.text.replace("FxiOS", "iOS Firefox")
        ),
    ),
    Rule(
        "samsung_browser",
        starts_with("SamsungBrowser/"),
        lambda state, cursor: replace(state, client=cursor.text),
    ),
    _upgrade_family("Mobile", DeviceFamily.MOBILE),
    _upgrade_family("Tablet", DeviceFamily.TABLET),
    _upgrade_family("TV", DeviceFamily.TV),
)


def _names_client(state: Accumulator, cursor: Cursor) -> bool:
    return cursor.index > 1 and cursor.is_last and state.client is None


# Chrome-based browsers end with a Safari compatibility token
TRAILING_RULES: tuple[Rule, ...] = (
    Rule(
        "safari",
        lambda state, cursor: _names_client(state, cursor)
        and cursor.text.startswith("Safari/"),
        lambda state, cursor: replace(state, client=state.chrome or cursor.text),
    ),
    Rule(
        "client",
        _names_client,
        lambda state, cursor: replace(
            state,
            client=cursor.text.replace("OPR/", "Opera/").replace("Edg/", "Edge/"),
        ),
    ),
)


def scan_descriptor(state: Accumulator, parts: Sequence[str]) -> Accumulator:
    """Apply :data:`DESCRIPTOR_RULES` to each sub-token of the descriptor."""
    items = tuple(parts)
    index = 0
    while index < len(items):
        state, rule = apply_first(DESCRIPTOR_RULES, state, Cursor(items, index))
        index += rule.consumes if rule is not None else 1
    return state


def classify_token(state: Accumulator, cursor: Cursor) -> Accumulator:
    """Fold step for one top-level token."""
    if cursor.index == 0 and not cursor.text.startswith("Mozilla/"):
        # Legacy clients name themselves first, e.g. "Opera/9.60 (...)"
        state = replace(state, client=cursor.text)

    if cursor.index == 1 and is_group(cursor.text):
        state = scan_descriptor(state, split_group(cursor.text))
    else:
        state, _ = apply_first(TOKEN_RULES, state, cursor)

    state, _ = apply_first(TRAILING_RULES, state, cursor)
    return state


def classify(tokens: Sequence[str]) -> Accumulator:
    """Classify a sequence of two or more top-level tokens."""
    return reduce(classify_token, cursors(tokens), Accumulator())


def classify_single(token: str) -> Accumulator:
    """Classify a string without separators, e.g. ``"PostmanRuntime/6.7.1"``.

    The whole token is the client; hyphens become spaces and camel-case words
    are split, giving ``"Postman Runtime/6.7.1"``.
    """
    client = WORD_BOUNDARY.sub(r" \1", token.replace("-", " "))
    return Accumulator(client=client, family=DeviceFamily.COMPUTER)

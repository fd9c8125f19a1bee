"""User-Agent parsing entry point.

Tokenizes the string, runs the classification rules and assembles the
structured :class:`~ua_classifier.models.ParseResult`.
"""

from __future__ import annotations

from .models import Device, DeviceFamily, ParseResult
from .rules import Accumulator, classify, classify_single
from .tokenizer import sanitize, split_tokens
from .versions import parse_client, parse_fragment


def assemble(state: Accumulator, source: str) -> ParseResult:
    """Build the final result from the classification state.

    Parameters
    ----------
    state : Accumulator
        Facts collected by the classification rules.
    source : str
        Sanitized input string.

    Returns
    -------
    ParseResult
        Valid result with OS and client fragments split into family and version.
    """
    device = Device(state.family, state.company, state.brand, state.model)
    return ParseResult(
        valid=True,
        is_bot=state.family is DeviceFamily.BOT,
        is_mobile=state.family is DeviceFamily.MOBILE,
        source=source,
        device=device,
        os=parse_fragment(state.os) if state.os is not None else None,
        client=(
            parse_client(state.client, state.language)
            if state.client is not None
            else None
        ),
    )


def parse(user_agent: str | None) -> ParseResult:
    """Classify a User-Agent header value.

    Never raises: None or an empty string gives an invalid result, and parts
    that cannot be recognised are left unset.

    Examples
    --------
    >>> str(parse("Googlebot/2.1 (+http://www.google.com/bot.html)"))
    'Googlebot 2.1'
    >>> parse("").valid
    False
    """
    if not user_agent:
        return ParseResult()

    source = sanitize(user_agent)
    tokens = split_tokens(source)
    if len(tokens) == 1:
        state = classify_single(tokens[0])
    else:
        state = classify(tokens)
    return assemble(state, source)

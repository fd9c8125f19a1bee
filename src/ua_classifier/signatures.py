"""Device signature table.

Maps the first two characters of a model code to an ordered list of rules
that refine the device family, company and brand. The table is built once
at import time and exposed read-only.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, NamedTuple

from loguru import logger

from .models import DeviceFamily


class SignatureRule(NamedTuple):
    """Override applied when ``pattern`` matches a model code."""

    pattern: re.Pattern[str]
    family: DeviceFamily
    company: str | None = None
    brand: str | None = None


SIGNATURES: Mapping[str, tuple[SignatureRule, ...]] = MappingProxyType(
    {
        "LM": (
            SignatureRule(re.compile(r"^LM-X\d+$"), DeviceFamily.MOBILE, "LG", "K40"),
        ),
        "SM": (
            SignatureRule(
                re.compile(r"^SM-T\d+$"), DeviceFamily.TABLET, "SAMSUNG", "Galaxy Tab"
            ),
        ),
    }
)


def match_signature(
    model: str, table: Mapping[str, tuple[SignatureRule, ...]] = SIGNATURES
) -> SignatureRule | None:
    """Return the first rule matching ``model``, or None.

    Only the rules filed under the model's two-character prefix are tried.
    """
    for rule in table.get(model[:2], ()):
        if rule.pattern.search(model):
            logger.debug("model {} matched signature {}", model, rule.pattern.pattern)
            return rule
    return None

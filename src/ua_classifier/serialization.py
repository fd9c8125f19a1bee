"""JSON rendering of parse results."""

from __future__ import annotations

import json
from typing import Any

from .models import ClientInfo, Device, FamilyVersion, ParseResult


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def device_to_dict(device: Device) -> dict[str, Any]:
    return _compact(
        {
            "family": device.family.value,
            "company": device.company,
            "brand": device.brand,
            "model": device.model,
        }
    )


def family_version_to_dict(item: FamilyVersion) -> dict[str, Any]:
    values = {
        "family": item.family,
        "major": item.major,
        "minor": item.minor,
        "patch": item.patch,
    }
    if isinstance(item, ClientInfo):
        values["language"] = item.language
    return _compact(values)


def to_dict(result: ParseResult, include_source: bool = False) -> dict[str, Any]:
    """Convert a result into a JSON-ready dictionary.

    Parameters
    ----------
    result : ParseResult
        Parsed User-Agent.
    include_source : bool, optional
        Add the input string under ``source`` (default: False).

    Returns
    -------
    dict[str, Any]
        camelCase keys; unset fields are omitted, so an invalid result is
        empty apart from the optional source.
    """
    data: dict[str, Any] = {}
    if include_source:
        data["source"] = result.source

    if result.device is not None:
        data["device"] = device_to_dict(result.device)
        data["isBot"] = result.is_bot
        data["isMobile"] = result.is_mobile
        if result.os is not None:
            data["os"] = family_version_to_dict(result.os)
        if result.client is not None:
            data["client"] = family_version_to_dict(result.client)

    return data


def to_json(
    result: ParseResult, include_source: bool = False, indent: int | None = None
) -> str:
    """Serialize a result with :func:`to_dict`."""
    return json.dumps(
        to_dict(result, include_source=include_source),
        ensure_ascii=False,
        indent=indent,
    )

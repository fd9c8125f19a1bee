"""Flat User-Agent records.

Column-oriented view of a parse result, used for TSV output and DuckDB
enrichment. Original data is preserved, with parsed information separated
into columns.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models import ParseResult
from ..parser import parse


@dataclass
class UserAgent:
    """Parsed User-Agent information.

    Attributes
    ----------
    user_agent : str | None
        Original User-Agent string
    device_family : str | None
        Device family (Computer, Mobile, Tablet, Bot, TV)
    device_company : str | None
        Device company (e.g., Apple, SAMSUNG)
    device_brand : str | None
        Device brand (e.g., iPhone, Galaxy Tab)
    device_model : str | None
        Device model (e.g., SM-T585)
    os_family : str | None
        OS family (e.g., Windows 10, iOS, Android)
    os_version : str | None
        OS version (major.minor.patch)
    client_family : str | None
        Client family (e.g., Chrome, Safari, Googlebot)
    client_version : str | None
        Client version (major.minor.patch)
    client_language : str | None
        Client language (e.g., en, zh-CN)
    is_bot : bool
        Whether the client is a bot
    is_mobile : bool
        Whether the device is a mobile phone
    """

    __slots__ = (
        "user_agent",
        "device_family",
        "device_company",
        "device_brand",
        "device_model",
        "os_family",
        "os_version",
        "client_family",
        "client_version",
        "client_language",
        "is_bot",
        "is_mobile",
    )

    COLUMNS = __slots__

    user_agent: str | None
    device_family: str | None
    device_company: str | None
    device_brand: str | None
    device_model: str | None
    os_family: str | None
    os_version: str | None
    client_family: str | None
    client_version: str | None
    client_language: str | None
    is_bot: bool
    is_mobile: bool

    def __init__(
        self, user_agent: str | None, result: ParseResult | None = None
    ) -> None:
        """Initialize UserAgent by parsing the User-Agent string.

        Parameters
        ----------
        user_agent : str | None
            User-Agent string to parse
        result : ParseResult | None, optional
            Result already parsed from ``user_agent``
        """
        self.user_agent = user_agent

        if result is None:
            result = parse(user_agent)

        # Device info
        device = result.device
        self.device_family = device.family.value if device else None
        self.device_company = device.company if device else None
        self.device_brand = device.brand if device else None
        self.device_model = device.model if device else None

        # OS info
        os_info = result.os
        self.os_family = os_info.family if os_info else None
        self.os_version = os_info.version if os_info else None

        # Client info
        client = result.client
        self.client_family = client.family if client else None
        self.client_version = client.version if client else None
        self.client_language = client.language if client else None

        self.is_bot = result.is_bot
        self.is_mobile = result.is_mobile

    def values(self) -> list[str | bool | None]:
        """Column values in :attr:`COLUMNS` order."""
        return [getattr(self, column) for column in self.COLUMNS]

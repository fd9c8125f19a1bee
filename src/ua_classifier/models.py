"""Value objects produced by the User-Agent parser.

All objects are frozen dataclasses; a parse produces an independent result
graph that is never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DeviceFamily(Enum):
    """Coarse device classification."""

    COMPUTER = "Computer"
    MOBILE = "Mobile"
    TABLET = "Tablet"
    BOT = "Bot"
    TV = "TV"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Device:
    """Device information.

    Attributes
    ----------
    family : DeviceFamily
        Device family, ``Computer`` when nothing stronger was detected.
    company : str | None
        Manufacturer (e.g., Apple, SAMSUNG)
    brand : str | None
        Product line (e.g., iPhone, Galaxy Tab)
    model : str | None
        Model code (e.g., SM-T585)
    """

    family: DeviceFamily = DeviceFamily.COMPUTER
    company: str | None = None
    brand: str | None = None
    model: str | None = None

    def __str__(self) -> str:
        return " ".join(item for item in (self.company, self.brand, self.model) if item)


@dataclass(frozen=True)
class FamilyVersion:
    """A name with up to three numeric version components.

    Components are filled left to right: ``minor`` is only set when ``major``
    is, and ``patch`` only when ``minor`` is.
    """

    family: str
    major: int | None = None
    minor: int | None = None
    patch: int | None = None

    @property
    def version(self) -> str | None:
        """Version as 'major.minor.patch', or None if no component is known."""
        parts: list[str] = []
        if self.major is not None:
            parts.append(str(self.major))
            if self.minor is not None:
                parts.append(str(self.minor))
                if self.patch is not None:
                    parts.append(str(self.patch))
        return ".".join(parts) if parts else None

    def __str__(self) -> str:
        # "Windows 10" already carries its version
        version = self.version
        if version is None or self.family.startswith("Windows"):
            return self.family
        return f"{self.family} {version}"


@dataclass(frozen=True)
class ClientInfo(FamilyVersion):
    """Client (browser, crawler, app) with an optional locale code."""

    language: str | None = None


@dataclass(frozen=True)
class ParseResult:
    """Structured classification of one User-Agent string.

    Attributes
    ----------
    valid : bool
        False when the input was None or empty; every other field is then unset.
    is_bot : bool
        Device family is ``Bot``.
    is_mobile : bool
        Device family is ``Mobile``.
    source : str | None
        Input string after line-break sanitising.
    device : Device | None
        Device information, always present when valid.
    os : FamilyVersion | None
        Operating system, when detected.
    client : ClientInfo | None
        Client, when detected.
    """

    valid: bool = False
    is_bot: bool = False
    is_mobile: bool = False
    source: str | None = None
    device: Device | None = None
    os: FamilyVersion | None = None
    client: ClientInfo | None = None

    def _items(self, full: bool) -> list[str]:
        if not self.valid or self.device is None:
            return []
        items = []
        device = str(self.device)
        if device:
            items.append(device)
        for item in (self.os, self.client):
            if item is not None:
                items.append(str(item) if full else item.family)
        return items

    def __str__(self) -> str:
        return " ".join(self._items(full=True))

    def short_name(self) -> str:
        """Device description plus OS and client family names, without versions."""
        return " ".join(self._items(full=False))

    def signature(self) -> str:
        """Lowercase '<os>_<client>' key, 'other' standing in for missing parts."""
        os_family = normalize_family(self.os.family if self.os else None)
        client_family = normalize_family(self.client.family if self.client else None)
        return f"{os_family}_{client_family}"


def normalize_family(value: str | None) -> str:
    if not value:
        return "other"
    cleaned = value.strip().lower().replace(" ", "_")
    cleaned = "".join(ch for ch in cleaned if ch.isalnum() or ch in {"_", "-"})
    return cleaned or "other"

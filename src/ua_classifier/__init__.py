"""Heuristic User-Agent classification.

Classifies a raw User-Agent header into device family, operating system,
client and bot flag without external databases.

Examples
--------
>>> from ua_classifier import parse
>>> result = parse("Mozilla/5.0 (Windows NT 10.0; WOW64; Trident/7.0; rv:11.0)")
>>> str(result.os), str(result.client)
('Windows 10', 'MSIE 11.0')
"""

from loguru import logger

from .models import ClientInfo, Device, DeviceFamily, FamilyVersion, ParseResult
from .parser import parse
from .serialization import to_dict, to_json

__all__ = [
    "ClientInfo",
    "Device",
    "DeviceFamily",
    "FamilyVersion",
    "ParseResult",
    "parse",
    "to_dict",
    "to_json",
]

__version__ = "0.1.0"

logger.disable("ua_classifier")

"""Utility modules for batch User-Agent classification."""

from .progress import ProgressTracker, configure_logging
from .sources import count_lines, iter_user_agents, open_source
from .user_agent import UserAgent

__all__ = [
    "ProgressTracker",
    "UserAgent",
    "configure_logging",
    "count_lines",
    "iter_user_agents",
    "open_source",
]

"""Classification of many User-Agent strings."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
from typing import Iterable, Iterator

from loguru import logger

from .models import ParseResult
from .parser import parse

CHUNK_SIZE = 1024


def normalize_workers(requested: int | None) -> int:
    """Thread count for :func:`classify_many`.

    ``None`` uses one thread per CPU. An explicit request is clamped to at
    least one thread and at most one fewer than the CPU count.
    """
    cpu_total = os.cpu_count() or 1
    if requested is None:
        return cpu_total
    return min(max(1, int(requested)), max(1, cpu_total - 1))


def _chunks(items: Iterable[str | None], size: int) -> Iterator[list[str | None]]:
    iterator = iter(items)
    while chunk := list(islice(iterator, size)):
        yield chunk


def classify_many(
    user_agents: Iterable[str | None],
    workers: int | None = None,
    chunk_size: int = CHUNK_SIZE,
) -> Iterator[ParseResult]:
    """Parse User-Agent strings concurrently, yielding results in input order.

    Parameters
    ----------
    user_agents : Iterable[str | None]
        Strings to classify; consumed lazily, ``chunk_size`` at a time.
    workers : int or None, optional
        Desired worker count, see :func:`normalize_workers`.
    chunk_size : int, optional
        Number of strings submitted to the pool at once.

    Yields
    ------
    ParseResult
        One result per input string.
    """
    worker_count = normalize_workers(workers)
    logger.info("Using {} worker threads to classify user agents", worker_count)

    if worker_count == 1:
        yield from map(parse, user_agents)
        return

    with ThreadPoolExecutor(max_workers=worker_count) as executor:
        for chunk in _chunks(user_agents, chunk_size):
            yield from executor.map(parse, chunk)

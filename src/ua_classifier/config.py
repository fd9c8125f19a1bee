"""Runtime settings read from the environment and ``.env`` files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from loguru import logger

ENV_PREFIX = "UA_CLASSIFIER_"

OUTPUT_FORMATS = ("json", "text", "short", "tsv")


def env_path(name: str, default: Path | None) -> Path | None:
    value = os.getenv(name)
    return Path(value).expanduser() if value else default


def env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(
            "environment variable {}={} is not an integer, using default", name, value
        )
        return default


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def env_str(name: str) -> str | None:
    value = os.getenv(name)
    return value.strip() if value else None


@dataclass(frozen=True)
class Settings:
    """Defaults for the command line; flags override them.

    Attributes
    ----------
    verbose : bool
        Log INFO records.
    progress : bool
        Show the progress bar.
    output_format : str
        One of :data:`OUTPUT_FORMATS`.
    include_source : bool
        Include the input string in JSON output.
    workers : int | None
        Thread count for batch classification; None means all CPUs.
    column : str
        User-Agent column name for ``enrich``.
    duckdb_file : Path | None
        DuckDB database file; in-memory when None.
    duckdb_threads : int | None
        DuckDB ``threads`` pragma.
    duckdb_memory_limit : str | None
        DuckDB ``memory_limit`` pragma, e.g. ``"4GB"``.
    """

    verbose: bool = False
    progress: bool = False
    output_format: str = "json"
    include_source: bool = False
    workers: int | None = None
    column: str = "useragent"
    duckdb_file: Path | None = None
    duckdb_threads: int | None = None
    duckdb_memory_limit: str | None = None


def load_settings() -> Settings:
    """Load :class:`Settings` from ``UA_CLASSIFIER_*`` variables.

    A ``.env`` file in the working directory is read first; variables already
    set in the environment take precedence.
    """
    load_dotenv(find_dotenv(usecwd=True))

    output_format = env_str(ENV_PREFIX + "FORMAT") or "json"
    if output_format not in OUTPUT_FORMATS:
        logger.warning("unknown output format {}, using json", output_format)
        output_format = "json"

    return Settings(
        verbose=env_bool(ENV_PREFIX + "VERBOSE", False),
        progress=env_bool(ENV_PREFIX + "PROGRESS", False),
        output_format=output_format,
        include_source=env_bool(ENV_PREFIX + "INCLUDE_SOURCE", False),
        workers=env_int(ENV_PREFIX + "WORKERS", None),
        column=env_str(ENV_PREFIX + "COLUMN") or "useragent",
        duckdb_file=env_path(ENV_PREFIX + "DUCKDB_FILE", None),
        duckdb_threads=env_int(ENV_PREFIX + "DUCKDB_THREADS", None),
        duckdb_memory_limit=env_str(ENV_PREFIX + "DUCKDB_MEMORY_LIMIT"),
    )

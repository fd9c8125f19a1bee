"""DuckDB integration.

Registers the parser as scalar functions so User-Agent columns can be
classified in SQL, and enriches tab-separated logs with parsed columns.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Callable

import duckdb
from duckdb.sqltypes import BOOLEAN, VARCHAR
from loguru import logger

from .config import Settings
from .models import ParseResult
from .parser import parse
from .serialization import to_json
from .utils.user_agent import UserAgent

# Log files repeat the same few User-Agents many times
CACHE_SIZE = 65536

_cached_parse = lru_cache(maxsize=CACHE_SIZE)(parse)
_cached_row = lru_cache(maxsize=CACHE_SIZE)(UserAgent)

BOOLEAN_COLUMNS = frozenset({"is_bot", "is_mobile"})

# Flat columns added by enrich_tsv, in output order
ENRICH_COLUMNS: tuple[str, ...] = UserAgent.COLUMNS[1:]

RENDERERS: dict[str, Callable[[ParseResult], str | None]] = {
    "ua_description": lambda result: str(result) or None,
    "ua_short_name": lambda result: result.short_name() or None,
    "ua_signature": lambda result: result.signature(),
    "ua_json": to_json,
}


def quote_ident(identifier: str) -> str:
    """DuckDB identifier escaping."""
    return '"' + identifier.replace('"', '""') + '"'


def quote_literal(value: str | None) -> str:
    if value is None:
        return "NULL"
    return "'" + value.replace("'", "''") + "'"


def _column_function(column: str) -> Callable[[str | None], str | bool | None]:
    def function(user_agent: str | None) -> str | bool | None:
        if user_agent is None:
            return None
        return getattr(_cached_row(user_agent), column)

    return function


def _render_function(
    renderer: Callable[[ParseResult], str | None],
) -> Callable[[str | None], str | None]:
    def function(user_agent: str | None) -> str | None:
        if user_agent is None:
            return None
        return renderer(_cached_parse(user_agent))

    return function


def register_functions(conn: duckdb.DuckDBPyConnection) -> list[str]:
    """Register User-Agent scalar functions on ``conn``.

    One ``ua_<column>`` function per :data:`ENRICH_COLUMNS` entry (e.g.
    ``ua_device_family``, ``ua_is_bot``) plus the renderers ``ua_description``,
    ``ua_short_name``, ``ua_signature`` and ``ua_json``. NULL inputs give NULL.

    Returns
    -------
    list[str]
        Names of the registered functions.
    """
    functions: dict[str, tuple[Callable[[str], object], duckdb.DuckDBPyType]] = {}
    for column in ENRICH_COLUMNS:
        return_type = BOOLEAN if column in BOOLEAN_COLUMNS else VARCHAR
        functions["ua_" + column] = (_column_function(column), return_type)
    for name, renderer in RENDERERS.items():
        functions[name] = (_render_function(renderer), VARCHAR)

    for name, (function, return_type) in functions.items():
        try:
            conn.remove_function(name)
        except duckdb.InvalidInputException:
            # not registered on this connection yet
            pass
        # "special" lets the functions see NULL input and return NULL
        conn.create_function(
            name, function, [VARCHAR], return_type, null_handling="special"
        )

    logger.info("registered {} DuckDB functions", len(functions))
    return list(functions)


def connect(settings: Settings) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection configured from ``settings``."""
    database = settings.duckdb_file
    conn = duckdb.connect(database=":memory:" if database is None else str(database))
    if settings.duckdb_threads:
        conn.execute(f"PRAGMA threads={int(settings.duckdb_threads)}")
    if settings.duckdb_memory_limit:
        logger.info("Setting DuckDB memory_limit={}", settings.duckdb_memory_limit)
        conn.execute(
            f"PRAGMA memory_limit={quote_literal(settings.duckdb_memory_limit)}"
        )
    return conn


def export_relation_to_tsv(
    rel: duckdb.DuckDBPyRelation,
    output_path: Path,
) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("writing TSV -> {}", output_path)
    rel.write_csv(str(output_path), sep="\t", header=True)


def enrich_tsv(
    conn: duckdb.DuckDBPyConnection,
    input_path: Path,
    output_path: Path,
    column: str = "useragent",
    table_name: str = "enriched",
) -> int:
    """Append parsed User-Agent columns to a tab-separated file.

    Parameters
    ----------
    conn : duckdb.DuckDBPyConnection
        Connection with :func:`register_functions` applied.
    input_path : Path
        Tab-separated input with a header row.
    output_path : Path
        Destination TSV.
    column : str, optional
        Header of the User-Agent column (default: ``useragent``).
    table_name : str, optional
        Table holding the enriched rows.

    Returns
    -------
    int
        Number of rows written.
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    if not input_path.is_file():
        raise ValueError(f"Path is not a file: {input_path}")

    source = f"""
        read_csv(
            {quote_literal(input_path.as_posix())},
            delim='\t',
            header=TRUE,
            all_varchar=TRUE,
            compression='auto'
        )
    """
    columns = conn.sql(f"SELECT * FROM {source} LIMIT 0").columns
    if column not in columns:
        raise ValueError(f"Column '{column}' not found in {input_path}: {columns}")

    logger.info("enriching {} (column={})", input_path, column)
    ident = quote_ident(column)
    projection = ",\n        ".join(
        [f"ua_{name}({ident}) AS {quote_ident(name)}" for name in ENRICH_COLUMNS]
    )
    conn.execute(
        f"""
        CREATE OR REPLACE TABLE {quote_ident(table_name)} AS
        SELECT
        *,
        {projection}
        FROM {source};
        """
    )

    export_relation_to_tsv(
        conn.sql(f"SELECT * FROM {quote_ident(table_name)}"), output_path
    )
    (rows,) = conn.sql(f"SELECT count(*) FROM {quote_ident(table_name)}").fetchone()
    logger.success("enriched {} rows -> {}", rows, output_path)
    return rows

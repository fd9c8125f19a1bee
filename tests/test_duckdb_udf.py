import csv

import duckdb
import pytest

from ua_classifier.config import Settings
from ua_classifier.duckdb_udf import (
    ENRICH_COLUMNS,
    connect,
    enrich_tsv,
    quote_ident,
    quote_literal,
    register_functions,
)

IE11 = "Mozilla/5.0 (Windows NT 10.0; WOW64; Trident/7.0; rv:11.0)"
GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


@pytest.fixture
def conn():
    conn = duckdb.connect(":memory:")
    register_functions(conn)
    yield conn
    conn.close()


def scalar(conn, sql, *params):
    return conn.execute(sql, list(params)).fetchone()[0]


def test_registered_names(conn) -> None:
    names = register_functions(conn)
    assert "ua_device_family" in names
    assert "ua_is_bot" in names
    assert {"ua_description", "ua_short_name", "ua_signature", "ua_json"} <= set(names)
    assert len(names) == len(ENRICH_COLUMNS) + 4


def test_column_functions(conn) -> None:
    assert scalar(conn, "SELECT ua_device_family(?)", "PostmanRuntime/6.7.1") == (
        "Computer"
    )
    assert scalar(conn, "SELECT ua_client_family(?)", IE11) == "MSIE"
    assert scalar(conn, "SELECT ua_client_version(?)", IE11) == "11.0"
    assert scalar(conn, "SELECT ua_os_family(?)", IE11) == "Windows 10"
    assert scalar(conn, "SELECT ua_is_bot(?)", GOOGLEBOT) is True
    assert scalar(conn, "SELECT ua_is_mobile(?)", GOOGLEBOT) is False


def test_render_functions(conn) -> None:
    assert scalar(conn, "SELECT ua_description(?)", IE11) == (
        "Windows 10 MSIE 11.0"
    )
    assert scalar(conn, "SELECT ua_signature(?)", IE11) == "windows_10_msie"
    assert '"family": "Computer"' in scalar(conn, "SELECT ua_json(?)", IE11)


def test_null_input(conn) -> None:
    assert scalar(conn, "SELECT ua_device_family(NULL)") is None
    assert scalar(conn, "SELECT ua_json(NULL)") is None


def test_empty_input(conn) -> None:
    assert scalar(conn, "SELECT ua_device_family('')") is None
    assert scalar(conn, "SELECT ua_is_bot('')") is False


def test_quoting() -> None:
    assert quote_ident('user "agent"') == '"user ""agent"""'
    assert quote_literal("it's") == "'it''s'"
    assert quote_literal(None) == "NULL"


def write_tsv(path, header, rows) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        writer.writerow(header)
        writer.writerows(rows)


def test_enrich_tsv(conn, tmp_path) -> None:
    source = tmp_path / "log.tsv"
    target = tmp_path / "out" / "enriched.tsv"
    write_tsv(source, ["id", "useragent"], [["1", IE11], ["2", GOOGLEBOT]])

    assert enrich_tsv(conn, source, target) == 2

    with target.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f, delimiter="\t"))
    assert list(rows[0]) == ["id", "useragent", *ENRICH_COLUMNS]
    assert rows[0]["id"] == "1"
    assert rows[0]["os_family"] == "Windows 10"
    assert rows[0]["client_family"] == "MSIE"
    assert rows[1]["device_family"] == "Bot"
    assert rows[1]["is_bot"] == "true"


def test_enrich_tsv_custom_column(conn, tmp_path) -> None:
    source = tmp_path / "log.tsv"
    write_tsv(source, ["ua"], [["curl/7.64.1"]])
    assert enrich_tsv(conn, source, tmp_path / "out.tsv", column="ua") == 1
    (client,) = conn.sql('SELECT client_family FROM "enriched"').fetchone()
    assert client == "curl"


def test_enrich_tsv_missing_column(conn, tmp_path) -> None:
    source = tmp_path / "log.tsv"
    write_tsv(source, ["id", "agent"], [["1", IE11]])
    with pytest.raises(ValueError, match="useragent"):
        enrich_tsv(conn, source, tmp_path / "out.tsv")


def test_enrich_tsv_missing_file(conn, tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        enrich_tsv(conn, tmp_path / "missing.tsv", tmp_path / "out.tsv")


def test_connect_applies_settings() -> None:
    conn = connect(Settings(duckdb_threads=2))
    try:
        assert scalar(conn, "SELECT current_setting('threads')") == 2
    finally:
        conn.close()


def test_register_twice_replaces_functions(conn) -> None:
    register_functions(conn)
    assert scalar(conn, "SELECT ua_client_family(?)", "curl/7.64.1") == "curl"


def test_enrich_tsv_unset_fields(conn, tmp_path) -> None:
    source = tmp_path / "log.tsv"
    target = tmp_path / "enriched.tsv"
    write_tsv(source, ["useragent"], [["Mozilla/5.0 (X11)"]])

    assert enrich_tsv(conn, source, target) == 1

    with target.open(encoding="utf-8", newline="") as f:
        (row,) = list(csv.DictReader(f, delimiter="\t"))
    assert row["device_family"] == "Computer"
    for column in ("device_company", "os_family", "os_version", "client_family"):
        assert row[column] == ""
    assert row["is_bot"] == "false"
    (company, client) = conn.sql(
        'SELECT device_company, client_family FROM "enriched"'
    ).fetchone()
    assert company is None
    assert client is None

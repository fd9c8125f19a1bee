import bz2
import json

import pytest

from ua_classifier.cli import format_record, main
from ua_classifier.parser import parse
from ua_classifier.utils import UserAgent

IE11 = "Mozilla/5.0 (Windows NT 10.0; WOW64; Trident/7.0; rv:11.0)"
POSTMAN = "PostmanRuntime/6.7.1"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("FORMAT", "WORKERS", "VERBOSE", "PROGRESS", "INCLUDE_SOURCE"):
        monkeypatch.delenv("UA_CLASSIFIER_" + name, raising=False)


def run(capsys, *argv) -> list[str]:
    main(list(argv))
    return capsys.readouterr().out.splitlines()


def test_parse_json(capsys) -> None:
    (line,) = run(capsys, "parse", IE11)
    data = json.loads(line)
    assert data["os"] == {"family": "Windows 10", "major": 10, "minor": 0}
    assert data["client"]["family"] == "MSIE"
    assert "source" not in data


def test_parse_json_include_source(capsys) -> None:
    (line,) = run(capsys, "parse", "--include-source", POSTMAN)
    assert json.loads(line)["source"] == POSTMAN


@pytest.mark.parametrize(
    "output_format,expected",
    [
        ("text", ["Windows 10 MSIE 11.0", "Postman Runtime 6.7.1"]),
        ("short", ["Windows 10 MSIE", "Postman Runtime"]),
    ],
)
def test_parse_text_formats(capsys, output_format, expected) -> None:
    assert run(capsys, "parse", "-f", output_format, IE11, POSTMAN) == expected


def test_parse_tsv(capsys) -> None:
    header, row = run(capsys, "parse", "-f", "tsv", POSTMAN)
    assert header.split("\t") == list(UserAgent.COLUMNS)
    values = dict(zip(UserAgent.COLUMNS, row.split("\t")))
    assert values["user_agent"] == POSTMAN
    assert values["client_family"] == "Postman Runtime"
    assert values["os_family"] == "null"
    assert values["is_bot"] == "false"


def test_parse_input_file(capsys, tmp_path) -> None:
    path = tmp_path / "agents.txt.bz2"
    with bz2.open(path, "wt", encoding="utf-8") as f:
        f.write(f"{IE11}\n\n{POSTMAN}\n")
    assert run(capsys, "parse", "-f", "short", "--workers", "2", "-i", str(path)) == [
        "Windows 10 MSIE",
        "Postman Runtime",
    ]


def test_parse_output_file(capsys, tmp_path) -> None:
    target = tmp_path / "out.txt"
    assert run(capsys, "parse", "-f", "text", "-o", str(target), POSTMAN) == []
    assert target.read_text(encoding="utf-8") == "Postman Runtime 6.7.1\n"


def test_format_from_environment(capsys, monkeypatch) -> None:
    monkeypatch.setenv("UA_CLASSIFIER_FORMAT", "short")
    assert run(capsys, "parse", POSTMAN) == ["Postman Runtime"]


def test_missing_input_file(capsys, tmp_path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["parse", "-i", str(tmp_path / "missing.txt")])
    assert exc_info.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_enrich(capsys, tmp_path) -> None:
    source = tmp_path / "log.tsv"
    source.write_text(f"id\tuseragent\n1\t{POSTMAN}\n", encoding="utf-8")
    target = tmp_path / "enriched.tsv"
    main(["enrich", str(source), str(target)])
    header, row = target.read_text(encoding="utf-8").splitlines()
    assert header.split("\t")[:3] == ["id", "useragent", "device_family"]
    assert "Postman Runtime" in row.split("\t")


def test_enrich_missing_column(capsys, tmp_path) -> None:
    source = tmp_path / "log.tsv"
    source.write_text(f"id\tagent\n1\t{POSTMAN}\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        main(["enrich", str(source), str(tmp_path / "out.tsv"), "--column", "ua"])
    assert exc_info.value.code == 1


def test_format_record_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        format_record(parse(POSTMAN), "xml")


def test_tsv_booleans_match_enrich(capsys, tmp_path) -> None:
    bot = "Googlebot/2.1 (+http://www.google.com/bot.html)"
    _, row = run(capsys, "parse", "-f", "tsv", bot)
    values = dict(zip(UserAgent.COLUMNS, row.split("\t")))

    source = tmp_path / "log.tsv"
    source.write_text(f"useragent\n{bot}\n", encoding="utf-8")
    target = tmp_path / "enriched.tsv"
    main(["enrich", str(source), str(target)])
    header, enriched = target.read_text(encoding="utf-8").splitlines()
    columns = dict(zip(header.split("\t"), enriched.split("\t")))

    assert values["is_bot"] == columns["is_bot"] == "true"
    assert values["is_mobile"] == columns["is_mobile"] == "false"

import bz2

import pytest

from ua_classifier.utils.sources import count_lines, iter_user_agents, open_source

LINES = [
    "Mozilla/5.0 (Windows NT 10.0; WOW64; Trident/7.0; rv:11.0)",
    "",
    "PostmanRuntime/6.7.1",
    "   ",
    "curl/7.64.1",
]


def test_plain_file(tmp_path) -> None:
    path = tmp_path / "agents.txt"
    path.write_text("\n".join(LINES) + "\n", encoding="utf-8")
    with open_source(path) as stream:
        assert list(iter_user_agents(stream)) == [LINES[0], LINES[2], LINES[4]]
    assert count_lines(path) == 3


def test_bz2_file(tmp_path) -> None:
    path = tmp_path / "agents.txt.bz2"
    with bz2.open(path, "wt", encoding="utf-8") as f:
        f.write("\r\n".join(LINES))
    with open_source(path) as stream:
        assert list(iter_user_agents(stream)) == [LINES[0], LINES[2], LINES[4]]


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        with open_source(tmp_path / "missing.txt"):
            pass


def test_directory(tmp_path) -> None:
    with pytest.raises(ValueError):
        with open_source(tmp_path):
            pass

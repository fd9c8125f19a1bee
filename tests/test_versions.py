import pytest

from ua_classifier.models import ClientInfo, FamilyVersion
from ua_classifier.versions import parse_client, parse_fragment, render, split_fragment


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Chrome/89.0.4389.82", ("Chrome", 89, 0, 4389)),
        ("iOS/5_1_1", ("iOS", 5, 1, 1)),
        ("Opera/9.60", ("Opera", 9, 60, None)),
        ("Android/10", ("Android", 10, None, None)),
        ("Linux", ("Linux", None, None, None)),
        ("Mobile/9B206", ("Mobile", None, None, None)),
        ("iOS Firefox/14.0b12646", ("iOS Firefox", 14, None, None)),
        ("Name/1.x.3", ("Name", 1, None, None)),
        ("Name/", ("Name", None, None, None)),
        ("Name/1.2/3.4", ("Name", 1, 2, None)),
        ("", ("", None, None, None)),
    ],
)
def test_split_fragment(text, expected) -> None:
    assert split_fragment(text) == expected


def test_parse_fragment() -> None:
    assert parse_fragment("Mac OS X/11_2_3") == FamilyVersion("Mac OS X", 11, 2, 3)


def test_parse_client_keeps_language() -> None:
    client = parse_client("Opera/9.60", "en")
    assert client == ClientInfo("Opera", 9, 60, None, language="en")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Name/1.2.3", "Name 1.2.3"),
        ("Name/1.2", "Name 1.2"),
        ("Name/1", "Name 1"),
        ("Name", "Name"),
        ("Windows 10/10.0", "Windows 10"),
        ("Windows Vista/6.0", "Windows Vista"),
        ("Windows Media Player/11.0.5721", "Windows Media Player"),
    ],
)
def test_render(text, expected) -> None:
    assert render(parse_fragment(text)) == expected

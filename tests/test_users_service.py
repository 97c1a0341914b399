"""Unit tests for listing expression parsing in the users service."""

import pytest

from app.core.errors import ValidationAppError
from app.services.users_service import parse_search, parse_sort


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, ("name", False)),
        ("desc", ("name", True)),
        ("asc", ("name", False)),
        ("email", ("email", False)),
        ("email:desc", ("email", True)),
        ("name : desc", ("name", True)),
        ("NAME:ASC", ("name", False)),
    ],
)
def test_parse_sort(raw, expected) -> None:
    assert parse_sort(raw) == expected


@pytest.mark.parametrize("raw", ["password:asc", "name:sideways"])
def test_parse_sort_rejects_unknown(raw) -> None:
    with pytest.raises(ValidationAppError):
        parse_sort(raw)


def test_parse_search() -> None:
    assert parse_search(None) == (None, None)
    assert parse_search("name: Ann ") == ("name", "Ann")


@pytest.mark.parametrize("raw", ["ann", "name:", "role:admin"])
def test_parse_search_rejects_malformed(raw) -> None:
    with pytest.raises(ValidationAppError):
        parse_search(raw)

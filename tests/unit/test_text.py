"""Unit tests for slug and read-time helpers."""

from __future__ import annotations

import pytest

from utils.text import read_time, slugify, strip_html


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Hello World", "hello-world"),
        ("  Spaces   everywhere ", "spaces-everywhere"),
        ("C'est la vie!", "cest-la-vie"),
        ("a -- b", "a-b"),
        ("!!!", "post"),
        ("", "post"),
    ],
)
def test_slugify(title, expected) -> None:
    assert slugify(title) == expected


def test_slugify_caps_length() -> None:
    assert len(slugify("word " * 60)) <= 100


def test_slugify_custom_fallback() -> None:
    assert slugify("???", fallback="topic") == "topic"


def test_strip_html() -> None:
    assert strip_html("<p>Hello <b>there</b></p>").split() == ["Hello", "there"]


def test_read_time() -> None:
    assert read_time("") == 1
    assert read_time("word " * 200) == 1
    assert read_time("word " * 201) == 2
    assert read_time("<p>" + "word " * 450 + "</p>") == 3

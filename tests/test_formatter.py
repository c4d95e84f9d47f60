import json

import pytest

from respcheck.formatter import prettify


def test_object_is_expanded():
    assert prettify('{"a":1}') == '{\n  "a": 1\n}'


def test_short_array_stays_on_one_line():
    assert prettify("[1,2,3]") == "[1, 2, 3]"


def test_array_with_object_is_expanded():
    assert prettify('[{"a":1}]') == '[\n  {\n    "a": 1\n  }\n]'


def test_empty_array():
    assert prettify("[]") == "[]"


def test_long_array_is_split_one_item_per_line():
    text = json.dumps(["alpha", "bravo", "charlie", "delta", "echo"])
    lines = prettify(text).split("\n")
    assert lines[0] == "["
    assert lines[-1] == "]"
    assert all(line.startswith("  ") for line in lines[1:-1])
    assert len(lines) == 7


def test_nested_short_arrays_fit_on_one_line():
    result = prettify("[[1,2],[3]]")
    assert "\n" not in result
    assert json.loads(result) == [[1, 2], [3]]


@pytest.mark.parametrize(
    "text",
    [
        '["a","b"]',
        '{"k":[1,2,{"x":null}],"z":true}',
        json.dumps(["one very long string value", ["nested", "list"], 12345]),
        "42",
        '"plain"',
    ],
)
def test_layout_preserves_content(text):
    assert json.loads(prettify(text)) == json.loads(text)


def test_idempotent():
    text = json.dumps([["aaaaaaaaaa", "bbbbbbbbbb"], ["cccccccccc", "dddddddddd"]])
    once = prettify(text)
    assert prettify(once) == once


def test_accepts_bytes():
    assert prettify(b"[1]") == prettify("[1]")


def test_string_literals_keep_their_escapes():
    assert "\\u003c" in prettify('["a\\u003cb"]')


@pytest.mark.parametrize("text", ["[1,", "{1:2}", "[1] 2", "nope"])
def test_invalid_json_raises(text):
    with pytest.raises(ValueError):
        prettify(text)
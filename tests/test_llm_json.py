# tests/test_llm_json.py
import pytest

from interviewer.utils.llm_json import extract_json, find_object, require_array


def test_find_object_in_prose():
    text = 'Here you go: {"question": "Why?", "nested": {"a": [1, 2]}} Hope it helps!'
    assert find_object(text) == {"question": "Why?", "nested": {"a": [1, 2]}}


def test_find_object_skips_broken_braces():
    text = 'Thinking {not json} ... final answer {"question": "Q1"}'
    assert find_object(text) == {"question": "Q1"}


def test_find_object_strips_fences():
    assert find_object('```json\n{"a": 1}\n```') == {"a": 1}


@pytest.mark.parametrize("text", [None, "", "no json at all", "[1, 2, 3]", "null", "42"])
def test_find_object_returns_none(text):
    assert find_object(text) is None


def test_extract_json_prefers_first_structure():
    assert extract_json('Result: ["a", "b"] and {"x": 1}') == ["a", "b"]
    assert extract_json('{"x": 1} then ["a"]') == {"x": 1}


def test_extract_json_ignores_scalars():
    assert extract_json("null") == {}
    assert extract_json("true") == {}


def test_require_array():
    assert require_array('```\n["Q1"]\n```') == ["Q1"]
    with pytest.raises(ValueError):
        require_array('{"questions": ["Q1"]}')

import dataclasses

import pytest

import json_parser as jp
from json_values import JsonArray, JsonNumber, JsonObject, JsonString, to_python


def test_number_keeps_lexeme_beyond_float_range():
    value = jp.parse("1e400")
    assert value == JsonNumber("1e400")
    assert value.to_python() == float("inf")


def test_big_integer_is_exact():
    lexeme = "123456789012345678901234567890"
    value = jp.parse(lexeme)
    assert value.is_integer
    assert value.to_python() == 123456789012345678901234567890


@pytest.mark.parametrize("lexeme, expected", [("-0", 0), ("0.5", 0.5), ("1E2", 100.0), ("-3", -3)])
def test_number_to_python(lexeme, expected):
    number = JsonNumber(lexeme)
    assert number.to_python() == expected
    assert isinstance(number.to_python(), type(expected))


def test_object_accessors_with_duplicates():
    obj = jp.parse('{"a": 1, "b": 2, "a": 3}')
    assert len(obj) == 3
    assert obj.keys() == ["a", "b"]
    assert obj.get("a") == JsonNumber("3")
    assert obj.get_all("a") == [JsonNumber("1"), JsonNumber("3")]
    assert obj.get("missing") is None
    assert obj.get("missing", 0) == 0


def test_array_accessors():
    arr = jp.parse('["x", "y"]')
    assert len(arr) == 2
    assert arr[1] == JsonString("y")
    assert list(arr) == [JsonString("x"), JsonString("y")]


def test_values_are_immutable():
    arr = jp.parse("[1]")
    with pytest.raises(dataclasses.FrozenInstanceError):
        arr.items = ()


def test_to_python_last_key_wins():
    assert to_python(jp.parse('{"a": 1, "a": {"b": [null]}}')) == {"a": {"b": [None]}}


def test_to_python_rejects_foreign_objects():
    with pytest.raises(TypeError):
        to_python(JsonArray((object(),)))


def test_empty_containers():
    assert to_python(JsonArray()) == []
    assert to_python(JsonObject()) == {}


def test_loads_converts_full_default_depth():
    result = jp.loads("[" * 1000 + "]" * 1000)
    for _ in range(999):
        assert isinstance(result, list) and len(result) == 1
        result = result[0]
    assert result == []


def test_to_python_keeps_order_inside_deep_objects():
    doc = '{"k": ' * 1500 + '[1, {"a": 1, "a": 2}, "x"]' + "}" * 1500
    result = jp.loads(doc, max_depth=2000)
    for _ in range(1500):
        result = result["k"]
    assert result == [1, {"a": 2}, "x"]


@pytest.mark.parametrize("sign", ["", "-"])
def test_integers_past_the_str_digit_limit_convert_exactly(sign):
    value = jp.loads(sign + "1" * 5000)
    expected = (10 ** 5000 - 1) // 9
    assert value == (-expected if sign else expected)


def test_long_fraction_converts_to_float():
    assert jp.loads("0." + "1" * 5000) == pytest.approx(1 / 9)

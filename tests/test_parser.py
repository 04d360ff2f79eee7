import pytest

from emjson.action import FlowCode, Token
from emjson.data import DataType, JsonData, ParseStatus, State, TokenType
from emjson.parser import (
    IncompleteInputError,
    JsonStreamParser,
    JsonSyntaxError,
    ParseError,
    to_json,
)

EXAMPLE = (
    '{"configuration":{"nested_number":456.789,"nested_string":"I am nested!"},'
    '"items":[10,"Array element",true,null,{"nested_number":456.789,"nested_string":"I am nested!"}],'
    '"description":null,"enabled":true,"version":1,"name":"Example JSON"}'
)
PART_1 = (
    '{"configuration":{"nested_number":456.789,"nested_string":"I am nested!"},'
    '"items":[10,"Array element",true,null,'
)
PART_2 = (
    '{"nested_number":456.789,"nested_string":"I am nested!"}],'
    '"description":null,"enabled":true,"version":1,"name":"Example JSON"}'
)


@pytest.fixture
def parser():
    return JsonStreamParser()


def test_example_sequence(parser):
    parser.parse(EXAMPLE + EXAMPLE)
    parser.parse(EXAMPLE)
    parser.parse(PART_1)
    result = parser.parse(PART_2)
    assert len(result.objects) == 4
    assert result.parsed_len == 4
    assert result.objects[-1].as_object()["version"].as_number() == 1.0
    assert to_json(result.objects[-1]) == EXAMPLE


def test_round_trip_of_example(parser):
    result = parser.parse(EXAMPLE)
    assert result.status is ParseStatus.SUCCESS
    assert result.index == len(EXAMPLE)
    assert [to_json(obj) for obj in result.completed] == [EXAMPLE]


def test_split_input_matches_whole(parser):
    first = parser.parse(PART_1)
    assert first.parsed_len == 0
    assert not parser.is_complete
    second = parser.parse(PART_2)
    whole = JsonStreamParser().parse(EXAMPLE)
    assert second.completed == whole.completed
    assert parser.is_complete


def test_values_are_typed(parser):
    obj = parser.parse(EXAMPLE).completed[0].as_object()
    assert obj["description"].is_null()
    assert obj["enabled"].as_bool() is True
    assert obj["name"].as_string() == "Example JSON"
    items = obj["items"].as_array()
    assert items[0].as_number() == 10.0
    assert items[3].type is DataType.NULLVAL
    assert items[4].as_object()["nested_number"].as_number() == 456.789


def test_whitespace_is_ignored(parser):
    result = parser.parse('{ "a" :\t1 ,\n"b": false }\n')
    assert to_json(result.completed[0]) == '{"a":1,"b":false}'


def test_nested_and_empty_arrays(parser):
    text = '{"m":[[1,2],[3]],"e":[],"k":[{"x":[]}]}'
    result = parser.parse(text)
    assert to_json(result.completed[0]) == text
    assert result.completed[0].as_object()["e"].as_array() == []


def test_empty_key(parser):
    result = parser.parse('{"":1}')
    assert result.completed[0].as_object()[""].as_number() == 1.0


def test_string_escapes_are_kept_raw(parser):
    text = '{"a":"x\\"y"}'
    value = parser.parse(text).completed[0].as_object()["a"].as_string()
    assert value == text[6:-2]


@pytest.mark.parametrize(
    "text",
    ["[1]", "{}", '{"a":1,}', '{"a"}', '{"a":[1,]}', '{"a" "b"}', "}", '{"a":1}}'],
)
def test_syntax_errors(parser, text):
    with pytest.raises(JsonSyntaxError) as info:
        parser.parse(text)
    assert info.value.status is ParseStatus.JSON_SYNTAX_ERROR


def test_unknown_character(parser):
    text = '{"a":@}'
    with pytest.raises(IncompleteInputError) as info:
        parser.parse(text)
    assert info.value.index == text.index("@")
    assert info.value.status is ParseStatus.MORE_INPUT_OR_UNKNOWN_CHAR


def test_truncated_token_then_resume(parser):
    text = '{"a":"ab'
    with pytest.raises(ParseError) as info:
        parser.parse(text)
    assert info.value.index == text.index('"ab')
    result = parser.parse('{"a":"abc"}', info.value.index)
    assert result.completed[0].as_object()["a"].as_string() == "abc"


def test_reset_clears_state(parser):
    with pytest.raises(JsonSyntaxError):
        parser.parse('{"a":1,}')
    parser.reset()
    assert parser.objects == []
    assert parser.parsed_len == 0
    result = parser.parse('{"b":true}')
    assert result.parsed_len == 1
    assert result.completed[0].as_object()["b"].as_bool() is True


def test_action_type_check_returns_to_previous(parser):
    flow = parser.action(0, [Token(TokenType.COMMA, ",")], State.TYPE_CHECK)
    assert flow.code is FlowCode.BACK_TO_PREV
    assert flow.advance is False


def test_action_key_handler_rejects_number(parser):
    flow = parser.action(0, [Token(TokenType.NUMBER, "1")], State.KEY_HANDLER)
    assert flow.code is FlowCode.PANIC


def test_to_json_of_non_object_is_empty():
    assert to_json(JsonData("text")) == ""
    assert to_json(JsonData([1, 2])) == ""


def test_to_json_number_format():
    assert to_json(JsonData({"n": 1234567})) == '{"n":1.23457e+06}'


def test_to_json_escapes():
    assert to_json(JsonData({'k"': "a\\b"})) == '{"k\\"":"a\\\\b"}'


def test_to_json_mismatched_tags():
    assert to_json(JsonData({"x": JsonData(1.0, DataType.STRING)})) == '{"x":"<ERROR:VariantAccess>"}'
    assert to_json(JsonData([], DataType.OBJECT)) == '{"<ERROR:TopLevelVariantAccess>":"true"}'


def test_round_trip_of_built_value(parser):
    data = JsonData({"a": [True, None, "s"], "b": {"c": 2.5}})
    text = to_json(data)
    assert parser.parse(text).completed == [data]
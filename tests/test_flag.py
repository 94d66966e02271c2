from __future__ import annotations

import pytest

from ark_client.errors import MalformedEntryError
from ark_client.flag import KeyValueMap, StringArray, describe_default


def test_string_array_empty_input_is_empty_list() -> None:
    assert StringArray().parse("") == []


def test_string_array_keeps_order_and_duplicates() -> None:
    assert StringArray().parse("x,y,x") == ["x", "y", "x"]


def test_string_array_custom_delimiter() -> None:
    flag = StringArray(entry_delimiter=";")
    assert flag.parse("a;b,c") == ["a", "b,c"]
    assert flag.serialize(["a", "b,c"]) == "a;b,c"


def test_map_last_duplicate_key_wins() -> None:
    assert KeyValueMap().parse("a=1,b=2,a=3") == {"a": "3", "b": "2"}


def test_map_with_colon_key_value_delimiter() -> None:
    flag = KeyValueMap().with_entry_delimiter(",").with_key_value_delimiter(":")
    assert flag.parse("a:1,b:2") == {"a": "1", "b": "2"}


def test_map_splits_on_first_delimiter_only() -> None:
    assert KeyValueMap().parse("url=http://x?y=z") == {"url": "http://x?y=z"}


def test_map_entry_without_delimiter_is_malformed() -> None:
    with pytest.raises(MalformedEntryError, match="'b'"):
        KeyValueMap().parse("a=1,b")


def test_map_colon_entry_rejected_with_default_delimiter() -> None:
    with pytest.raises(MalformedEntryError):
        KeyValueMap().parse("src:dst")


def test_map_empty_input_is_empty_mapping() -> None:
    assert KeyValueMap().parse("") == {}


def test_map_serialize_is_sorted_and_uses_delimiters() -> None:
    flag = KeyValueMap(key_value_delimiter=":")
    assert flag.serialize({"b": "2", "a": "1"}) == "a:1,b:2"


@pytest.mark.parametrize(
    ("flag", "raw"),
    [
        (StringArray(), ""),
        (StringArray(), "ns1,ns2,ns1"),
        (KeyValueMap(), "a=1,b=2,a=3"),
        (KeyValueMap(), "empty=,k=v=w"),
        (KeyValueMap(key_value_delimiter=":"), "src:dst,other:moved"),
    ],
)
def test_parse_serialize_parse_is_stable(flag, raw) -> None:
    parsed = flag.parse(raw)
    assert flag.parse(flag.serialize(parsed)) == parsed


def test_flag_instances_are_argparse_type_callables() -> None:
    assert KeyValueMap()("a=1") == {"a": "1"}
    assert StringArray()("a,b") == ["a", "b"]


def test_describe_default_only_mentions_non_empty_defaults() -> None:
    flag = KeyValueMap()
    assert describe_default("labels", flag, {}) == "labels"
    assert describe_default("labels", flag, {"team": "infra"}) == 'labels (default "team=infra")'

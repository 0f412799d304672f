import warnings

import pytest

from tsbind.attrs import (
    EnumAttr,
    FieldAttr,
    StructAttr,
    Tagged,
    TaggedKind,
    parse_args,
)
from tsbind.errors import DeriveError
from tsbind.naming import Inflection


def test_parse_args_pairs_and_flags():
    assert parse_args('rename = "Foo", export') == [("rename", "Foo"), ("export", None)]


def test_parse_args_raw_string():
    assert parse_args('type = r"0 | 1 | 2"') == [("type", "0 | 1 | 2")]


def test_parse_args_escaped_quote():
    assert parse_args(r'rename = "a\"b"') == [("rename", 'a"b')]


@pytest.mark.parametrize(
    "text,message",
    [
        ("", "expected identifier"),
        ("export,", "expected identifier"),
        ("rename = 1", "expected string"),
        ("rename = true", "expected string"),
        ("export inline", "expected `,`"),
    ],
)
def test_parse_args_errors(text, message):
    with pytest.raises(DeriveError, match=message):
        parse_args(text)


def test_struct_ts_attributes():
    attr = StructAttr.from_attrs(['#[ts(export, export_to = "bindings/User.ts")]', 'ts(rename_all = "UPPERCASE")'])
    assert attr.export is True
    assert attr.export_to == "bindings/User.ts"
    assert attr.rename_all is Inflection.UPPER


def test_ts_takes_precedence_over_serde():
    attr = StructAttr.from_attrs(['serde(rename = "Bar")', 'ts(rename = "Foo")'])
    assert attr.rename == "Foo"


def test_serde_struct_tag():
    attr = StructAttr.from_attrs(['serde(tag = "type")'])
    assert attr.tag == "type"


def test_other_attributes_are_ignored():
    attr = StructAttr.from_attrs(["derive(Debug)", 'doc = "text"', "#[allow(dead_code)]"])
    assert attr == StructAttr()


def test_unknown_ts_key_raises():
    with pytest.raises(DeriveError, match="unexpected attribute"):
        StructAttr.from_attrs(['ts(tag = "x")'])


def test_flag_with_value_raises():
    with pytest.raises(DeriveError):
        FieldAttr.from_attrs(['ts(inline = "yes")'])


def test_invalid_inflection_in_ts_raises():
    with pytest.raises(DeriveError, match="invalid inflection"):
        EnumAttr.from_attrs(['ts(rename_all = "kebab")'])


def test_unknown_serde_attribute_warns_and_is_ignored():
    with pytest.warns(UserWarning, match="failed to parse serde attribute"):
        attr = StructAttr.from_attrs(["serde(deny_unknown_fields)", 'serde(rename = "x")'])
    assert attr.rename == "x"


def test_serde_default_is_silent():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        attr = StructAttr.from_attrs(["serde(default)", 'serde(default = "make")'])
    assert attr == StructAttr()


def test_struct_merge_first_wins_and_flags_combine():
    first = StructAttr(rename="A")
    first.merge(StructAttr(rename="B", export=True, tag="kind"))
    assert first.rename == "A"
    assert first.export is True
    assert first.tag == "kind"


def test_enum_tagging_default_is_external():
    assert EnumAttr.from_attrs([]).tagged() == Tagged(TaggedKind.EXTERNALLY)


def test_enum_internal_tag():
    attr = EnumAttr.from_attrs(['serde(tag = "kind")'])
    assert attr.tagged() == Tagged(TaggedKind.INTERNALLY, tag="kind")


def test_enum_adjacent_tag():
    attr = EnumAttr.from_attrs(['serde(tag = "kind", content = "data")'])
    assert attr.tagged() == Tagged(TaggedKind.ADJACENTLY, tag="kind", content="data")


def test_enum_untagged():
    attr = EnumAttr.from_attrs(["serde(untagged)"])
    assert attr.tagged().kind is TaggedKind.UNTAGGED


@pytest.mark.parametrize(
    "attr,message",
    [
        (EnumAttr(untagged=True, tag="t"), "untagged cannot be used with tag"),
        (EnumAttr(untagged=True, content="c"), "untagged cannot be used with content"),
        (EnumAttr(content="c"), "content cannot be used without tag"),
    ],
)
def test_enum_tagging_conflicts(attr, message):
    with pytest.raises(DeriveError, match=message):
        attr.tagged()


def test_enum_rename_rules():
    attr = EnumAttr.from_attrs(['ts(rename_all = "lowercase")', 'ts(rename = "SimpleEnum")'])
    assert attr.rename == "SimpleEnum"
    assert attr.rename_all is Inflection.LOWER


def test_field_ts_attributes():
    attr = FieldAttr.from_attrs(['ts(type = "string", rename = "bb", inline, optional)'])
    assert attr.type_override == "string"
    assert attr.rename == "bb"
    assert attr.inline and attr.optional
    assert not attr.skip and not attr.flatten


@pytest.mark.parametrize(
    "predicate,optional",
    [("Option::is_none", True), ("Vec::is_empty", False)],
)
def test_field_skip_serializing_if(predicate, optional):
    attr = FieldAttr.from_attrs([f'serde(skip_serializing_if = "{predicate}")'])
    assert attr.optional is optional


@pytest.mark.parametrize("key", ["skip", "skip_serializing", "skip_deserializing"])
def test_field_serde_skips(key):
    assert FieldAttr.from_attrs([f"serde({key})"]).skip is True


def test_field_serde_rename_and_flatten():
    attr = FieldAttr.from_attrs(['serde(rename = "a/b")', "serde(flatten)"])
    assert attr.rename == "a/b"
    assert attr.flatten is True
from __future__ import annotations

from dataclasses import dataclass

import pytest

from tsbind.core import (
    BOOL,
    BYTES,
    F64,
    I32,
    I64,
    LOCAL,
    NAIVE_DATE_TIME,
    STRING,
    U8,
    U32,
    UNIT,
    UTC,
    Arc,
    Box,
    BTreeMap,
    BTreeSet,
    Cell,
    Cow,
    Date,
    DateTime,
    Dependency,
    FixedArray,
    HashMap,
    HashSet,
    Option,
    Primitive,
    Range,
    RangeInclusive,
    Rc,
    RefCell,
    TS,
    Tuple,
    Vec,
)
from tsbind.export import NOTE


@dataclass(frozen=True)
class Named(TS):
    label: str
    location: str | None = "bindings/Named.ts"

    @property
    def export_location(self) -> str | None:
        return self.location

    def name(self) -> str:
        return self.label

    def inline(self) -> str:
        return "{ x: number, }"

    def decl(self) -> str:
        return f"type {self.label} = string;"

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False


# tuple.rs


def test_tuple_name():
    assert Tuple(STRING, I32, Tuple(I32, I32)).name() == "[string, number, [number, number]]"


def test_tuple_decl_fails():
    with pytest.raises(TypeError):
        Tuple(STRING, I32, Tuple(I32, I32)).decl()


def test_tuple_size_limits():
    with pytest.raises(ValueError):
        Tuple()
    with pytest.raises(ValueError):
        Tuple(*([I32] * 11))


# arrays.rs


def test_free_array():
    assert FixedArray(STRING, 10).inline() == "Array<string>"


# generic_fields.rs


def test_alias():
    assert Vec(STRING).inline() == "Array<string>"


def test_alias_nested():
    assert Vec(Vec(STRING)).inline() == "Array<Array<string>>"


def test_cow_in_vec():
    assert Vec(Cow(I32)).inline() == "Array<number>"


# primitives and containers


@pytest.mark.parametrize(
    ("ty", "expected"),
    [(U8, "number"), (F64, "number"), (I64, "bigint"), (BOOL, "boolean"), (UNIT, "null")],
)
def test_primitive_names(ty, expected):
    assert ty.name() == expected
    assert ty.inline() == expected
    assert ty.dependencies() == []


def test_primitive_rejects_type_args():
    with pytest.raises(ValueError):
        I32.name_with_type_args(["string"])
    assert I32.name_with_type_args([]) == "number"


def test_option():
    assert Option(Vec(U32)).inline() == "Array<number> | null"
    assert Option(STRING).name_with_type_args(["string"]) == "string | null"
    with pytest.raises(TypeError):
        Option(STRING).name()


def test_vec_wrong_arity():
    with pytest.raises(ValueError):
        Vec(STRING).name_with_type_args(["a", "b"])


def test_maps():
    assert HashMap(STRING, I32).inline() == "Record<string, number>"
    assert BTreeMap(STRING, BOOL).name_with_type_args(["string", "boolean"]) == (
        "Record<string, boolean>"
    )
    assert HashMap(STRING, I32).type_args() == [STRING, I32]


def test_sets_shadow_vec():
    assert HashSet(STRING).inline() == "Array<string>"
    assert BTreeSet(I32).name_with_type_args(["number"]) == "Array<number>"
    assert HashSet(STRING) != Vec(STRING)


def test_ranges():
    assert Range(U32).name_with_type_args(["number"]) == "{ start: number, end: number, }"
    assert RangeInclusive(U32).name_with_type_args(["x"]) == "{ start: x, end: x, }"
    with pytest.raises(TypeError, match="Range::name"):
        Range(U32).name()
    with pytest.raises(TypeError, match="RangeInclusive::name"):
        RangeInclusive(U32).name()


def test_wrappers_delegate():
    inner = Vec(STRING)
    for wrapper in (Box(inner), Arc(inner), Rc(inner), Cell(inner), RefCell(inner)):
        assert wrapper.inline() == "Array<string>"
        assert wrapper.name() == "Array"
        assert wrapper.transparent() is True
        assert wrapper.name_with_type_args(["X"]) == "X"


def test_wrapper_wrong_arity():
    with pytest.raises(ValueError):
        Box(STRING).name_with_type_args([])


def test_chrono():
    assert NAIVE_DATE_TIME.inline() == "string"
    assert DateTime(UTC).name_with_type_args([UTC.name()]) == "string"
    assert Date(LOCAL).inline() == "string"
    assert UTC.name() == ""


def test_bytes_have_no_type_args():
    assert BYTES.type_args() == []
    assert BYTES.name() == "Array"
    assert Vec(U8).type_args() == [U8]


# dependencies


def test_dependency_from_exportable():
    named = Named("Inner")
    dep = Dependency.from_ty(named)
    assert dep == Dependency(type_id=named, ts_name="Inner", exported_to="bindings/Named.ts")


def test_dependency_from_unexportable():
    assert Dependency.from_ty(STRING) is None
    assert Dependency.from_ty(Option(STRING)) is None


def test_container_dependencies():
    named = Named("Inner")
    dep = Dependency.from_ty(named)
    assert Vec(named).dependencies() == [dep]
    assert HashMap(STRING, named).dependencies() == [dep]
    assert Tuple(named, I32, named).dependencies() == [dep, dep]
    assert Range(named).dependencies() == [dep]
    assert Vec(I32).dependencies() == []


def test_default_name_with_type_args():
    result = TS.name_with_type_args(Named("Generic"), ["number", "string"])
    assert result == "Generic<number, string>"


def test_default_inline_flattened_fails():
    with pytest.raises(TypeError, match="cannot be flattened"):
        Primitive("string").inline_flattened()


# exporting


def test_export_to_string():
    out = TS.export_to_string(Named("Thing"))
    assert out == NOTE + "\n" + "export type Thing = string;"


def test_export_to_path(tmp_path):
    target = tmp_path / "out" / "Thing.ts"
    TS.export_to(Named("Thing"), target)
    assert target.read_text(encoding="utf-8") == NOTE + "\nexport type Thing = string;"
    assert target.read_text(encoding="utf-8") == TS.export_to_string(Named("Thing"))
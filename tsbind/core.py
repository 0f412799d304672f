"""TypeScript representations of built-in types, and the interface all types share."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import ClassVar

from tsbind.export import export_type, export_type_to, export_type_to_string


class TS(ABC):
    """A type which can be represented in TypeScript.

    Instances describe types; ``export_location`` is where the type is written
    when exported, or ``None`` if it cannot be exported.
    """

    export_location: ClassVar[str | None] = None

    @property
    def type_id(self) -> Hashable:
        """A value identifying this type."""
        return self

    def decl(self) -> str:
        """Declaration of this type, e.g. ``interface User { ... }``."""
        raise TypeError(f"{self.name()} cannot be declared")

    @abstractmethod
    def name(self) -> str:
        """Name of this type in TypeScript."""

    def name_with_type_args(self, args: Sequence[str]) -> str:
        """Name of this type in TypeScript, with the given type arguments."""
        return f"{self.name()}<{', '.join(args)}>"

    def inline(self) -> str:
        """The definition of this type written in place, e.g. ``{ user_id: number, }``."""
        raise TypeError(f"{self.name()} cannot be inlined")

    def inline_flattened(self) -> str:
        """The fields of this type, for flattening into another interface."""
        raise TypeError(f"{self.name()} cannot be flattened")

    @abstractmethod
    def dependencies(self) -> list[Dependency]:
        """Types this type depends on, for resolving imports when exporting."""

    @abstractmethod
    def transparent(self) -> bool:
        """Whether this type only wraps others, like tuples or lists."""

    def type_args(self) -> list[TS]:
        """The generic type arguments this type is written with."""
        return []

    def export(self) -> None:
        """Export this type to its configured location."""
        export_type(self)

    def export_to(self, path: str | os.PathLike[str]) -> None:
        """Export this type to ``path``, ignoring its configured location."""
        export_type_to(self, path)

    def export_to_string(self) -> str:
        """Return the generated bindings for this type."""
        return export_type_to_string(self)


@dataclass(frozen=True)
class Dependency:
    """A TypeScript type which another type depends upon."""

    type_id: Hashable
    ts_name: str
    exported_to: str

    @classmethod
    def from_ty(cls, ty: TS) -> Dependency | None:
        """Build a dependency on ``ty``, or ``None`` if ``ty`` cannot be exported."""
        exported_to = ty.export_location
        if exported_to is None:
            return None
        return cls(type_id=ty.type_id, ts_name=ty.name(), exported_to=exported_to)


def _deps_of(*types: TS) -> list[Dependency]:
    return [dep for dep in map(Dependency.from_ty, types) if dep is not None]


def _check_arity(kind: str, args: Sequence[str], expected: int) -> None:
    if len(args) != expected:
        raise ValueError(f"called {kind}::name_with_type_args with {len(args)} args")


@dataclass(frozen=True)
class Primitive(TS):
    """A type with a fixed TypeScript name and no type arguments."""

    ts_name: str
    label: str = ""

    def name(self) -> str:
        return self.ts_name

    def name_with_type_args(self, args: Sequence[str]) -> str:
        if args:
            raise ValueError("called name_with_type_args on primitive")
        return self.ts_name

    def inline(self) -> str:
        return self.ts_name

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False


@dataclass(frozen=True)
class _TimeZone(TS):
    """A time zone; it only appears as a type argument and has an empty name."""

    label: str

    def name(self) -> str:
        return ""

    def inline(self) -> str:
        return ""

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False


@dataclass(frozen=True)
class DateTime(TS):
    """A timestamp in a time zone, represented as a string."""

    timezone: TS

    def name(self) -> str:
        return "string"

    def name_with_type_args(self, args: Sequence[str]) -> str:
        return self.name()

    def inline(self) -> str:
        return "string"

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False

    def type_args(self) -> list[TS]:
        return [self.timezone]


@dataclass(frozen=True)
class Date(DateTime):
    """A date in a time zone, represented as a string."""


@dataclass(frozen=True)
class Option(TS):
    """A value which may be absent: ``T | null``."""

    inner: TS

    def name(self) -> str:
        raise TypeError("Option has no name of its own; use name_with_type_args")

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _check_arity("Option", args, 1)
        return f"{args[0]} | null"

    def inline(self) -> str:
        return f"{self.inner.inline()} | null"

    def dependencies(self) -> list[Dependency]:
        return _deps_of(self.inner)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> list[TS]:
        return [self.inner]


@dataclass(frozen=True)
class Vec(TS):
    """A list: ``Array<T>``."""

    inner: TS

    def name(self) -> str:
        return "Array"

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _check_arity("Vec", args, 1)
        return f"Array<{args[0]}>"

    def inline(self) -> str:
        return f"Array<{self.inner.inline()}>"

    def dependencies(self) -> list[Dependency]:
        return _deps_of(self.inner)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> list[TS]:
        return [self.inner]


@dataclass(frozen=True)
class HashSet(Vec):
    """A set, represented like a list."""


@dataclass(frozen=True)
class BTreeSet(Vec):
    """An ordered set, represented like a list."""


@dataclass(frozen=True)
class IndexSet(Vec):
    """An insertion-ordered set, represented like a list."""


@dataclass(frozen=True)
class FixedArray(Vec):
    """An array of fixed length, represented like a list."""

    length: int


@dataclass(frozen=True)
class _Bytes(Vec):
    """A byte buffer, represented like a list of numbers."""

    def type_args(self) -> list[TS]:
        return []


@dataclass(frozen=True)
class HashMap(TS):
    """A map: ``Record<K, V>``."""

    key: TS
    value: TS

    def name(self) -> str:
        return "Record"

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _check_arity("HashMap", args, 2)
        return f"Record<{args[0]}, {args[1]}>"

    def inline(self) -> str:
        return f"Record<{self.key.inline()}, {self.value.inline()}>"

    def dependencies(self) -> list[Dependency]:
        return _deps_of(self.key, self.value)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> list[TS]:
        return [self.key, self.value]


@dataclass(frozen=True)
class BTreeMap(HashMap):
    """An ordered map, represented like a map."""


@dataclass(frozen=True)
class IndexMap(HashMap):
    """An insertion-ordered map, represented like a map."""


@dataclass(frozen=True)
class Range(TS):
    """A half-open range: ``{ start: T, end: T, }``."""

    inner: TS

    _kind: ClassVar[str] = "Range"

    def name(self) -> str:
        raise TypeError(f"called {self._kind}::name - Did you use a type alias?")

    def name_with_type_args(self, args: Sequence[str]) -> str:
        _check_arity(self._kind, args, 1)
        return f"{{ start: {args[0]}, end: {args[0]}, }}"

    def dependencies(self) -> list[Dependency]:
        return _deps_of(self.inner)

    def transparent(self) -> bool:
        return True

    def type_args(self) -> list[TS]:
        return [self.inner]


@dataclass(frozen=True)
class RangeInclusive(Range):
    """A closed range: ``{ start: T, end: T, }``."""

    _kind: ClassVar[str] = "RangeInclusive"


@dataclass(frozen=True, init=False)
class Tuple(TS):
    """A tuple of one to ten elements: ``[A, B, ...]``."""

    elements: tuple[TS, ...]

    def __init__(self, *elements: TS) -> None:
        if not 1 <= len(elements) <= 10:
            raise ValueError(f"tuples have 1 to 10 elements, not {len(elements)}")
        object.__setattr__(self, "elements", tuple(elements))

    def name(self) -> str:
        return f"[{', '.join(element.name() for element in self.elements)}]"

    def inline(self) -> str:
        return f"[{', '.join(element.inline() for element in self.elements)}]"

    def dependencies(self) -> list[Dependency]:
        return _deps_of(*self.elements)

    def transparent(self) -> bool:
        return True


@dataclass(frozen=True)
class Wrapper(TS):
    """A container which is represented exactly like the type it holds."""

    inner: TS

    def name(self) -> str:
        return self.inner.name()

    def name_with_type_args(self, args: Sequence[str]) -> str:
        if len(args) != 1:
            raise ValueError(f"expected 1 type argument, got {len(args)}")
        return args[0]

    def inline(self) -> str:
        return self.inner.inline()

    def inline_flattened(self) -> str:
        return self.inner.inline_flattened()

    def dependencies(self) -> list[Dependency]:
        return self.inner.dependencies()

    def transparent(self) -> bool:
        return self.inner.transparent()

    def type_args(self) -> list[TS]:
        return [self.inner]


@dataclass(frozen=True)
class Box(Wrapper):
    """A heap allocation."""


@dataclass(frozen=True)
class Arc(Wrapper):
    """A shared, thread-safe reference."""


@dataclass(frozen=True)
class Rc(Wrapper):
    """A shared reference."""


@dataclass(frozen=True)
class Cow(Wrapper):
    """A borrowed or owned value."""


@dataclass(frozen=True)
class Cell(Wrapper):
    """A mutable cell."""


@dataclass(frozen=True)
class RefCell(Wrapper):
    """A mutable cell with borrow checking."""


@dataclass(frozen=True)
class Mutex(Wrapper):
    """A value behind a lock."""


@dataclass(frozen=True)
class Weak(Wrapper):
    """A weak reference."""


@dataclass(frozen=True)
class PhantomData(Wrapper):
    """A marker for an unused type parameter."""


U8 = Primitive("number", "u8")
I8 = Primitive("number", "i8")
U16 = Primitive("number", "u16")
I16 = Primitive("number", "i16")
U32 = Primitive("number", "u32")
I32 = Primitive("number", "i32")
F32 = Primitive("number", "f32")
F64 = Primitive("number", "f64")
USIZE = Primitive("number", "usize")
ISIZE = Primitive("number", "isize")
U64 = Primitive("bigint", "u64")
I64 = Primitive("bigint", "i64")
U128 = Primitive("bigint", "u128")
I128 = Primitive("bigint", "i128")
BOOL = Primitive("boolean", "bool")
PATH = Primitive("string", "Path")
PATH_BUF = Primitive("string", "PathBuf")
STRING = Primitive("string", "String")
STR = Primitive("string", "str")
UNIT = Primitive("null", "()")

NAIVE_DATE_TIME = Primitive("string", "NaiveDateTime")
NAIVE_DATE = Primitive("string", "NaiveDate")
NAIVE_TIME = Primitive("string", "NaiveTime")
DURATION = Primitive("string", "Duration")
UTC = _TimeZone("Utc")
LOCAL = _TimeZone("Local")
FIXED_OFFSET = _TimeZone("FixedOffset")

BIG_DECIMAL = Primitive("string", "BigDecimal")
ADDRESS = Primitive("string", "Address")
U256 = Primitive("string", "U256")
UUID = Primitive("string", "Uuid")
BSON_UUID = Primitive("string", "bson::Uuid")
ORDERED_F32 = Primitive("number", "OrderedFloat<f32>")
ORDERED_F64 = Primitive("number", "OrderedFloat<f64>")
BYTES = _Bytes(U8)
BYTES_MUT = _Bytes(Primitive("number", "u8 (mut)"))
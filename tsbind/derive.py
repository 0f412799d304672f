"""Deriving TypeScript declarations for user-defined structs."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from tsbind.attrs import FieldAttr, StructAttr
from tsbind.core import TS, Dependency, FixedArray, Option, Tuple, Vec
from tsbind.errors import DeriveError
from tsbind.naming import Inflection, raw_name_to_ts_field, to_ts_ident

Render = Callable[[], str]


def _constant(text: str) -> Render:
    return lambda: text


@dataclass(frozen=True)
class TypeParam(TS):
    """A generic type parameter, optionally with a default type."""

    ident: str
    default: TS | None = None

    def name(self) -> str:
        return self.ident

    def inline(self) -> str:
        return self.ident

    def dependencies(self) -> list[Dependency]:
        return []

    def transparent(self) -> bool:
        return False


@dataclass(frozen=True)
class Field:
    """A struct field; ``name`` is ``None`` for the fields of tuple structs."""

    name: str | None
    ty: Any
    attrs: Sequence[str] = ()


class Dependencies:
    """Sources of dependencies, collected while deriving and resolved on demand."""

    def __init__(self) -> None:
        self._sources: list[Callable[[], list[Dependency]]] = []

    def append_from(self, ty: TS) -> None:
        """Add all dependencies of ``ty``."""
        self._sources.append(ty.dependencies)

    def push_or_append_from(self, ty: TS) -> None:
        """Add ``ty`` itself, or its dependencies if it is transparent."""

        def collect() -> list[Dependency]:
            if ty.transparent():
                return ty.dependencies()
            dependency = Dependency.from_ty(ty)
            return [] if dependency is None else [dependency]

        self._sources.append(collect)

    def append(self, other: Dependencies) -> None:
        """Add everything ``other`` collects."""
        self._sources.append(other.resolve)

    def resolve(self) -> list[Dependency]:
        """Return the dependencies, in the order they were added."""
        return [dependency for source in self._sources for dependency in source()]


class Derived(TS):
    """A TypeScript type derived from a struct or enum definition."""

    def __init__(
        self,
        name: str,
        *,
        inline: Render,
        decl: Render,
        dependencies: Dependencies,
        inline_flattened: Render | None = None,
        generics: Sequence[TypeParam] = (),
        export: bool = False,
        export_to: str | None = None,
    ) -> None:
        self.ts_name = name
        self._inline = inline
        self._decl = decl
        self._inline_flattened = inline_flattened
        self.deps = dependencies
        self.generics = tuple(generics)
        self.auto_export = export
        self.export_target = export_to

    def __repr__(self) -> str:
        return f"Derived({self.ts_name!r})"

    @property
    def export_location(self) -> str:  # type: ignore[override]
        """Where this type is written when exported."""
        target = self.export_target
        if target is None:
            return f"bindings/{self.ts_name}.ts"
        if target.endswith("/"):
            return f"{target}{self.ts_name}.ts"
        return target

    @property
    def flattenable(self) -> bool:
        """Whether the fields of this type can be flattened into another."""
        return self._inline_flattened is not None

    def name(self) -> str:
        return self.ts_name

    def inline(self) -> str:
        return self._inline()

    def inline_flattened(self) -> str:
        if self._inline_flattened is None:
            raise TypeError(f"{self.ts_name} cannot be flattened")
        return self._inline_flattened()

    def decl(self) -> str:
        return self._decl()

    def dependencies(self) -> list[Dependency]:
        return self.deps.resolve()

    def transparent(self) -> bool:
        return False

    def of(self, *args: TS) -> Applied:
        """This type with the given generic type arguments."""
        required = sum(1 for param in self.generics if param.default is None)
        if not required <= len(args) <= len(self.generics):
            raise TypeError(
                f"{self.ts_name} takes {required} to {len(self.generics)} "
                f"type arguments, not {len(args)}"
            )
        return Applied(self, tuple(args))


@dataclass(frozen=True)
class Applied(TS):
    """A derived generic type together with its type arguments."""

    derived: Derived
    arguments: tuple[TS, ...]

    @property
    def export_location(self) -> str:  # type: ignore[override]
        return self.derived.export_location

    def name(self) -> str:
        return self.derived.name()

    def inline(self) -> str:
        return self.derived.inline()

    def inline_flattened(self) -> str:
        return self.derived.inline_flattened()

    def decl(self) -> str:
        return self.derived.decl()

    def dependencies(self) -> list[Dependency]:
        return self.derived.dependencies()

    def transparent(self) -> bool:
        return False

    def type_args(self) -> list[TS]:
        return list(self.arguments)


def format_generics(dependencies: Dependencies, generics: Sequence[TypeParam]) -> str:
    """Format type parameters as ``<A, B = default>``, or ``""`` if there are none."""
    if not generics:
        return ""
    params = [
        param.ident
        if param.default is None
        else f"{param.ident} = {format_type(param.default, dependencies, generics)}"
        for param in generics
    ]
    return f"<{', '.join(params)}>"


def format_type(ty: TS, dependencies: Dependencies, generics: Sequence[TypeParam]) -> str:
    """Return how ``ty`` is referred to, recording what it depends on."""
    if isinstance(ty, TypeParam) and any(param.ident == ty.ident for param in generics):
        return ty.ident
    if isinstance(ty, FixedArray):
        return format_type(Vec(ty.inner), dependencies, generics)
    if isinstance(ty, Tuple):
        tuple_struct = type_def(
            StructAttr(), "_", [Field(None, element) for element in ty.elements], generics
        )
        dependencies.append(tuple_struct.deps)
        return tuple_struct.inline()

    dependencies.push_or_append_from(ty)
    type_args = ty.type_args()
    if not type_args:
        return ty.name()
    return ty.name_with_type_args(
        [format_type(arg, dependencies, generics) for arg in type_args]
    )


def _make(
    attr: StructAttr,
    name: str,
    generics: Sequence[TypeParam],
    dependencies: Dependencies,
    inline: Render,
    decl: Render,
    inline_flattened: Render | None = None,
) -> Derived:
    return Derived(
        name,
        inline=inline,
        decl=decl,
        dependencies=dependencies,
        inline_flattened=inline_flattened,
        generics=generics,
        export=attr.export,
        export_to=attr.export_to,
    )


def _extract_option_argument(ty: Any) -> TS:
    if not isinstance(ty, Option):
        raise DeriveError("`optional` can only be used on an Option<T> type")
    return ty.inner


def _named_field(
    field: Field,
    dependencies: Dependencies,
    rename_all: Inflection | None,
    generics: Sequence[TypeParam],
) -> Render | None:
    attr = FieldAttr.from_attrs(field.attrs)
    if attr.skip:
        return None

    if attr.optional:
        ty, annotation = _extract_option_argument(field.ty), "?"
    else:
        ty, annotation = field.ty, ""

    if attr.flatten:
        if attr.type_override is not None:
            raise DeriveError("`type` is not compatible with `flatten`")
        if attr.rename is not None:
            raise DeriveError("`rename` is not compatible with `flatten`")
        if attr.inline:
            raise DeriveError("`inline` is not compatible with `flatten`")
        dependencies.append_from(ty)
        return ty.inline_flattened

    if attr.type_override is not None:
        formatted = _constant(attr.type_override)
    elif attr.inline:
        dependencies.append_from(ty)
        formatted = ty.inline
    else:
        formatted = _constant(format_type(ty, dependencies, generics))

    field_name = to_ts_ident(field.name or "")
    if attr.rename is not None:
        name = attr.rename
    elif rename_all is not None:
        name = rename_all.apply(field_name)
    else:
        name = field_name
    valid_name = raw_name_to_ts_field(name)
    return lambda: f"{valid_name}{annotation}: {formatted()},"


def _named(
    attr: StructAttr, name: str, fields: Sequence[Field], generics: Sequence[TypeParam]
) -> Derived:
    dependencies = Dependencies()
    parts: list[Render] = []
    if attr.tag is not None:
        parts.append(_constant(f'{attr.tag}: "{name}",'))
    for field in fields:
        part = _named_field(field, dependencies, attr.rename_all, generics)
        if part is not None:
            parts.append(part)
    generic_args = format_generics(dependencies, generics)

    def fields_text() -> str:
        return " ".join(part() for part in parts)

    def inline() -> str:
        return f"{{ {fields_text()} }}"

    def decl() -> str:
        return f"interface {name}{generic_args} {inline()}"

    return _make(attr, name, generics, dependencies, inline, decl, fields_text)


def _newtype(
    attr: StructAttr, name: str, field: Field, generics: Sequence[TypeParam]
) -> Derived:
    if attr.rename_all is not None:
        raise DeriveError("`rename_all` is not applicable to newtype structs")
    if attr.tag is not None:
        raise DeriveError("`tag` is not applicable to newtype structs")
    field_attr = FieldAttr.from_attrs(field.attrs)
    if field_attr.rename is not None:
        raise DeriveError("`rename` is not applicable to newtype fields")
    if field_attr.skip:
        raise DeriveError("`skip` is not applicable to newtype fields")
    if field_attr.optional:
        raise DeriveError("`optional` is not applicable to newtype fields")
    if field_attr.flatten:
        raise DeriveError("`flatten` is not applicable to newtype fields")

    ty = field.ty
    dependencies = Dependencies()
    if field_attr.type_override is not None:
        inline_def = _constant(field_attr.type_override)
    elif field_attr.inline:
        dependencies.append_from(ty)
        inline_def = ty.inline
    else:
        dependencies.push_or_append_from(ty)
        inline_def = _constant(format_type(ty, dependencies, generics))
    generic_args = format_generics(dependencies, generics)

    def decl() -> str:
        return f"type {name}{generic_args} = {inline_def()};"

    return _make(attr, name, generics, dependencies, inline_def, decl)


def _tuple_field(
    field: Field, dependencies: Dependencies, generics: Sequence[TypeParam]
) -> Render | None:
    attr = FieldAttr.from_attrs(field.attrs)
    if attr.skip:
        return None
    if attr.rename is not None:
        raise DeriveError("`rename` is not applicable to tuple structs")
    if attr.optional:
        raise DeriveError("`optional` is not applicable to tuple fields")
    if attr.flatten:
        raise DeriveError("`flatten` is not applicable to tuple fields")

    ty = field.ty
    if attr.type_override is not None:
        return _constant(attr.type_override)
    if attr.inline:
        dependencies.append_from(ty)
        return ty.inline
    formatted = format_type(ty, dependencies, generics)
    dependencies.push_or_append_from(ty)
    return _constant(formatted)


def _tuple(
    attr: StructAttr, name: str, fields: Sequence[Field], generics: Sequence[TypeParam]
) -> Derived:
    if attr.rename_all is not None:
        raise DeriveError("`rename_all` is not applicable to tuple structs")
    if attr.tag is not None:
        raise DeriveError("`tag` is not applicable to tuple structs")

    dependencies = Dependencies()
    parts = [
        part
        for part in (_tuple_field(field, dependencies, generics) for field in fields)
        if part is not None
    ]
    generic_args = format_generics(dependencies, generics)

    def inline() -> str:
        return f"[{', '.join(part() for part in parts)}]"

    def decl() -> str:
        return f"type {name}{generic_args} = {inline()};"

    return _make(attr, name, generics, dependencies, inline, decl)


def _unit(attr: StructAttr, name: str, generics: Sequence[TypeParam]) -> Derived:
    if attr.rename_all is not None:
        raise DeriveError("`rename_all` is not applicable to unit structs")
    if attr.tag is not None:
        raise DeriveError("`tag` is not applicable to unit structs")
    return _make(
        attr,
        name,
        generics,
        Dependencies(),
        _constant("null"),
        _constant(f"type {name} = null;"),
    )


def type_def(
    attr: StructAttr,
    name: str,
    fields: Sequence[Field] | None,
    generics: Sequence[TypeParam] = (),
) -> Derived:
    """Derive a struct-like type; ``fields`` is ``None`` or empty for unit structs."""
    ts_name = attr.rename if attr.rename is not None else to_ts_ident(name)
    fields = list(fields or ())
    if not fields:
        return _unit(attr, ts_name, generics)
    named = [field.name is not None for field in fields]
    if all(named):
        return _named(attr, ts_name, fields, generics)
    if any(named):
        raise DeriveError("named and unnamed fields cannot be mixed")
    if len(fields) == 1:
        return _newtype(attr, ts_name, fields[0], generics)
    return _tuple(attr, ts_name, fields, generics)


def derive_struct(
    name: str,
    fields: Sequence[Field] | None = None,
    generics: Sequence[TypeParam] = (),
    attrs: Sequence[str] = (),
) -> Derived:
    """Derive the TypeScript type of a struct from its fields and attributes."""
    return type_def(StructAttr.from_attrs(attrs), name, fields, generics)
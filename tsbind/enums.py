"""Deriving TypeScript union types for user-defined enums."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from tsbind.attrs import EnumAttr, FieldAttr, StructAttr, TaggedKind
from tsbind.derive import (
    Dependencies,
    Derived,
    Field,
    TypeParam,
    format_generics,
    format_type,
    type_def,
)
from tsbind.errors import DeriveError

Render = Callable[[], str]


def _constant(text: str) -> Render:
    return lambda: text


@dataclass(frozen=True)
class Variant:
    """An enum variant; ``fields`` is ``None`` for a unit variant."""

    name: str
    fields: Sequence[Field] | None = None
    attrs: Sequence[str] = ()

    @property
    def is_unit(self) -> bool:
        """Whether the variant carries no fields at all."""
        return self.fields is None

    @property
    def single_unnamed(self) -> Field | None:
        """The only field of a one-element tuple variant, if this is one."""
        if self.fields is None or len(self.fields) != 1:
            return None
        field = self.fields[0]
        return field if field.name is None else None


def _variant_name(variant: Variant, attr: FieldAttr, enum_attr: EnumAttr) -> str:
    if attr.rename is not None:
        return attr.rename
    if enum_attr.rename_all is not None:
        return enum_attr.rename_all.apply(variant.name)
    return variant.name


def _format_variant(
    variant: Variant,
    dependencies: Dependencies,
    enum_attr: EnumAttr,
    generics: Sequence[TypeParam],
) -> Render | None:
    attr = FieldAttr.from_attrs(variant.attrs)
    if attr.skip:
        return None
    if attr.type_override is not None:
        raise DeriveError("`type` is not applicable to enum variants")
    if attr.optional:
        raise DeriveError("`optional` is not applicable to enum variants")
    if attr.flatten:
        raise DeriveError("`flatten` is not applicable to enum variants")

    name = _variant_name(variant, attr, enum_attr)
    # the variant is derived as an anonymous struct
    variant_type = type_def(StructAttr(), "_", variant.fields, generics)
    inline_type = variant_type.inline
    tagged = enum_attr.tagged()
    single = variant.single_unnamed
    tag, content = tagged.tag, tagged.content

    formatted: Render
    if tagged.kind is TaggedKind.UNTAGGED:
        formatted = inline_type
    elif tagged.kind is TaggedKind.EXTERNALLY:
        if variant.is_unit:
            formatted = _constant(f'"{name}"')
        else:
            formatted = lambda: f"{{ {name}: {inline_type()} }}"
    elif tagged.kind is TaggedKind.ADJACENTLY:
        if single is not None:
            ty = format_type(single.ty, dependencies, generics)
            formatted = _constant(f'{{ {tag}: "{name}", {content}: {ty} }}')
        elif variant.is_unit:
            formatted = _constant(f'{{ {tag}: "{name}" }}')
        else:
            formatted = lambda: f'{{ {tag}: "{name}", {content}: {inline_type()} }}'
    elif variant_type.flattenable:
        flattened = variant_type.inline_flattened
        formatted = lambda: f'{{ {tag}: "{name}", {flattened()} }}'
    elif single is not None:
        ty = format_type(single.ty, dependencies, generics)
        formatted = _constant(f'{{ {tag}: "{name}" }} & {ty}')
    elif variant.is_unit:
        formatted = _constant(f'{{ {tag}: "{name}" }}')
    else:
        formatted = lambda: f'{{ {tag}: "{name}" }} & {inline_type()}'

    dependencies.append(variant_type.deps)
    return formatted


def derive_enum(
    name: str,
    variants: Sequence[Variant] = (),
    generics: Sequence[TypeParam] = (),
    attrs: Sequence[str] = (),
) -> Derived:
    """Derive the TypeScript union type of an enum from its variants and attributes."""
    enum_attr = EnumAttr.from_attrs(attrs)
    ts_name = enum_attr.rename if enum_attr.rename is not None else name

    if not variants:
        return Derived(
            ts_name,
            inline=_constant("never"),
            decl=_constant(f"type {ts_name} = never;"),
            dependencies=Dependencies(),
            generics=generics,
            export=enum_attr.export,
            export_to=enum_attr.export_to,
        )

    dependencies = Dependencies()
    renders = [
        render
        for render in (
            _format_variant(variant, dependencies, enum_attr, generics)
            for variant in variants
        )
        if render is not None
    ]
    generic_args = format_generics(dependencies, generics)

    def inline() -> str:
        return " | ".join(render() for render in renders)

    def decl() -> str:
        return f"type {ts_name}{generic_args} = {inline()};"

    return Derived(
        ts_name,
        inline=inline,
        decl=decl,
        dependencies=dependencies,
        generics=generics,
        export=enum_attr.export,
        export_to=enum_attr.export_to,
    )
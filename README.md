# tsbind

Generate TypeScript declarations (interfaces, type aliases and unions) from
descriptions of your data types. The declarations can be written to `.ts`
files together with the `import type` statements they need.

## Installation

```
pip install tsbind
```

The package has no dependencies outside the standard library.

## Describing types

Built-in types are in `tsbind.core`:

- primitives, as ready-made `Primitive` values: `I32`, `U32`, `F64` and the
  other number types (`"number"`), `U64`, `I64`, `U128`, `I128` (`"bigint"`),
  `BOOL` (`"boolean"`), `STRING`, `STR`, `PATH`, `PATH_BUF` (`"string"`),
  `UNIT` (`"null"`), and `NAIVE_DATE_TIME`, `NAIVE_DATE`, `NAIVE_TIME`,
  `DURATION`, `UUID`, `BIG_DECIMAL` (`"string"`)
- `Option(T)` gives `T | null`
- `Vec(T)`, `HashSet(T)`, `BTreeSet(T)`, `IndexSet(T)` and
  `FixedArray(T, length)` give `Array<T>`
- `HashMap(K, V)`, `BTreeMap(K, V)` and `IndexMap(K, V)` give `Record<K, V>`
- `Range(T)` and `RangeInclusive(T)` give `{ start: T, end: T, }`
- `Tuple(A, B, ...)` (1 to 10 elements) gives `[A, B, ...]`
- `DateTime(tz)` and `Date(tz)`, with `UTC`, `LOCAL` or `FIXED_OFFSET`,
  give `string`
- `Box`, `Arc`, `Rc`, `Cow`, `Cell`, `RefCell`, `Mutex`, `Weak` and
  `PhantomData` are represented exactly like the type they hold

Your own types are built with `tsbind.derive.derive_struct` and
`tsbind.enums.derive_enum`. Fields are `tsbind.derive.Field(name, ty, attrs)`
(a `name` of `None` makes a tuple-struct field), enum variants are
`tsbind.enums.Variant(name, fields, attrs)` (`fields=None` for a unit
variant), and generic parameters are `tsbind.derive.TypeParam(ident, default)`.

```python
from tsbind.core import I32, STRING, Vec
from tsbind.derive import Field, TypeParam, derive_struct
from tsbind.enums import Variant, derive_enum

user = derive_struct(
    "User",
    [Field("user_id", I32), Field("first_name", STRING), Field("tags", Vec(STRING))],
)
user.decl()
# 'interface User { user_id: number, first_name: string, tags: Array<string>, }'

role = derive_enum(
    "Role",
    [Variant("User"), Variant("Admin", attrs=['ts(rename = "administrator")'])],
    attrs=['ts(rename_all = "lowercase")'],
)
role.decl()
# 'type Role = "user" | "administrator";'

T = TypeParam("T")
point = derive_struct("Point", [Field("value", T)], generics=[T])
point.decl()                 # 'interface Point<T> { value: T, }'
holder = derive_struct("Holder", [Field("p", point.of(I32))])
holder.decl()                # 'interface Holder { p: Point<number>, }'
```

Every type offers `name()`, `inline()`, `decl()` (where the type has a
declaration), `dependencies()` (the exportable types it refers to, as
`tsbind.core.Dependency` values), `export()`, `export_to(path)` and
`export_to_string()`.

## Attributes

Attributes are given as strings, either `ts(...)` / `serde(...)` or written
with `#[...]` around them.

- On structs: `ts(rename, rename_all, export, export_to)`; `serde(rename,
  rename_all, tag, default)`.
- On enums: `ts(rename, rename_all, export, export_to)`; `serde(rename,
  rename_all, tag, content, untagged)`. Enums are externally tagged by
  default; `tag` makes them internally tagged, `tag` with `content` adjacently
  tagged, and `untagged` drops the tag.
- On fields: `ts(type, rename, inline, skip, optional, flatten)`;
  `serde(rename, skip, skip_serializing, skip_deserializing,
  skip_serializing_if = "Option::is_none", flatten, default)`.
- On variants: `rename` and `skip`.

Invalid or contradictory `ts` attributes raise `tsbind.errors.DeriveError`.
A `serde` attribute that cannot be parsed is ignored with a `UserWarning`.

## Renaming

`tsbind.naming.Inflection` supports `lowercase`, `UPPERCASE`, `camelCase`,
`snake_case`, `PascalCase` and `SCREAMING_SNAKE_CASE`; `parse_inflection`
reads these names ignoring case and underscores. Field names that are not
plain identifiers are quoted (`raw_name_to_ts_field`), and a leading `r#` is
dropped from identifiers (`to_ts_ident`).

## Exporting

A derived type is exported to `bindings/<Name>.ts` unless `export_to` says
otherwise; an `export_to` value ending in `/` is treated as a directory.
`export()` resolves that path against the directory named by the
`TSBIND_MANIFEST_DIR` environment variable and raises
`tsbind.errors.ManifestDirNotSet` when it is not set. `export_to(path)`
writes to the given path instead, creating parent directories; I/O failures
raise `tsbind.errors.ExportError`.

A generated file starts with the line
`// This file was generated by tsbind. Do not edit this file manually.`,
then one `import type { Name } from "./relative/path";` per dependency
(sorted by name, without duplicates), an empty line, and `export ` followed
by the declaration.

## Configuration

`tsbind.config.Config.get()` reads `ts.toml` from the `TSBIND_MANIFEST_DIR`
directory once and caches it. When the file is absent the defaults are used
(`ambient_declarations = false`, `out_dir = "typescript"`); when present it
must set both keys, with a boolean and a string.

## What it does not do

- Types are described in Python with the classes above; nothing reads type
  definitions from other source files.
- The `export` attribute is recorded on a derived type but nothing exports
  it automatically; call `export()` yourself.
- Output is not reformatted; declarations are written on a single line.
- There is no command-line tool.
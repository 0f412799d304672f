"""Parsing of ``ts(...)`` and ``serde(...)`` attributes on types and fields."""

from __future__ import annotations

import re
import warnings
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tsbind.errors import DeriveError
from tsbind.naming import Inflection, parse_inflection

_LEXEME = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<raw>r(?P<hashes>\#*)"(?P<rawbody>.*?)"(?P=hashes))
    | (?P<str>"(?P<body>(?:[^"\\]|\\.)*)")
    | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<punct>[=,])
    | (?P<lit>[0-9][0-9A-Za-z_.]*|'(?:[^'\\]|\\.)')
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPE = re.compile(r"\\(u\{[0-9A-Fa-f]+\}|x[0-9A-Fa-f]{2}|\n\s*|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}

_PATH = re.compile(r"([A-Za-z_][\w:]*)\s*(.*)\Z", re.DOTALL)


def _unescape(body: str) -> str:
    def replace(match: re.Match[str]) -> str:
        escape = match.group(1)
        if escape.startswith("u{"):
            return chr(int(escape[2:-1], 16))
        if escape.startswith("x"):
            return chr(int(escape[1:], 16))
        if escape.startswith("\n"):
            return ""
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        raise DeriveError(f"unknown character escape: \\{escape}")

    return _ESCAPE.sub(replace, body)


def _lex(text: str) -> Iterable[tuple[str, str]]:
    position = 0
    while position < len(text):
        match = _LEXEME.match(text, position)
        if match is None:
            raise DeriveError(f"unexpected token: {text[position:]!r}")
        position = match.end()
        if match.group("ws"):
            continue
        if match.group("raw") is not None:
            yield "str", match.group("rawbody")
        elif match.group("str") is not None:
            yield "str", _unescape(match.group("body"))
        elif match.group("ident"):
            yield "ident", match.group("ident")
        elif match.group("punct"):
            yield "punct", match.group("punct")
        else:
            yield "lit", match.group("lit")


def parse_args(text: str) -> list[tuple[str, str | None]]:
    """Parse ``key = "value", flag`` into ``(key, value)`` pairs; flags carry ``None``."""
    lexemes = deque(_lex(text))
    args: list[tuple[str, str | None]] = []
    while True:
        if not lexemes or lexemes[0][0] != "ident":
            raise DeriveError("expected identifier")
        _, key = lexemes.popleft()
        value = None
        if lexemes and lexemes[0] == ("punct", "="):
            lexemes.popleft()
            if not lexemes:
                raise DeriveError("expected literal")
            kind, literal = lexemes.popleft()
            if kind == "str":
                value = literal
            elif kind == "lit" or (kind == "ident" and literal in ("true", "false")):
                raise DeriveError("expected string")
            else:
                raise DeriveError("expected literal")
        args.append((key, value))
        if not lexemes:
            return args
        if lexemes.popleft() != ("punct", ","):
            raise DeriveError("expected `,`")


def _split_attr(attr: str) -> tuple[str, str | None]:
    text = attr.strip()
    if text.startswith("#"):
        text = text[1:].lstrip()
        if not (text.startswith("[") and text.endswith("]")):
            raise DeriveError(f"malformed attribute: {attr}")
        text = text[1:-1].strip()
    match = _PATH.match(text)
    if match is None:
        raise DeriveError(f"malformed attribute: {attr}")
    path, rest = match.group(1), match.group(2).strip()
    if rest.startswith("(") and rest.endswith(")"):
        return path, rest[1:-1]
    if path in ("ts", "serde"):
        raise DeriveError(f"expected attribute arguments in parentheses: {attr}")
    return path, None


def _string(value: str | None) -> str:
    if value is None:
        raise DeriveError("expected `=`")
    return value


def _flag(value: str | None) -> bool:
    if value is not None:
        raise DeriveError("expected `,`")
    return True


Handler = Callable[[Any, "str | None"], None]


def _set_str(name: str) -> Handler:
    return lambda target, value: setattr(target, name, _string(value))


def _set_flag(name: str) -> Handler:
    return lambda target, value: setattr(target, name, _flag(value))


def _set_inflection(name: str) -> Handler:
    return lambda target, value: setattr(target, name, parse_inflection(_string(value)))


def _apply(
    target: Any,
    args: list[tuple[str, str | None]],
    handlers: dict[str, Handler | None],
) -> Any:
    """Run the handler of each key; keys mapped to ``None`` are accepted and ignored."""
    for key, value in args:
        if key not in handlers:
            raise DeriveError("unexpected attribute")
        handler = handlers[key]
        if handler is not None:
            handler(target, value)
    return target


def _collect(result: Any, attrs: Iterable[str], ts_handlers: dict, serde_handlers: dict) -> Any:
    factory = type(result)
    serde_attrs = []
    for attr in attrs:
        path, args = _split_attr(attr) if attr.strip() else ("", None)
        if path == "ts":
            result.merge(_apply(factory(), parse_args(args), ts_handlers))
        elif path == "serde":
            serde_attrs.append((attr, args))
    for attr, args in serde_attrs:
        try:
            parsed = _apply(factory(), parse_args(args), serde_handlers)
        except DeriveError:
            warnings.warn(
                f"failed to parse serde attribute: {attr.strip()}; it will be ignored",
                UserWarning,
                stacklevel=3,
            )
            continue
        result.merge(parsed)
    return result


def _first(current: Any, other: Any) -> Any:
    return current if current is not None else other


class TaggedKind(Enum):
    """How an enum's variant tag is represented."""

    EXTERNALLY = "externally"
    ADJACENTLY = "adjacently"
    INTERNALLY = "internally"
    UNTAGGED = "untagged"


@dataclass(frozen=True)
class Tagged:
    """An enum representation, with the tag and content field names where used."""

    kind: TaggedKind
    tag: str | None = None
    content: str | None = None


@dataclass
class StructAttr:
    """Attributes of a struct."""

    rename_all: Inflection | None = None
    rename: str | None = None
    export_to: str | None = None
    export: bool = False
    tag: str | None = None

    @classmethod
    def from_attrs(cls, attrs: Iterable[str]) -> StructAttr:
        """Collect ``ts`` attributes, then ``serde`` attributes, from ``attrs``."""
        return _collect(cls(), attrs, _STRUCT_TS, _STRUCT_SERDE)

    def merge(self, other: StructAttr) -> None:
        """Fill unset values from ``other``; flags are combined."""
        self.rename = _first(self.rename, other.rename)
        self.rename_all = _first(self.rename_all, other.rename_all)
        self.export_to = _first(self.export_to, other.export_to)
        self.export = self.export or other.export
        self.tag = _first(self.tag, other.tag)


_STRUCT_TS: dict[str, Handler | None] = {
    "rename": _set_str("rename"),
    "rename_all": _set_inflection("rename_all"),
    "export": _set_flag("export"),
    "export_to": _set_str("export_to"),
}

# ``serde(default)`` is accepted, with or without a value, and has no effect.
_STRUCT_SERDE: dict[str, Handler | None] = {
    "rename": _set_str("rename"),
    "rename_all": _set_inflection("rename_all"),
    "tag": _set_str("tag"),
    "default": None,
}


@dataclass
class EnumAttr:
    """Attributes of an enum."""

    rename_all: Inflection | None = None
    rename: str | None = None
    export_to: str | None = None
    export: bool = False
    tag: str | None = None
    untagged: bool = False
    content: str | None = None

    @classmethod
    def from_attrs(cls, attrs: Iterable[str]) -> EnumAttr:
        """Collect ``ts`` attributes, then ``serde`` attributes, from ``attrs``."""
        return _collect(cls(), attrs, _ENUM_TS, _ENUM_SERDE)

    def merge(self, other: EnumAttr) -> None:
        """Fill unset values from ``other``; flags are combined."""
        self.rename = _first(self.rename, other.rename)
        self.rename_all = _first(self.rename_all, other.rename_all)
        self.tag = _first(self.tag, other.tag)
        self.untagged = self.untagged or other.untagged
        self.content = _first(self.content, other.content)
        self.export = self.export or other.export
        self.export_to = _first(self.export_to, other.export_to)

    def tagged(self) -> Tagged:
        """Return the enum representation, rejecting contradictory settings."""
        if self.untagged:
            if self.content is not None:
                raise DeriveError("untagged cannot be used with content")
            if self.tag is not None:
                raise DeriveError("untagged cannot be used with tag")
            return Tagged(TaggedKind.UNTAGGED)
        if self.tag is None:
            if self.content is not None:
                raise DeriveError("content cannot be used without tag")
            return Tagged(TaggedKind.EXTERNALLY)
        if self.content is None:
            return Tagged(TaggedKind.INTERNALLY, tag=self.tag)
        return Tagged(TaggedKind.ADJACENTLY, tag=self.tag, content=self.content)


_ENUM_TS: dict[str, Handler | None] = {
    "rename": _set_str("rename"),
    "rename_all": _set_inflection("rename_all"),
    "export_to": _set_str("export_to"),
    "export": _set_flag("export"),
}

_ENUM_SERDE: dict[str, Handler | None] = {
    "rename": _set_str("rename"),
    "rename_all": _set_inflection("rename_all"),
    "tag": _set_str("tag"),
    "content": _set_str("content"),
    "untagged": _set_flag("untagged"),
}


@dataclass
class FieldAttr:
    """Attributes of a struct field or enum variant."""

    type_override: str | None = None
    rename: str | None = None
    inline: bool = False
    skip: bool = False
    optional: bool = False
    flatten: bool = False

    @classmethod
    def from_attrs(cls, attrs: Iterable[str]) -> FieldAttr:
        """Collect ``ts`` attributes, then ``serde`` attributes, from ``attrs``."""
        return _collect(cls(), attrs, _FIELD_TS, _FIELD_SERDE)

    def merge(self, other: FieldAttr) -> None:
        """Fill unset values from ``other``; flags are combined."""
        self.rename = _first(self.rename, other.rename)
        self.type_override = _first(self.type_override, other.type_override)
        self.inline = self.inline or other.inline
        self.skip = self.skip or other.skip
        self.optional = self.optional or other.optional
        self.flatten = self.flatten or other.flatten


def _skip_serializing_if(target: FieldAttr, value: str | None) -> None:
    target.optional = _string(value) == "Option::is_none"


_FIELD_TS: dict[str, Handler | None] = {
    "type": _set_str("type_override"),
    "rename": _set_str("rename"),
    "inline": _set_flag("inline"),
    "skip": _set_flag("skip"),
    "optional": _set_flag("optional"),
    "flatten": _set_flag("flatten"),
}

_FIELD_SERDE: dict[str, Handler | None] = {
    "rename": _set_str("rename"),
    "skip": _set_flag("skip"),
    "skip_serializing": _set_flag("skip"),
    "skip_deserializing": _set_flag("skip"),
    "skip_serializing_if": _skip_serializing_if,
    "flatten": _set_flag("flatten"),
    "default": None,
}
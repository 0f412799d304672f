"""Identifier conversions and case inflections."""

from __future__ import annotations

import re
from enum import Enum

from tsbind.errors import DeriveError

_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*|[0-9]+|[^\W_]+")


def _words(string: str) -> list[str]:
    return _WORD.findall(string)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_snake_case(string: str) -> str:
    """Convert ``string`` to ``snake_case``."""
    return "_".join(word.lower() for word in _words(string))


def to_screaming_snake_case(string: str) -> str:
    """Convert ``string`` to ``SCREAMING_SNAKE_CASE``."""
    return "_".join(word.upper() for word in _words(string))


def to_pascal_case(string: str) -> str:
    """Convert ``string`` to ``PascalCase``."""
    return "".join(_capitalize(word) for word in _words(string))


def to_camel_case(string: str) -> str:
    """Convert ``string`` to ``camelCase``."""
    words = _words(string)
    if not words:
        return ""
    first, *rest = words
    return first.lower() + "".join(_capitalize(word) for word in rest)


class Inflection(Enum):
    """A renaming rule applicable to all fields or variants of a type."""

    LOWER = "lowercase"
    UPPER = "UPPERCASE"
    CAMEL = "camelCase"
    SNAKE = "snake_case"
    PASCAL = "PascalCase"
    SCREAMING_SNAKE = "SCREAMING_SNAKE_CASE"

    def apply(self, string: str) -> str:
        """Rename ``string`` according to this inflection."""
        return _CONVERTERS[self](string)


_CONVERTERS = {
    Inflection.LOWER: str.lower,
    Inflection.UPPER: str.upper,
    Inflection.CAMEL: to_camel_case,
    Inflection.SNAKE: to_snake_case,
    Inflection.PASCAL: to_pascal_case,
    Inflection.SCREAMING_SNAKE: to_screaming_snake_case,
}


def _normalize(value: str) -> str:
    return value.lower().replace("_", "")


def parse_inflection(value: str) -> Inflection:
    """Parse an inflection name such as ``camelCase``, ignoring case and underscores."""
    normalized = _normalize(value)
    for inflection in Inflection:
        if _normalize(inflection.value) == normalized:
            return inflection
    raise DeriveError(f"invalid inflection: '{value}'")


def to_ts_ident(ident: str) -> str:
    """Convert an identifier to a TypeScript identifier, dropping a raw ``r#`` prefix."""
    while ident.startswith("r#"):
        ident = ident[2:]
    return ident


def raw_name_to_ts_field(value: str) -> str:
    """Return ``value`` as a field name, quoted if it is not a plain identifier."""
    valid = all(c.isalnum() or c in "_$" for c in value) and not value[:1].isnumeric()
    return value if valid else f'"{value}"'
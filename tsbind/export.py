"""Writing generated TypeScript declarations, with their imports, to files."""

from __future__ import annotations

import os
from collections.abc import Hashable, Sequence
from pathlib import Path
from typing import Protocol

from tsbind.errors import MANIFEST_DIR_ENV, CannotBeExported, ExportError, ManifestDirNotSet

NOTE = "// This file was generated by tsbind. Do not edit this file manually.\n"


class ExportedDependency(Protocol):
    type_id: Hashable
    ts_name: str
    exported_to: str


class Exportable(Protocol):
    """What the exporter needs from a type."""

    export_location: str | None
    type_id: Hashable

    def decl(self) -> str: ...

    def dependencies(self) -> Sequence[ExportedDependency]: ...


def export_type(ts: Exportable) -> None:
    """Export ``ts`` to its configured location below the manifest directory."""
    export_type_to(ts, output_path(ts))


def export_type_to(ts: Exportable, path: str | os.PathLike[str]) -> None:
    """Export ``ts`` to ``path``, creating parent directories as needed."""
    content = export_type_to_string(ts)
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise ExportError("an error occurred while performing IO") from exc


def export_type_to_string(ts: Exportable) -> str:
    """Return the generated file content for ``ts``."""
    return NOTE + _generate_imports(ts) + "export " + ts.decl()


def output_path(ts: Exportable) -> Path:
    """Compute where ``ts`` is exported to."""
    manifest_dir = os.environ.get(MANIFEST_DIR_ENV)
    if manifest_dir is None:
        raise ManifestDirNotSet()
    if ts.export_location is None:
        raise CannotBeExported()
    return Path(manifest_dir) / ts.export_location


def _generate_imports(ts: Exportable) -> str:
    location = ts.export_location
    if location is None:
        raise CannotBeExported()
    deduplicated = {
        dep.ts_name: dep for dep in ts.dependencies() if dep.type_id != ts.type_id
    }
    lines = [
        f"import type {{ {name} }} from {_quoted(import_path(location, dep.exported_to))};\n"
        for name, dep in sorted(deduplicated.items())
    ]
    return "".join(lines) + "\n"


def _quoted(text: str) -> str:
    escapes = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}
    body = "".join(
        escapes.get(ch, ch if ch.isprintable() else f"\\u{{{ord(ch):x}}}") for ch in text
    )
    return f'"{body}"'


def _components(path: str | os.PathLike[str]) -> list[str]:
    text = os.fspath(path)
    if os.sep != "/":
        text = text.replace(os.sep, "/")
    absolute = text.startswith("/")
    parts = ["/"] if absolute else []
    for position, piece in enumerate(text.split("/")):
        if not piece:
            continue
        if piece == "." and (absolute or position != 0):
            continue
        parts.append(piece)
    return parts


def _join(components: list[str]) -> str:
    if components and components[0] == "/":
        return "/" + "/".join(components[1:])
    return "/".join(components)


def diff_paths(path: str | os.PathLike[str], base: str | os.PathLike[str]) -> str | None:
    """Return ``path`` relative to ``base``, or ``None`` if it cannot be expressed."""
    path_parts = _components(path)
    base_parts = _components(base)
    path_absolute = path_parts[:1] == ["/"]
    base_absolute = base_parts[:1] == ["/"]
    if path_absolute != base_absolute:
        return _join(path_parts) if path_absolute else None

    remaining_path = iter(path_parts)
    remaining_base = iter(base_parts)
    comps: list[str] = []
    while True:
        a = next(remaining_path, None)
        b = next(remaining_base, None)
        if a is None and b is None:
            break
        if b is None:
            comps.append(a)
            comps.extend(remaining_path)
            break
        if a is None:
            comps.append("..")
        elif not comps and a == b:
            continue
        elif b == ".":
            comps.append(a)
        elif b == "..":
            return None
        else:
            comps.append("..")
            comps.extend(".." for _ in remaining_base)
            comps.append(a)
            comps.extend(remaining_path)
            break
    return _join(comps)


def _parent(path: str | os.PathLike[str]) -> str:
    components = _components(path)
    if not components or components == ["/"]:
        raise ValueError(f"path has no parent: {os.fspath(path)!r}")
    return _join(components[:-1])


def import_path(origin: str | os.PathLike[str], target: str | os.PathLike[str]) -> str:
    """Return the module path for importing ``target`` from the file ``origin``."""
    relative = diff_paths(target, _parent(origin))
    if relative is None:
        raise ValueError("failed to calculate import path")
    first = _components(relative)[:1]
    if first and first[0] not in ("/", ".", ".."):
        relative = "./" + relative
    while relative.endswith(".ts"):
        relative = relative[: -len(".ts")]
    return relative
"""Project configuration read from a ``ts.toml`` file."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from tsbind.errors import MANIFEST_DIR_ENV, ManifestDirNotSet

FILE_NAME = "ts.toml"

_FIELDS: dict[str, type] = {"ambient_declarations": bool, "out_dir": str}


@dataclass(frozen=True)
class Config:
    """Settings for generating bindings."""

    ambient_declarations: bool = False
    out_dir: str = "typescript"

    _instance: ClassVar[Config | None] = None

    @classmethod
    def get(cls) -> Config:
        """Return the configuration, loading it on first use."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def load(cls) -> Config:
        """Load the configuration from the project directory, or use the defaults."""
        manifest_dir = os.environ.get(MANIFEST_DIR_ENV)
        if manifest_dir is None:
            raise ManifestDirNotSet()
        config = cls.try_load_from_dir(Path(manifest_dir))
        return config if config is not None else cls()

    @classmethod
    def try_load_from_dir(cls, directory: str | os.PathLike[str]) -> Config | None:
        """Read ``ts.toml`` from ``directory``; ``None`` if there is no such file."""
        path = Path(directory) / FILE_NAME
        if not path.is_file():
            return None
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        values = {}
        for key, expected in _FIELDS.items():
            if key not in data:
                raise ValueError(f"missing field `{key}`")
            value = data[key]
            if not isinstance(value, expected):
                raise ValueError(
                    f"invalid type for `{key}`: expected {expected.__name__}"
                )
            values[key] = value
        return cls(**values)
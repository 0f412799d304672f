"""Exceptions raised while deriving and exporting TypeScript bindings."""

MANIFEST_DIR_ENV = "TSBIND_MANIFEST_DIR"


class ExportError(Exception):
    """An error which may occur when exporting a type."""


class CannotBeExported(ExportError):
    """The type has no export location and therefore cannot be exported."""

    def __init__(self, message: str = "this type cannot be exported") -> None:
        super().__init__(message)


class ManifestDirNotSet(ExportError):
    """The environment variable naming the project directory is missing."""

    def __init__(
        self,
        message: str = f"the environment variable {MANIFEST_DIR_ENV} is not set",
    ) -> None:
        super().__init__(message)


class DeriveError(ValueError):
    """A type definition or one of its attributes is invalid."""
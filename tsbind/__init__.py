"""Generate TypeScript declarations from type descriptions and export them to files."""

__version__ = "0.1.0"
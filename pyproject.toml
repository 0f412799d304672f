[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tsbind"
version = "0.1.0"
description = "Generate TypeScript interface and type declarations from type descriptions"
requires-python = ">=3.11"
dependencies = []
keywords = ["typescript", "bindings", "code-generation", "types", "declarations"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tsbind"]

[tool.pytest.ini_options]
addopts = "-ra"

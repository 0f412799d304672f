import tomllib

import pytest

from tsbind.config import FILE_NAME, Config
from tsbind.errors import MANIFEST_DIR_ENV, ManifestDirNotSet


def _write(directory, text):
    (directory / FILE_NAME).write_text(text, encoding="utf-8")


def test_defaults():
    config = Config()
    assert config.ambient_declarations is False
    assert config.out_dir == "typescript"


def test_reads_ts_toml_only(tmp_path):
    (tmp_path / "other.toml").write_text(
        'ambient_declarations = true\nout_dir = "other"\n', encoding="utf-8"
    )
    assert Config.try_load_from_dir(tmp_path) is None
    (tmp_path / "ts.toml").write_text(
        'ambient_declarations = true\nout_dir = "named"\n', encoding="utf-8"
    )
    assert Config.try_load_from_dir(tmp_path) == Config(True, "named")


def test_no_file_returns_none(tmp_path):
    assert Config.try_load_from_dir(tmp_path) is None


def test_loads_values_from_file(tmp_path):
    _write(tmp_path, 'ambient_declarations = true\nout_dir = "generated"\n')
    config = Config.try_load_from_dir(tmp_path)
    assert config == Config(ambient_declarations=True, out_dir="generated")


def test_unknown_keys_are_ignored(tmp_path):
    _write(tmp_path, 'ambient_declarations = false\nout_dir = "x"\nextra = 1\n')
    assert Config.try_load_from_dir(tmp_path) == Config(False, "x")


def test_missing_field_is_an_error(tmp_path):
    _write(tmp_path, 'out_dir = "x"\n')
    with pytest.raises(ValueError, match="ambient_declarations"):
        Config.try_load_from_dir(tmp_path)


def test_wrong_type_is_an_error(tmp_path):
    _write(tmp_path, 'ambient_declarations = "yes"\nout_dir = "x"\n')
    with pytest.raises(ValueError, match="ambient_declarations"):
        Config.try_load_from_dir(tmp_path)


def test_invalid_toml_is_an_error(tmp_path):
    _write(tmp_path, "ambient_declarations = \n")
    with pytest.raises(tomllib.TOMLDecodeError):
        Config.try_load_from_dir(tmp_path)


def test_load_without_manifest_dir(monkeypatch):
    monkeypatch.delenv(MANIFEST_DIR_ENV, raising=False)
    with pytest.raises(ManifestDirNotSet):
        Config.load()


def test_load_uses_defaults_without_file(monkeypatch, tmp_path):
    monkeypatch.setenv(MANIFEST_DIR_ENV, str(tmp_path))
    assert Config.load() == Config()


def test_load_reads_file(monkeypatch, tmp_path):
    _write(tmp_path, 'ambient_declarations = true\nout_dir = "gen"\n')
    monkeypatch.setenv(MANIFEST_DIR_ENV, str(tmp_path))
    assert Config.load() == Config(True, "gen")


def test_get_is_cached(monkeypatch, tmp_path):
    _write(tmp_path, 'ambient_declarations = true\nout_dir = "cached"\n')
    monkeypatch.setenv(MANIFEST_DIR_ENV, str(tmp_path))
    first = Config.get()
    second = Config.get()
    assert first is second
    assert first == Config(True, "cached")
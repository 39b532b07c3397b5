"""Unit tests for settings loading and validation.

Tests TOML loading with strict schema validation, defaults, path
resolution and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import ValidationError
import pytest

pytestmark = pytest.mark.unit


@pytest.fixture
def clean_env(monkeypatch):
    """Remove EDF_CATALOG_ variables inherited from the shell."""
    for key in list(os.environ):
        if key.startswith("EDF_CATALOG_"):
            monkeypatch.delenv(key)
    return monkeypatch


def _write_toml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


class TestSettingsLoading:
    """Test configuration file loading and parsing."""

    def test_Should_UseDefaults_When_NoFileGiven(self, clean_env):
        from edf_catalog.config import load_settings

        settings = load_settings()

        assert settings.source.directory == Path("data/edf")
        assert settings.source.max_workers == 1
        assert settings.cors.allowed_methods == ["GET", "POST"]
        assert settings.cors.allowed_origins == []
        assert settings.logging.level == "INFO"

    def test_Should_LoadValues_When_ValidTOMLProvided(self, tmp_path, clean_env):
        from edf_catalog.config import load_settings

        path = _write_toml(
            tmp_path,
            """
[source]
app_dir = "/srv/app"
directory = "recordings"
max_workers = 4

[cors]
allowed_origins = ["http://localhost:5173"]
allowed_methods = ["get"]

[logging]
level = "debug"
""",
        )

        settings = load_settings(path)

        assert settings.source.source_path == Path(os.path.normpath("/srv/app/recordings"))
        assert settings.source.max_workers == 4
        assert settings.cors.allowed_origins == ["http://localhost:5173"]
        assert settings.cors.allowed_methods == ["GET"]
        assert settings.logging.level == "DEBUG"

    def test_Should_RaiseFileNotFound_When_FileMissing(self, tmp_path, clean_env):
        from edf_catalog.config import load_settings

        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.toml")

    def test_Should_RaiseConfigError_When_TOMLMalformed(self, tmp_path, clean_env):
        from edf_catalog.config import load_settings
        from edf_catalog.exceptions import ConfigError

        path = _write_toml(tmp_path, "[source\ndirectory = ")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_settings(path)

    def test_Should_RaiseConfigError_When_ExtraKeyPresent(self, tmp_path, clean_env):
        from edf_catalog.config import load_settings
        from edf_catalog.exceptions import ConfigError

        path = _write_toml(tmp_path, '[source]\ndirectory = "x"\nrecursive = true\n')

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_Should_RaiseConfigError_When_DirectoryBlank(self, tmp_path, clean_env):
        from edf_catalog.config import load_settings
        from edf_catalog.exceptions import ConfigError

        path = _write_toml(tmp_path, '[source]\ndirectory = "  "\n')

        with pytest.raises(ConfigError, match="directory must be configured"):
            load_settings(path)

    def test_Should_RaiseConfigError_When_LogLevelUnknown(self, tmp_path, clean_env):
        from edf_catalog.config import load_settings
        from edf_catalog.exceptions import ConfigError

        path = _write_toml(tmp_path, '[logging]\nlevel = "LOUD"\n')

        with pytest.raises(ConfigError):
            load_settings(path)


class TestSourceConfig:
    """Test source directory resolution."""

    def test_Should_KeepAbsoluteDirectory_When_DirectoryAbsolute(self, tmp_path):
        from edf_catalog.config import SourceConfig

        source = SourceConfig(app_dir="/somewhere/else", directory=str(tmp_path))

        assert source.source_path == tmp_path

    def test_Should_NormalizePath_When_DirectoryHasDotDot(self, tmp_path):
        from edf_catalog.config import SourceConfig

        source = SourceConfig(app_dir=str(tmp_path / "app"), directory="../data/edf")

        assert source.source_path == tmp_path / "data" / "edf"

    def test_Should_ExpandUserHome_When_DirectoryStartsWithTilde(self):
        from edf_catalog.config import SourceConfig

        source = SourceConfig(directory="~/edf")

        assert source.source_path == Path(os.path.expanduser("~/edf"))

    def test_Should_RejectWorkers_When_BelowOne(self):
        from edf_catalog.config import SourceConfig

        with pytest.raises(ValidationError):
            SourceConfig(max_workers=0)

    def test_Should_RejectMethods_When_Empty(self):
        from edf_catalog.config import CorsConfig

        with pytest.raises(ValidationError):
            CorsConfig(allowed_methods=[])


class TestEnvironmentOverrides:
    """Test EDF_CATALOG_ environment overrides."""

    def test_Should_OverrideNestedKey_When_EnvSet(self, tmp_path, clean_env):
        from edf_catalog.config import load_settings

        path = _write_toml(tmp_path, '[source]\ndirectory = "from-file"\n')
        clean_env.setenv("EDF_CATALOG_SOURCE__DIRECTORY", str(tmp_path / "from-env"))
        clean_env.setenv("EDF_CATALOG_SOURCE__MAX_WORKERS", "3")

        settings = load_settings(path)

        assert settings.source.source_path == tmp_path / "from-env"
        assert settings.source.max_workers == 3

    def test_Should_SplitList_When_ListKeyOverridden(self, clean_env):
        from edf_catalog.config import load_settings

        clean_env.setenv("EDF_CATALOG_CORS__ALLOWED_ORIGINS", "http://a.example, http://b.example")

        settings = load_settings()

        assert settings.cors.allowed_origins == ["http://a.example", "http://b.example"]

    def test_Should_ParseBool_When_BoolKeyOverridden(self, clean_env):
        from edf_catalog.config import load_settings

        clean_env.setenv("EDF_CATALOG_LOGGING__STRUCTURED", "true")
        clean_env.setenv("EDF_CATALOG_CORS__ALLOW_CREDENTIALS", "no")

        settings = load_settings()

        assert settings.logging.structured is True
        assert settings.cors.allow_credentials is False

    def test_Should_IgnoreOtherPrefixes_When_Loading(self, clean_env):
        from edf_catalog.config import load_settings

        clean_env.setenv("OTHER_SOURCE__DIRECTORY", "/elsewhere")

        assert load_settings().source.directory == Path("data/edf")

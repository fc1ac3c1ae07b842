"""Unit tests for settings models and loader."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from src.commons.settings.loader import (
    SettingsLoader,
    coerce_value,
    deep_merge,
    get_settings,
    reset_settings,
)
from src.commons.settings.models import (
    AppSettings,
    AuthSettings,
    BlobStorageSettings,
    DocumentDBSettings,
    ServerSettings,
    Settings,
    StreamingSettings,
    TelemetrySettings,
    UploadSettings,
)


class TestAppSettings:
    """Tests for AppSettings model."""

    def test_default_values(self):
        settings = AppSettings()
        assert settings.name == "workout-logger-api"
        assert settings.environment == "dev"
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_invalid_environment(self):
        with pytest.raises(ValueError):
            AppSettings(environment="invalid")  # type: ignore[arg-type]


class TestServerSettings:
    """Tests for ServerSettings model."""

    def test_default_values(self):
        settings = ServerSettings()
        assert settings.port == 8000
        assert settings.api_prefix == ""
        assert settings.cors_origins == ["http://localhost:3000"]

    def test_port_validation(self):
        with pytest.raises(ValueError):
            ServerSettings(port=0)
        with pytest.raises(ValueError):
            ServerSettings(port=70000)


class TestStorageSettings:
    """Tests for blob and document storage settings."""

    def test_blob_defaults(self):
        settings = BlobStorageSettings()
        assert settings.provider == "minio"
        assert settings.buckets.videos == "wlogger-videos"

    def test_document_db_defaults(self):
        settings = DocumentDBSettings()
        assert settings.database == "wlogger"
        assert settings.collections.users == "users"
        assert settings.collections.workout_logs == "workoutlogs"


class TestUploadSettings:
    """Tests for UploadSettings model."""

    def test_default_values(self):
        settings = UploadSettings()
        assert settings.max_files_per_request == 5
        assert settings.form_field == "formVideos"

    def test_max_video_size_bytes(self):
        assert UploadSettings(max_video_size_mb=2).max_video_size_bytes == 2 * 1024**2

    def test_max_files_validation(self):
        with pytest.raises(ValueError):
            UploadSettings(max_files_per_request=0)


class TestRootSettings:
    """Tests for root Settings model."""

    def test_default_values(self):
        settings = Settings()
        assert isinstance(settings.app, AppSettings)
        assert isinstance(settings.auth, AuthSettings)
        assert isinstance(settings.uploads, UploadSettings)
        assert isinstance(settings.streaming, StreamingSettings)
        assert isinstance(settings.telemetry, TelemetrySettings)
        assert settings.auth.cookie_name == "token"

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("WLOGGER__AUTH__JWT_SECRET", "from-env")

        assert Settings().auth.jwt_secret == "from-env"


class TestCoerceValue:
    """Tests for environment value coercion."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("False", False),
            ("42", 42),
            ("1.5", 1.5),
            ('["http://a", "http://b"]', ["http://a", "http://b"]),
            ("[not json", "[not json"),
            ("plain", "plain"),
        ],
    )
    def test_coerce(self, raw, expected):
        assert coerce_value(raw) == expected


class TestSettingsLoader:
    """Tests for SettingsLoader."""

    def test_load_empty_config(self):
        with TemporaryDirectory() as tmpdir:
            loader = SettingsLoader(
                config_dir=Path(tmpdir), environment="dev", environ={}
            )
            settings = loader.load()
            assert settings.app.name == "workout-logger-api"

    def test_load_environment_override(self):
        with TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            (config_dir / "appsettings.json").write_text(
                json.dumps(
                    {
                        "uploads": {"max_video_size_mb": 100},
                        "server": {"port": 8000},
                    }
                )
            )
            (config_dir / "appsettings.prod.json").write_text(
                json.dumps({"uploads": {"max_video_size_mb": 500}})
            )

            loader = SettingsLoader(config_dir=config_dir, environment="prod", environ={})
            settings = loader.load()

            assert settings.server.port == 8000
            assert settings.uploads.max_video_size_mb == 500
            assert settings.app.environment == "prod"

    def test_env_vars_win(self):
        with TemporaryDirectory() as tmpdir:
            config_dir = Path(tmpdir)
            (config_dir / "appsettings.json").write_text(
                json.dumps({"document_db": {"host": "file-host"}})
            )
            environ = {
                "WLOGGER__DOCUMENT_DB__HOST": "env-host",
                "WLOGGER__UPLOADS__MAX_FILES_PER_REQUEST": "3",
                "WLOGGER__SERVER__CORS_ORIGINS": '["https://app.example.com"]',
            }

            settings = SettingsLoader(config_dir, "dev", environ).load()

            assert settings.document_db.host == "env-host"
            assert settings.uploads.max_files_per_request == 3
            assert settings.server.cors_origins == ["https://app.example.com"]

    def test_file_secret(self):
        with TemporaryDirectory() as tmpdir:
            secret_file = Path(tmpdir) / "jwt_secret"
            secret_file.write_text("s3cret\n")
            environ = {"WLOGGER__AUTH__JWT_SECRET_FILE": str(secret_file)}

            settings = SettingsLoader(Path(tmpdir), "dev", environ).load()

            assert settings.auth.jwt_secret == "s3cret"

    def test_environment_from_env(self):
        loader = SettingsLoader(environ={"WLOGGER__APP__ENVIRONMENT": "staging"})
        assert loader.environment == "staging"

    def test_deep_merge(self):
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        override = {"a": {"b": 10, "e": 4}, "f": 5}

        result = deep_merge(base, override)

        assert result == {"a": {"b": 10, "c": 2, "e": 4}, "d": 3, "f": 5}
        assert base == {"a": {"b": 1, "c": 2}, "d": 3}


class TestGetSettings:
    """Tests for get_settings function."""

    def setup_method(self):
        reset_settings()

    def teardown_method(self):
        reset_settings()

    def test_get_settings_cached(self):
        with TemporaryDirectory() as tmpdir:
            settings1 = get_settings(config_dir=Path(tmpdir))
            settings2 = get_settings(config_dir=Path(tmpdir))
            assert settings1 is settings2

    def test_get_settings_reload(self):
        with TemporaryDirectory() as tmpdir:
            settings1 = get_settings(config_dir=Path(tmpdir))
            settings2 = get_settings(config_dir=Path(tmpdir), reload=True)
            assert settings1 is not settings2

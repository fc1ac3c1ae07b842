"""Settings loader with hierarchical configuration support."""

import json
import os
from pathlib import Path
from typing import Any

from src.commons.settings.models import Settings

ENV_PREFIX = "WLOGGER__"

# Env vars ending with this suffix name a file holding the value (Docker secrets)
FILE_SUFFIX = "_FILE"


def coerce_value(value: str) -> Any:
    """Coerce a string environment value to bool, int, float or JSON.

    Args:
        value: String value from environment.

    Returns:
        Coerced value, or the original string.
    """
    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue

    # Lists/dicts like CORS_ORIGINS
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    return value


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class SettingsLoader:
    """Loads and merges configuration from multiple sources.

    Configuration precedence (highest to lowest):
    1. Environment variables (``WLOGGER__SECTION__KEY``)
    2. Environment-specific config (appsettings.{env}.json)
    3. Base config (appsettings.json)

    A variable such as ``WLOGGER__AUTH__JWT_SECRET_FILE`` is read from the
    file it points to and stored under ``auth.jwt_secret``.
    """

    def __init__(
        self,
        config_dir: Path | None = None,
        environment: str | None = None,
        environ: dict[str, str] | None = None,
    ) -> None:
        """Initialize the settings loader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to WLOGGER__CONFIG_DIR or 'config'.
            environment: Environment name (dev, test, staging, prod).
                        Defaults to WLOGGER__APP__ENVIRONMENT or 'dev'.
            environ: Environment mapping, defaults to ``os.environ``.
        """
        self._environ = dict(os.environ if environ is None else environ)
        self.config_dir = config_dir or Path(
            self._environ.get(f"{ENV_PREFIX}CONFIG_DIR", "config")
        )
        self.environment = environment or self._environ.get(
            f"{ENV_PREFIX}APP__ENVIRONMENT", "dev"
        )

    def load(self) -> Settings:
        """Load settings with proper precedence.

        Returns:
            Fully resolved Settings instance.
        """
        config = self._load_json("appsettings.json")
        config = deep_merge(
            config, self._load_json(f"appsettings.{self.environment}.json")
        )
        config = deep_merge(config, self._load_env_vars())
        config.setdefault("app", {})["environment"] = self.environment
        return Settings(**config)

    def _load_env_vars(self) -> dict[str, Any]:
        """Parse prefixed environment variables into nested dicts.

        ``WLOGGER__DOCUMENT_DB__HOST=db`` becomes
        ``{"document_db": {"host": "db"}}``.
        """
        result: dict[str, Any] = {}

        for key, raw in self._environ.items():
            if not key.startswith(ENV_PREFIX) or key == f"{ENV_PREFIX}CONFIG_DIR":
                continue

            key_path = key[len(ENV_PREFIX) :].lower().split("__")
            value: Any
            if key_path[-1].endswith(FILE_SUFFIX.lower()):
                key_path[-1] = key_path[-1][: -len(FILE_SUFFIX)]
                value = Path(raw).read_text(encoding="utf-8").strip()
            else:
                value = coerce_value(raw)

            current = result
            for part in key_path[:-1]:
                current = current.setdefault(part, {})
            current[key_path[-1]] = value

        return result

    def _load_json(self, filename: str) -> dict[str, Any]:
        """Load a JSON config file, or an empty dict if it doesn't exist."""
        path = self.config_dir / filename
        if not path.exists():
            return {}
        with path.open(encoding="utf-8") as f:
            return dict(json.load(f))


class _SettingsHolder:
    """Holder for the settings singleton to avoid global statements."""

    instance: Settings | None = None


def get_settings(
    config_dir: Path | None = None,
    environment: str | None = None,
    *,
    reload: bool = False,
) -> Settings:
    """Get or create the global settings instance.

    Args:
        config_dir: Optional config directory override.
        environment: Optional environment override.
        reload: Force reload settings from files.

    Returns:
        Settings instance.
    """
    if _SettingsHolder.instance is None or reload:
        loader = SettingsLoader(config_dir=config_dir, environment=environment)
        _SettingsHolder.instance = loader.load()
    return _SettingsHolder.instance


def reset_settings() -> None:
    """Reset the global settings instance. Useful for testing."""
    _SettingsHolder.instance = None

"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (PHPSENSE__SECTION__KEY)
3. User config (.phpsense/config.yaml)
4. Global config (~/.config/phpsense/config.yaml)
5. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from phpsense.config.models import (
    CompletionConfig,
    IndexConfig,
    LoggingConfig,
    PhpSenseConfig,
)
from phpsense.config.user_config import load_user_config
from phpsense.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/phpsense/config.yaml").expanduser()
PROJECT_DIR_NAME = ".phpsense"

_USER_FIELD_MAP: dict[str, tuple[str, str]] = {
    "source_path": ("index", "source_path"),
    "auto_index": ("index", "auto_index"),
    "show_completion_info": ("completion", "show_info"),
    "max_completion_items": ("completion", "max_items"),
    "log_level": ("logging", "level"),
}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class bound to one YAML config dict."""

    class PhpSenseSettings(BaseSettings):
        """Root config. Env vars: PHPSENSE__LOGGING__LEVEL, PHPSENSE__INDEX__SOURCE_PATH, etc."""

        model_config = SettingsConfigDict(
            env_prefix="PHPSENSE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        index: IndexConfig = IndexConfig()
        completion: CompletionConfig = CompletionConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return PhpSenseSettings


PhpSenseSettings = _make_settings_class({})


def load_config(project_root: Path | None = None, **kwargs: Any) -> PhpSenseConfig:
    """Load config: defaults < global yaml < user config < env vars < kwargs.

    Args:
        project_root: Directory holding .phpsense/. Defaults to cwd.
        **kwargs: Override values (highest precedence).

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    project_root = project_root or Path.cwd()
    user_config = load_user_config(project_root / PROJECT_DIR_NAME / "config.yaml")

    # Only keys present in the user file override the global config
    yaml_config: dict[str, Any] = {}
    for user_field, (section, key) in _USER_FIELD_MAP.items():
        if user_field in user_config.model_fields_set:
            yaml_config.setdefault(section, {})[key] = getattr(user_config, user_field)

    global_config = _load_yaml(GLOBAL_CONFIG_PATH)
    if global_config:
        yaml_config = _deep_merge(global_config, yaml_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return PhpSenseConfig.model_validate(settings.model_dump())

"""Configuration module for the RouterOS API gateway.

Implements Pydantic v2 Settings for configuration management with support for:
- Environment variables (ROUTEROS_GATEWAY_* prefix)
- YAML/TOML configuration files
- Command-line argument overrides

Configuration priority (later overrides earlier):
1. Built-in defaults
2. Configuration file (YAML/TOML)
3. Environment variables
4. Command-line arguments
"""

import ipaddress
import warnings
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, model_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class Settings(BaseSettings):
    """Gateway configuration with sensible defaults.

    Example:
        # Load from environment only
        settings = Settings()

        # Override specific values
        settings = Settings(http_port=9090, log_format="text")
    """

    model_config = SettingsConfigDict(
        env_prefix="ROUTEROS_GATEWAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Application Settings
    # ========================================

    environment: Literal["lab", "staging", "prod"] = Field(
        default="lab", description="Deployment environment"
    )

    debug: bool = Field(default=False, description="Enable debug mode (exposes /docs)")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    log_format: Literal["json", "text"] = Field(default="json", description="Log output format")

    tracing_console_export: bool = Field(
        default=False, description="Export OpenTelemetry spans to the console"
    )

    # ========================================
    # HTTP Server
    # ========================================

    http_host: str = Field(
        default="0.0.0.0",
        description="HTTP server bind address (127.0.0.1 for loopback only)",
    )

    http_port: int = Field(default=8080, ge=1, le=65535, description="HTTP server port")

    http_read_timeout_seconds: float = Field(
        default=5.0, ge=0.1, le=300.0, description="Time allowed to receive a request body"
    )

    http_write_timeout_seconds: float = Field(
        default=10.0,
        ge=0.1,
        le=300.0,
        description="Time allowed for router I/O before the response is written",
    )

    # ========================================
    # RouterOS Integration
    # ========================================

    routeros_default_port: int = Field(
        default=8728, ge=1, le=65535, description="API port used when a request omits one"
    )

    routeros_login_method: Literal["plain", "token"] = Field(
        default="plain",
        description="Login handshake: 'plain' for RouterOS >= 6.43, 'token' for older",
    )

    routeros_encoding: str = Field(default="utf-8", description="Encoding for API words")

    # ========================================
    # Validators
    # ========================================

    @model_validator(mode="after")
    def validate_exposure(self) -> "Settings":
        """Warn when the unauthenticated gateway is exposed beyond loopback in prod."""
        if self.environment == "prod" and not self.is_loopback:
            warnings.warn(
                "Gateway performs no authentication of its own; "
                f"binding {self.http_host} in production exposes router credentials passthrough",
                UserWarning,
                stacklevel=2,
            )
        return self

    # ========================================
    # Helper Methods
    # ========================================

    @property
    def is_loopback(self) -> bool:
        """Check if the bind address is a loopback address."""
        if self.http_host == "localhost":
            return True
        try:
            return ipaddress.ip_address(self.http_host).is_loopback
        except ValueError:
            return False

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return self.model_dump()


# ========================================
# Global Settings Instance
# ========================================

_settings: Settings | None = None


def get_settings() -> Settings:
    """Get global settings instance (singleton).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set global settings instance.

    Args:
        settings: Settings instance to use globally
    """
    global _settings
    _settings = settings


class ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source serving values already read from a config file.

    Ranked below environment variables and .env so the file only fills in
    what the environment leaves unset.
    """

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self.data = data

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self.data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self.data.items()
            if name in self.settings_cls.model_fields
        }


def load_settings_from_file(config_file: Path | str) -> Settings:
    """Load settings from YAML or TOML configuration file.

    Environment variables still override values from the file.

    Args:
        config_file: Path to configuration file

    Returns:
        Settings instance loaded from file

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file format is invalid

    Example:
        settings = load_settings_from_file("config/gateway.yaml")
        set_settings(settings)
    """
    config_path = Path(config_file)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    if suffix in [".yaml", ".yml"]:
        import yaml

        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}
    elif suffix == ".toml":
        import tomllib

        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)
    else:
        raise ValueError(f"Unsupported config file format: {suffix}. Use .yaml, .yml, or .toml")

    class FileBackedSettings(Settings):
        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource,
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (
                init_settings,
                env_settings,
                dotenv_settings,
                ConfigFileSettingsSource(settings_cls, config_data),
                file_secret_settings,
            )

    # Values are validated once, by FileBackedSettings
    return Settings.model_construct(**FileBackedSettings().model_dump())

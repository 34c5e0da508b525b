"""User configuration models."""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Values published by the Flutter Gradle plugin (FlutterExtension)
FLUTTER_SDK_DEFAULTS: dict[str, int | str] = {
    "flutter.compileSdkVersion": 35,
    "flutter.minSdkVersion": 21,
    "flutter.targetSdkVersion": 35,
    "flutter.ndkVersion": "26.3.11579264",
    "flutter.versionCode": 1,
    "flutter.versionName": "1.0",
}


class UserConfigData(BaseSettings):
    """User configuration data model with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (highest)
    2. Constructor arguments (file data)
    3. .env file
    4. Default values (lowest)
    """

    model_config = SettingsConfigDict(
        env_prefix="GRADLEBOX_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Return sources in priority order: env > init > dotenv > file_secret."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    # Logging
    log_level: str = "WARNING"

    # Values for references such as flutter.minSdkVersion and for omitted SDK fields
    sdk_defaults: dict[str, int | str] = Field(
        default_factory=lambda: dict(FLUTTER_SDK_DEFAULTS),
        description="Values injected by the toolchain, keyed by reference name",
    )

    # Signing configs defined outside descriptors (references only)
    signing_configs: list[str] = Field(
        default_factory=list,
        description="Names of signing configs available to every descriptor",
    )

    max_workers: int = Field(
        default=1,
        ge=1,
        description="Number of threads used to resolve variants",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a recognized value."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v

    @field_validator("signing_configs", mode="before")
    @classmethod
    def decode_signing_configs(cls, v: Any) -> Any:
        """Accept a comma separated string of names."""
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

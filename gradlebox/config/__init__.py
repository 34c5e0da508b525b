"""Configuration package for Gradlebox."""

from gradlebox.config.models import FLUTTER_SDK_DEFAULTS, UserConfigData
from gradlebox.config.user_config import UserConfig, create_user_config


__all__ = [
    "FLUTTER_SDK_DEFAULTS",
    "UserConfig",
    "UserConfigData",
    "create_user_config",
]

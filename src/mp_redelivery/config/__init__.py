"""Config – 12-factor settings and loaders."""

from mp_redelivery.config.settings import (
    DecodeFailurePolicy,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    RedeliverySettings,
    Settings,
    SettingsLoader,
)
from mp_redelivery.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DecodeFailurePolicy",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RedeliverySettings",
    "Settings",
    "SettingsLoader",
]

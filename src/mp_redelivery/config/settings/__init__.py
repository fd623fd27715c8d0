"""Config settings – 12-factor env-based configuration."""
from mp_redelivery.config.settings.base import Settings
from mp_redelivery.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mp_redelivery.config.settings.redelivery import DecodeFailurePolicy, RedeliverySettings

__all__ = [
    "DecodeFailurePolicy",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "RedeliverySettings",
    "Settings",
    "SettingsLoader",
]

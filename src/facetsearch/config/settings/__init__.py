"""Config settings – env-based configuration."""
from facetsearch.config.settings.base import Settings
from facetsearch.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from facetsearch.config.settings.typesense import TypesenseNode, TypesenseSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
    "TypesenseNode",
    "TypesenseSettings",
]

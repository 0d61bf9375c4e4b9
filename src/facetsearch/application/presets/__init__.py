"""Application presets – export and reload of search sessions."""
from facetsearch.application.presets.models import PRESET_FORMAT_VERSION, SearchPreset
from facetsearch.application.presets.codec import (
    preset_from_dict,
    preset_to_dict,
    specification_from_dict,
    specification_to_dict,
)
from facetsearch.application.presets.store import InMemoryPresetStore, JsonFilePresetStore, PresetStore

__all__ = [
    "InMemoryPresetStore",
    "JsonFilePresetStore",
    "PRESET_FORMAT_VERSION",
    "PresetStore",
    "SearchPreset",
    "preset_from_dict",
    "preset_to_dict",
    "specification_from_dict",
    "specification_to_dict",
]

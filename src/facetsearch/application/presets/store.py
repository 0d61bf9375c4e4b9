"""Application presets – preset storage port and local implementations."""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from facetsearch.application.presets.codec import preset_from_dict, preset_to_dict
from facetsearch.application.presets.models import SearchPreset
from facetsearch.kernel.errors import SerializationError
from facetsearch.observability.logging import get_logger

_log = get_logger(__name__)


@runtime_checkable
class PresetStore(Protocol):
    def save(self, preset: SearchPreset) -> None: ...
    def get(self, preset_id: str) -> SearchPreset | None: ...
    def list(self) -> list[SearchPreset]: ...
    def delete(self, preset_id: str) -> bool: ...


class InMemoryPresetStore:
    """Dict-backed store, insertion ordered."""

    def __init__(self) -> None:
        self._presets: dict[str, SearchPreset] = {}

    def save(self, preset: SearchPreset) -> None:
        self._presets[preset.id] = preset

    def get(self, preset_id: str) -> SearchPreset | None:
        return self._presets.get(preset_id)

    def list(self) -> list[SearchPreset]:
        return list(self._presets.values())

    def delete(self, preset_id: str) -> bool:
        return self._presets.pop(preset_id, None) is not None


class JsonFilePresetStore:
    """All presets in one JSON file, ``{"presets": [...]}``.

    Writes go through a temporary file and an atomic rename. A missing file
    reads as empty; an unreadable one raises :class:`SerializationError`.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, preset: SearchPreset) -> None:
        presets = {p.id: p for p in self.list()}
        presets[preset.id] = preset
        self._write(list(presets.values()))
        _log.debug("preset.saved", preset_id=preset.id, name=preset.name)

    def get(self, preset_id: str) -> SearchPreset | None:
        for preset in self.list():
            if preset.id == preset_id:
                return preset
        return None

    def list(self) -> list[SearchPreset]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SerializationError(
                f"preset file {self._path} is not valid JSON", payload_type="preset_file", cause=exc
            ) from exc
        if not isinstance(data, dict) or not isinstance(data.get("presets"), list):
            raise SerializationError(f"preset file {self._path} has no 'presets' list", payload_type="preset_file")
        return [preset_from_dict(item) for item in data["presets"]]

    def delete(self, preset_id: str) -> bool:
        presets = self.list()
        remaining = [p for p in presets if p.id != preset_id]
        if len(remaining) == len(presets):
            return False
        self._write(remaining)
        return True

    def _write(self, presets: list[SearchPreset]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        body = json.dumps({"presets": [preset_to_dict(p) for p in presets]}, indent=2, ensure_ascii=False)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(body)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


__all__ = ["InMemoryPresetStore", "JsonFilePresetStore", "PresetStore"]

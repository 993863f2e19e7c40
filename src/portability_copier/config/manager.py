"""Configuration manager."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Optional

from . import defaults
from .schema import validate_config


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _get_nested(config: dict[str, Any], key: str, default: Any = None) -> Any:
    current: Any = config
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def _set_nested(config: dict[str, Any], key: str, value: Any) -> None:
    current = config
    parts = key.split(".")
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    current[parts[-1]] = value


def _load_overrides(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be an object")
    return data


class ConfigManager:
    """Built-in defaults, then an optional user JSON file, then runtime ``set`` calls.

    Later layers win key by key. A missing user file is an error; the file only
    needs the keys it changes.
    """

    def __init__(self, user_config_path: Optional[Path] = None) -> None:
        self.user_config_path = user_config_path
        self._defaults = copy.deepcopy(defaults.DEFAULT_CONFIG)
        self._user = _load_overrides(user_config_path) if user_config_path else {}
        self._runtime: dict[str, Any] = {}
        self._config = self._merge_layers()

    def _merge_layers(self) -> dict[str, Any]:
        return _deep_merge(_deep_merge(self._defaults, self._user), self._runtime)

    def get(self, key: str, default: Any = None) -> Any:
        return _get_nested(self._config, key, default)

    def set(self, key: str, value: Any) -> None:
        _set_nested(self._runtime, key, value)
        self._config = self._merge_layers()

    def validate_config(self) -> list[str]:
        return validate_config(self._config)

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    def overrides(self) -> dict[str, Any]:
        """User file and runtime values only, i.e. what differs from the defaults' layer."""
        return copy.deepcopy(_deep_merge(self._user, self._runtime))

    def save_user_config(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(self.overrides(), handle, ensure_ascii=False, indent=2)

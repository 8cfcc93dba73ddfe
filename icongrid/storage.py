from __future__ import annotations

import configparser
import json
from pathlib import Path
from typing import Any

from .errors import IconGridError
from .interfaces import SettingsStoreInterface

# Never a valid group name, so no group turns into configparser defaults.
_NO_DEFAULTS = "\x00defaults"


def _check_group(group: str) -> None:
    if not group or group != group.strip() or any(ch in group for ch in "]\r\n\x00"):
        raise IconGridError(f"Invalid settings group name: {group!r}")


def _check_key(key: str) -> None:
    if (
        not key
        or key != key.strip()
        or key[0] in "[#;"
        or any(ch in key for ch in "=\r\n")
    ):
        raise IconGridError(f"Invalid settings key: {key!r}")


def _unquote(raw: str) -> str:
    if raw.startswith('"'):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return raw
        if isinstance(decoded, str):
            return decoded
    return raw


class MemorySettingsStore(SettingsStoreInterface):
    def __init__(self) -> None:
        self._groups: dict[str, dict[str, Any]] = {}

    def child_keys(self, group: str) -> list[str]:
        return list(self._groups.get(group, {}))

    def value(self, group: str, key: str, default: Any = None) -> Any:
        return self._groups.get(group, {}).get(key, default)

    def set_value(self, group: str, key: str, value: Any) -> None:
        self._groups.setdefault(group, {})[key] = value


class IniSettingsStore(SettingsStoreInterface):
    """Settings persisted in an INI file, one section per group.

    Values are written as JSON strings so surrounding whitespace and line
    breaks survive a reload; unquoted values in hand-edited files are read
    as they are. Changes stay in memory until :meth:`sync`.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._parser = configparser.ConfigParser(
            delimiters=("=",),
            interpolation=None,
            default_section=_NO_DEFAULTS,
        )
        self._parser.optionxform = str
        if self.path.exists():
            self._parser.read(self.path, encoding="utf-8")

    def child_keys(self, group: str) -> list[str]:
        if not self._parser.has_section(group):
            return []
        return list(self._parser.options(group))

    def value(self, group: str, key: str, default: Any = None) -> Any:
        if not self._parser.has_option(group, key):
            return default
        return _unquote(self._parser.get(group, key))

    def set_value(self, group: str, key: str, value: Any) -> None:
        _check_group(group)
        _check_key(key)
        if not self._parser.has_section(group):
            self._parser.add_section(group)
        self._parser.set(group, key, json.dumps(str(value), ensure_ascii=False))

    def sync(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            self._parser.write(handle)

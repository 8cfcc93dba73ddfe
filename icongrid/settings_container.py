from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Hashable, Iterator

from .interfaces import KeyCodecInterface, SettingsStoreInterface
from .models import underlying

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class IntKeyCodec(KeyCodecInterface):
    def to_key(self, raw: str) -> int:
        return int(raw)

    def from_key(self, key: Any) -> str:
        return str(underlying(key))


class TextKeyCodec(KeyCodecInterface):
    def to_key(self, raw: str) -> str:
        return raw

    def from_key(self, key: Any) -> str:
        return str(key)


def _coerce(raw: Any, default: Any) -> Any:
    if default is None:
        return raw
    if isinstance(raw, type(default)) and (
        isinstance(default, bool) or not isinstance(raw, bool)
    ):
        return raw
    if isinstance(default, bool):
        text = str(raw).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if isinstance(default, Enum):
        return type(default)(_coerce(raw, default.value))
    return type(default)(raw)


class SettingsContainer:
    """Typed key/value pairs persisted under one group of a settings store.

    Keys are converted to and from the store's string keys by a codec, so
    the same container works with integer ids (including enum members) or
    plain text keys. Values read back from a store are kept as they come
    until :meth:`value` coerces them to the type of the given default.
    """

    def __init__(self, group: str, codec: KeyCodecInterface) -> None:
        self._group = group
        self._codec = codec
        self._data: dict[Hashable, Any] = {}

    @classmethod
    def with_int_keys(cls, group: str) -> "SettingsContainer":
        return cls(group, IntKeyCodec())

    @classmethod
    def with_text_keys(cls, group: str) -> "SettingsContainer":
        return cls(group, TextKeyCodec())

    @property
    def group(self) -> str:
        return self._group

    def _key(self, key: Any) -> Hashable:
        return self._codec.to_key(self._codec.from_key(key))

    def read(self, store: SettingsStoreInterface) -> None:
        for raw_key in store.child_keys(self._group):
            try:
                key = self._codec.to_key(raw_key)
            except ValueError:
                logging.warning("Skipping settings key %r in group %s", raw_key, self._group)
                continue
            self._data[key] = store.value(self._group, raw_key)

    def write(self, store: SettingsStoreInterface) -> None:
        for key, value in self._data.items():
            store.set_value(self._group, self._codec.from_key(key), value)

    def value(self, key: Any, default: Any = 0) -> Any:
        key = self._key(key)
        if key not in self._data:
            return default
        raw = self._data[key]
        try:
            return _coerce(raw, default)
        except (TypeError, ValueError):
            logging.warning(
                "Settings value %r for key %r in group %s is not a %s",
                raw,
                key,
                self._group,
                type(default).__name__,
            )
            return default

    def set_value(self, key: Any, value: Any) -> None:
        self._data[self._key(key)] = value

    def contains(self, key: Any) -> bool:
        return self._key(key) in self._data

    def keys(self) -> list[Hashable]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._data)

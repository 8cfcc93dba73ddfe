from __future__ import annotations

from typing import Any, Hashable, Protocol


class SettingsStoreInterface(Protocol):
    def child_keys(self, group: str) -> list[str]:
        ...

    def value(self, group: str, key: str, default: Any = None) -> Any:
        ...

    def set_value(self, group: str, key: str, value: Any) -> None:
        ...


class KeyCodecInterface(Protocol):
    def to_key(self, raw: str) -> Hashable:
        ...

    def from_key(self, key: Any) -> str:
        ...

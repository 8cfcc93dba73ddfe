from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


def underlying(key: Any) -> int:
    """Integral value of an index key: a plain int or an enum with an int value."""
    if isinstance(key, bool):
        raise TypeError("bool is not a valid index key")
    if isinstance(key, Enum):
        value = key.value
        if isinstance(value, int) and not isinstance(value, bool):
            return int(value)
        raise TypeError(f"{type(key).__name__} has no integral underlying value")
    if isinstance(key, int):
        return key
    raise TypeError(f"Unsupported index key type: {type(key).__name__}")


def _pair(value: Any, label: str) -> tuple[int, int]:
    try:
        x, y = value
    except (TypeError, ValueError) as exc:
        raise TypeError(f"{label} must be an (x, y) pair") from exc
    return int(x), int(y)


@dataclass(frozen=True)
class GridSize:
    columns: int
    rows: int

    @property
    def capacity(self) -> int:
        return self.columns * self.rows

    @classmethod
    def coerce(cls, value: Any) -> "GridSize":
        if isinstance(value, GridSize):
            return value
        columns, rows = _pair(value, "grid_size")
        return cls(columns=columns, rows=rows)


@dataclass(frozen=True)
class CellSize:
    width: int = 0
    height: int = 0

    @property
    def is_null(self) -> bool:
        return self.width == 0 and self.height == 0

    @classmethod
    def coerce(cls, value: Any) -> "CellSize":
        if value is None:
            return cls()
        if isinstance(value, CellSize):
            return value
        width, height = _pair(value, "cell_size")
        return cls(width=width, height=height)

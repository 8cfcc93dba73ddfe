from __future__ import annotations

import logging
from typing import Any, Iterator

import numpy as np
from PIL import Image

from .errors import IconGridError, MovedFromError
from .models import CellSize, GridSize, underlying


def _as_image(source: Any) -> Image.Image:
    if source is None:
        raise IconGridError("Source image is null")
    if isinstance(source, np.ndarray):
        if source.size == 0:
            raise IconGridError("Source image is empty")
        try:
            source = Image.fromarray(source)
        except (TypeError, ValueError) as exc:
            raise IconGridError(f"Unsupported pixel buffer {source.dtype}{source.shape}") from exc
    if not isinstance(source, Image.Image):
        raise IconGridError(f"Unsupported source image type: {type(source).__name__}")
    if source.width <= 0 or source.height <= 0:
        raise IconGridError("Source image is empty")
    return source


class IconGrid:
    """Look-up table of equally sized icons cut out of a single sprite sheet.

    Every cell is extracted once, in row-major order, when the grid is built.
    Cells are addressed either by linear index or by column and row, where
    ``index = row * columns + col``. Lookups outside the extracted range
    return :attr:`invalid_cell`, an empty image, instead of raising.

    By default ``get(col, row)`` and ``is_valid(col, row)`` only bound-check
    the combined index, so an out-of-range column can alias onto a cell of
    the next row. Pass ``strict_bounds=True`` to reject such coordinates.
    """

    def __init__(
        self,
        image: Any,
        grid_size: Any,
        cell_size: Any = None,
        *,
        strict_bounds: bool = False,
    ) -> None:
        source = _as_image(image)
        grid = GridSize.coerce(grid_size)
        if grid.columns < 1 or grid.rows < 1:
            raise IconGridError(
                f"Grid must have at least one column and one row, got {grid.columns}x{grid.rows}"
            )

        size = CellSize.coerce(cell_size)
        if size.is_null:
            size = CellSize(source.width // grid.columns, source.height // grid.rows)
            if size.width == 0 or size.height == 0:
                raise IconGridError(
                    f"Image {source.width}x{source.height} is too small "
                    f"for a {grid.columns}x{grid.rows} grid"
                )
        elif size.width <= 0 or size.height <= 0:
            raise IconGridError(f"Invalid cell size {size.width}x{size.height}")

        self._grid_size = grid
        self._cell_size = size
        self._strict_bounds = strict_bounds
        self._cells: tuple[Image.Image, ...] | None = self._extract(source, grid, size)
        self._invalid_cell = Image.new(source.mode, (0, 0))
        logging.info(
            "Icon grid %sx%s built from %sx%s image, cell size %sx%s",
            grid.columns,
            grid.rows,
            source.width,
            source.height,
            size.width,
            size.height,
        )

    @classmethod
    def from_strip(
        cls,
        image: Any,
        count: int,
        cell_size: Any = None,
        *,
        strict_bounds: bool = False,
    ) -> "IconGrid":
        """Build a grid from a sheet holding a single row of ``count`` icons."""
        return cls(image, GridSize(count, 1), cell_size, strict_bounds=strict_bounds)

    @staticmethod
    def _extract(
        source: Image.Image, grid: GridSize, size: CellSize
    ) -> tuple[Image.Image, ...]:
        if grid.columns * size.width > source.width or grid.rows * size.height > source.height:
            logging.warning(
                "Grid %sx%s of %sx%s cells exceeds the %sx%s image; edge cells are clipped",
                grid.columns,
                grid.rows,
                size.width,
                size.height,
                source.width,
                source.height,
            )

        cells: list[Image.Image] = []
        for row in range(grid.rows):
            top = min(row * size.height, source.height)
            bottom = min(top + size.height, source.height)
            for col in range(grid.columns):
                left = min(col * size.width, source.width)
                right = min(left + size.width, source.width)
                cells.append(source.crop((left, top, right, bottom)))
        return tuple(cells)

    def move(self) -> "IconGrid":
        """Transfer the extracted cells into a new grid, leaving this one unusable."""
        cells = self._require_cells()
        target = object.__new__(IconGrid)
        target._grid_size = self._grid_size
        target._cell_size = self._cell_size
        target._strict_bounds = self._strict_bounds
        target._cells = cells
        target._invalid_cell = self._invalid_cell
        self._cells = None
        return target

    def _require_cells(self) -> tuple[Image.Image, ...]:
        if self._cells is None:
            raise MovedFromError("Icon grid was moved and can no longer be used")
        return self._cells

    @property
    def grid_size(self) -> GridSize:
        return self._grid_size

    @property
    def cell_size(self) -> CellSize:
        return self._cell_size

    @property
    def strict_bounds(self) -> bool:
        return self._strict_bounds

    @property
    def cells(self) -> tuple[Image.Image, ...]:
        return self._require_cells()

    @property
    def invalid_cell(self) -> Image.Image:
        return self._invalid_cell

    def __len__(self) -> int:
        return len(self._require_cells())

    def __iter__(self) -> Iterator[Image.Image]:
        return iter(self._require_cells())

    def to_index(self, col: Any, row: Any) -> int:
        return underlying(row) * self._grid_size.columns + underlying(col)

    def to_coord(self, index: Any) -> tuple[int, int]:
        """Column and row for ``index``; the row truncates toward zero for negative indices."""
        index = underlying(index)
        columns = self._grid_size.columns
        row = index // columns if index >= 0 else -(-index // columns)
        return index - row * columns, row

    def is_valid(self, index: Any, row: Any = None) -> bool:
        """True if a cell exists at ``index``, or at ``(index, row)`` as column and row."""
        cells = self._require_cells()
        if row is None:
            linear = underlying(index)
        else:
            col = underlying(index)
            row = underlying(row)
            if self._strict_bounds and not (
                0 <= col < self._grid_size.columns and 0 <= row < self._grid_size.rows
            ):
                return False
            linear = row * self._grid_size.columns + col
        return 0 <= linear < len(cells)

    def get(self, index: Any, row: Any = None) -> Image.Image:
        """Cell at linear ``index``, or at column ``index`` and ``row``.

        Returns :attr:`invalid_cell` when nothing is stored there.
        """
        if not self.is_valid(index, row):
            return self._invalid_cell
        if row is None:
            return self._cells[underlying(index)]
        return self._cells[self.to_index(index, row)]

    def icon_size(self) -> CellSize:
        return self._cell_size

    def icon_radius(self) -> int:
        return self._cell_size.width // 2

"""Pack grown trees into a rows x columns grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..storage.models import SessionRecord
from ..timespec import GridSpec


@dataclass(frozen=True, slots=True)
class Grid:
    rows: int
    columns: int
    slots: tuple[tuple[SessionRecord | None, ...], ...]
    truncated: int = 0

    @property
    def shown(self) -> int:
        return sum(1 for row in self.slots for slot in row if slot is not None)


def grid_dimensions(
    spec: GridSpec,
    *,
    area: tuple[int, int],
    tree_size: tuple[int, int],
) -> tuple[int, int]:
    """Resolve ``spec`` into ``(rows, columns)``.

    ``whole`` fits as many trees as ``area`` (width, height) allows, with one
    separator line or column between neighbouring trees of ``tree_size``
    (height, width).
    """

    if not spec.whole:
        return spec.rows, spec.columns  # type: ignore[return-value]
    width, height = area
    tree_height, tree_width = tree_size
    rows = max(1, height // (tree_height + 1))
    columns = max(1, (width + 1) // (tree_width + 1))
    return rows, columns


def layout_grid(
    records: Sequence[SessionRecord],
    spec: GridSpec,
    *,
    area: tuple[int, int] = (80, 24),
    tree_size: tuple[int, int] = (5, 5),
) -> Grid:
    """Place ``records`` row-major in their given order.

    Slots beyond the record count stay empty; records beyond ``rows *
    columns`` are dropped and counted in :attr:`Grid.truncated`.
    """

    rows, columns = grid_dimensions(spec, area=area, tree_size=tree_size)
    capacity = rows * columns
    shown = list(records[:capacity])
    padded: list[SessionRecord | None] = [*shown, *([None] * (capacity - len(shown)))]
    slots = tuple(tuple(padded[r * columns : (r + 1) * columns]) for r in range(rows))
    return Grid(
        rows=rows,
        columns=columns,
        slots=slots,
        truncated=max(0, len(records) - capacity),
    )


__all__ = ["Grid", "grid_dimensions", "layout_grid"]

"""Hex grid orientation remapping for quarter turns."""

from __future__ import annotations

from typing import Optional

from scene_rotator.geometry import swaps_axes
from scene_rotator.scene.models import GridType


# Row-offset hexes become column-offset hexes of the same parity, and back.
_HEX_SWAP: dict[GridType, GridType] = {
    GridType.HEX_ODD_R: GridType.HEX_ODD_Q,
    GridType.HEX_EVEN_R: GridType.HEX_EVEN_Q,
    GridType.HEX_ODD_Q: GridType.HEX_ODD_R,
    GridType.HEX_EVEN_Q: GridType.HEX_EVEN_R,
}


def remap_grid_type(grid_type: GridType | int, step: object) -> Optional[GridType]:
    """Return the grid type to store after rotating, or ``None`` if unchanged."""

    if not swaps_axes(step):
        return None
    try:
        current = GridType(int(grid_type))
    except ValueError:
        return None
    if not current.is_row_column_hex:
        return None
    return _HEX_SWAP[current]


__all__ = ["remap_grid_type"]

from __future__ import annotations

import pytest

from scene_rotator.planning import remap_grid_type
from scene_rotator.scene import GridType


@pytest.mark.parametrize("step", [90, -90, 270, -270])
def test_quarter_turn_swaps_hex_orientation(step: int) -> None:
    assert remap_grid_type(GridType.HEX_ODD_R, step) is GridType.HEX_ODD_Q
    assert remap_grid_type(GridType.HEX_EVEN_R, step) is GridType.HEX_EVEN_Q
    assert remap_grid_type(GridType.HEX_ODD_Q, step) is GridType.HEX_ODD_R
    assert remap_grid_type(GridType.HEX_EVEN_Q, step) is GridType.HEX_EVEN_R


def test_raw_integer_grid_types_are_accepted() -> None:
    assert remap_grid_type(2, 90) is GridType.HEX_ODD_Q
    assert remap_grid_type(5, -90) is GridType.HEX_EVEN_R


@pytest.mark.parametrize("grid_type", [GridType.GRIDLESS, GridType.SQUARE, 9])
def test_non_hex_grids_unchanged(grid_type: object) -> None:
    assert remap_grid_type(grid_type, 90) is None


@pytest.mark.parametrize("grid_type", list(GridType))
def test_half_turn_leaves_every_grid_alone(grid_type: GridType) -> None:
    assert remap_grid_type(grid_type, 180) is None


def test_two_quarter_turns_restore_original() -> None:
    once = remap_grid_type(GridType.HEX_EVEN_R, 90)
    assert once is not None
    assert remap_grid_type(once, 90) is GridType.HEX_EVEN_R


@pytest.mark.parametrize("grid_type", list(GridType))
def test_only_row_column_hexes_are_remapped(grid_type: GridType) -> None:
    remapped = remap_grid_type(grid_type, 90)
    assert (remapped is not None) == grid_type.is_row_column_hex
    if remapped is not None:
        assert remapped.is_row_column_hex

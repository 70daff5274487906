from __future__ import annotations

import pytest

from scene_rotator.errors import InvalidRotationStep
from scene_rotator.geometry import (
    normalize_angle,
    normalize_step,
    rotate_offset,
    rotated_dimensions,
    swaps_axes,
    transform_point,
)


@pytest.mark.parametrize(
    "step,expected",
    [(90, 90), (-270, 90), (-90, -90), (270, -90), (180, 180), (-180, 180), (90.0, 90)],
)
def test_normalize_step_folds_equivalent_turns(step: object, expected: int) -> None:
    assert normalize_step(step) == expected


@pytest.mark.parametrize(
    "step",
    [0, 45, 360, -360, 91, 90.5, True, "90", None, float("inf"), float("-inf"), float("nan")],
)
def test_normalize_step_rejects_non_quarter_turns(step: object) -> None:
    with pytest.raises(InvalidRotationStep):
        normalize_step(step)


def test_invalid_step_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        transform_point(0, 0, 10, 10, 45)


def test_transform_point_formulas() -> None:
    assert transform_point(10, 20, 1000, 500, 90) == (480, 10)
    assert transform_point(10, 20, 1000, 500, -90) == (20, 990)
    assert transform_point(10, 20, 1000, 500, 180) == (990, 480)
    assert transform_point(10, 20, 1000, 500, 270) == (20, 990)
    assert transform_point(10, 20, 1000, 500, -270) == (480, 10)


@pytest.mark.parametrize("step", [90, -90, 180])
@pytest.mark.parametrize("point", [(0, 0), (100, 100), (999, 1), (12.5, 487.25)])
def test_inverse_leg_restores_point(step: int, point: tuple[float, float]) -> None:
    width, height = 1000, 500
    new_width, new_height = rotated_dimensions(width, height, step)
    rotated = transform_point(point[0], point[1], width, height, step)
    back = transform_point(rotated[0], rotated[1], new_width, new_height, -step)
    assert back == point


def test_four_clockwise_turns_return_home() -> None:
    width, height = 640, 480
    x, y = 17, 33
    for _ in range(4):
        x, y = transform_point(x, y, width, height, 90)
        width, height = height, width
    assert (x, y) == (17, 33)


def test_swaps_axes() -> None:
    assert swaps_axes(90) is True
    assert swaps_axes(-90) is True
    assert swaps_axes(270) is True
    assert swaps_axes(180) is False
    assert rotated_dimensions(1000, 500, 90) == (500, 1000)
    assert rotated_dimensions(1000, 500, 180) == (1000, 500)


def test_rotate_offset_is_a_vector_rotation() -> None:
    assert rotate_offset(10, 20, 90) == (-20, 10)
    assert rotate_offset(10, 20, -90) == (20, -10)
    assert rotate_offset(10, 20, 180) == (-10, -20)
    assert rotate_offset(0, 0, 90) == (0, 0)


@pytest.mark.parametrize(
    "angle,expected",
    [(0, 0.0), (90, 90.0), (360, 0.0), (450, 90.0), (-90, 270.0), (-360, 0.0), (-0.0, 0.0), (-1e-20, 0.0)],
)
def test_normalize_angle_range(angle: float, expected: float) -> None:
    result = normalize_angle(angle)
    assert result == expected
    assert 0.0 <= result < 360.0

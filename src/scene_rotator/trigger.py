"""Thin trigger surface: direction choice in, one guarded rotation out."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Optional

from scene_rotator.control.orchestrator import RotationResult, SceneRotator
from scene_rotator.errors import PlanningFailure
from scene_rotator.interfaces import LoggingNotifier, Notifier, SceneHandle


logger = logging.getLogger(__name__)


class RotationDirection(IntEnum):
    CLOCKWISE = 90
    COUNTER_CLOCKWISE = -90

    @classmethod
    def parse(cls, value: object) -> "RotationDirection":
        if isinstance(value, RotationDirection):
            return value
        text = str(value).strip().lower().replace("_", "-")
        if text in _ALIASES:
            return _ALIASES[text]
        raise ValueError(f"Unknown rotation direction {value!r}")


_ALIASES = {
    "cw": RotationDirection.CLOCKWISE,
    "clockwise": RotationDirection.CLOCKWISE,
    "90": RotationDirection.CLOCKWISE,
    "ccw": RotationDirection.COUNTER_CLOCKWISE,
    "counter-clockwise": RotationDirection.COUNTER_CLOCKWISE,
    "counterclockwise": RotationDirection.COUNTER_CLOCKWISE,
    "-90": RotationDirection.COUNTER_CLOCKWISE,
}


class RotationTrigger:
    """Run rotations on behalf of a UI control, one at a time per scene.

    The engine itself does not serialise rotations of the same scene; this
    trigger refuses a second activation while the first is still in flight.
    """

    def __init__(self, rotator: SceneRotator, *, notifier: Optional[Notifier] = None) -> None:
        self._rotator = rotator
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._in_flight: set[str] = set()

    def is_busy(self, scene_id: str) -> bool:
        return scene_id in self._in_flight

    async def activate(self, scene: SceneHandle, direction: object) -> Optional[RotationResult]:
        """Rotate *scene* in *direction*; ``None`` when a rotation is already running."""

        chosen = RotationDirection.parse(direction)
        try:
            scene_id = scene.snapshot().id
        except Exception as exc:
            failure = PlanningFailure(f"Could not read scene: {exc}")
            logger.error("rotation trigger: %s", failure.message)
            self._notifier.error(f"Scene rotation failed: {failure.message}")
            raise failure from exc
        if scene_id in self._in_flight:
            logger.warning("rotation already in flight for scene %s; ignoring trigger", scene_id)
            self._notifier.warn("A rotation of this scene is already in progress.")
            return None
        self._in_flight.add(scene_id)
        try:
            result = await self._rotator.rotate(scene, int(chosen))
        finally:
            self._in_flight.discard(scene_id)
        self._notifier.info("Rotation complete.")
        return result


__all__ = ["RotationDirection", "RotationTrigger"]

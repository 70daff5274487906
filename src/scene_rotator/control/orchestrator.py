"""Scene rotation orchestrator.

One rotation runs through a fixed sequence of stages and ends in exactly one
document write::

    IDLE -> PLANNING_ENTITIES -> ROTATING_IMAGES -> ADJUSTING_GRID
         -> INVALIDATING_FOG -> COMMITTING -> DONE

``FAILED`` is reachable from every stage. Planning and commit errors are
fatal; image and fog errors are downgraded to warnings so geometry always
rotates as a whole even when an image cannot be rotated.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from scene_rotator.config.models import RotationCtx
from scene_rotator.control.payload import UpdatePayload
from scene_rotator.errors import (
    CommitFailure,
    FogResetUnavailable,
    ImageRotationFailed,
    PlanningFailure,
    RotationError,
)
from scene_rotator.geometry import normalize_step, rotate_offset, rotated_dimensions
from scene_rotator.images.cache import ImageRotationCache
from scene_rotator.interfaces import (
    FileStorage,
    FogController,
    FogResettable,
    LoggingNotifier,
    Notifier,
    SceneHandle,
)
from scene_rotator.planning import EntityTransformPlanner, remap_grid_type
from scene_rotator.scene.models import SceneSnapshot


logger = logging.getLogger(__name__)


class RotationStage(str, Enum):
    IDLE = "idle"
    PLANNING_ENTITIES = "planning_entities"
    ROTATING_IMAGES = "rotating_images"
    ADJUSTING_GRID = "adjusting_grid"
    INVALIDATING_FOG = "invalidating_fog"
    COMMITTING = "committing"
    DONE = "done"
    FAILED = "failed"


StageListener = Callable[[RotationStage], None]


@dataclass(frozen=True)
class RotationResult:
    """Outcome of a completed rotation."""

    scene_id: str
    step: int
    stage: RotationStage
    payload: Mapping[str, Any]
    images: Mapping[str, str] = field(default_factory=dict)
    warnings: tuple[RotationError, ...] = ()
    fog_reset: bool = False


@dataclass
class _RotationRun:
    step: int
    stage: RotationStage = RotationStage.IDLE
    payload: UpdatePayload = field(default_factory=UpdatePayload)
    images: dict[str, str] = field(default_factory=dict)
    warnings: list[RotationError] = field(default_factory=list)
    fog_reset: bool = False


class SceneRotator:
    """Rotate scenes by quarter turns through their collaborators."""

    def __init__(
        self,
        files: Optional[FileStorage] = None,
        *,
        ctx: Optional[RotationCtx] = None,
        notifier: Optional[Notifier] = None,
        fog: Optional[FogController] = None,
        image_cache: Optional[ImageRotationCache] = None,
        stage_listener: Optional[StageListener] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._ctx = ctx or RotationCtx()
        self._config = self._ctx.config
        self._toggles = self._ctx.debug_policy.logging
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._fog = fog
        if image_cache is None and files is not None:
            image_cache = ImageRotationCache.from_config(files, self._config, self._ctx.debug_policy)
        self._images = image_cache
        self._stage_listener = stage_listener
        self._sleep = sleep

    # ------------------------------------------------------------------
    async def rotate(self, scene: SceneHandle, step: object) -> RotationResult:
        """Rotate *scene* by *step* degrees and commit the result atomically."""

        # Rejected before any collaborator is touched.
        try:
            canonical = normalize_step(step)
        except RotationError as exc:
            self._notifier.error(f"Scene rotation failed: {exc.message}")
            raise
        run = _RotationRun(step=canonical)
        try:
            self._enter(run, RotationStage.PLANNING_ENTITIES)
            snapshot = self._plan(scene, run)

            self._enter(run, RotationStage.ROTATING_IMAGES)
            await self._rotate_images(snapshot, run)

            self._enter(run, RotationStage.ADJUSTING_GRID)
            self._adjust_grid(snapshot, run)

            self._enter(run, RotationStage.INVALIDATING_FOG)
            await self._invalidate_fog(scene, snapshot, run)

            self._enter(run, RotationStage.COMMITTING)
            body = await self._commit(scene, run)
        except RotationError as exc:
            failed_at = run.stage
            self._enter(run, RotationStage.FAILED)
            logger.error("rotation failed during %s: %s", failed_at.value, exc.message)
            self._notifier.error(f"Scene rotation failed: {exc.message}")
            raise

        self._enter(run, RotationStage.DONE)
        return RotationResult(
            scene_id=snapshot.id,
            step=canonical,
            stage=run.stage,
            payload=body,
            images=dict(run.images),
            warnings=tuple(run.warnings),
            fog_reset=run.fog_reset,
        )

    # ------------------------------------------------------------------
    def _enter(self, run: _RotationRun, stage: RotationStage) -> None:
        run.stage = stage
        logger.debug("rotation stage -> %s", stage.value)
        if self._stage_listener is not None:
            self._stage_listener(stage)

    def _warn(self, run: _RotationRun, error: RotationError, message: str) -> None:
        run.warnings.append(error)
        logger.warning("%s", message)
        self._notifier.warn(message)

    def _plan(self, scene: SceneHandle, run: _RotationRun) -> SceneSnapshot:
        try:
            snapshot = scene.snapshot()
            self._notifier.info(f"Rotating scene {snapshot.name or snapshot.id} by {run.step} degrees...")

            new_width, new_height = rotated_dimensions(snapshot.width, snapshot.height, run.step)
            offset_x, offset_y = rotate_offset(
                snapshot.background.offset_x,
                snapshot.background.offset_y,
                run.step,
            )
            run.payload.update(
                {
                    "width": new_width,
                    "height": new_height,
                    "background.offset_x": offset_x,
                    "background.offset_y": offset_y,
                }
            )

            planner = EntityTransformPlanner(
                snapshot.width,
                snapshot.height,
                run.step,
                grid_size=snapshot.grid.size,
                log_plans=self._toggles.log_planner,
            )
            planned = planner.plan_collections(scene.get_embedded_entities)
            for collection, records in planned.items():
                run.payload.add_records(collection, records)
        except RotationError:
            raise
        except Exception as exc:
            raise PlanningFailure(f"Could not plan rotation: {exc}") from exc

        if self._toggles.log_planner:
            logger.info(
                "planner: scene %s %sx%s -> %sx%s, %d entity records",
                snapshot.id,
                snapshot.width,
                snapshot.height,
                new_width,
                new_height,
                sum(len(records) for records in planned.values()),
            )
        return snapshot

    async def _rotate_images(self, snapshot: SceneSnapshot, run: _RotationRun) -> None:
        if not self._config.rotate_images:
            return
        roles = (
            ("background", "background.src", snapshot.background.src, self._config.background_encoding),
            ("foreground", "foreground", snapshot.foreground, self._config.foreground_encoding),
        )
        for role, path, source, encoding in roles:
            if not source:
                continue
            if self._images is None:
                self._warn(
                    run,
                    ImageRotationFailed("No file storage configured", source=source),
                    f"Image rotation skipped: no file storage for the {role} image.",
                )
                continue
            self._notifier.info(f"Rotating {role} image...")
            try:
                rotated = await self._fetch_image(source, run.step, encoding)
            except ImageRotationFailed as exc:
                self._warn(
                    run,
                    exc,
                    f"Image rotation failed: {exc.message}. "
                    f"Scene will rotate but the {role} image might look wrong.",
                )
                continue
            run.payload.set(path, rotated)
            run.images[role] = rotated

    async def _fetch_image(self, source: str, step: int, encoding: str) -> str:
        assert self._images is not None
        try:
            return await self._images.rotate_or_fetch(source, step, encoding)
        except ImageRotationFailed:
            raise
        except Exception as exc:
            raise ImageRotationFailed(f"Could not rotate {source}: {exc}", source=source) from exc

    def _adjust_grid(self, snapshot: SceneSnapshot, run: _RotationRun) -> None:
        new_type = remap_grid_type(snapshot.grid.type, run.step)
        if new_type is None:
            return
        run.payload.set("grid.type", int(new_type))
        if self._toggles.log_grid:
            logger.info("grid: %s -> %s", int(snapshot.grid.type), int(new_type))
        self._notifier.info("Swapping hex grid orientation to match rotation.")

    def _fog_reset_for(
        self,
        scene: SceneHandle,
        snapshot: SceneSnapshot,
    ) -> Optional[Callable[[], Awaitable[Any]]]:
        if isinstance(scene, FogResettable):
            return scene.reset_fog
        if self._fog is not None:
            fog = self._fog
            return lambda: fog.reset(snapshot.id)
        return None

    async def _invalidate_fog(self, scene: SceneHandle, snapshot: SceneSnapshot, run: _RotationRun) -> None:
        if not snapshot.fog_exploration:
            return
        self._notifier.info("Resetting fog of war to ensure alignment.")
        reset = self._fog_reset_for(scene, snapshot)
        if reset is None:
            self._warn(
                run,
                FogResetUnavailable(f"No fog reset capability for scene {snapshot.id}"),
                "Could not find a way to reset fog of war for this scene.",
            )
            return
        try:
            await reset()
        except Exception as exc:
            self._warn(
                run,
                FogResetUnavailable(f"Fog reset failed: {exc}"),
                f"Failed to reset fog of war: {exc}",
            )
            return
        run.fog_reset = True
        if self._toggles.log_fog:
            logger.info("fog: reset requested for %s; settling %.3fs", snapshot.id, self._config.fog_settle_s)
        if self._config.fog_settle_s > 0:
            await self._sleep(self._config.fog_settle_s)

    async def _commit(self, scene: SceneHandle, run: _RotationRun) -> dict[str, Any]:
        body = run.payload.as_dict()
        if self._toggles.log_commit:
            logger.info("commit: %d scene fields, collections=%s", len(run.payload.scene), sorted(run.payload.embedded))
        try:
            accepted = await scene.commit(body)
        except Exception as exc:
            raise CommitFailure(f"Document store commit failed: {exc}") from exc
        if accepted is False:
            raise CommitFailure("Document store rejected the rotation update")
        return body


async def rotate_scene(
    scene: SceneHandle,
    step: object,
    *,
    files: Optional[FileStorage] = None,
    ctx: Optional[RotationCtx] = None,
    notifier: Optional[Notifier] = None,
    fog: Optional[FogController] = None,
) -> RotationResult:
    """Rotate *scene* by *step* with a one-off :class:`SceneRotator`."""

    rotator = SceneRotator(files, ctx=ctx, notifier=notifier, fog=fog)
    return await rotator.rotate(scene, step)


__all__ = [
    "RotationResult",
    "RotationStage",
    "SceneRotator",
    "rotate_scene",
]

"""Per-kind planners that turn an embedded entity into an update record.

Each rule reads the entity's raw document, never mutates it, and returns a
fresh mapping of field path to new value (always carrying ``_id``). Rules are
looked up by :class:`EntityKind`; kinds without a rule are skipped so newer
host schemas do not break a rotation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from scene_rotator.geometry import normalize_angle, normalize_step, transform_point
from scene_rotator.scene.models import EmbeddedEntity, EntityKind, as_number


logger = logging.getLogger(__name__)

UpdateRecord = dict[str, Any]

_MISSING = object()


@dataclass(frozen=True)
class PlanContext:
    """Pre-rotation canvas facts shared by every rule."""

    old_width: float
    old_height: float
    step: int
    grid_size: float = 100.0

    @property
    def swap(self) -> bool:
        return abs(self.step) % 180 != 0

    def point(self, x: float, y: float) -> tuple[float, float]:
        return transform_point(x, y, self.old_width, self.old_height, self.step)

    def angle(self, value: float) -> float:
        return normalize_angle(value + self.step)


def lookup(data: Mapping[str, Any], path: str, default: object = _MISSING) -> Any:
    """Resolve a dotted *path* inside nested mappings."""

    node: Any = data
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node


def _num(data: Mapping[str, Any], path: str) -> float:
    return as_number(lookup(data, path, None))


# ---- Rules -------------------------------------------------------------------

def _plan_point(entity: EmbeddedEntity, ctx: PlanContext) -> UpdateRecord:
    x, y = ctx.point(_num(entity.data, "x"), _num(entity.data, "y"))
    return {"_id": entity.id, "x": x, "y": y}


def _plan_light(entity: EmbeddedEntity, ctx: PlanContext) -> UpdateRecord:
    update = _plan_point(entity, ctx)
    cone = lookup(entity.data, "config.rotation", None)
    if cone is not None:
        update["config.rotation"] = ctx.angle(as_number(cone))
    return update


def _plan_wall(entity: EmbeddedEntity, ctx: PlanContext) -> UpdateRecord:
    raw = entity.data.get("c") or ()
    coords = [as_number(value) for value in list(raw)[:4]]
    coords.extend([0] * (4 - len(coords)))
    x0, y0 = ctx.point(coords[0], coords[1])
    x1, y1 = ctx.point(coords[2], coords[3])
    return {"_id": entity.id, "c": [x0, y0, x1, y1]}


def _plan_template(entity: EmbeddedEntity, ctx: PlanContext) -> UpdateRecord:
    update = _plan_point(entity, ctx)
    update["direction"] = ctx.angle(_num(entity.data, "direction"))
    return update


# Field paths holding the stored extent of each box-like kind.
_BOX_FIELDS: dict[EntityKind, tuple[str, str]] = {
    EntityKind.TOKEN: ("width", "height"),
    EntityKind.TILE: ("width", "height"),
    EntityKind.DRAWING: ("shape.width", "shape.height"),
}


def box_pixel_extent(entity: EmbeddedEntity, kind: EntityKind, grid_size: float) -> tuple[float, float]:
    """Return the on-canvas pixel ``(w, h)`` of a box-like entity.

    Token sizes are stored in grid cells. A rendered extent wins over the
    ``cells * grid_size`` estimate because hex grids do not scale uniformly.
    """

    width_field, height_field = _BOX_FIELDS[kind]
    stored_w = _num(entity.data, width_field)
    stored_h = _num(entity.data, height_field)
    if kind is not EntityKind.TOKEN:
        return stored_w, stored_h
    rendered = entity.rendered_extent
    if rendered and rendered[0] and rendered[1]:
        return as_number(rendered[0]), as_number(rendered[1])
    return stored_w * grid_size, stored_h * grid_size


def _plan_box(entity: EmbeddedEntity, ctx: PlanContext, kind: EntityKind) -> UpdateRecord:
    pixel_w, pixel_h = box_pixel_extent(entity, kind, ctx.grid_size)
    center_x = _num(entity.data, "x") + pixel_w / 2
    center_y = _num(entity.data, "y") + pixel_h / 2
    new_cx, new_cy = ctx.point(center_x, center_y)

    update: UpdateRecord = {"_id": entity.id}
    if ctx.swap:
        pixel_w, pixel_h = pixel_h, pixel_w
        width_field, height_field = _BOX_FIELDS[kind]
        update[width_field] = _num(entity.data, height_field)
        update[height_field] = _num(entity.data, width_field)

    update["x"] = new_cx - pixel_w / 2
    update["y"] = new_cy - pixel_h / 2
    # Drawing point arrays stay in shape-local space; only the angle turns.
    update["rotation"] = ctx.angle(_num(entity.data, "rotation"))
    return update


EntityRule = Callable[[EmbeddedEntity, PlanContext], UpdateRecord]

_RULES: dict[EntityKind, EntityRule] = {
    EntityKind.TOKEN: lambda e, c: _plan_box(e, c, EntityKind.TOKEN),
    EntityKind.TILE: lambda e, c: _plan_box(e, c, EntityKind.TILE),
    EntityKind.DRAWING: lambda e, c: _plan_box(e, c, EntityKind.DRAWING),
    EntityKind.WALL: _plan_wall,
    EntityKind.AMBIENT_LIGHT: _plan_light,
    EntityKind.AMBIENT_SOUND: _plan_point,
    EntityKind.NOTE: _plan_point,
    EntityKind.MEASURED_TEMPLATE: _plan_template,
}


# ---- Planner -----------------------------------------------------------------

class EntityTransformPlanner:
    """Build update records for the embedded entities of one scene."""

    def __init__(
        self,
        old_width: float,
        old_height: float,
        step: object,
        *,
        grid_size: float = 100.0,
        log_plans: bool = False,
    ) -> None:
        self.context = PlanContext(
            old_width=old_width,
            old_height=old_height,
            step=normalize_step(step),
            grid_size=grid_size,
        )
        self._log_plans = bool(log_plans)

    def plan(self, entity: EmbeddedEntity) -> Optional[UpdateRecord]:
        """Return the update record for *entity*, or ``None`` for unknown kinds."""

        kind = EntityKind.from_name(entity.kind)
        rule = _RULES.get(kind) if kind is not None else None
        if rule is None:
            logger.debug("planner: skipping unknown entity kind %r (id=%s)", entity.kind, entity.id)
            return None
        update = rule(entity, self.context)
        if self._log_plans:
            logger.info("planner: %s %s -> %s", kind.value, entity.id, update)
        return update

    def plan_all(self, entities: Iterable[EmbeddedEntity]) -> list[UpdateRecord]:
        updates: list[UpdateRecord] = []
        for entity in entities:
            update = self.plan(entity)
            if update is not None:
                updates.append(update)
        return updates

    def plan_collections(
        self,
        source: Callable[[EntityKind], Iterable[EmbeddedEntity]],
    ) -> dict[str, list[UpdateRecord]]:
        """Plan every known kind from *source*, keyed by collection name.

        Empty collections are left out of the result.
        """

        planned: dict[str, list[UpdateRecord]] = {}
        for kind in EntityKind:
            updates = self.plan_all(source(kind) or ())
            if updates:
                planned[kind.collection] = updates
        return planned


__all__ = [
    "EntityTransformPlanner",
    "PlanContext",
    "UpdateRecord",
    "box_pixel_extent",
    "lookup",
]

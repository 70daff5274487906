"""Immutable scene snapshots consumed by the rotation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Mapping, Optional


class GridType(IntEnum):
    """Grid layouts, numbered the way the host document stores them."""

    GRIDLESS = 0
    SQUARE = 1
    HEX_ODD_R = 2
    HEX_EVEN_R = 3
    HEX_ODD_Q = 4
    HEX_EVEN_Q = 5

    @property
    def is_row_column_hex(self) -> bool:
        return self in _ROW_COLUMN_HEX

    @classmethod
    def coerce(cls, value: object) -> "GridType | int":
        """Return the enum member for *value*, or the raw int if unknown."""

        try:
            raw = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return cls.GRIDLESS
        try:
            return cls(raw)
        except ValueError:
            return raw


_ROW_COLUMN_HEX = frozenset(
    {GridType.HEX_ODD_R, GridType.HEX_EVEN_R, GridType.HEX_ODD_Q, GridType.HEX_EVEN_Q}
)


class EntityKind(str, Enum):
    """Embedded document kinds the planner knows how to rotate."""

    TOKEN = "Token"
    TILE = "Tile"
    WALL = "Wall"
    AMBIENT_LIGHT = "AmbientLight"
    AMBIENT_SOUND = "AmbientSound"
    NOTE = "Note"
    DRAWING = "Drawing"
    MEASURED_TEMPLATE = "MeasuredTemplate"

    @property
    def collection(self) -> str:
        """Name of the scene collection holding this kind."""

        return _COLLECTIONS[self]

    @classmethod
    def from_name(cls, name: object) -> Optional["EntityKind"]:
        """Resolve a document type name or collection name; ``None`` if unknown."""

        if isinstance(name, EntityKind):
            return name
        text = str(name)
        for kind in cls:
            if kind.value == text or _COLLECTIONS[kind] == text:
                return kind
        return None


_COLLECTIONS: dict[EntityKind, str] = {
    EntityKind.TOKEN: "tokens",
    EntityKind.TILE: "tiles",
    EntityKind.WALL: "walls",
    EntityKind.AMBIENT_LIGHT: "lights",
    EntityKind.AMBIENT_SOUND: "sounds",
    EntityKind.NOTE: "notes",
    EntityKind.DRAWING: "drawings",
    EntityKind.MEASURED_TEMPLATE: "templates",
}

COLLECTION_KINDS: dict[str, EntityKind] = {name: kind for kind, name in _COLLECTIONS.items()}


def as_number(value: object, default: float = 0) -> float:
    """Coerce a document value to a number, keeping ints as ints."""

    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class BackgroundImage:
    src: Optional[str] = None
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass(frozen=True)
class GridSpec:
    type: GridType | int = GridType.SQUARE
    size: float = 100.0


@dataclass(frozen=True)
class EmbeddedEntity:
    """One embedded document tagged with its kind.

    ``data`` is the raw document mapping; planners read geometry from it and
    never mutate it. ``rendered_extent`` carries the pixel ``(w, h)`` the host
    already drew the entity at, when it knows it.
    """

    kind: EntityKind | str
    id: str
    data: Mapping[str, Any] = field(default_factory=dict)
    rendered_extent: Optional[tuple[float, float]] = None


@dataclass(frozen=True)
class SceneSnapshot:
    """Scene-level fields captured before a rotation starts."""

    id: str
    width: float
    height: float
    name: str = ""
    background: BackgroundImage = field(default_factory=BackgroundImage)
    foreground: Optional[str] = None
    grid: GridSpec = field(default_factory=GridSpec)
    fog_exploration: bool = False

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "SceneSnapshot":
        """Build a snapshot from a plain scene document mapping."""

        background = doc.get("background") or {}
        grid = doc.get("grid") or {}
        fog = doc.get("fog") or {}
        return cls(
            id=str(doc.get("_id") or doc.get("id") or ""),
            name=str(doc.get("name") or ""),
            width=as_number(doc.get("width")),
            height=as_number(doc.get("height")),
            background=BackgroundImage(
                src=background.get("src") or None,
                offset_x=as_number(background.get("offset_x")),
                offset_y=as_number(background.get("offset_y")),
            ),
            foreground=doc.get("foreground") or None,
            grid=GridSpec(
                type=GridType.coerce(grid.get("type", GridType.SQUARE)),
                size=as_number(grid.get("size"), GridSpec.size) or GridSpec.size,
            ),
            fog_exploration=bool(fog.get("exploration", False)),
        )


__all__ = [
    "BackgroundImage",
    "COLLECTION_KINDS",
    "EmbeddedEntity",
    "EntityKind",
    "GridSpec",
    "GridType",
    "SceneSnapshot",
    "as_number",
]

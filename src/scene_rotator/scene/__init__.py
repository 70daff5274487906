"""Scene snapshot data transfer objects."""

from .models import (
    BackgroundImage,
    COLLECTION_KINDS,
    EmbeddedEntity,
    EntityKind,
    GridSpec,
    GridType,
    SceneSnapshot,
    as_number,
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

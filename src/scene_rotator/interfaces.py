"""Collaborator interfaces the rotation engine talks to.

The engine never reaches into a host application directly. Hosts hand it a
scene handle (snapshot reads plus the atomic commit), a file storage service
for rotated image variants, and optionally a fog controller and a notifier.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, Sequence, runtime_checkable

from scene_rotator.scene.models import EmbeddedEntity, EntityKind, SceneSnapshot


@runtime_checkable
class SceneHandle(Protocol):
    """Document store view of a single scene."""

    def snapshot(self) -> SceneSnapshot: ...

    def get_embedded_entities(self, kind: EntityKind) -> Sequence[EmbeddedEntity]: ...

    async def commit(self, payload: Mapping[str, Any]) -> bool: ...


@runtime_checkable
class FogResettable(Protocol):
    """Scene handles that can reset their own fog exploration."""

    async def reset_fog(self) -> None: ...


class FogController(Protocol):
    async def reset(self, scene_id: str) -> None: ...


class FileStorage(Protocol):
    """Host file service used by the image cache."""

    async def list(self, directory: str) -> set[str]: ...

    async def create_directory(self, directory: str) -> None: ...

    async def upload(self, directory: str, filename: str, data: bytes, mime_type: str) -> str: ...

    async def read(self, path: str) -> bytes: ...


class Notifier(Protocol):
    """User-facing message channel (toast, status bar, console)."""

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that routes user messages to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("scene_rotator.notify")

    def info(self, message: str) -> None:
        self._logger.info("%s", message)

    def warn(self, message: str) -> None:
        self._logger.warning("%s", message)

    def error(self, message: str) -> None:
        self._logger.error("%s", message)


__all__ = [
    "FileStorage",
    "FogController",
    "FogResettable",
    "LoggingNotifier",
    "Notifier",
    "SceneHandle",
]

"""Authoritative in-memory scene document implementing :class:`SceneHandle`."""

from __future__ import annotations

import copy
import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from scene_rotator.control.payload import set_path
from scene_rotator.scene.models import (
    COLLECTION_KINDS,
    EmbeddedEntity,
    EntityKind,
    SceneSnapshot,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitEvent:
    scene_id: str
    version: int
    timestamp: float
    payload: Mapping[str, Any]


Subscriber = Callable[[CommitEvent], None]


class InMemorySceneStore:
    """Thread-safe scene document with all-or-nothing commits.

    A commit is applied to a private copy of the document and swapped in only
    when every field path and every embedded ``_id`` resolved, so readers
    never observe a half-rotated scene.
    """

    def __init__(self, document: Mapping[str, Any], *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._document: dict[str, Any] = copy.deepcopy(dict(document))
        self._version = 0
        self._subscribers: list[Subscriber] = []
        self._rendered: dict[str, tuple[float, float]] = {}
        self._fog_resets: list[float] = []

    # ------------------------------------------------------------------
    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    @property
    def fog_resets(self) -> int:
        with self._lock:
            return len(self._fog_resets)

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._document)

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def set_rendered_extent(self, token_id: str, width: float, height: float) -> None:
        """Record the pixel size a token was drawn at (hex grids)."""

        with self._lock:
            self._rendered[str(token_id)] = (float(width), float(height))

    # ---- SceneHandle ---------------------------------------------------
    def snapshot(self) -> SceneSnapshot:
        with self._lock:
            return SceneSnapshot.from_document(self._document)

    def get_embedded_entities(self, kind: EntityKind) -> list[EmbeddedEntity]:
        with self._lock:
            docs = copy.deepcopy(self._document.get(kind.collection) or [])
            rendered = dict(self._rendered)
        entities = []
        for doc in docs:
            doc_id = str(doc.get("_id", ""))
            extent = rendered.get(doc_id) if kind is EntityKind.TOKEN else None
            entities.append(EmbeddedEntity(kind=kind, id=doc_id, data=doc, rendered_extent=extent))
        return entities

    async def commit(self, payload: Mapping[str, Any]) -> bool:
        try:
            self.apply(payload)
        except ValueError as exc:
            logger.warning("scene %s: rejected commit: %s", self._document.get("_id"), exc)
            return False
        return True

    async def reset_fog(self) -> None:
        with self._lock:
            self._fog_resets.append(float(self._clock()))

    # ------------------------------------------------------------------
    def apply(self, payload: Mapping[str, Any]) -> CommitEvent:
        """Apply *payload* atomically and return the resulting event.

        Raises ``ValueError`` without touching the document when an embedded
        record targets an unknown collection entry.
        """

        with self._lock:
            working = copy.deepcopy(self._document)
            for key, value in payload.items():
                if key in COLLECTION_KINDS:
                    self._apply_records(working, key, value)
                else:
                    set_path(working, key, copy.deepcopy(value))

            self._document = working
            self._version += 1
            event = CommitEvent(
                scene_id=str(working.get("_id", "")),
                version=self._version,
                timestamp=float(self._clock()),
                payload=copy.deepcopy(dict(payload)),
            )
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("scene store subscriber failed")
        return event

    @staticmethod
    def _apply_records(working: dict[str, Any], collection: str, records: Any) -> None:
        docs = working.get(collection) or []
        by_id = {str(doc.get("_id")): doc for doc in docs}
        for record in records or ():
            doc_id = str(record.get("_id"))
            target: Optional[dict[str, Any]] = by_id.get(doc_id)
            if target is None:
                raise ValueError(f"{collection}: no document with _id {doc_id!r}")
            for path, value in record.items():
                if path == "_id":
                    continue
                set_path(target, path, copy.deepcopy(value))


__all__ = ["CommitEvent", "InMemorySceneStore"]

"""Accumulated update payload submitted to the document store in one write."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from scene_rotator.scene.models import COLLECTION_KINDS


def set_path(target: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Assign *value* at dotted *path*, creating intermediate mappings."""

    parts = path.split(".")
    node = target
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, MutableMapping):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def get_path(source: Mapping[str, Any], path: str, default: Any = None) -> Any:
    node: Any = source
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node


@dataclass
class UpdatePayload:
    """Scene-level field paths plus per-collection entity records.

    ``scene`` maps dotted field paths (``"background.offset_x"``) to values;
    ``embedded`` maps collection names (``"tokens"``) to records that each
    carry the target ``_id``.
    """

    scene: dict[str, Any] = field(default_factory=dict)
    embedded: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    def set(self, path: str, value: Any) -> None:
        if path.split(".", 1)[0] in COLLECTION_KINDS:
            raise ValueError(f"{path!r} names an embedded collection, not a scene field")
        self.scene[path] = value

    def update(self, record: Mapping[str, Any]) -> None:
        for path, value in record.items():
            self.set(path, value)

    def add_records(self, collection: str, records: Iterable[Mapping[str, Any]]) -> None:
        """Append *records*; records for an ``_id`` already present merge field-wise."""

        if collection not in COLLECTION_KINDS:
            raise ValueError(f"Unknown embedded collection {collection!r}")
        bucket = self.embedded.setdefault(collection, [])
        index = {record.get("_id"): record for record in bucket}
        for record in records:
            doc_id = record.get("_id")
            if not doc_id:
                raise ValueError(f"Record in {collection!r} has no _id")
            existing = index.get(doc_id)
            if existing is None:
                existing = {}
                bucket.append(existing)
                index[doc_id] = existing
            existing.update(record)
        if not bucket:
            del self.embedded[collection]

    def is_empty(self) -> bool:
        return not self.scene and not self.embedded

    def as_dict(self) -> dict[str, Any]:
        """Return the single mapping handed to :meth:`SceneHandle.commit`."""

        result: dict[str, Any] = dict(self.scene)
        for collection, records in self.embedded.items():
            result[collection] = [dict(record) for record in records]
        return result

    @classmethod
    def merge(cls, *payloads: "UpdatePayload") -> "UpdatePayload":
        merged = cls()
        for payload in payloads:
            merged.update(payload.scene)
            for collection, records in payload.embedded.items():
                merged.add_records(collection, records)
        return merged


__all__ = ["UpdatePayload", "get_path", "set_path"]

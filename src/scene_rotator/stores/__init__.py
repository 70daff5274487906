"""Reference collaborators: an in-memory scene store and local file storage."""

from .local_files import LocalFileStorage
from .memory import CommitEvent, InMemorySceneStore

__all__ = ["CommitEvent", "InMemorySceneStore", "LocalFileStorage"]

"""Rotation orchestration and the atomic update payload."""

from .orchestrator import RotationResult, RotationStage, SceneRotator, rotate_scene
from .payload import UpdatePayload, get_path, set_path

__all__ = [
    "RotationResult",
    "RotationStage",
    "SceneRotator",
    "UpdatePayload",
    "get_path",
    "rotate_scene",
    "set_path",
]

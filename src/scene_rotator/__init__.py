"""
scene-rotator: quarter-turn rotation of 2D scenes

Rotates a scene's canvas, its embedded entities and its background and
foreground images by multiples of 90 degrees, committing every geometric
change as one atomic update. Rotated images are cached under deterministic
names so repeated rotations reuse earlier renders.
"""

from scene_rotator.control import RotationResult, RotationStage, SceneRotator, rotate_scene
from scene_rotator.errors import (
    CommitFailure,
    FogResetUnavailable,
    ImageRotationFailed,
    InvalidRotationStep,
    PlanningFailure,
    RotationError,
    StorageError,
)
from scene_rotator.trigger import RotationDirection, RotationTrigger

__version__ = "0.1.0"

__all__ = [
    "CommitFailure",
    "FogResetUnavailable",
    "ImageRotationFailed",
    "InvalidRotationStep",
    "PlanningFailure",
    "RotationDirection",
    "RotationError",
    "RotationResult",
    "RotationStage",
    "RotationTrigger",
    "SceneRotator",
    "StorageError",
    "__version__",
    "rotate_scene",
]

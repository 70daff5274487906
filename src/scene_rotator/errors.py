"""Error taxonomy for the rotation engine."""

from __future__ import annotations

from typing import Any, Mapping


class RotationError(RuntimeError):
    """Base class for rotation errors carrying a stable code."""

    code = "rotation.error"

    def __init__(
        self,
        message: str,
        *,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = str(message)
        self.details = dict(details) if details else None


class InvalidRotationStep(RotationError, ValueError):
    """Step is not one of ±90, ±180, ±270."""

    code = "rotation.invalid_step"

    def __init__(self, step: object) -> None:
        super().__init__(
            f"Rotation step must be one of ±90, ±180, ±270 (got {step!r})",
            details={"step": step},
        )
        self.step = step


class PlanningFailure(RotationError):
    """Entity or scene planning failed; nothing was written."""

    code = "rotation.planning"


class ImageRotationFailed(RotationError):
    """An image could not be rotated, located or uploaded."""

    code = "rotation.image"

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if source is not None:
            merged.setdefault("source", source)
        super().__init__(message, details=merged)
        self.source = source


class FogResetUnavailable(RotationError):
    """No fog reset capability, or the reset request failed."""

    code = "rotation.fog_unavailable"


class CommitFailure(RotationError):
    """The document store rejected or failed the atomic write."""

    code = "rotation.commit"


class StorageError(RotationError):
    """Raised by file storage backends."""

    code = "storage.error"


__all__ = [
    "CommitFailure",
    "FogResetUnavailable",
    "ImageRotationFailed",
    "InvalidRotationStep",
    "PlanningFailure",
    "RotationError",
    "StorageError",
]

"""Shared configuration dataclasses for the rotation engine."""

from .loader import load_rotation_config, load_rotation_ctx
from .logging_policy import DebugPolicy, LoggingToggles, load_debug_policy
from .models import IMAGE_EXTENSIONS, RotationConfig, RotationCtx

__all__ = [
    "DebugPolicy",
    "IMAGE_EXTENSIONS",
    "LoggingToggles",
    "RotationConfig",
    "RotationCtx",
    "load_debug_policy",
    "load_rotation_config",
    "load_rotation_ctx",
]

"""Environment loader for :class:`RotationCtx`.

The environment is read once and never mutated; malformed values fall back
to the dataclass defaults so a bad override cannot block a rotation.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping, Optional

from scene_rotator.config.logging_policy import load_debug_policy
from scene_rotator.config.models import IMAGE_EXTENSIONS, RotationConfig, RotationCtx


logger = logging.getLogger(__name__)


# ---- Helpers -----------------------------------------------------------------

def _env_str(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    v = env.get(name)
    if v is None:
        return default
    v = v.strip()
    return v if v != "" else default


def _cfg_bool(value: object, default: bool) -> bool:
    if value is None:
        return bool(default)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        val = value.strip().lower()
        if val in {"1", "true", "yes", "on"}:
            return True
        if val in {"0", "false", "no", "off", ""}:
            return False
    return bool(default)


def _cfg_int(value: object, default: int) -> int:
    if value is None or isinstance(value, bool):
        return int(default)
    try:
        return int(str(value).strip()) if isinstance(value, str) else int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return int(default)


def _cfg_float(value: object, default: float) -> float:
    if value is None or isinstance(value, bool):
        return float(default)
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return float(default)


def _cfg_encoding(value: object, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in IMAGE_EXTENSIONS:
        return text
    logger.warning("Unsupported image encoding %r; using %s", value, default)
    return default


def _load_json_config(env: Mapping[str, str], name: str) -> dict[str, Any]:
    raw = _env_str(env, name)
    if raw is None:
        return {}
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s JSON", name)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Ignoring %s: expected a JSON object", name)
        return {}
    return parsed


# ---- Loader ------------------------------------------------------------------

def load_rotation_config(env: Optional[Mapping[str, str]] = None) -> RotationConfig:
    """Resolve :class:`RotationConfig` from ``SCENE_ROTATOR_*`` variables.

    Individual variables win over keys in the ``SCENE_ROTATOR_CONFIG`` JSON
    object.
    """

    env = os.environ if env is None else env
    defaults = RotationConfig()
    overrides = _load_json_config(env, "SCENE_ROTATOR_CONFIG")

    def pick(var: str, key: str) -> object:
        value = _env_str(env, var)
        return value if value is not None else overrides.get(key)

    cache_dir = pick("SCENE_ROTATOR_CACHE_DIR", "cache_dir_name")
    cache_dir_name = str(cache_dir).strip().strip("/") if cache_dir else ""
    quality = _cfg_int(pick("SCENE_ROTATOR_IMAGE_QUALITY", "image_quality"), defaults.image_quality)
    settle = _cfg_float(pick("SCENE_ROTATOR_FOG_SETTLE_S", "fog_settle_s"), defaults.fog_settle_s)

    return RotationConfig(
        cache_dir_name=cache_dir_name or defaults.cache_dir_name,
        image_quality=min(100, max(1, quality)),
        background_encoding=_cfg_encoding(
            pick("SCENE_ROTATOR_BACKGROUND_ENCODING", "background_encoding"),
            defaults.background_encoding,
        ),
        foreground_encoding=_cfg_encoding(
            pick("SCENE_ROTATOR_FOREGROUND_ENCODING", "foreground_encoding"),
            defaults.foreground_encoding,
        ),
        fog_settle_s=max(0.0, settle),
        rotate_images=_cfg_bool(pick("SCENE_ROTATOR_ROTATE_IMAGES", "rotate_images"), defaults.rotate_images),
    )


def load_rotation_ctx(env: Optional[Mapping[str, str]] = None) -> RotationCtx:
    """Build a :class:`RotationCtx` by reading the environment once."""

    env = os.environ if env is None else env
    return RotationCtx(
        config=load_rotation_config(env),
        debug_policy=load_debug_policy(env),
    )


__all__ = ["load_rotation_config", "load_rotation_ctx"]

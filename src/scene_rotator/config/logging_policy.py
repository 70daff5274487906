from __future__ import annotations

"""Central debug/logging policy plumbing for the rotation engine."""

import json
import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoggingToggles:
    log_planner: bool = False
    log_images: bool = False
    log_grid: bool = False
    log_fog: bool = False
    log_commit: bool = False


@dataclass(frozen=True)
class DebugPolicy:
    enabled: bool = False
    logging: LoggingToggles = LoggingToggles()


_LOG_FLAG_MAP: dict[str, Iterable[str]] = {
    "planner": ("log_planner",),
    "images": ("log_images",),
    "grid": ("log_grid",),
    "fog": ("log_fog",),
    "commit": ("log_commit",),
    "all": ("log_planner", "log_images", "log_grid", "log_fog", "log_commit"),
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _coerce_bool(value: object, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        val = value.strip().lower()
        if val in _TRUTHY:
            return True
        if val in _FALSY:
            return False
    return default


def _split_flags(raw: object) -> set[str]:
    result: set[str] = set()
    items: Iterable[object]
    if raw is None:
        return result
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, Iterable):
        items = raw
    else:
        return result
    for item in items:
        token = str(item).strip().lower()
        if token:
            result.add(token)
    return result


def _load_debug_config(env: Mapping[str, str]) -> tuple[bool, dict[str, object]]:
    raw = env.get("SCENE_ROTATOR_DEBUG")
    if raw is None:
        return False, {}
    raw_str = raw.strip()
    if raw_str.lower() in _FALSY:
        return False, {}
    if raw_str.lower() in _TRUTHY:
        return True, {"flags": ["all"]}
    try:
        parsed = json.loads(raw_str)
        if isinstance(parsed, dict):
            enabled = _coerce_bool(parsed.get("enabled", True), True)
            return enabled, parsed
        if isinstance(parsed, (list, tuple)):
            return True, {"flags": parsed}
    except ValueError:
        logger.debug("Failed to parse SCENE_ROTATOR_DEBUG JSON; treating as flag list", exc_info=True)
    return True, {"flags": raw_str}


def load_debug_policy(env: Optional[Mapping[str, str]] = None) -> DebugPolicy:
    env = os.environ if env is None else env
    enabled, cfg = _load_debug_config(env)
    if not enabled:
        return DebugPolicy()

    flags = _split_flags(cfg.get("flags"))
    log_kwargs = {name: False for name in LoggingToggles.__annotations__.keys()}
    for flag, attrs in _LOG_FLAG_MAP.items():
        if flag in flags:
            for attr in attrs:
                log_kwargs[attr] = True

    return DebugPolicy(enabled=True, logging=LoggingToggles(**log_kwargs))


__all__ = [
    "DebugPolicy",
    "LoggingToggles",
    "load_debug_policy",
]

"""Command line entry point: rotate a scene JSON document on disk."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from scene_rotator.config import load_rotation_ctx
from scene_rotator.control.orchestrator import SceneRotator
from scene_rotator.errors import RotationError, StorageError
from scene_rotator.stores import InMemorySceneStore, LocalFileStorage
from scene_rotator.trigger import RotationTrigger


logger = logging.getLogger("scene_rotator.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scene-rotator",
        description="Rotate a scene document and its images by a quarter turn",
    )
    parser.add_argument("scene", help="Path to the scene JSON document")
    parser.add_argument(
        "--direction",
        default="cw",
        choices=["cw", "ccw", "clockwise", "counter-clockwise"],
        help="Rotation direction (default: cw)",
    )
    parser.add_argument(
        "--data-root",
        default=None,
        help="Directory image paths are relative to (default: the scene file's directory)",
    )
    parser.add_argument("--output", default=None, help="Write the rotated scene here instead of in place")
    parser.add_argument("--no-images", action="store_true", help="Rotate geometry only; leave images untouched")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
    )

    ctx = load_rotation_ctx()
    if args.no_images:
        ctx = replace(ctx, config=replace(ctx.config, rotate_images=False))

    scene_path = Path(args.scene)
    try:
        document = json.loads(scene_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Could not load scene %s: %s", scene_path, exc)
        return 2
    if not isinstance(document, dict):
        logger.error("Scene %s is not a JSON object", scene_path)
        return 2

    files = None
    if ctx.config.rotate_images:
        try:
            files = LocalFileStorage(args.data_root or scene_path.parent)
        except StorageError as exc:
            logger.error("%s", exc.message)
            return 2

    store = InMemorySceneStore(document)
    trigger = RotationTrigger(SceneRotator(files, ctx=ctx))
    try:
        result = asyncio.run(trigger.activate(store, args.direction))
    except RotationError as exc:
        logger.error("Rotation failed (%s): %s", exc.code, exc.message)
        return 1
    if result is None:
        return 1

    output = Path(args.output) if args.output else scene_path
    output.write_text(json.dumps(store.to_dict(), indent=2) + "\n", encoding="utf-8")
    logger.info(
        "Rotated scene %s by %d degrees -> %s (%d warning(s))",
        result.scene_id,
        result.step,
        output,
        len(result.warnings),
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

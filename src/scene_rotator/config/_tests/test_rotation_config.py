from __future__ import annotations

import json

from scene_rotator.config import RotationConfig, load_rotation_config, load_rotation_ctx


def test_defaults_when_environment_empty() -> None:
    assert load_rotation_config({}) == RotationConfig()


def test_individual_variables_override_defaults() -> None:
    env = {
        "SCENE_ROTATOR_CACHE_DIR": " /turned/ ",
        "SCENE_ROTATOR_IMAGE_QUALITY": "75",
        "SCENE_ROTATOR_BACKGROUND_ENCODING": "image/webp",
        "SCENE_ROTATOR_FOREGROUND_ENCODING": "IMAGE/WEBP",
        "SCENE_ROTATOR_FOG_SETTLE_S": "0.25",
        "SCENE_ROTATOR_ROTATE_IMAGES": "off",
    }

    cfg = load_rotation_config(env)

    assert cfg.cache_dir_name == "turned"
    assert cfg.image_quality == 75
    assert cfg.background_encoding == "image/webp"
    assert cfg.foreground_encoding == "image/webp"
    assert cfg.fog_settle_s == 0.25
    assert cfg.rotate_images is False


def test_json_config_and_variable_precedence() -> None:
    env = {
        "SCENE_ROTATOR_CONFIG": json.dumps({"image_quality": 50, "cache_dir_name": "cache", "rotate_images": False}),
        "SCENE_ROTATOR_IMAGE_QUALITY": "80",
    }

    cfg = load_rotation_config(env)

    assert cfg.image_quality == 80
    assert cfg.cache_dir_name == "cache"
    assert cfg.rotate_images is False


def test_out_of_range_values_are_clamped() -> None:
    cfg = load_rotation_config(
        {"SCENE_ROTATOR_IMAGE_QUALITY": "500", "SCENE_ROTATOR_FOG_SETTLE_S": "-3"}
    )
    assert cfg.image_quality == 100
    assert cfg.fog_settle_s == 0.0
    assert load_rotation_config({"SCENE_ROTATOR_IMAGE_QUALITY": "0"}).image_quality == 1


def test_malformed_values_fall_back() -> None:
    env = {
        "SCENE_ROTATOR_CONFIG": "{not json",
        "SCENE_ROTATOR_IMAGE_QUALITY": "high",
        "SCENE_ROTATOR_FOG_SETTLE_S": "soon",
        "SCENE_ROTATOR_BACKGROUND_ENCODING": "image/tiff",
        "SCENE_ROTATOR_ROTATE_IMAGES": "maybe",
        "SCENE_ROTATOR_CACHE_DIR": "   ",
    }

    assert load_rotation_config(env) == RotationConfig()


def test_non_object_json_ignored() -> None:
    assert load_rotation_config({"SCENE_ROTATOR_CONFIG": "[1, 2]"}) == RotationConfig()


def test_ctx_bundles_config_and_debug_policy() -> None:
    ctx = load_rotation_ctx({"SCENE_ROTATOR_DEBUG": "fog", "SCENE_ROTATOR_IMAGE_QUALITY": "70"})

    assert ctx.config.image_quality == 70
    assert ctx.debug_policy.enabled is True
    assert ctx.debug_policy.logging.log_fog is True
    assert ctx.debug_policy.logging.log_images is False

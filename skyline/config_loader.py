"""Load SceneConfig overrides from a JSON file.

The file mirrors the SceneConfig layout: top-level scalar fields plus one
object per section (buildings, clouds, background, birds, planes,
navigation). Missing keys keep their defaults.
"""

import json
import logging
import os
from dataclasses import MISSING, asdict, fields
from typing import Any, Dict, Optional, Type, TypeVar

from skyline.config import (
    BackgroundConfig,
    BackgroundLayerConfig,
    BirdClassConfig,
    BirdConfig,
    BuildingConfig,
    CloudConfig,
    NavigationConfig,
    PlaneConfig,
    PlaneTypeConfig,
    SceneConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join("config", "scene_config.json")

T = TypeVar("T")

# Set from SceneConfig.height, never read from the file
DERIVED_BUILDING_KEYS = ("scene_height", "ground_level")


def _known_fields(cls: Type[Any], raw: Dict[str, Any], section: str) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    out = {}
    for key, value in raw.items():
        if key in names:
            out[key] = value
        else:
            logger.warning("Ignoring unknown config key %s.%s", section, key)
    return out


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be an object")
    return value


def _merge(cls: Type[T], default: T, raw: Dict[str, Any], section: str) -> T:
    merged = asdict(default)
    merged.update(_known_fields(cls, raw, section))
    return cls(**merged)


def _merge_classes(cls, defaults: Dict[str, Any], raw: Dict[str, Any], section: str) -> Dict[str, Any]:
    out = dict(defaults)
    for name, override in raw.items():
        if not isinstance(override, dict):
            raise ValueError(f"Config entry '{section}.{name}' must be an object")
        if name in defaults:
            out[name] = _merge(cls, defaults[name], override, f"{section}.{name}")
        else:
            values = _known_fields(cls, override, f"{section}.{name}")
            missing = [f.name for f in fields(cls)
                       if f.name not in values and f.default is MISSING and f.default_factory is MISSING]
            if missing:
                raise ValueError(f"Config entry '{section}.{name}' is missing: {', '.join(missing)}")
            out[name] = cls(**values)
    return out


def scene_config_from_dict(raw: Dict[str, Any]) -> SceneConfig:
    """Build a SceneConfig from a parsed JSON object."""
    if not isinstance(raw, dict):
        raise ValueError("Scene config root must be an object")

    defaults = SceneConfig()

    buildings_raw = _section(raw, "buildings")
    for key in DERIVED_BUILDING_KEYS:
        if key in buildings_raw:
            logger.warning("Ignoring buildings.%s; it always follows the scene height", key)
    buildings = _merge(BuildingConfig, defaults.buildings, buildings_raw, "buildings")
    clouds = _merge(CloudConfig, defaults.clouds, _section(raw, "clouds"), "clouds")
    navigation = _merge(NavigationConfig, defaults.navigation, _section(raw, "navigation"), "navigation")

    bg_raw = dict(_section(raw, "background"))
    far = _merge(BackgroundLayerConfig, defaults.background.far,
                 _section(bg_raw, "far"), "background.far")
    very_far = _merge(BackgroundLayerConfig, defaults.background.very_far,
                      _section(bg_raw, "very_far"), "background.very_far")
    bg_raw.pop("far", None)
    bg_raw.pop("very_far", None)
    bg_fields = _known_fields(BackgroundConfig, bg_raw, "background")
    background = BackgroundConfig(
        horizon_y=bg_fields.get("horizon_y", defaults.background.horizon_y),
        window_margin=bg_fields.get("window_margin", defaults.background.window_margin),
        window_lit_chance=bg_fields.get("window_lit_chance", defaults.background.window_lit_chance),
        far=far,
        very_far=very_far,
    )

    birds_raw = dict(_section(raw, "birds"))
    bird_classes = _merge_classes(BirdClassConfig, defaults.birds.classes,
                                  _section(birds_raw, "classes"), "birds.classes")
    birds_raw.pop("classes", None)
    bird_fields = asdict(defaults.birds)
    bird_fields.pop("classes")
    bird_fields.update(_known_fields(BirdConfig, birds_raw, "birds"))
    birds = BirdConfig(classes=bird_classes, **bird_fields)

    planes_raw = dict(_section(raw, "planes"))
    plane_types = _merge_classes(PlaneTypeConfig, defaults.planes.types,
                                 _section(planes_raw, "types"), "planes.types")
    planes_raw.pop("types", None)
    plane_fields = asdict(defaults.planes)
    plane_fields.pop("types")
    plane_fields.update(_known_fields(PlaneConfig, planes_raw, "planes"))
    planes = PlaneConfig(types=plane_types, **plane_fields)

    sections = {"buildings", "clouds", "background", "birds", "planes", "navigation"}
    top = _known_fields(SceneConfig, {k: v for k, v in raw.items() if k not in sections}, "scene")

    return SceneConfig(
        width=top.get("width", defaults.width),
        height=top.get("height", defaults.height),
        max_layout_attempts=top.get("max_layout_attempts", defaults.max_layout_attempts),
        buildings=buildings,
        clouds=clouds,
        background=background,
        birds=birds,
        planes=planes,
        navigation=navigation,
    )


def load_scene_config(path: Optional[str] = None) -> SceneConfig:
    """
    Load scene configuration.

    Args:
        path: JSON file to read. When None, config/scene_config.json is used
              if it exists, otherwise the built-in defaults are returned.

    Returns:
        SceneConfig instance
    """
    if path is None:
        if not os.path.exists(DEFAULT_CONFIG_PATH):
            logger.debug("No %s found, using built-in scene defaults", DEFAULT_CONFIG_PATH)
            return SceneConfig()
        path = DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        raise FileNotFoundError(f"Scene config not found: {path}")

    with open(path, "r") as f:
        raw = json.load(f)

    logger.info("Loaded scene config from %s", path)
    return scene_config_from_dict(raw)

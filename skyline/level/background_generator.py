"""
Background metropolis - two depth layers of decorative skyline buildings.

Nothing here affects gameplay; positions may run past both screen edges.
"""

import logging
import math
import random
from typing import List, Optional, Tuple

from skyline.config import BackgroundConfig, BackgroundLayerConfig
from skyline.level.level_data import BackgroundBuilding, BackgroundWindow

logger = logging.getLogger(__name__)


def generate_background_windows(width: float, height: float, spacing: int,
                                window_size: Tuple[int, int], rng: random.Random,
                                margin: int = 2, lit_chance: float = 0.4) -> Tuple[BackgroundWindow, ...]:
    """Window grid for a silhouette, relative to its top-left corner."""
    window_w, window_h = window_size
    available = width - 2 * margin
    per_row = int(math.floor(available / (window_w + spacing))) if available > 0 else 0
    if per_row <= 0:
        return ()

    block = per_row * window_w + (per_row - 1) * spacing
    start_x = margin + (available - block) / 2
    floor_height = window_h + spacing + 2
    floors = max(0, int(math.floor((height - margin * 2) / floor_height)))

    windows = []
    for floor in range(floors):
        wy = margin + floor * floor_height
        for column in range(per_row):
            windows.append(BackgroundWindow(
                x=start_x + column * (window_w + spacing),
                y=wy,
                width=window_w,
                height=window_h,
                is_lit=rng.random() < lit_chance,
            ))
    return tuple(windows)


def _generate_layer(level_width: float, layer: BackgroundLayerConfig, horizon_y: float,
                    rng: random.Random, config: BackgroundConfig) -> List[BackgroundBuilding]:
    buildings: List[BackgroundBuilding] = []
    for _ in range(layer.count):
        width = rng.uniform(*layer.width_range)
        height = rng.uniform(*layer.height_range)
        x = rng.random() * (level_width + 2 * layer.extend) - layer.extend
        color = rng.choice(layer.colors)

        windows = None
        if rng.random() < layer.window_chance:
            windows = generate_background_windows(
                width, height, layer.window_spacing, layer.window_size, rng,
                margin=config.window_margin, lit_chance=config.window_lit_chance,
            )

        buildings.append(BackgroundBuilding(
            x=x,
            y=horizon_y - height,
            width=width,
            height=height,
            color=color,
            distance=layer.distance,
            alpha=layer.alpha,
            windows=windows,
        ))
    return buildings


def generate_background_metropolis(level_width: float, rng: random.Random,
                                   config: Optional[BackgroundConfig] = None) -> List[BackgroundBuilding]:
    """Far layer first, then very far; the renderer decides draw order."""
    cfg = config or BackgroundConfig()
    buildings: List[BackgroundBuilding] = []
    for layer in cfg.layers:
        buildings.extend(_generate_layer(level_width, layer, cfg.horizon_y, rng, cfg))
    logger.debug("Generated %d background buildings", len(buildings))
    return buildings

"""
Building Generator - foreground buildings with standardized dimensions

Buildings use a discrete set of heights so floors line up visually, and a
plain window grid. The output is structured data only; how a material is
drawn is up to the renderer.
"""

import logging
import math
import random
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from skyline.config import BuildingConfig
from skyline.level.level_data import Building, MaterialType, Window, WindowType

logger = logging.getLogger(__name__)

MATERIALS = (MaterialType.SOLID, MaterialType.BRICK, MaterialType.CONCRETE)
WINDOW_TYPES = (WindowType.STANDARD, WindowType.BAY, WindowType.SMALL)


def make_building_id(index: int) -> str:
    return f"building_{index}"


class BuildingGenerator:
    """Creates single buildings from a position, a width and a height cap"""

    def __init__(self, config: Optional[BuildingConfig] = None):
        self.config = config or BuildingConfig()

    def allowed_heights(self, max_height: float) -> List[int]:
        """Configured heights not above max_height, or the smallest height if none are."""
        options = [h for h in self.config.heights if h <= max_height]
        if not options:
            logger.warning("No height options available for max_height %s, using minimum height %s",
                           max_height, self.config.heights[0])
            options = [self.config.heights[0]]
        return options

    def generate_building(self, x: float, width: float, max_height: float,
                          rng: random.Random, building_id: str) -> Building:
        """
        Generate one building standing on the ground line.

        Args:
            x: Left edge of the building
            width: Width, normally one of the configured building widths
            max_height: Height cap derived from difficulty
            rng: Random source
            building_id: Id to stamp on the building

        Returns:
            Building with its window grid
        """
        cfg = self.config
        material = rng.choice(MATERIALS)
        wants_tall = rng.random() < cfg.tall_chance

        options = self.allowed_heights(max_height)
        height: float = rng.choice(options)

        is_tall = wants_tall and len(options) > 1
        if is_tall:
            taller = options[len(options) // 2:]
            height = rng.choice(taller)
            height = min(height * cfg.tall_multiplier, cfg.height_ceiling)

        color = rng.choice(cfg.colors)
        windows = self.generate_windows(width, height, rng)

        building = Building(
            id=building_id,
            x=x,
            y=cfg.ground_level - height,
            width=width,
            height=height,
            windows=windows,
            color=color,
            material=material,
            is_tall=is_tall,
        )
        logger.debug("Generated %s: x=%.1f width=%s height=%s tall=%s windows=%d",
                     building.id, x, width, height, is_tall, len(windows))
        return building

    def window_columns(self, width: float) -> Tuple[int, float]:
        """Number of window columns and the x offset of the first column."""
        cfg = self.config
        available = width - 2 * cfg.window_margin
        pitch = cfg.window_width + cfg.window_spacing
        columns = int(math.floor(available / pitch)) if available > 0 else 0
        if columns <= 0:
            return 0, 0.0
        block = columns * cfg.window_width + (columns - 1) * cfg.window_spacing
        return columns, cfg.window_margin + (available - block) / 2

    def window_floors(self, height: float) -> int:
        cfg = self.config
        return max(0, int(math.floor((height - cfg.window_roof_allowance) / cfg.floor_height)))

    def pick_window_type(self, rng: random.Random) -> WindowType:
        """Weighted window variant. No draw is made when only standard windows are enabled."""
        weights = [self.config.window_type_weights.get(t.value, 0.0) for t in WINDOW_TYPES]
        if not any(weights[1:]):
            return WindowType.STANDARD
        return rng.choices(WINDOW_TYPES, weights=weights)[0]

    def generate_windows(self, width: float, height: float, rng: random.Random) -> Tuple[Window, ...]:
        """
        Lay out a centered window grid for a building of the given size.

        Every window starts at its grid cell; its size is the base window
        size plus its variant's adjustment. Windows that would poke outside
        the building are left out rather than clipped.
        """
        cfg = self.config
        columns, start_x = self.window_columns(width)
        floors = self.window_floors(height)

        windows: List[Window] = []
        for floor in range(floors):
            wy = cfg.window_top_offset + floor * cfg.floor_height
            for column in range(columns):
                wx = start_x + column * (cfg.window_width + cfg.window_spacing)
                window_type = self.pick_window_type(rng)
                dw, dh = window_type.size_adjustment
                ww, wh = cfg.window_width + dw, cfg.window_height + dh
                if wx >= 0 and wx + ww <= width and wy >= 0 and wy + wh <= height:
                    windows.append(Window(
                        x=wx,
                        y=wy,
                        width=ww,
                        height=wh,
                        is_lit=rng.random() < cfg.window_lit_chance,
                        window_type=window_type,
                    ))
        return tuple(windows)


def ensure_navigation_gaps(buildings: Sequence[Building], level_width: float,
                           min_gap: float) -> List[Building]:
    """
    Spacing pass: push buildings right until neighbours are at least
    `min_gap` apart, then drop any that no longer fit inside the level.
    """
    ordered = sorted(buildings, key=lambda b: b.x)
    spaced: List[Building] = []
    for building in ordered:
        if spaced:
            required_x = spaced[-1].right + min_gap
            if building.x < required_x:
                logger.debug("Shifting %s from x=%.1f to x=%.1f", building.id, building.x, required_x)
                building = replace(building, x=required_x)
        spaced.append(building)

    kept = [b for b in spaced if b.right <= level_width]
    if len(kept) != len(spaced):
        logger.info("Dropped %d building(s) that overflowed level width %s",
                    len(spaced) - len(kept), level_width)
    return kept

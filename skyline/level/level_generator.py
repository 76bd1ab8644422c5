"""
Level Generator - Main orchestrator for scene content generation
"""

import logging
import random
import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from skyline.config import SceneConfig
from skyline.level.background_generator import generate_background_metropolis
from skyline.level.building_generator import (
    BuildingGenerator,
    ensure_navigation_gaps,
    make_building_id,
)
from skyline.level.cloud_generator import generate_clouds
from skyline.level.level_data import Building, Level
from skyline.level.seed_manager import SeedManager

if TYPE_CHECKING:
    from skyline.systems.bird_spawner import BirdFlockSpawner
    from skyline.systems.plane_spawner import PlaneSpawner

logger = logging.getLogger(__name__)

# Absorbs float rounding when a gap was set to exactly the minimum
GAP_EPSILON = 1e-9


class LevelGenerator:
    """Builds Level values and owns the layout acceptance loop"""

    def __init__(self, config: Optional[SceneConfig] = None,
                 seed_manager: Optional[SeedManager] = None):
        self.config = config or SceneConfig()
        self.seed_manager = seed_manager or SeedManager()
        self.building_generator = BuildingGenerator(self.config.buildings)

        # Stats for the last generate_valid_level call
        self.generation_time_ms = 0.0
        self.layout_attempts = 0
        self.used_fallback = False

    def max_height_for(self, difficulty: float) -> float:
        """Height cap for buildings; grows linearly with difficulty."""
        cfg = self.config.buildings
        return min(cfg.max_height, cfg.min_height + difficulty * cfg.height_per_difficulty)

    def snap_width(self, available_width: float) -> int:
        """Largest configured width that fits, or the smallest one if none do."""
        widths = self.config.buildings.widths
        fitting = [w for w in widths if w <= available_width]
        return fitting[-1] if fitting else widths[0]

    def generate_level(self, width: float, difficulty: float = 1,
                       rng: Optional[random.Random] = None) -> Level:
        """
        Generate one scene layout. The result is not validated; see
        generate_valid_level for the acceptance loop.

        Args:
            width: Scene width in pixels
            difficulty: Progression input, raises the building height cap
            rng: Random source. A fresh unseeded one is used if omitted.
        """
        rng = rng or random.Random()
        return self._compose(width, difficulty, rng, rng, rng)

    def _compose(self, width: float, difficulty: float, building_rng: random.Random,
                 cloud_rng: random.Random, background_rng: random.Random) -> Level:
        if width <= 0:
            raise ValueError(f"Level width must be positive, got {width}")

        buildings = self._generate_buildings(width, difficulty, building_rng)
        clouds = generate_clouds(width, cloud_rng, self.config.clouds)
        background = generate_background_metropolis(width, background_rng, self.config.background)

        return Level(
            buildings=buildings,
            clouds=clouds,
            background_buildings=background,
            width=width,
            height=self.config.height,
        )

    def _generate_buildings(self, width: float, difficulty: float,
                            rng: random.Random) -> List[Building]:
        """
        Spread 2-3 buildings evenly: 30% of the width is split into equal
        gaps (edges included), the rest into equal building slots.
        """
        cfg = self.config.buildings
        count = rng.randint(*cfg.count_range)

        total_gap_space = width * cfg.gap_space_fraction
        average_width = (width - total_gap_space) / count
        gap_size = total_gap_space / (count + 1)
        max_height = self.max_height_for(difficulty)

        logger.debug("Generating %d buildings: width=%s gap=%.2f slot=%.2f max_height=%s",
                     count, width, gap_size, average_width, max_height)

        buildings: List[Building] = []
        for i in range(count):
            x = gap_size + i * (average_width + gap_size)
            available = min(average_width, width - x - gap_size)
            building_width = self.snap_width(available)
            buildings.append(self.building_generator.generate_building(
                x, building_width, max_height, rng, make_building_id(i + 1)))

        return ensure_navigation_gaps(buildings, width, cfg.min_gap)

    def validate_level(self, level: Level) -> bool:
        """True when every adjacent pair of buildings is at least the minimum gap apart
        and every building lies inside the level horizontally."""
        ordered = sorted(level.buildings, key=lambda b: b.x)
        for building in ordered:
            if building.x < 0 or building.right > level.width:
                logger.debug("%s lies outside [0, %s]", building.id, level.width)
                return False

        min_gap = self.config.buildings.min_gap
        for prev, current in zip(ordered, ordered[1:]):
            gap = current.x - prev.right
            if gap + GAP_EPSILON < min_gap:
                logger.debug("Gap %.2f between %s and %s is below %s", gap, prev.id, current.id, min_gap)
                return False
        return True

    def generate_valid_level(self, width: float, difficulty: float = 1,
                             rng: Optional[random.Random] = None,
                             max_attempts: Optional[int] = None) -> Level:
        """
        Generate until a layout passes validate_level, at most max_attempts
        times, then fall back to fallback_level.
        """
        rng = rng or random.Random()
        attempts_allowed = max_attempts if max_attempts is not None else self.config.max_layout_attempts
        if attempts_allowed < 1:
            raise ValueError("max_attempts must be at least 1")

        start_time = time.time()
        self.used_fallback = False
        level = None
        for attempt in range(1, attempts_allowed + 1):
            self.layout_attempts = attempt
            level = self.generate_level(width, difficulty, rng)
            if self.validate_level(level):
                break
            logger.warning("Layout attempt %d/%d rejected", attempt, attempts_allowed)
        else:
            logger.warning("No valid layout after %d attempts, using fallback layout", attempts_allowed)
            level = self.fallback_level(width, difficulty, rng)
            self.used_fallback = True

        self.generation_time_ms = (time.time() - start_time) * 1000
        return level

    def fallback_level(self, width: float, difficulty: float = 1,
                       rng: Optional[random.Random] = None) -> Level:
        """
        Deterministic layout: as many smallest-width buildings as fit
        (at most the minimum building count) with equal maximum gaps.
        """
        if width <= 0:
            raise ValueError(f"Level width must be positive, got {width}")
        rng = rng or random.Random()
        cfg = self.config.buildings
        building_width = cfg.widths[0]
        max_height = self.max_height_for(difficulty)

        count = cfg.count_range[0]
        while count > 0:
            gap = (width - count * building_width) / (count + 1)
            if count == 1 and gap >= 0:
                break
            if gap >= cfg.min_gap:
                break
            count -= 1

        buildings: List[Building] = []
        if count > 0:
            gap = (width - count * building_width) / (count + 1)
            for i in range(count):
                x = gap + i * (building_width + gap)
                buildings.append(self.building_generator.generate_building(
                    x, building_width, max_height, rng, make_building_id(i + 1)))
        else:
            logger.warning("Level width %s cannot hold a %s px building", width, building_width)

        return Level(
            buildings=buildings,
            clouds=generate_clouds(width, rng, self.config.clouds),
            background_buildings=generate_background_metropolis(width, rng, self.config.background),
            width=width,
            height=self.config.height,
        )

    def generate_for_level_index(self, level_index: int, width: Optional[float] = None,
                                 difficulty: float = 1) -> Level:
        """
        Reproducible level for a level number: each component draws from
        its own seeded RNG, so changing cloud settings never moves buildings.
        """
        width = width if width is not None else self.config.width
        rngs = self.seed_manager.level_rngs(level_index)

        start_time = time.time()
        self.used_fallback = False
        level = None
        for attempt in range(1, self.config.max_layout_attempts + 1):
            self.layout_attempts = attempt
            level = self._compose(width, difficulty, rngs['buildings'], rngs['clouds'], rngs['background'])
            if self.validate_level(level):
                break
            logger.warning("Level %d layout attempt %d rejected", level_index, attempt)
        else:
            self.used_fallback = True
            level = self.fallback_level(width, difficulty, rngs['buildings'])

        self.generation_time_ms = (time.time() - start_time) * 1000
        return level

    def create_spawners(self, level: Level) -> Tuple["BirdFlockSpawner", "PlaneSpawner"]:
        """
        Bird and plane spawners for a level, seeded from the current level
        seed when one has been generated.
        """
        from skyline.systems.bird_spawner import BirdFlockSpawner  # local import to avoid cycles
        from skyline.systems.plane_spawner import PlaneSpawner

        if self.seed_manager.current_level_seed is not None:
            bird_rng = self.seed_manager.get_random('birds')
            plane_rng = self.seed_manager.get_random('planes')
        else:
            bird_rng, plane_rng = random.Random(), random.Random()
        return (BirdFlockSpawner(level.width, bird_rng, self.config.birds),
                PlaneSpawner(level.width, plane_rng, self.config.planes))

    def get_generation_stats(self) -> Dict[str, Any]:
        return {
            'generation_time_ms': self.generation_time_ms,
            'layout_attempts': self.layout_attempts,
            'used_fallback': self.used_fallback,
            'seed_info': self.seed_manager.get_seed_info(),
        }


def generate_scene(width: float, difficulty: float = 1, seed: Optional[int] = None,
                   config: Optional[SceneConfig] = None) -> Level:
    """
    Convenience function: a validated level from an optional seed.
    """
    generator = LevelGenerator(config)
    return generator.generate_valid_level(width, difficulty, random.Random(seed))

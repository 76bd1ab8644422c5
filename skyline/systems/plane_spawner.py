import logging
import random
from typing import Callable, Optional

import pygame

from skyline.config import PlaneConfig
from skyline.level.level_data import Plane, PlaneType
from skyline.systems.entity_arena import EntityArena
from skyline.systems.spawn_timer import SpawnTimer

logger = logging.getLogger(__name__)

PLANE_TYPES = (PlaneType.SMALL, PlaneType.MEDIUM, PlaneType.LARGE)


class PlaneSpawner:
    """Occasional planes crossing the sky in a straight line, capped in number."""

    def __init__(self, scene_width: float, rng: random.Random,
                 config: Optional[PlaneConfig] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.scene_width = scene_width
        self.rng = rng
        self.config = config or PlaneConfig()
        self.clock = clock or pygame.time.get_ticks
        self.timer = SpawnTimer(self.config.base_interval_ms, self.config.interval_variance_ms, rng)

    def spawn_plane(self, planes: EntityArena) -> Optional[int]:
        """Add a plane unless the population cap is reached."""
        cfg = self.config
        if len(planes) >= cfg.max_planes:
            logger.debug("Plane cap %d reached, skipping spawn", cfg.max_planes)
            return None

        weights = [cfg.types[t.value].weight for t in PLANE_TYPES]
        plane_type = self.rng.choices(PLANE_TYPES, weights=weights)[0]
        kind = cfg.types[plane_type.value]
        direction = self.rng.choice((1, -1))

        plane = Plane(
            x=-kind.size if direction > 0 else self.scene_width + kind.size,
            y=self.rng.uniform(*cfg.y_range),
            size=kind.size,
            speed=kind.speed * direction,
            plane_type=plane_type,
            direction=direction,
        )
        return planes.add(plane)

    def is_offscreen(self, plane: Plane) -> bool:
        margin = self.config.offscreen_margin
        if plane.direction > 0:
            return plane.x > self.scene_width + margin
        return plane.x < -margin

    def update(self, planes: EntityArena, now: Optional[float] = None) -> int:
        now = self.clock() if now is None else now
        if not self.timer.armed:
            self.timer.arm(now)
        elif self.timer.due(now):
            self.spawn_plane(planes)
            self.timer.arm(now)

        for plane in planes:
            plane.x += plane.speed
        return planes.retain(lambda p: not self.is_offscreen(p))

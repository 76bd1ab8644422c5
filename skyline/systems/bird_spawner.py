"""
Bird flocks - timer-driven spawning, wavering flight and off-screen culling.
"""

import logging
import math
import random
from typing import Callable, List, Optional

import pygame

from skyline.config import BirdConfig
from skyline.level.level_data import Bird, BirdDistance
from skyline.systems.entity_arena import EntityArena
from skyline.systems.spawn_timer import SpawnTimer

logger = logging.getLogger(__name__)

DISTANCES = (BirdDistance.FAR, BirdDistance.MEDIUM, BirdDistance.CLOSE)


class BirdFlockSpawner:
    """
    Spawns loose flocks on a randomized timer and moves them every frame.

    The frame clock returns milliseconds; it defaults to
    pygame.time.get_ticks. Callers that drive time themselves pass `now`
    to update().
    """

    def __init__(self, scene_width: float, rng: random.Random,
                 config: Optional[BirdConfig] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.scene_width = scene_width
        self.rng = rng
        self.config = config or BirdConfig()
        self.clock = clock or pygame.time.get_ticks
        self.timer = SpawnTimer(self.config.base_interval_ms, self.config.interval_variance_ms, rng)

    def pick_distance(self) -> BirdDistance:
        weights = [self.config.classes[d.value].weight for d in DISTANCES]
        return self.rng.choices(DISTANCES, weights=weights)[0]

    def spawn_flock(self, birds: EntityArena) -> List[int]:
        """Add one flock to `birds` and return the new ids."""
        cfg = self.config
        distance = self.pick_distance()
        cls = cfg.classes[distance.value]

        direction = self.rng.choice((1, -1))
        speed = self.rng.uniform(*cls.speed_range) * direction
        base_y = self.rng.uniform(*cls.y_range)
        start_x = -cls.size * 4 if direction > 0 else self.scene_width + cls.size * 4
        group_size = self.rng.randint(*cfg.group_size_range)

        ids = []
        for _ in range(group_size):
            # Followers trail the leader, opposite to the flight direction
            x = start_x - direction * self.rng.uniform(0, cfg.jitter_x)
            y = base_y + self.rng.uniform(-cfg.jitter_y, cfg.jitter_y)
            ids.append(birds.add(Bird(
                x=x,
                y=y,
                base_y=y,
                size=cls.size,
                speed=speed,
                waver_amplitude=self.rng.uniform(*cls.amplitude_range),
                waver_frequency=self.rng.uniform(*cls.frequency_range),
                time=self.rng.uniform(0, 2 * math.pi),
                distance=distance,
            )))
        logger.debug("Spawned %s flock of %d heading %s", distance.value, group_size,
                     "right" if direction > 0 else "left")
        return ids

    def is_offscreen(self, bird: Bird) -> bool:
        margin = self.config.offscreen_margin
        if bird.speed >= 0:
            return bird.x > self.scene_width + margin
        return bird.x < -margin

    @staticmethod
    def advance(bird: Bird) -> None:
        bird.x += bird.speed
        bird.time += bird.waver_frequency
        bird.y = bird.base_y + math.sin(bird.time) * bird.waver_amplitude

    def update(self, birds: EntityArena, now: Optional[float] = None) -> int:
        """
        One frame: spawn if the timer is due, move every bird, cull the
        ones that left the screen. Returns the number culled.
        """
        now = self.clock() if now is None else now
        if not self.timer.armed:
            self.timer.arm(now)
        elif self.timer.due(now):
            self.spawn_flock(birds)
            self.timer.arm(now)

        for bird in birds:
            self.advance(bird)
        return birds.retain(lambda b: not self.is_offscreen(b))

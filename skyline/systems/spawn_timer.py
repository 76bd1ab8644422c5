import random
from typing import Optional


class SpawnTimer:
    """Next-spawn timestamp: now + base interval + uniform(0, variance)."""

    def __init__(self, base_interval: float, variance: float, rng: random.Random):
        self.base_interval = base_interval
        self.variance = variance
        self.rng = rng
        self.next_spawn: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self.next_spawn is not None

    def arm(self, now: float) -> float:
        self.next_spawn = now + self.base_interval + self.rng.uniform(0, self.variance)
        return self.next_spawn

    def due(self, now: float) -> bool:
        return self.next_spawn is not None and now >= self.next_spawn

    def reset(self) -> None:
        self.next_spawn = None

"""
Seed Manager - one world seed fanned out into per-level, per-component RNGs

Each scene component draws from its own random.Random so that, for
example, adding a cloud cluster never shifts where buildings land.
"""

import hashlib
import logging
import random
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Generation draws from the first three; the runtime spawners from the rest
LAYOUT_COMPONENTS = ("buildings", "clouds", "background")
SPAWNER_COMPONENTS = ("birds", "planes")
COMPONENTS = LAYOUT_COMPONENTS + SPAWNER_COMPONENTS


def derive_seed(*parts: object) -> int:
    """Stable 32-bit seed from any mix of parts, independent of PYTHONHASHSEED."""
    key = "_".join(str(p) for p in parts)
    return int(hashlib.md5(key.encode()).hexdigest()[:8], 16)


class SeedManager:
    """Derives per-level and per-component seeds from one world seed"""

    def __init__(self, world_seed: Optional[int] = None):
        """
        Args:
            world_seed: Master seed. If None, a random one is drawn.
        """
        self.world_seed = world_seed if world_seed is not None else random.randint(0, 2**31 - 1)
        self.level_index: Optional[int] = None
        self.current_level_seed: Optional[int] = None
        self.sub_seeds: Dict[str, int] = {}
        self._rng_instances: Dict[str, random.Random] = {}

    def generate_level_seed(self, level_index: int) -> int:
        """Deterministic seed for a level number. Resets component RNGs."""
        self.level_index = level_index
        self.current_level_seed = derive_seed(self.world_seed, "level", level_index)
        self.sub_seeds = {}
        self._rng_instances = {}
        return self.current_level_seed

    def generate_sub_seeds(self, level_seed: int) -> Dict[str, int]:
        self.sub_seeds = {c: derive_seed(level_seed, c) for c in COMPONENTS}
        return dict(self.sub_seeds)

    def get_random(self, component: str) -> random.Random:
        """
        Random instance for one scene component.

        The same component returns the same instance until the next
        generate_level_seed call.

        Raises:
            ValueError: unknown component name, or no level seed yet
        """
        if component not in COMPONENTS:
            raise ValueError(f"Unknown seed component '{component}', expected one of {COMPONENTS}")
        if self.current_level_seed is None:
            raise ValueError("generate_level_seed must be called before get_random")
        if component not in self._rng_instances:
            if component not in self.sub_seeds:
                self.sub_seeds[component] = derive_seed(self.current_level_seed, component)
            self._rng_instances[component] = random.Random(self.sub_seeds[component])
        return self._rng_instances[component]

    def level_rngs(self, level_index: int) -> Dict[str, random.Random]:
        """Fresh RNGs for every component of one level, keyed by component name."""
        level_seed = self.generate_level_seed(level_index)
        self.generate_sub_seeds(level_seed)
        logger.debug("Level %d seeded with %d (world seed %d)", level_index, level_seed, self.world_seed)
        return {c: self.get_random(c) for c in COMPONENTS}

    def set_world_seed(self, seed: int):
        self.world_seed = seed
        self.level_index = None
        self.current_level_seed = None
        self.sub_seeds = {}
        self._rng_instances = {}

    def get_seed_info(self) -> Dict[str, int]:
        info = {
            'world_seed': self.world_seed,
            'sub_seeds': dict(self.sub_seeds),
        }
        if self.current_level_seed is not None:
            info['level_index'] = self.level_index
            info['level_seed'] = self.current_level_seed
        return info

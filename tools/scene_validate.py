#!/usr/bin/env python3
"""Generate scenes for a range of seeds and check layout invariants.

Checks:
- buildings sit on the ground line
- windows lie inside their building
- neighbouring buildings keep the minimum gap
- rooftop platforms can reach each other

Usage: python tools/scene_validate.py [count] [difficulty]
"""
import logging
import os
import random
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from skyline.config_loader import load_scene_config
from skyline.level.level_generator import LevelGenerator
from skyline.level.navigation import NavigationValidator, rooftop_platforms

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("scene_validate")

count = int(sys.argv[1]) if len(sys.argv) > 1 else 200
difficulty = float(sys.argv[2]) if len(sys.argv) > 2 else 1

config = load_scene_config()
generator = LevelGenerator(config)
validator = NavigationValidator(config.navigation)
ground = config.buildings.ground_level

errors = []
fallbacks = 0
unreachable = 0

for seed in range(count):
    level = generator.generate_valid_level(config.width, difficulty, random.Random(seed))
    if generator.used_fallback:
        fallbacks += 1
    if not generator.validate_level(level):
        errors.append(f"seed {seed}: accepted level fails gap validation")
    for b in level.buildings:
        if b.y + b.height != ground:
            errors.append(f"seed {seed}: {b.id} is not on the ground line")
        for w in b.windows:
            if w.x < 0 or w.y < 0 or w.x + w.width > b.width or w.y + w.height > b.height:
                errors.append(f"seed {seed}: {b.id} has a window outside its bounds")
    pads = rooftop_platforms(level.buildings, config.navigation)
    for a, b in zip(pads, pads[1:]):
        if not validator.is_reachable(a, b, level.buildings):
            unreachable += 1

logger.info("Generated %d scenes: %d fallbacks, %d unreachable rooftop pairs",
            count, fallbacks, unreachable)

if errors:
    logger.error('Validation FAILED:')
    for e in errors:
        logger.error(' - %s', e)
    sys.exit(2)

print('Validation OK: all accepted scenes satisfy the layout invariants')
sys.exit(0)

"""Cloud clusters with per-layer alpha bands."""

import logging
import random
from typing import List, Optional

from skyline.config import CloudConfig
from skyline.level.level_data import Cloud, CloudLayer

logger = logging.getLogger(__name__)

LAYERS = (CloudLayer.BACKGROUND, CloudLayer.MIDGROUND, CloudLayer.FOREGROUND)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def generate_clouds(level_width: float, rng: random.Random,
                    config: Optional[CloudConfig] = None) -> List[Cloud]:
    """
    Scatter clouds around randomly placed cluster centers.

    Each cloud picks its own depth layer and samples alpha from that
    layer's band, so a single cluster mixes near and far clouds.
    """
    cfg = config or CloudConfig()
    y_min, y_max = cfg.y_range
    clouds: List[Cloud] = []

    for cluster_id in range(cfg.cluster_count):
        center_x = rng.random() * level_width
        center_y = rng.random() * (y_max - y_min) + y_min
        members = rng.randint(cfg.min_clouds_per_cluster, cfg.max_clouds_per_cluster)

        for _ in range(members):
            offset_x = (rng.random() - 0.5) * cfg.cluster_spread
            offset_y = (rng.random() - 0.5) * cfg.cluster_spread * cfg.vertical_spread_factor

            layer = rng.choice(LAYERS)
            alpha_lo, alpha_hi = cfg.alpha_layers[layer.value]

            clouds.append(Cloud(
                x=_clamp(center_x + offset_x, 0, level_width),
                y=_clamp(center_y + offset_y, y_min, y_max),
                width=rng.uniform(cfg.min_width, cfg.max_width),
                height=cfg.height,
                alpha=rng.uniform(alpha_lo, alpha_hi),
                speed=rng.uniform(cfg.min_speed, cfg.max_speed),
                cluster_id=cluster_id,
                layer=layer,
            ))

    logger.debug("Generated %d clouds in %d clusters", len(clouds), cfg.cluster_count)
    return clouds

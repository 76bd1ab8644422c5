"""
Navigation validation - line-of-sight reachability between platforms.

Platforms are treated as points (horizontal center, top edge). A flight
path is clear when the straight segment between two points misses every
building's bounding box inflated by the clearance buffer.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from skyline.config import NavigationConfig
from skyline.level.level_data import Building

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class PlatformType(Enum):
    TAXI_SPAWN = "taxi_spawn"
    PASSENGER_PICKUP = "passenger_pickup"
    PASSENGER_DROPOFF = "passenger_dropoff"
    NEUTRAL = "neutral"


@dataclass
class Platform:
    id: str
    x: float
    y: float
    width: float
    height: float
    platform_type: PlatformType = PlatformType.NEUTRAL
    building_id: Optional[str] = None
    is_landable: bool = True

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y)


@dataclass
class NavigationPath:
    source: Platform
    target: Platform
    is_reachable: bool
    obstacles: List[Building] = field(default_factory=list)
    waypoint: Optional[Point] = None


@dataclass(frozen=True)
class Bounds:
    left: float
    top: float
    right: float
    bottom: float


@dataclass(frozen=True)
class Gap:
    x: float
    width: float


def inflate(building: Building, clearance: float) -> Bounds:
    return Bounds(
        left=building.x - clearance,
        top=building.y - clearance,
        right=building.right + clearance,
        bottom=building.bottom + clearance,
    )


def _axis_interval(start: float, delta: float, lo: float, hi: float) -> Optional[Tuple[float, float]]:
    """Parameter interval where the segment is inside [lo, hi] on one axis.

    A zero delta means the segment runs parallel to this slab: either it
    is inside the slab for every t, or never.
    """
    if delta == 0:
        if lo <= start <= hi:
            return (-math.inf, math.inf)
        return None
    t1 = (lo - start) / delta
    t2 = (hi - start) / delta
    return (min(t1, t2), max(t1, t2))


def line_intersects_rect(start: Point, end: Point, rect: Bounds) -> bool:
    """
    Slab test for the segment start->end against an axis-aligned box.

    The intervals are closed, so a segment that only touches an edge or
    corner counts as intersecting.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]

    x_interval = _axis_interval(start[0], dx, rect.left, rect.right)
    if x_interval is None:
        return False
    y_interval = _axis_interval(start[1], dy, rect.top, rect.bottom)
    if y_interval is None:
        return False

    t_min = max(x_interval[0], y_interval[0], 0.0)
    t_max = min(x_interval[1], y_interval[1], 1.0)
    return t_min <= t_max


def find_building_gaps(buildings: Iterable[Building], min_gap: float) -> List[Gap]:
    """Horizontal gaps between neighbouring buildings that are at least min_gap wide."""
    ordered = sorted(buildings, key=lambda b: b.x)
    gaps = []
    for prev, current in zip(ordered, ordered[1:]):
        width = current.x - prev.right
        if width >= min_gap:
            gaps.append(Gap(x=prev.right, width=width))
    return gaps


class NavigationValidator:
    """Checks whether platforms can be flown between without hitting buildings"""

    def __init__(self, config: Optional[NavigationConfig] = None):
        self.config = config or NavigationConfig()

    def obstacles_between(self, start: Point, end: Point,
                          buildings: Sequence[Building]) -> List[Building]:
        clearance = self.config.clearance
        return [b for b in buildings if line_intersects_rect(start, end, inflate(b, clearance))]

    def has_clear_path(self, start: Point, end: Point, buildings: Sequence[Building]) -> bool:
        return not self.obstacles_between(start, end, buildings)

    def get_navigation_path(self, source: Platform, target: Platform,
                            buildings: Sequence[Building]) -> NavigationPath:
        obstacles = self.obstacles_between(source.center, target.center, buildings)
        return NavigationPath(
            source=source,
            target=target,
            is_reachable=not obstacles,
            obstacles=obstacles,
        )

    def can_reach_platform(self, source: Platform, target: Platform,
                           buildings: Sequence[Building]) -> bool:
        return self.get_navigation_path(source, target, buildings).is_reachable

    def find_alternate_paths(self, source: Platform, target: Platform,
                             buildings: Sequence[Building]) -> List[NavigationPath]:
        """
        Two-leg routes through a waypoint above each building gap.

        The waypoint sits at the gap's horizontal center, one safe landing
        clearance above the higher of the two platforms.
        """
        paths = []
        start, end = source.center, target.center
        for gap in find_building_gaps(buildings, self.config.min_gap):
            waypoint = (gap.x + gap.width / 2,
                        min(source.y, target.y) - self.config.safe_landing_clearance)
            if self.has_clear_path(start, waypoint, buildings) and \
                    self.has_clear_path(waypoint, end, buildings):
                paths.append(NavigationPath(
                    source=source,
                    target=target,
                    is_reachable=True,
                    waypoint=waypoint,
                ))
        return paths

    def get_safe_landing_approaches(self, platform: Platform,
                                    buildings: Sequence[Building]) -> List[Point]:
        """Approach points from upper left, above and upper right that have a clear descent."""
        cx, cy = platform.center
        distance = self.config.safe_landing_clearance * 2
        approaches = []
        for angle in (-45, 0, 45):
            # 0 degrees is straight up; positive angles lean right
            radians = math.radians(angle)
            point = (cx + math.sin(radians) * distance, cy - math.cos(radians) * distance)
            if self.has_clear_path(point, (cx, cy), buildings):
                approaches.append(point)
        return approaches

    def is_reachable(self, source: Platform, target: Platform,
                     buildings: Sequence[Building]) -> bool:
        """Direct line of sight, or any clear route through a gap waypoint."""
        if self.can_reach_platform(source, target, buildings):
            return True
        return bool(self.find_alternate_paths(source, target, buildings))

    def validate_level_navigation(self, spawn: Platform, platforms: Sequence[Platform],
                                  buildings: Sequence[Building]) -> bool:
        """
        Spawn must reach every pickup, and every pickup must reach at
        least one dropoff.
        """
        pickups = [p for p in platforms if p.platform_type == PlatformType.PASSENGER_PICKUP]
        dropoffs = [p for p in platforms if p.platform_type == PlatformType.PASSENGER_DROPOFF]

        for pickup in pickups:
            if not self.is_reachable(spawn, pickup, buildings):
                logger.info("Spawn %s cannot reach pickup %s", spawn.id, pickup.id)
                return False

        for pickup in pickups:
            if not any(self.is_reachable(pickup, dropoff, buildings) for dropoff in dropoffs):
                logger.info("Pickup %s cannot reach any dropoff", pickup.id)
                return False
        return True


def rooftop_platforms(buildings: Sequence[Building],
                      config: Optional[NavigationConfig] = None,
                      platform_type: PlatformType = PlatformType.NEUTRAL) -> List[Platform]:
    """
    One landable platform centered above each roof. The pad floats just
    clear of the roof clearance so its own building never blocks it.
    """
    cfg = config or NavigationConfig()
    platforms = []
    for building in buildings:
        width = min(cfg.platform_width, building.width)
        platforms.append(Platform(
            id=f"platform_{building.id}",
            x=building.x + (building.width - width) / 2,
            y=building.y - cfg.clearance - cfg.platform_height,
            width=width,
            height=cfg.platform_height,
            platform_type=platform_type,
            building_id=building.id,
        ))
    return platforms

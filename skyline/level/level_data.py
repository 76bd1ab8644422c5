"""
Scene data structures produced by the generators and consumed by the renderer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import pygame

from skyline.systems.entity_arena import EntityArena


class MaterialType(Enum):
    SOLID = "solid"
    BRICK = "brick"
    CONCRETE = "concrete"


class WindowType(Enum):
    """Window variants. Each implies a (width, height) adjustment."""
    STANDARD = "standard"
    BAY = "bay"
    SMALL = "small"

    @property
    def size_adjustment(self) -> Tuple[int, int]:
        return _WINDOW_SIZE_ADJUSTMENTS[self]


_WINDOW_SIZE_ADJUSTMENTS = {
    WindowType.STANDARD: (0, 0),
    WindowType.BAY: (4, 0),
    WindowType.SMALL: (0, -4),
}


class CloudLayer(Enum):
    BACKGROUND = "background"
    MIDGROUND = "midground"
    FOREGROUND = "foreground"


class BirdDistance(Enum):
    FAR = "far"
    MEDIUM = "medium"
    CLOSE = "close"


class PlaneType(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True)
class Window:
    """A window positioned relative to its building's top-left corner."""
    x: float
    y: float
    width: float
    height: float
    is_lit: bool
    window_type: WindowType = WindowType.STANDARD

    def absolute(self, building: "Building") -> Tuple[float, float, float, float]:
        """Screen-space (x, y, w, h) of this window inside `building`."""
        return (building.x + self.x, building.y + self.y, self.width, self.height)


@dataclass(frozen=True)
class BuildingExtras:
    """
    Optional decoration record for a richer building model.

    The generator never attaches one; renderers that know about these
    details can check `Building.extras`.
    """
    has_garage: bool = False
    rooftop_elements: Tuple[str, ...] = ()
    signs: Tuple[str, ...] = ()
    balconies: int = 0
    has_weathering: bool = False


@dataclass(frozen=True)
class Building:
    """
    Foreground building sitting on the ground line.

    Attributes:
        id: Unique id within a level ("building_<n>")
        x, y, width, height: Footprint in scene pixels; y + height == ground level
        windows: Window grid, positions relative to (x, y)
        color: Solid fill color (hex string)
        material: Fill material hint for the renderer
        is_tall: True when the height boost was applied
    """
    id: str
    x: float
    y: float
    width: float
    height: float
    windows: Tuple[Window, ...]
    color: str
    material: MaterialType
    is_tall: bool = False
    extras: Optional[BuildingExtras] = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def rect(self) -> pygame.Rect:
        """Integer collision rectangle for the physics layer."""
        return pygame.Rect(round(self.x), round(self.y), round(self.width), round(self.height))


@dataclass(frozen=True)
class BackgroundWindow:
    x: float
    y: float
    width: float
    height: float
    is_lit: bool


@dataclass(frozen=True)
class BackgroundBuilding:
    """Decorative skyline silhouette. Never collides."""
    x: float
    y: float
    width: float
    height: float
    color: str
    distance: str  # "far" | "very_far"
    alpha: float
    windows: Optional[Tuple[BackgroundWindow, ...]] = None


@dataclass
class Cloud:
    x: float
    y: float
    width: float
    height: float
    alpha: float
    speed: float
    cluster_id: int
    layer: CloudLayer


@dataclass
class Bird:
    x: float
    y: float
    base_y: float
    size: float
    speed: float  # signed: negative flies left
    waver_amplitude: float
    waver_frequency: float
    time: float
    distance: BirdDistance

    @property
    def direction(self) -> int:
        return 1 if self.speed >= 0 else -1


@dataclass
class Plane:
    x: float
    y: float
    size: float
    speed: float
    plane_type: PlaneType
    direction: int  # -1 for left, 1 for right


@dataclass
class Level:
    """
    Complete generated content for one scene.

    Buildings are ordered left to right. Clouds, birds and planes are
    mutated by the update loop; everything else is fixed once generated.
    """
    buildings: List[Building]
    clouds: List[Cloud]
    background_buildings: List[BackgroundBuilding]
    width: float
    height: float
    planes: EntityArena = field(default_factory=EntityArena)
    birds: EntityArena = field(default_factory=EntityArena)

    @property
    def solids(self) -> List[pygame.Rect]:
        return [b.rect for b in self.buildings]

    def get_building(self, building_id: str) -> Optional[Building]:
        for building in self.buildings:
            if building.id == building_id:
                return building
        return None

    def update_clouds(self) -> None:
        """Drift clouds right by their speed, wrapping past the right edge."""
        for cloud in self.clouds:
            cloud.x += cloud.speed
            if cloud.x > self.width + cloud.width:
                cloud.x = -cloud.width

"""
Scene configuration - constants and dataclass configs for content generation
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Tuple

import pygame

# Scene dimensions (pixels)
SCENE_WIDTH = 700
SCENE_HEIGHT = 300
GROUND_LEVEL = 300
TOP_MARGIN = 20

# Sky, sunset, horizon, and cloud colors
SKY_COLORS: Dict[str, str] = {
    "CREAM": "#ffd89a",
    "SUNSET_GOLD": "#f5ba2e",
    "SUNSET_ORANGE": "#fa782d",
    "SUNSET_RED": "#df4d3e",
    "DEEP_RED": "#bc4241",
    "DUSK_PURPLE": "#97374a",
    "TWILIGHT_PURPLE": "#7c4b61",
    "NIGHT_PURPLE": "#63395d",
}

# Building, window, brick, and vegetation colors
ENVIRONMENT_COLORS: Dict[str, str] = {
    "DARK_PURPLE_GRAY": "#372a3b",
    "OLIVE_GREEN": "#777b3c",
    "DARK_OLIVE": "#545225",
    "FOREST_GREEN": "#384024",
    "DEEP_FOREST": "#1d2d22",
    "DARK_TEAL": "#0b1f2a",
    "DARK_BROWN": "#291911",
    "BROWN": "#522e20",
    "DARK_GRAY": "#252526",
    "CHARCOAL": "#1f1f1f",
    "ALMOST_BLACK": "#141414",
}

COLORS: Dict[str, str] = {**SKY_COLORS, **ENVIRONMENT_COLORS}

# Foreground buildings
BUILDING_HEIGHTS = [80, 105, 130, 155, 180, 205]
BUILDING_WIDTHS = [100, 120, 140, 160, 180, 200]
MIN_BUILDING_HEIGHT = 80
MAX_BUILDING_HEIGHT = 205
MIN_BUILDING_GAP = 80
TALL_BUILDING_CHANCE = 0.3
TALL_HEIGHT_MULTIPLIER = 1.5
HEIGHT_PER_DIFFICULTY = 30
GAP_SPACE_FRACTION = 0.3
BUILDING_COUNT_RANGE = (2, 3)

# Window grid
WINDOW_WIDTH = 12
WINDOW_HEIGHT = 16
WINDOW_SPACING = 8
FLOOR_HEIGHT = 25
WINDOW_EDGE_MARGIN = 8
WINDOW_TOP_OFFSET = 8
WINDOW_ROOF_ALLOWANCE = 10
WINDOW_LIT_CHANCE = 0.5
WINDOW_TYPE_WEIGHTS = {"standard": 1.0, "bay": 0.0, "small": 0.0}

# Navigation
NAVIGATION_CLEARANCE = 10
SAFE_LANDING_CLEARANCE = 30
PLATFORM_WIDTH = 60
PLATFORM_HEIGHT = 8

# Horizon line for the background skyline
HORIZON_Y = 300

# Layout acceptance loop
MAX_LAYOUT_ATTEMPTS = 10


def _check_range(name: str, bounds: Tuple[float, float]) -> None:
    lo, hi = bounds
    if lo > hi:
        raise ValueError(f"{name} range is inverted: {lo} > {hi}")


def to_color(value: str) -> pygame.Color:
    """Decode a palette entry (hex string or pygame color name)."""
    try:
        return pygame.Color(value)
    except ValueError:
        raise ValueError(f"Invalid color: {value!r}") from None


def _check_colors(name: str, colors: Iterable[str]) -> None:
    for value in colors:
        try:
            to_color(value)
        except ValueError:
            raise ValueError(f"{name} has an invalid color: {value!r}") from None


@dataclass
class BuildingConfig:
    """Configuration for foreground building generation."""
    heights: List[int] = field(default_factory=lambda: list(BUILDING_HEIGHTS))
    widths: List[int] = field(default_factory=lambda: list(BUILDING_WIDTHS))
    min_height: int = MIN_BUILDING_HEIGHT
    max_height: int = MAX_BUILDING_HEIGHT
    min_gap: float = MIN_BUILDING_GAP
    ground_level: int = GROUND_LEVEL
    top_margin: int = TOP_MARGIN
    scene_height: int = SCENE_HEIGHT
    tall_chance: float = TALL_BUILDING_CHANCE
    tall_multiplier: float = TALL_HEIGHT_MULTIPLIER
    height_per_difficulty: int = HEIGHT_PER_DIFFICULTY
    gap_space_fraction: float = GAP_SPACE_FRACTION
    count_range: Tuple[int, int] = BUILDING_COUNT_RANGE
    colors: List[str] = field(default_factory=lambda: list(ENVIRONMENT_COLORS.values()))

    # Window grid
    window_width: int = WINDOW_WIDTH
    window_height: int = WINDOW_HEIGHT
    window_spacing: int = WINDOW_SPACING
    floor_height: int = FLOOR_HEIGHT
    window_margin: int = WINDOW_EDGE_MARGIN
    window_top_offset: int = WINDOW_TOP_OFFSET
    window_roof_allowance: int = WINDOW_ROOF_ALLOWANCE
    window_lit_chance: float = WINDOW_LIT_CHANCE
    # Relative odds per window variant; only "standard" by default
    window_type_weights: Dict[str, float] = field(default_factory=lambda: dict(WINDOW_TYPE_WEIGHTS))

    def __post_init__(self):
        if not self.heights:
            raise ValueError("BuildingConfig.heights must not be empty")
        if not self.widths:
            raise ValueError("BuildingConfig.widths must not be empty")
        if not self.colors:
            raise ValueError("BuildingConfig.colors must not be empty")
        _check_colors("BuildingConfig.colors", self.colors)
        self.heights = sorted(self.heights)
        self.widths = sorted(self.widths)
        self.count_range = tuple(self.count_range)
        _check_range("BuildingConfig.count_range", self.count_range)
        if self.count_range[0] < 1:
            raise ValueError("BuildingConfig.count_range must start at 1 or more")
        if not 0.0 <= self.gap_space_fraction < 1.0:
            raise ValueError("BuildingConfig.gap_space_fraction must be in [0, 1)")
        if self.floor_height <= 0:
            raise ValueError("BuildingConfig.floor_height must be positive")
        unknown = set(self.window_type_weights) - set(WINDOW_TYPE_WEIGHTS)
        if unknown:
            raise ValueError(f"BuildingConfig.window_type_weights has unknown variants: {sorted(unknown)}")
        if any(w < 0 for w in self.window_type_weights.values()) or not any(self.window_type_weights.values()):
            raise ValueError("BuildingConfig.window_type_weights must be non-negative with a positive total")

    @property
    def height_ceiling(self) -> int:
        """Hard cap for boosted buildings."""
        return self.scene_height - self.top_margin


@dataclass
class CloudConfig:
    """Cloud cluster settings. Alpha bands are keyed by depth layer name."""
    cluster_count: int = 4
    min_clouds_per_cluster: int = 3
    max_clouds_per_cluster: int = 6
    cluster_spread: float = 120.0
    vertical_spread_factor: float = 0.6
    y_range: Tuple[float, float] = (20.0, 120.0)
    min_width: float = 40.0
    max_width: float = 90.0
    height: float = 20.0
    min_speed: float = 0.05
    max_speed: float = 0.2
    alpha_layers: Dict[str, Tuple[float, float]] = field(default_factory=lambda: {
        "background": (0.2, 0.4),
        "midground": (0.4, 0.6),
        "foreground": (0.6, 0.85),
    })

    def __post_init__(self):
        self.y_range = tuple(self.y_range)
        _check_range("CloudConfig.y_range", self.y_range)
        _check_range("CloudConfig.clouds_per_cluster",
                     (self.min_clouds_per_cluster, self.max_clouds_per_cluster))
        _check_range("CloudConfig.width", (self.min_width, self.max_width))
        _check_range("CloudConfig.speed", (self.min_speed, self.max_speed))
        self.alpha_layers = {k: tuple(v) for k, v in self.alpha_layers.items()}
        for layer in ("background", "midground", "foreground"):
            if layer not in self.alpha_layers:
                raise ValueError(f"CloudConfig.alpha_layers is missing '{layer}'")
            _check_range(f"CloudConfig.alpha_layers[{layer}]", self.alpha_layers[layer])


@dataclass
class BackgroundLayerConfig:
    """One depth population of the decorative skyline."""
    distance: str
    count: int
    width_range: Tuple[float, float]
    height_range: Tuple[float, float]
    alpha: float
    colors: List[str]
    window_chance: float
    window_spacing: int
    window_size: Tuple[int, int]
    extend: float

    def __post_init__(self):
        if self.distance not in ("far", "very_far"):
            raise ValueError(f"Unknown background distance: {self.distance}")
        if not self.colors:
            raise ValueError(f"Background layer '{self.distance}' needs at least one color")
        _check_colors(f"{self.distance}.colors", self.colors)
        self.width_range = tuple(self.width_range)
        self.height_range = tuple(self.height_range)
        self.window_size = tuple(self.window_size)
        _check_range(f"{self.distance}.width_range", self.width_range)
        _check_range(f"{self.distance}.height_range", self.height_range)


def _default_far_layer() -> BackgroundLayerConfig:
    return BackgroundLayerConfig(
        distance="far",
        count=12,
        width_range=(30, 70),
        height_range=(60, 160),
        alpha=0.5,
        colors=[COLORS["DARK_PURPLE_GRAY"], COLORS["TWILIGHT_PURPLE"], COLORS["NIGHT_PURPLE"]],
        window_chance=0.4,
        window_spacing=4,
        window_size=(3, 4),
        extend=100,
    )


def _default_very_far_layer() -> BackgroundLayerConfig:
    return BackgroundLayerConfig(
        distance="very_far",
        count=18,
        width_range=(20, 50),
        height_range=(40, 120),
        alpha=0.3,
        colors=[COLORS["DUSK_PURPLE"], COLORS["TWILIGHT_PURPLE"]],
        window_chance=0.2,
        window_spacing=3,
        window_size=(2, 3),
        extend=200,
    )


@dataclass
class BackgroundConfig:
    horizon_y: float = HORIZON_Y
    window_margin: int = 2
    window_lit_chance: float = 0.4
    far: BackgroundLayerConfig = field(default_factory=_default_far_layer)
    very_far: BackgroundLayerConfig = field(default_factory=_default_very_far_layer)

    @property
    def layers(self) -> List[BackgroundLayerConfig]:
        return [self.far, self.very_far]


@dataclass
class BirdClassConfig:
    """Look and motion of one bird distance class."""
    weight: float
    size: float
    speed_range: Tuple[float, float]
    amplitude_range: Tuple[float, float]
    frequency_range: Tuple[float, float]
    y_range: Tuple[float, float]

    def __post_init__(self):
        for name in ("speed_range", "amplitude_range", "frequency_range", "y_range"):
            value = tuple(getattr(self, name))
            _check_range(f"BirdClassConfig.{name}", value)
            setattr(self, name, value)


@dataclass
class BirdConfig:
    base_interval_ms: float = 4000.0
    interval_variance_ms: float = 6000.0
    group_size_range: Tuple[int, int] = (3, 7)
    jitter_x: float = 30.0
    jitter_y: float = 15.0
    offscreen_margin: float = 40.0
    classes: Dict[str, BirdClassConfig] = field(default_factory=lambda: {
        "far": BirdClassConfig(0.60, 2, (0.3, 0.6), (1.0, 2.0), (0.02, 0.04), (30, 90)),
        "medium": BirdClassConfig(0.25, 3, (0.6, 1.0), (2.0, 4.0), (0.03, 0.06), (50, 130)),
        "close": BirdClassConfig(0.15, 5, (1.0, 1.6), (3.0, 6.0), (0.04, 0.08), (70, 160)),
    })

    def __post_init__(self):
        self.group_size_range = tuple(self.group_size_range)
        _check_range("BirdConfig.group_size_range", self.group_size_range)
        for name in ("far", "medium", "close"):
            if name not in self.classes:
                raise ValueError(f"BirdConfig.classes is missing '{name}'")


@dataclass
class PlaneTypeConfig:
    weight: float
    size: float
    speed: float


@dataclass
class PlaneConfig:
    base_interval_ms: float = 15000.0
    interval_variance_ms: float = 20000.0
    max_planes: int = 2
    y_range: Tuple[float, float] = (20.0, 80.0)
    offscreen_margin: float = 60.0
    types: Dict[str, PlaneTypeConfig] = field(default_factory=lambda: {
        "small": PlaneTypeConfig(0.5, 8, 0.9),
        "medium": PlaneTypeConfig(0.35, 12, 0.7),
        "large": PlaneTypeConfig(0.15, 16, 0.5),
    })

    def __post_init__(self):
        self.y_range = tuple(self.y_range)
        _check_range("PlaneConfig.y_range", self.y_range)
        if self.max_planes < 0:
            raise ValueError("PlaneConfig.max_planes must not be negative")


@dataclass
class NavigationConfig:
    clearance: float = NAVIGATION_CLEARANCE
    safe_landing_clearance: float = SAFE_LANDING_CLEARANCE
    min_gap: float = MIN_BUILDING_GAP
    platform_width: float = PLATFORM_WIDTH
    platform_height: float = PLATFORM_HEIGHT


@dataclass
class SceneConfig:
    """Aggregate, read-only configuration for a scene."""
    width: int = SCENE_WIDTH
    height: int = SCENE_HEIGHT
    max_layout_attempts: int = MAX_LAYOUT_ATTEMPTS
    buildings: BuildingConfig = field(default_factory=BuildingConfig)
    clouds: CloudConfig = field(default_factory=CloudConfig)
    background: BackgroundConfig = field(default_factory=BackgroundConfig)
    birds: BirdConfig = field(default_factory=BirdConfig)
    planes: PlaneConfig = field(default_factory=PlaneConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("SceneConfig width and height must be positive")
        if self.max_layout_attempts < 1:
            raise ValueError("SceneConfig.max_layout_attempts must be at least 1")
        # Buildings stand on the bottom edge of the scene and are capped
        # relative to its top, so both follow the scene height.
        if (self.buildings.scene_height, self.buildings.ground_level) != (self.height, self.height):
            self.buildings = replace(self.buildings, scene_height=self.height, ground_level=self.height)

from .level_data import (
    BackgroundBuilding,
    BackgroundWindow,
    Bird,
    Building,
    Cloud,
    CloudLayer,
    Level,
    MaterialType,
    Plane,
    Window,
)
from .building_generator import BuildingGenerator, ensure_navigation_gaps
from .level_generator import LevelGenerator, generate_scene
from .navigation import NavigationPath, NavigationValidator, Platform, PlatformType

__all__ = [
    'BackgroundBuilding',
    'BackgroundWindow',
    'Bird',
    'Building',
    'Cloud',
    'CloudLayer',
    'Level',
    'MaterialType',
    'Plane',
    'Window',
    'BuildingGenerator',
    'ensure_navigation_gaps',
    'LevelGenerator',
    'generate_scene',
    'NavigationPath',
    'NavigationValidator',
    'Platform',
    'PlatformType',
]

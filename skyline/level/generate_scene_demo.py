"""Print an ASCII picture of generated scenes.

Usage: python -m skyline.level.generate_scene_demo [seed]
"""

import random
import sys

from skyline.level.level_data import Level
from skyline.level.level_generator import LevelGenerator

CELL = 10


def render_ascii(level: Level, cell: int = CELL) -> str:
    """One character per cell: '#' building, '*' lit window, '~' cloud, '.' sky."""
    cols = int(level.width // cell)
    rows = int(level.height // cell)
    canvas = [["." for _ in range(cols)] for _ in range(rows)]

    def plot(x, y, w, h, ch):
        for row in range(max(0, int(y // cell)), min(rows, int((y + h) // cell))):
            for col in range(max(0, int(x // cell)), min(cols, int((x + w) // cell))):
                canvas[row][col] = ch

    for cloud in level.clouds:
        plot(cloud.x, cloud.y, cloud.width, cloud.height, "~")
    for building in level.buildings:
        plot(building.x, building.y, building.width, building.height, "#")
        for window in building.windows:
            if window.is_lit:
                wx, wy, ww, wh = window.absolute(building)
                col, row = int((wx + ww / 2) // cell), int((wy + wh / 2) // cell)
                if 0 <= row < rows and 0 <= col < cols:
                    canvas[row][col] = "*"

    border = "-" * (cols + 2)
    lines = [border] + ["|" + "".join(r) + "|" for r in canvas] + [border]
    return "\n".join(lines)


def print_level(level: Level):
    print(f"Level {level.width}x{level.height}: {len(level.buildings)} buildings, "
          f"{len(level.clouds)} clouds, {len(level.background_buildings)} background buildings")
    for b in level.buildings:
        print(f"  {b.id}: x={b.x:.1f} w={b.width} h={b.height} tall={b.is_tall} "
              f"material={b.material.value} windows={len(b.windows)}")
    print(render_ascii(level))


if __name__ == "__main__":
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else None
    generator = LevelGenerator()

    print("--- Generating scene (difficulty 1) ---")
    print_level(generator.generate_valid_level(700, 1, random.Random(seed)))
    print(generator.get_generation_stats())

    print("\n--- Generating scene (difficulty 4) ---")
    print_level(generator.generate_valid_level(700, 4, random.Random(seed)))

    print("\n--- Fallback layout ---")
    print_level(generator.fallback_level(700, 1, random.Random(seed)))

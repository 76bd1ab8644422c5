"""
Tests for single-building generation and the spacing pass.
"""

import random

import pytest

from skyline.config import BuildingConfig, GROUND_LEVEL
from skyline.level.building_generator import (
    BuildingGenerator,
    ensure_navigation_gaps,
    make_building_id,
)
from skyline.level.level_data import Building, MaterialType, WindowType


def make_building(building_id: str, x: float, width: float, height: float,
                  ground: float = GROUND_LEVEL) -> Building:
    return Building(
        id=building_id,
        x=x,
        y=ground - height,
        width=width,
        height=height,
        windows=(),
        color="#252526",
        material=MaterialType.SOLID,
    )


@pytest.fixture
def generator() -> BuildingGenerator:
    return BuildingGenerator()


class TestHeightSelection:
    """Heights come from the discrete set, with boost and fallback rules."""

    def test_allowed_heights_filters_by_max(self, generator):
        assert generator.allowed_heights(110) == [80, 105]

    def test_allowed_heights_falls_back_to_smallest(self, generator):
        assert generator.allowed_heights(50) == [80]

    def test_heights_are_from_set_and_on_ground(self, generator):
        """Unboosted heights are members of the set; every building sits on the ground."""
        rng = random.Random(1234)
        options = generator.allowed_heights(205)
        boosted = {min(h * 1.5, 280) for h in options[len(options) // 2:]}
        for i in range(200):
            b = generator.generate_building(50, 160, 205, rng, make_building_id(i))
            assert b.y + b.height == GROUND_LEVEL
            if b.is_tall:
                assert b.height in boosted
            else:
                assert b.height in options

    def test_boost_scales_upper_half_and_caps(self):
        gen = BuildingGenerator(BuildingConfig(tall_chance=1.0))
        rng = random.Random(7)
        for i in range(50):
            b = gen.generate_building(0, 120, 205, rng, make_building_id(i))
            assert b.is_tall is True
            assert b.height in {155 * 1.5, 180 * 1.5, 280}
            assert b.height <= gen.config.height_ceiling

    def test_no_boost_with_single_option(self):
        """A boost needs at least two height options to choose from."""
        gen = BuildingGenerator(BuildingConfig(tall_chance=1.0))
        b = gen.generate_building(0, 120, 90, random.Random(3), "building_1")
        assert b.is_tall is False
        assert b.height == 80

    def test_never_tall_when_chance_is_zero(self):
        gen = BuildingGenerator(BuildingConfig(tall_chance=0.0))
        rng = random.Random(11)
        for i in range(30):
            assert gen.generate_building(0, 120, 205, rng, make_building_id(i)).is_tall is False

    def test_fallback_height_when_max_below_set(self, generator):
        b = generator.generate_building(0, 100, 10, random.Random(0), "building_1")
        assert b.height == 80
        assert b.y == GROUND_LEVEL - 80


class TestBuildingFields:

    def test_id_is_passed_through(self, generator):
        b = generator.generate_building(10, 100, 110, random.Random(5), make_building_id(42))
        assert b.id == "building_42"

    def test_material_and_color_from_sets(self, generator):
        rng = random.Random(99)
        for i in range(40):
            b = generator.generate_building(0, 140, 205, rng, make_building_id(i))
            assert isinstance(b.material, MaterialType)
            assert b.color in generator.config.colors
            assert b.extras is None

    def test_same_seed_same_building(self, generator):
        a = generator.generate_building(30, 180, 205, random.Random(21), "building_1")
        b = generator.generate_building(30, 180, 205, random.Random(21), "building_1")
        assert a == b

    def test_rect_rounds_footprint(self, generator):
        b = make_building("building_1", 52.5, 160, 105)
        rect = b.rect
        assert (rect.x, rect.y, rect.w, rect.h) == (round(52.5), 195, 160, 105)


class TestWindowGrid:
    """Window grid arithmetic and containment."""

    def test_columns_for_160_wide_building(self, generator):
        """(160 - 16) // 20 = 7 columns, block of 132 px centered in 144 px."""
        columns, start_x = generator.window_columns(160)
        assert columns == 7
        assert start_x == pytest.approx(8 + (144 - (7 * 12 + 6 * 8)) / 2)

    def test_columns_for_100_wide_building(self, generator):
        columns, start_x = generator.window_columns(100)
        assert columns == 4
        assert start_x == pytest.approx(14)

    def test_floors(self, generator):
        assert generator.window_floors(80) == 2
        assert generator.window_floors(205) == 7
        assert generator.window_floors(15) == 0

    def test_window_count_matches_grid(self, generator):
        windows = generator.generate_windows(160, 80, random.Random(1))
        assert len(windows) == 7 * 2
        assert all(w.window_type == WindowType.STANDARD for w in windows)
        assert {w.y for w in windows} == {8, 33}

    def test_windows_inside_building(self, generator):
        rng = random.Random(8)
        for i in range(100):
            width = rng.choice(generator.config.widths)
            b = generator.generate_building(rng.uniform(0, 300), width, 205, rng, make_building_id(i))
            for w in b.windows:
                assert w.x >= 0 and w.y >= 0
                assert w.x + w.width <= b.width
                assert w.y + w.height <= b.height
                ax, ay, aw, ah = w.absolute(b)
                assert b.x <= ax and ax + aw <= b.right
                assert b.y <= ay and ay + ah <= b.bottom

    def test_window_that_does_not_fit_is_omitted(self):
        """The second floor would end 3 px below the building, so it is dropped."""
        gen = BuildingGenerator(BuildingConfig(window_top_offset=12, window_roof_allowance=0))
        windows = gen.generate_windows(100, 50, random.Random(2))
        assert len(windows) == 4
        assert all(w.y == 12 for w in windows)

    def test_narrow_building_has_no_windows(self, generator):
        assert generator.generate_windows(10, 205, random.Random(0)) == ()

    def test_lit_windows_are_mixed(self, generator):
        windows = generator.generate_windows(200, 205, random.Random(4))
        lit = [w.is_lit for w in windows]
        assert any(lit) and not all(lit)


class TestNavigationGaps:
    """The spacing pass pushes buildings apart and drops overflow."""

    def test_pushes_close_neighbour_right(self):
        a = make_building("building_1", 0, 100, 80)
        b = make_building("building_2", 150, 100, 80)
        spaced = ensure_navigation_gaps([b, a], 700, 80)
        assert [s.id for s in spaced] == ["building_1", "building_2"]
        assert spaced[1].x == 180
        # originals are untouched
        assert b.x == 150

    def test_leaves_wide_gaps_alone(self):
        a = make_building("building_1", 0, 100, 80)
        b = make_building("building_2", 300, 100, 80)
        spaced = ensure_navigation_gaps([a, b], 700, 80)
        assert spaced == [a, b]

    def test_drops_buildings_past_level_width(self):
        a = make_building("building_1", 0, 100, 80)
        b = make_building("building_2", 150, 100, 80)
        c = make_building("building_3", 300, 100, 80)
        spaced = ensure_navigation_gaps([a, b, c], 350, 80)
        assert [s.id for s in spaced] == ["building_1", "building_2"]

    def test_windows_follow_shifted_building(self, generator):
        a = generator.generate_building(0, 100, 110, random.Random(3), "building_1")
        b = generator.generate_building(120, 100, 110, random.Random(4), "building_2")
        spaced = ensure_navigation_gaps([a, b], 700, 80)
        moved = spaced[1]
        assert moved.x == 180
        assert moved.windows == b.windows
        for w in moved.windows:
            ax, _, aw, _ = w.absolute(moved)
            assert moved.x <= ax and ax + aw <= moved.right


class TestWindowVariants:
    """Bay and small windows resize from the grid cell and still fit."""

    def test_standard_only_by_default(self, generator):
        assert generator.pick_window_type(random.Random(0)) == WindowType.STANDARD

    def test_bay_windows_are_wider(self):
        gen = BuildingGenerator(BuildingConfig(window_type_weights={"bay": 1.0}))
        windows = gen.generate_windows(200, 80, random.Random(1))
        assert len(windows) == 9 * 2
        for w in windows:
            assert w.window_type == WindowType.BAY
            assert (w.width, w.height) == (16, 16)
            assert w.x + w.width <= 200

    def test_small_windows_are_shorter(self):
        gen = BuildingGenerator(BuildingConfig(window_type_weights={"small": 1.0}))
        windows = gen.generate_windows(100, 80, random.Random(1))
        assert len(windows) == 4 * 2
        assert all((w.width, w.height) == (12, 12) for w in windows)
        assert {w.y for w in windows} == {8, 33}

    def test_mixed_variants_stay_inside(self):
        gen = BuildingGenerator(BuildingConfig(
            window_type_weights={"standard": 1.0, "bay": 1.0, "small": 1.0}))
        rng = random.Random(12)
        seen = set()
        for i in range(40):
            b = gen.generate_building(0, rng.choice(gen.config.widths), 205, rng, make_building_id(i))
            for w in b.windows:
                dw, dh = w.window_type.size_adjustment
                assert (w.width, w.height) == (12 + dw, 16 + dh)
                assert w.x >= 0 and w.y >= 0
                assert w.x + w.width <= b.width
                assert w.y + w.height <= b.height
                seen.add(w.window_type)
        assert seen == {WindowType.STANDARD, WindowType.BAY, WindowType.SMALL}

    def test_bay_window_that_overflows_is_omitted(self):
        """Tight grid: the last bay column would end 8 px past the wall."""
        gen = BuildingGenerator(BuildingConfig(window_margin=0, window_spacing=0,
                                               window_type_weights={"bay": 1.0}))
        windows = gen.generate_windows(96, 80, random.Random(3))
        assert sorted({w.x for w in windows}) == [12 * k for k in range(7)]
        assert len(windows) == 7 * 2

    def test_weights_validated(self):
        with pytest.raises(ValueError):
            BuildingConfig(window_type_weights={"arched": 1.0})
        with pytest.raises(ValueError):
            BuildingConfig(window_type_weights={"standard": 0.0})
        with pytest.raises(ValueError):
            BuildingConfig(window_type_weights={"standard": 1.0, "bay": -1.0})

"""
Tests for scene configuration loading and seed derivation.
"""

import hashlib
import json
import logging
import random

import pygame
import pytest

from skyline.config import COLORS, BuildingConfig, SceneConfig, to_color
from skyline.config_loader import load_scene_config, scene_config_from_dict
from skyline.level.level_generator import LevelGenerator
from skyline.level.seed_manager import COMPONENTS, SeedManager, derive_seed


def write_config(tmp_path, data) -> str:
    path = tmp_path / "scene_config.json"
    path.write_text(json.dumps(data))
    return str(path)


class TestSceneConfigDefaults:

    def test_defaults(self):
        config = SceneConfig()
        assert (config.width, config.height) == (700, 300)
        assert config.max_layout_attempts == 10
        assert config.buildings.heights == [80, 105, 130, 155, 180, 205]
        assert config.buildings.widths == [100, 120, 140, 160, 180, 200]
        assert config.buildings.height_ceiling == 280
        assert config.navigation.clearance == 10
        assert config.navigation.safe_landing_clearance == 30
        assert [layer.distance for layer in config.background.layers] == ["far", "very_far"]

    def test_non_positive_size_rejected(self):
        with pytest.raises(ValueError):
            SceneConfig(width=0)

    def test_inverted_count_range_rejected(self):
        with pytest.raises(ValueError):
            BuildingConfig(count_range=(3, 2))

    def test_palette_decodes_to_pygame_colors(self):
        assert to_color(COLORS["CREAM"]) == pygame.Color(255, 216, 154)

    def test_invalid_color_rejected(self):
        with pytest.raises(ValueError):
            BuildingConfig(colors=["#252526", "not-a-color"])


class TestSceneHeight:
    """Ground line and boost ceiling follow the scene height."""

    def test_height_override_moves_ground_and_ceiling(self):
        config = scene_config_from_dict({"height": 400})
        assert config.buildings.scene_height == 400
        assert config.buildings.ground_level == 400
        assert config.buildings.height_ceiling == 380
        level = LevelGenerator(config).generate_level(700, 10, random.Random(1))
        assert level.height == 400
        assert level.buildings
        for b in level.buildings:
            assert b.bottom == level.height
            assert b.height <= 380

    def test_direct_construction_does_not_mutate_section(self):
        buildings = BuildingConfig()
        config = SceneConfig(height=360, buildings=buildings)
        assert config.buildings.ground_level == 360
        assert buildings.ground_level == 300

    def test_derived_building_keys_are_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="skyline.config_loader"):
            config = scene_config_from_dict({"buildings": {"ground_level": 250}})
        assert config.buildings.ground_level == 300
        assert "buildings.ground_level" in caplog.text


class TestConfigLoader:

    def test_overrides_merge_with_defaults(self, tmp_path):
        path = write_config(tmp_path, {
            "width": 900,
            "buildings": {"tall_chance": 0.0},
            "background": {"far": {"count": 4}},
            "planes": {"max_planes": 5, "types": {"small": {"speed": 2.0}}},
        })
        config = load_scene_config(path)
        assert config.width == 900
        assert config.height == 300
        assert config.buildings.tall_chance == 0.0
        assert config.buildings.widths == [100, 120, 140, 160, 180, 200]
        assert config.background.far.count == 4
        assert config.background.very_far.count == 18
        assert config.planes.max_planes == 5
        assert config.planes.types["small"].speed == 2.0
        assert config.planes.types["small"].size == 8
        assert config.planes.types["large"].speed == 0.5

    def test_bird_class_override(self):
        config = scene_config_from_dict({"birds": {"classes": {"close": {"weight": 0.5}}}})
        assert config.birds.classes["close"].weight == 0.5
        assert config.birds.classes["close"].size == 5
        assert config.birds.group_size_range == (3, 7)

    def test_unknown_keys_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="skyline.config_loader"):
            config = scene_config_from_dict({"colour": "red", "clouds": {"fluffiness": 3}})
        assert config == SceneConfig()
        messages = " ".join(r.getMessage() for r in caplog.records)
        assert "scene.colour" in messages
        assert "clouds.fluffiness" in messages

    def test_new_class_entry_needs_every_field(self):
        with pytest.raises(ValueError, match="size"):
            scene_config_from_dict({"planes": {"types": {"jumbo": {"weight": 0.1}}}})
        with pytest.raises(ValueError, match="speed_range"):
            scene_config_from_dict({"birds": {"classes": {"tiny": {"weight": 0.1, "size": 1}}}})

    def test_new_class_entry_is_added(self):
        config = scene_config_from_dict(
            {"planes": {"types": {"jumbo": {"weight": 0.1, "size": 20, "speed": 0.3}}}})
        assert config.planes.types["jumbo"].size == 20
        assert set(config.planes.types) == {"small", "medium", "large", "jumbo"}

    def test_clouds_have_no_color_setting(self, caplog):
        with caplog.at_level(logging.WARNING, logger="skyline.config_loader"):
            scene_config_from_dict({"clouds": {"color": "#ffd89a"}})
        assert "clouds.color" in caplog.text

    def test_section_must_be_object(self):
        with pytest.raises(ValueError):
            scene_config_from_dict({"buildings": [1, 2, 3]})

    def test_root_must_be_object(self):
        with pytest.raises(ValueError):
            scene_config_from_dict([])

    def test_invalid_values_rejected(self, tmp_path):
        path = write_config(tmp_path, {"clouds": {"y_range": [120, 20]}})
        with pytest.raises(ValueError):
            load_scene_config(path)

    def test_explicit_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scene_config(str(tmp_path / "missing.json"))

    def test_defaults_without_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_scene_config() == SceneConfig()

    def test_default_path_is_used_when_present(self, tmp_path, monkeypatch):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "scene_config.json").write_text(json.dumps({"max_layout_attempts": 3}))
        monkeypatch.chdir(tmp_path)
        assert load_scene_config().max_layout_attempts == 3


class TestSeedManager:

    def test_level_seed_is_deterministic(self):
        assert SeedManager(42).generate_level_seed(3) == SeedManager(42).generate_level_seed(3)

    def test_levels_and_worlds_differ(self):
        manager = SeedManager(42)
        assert manager.generate_level_seed(1) != manager.generate_level_seed(2)
        assert SeedManager(1).generate_level_seed(1) != SeedManager(2).generate_level_seed(1)

    def test_component_rngs_are_independent(self):
        manager = SeedManager(42)
        manager.generate_level_seed(1)
        buildings = manager.get_random("buildings")
        assert manager.get_random("buildings") is buildings
        assert manager.get_random("clouds") is not buildings

        other = SeedManager(42)
        other.generate_level_seed(1)
        other.get_random("clouds").random()
        assert other.get_random("buildings").random() == buildings.random()

    def test_sub_seeds(self):
        manager = SeedManager(7)
        level_seed = manager.generate_level_seed(0)
        sub_seeds = manager.generate_sub_seeds(level_seed)
        assert set(sub_seeds) == {"buildings", "clouds", "background", "birds", "planes"}
        assert len(set(sub_seeds.values())) == len(sub_seeds)

    def test_seed_info(self):
        manager = SeedManager(7)
        assert 'level_seed' not in manager.get_seed_info()
        manager.generate_level_seed(2)
        info = manager.get_seed_info()
        assert info['world_seed'] == 7
        assert 'level_seed' in info

    def test_set_world_seed_resets(self):
        manager = SeedManager(7)
        manager.generate_level_seed(2)
        manager.set_world_seed(8)
        assert manager.world_seed == 8
        assert manager.get_seed_info() == {'world_seed': 8, 'sub_seeds': {}}

    def test_derive_seed_is_md5_based(self):
        expected = int(hashlib.md5(b"7_level_3").hexdigest()[:8], 16)
        assert derive_seed(7, "level", 3) == expected
        assert SeedManager(7).generate_level_seed(3) == expected

    def test_unknown_component_rejected(self):
        manager = SeedManager(7)
        manager.generate_level_seed(1)
        with pytest.raises(ValueError):
            manager.get_random("terrain")

    def test_random_needs_level_seed(self):
        with pytest.raises(ValueError):
            SeedManager(7).get_random("buildings")

    def test_level_rngs(self):
        rngs = SeedManager(7).level_rngs(4)
        assert tuple(rngs) == COMPONENTS
        again = SeedManager(7).level_rngs(4)
        assert [r.random() for r in rngs.values()] == [r.random() for r in again.values()]

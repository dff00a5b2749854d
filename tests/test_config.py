import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from config import WorldConfig


def test_defaults_match_editor_scene():
    cfg = WorldConfig()
    assert cfg.seed == config.DEFAULT_SEED
    assert cfg.world_size == 4
    assert cfg.planet_radius == 24


def test_update_clamps_slider_values():
    cfg = WorldConfig()
    cfg.update(world_size=20, planet_radius=3, sea_level=500.0, noise_frequency=0.0,
               continent_threshold=-1.0, cave_threshold=2.0, noise_amplitude=-5)
    assert cfg.world_size == 8
    assert cfg.planet_radius == 10
    assert cfg.sea_level == 70.0
    assert cfg.noise_frequency == 0.01
    assert cfg.continent_threshold == 0.0
    assert cfg.cave_threshold == 1.0
    assert cfg.noise_amplitude == 0.0


def test_update_rejects_unknown_field():
    with pytest.raises(KeyError):
        WorldConfig().update(gravity=9.8)


def test_constructor_allows_miniature_planets():
    cfg = WorldConfig(world_size=1, planet_radius=6, sea_level=8, noise_amplitude=0)
    assert cfg.planet_radius == 6
    assert cfg.sea_level == 8.0
    assert WorldConfig(world_size=0).world_size == 1


def test_copy_is_independent():
    cfg = WorldConfig(seed=7)
    snap = cfg.copy()
    assert snap == cfg
    cfg.update(seed=8)
    assert snap.seed == 7
    assert snap != cfg


def test_dict_round_trip_clamps():
    cfg = WorldConfig.from_dict({"seed": 3, "planet_radius": 100})
    assert cfg.planet_radius == 60
    assert WorldConfig.from_dict(cfg.as_dict()) == cfg

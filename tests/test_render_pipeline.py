"""Tests for snapshot layout and drawing."""

import pygame
import pytest

from core.config.display import (
    BACKGROUND_COLOR,
    BIRD_MIGRATING_COLOR,
    BIRD_RESTING_COLOR,
    BIRD_SEARCHING_FOOD_COLOR,
    FOOD_COLOR,
    PREDATOR_COLOR,
    PREDATOR_OUTLINE_COLOR,
    REST_COLOR,
)
from core.exceptions import ConfigurationError
from core.models import SimulationSnapshot
from rendering.render_pipeline import Layer, RenderPipeline
from rendering.styles import bird_style, format_temperature, resource_style
from rendering.transform import WorldTransform
from tests.fakes.fake_simulation_service import default_snapshot


def snapshot_of(**fields):
    return SimulationSnapshot.model_validate(fields)


class TestWorldTransform:
    def test_corners_map_to_surface_corners(self):
        transform = WorldTransform(1000, 800, 600)

        assert transform.to_surface((0, 0)) == (0.0, 0.0)
        assert transform.to_surface((1000, 1000)) == (800.0, 600.0)

    def test_scales_are_independent(self):
        transform = WorldTransform(500, 800, 600)

        assert transform.scale_x == pytest.approx(1.6)
        assert transform.scale_y == pytest.approx(1.2)

    @pytest.mark.parametrize("world_size", [0, -10])
    def test_non_positive_world_size_is_rejected(self, world_size):
        with pytest.raises(ConfigurationError):
            WorldTransform(world_size, 800, 600)

    def test_obstacle_radius_is_magnified(self):
        transform = WorldTransform(1000, 800, 600)

        assert transform.scale_radius(10) == pytest.approx(24.0)


class TestStyles:
    @pytest.mark.parametrize(
        "state, color",
        [
            ("resting", BIRD_RESTING_COLOR),
            ("searchingFood", BIRD_SEARCHING_FOOD_COLOR),
            ("migrating", BIRD_MIGRATING_COLOR),
            ("hunting", BIRD_MIGRATING_COLOR),
            (None, BIRD_MIGRATING_COLOR),
        ],
    )
    def test_bird_state_dispatch(self, state, color):
        assert bird_style(state).color == color

    @pytest.mark.parametrize(
        "resource_type, color",
        [("food", FOOD_COLOR), ("rest", REST_COLOR), ("water", REST_COLOR), (None, REST_COLOR)],
    )
    def test_resource_type_dispatch(self, resource_type, color):
        assert resource_style(resource_type).color == color

    def test_temperature_label(self):
        assert format_temperature(12.5) == "12.5°"
        assert format_temperature(-3) == "-3.0°"


class TestDrawList:
    def test_layers_are_ordered_back_to_front(self):
        pipeline = RenderPipeline((800, 600))
        snapshot = SimulationSnapshot.model_validate(default_snapshot())

        layers = [command.layer for command in pipeline.build_draw_list(snapshot)]

        assert layers == [
            Layer.OBSTACLES,
            Layer.RESOURCES,
            Layer.RESOURCES,
            Layer.BIRDS,
            Layer.BIRDS,
            Layer.PREDATORS,
            Layer.ZONES,
        ]

    def test_zone_without_position_is_skipped(self):
        pipeline = RenderPipeline((800, 600))
        snapshot = snapshot_of(temperatureZones=[{"region": 1, "temperature": 4.0}])

        assert pipeline.build_draw_list(snapshot) == []

    def test_zone_carries_temperature_label(self):
        pipeline = RenderPipeline((800, 600))
        snapshot = snapshot_of(temperatureZones=[{"position": [500, 500], "temperature": 7.5}])

        (command,) = pipeline.build_draw_list(snapshot)

        assert command.label == "7.5°"
        assert command.pixel_center == (400, 300)

    def test_obstacle_radius_scales_with_world(self):
        pipeline = RenderPipeline((800, 600))
        snapshot = snapshot_of(obstacles=[{"position": [0, 0], "radius": 5}], worldSize=500)

        (command,) = pipeline.build_draw_list(snapshot)

        assert command.pixel_radius == 24


class TestDraw:
    def test_resting_bird_lands_on_scaled_pixel(self, surface):
        pipeline = RenderPipeline((800, 600))
        snapshot = snapshot_of(birds=[{"position": [10, 10], "state": "resting"}], worldSize=1000)

        (command,) = pipeline.draw(surface, snapshot)

        assert command.pixel_center == (8, 6)
        assert tuple(surface.get_at((8, 6)))[:3] == BIRD_RESTING_COLOR

    def test_predator_draws_over_bird_and_obstacle(self, surface):
        pipeline = RenderPipeline((800, 600))
        snapshot = snapshot_of(
            obstacles=[{"position": [500, 500], "radius": 5}],
            birds=[{"position": [500, 500], "state": "resting"}],
            predators=[{"position": [500, 500]}],
        )

        pipeline.draw(surface, snapshot)

        assert tuple(surface.get_at((400, 300)))[:3] == PREDATOR_COLOR

    def test_empty_snapshot_draws_only_background(self, surface):
        pipeline = RenderPipeline((800, 600))
        surface.fill((1, 2, 3))

        assert pipeline.draw(surface, SimulationSnapshot()) == []

        for point in [(0, 0), (400, 300), (799, 599)]:
            assert tuple(surface.get_at(point))[:3] == BACKGROUND_COLOR

    def test_previous_frame_is_cleared(self, surface):
        pipeline = RenderPipeline((800, 600))
        pipeline.draw(surface, snapshot_of(birds=[{"position": [10, 10]}]))

        pipeline.draw(surface, snapshot_of(birds=[{"position": [900, 900]}]))

        assert tuple(surface.get_at((8, 6)))[:3] == BACKGROUND_COLOR

    def test_same_snapshot_gives_identical_pixels(self):
        pipeline = RenderPipeline((800, 600))
        snapshot = SimulationSnapshot.model_validate(default_snapshot())
        first = pygame.Surface((800, 600))
        second = pygame.Surface((800, 600))

        pipeline.draw(first, snapshot)
        pipeline.draw(second, snapshot)

        assert pygame.image.tostring(first, "RGB") == pygame.image.tostring(second, "RGB")

    def test_predator_outline_stands_out_from_background(self, surface):
        pipeline = RenderPipeline((800, 600))
        snapshot = snapshot_of(predators=[{"position": [500, 500]}])

        pipeline.draw(surface, snapshot)

        assert PREDATOR_OUTLINE_COLOR != BACKGROUND_COLOR
        ring = [tuple(surface.get_at((400 + dx, 300)))[:3] for dx in range(3, 8)]
        assert PREDATOR_OUTLINE_COLOR in ring

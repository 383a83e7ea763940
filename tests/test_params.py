"""Tests for transform parameters and scene configuration."""

import dataclasses

import pytest


class TestTransformParams:
    """Tests for TransformParams."""

    def test_defaults(self):
        """Test the initial object transform."""
        from sdfview.scene.params import TransformParams

        params = TransformParams()
        assert params.translation == (0.0, 0.0, 0.0)
        assert params.rotation == (0.0, 0.0, 0.0)
        assert params.scale == (50.0, 50.0, 50.0)

    def test_frozen(self):
        """Test parameters cannot be mutated in place."""
        from sdfview.scene.params import TransformParams

        params = TransformParams()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.scale = (1.0, 1.0, 1.0)

    def test_with_helpers_replace_one_group(self):
        """Test with_* return new values and leave the source untouched."""
        from sdfview.scene.params import TransformParams

        params = TransformParams()
        moved = params.with_translation(1.0, 2.0, 3.0)
        turned = moved.with_rotation(10.0, 0.0, -10.0)
        scaled = turned.with_scale(5.0, 6.0, 7.0)

        assert params.translation == (0.0, 0.0, 0.0)
        assert scaled.translation == (1.0, 2.0, 3.0)
        assert scaled.rotation == (10.0, 0.0, -10.0)
        assert scaled.scale == (5.0, 6.0, 7.0)

    def test_clamped_to_panel_ranges(self):
        """Test out-of-range values are clamped to the slider ranges."""
        from sdfview.scene.params import TransformParams

        params = TransformParams(
            translation=(-250.0, 50.0, 101.0),
            rotation=(190.0, -720.0, 45.0),
            scale=(-1.0, 100.5, 20.0),
        ).clamped()
        assert params.translation == (-100.0, 50.0, 100.0)
        assert params.rotation == (180.0, -180.0, 45.0)
        assert params.scale == (0.0, 100.0, 20.0)

    def test_clamped_keeps_valid_values(self):
        """Test in-range values pass through unchanged."""
        from sdfview.scene.params import TransformParams

        params = TransformParams(translation=(1.0, -2.0, 3.0), rotation=(4.0, 5.0, -6.0))
        assert params.clamped() == params


class TestSceneConfig:
    """Tests for SceneConfig defaults."""

    def test_defaults(self):
        """Test the default scene description."""
        from sdfview.config import SceneConfig

        config = SceneConfig()
        assert config.sphere_radius == 30.0
        assert config.theta_segments == 16
        assert config.phi_segments == 32
        assert config.clear_color == (0.3, 0.3, 0.3)
        assert config.camera.lookfrom == (150.0, 150.0, 150.0)
        assert config.initial_params.scale == (50.0, 50.0, 50.0)

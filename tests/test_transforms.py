"""Unit tests for host-side matrix helpers and the perspective camera.

Tests cover:
- Translation, scale and axis rotations
- Euler order of rotate_xyz
- Perspective projection depth mapping
- Look-at view matrix and camera basis
- Agreement between NumPy matrices and Taichi-side transforms
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestBasicMatrices:
    """Tests for translation, scale and rotation matrices."""

    def test_translate_moves_points_not_vectors(self):
        """Test translation applies to w=1 and not to w=0."""
        from sdfview.core.transforms import translate

        m = translate(1.0, 2.0, 3.0)
        assert np.allclose(m @ [0.0, 0.0, 0.0, 1.0], [1.0, 2.0, 3.0, 1.0])
        assert np.allclose(m @ [1.0, 0.0, 0.0, 0.0], [1.0, 0.0, 0.0, 0.0])

    def test_scale(self):
        """Test non-uniform scale."""
        from sdfview.core.transforms import apply_point, scale

        assert np.allclose(apply_point(scale(2.0, 3.0, 4.0), (1.0, 1.0, 1.0)), [2.0, 3.0, 4.0])

    @pytest.mark.parametrize(
        "name,axis_in,axis_out",
        [
            ("rotate_x", (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)),
            ("rotate_y", (0.0, 0.0, 1.0), (1.0, 0.0, 0.0)),
            ("rotate_z", (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
        ],
    )
    def test_quarter_turns(self, name, axis_in, axis_out):
        """Test a +90 degree turn is counter-clockwise about each axis."""
        from sdfview.core import transforms

        m = getattr(transforms, name)(math.pi / 2.0)
        assert np.allclose(transforms.apply_point(m, axis_in), axis_out, atol=1e-6)

    def test_rotate_xyz_applies_x_first(self):
        """Test rotate_xyz(x, y, z) == Rz @ Ry @ Rx."""
        from sdfview.core.transforms import rotate_x, rotate_xyz, rotate_y, rotate_z

        x, y, z = 0.3, -1.1, 2.0
        expected = rotate_z(z) @ rotate_y(y) @ rotate_x(x)
        assert np.allclose(rotate_xyz(x, y, z), expected, atol=1e-6)

        # X then Y: +y -> +z (about X) -> +x (about Y)
        m = rotate_xyz(math.pi / 2.0, math.pi / 2.0, 0.0)
        assert np.allclose(m[:3, :3] @ [0.0, 1.0, 0.0], [1.0, 0.0, 0.0], atol=1e-6)

    def test_inverse_roundtrip(self):
        """Test inverse of a model matrix."""
        from sdfview.core.transforms import inverse, rotate_xyz, translate

        model = translate(10.0, -20.0, 5.0) @ rotate_xyz(0.4, 1.2, -0.7)
        assert np.allclose(inverse(model) @ model, np.eye(4), atol=1e-5)
        assert inverse(model).dtype == np.float32


class TestProjection:
    """Tests for the perspective projection."""

    def test_near_and_far_planes_map_to_ndc_limits(self):
        """Test depth maps near to -1 and far to +1."""
        from sdfview.core.transforms import apply_point, perspective

        proj = perspective(1.0, 60.0, 1.0, 100.0)
        assert apply_point(proj, (0.0, 0.0, -1.0))[2] == pytest.approx(-1.0, abs=1e-5)
        assert apply_point(proj, (0.0, 0.0, -100.0))[2] == pytest.approx(1.0, abs=1e-4)

    def test_field_of_view(self):
        """Test a point on the top frustum edge lands at NDC y = 1."""
        from sdfview.core.transforms import apply_point, perspective

        proj = perspective(2.0, 90.0, 0.1, 100.0)
        # tan(45 deg) = 1: at distance 10 the half-height is 10
        assert apply_point(proj, (0.0, 10.0, -10.0))[1] == pytest.approx(1.0, abs=1e-5)
        # Aspect 2: the half-width is 20
        assert apply_point(proj, (20.0, 0.0, -10.0))[0] == pytest.approx(1.0, abs=1e-5)


class TestCamera:
    """Tests for PerspectiveCamera."""

    def test_default_camera(self):
        """Test default placement of the scene camera."""
        from sdfview.camera.perspective import PerspectiveCamera

        camera = PerspectiveCamera()
        assert camera.lookfrom == (150.0, 150.0, 150.0)
        assert camera.vfov == 60.0
        assert camera.near == 0.01
        assert camera.far == 1000.0

    def test_view_moves_eye_to_origin(self):
        """Test the view matrix maps the eye to the origin and the target onto -Z."""
        from sdfview.camera.perspective import PerspectiveCamera
        from sdfview.core.transforms import apply_point

        camera = PerspectiveCamera()
        view = camera.view_matrix()
        assert np.allclose(apply_point(view, camera.lookfrom), 0.0, atol=1e-3)
        target = apply_point(view, camera.lookat)
        assert abs(target[0]) < 1e-3
        assert abs(target[1]) < 1e-3
        assert target[2] == pytest.approx(-150.0 * math.sqrt(3.0), rel=1e-5)

    def test_basis_orthonormal(self):
        """Test u, v, w are orthonormal and w points toward the eye."""
        from sdfview.camera.perspective import PerspectiveCamera

        basis = PerspectiveCamera().get_basis()
        u, v, w = (np.array(basis[k]) for k in ("u", "v", "w"))
        for vec in (u, v, w):
            assert np.linalg.norm(vec) == pytest.approx(1.0, abs=1e-5)
        assert abs(np.dot(u, v)) < 1e-5
        assert abs(np.dot(u, w)) < 1e-5
        assert abs(np.dot(v, w)) < 1e-5
        assert np.allclose(w, np.ones(3) / math.sqrt(3.0), atol=1e-5)
        # Camera up vector has a positive world-y component
        assert v[1] > 0.0

    def test_target_projects_to_screen_center(self):
        """Test the look-at target lands at NDC (0, 0)."""
        from sdfview.camera.perspective import PerspectiveCamera
        from sdfview.core.transforms import apply_point

        camera = PerspectiveCamera()
        ndc = apply_point(camera.view_projection(4.0 / 3.0), (0.0, 0.0, 0.0))
        assert abs(ndc[0]) < 1e-5
        assert abs(ndc[1]) < 1e-5
        assert -1.0 < ndc[2] < 1.0


class TestKernelTransforms:
    """Tests that Taichi-side helpers agree with NumPy matrices."""

    def test_transform_point_matches_numpy(self):
        """Test transform_point / transform_vector against host results."""
        from sdfview.core.ray import mat4, transform_point, transform_vector, vec3
        from sdfview.core.transforms import rotate_xyz, translate

        model = translate(3.0, -4.0, 5.0) @ rotate_xyz(0.2, 0.5, -0.3)
        matrix = ti.field(dtype=mat4, shape=())
        matrix[None] = model.tolist()
        point = ti.field(dtype=vec3, shape=())
        vector = ti.field(dtype=vec3, shape=())

        @ti.kernel
        def test_kernel():
            m = matrix[None]
            point[None] = transform_point(m, vec3(1.0, 2.0, 3.0))
            vector[None] = transform_vector(m, vec3(1.0, 2.0, 3.0))

        test_kernel()
        expected_point = (model @ [1.0, 2.0, 3.0, 1.0])[:3]
        expected_vector = (model @ [1.0, 2.0, 3.0, 0.0])[:3]
        assert np.allclose(point[None].to_numpy(), expected_point, atol=1e-4)
        assert np.allclose(vector[None].to_numpy(), expected_vector, atol=1e-4)

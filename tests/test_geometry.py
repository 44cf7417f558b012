import math
import unittest

import numpy as np

from poseoverlay.core.constants import BodyPart
from poseoverlay.core.geometry import (
    ImageTransform,
    bone_transform,
    distance,
    head_score,
    surface_transform,
)
from poseoverlay.core.keypoints import Position
from poseoverlay.core.render_info import BONE_RENDER_INFO, SURFACE_RENDER_INFO, RenderInfo

LEFT_BICEP = BONE_RENDER_INFO[(BodyPart.LEFT_SHOULDER, BodyPart.LEFT_ELBOW)]
TORSO = SURFACE_RENDER_INFO[
    (BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER, BodyPart.RIGHT_HIP, BodyPart.LEFT_HIP)
]


def _angle_gap(a, b):
    return (a - b) % 360.0


class BoneTransformTests(unittest.TestCase):
    def test_scale_is_distance_over_nominal_height(self):
        t = bone_transform(Position(10.0, 10.0), Position(10.0, 40.0), LEFT_BICEP)
        self.assertAlmostEqual(t.scale_x, 30.0 / LEFT_BICEP.nominal_height)
        self.assertEqual(t.scale_x, t.scale_y)
        self.assertEqual(t.anchor, Position(10.0, 10.0))
        self.assertEqual(t.origin, (LEFT_BICEP.x, LEFT_BICEP.y))
        self.assertEqual(t.size, (LEFT_BICEP.width, LEFT_BICEP.height))

    def test_limb_pointing_down_has_zero_rotation(self):
        t = bone_transform(Position(0.0, 0.0), Position(100.0, 0.0), LEFT_BICEP)
        self.assertAlmostEqual(t.angle_deg, 0.0)
        t = bone_transform(Position(0.0, 0.0), Position(0.0, 100.0), LEFT_BICEP)
        self.assertAlmostEqual(t.angle_deg, -90.0)

    def test_reversed_segment_rotates_by_half_turn(self):
        a = Position(0.0, 0.0)
        b = Position(30.0, 40.0)
        forward = bone_transform(a, b, LEFT_BICEP)
        backward = bone_transform(b, a, LEFT_BICEP)
        self.assertAlmostEqual(forward.scale_x, backward.scale_x)
        self.assertAlmostEqual(forward.scale_x, 50.0 / 400.0)
        self.assertAlmostEqual(_angle_gap(forward.angle_deg, backward.angle_deg), 180.0)


class SurfaceTransformTests(unittest.TestCase):
    def setUp(self):
        self.left_shoulder = Position(100.0, 140.0)
        self.right_shoulder = Position(100.0, 60.0)
        self.right_hip = Position(200.0, 70.0)
        self.left_hip = Position(200.0, 130.0)

    def test_axis_scales(self):
        t = surface_transform(
            self.right_shoulder, self.left_shoulder, self.right_hip, self.left_hip, TORSO
        )
        self.assertAlmostEqual(t.scale_x, 80.0 / TORSO.nominal_width)
        self.assertAlmostEqual(t.scale_y, 100.0 / TORSO.nominal_height)
        self.assertAlmostEqual(t.angle_deg, 0.0)
        self.assertEqual(t.origin, (TORSO.x, TORSO.y))

    def test_mirrored_winding_flips_scale_y(self):
        forward = surface_transform(
            self.left_shoulder, self.right_shoulder, self.right_hip, self.left_hip, TORSO
        )
        mirrored = surface_transform(
            self.right_shoulder, self.left_shoulder, self.right_hip, self.left_hip, TORSO
        )
        self.assertAlmostEqual(forward.scale_x, mirrored.scale_x)
        self.assertAlmostEqual(forward.scale_y, -mirrored.scale_y)
        self.assertLess(forward.scale_y, 0.0)
        self.assertEqual(forward.size, mirrored.size)
        self.assertEqual(forward.origin, mirrored.origin)
        self.assertAlmostEqual(_angle_gap(forward.angle_deg, mirrored.angle_deg), 180.0)

    def test_head_score_weights_span(self):
        info = RenderInfo("head_x", "x.png", 0, 0, 10, 10, 10, 10, strength=0.5)
        a = Position(0.0, 0.0)
        b = Position(0.0, 20.0)
        self.assertAlmostEqual(distance(a, b), 20.0)
        self.assertAlmostEqual(head_score(a, b, info), 10.0)


class ImageTransformMatrixTests(unittest.TestCase):
    def test_identity_rotation_offsets_origin(self):
        t = ImageTransform(Position(10.0, 20.0), 1.0, 1.0, 0.0, (-100.0, -100.0), (200.0, 600.0))
        mapped = t.matrix() @ np.array([0.0, 0.0, 1.0])
        np.testing.assert_allclose(mapped, [-80.0, -90.0])

    def test_quarter_turn(self):
        t = ImageTransform(Position(10.0, 20.0), 1.0, 1.0, 90.0, (-100.0, -100.0), (200.0, 600.0))
        mapped = t.matrix() @ np.array([0.0, 0.0, 1.0])
        np.testing.assert_allclose(mapped, [120.0, -90.0], atol=1e-9)

    def test_scale_applies_before_rotation(self):
        t = ImageTransform(Position(0.0, 0.0), 2.0, 0.5, 90.0, (0.0, 0.0), (10.0, 10.0))
        mapped = t.matrix() @ np.array([1.0, 0.0, 1.0])
        np.testing.assert_allclose(mapped, [0.0, 2.0], atol=1e-9)
        self.assertTrue(math.isclose(float(np.linalg.det(t.matrix()[:, :2])), 1.0))


if __name__ == "__main__":
    unittest.main()

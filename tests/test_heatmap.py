import unittest

import numpy as np

from poseoverlay.core.errors import MalformedInputError
from poseoverlay.core.heatmap import argmax_2d, get_offset_points, get_offset_vectors


class HeatmapTests(unittest.TestCase):
    def setUp(self):
        self.scores = np.zeros((4, 5, 2), dtype=np.float32)
        self.scores[1, 3, 0] = 1.0
        self.scores[2, 0, 1] = 0.7
        self.offsets = np.zeros((4, 5, 4), dtype=np.float32)
        self.offsets[1, 3, 0] = 0.5
        self.offsets[1, 3, 2] = -1.5

    def test_argmax_per_part(self):
        coords = argmax_2d(self.scores)
        self.assertEqual(coords.dtype, np.int32)
        np.testing.assert_array_equal(coords, [[1, 3], [2, 0]])

    def test_offset_vectors_and_points(self):
        coords = argmax_2d(self.scores)
        vectors = get_offset_vectors(coords, self.offsets)
        np.testing.assert_allclose(vectors, [[0.5, -1.5], [0.0, 0.0]])
        points = get_offset_points(coords, 8, self.offsets)
        np.testing.assert_allclose(points, [[8.5, 22.5], [16.0, 0.0]])

    def test_malformed_inputs(self):
        with self.assertRaises(MalformedInputError):
            argmax_2d(np.zeros((4, 5)))
        with self.assertRaises(MalformedInputError):
            get_offset_vectors(np.zeros((2, 2), dtype=np.int32), np.zeros((4, 5, 3)))

    def test_negative_coordinates_do_not_wrap(self):
        coords = np.array([[-1, -1], [2, 0]], dtype=np.int32)
        with self.assertRaises(MalformedInputError):
            get_offset_vectors(coords, self.offsets)
        with self.assertRaises(MalformedInputError):
            get_offset_points(coords, 8, self.offsets)

    def test_coordinates_past_grid_edge_rejected(self):
        with self.assertRaises(MalformedInputError):
            get_offset_vectors(np.array([[9, 9], [0, 0]]), self.offsets)
        with self.assertRaises(MalformedInputError):
            get_offset_vectors(np.array([[0, 0], [3, 5]]), self.offsets)
        vectors = get_offset_vectors(np.array([[3, 4], [0, 0]]), self.offsets)
        self.assertEqual(vectors.shape, (2, 2))


if __name__ == "__main__":
    unittest.main()

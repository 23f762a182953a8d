import unittest

import numpy as np

from house_recolor.utils.geometry import as_point_array, polygon_to_mask, stroke_to_mask


class PolygonToMaskTest(unittest.TestCase):
    def test_axis_aligned_rectangle(self) -> None:
        mask = polygon_to_mask([10, 10, 50, 10, 50, 50, 10, 50], 64, 64, 3)

        expected = np.zeros((64, 64), dtype=np.uint8)
        expected[10:50, 10:50] = 3
        self.assertTrue(np.array_equal(mask, expected))
        self.assertEqual(mask.dtype, np.uint8)

    def test_accepts_point_pairs(self) -> None:
        flat = polygon_to_mask([2, 2, 8, 2, 8, 8, 2, 8], 10, 10, 1)
        pairs = polygon_to_mask([(2, 2), (8, 2), (8, 8), (2, 8)], 10, 10, 1)
        self.assertTrue(np.array_equal(flat, pairs))

    def test_clipped_to_image(self) -> None:
        mask = polygon_to_mask([(-5, -5), (5, -5), (5, 5), (-5, 5)], 10, 10, 2)
        self.assertEqual(int(np.count_nonzero(mask)), 25)
        self.assertTrue((mask[:5, :5] == 2).all())

    def test_triangle_is_convex_and_contained(self) -> None:
        mask = polygon_to_mask([(0, 0), (20, 0), (0, 20)], 20, 20, 1)
        self.assertEqual(mask[0, 0], 1)
        self.assertEqual(mask[0, 19], 1)
        self.assertEqual(mask[19, 0], 1)
        self.assertEqual(mask[19, 19], 0)
        # Row y spans x in [0, 20 - y).
        for y in range(20):
            self.assertEqual(int(np.count_nonzero(mask[y])), 20 - y)

    def test_non_convex_polygon(self) -> None:
        # U shape: notch between x=4 and x=6 from the top down to y=5.
        points = [(0, 0), (4, 0), (4, 5), (6, 5), (6, 0), (10, 0), (10, 10), (0, 10)]
        mask = polygon_to_mask(points, 10, 10, 1)
        self.assertTrue((mask[0:5, 4:6] == 0).all())
        self.assertTrue((mask[0:5, 0:4] == 1).all())
        self.assertTrue((mask[0:5, 6:10] == 1).all())
        self.assertTrue((mask[5:10, :] == 1).all())

    def test_self_intersecting_uses_even_odd(self) -> None:
        # Two overlapping squares traced as one path: the overlap is a hole.
        points = [(0, 0), (6, 0), (6, 6), (2, 6), (2, 2), (8, 2), (8, 8), (0, 8)]
        mask = polygon_to_mask(points, 10, 10, 1)
        self.assertEqual(mask[1, 1], 1)
        self.assertEqual(mask[4, 4], 0)
        self.assertEqual(mask[7, 7], 1)

    def test_degenerate_inputs(self) -> None:
        self.assertEqual(int(polygon_to_mask([], 5, 5, 1).sum()), 0)
        self.assertEqual(int(polygon_to_mask([1, 1, 3, 3], 5, 5, 1).sum()), 0)
        self.assertEqual(int(polygon_to_mask([(0, 2), (4, 2), (2, 2)], 5, 5, 1).sum()), 0)
        with self.assertRaises(ValueError):
            as_point_array([1, 2, 3])


class StrokeToMaskTest(unittest.TestCase):
    def test_horizontal_stroke(self) -> None:
        mask = stroke_to_mask([(2, 10), (17, 10)], 20, 20, 4, size=5)
        self.assertTrue((mask[10, 2:18] == 4).all())
        self.assertTrue((mask[8:13, 5] == 4).all())
        self.assertEqual(mask[0, 0], 0)
        self.assertEqual(mask[19, 10], 0)

    def test_single_point_paints_a_dot(self) -> None:
        mask = stroke_to_mask([5, 5], 11, 11, 1, size=4)
        self.assertEqual(mask[5, 5], 1)
        self.assertEqual(mask[0, 0], 0)

    def test_empty_stroke(self) -> None:
        self.assertEqual(int(stroke_to_mask([], 5, 5, 1, size=3).sum()), 0)


if __name__ == "__main__":
    unittest.main()

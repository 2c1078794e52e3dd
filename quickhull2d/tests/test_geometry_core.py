import torch
import numpy as np
import unittest
from ..geometry_core import (
    EPSILON, DEFAULT_DTYPE, InvalidInputError, as_points_tensor,
    cross_product_2d, sidedness, approximate_distance,
    compute_polygon_area, compute_polygon_perimeter, points_in_convex_polygon
)

"""
Unit tests for the `geometry_core.py` module.

This test suite covers:
- Input coercion and validation (`as_points_tensor`).
- The side and distance predicates used by the hull construction.
- Polygon area, perimeter and convex containment queries.
"""

class TestAsPointsTensor(unittest.TestCase):
    """Tests for converting and validating point sets."""

    def test_list_input_uses_default_dtype(self):
        pts = as_points_tensor([[0, 0], [1.5, 2]])
        self.assertEqual(pts.dtype, DEFAULT_DTYPE)
        self.assertEqual(tuple(pts.shape), (2, 2))
        self.assertTrue(torch.equal(pts[1], torch.tensor([1.5, 2.0], dtype=DEFAULT_DTYPE)))

    def test_float32_tensor_keeps_dtype(self):
        src = torch.tensor([[0., 0.], [1., 1.]], dtype=torch.float32)
        pts = as_points_tensor(src)
        self.assertEqual(pts.dtype, torch.float32)
        self.assertIs(pts, src, "A valid floating tensor should be used as-is.")

    def test_integer_tensor_promoted(self):
        pts = as_points_tensor(torch.tensor([[0, 0], [3, 4]]))
        self.assertTrue(pts.is_floating_point())
        self.assertEqual(pts.dtype, DEFAULT_DTYPE)

    def test_numpy_inputs(self):
        pts32 = as_points_tensor(np.array([[0., 1.], [2., 3.]], dtype=np.float32))
        self.assertEqual(pts32.dtype, torch.float32)
        pts_int = as_points_tensor(np.array([[0, 1], [2, 3]]))
        self.assertEqual(pts_int.dtype, torch.float64)

    def test_explicit_dtype(self):
        pts = as_points_tensor([[0., 0.]], dtype=torch.float32)
        self.assertEqual(pts.dtype, torch.float32)

    def test_empty_input_rejected(self):
        with self.assertRaises(InvalidInputError):
            as_points_tensor(torch.empty((0, 2)))
        with self.assertRaises(InvalidInputError):
            as_points_tensor([])

    def test_wrong_shape_rejected(self):
        with self.assertRaises(InvalidInputError):
            as_points_tensor(torch.zeros((4, 3)))
        with self.assertRaises(InvalidInputError):
            as_points_tensor(torch.zeros(2))
        # InvalidInputError is a ValueError, like the other input checks in the library.
        with self.assertRaises(ValueError):
            as_points_tensor([[1., 2., 3.]])

    def test_unconvertible_input_rejected(self):
        with self.assertRaises(InvalidInputError):
            as_points_tensor([["a", "b"]])


class TestPredicates(unittest.TestCase):
    """Tests for the cross product, side and distance predicates."""

    def setUp(self):
        self.a = torch.tensor([0., 0.])
        self.b = torch.tensor([1., 0.])

    def test_cross_product_sign(self):
        below = torch.tensor([0.5, -1.])
        above = torch.tensor([0.5, 1.])
        on_line = torch.tensor([3., 0.])
        self.assertAlmostEqual(cross_product_2d(self.a, self.b, below).item(), 1.0)
        self.assertAlmostEqual(cross_product_2d(self.a, self.b, above).item(), -1.0)
        self.assertEqual(cross_product_2d(self.a, self.b, on_line).item(), 0.0)

    def test_cross_product_batched(self):
        m = torch.tensor([[0.5, -1.], [0.5, 1.], [2., 0.]])
        cross = cross_product_2d(self.a, self.b, m)
        self.assertEqual(tuple(cross.shape), (3,))
        self.assertTrue(torch.allclose(cross, torch.tensor([1., -1., 0.])))

    def test_sidedness_is_strict(self):
        m = torch.tensor([[0.5, -1.], [0.5, 1.], [2., 0.], [0., 0.]])
        self.assertEqual(sidedness(self.a, self.b, m).tolist(), [False, True, False, False])
        # Reversing the line flips the outward side; collinear points stay excluded.
        self.assertEqual(sidedness(self.b, self.a, m).tolist(), [True, False, False, False])

    def test_approximate_distance_ranks_by_distance(self):
        b = torch.tensor([2., 0.])
        m = torch.tensor([[0., 1.], [5., -3.], [1., 0.]])
        dist = approximate_distance(self.a, b, m)
        # |cross| is the perpendicular distance scaled by |b - a| = 2.
        self.assertTrue(torch.allclose(dist, torch.tensor([2., 6., 0.])))
        self.assertEqual(torch.argmax(dist).item(), 1)


class TestPolygonMetrics(unittest.TestCase):
    """Tests for area and perimeter of ordered polygons."""

    def test_square_area_both_orientations(self):
        ccw = torch.tensor([[0., 0.], [1., 0.], [1., 1.], [0., 1.]])
        self.assertAlmostEqual(compute_polygon_area(ccw), 1.0)
        self.assertAlmostEqual(compute_polygon_area(torch.flip(ccw, dims=[0])), 1.0)

    def test_triangle_area(self):
        tri = torch.tensor([[0., 0.], [4., 0.], [0., 3.]])
        self.assertAlmostEqual(compute_polygon_area(tri), 6.0)

    def test_degenerate_area(self):
        self.assertEqual(compute_polygon_area(torch.tensor([[0., 0.], [1., 1.]])), 0.0)
        self.assertEqual(compute_polygon_area(torch.tensor([[0., 0.], [1., 1.], [2., 2.]])), 0.0)
        with self.assertRaises(InvalidInputError):
            compute_polygon_area([[0., 0.], [1., 0.], [0., 1.]])

    def test_perimeter(self):
        square = torch.tensor([[0., 0.], [2., 0.], [2., 2.], [0., 2.]])
        self.assertAlmostEqual(compute_polygon_perimeter(square), 8.0, places=5)
        segment = torch.tensor([[0., 0.], [3., 4.]])
        self.assertAlmostEqual(compute_polygon_perimeter(segment), 10.0, places=5)
        self.assertEqual(compute_polygon_perimeter(torch.tensor([[1., 1.]])), 0.0)


class TestPointsInConvexPolygon(unittest.TestCase):
    """Tests for closed-region containment against ordered convex polygons."""

    def setUp(self):
        self.square = torch.tensor([[0., 0.], [1., 0.], [1., 1.], [0., 1.]], dtype=torch.float64)
        self.query = torch.tensor([
            [0.5, 0.5],  # inside
            [1.0, 0.5],  # on an edge
            [0.0, 0.0],  # on a vertex
            [1.5, 0.5],  # outside
            [-1e-3, 0.5] # just outside
        ], dtype=torch.float64)
        self.expected = [True, True, True, False, False]

    def test_counter_clockwise(self):
        self.assertEqual(points_in_convex_polygon(self.query, self.square).tolist(), self.expected)

    def test_clockwise(self):
        cw = torch.flip(self.square, dims=[0])
        self.assertEqual(points_in_convex_polygon(self.query, cw).tolist(), self.expected)

    def test_single_query_point(self):
        result = points_in_convex_polygon(torch.tensor([0.25, 0.75], dtype=torch.float64), self.square)
        self.assertEqual(result.ndim, 0)
        self.assertTrue(result.item())

    def test_segment_polygon(self):
        segment = torch.tensor([[0., 0.], [2., 0.]], dtype=torch.float64)
        query = torch.tensor([[1., 0.], [2., 0.], [1., 0.1], [2.5, 0.]], dtype=torch.float64)
        self.assertEqual(points_in_convex_polygon(query, segment).tolist(), [True, True, False, False])

    def test_collinear_polygon_treated_as_segment(self):
        collinear = torch.tensor([[1., 1.], [0., 0.], [2., 2.]], dtype=torch.float64)
        query = torch.tensor([[0.5, 0.5], [1.5, 1.5], [3., 3.], [1., 0.]], dtype=torch.float64)
        self.assertEqual(points_in_convex_polygon(query, collinear).tolist(), [True, True, False, False])

    def test_single_vertex_polygon(self):
        vertex = torch.tensor([[3., 3.]], dtype=torch.float64)
        query = torch.tensor([[3., 3.], [3., 3.1]], dtype=torch.float64)
        self.assertEqual(points_in_convex_polygon(query, vertex).tolist(), [True, False])

    def test_tolerance(self):
        near = torch.tensor([[1.0 + EPSILON / 2, 0.5]], dtype=torch.float64)
        self.assertTrue(points_in_convex_polygon(near, self.square)[0].item())
        self.assertFalse(points_in_convex_polygon(near, self.square, tol=0.0)[0].item())


if __name__ == '__main__':
    unittest.main()

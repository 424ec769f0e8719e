from __future__ import annotations

import math
import unittest

from curvelab.roots import (
    IntersectionPoint,
    bisect_root,
    dedupe_close,
    find_intercepts,
    find_intersections,
    intercept_scan_intervals,
    intersection_scan_intervals,
)
from curvelab.series import CartesianSeries, PolarSeries, RelationSeries, SeriesStyle
from curvelab.transform import CanvasSize, ViewWindow


def _intersection(sx: float, sy: float) -> IntersectionPoint:
    return IntersectionPoint(
        series_index_a=0,
        series_index_b=1,
        x=sx,
        y=sy,
        sx=sx,
        sy=sy,
        label_a="f1",
        label_b="f2",
        color=(255, 0, 0, 255),
    )


class InterceptTests(unittest.TestCase):
    def setUp(self) -> None:
        self.window = ViewWindow(-10.0, 10.0, -6.0, 6.0)
        self.canvas = CanvasSize(800.0, 600.0)

    def test_scan_interval_counts(self) -> None:
        self.assertEqual(intercept_scan_intervals(1200), 240)
        self.assertEqual(intercept_scan_intervals(100), 120)
        self.assertEqual(intersection_scan_intervals(1200), 400)
        self.assertEqual(intersection_scan_intervals(600), 200)
        self.assertEqual(intersection_scan_intervals(90), 120)

    def test_sine_has_seven_x_intercepts_and_a_y_intercept(self) -> None:
        series = [CartesianSeries(evaluate=math.sin, style=SeriesStyle(color=(1, 2, 3, 255)))]
        points = find_intercepts(series, self.window, self.canvas)
        x_points = [p for p in points if p.kind == "x"]
        y_points = [p for p in points if p.kind == "y"]
        self.assertEqual(len(x_points), 7)
        for k, point in zip(range(-3, 4), x_points, strict=True):
            self.assertAlmostEqual(point.x, k * math.pi, delta=1e-2)
            self.assertEqual(point.y, 0.0)
        self.assertEqual(len(y_points), 1)
        self.assertAlmostEqual(y_points[0].y, 0.0)
        self.assertTrue(all(p.color == (1, 2, 3, 255) for p in points))

    def test_intercept_screen_coordinates(self) -> None:
        series = [CartesianSeries(evaluate=lambda x: x - 5.0)]
        points = find_intercepts(series, self.window, self.canvas)
        x_point = next(p for p in points if p.kind == "x")
        self.assertAlmostEqual(x_point.sx, 600.0, places=6)
        self.assertAlmostEqual(x_point.sy, 300.0, places=6)
        y_point = next(p for p in points if p.kind == "y")
        self.assertEqual((y_point.x, y_point.y), (0.0, -5.0))

    def test_y_intercept_requires_zero_in_domain(self) -> None:
        window = ViewWindow(1.0, 5.0, -6.0, 6.0)
        points = find_intercepts([CartesianSeries(evaluate=lambda x: x - 3.0)], window, self.canvas)
        self.assertEqual([p.kind for p in points], ["x"])

    def test_y_intercept_outside_range_is_omitted(self) -> None:
        points = find_intercepts([CartesianSeries(evaluate=lambda x: x * x + 100.0)], self.window, self.canvas)
        self.assertEqual(points, [])

    def test_zero_at_window_edge_is_reported_once(self) -> None:
        window = ViewWindow(0.0, 4.0, -1.0, 1.0)
        points = find_intercepts([CartesianSeries(evaluate=lambda x: x)], window, self.canvas)
        self.assertEqual([(p.kind, p.x) for p in points], [("x", 0.0), ("y", 0.0)])

    def test_sample_on_interior_root_is_reported_once(self) -> None:
        window = ViewWindow(-4.0, 4.0, -1.0, 1.0)
        points = find_intercepts([CartesianSeries(evaluate=lambda x: x)], window, self.canvas)
        x_points = [p for p in points if p.kind == "x"]
        self.assertEqual(len(x_points), 1)
        self.assertAlmostEqual(x_points[0].x, 0.0, places=9)

    def test_only_visible_cartesian_series_contribute(self) -> None:
        series = [
            CartesianSeries(evaluate=lambda x: x, style=SeriesStyle(visible=False)),
            PolarSeries(evaluate=lambda t: 1.0),
            RelationSeries(evaluate=lambda x, y: x * x + y * y - 1.0),
        ]
        self.assertEqual(find_intercepts(series, self.window, self.canvas), [])


class IntersectionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.window = ViewWindow(-2.0, 2.0, -1.0, 5.0)
        self.canvas = CanvasSize(400.0, 600.0)

    def test_line_meets_parabola_twice(self) -> None:
        series = [
            CartesianSeries(evaluate=lambda x: x, style=SeriesStyle(label="x")),
            CartesianSeries(evaluate=lambda x: x * x, style=SeriesStyle(label="x^2")),
        ]
        points = find_intersections(series, self.window, self.canvas)
        self.assertEqual(len(points), 2)
        coords = sorted((p.x, p.y) for p in points)
        self.assertAlmostEqual(coords[0][0], 0.0, places=5)
        self.assertAlmostEqual(coords[0][1], 0.0, places=5)
        self.assertAlmostEqual(coords[1][0], 1.0, places=5)
        self.assertAlmostEqual(coords[1][1], 1.0, places=5)
        self.assertEqual((points[0].label_a, points[0].label_b), ("x", "x^2"))
        self.assertEqual((points[0].series_index_a, points[0].series_index_b), (0, 1))

    def test_unlabelled_series_use_positional_names(self) -> None:
        series = [CartesianSeries(evaluate=lambda x: x), CartesianSeries(evaluate=lambda x: 1.0)]
        points = find_intersections(series, self.window, self.canvas)
        self.assertEqual(len(points), 1)
        self.assertEqual((points[0].label_a, points[0].label_b), ("f1", "f2"))

    def test_needs_two_visible_cartesian_series(self) -> None:
        series = [
            CartesianSeries(evaluate=lambda x: x),
            CartesianSeries(evaluate=lambda x: x * x, style=SeriesStyle(visible=False)),
            PolarSeries(evaluate=lambda t: 1.0),
        ]
        self.assertEqual(find_intersections(series, self.window, self.canvas), [])

    def test_intersection_outside_range_is_dropped(self) -> None:
        series = [CartesianSeries(evaluate=lambda x: x + 10.0), CartesianSeries(evaluate=lambda x: 2.0 * x + 10.0)]
        # They cross at (0, 10), above the visible range.
        self.assertEqual(find_intersections(series, self.window, self.canvas), [])

    def test_pole_does_not_produce_spurious_intersection(self) -> None:
        series = [
            CartesianSeries(evaluate=lambda x: 1.0 / x if x != 0 else math.nan),
            CartesianSeries(evaluate=lambda x: 4.5),
        ]
        points = find_intersections(series, self.window, self.canvas)
        self.assertEqual(len(points), 1)
        self.assertAlmostEqual(points[0].x, 1.0 / 4.5, places=5)


class BisectionTests(unittest.TestCase):
    def test_converges_to_root(self) -> None:
        root = bisect_root(lambda x: x * x - 2.0, 0.0, 2.0)
        self.assertIsNotNone(root)
        self.assertAlmostEqual(root, math.sqrt(2.0), places=5)

    def test_no_sign_change_returns_none(self) -> None:
        self.assertIsNone(bisect_root(lambda x: x * x + 1.0, -1.0, 1.0))

    def test_undefined_endpoint_returns_none(self) -> None:
        self.assertIsNone(bisect_root(lambda x: math.nan if x < 0 else x, -1.0, 1.0))

    def test_exact_zero_at_endpoint(self) -> None:
        self.assertEqual(bisect_root(lambda x: x - 1.0, 1.0, 3.0), 1.0)


class DedupeTests(unittest.TestCase):
    def test_points_within_threshold_collapse_to_first(self) -> None:
        points = [_intersection(0.0, 0.0), _intersection(3.0, 0.0), _intersection(20.0, 0.0)]
        kept = dedupe_close(points, 6.0)
        self.assertEqual([p.sx for p in kept], [0.0, 20.0])

    def test_points_at_threshold_are_kept(self) -> None:
        points = [_intersection(0.0, 0.0), _intersection(6.0, 0.0)]
        self.assertEqual(len(dedupe_close(points, 6.0)), 2)


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import unittest
from unittest import mock

import numpy as np

from curvelab.raster import (
    blend_mask,
    clip_segment,
    draw_disc,
    draw_polyline,
    draw_polylines,
    draw_ring,
    draw_text,
    fill_rect,
    new_canvas,
    text_size,
    with_alpha,
)
from curvelab.raster.draw_text import DEFAULT_FONT_FAMILY


class CanvasTests(unittest.TestCase):
    def test_fill_rect_is_half_open(self) -> None:
        canvas = new_canvas(10, 10, color=(0, 0, 0, 0))
        fill_rect(canvas, 2, 3, 5, 6, (255, 0, 0, 255))
        self.assertEqual(int(canvas[3, 2, 0]), 255)
        self.assertEqual(int(canvas[5, 4, 0]), 255)
        self.assertEqual(int(canvas[6, 4, 3]), 0)
        self.assertEqual(int(canvas[3, 5, 3]), 0)

    def test_translucent_fill_blends_over_opaque(self) -> None:
        canvas = new_canvas(4, 4, color=(0, 0, 0, 255))
        fill_rect(canvas, 0, 0, 4, 4, with_alpha((255, 255, 255, 255), 0.5))
        self.assertIn(int(canvas[0, 0, 0]), (127, 128))
        self.assertEqual(int(canvas[0, 0, 3]), 255)

    def test_blend_mask_clips_to_canvas(self) -> None:
        canvas = new_canvas(4, 4, color=(0, 0, 0, 0))
        blend_mask(canvas, -2, -2, np.full((4, 4), 255, dtype=np.uint8), (0, 255, 0, 255))
        self.assertEqual(int(canvas[1, 1, 1]), 255)
        self.assertEqual(int(canvas[2, 2, 3]), 0)

    def test_with_alpha_scales_existing_alpha(self) -> None:
        self.assertEqual(with_alpha((1, 2, 3, 200), 0.5), (1, 2, 3, 100))
        self.assertEqual(with_alpha((1, 2, 3, 255), 2.0), (1, 2, 3, 255))


class LineTests(unittest.TestCase):
    def test_clip_segment_inside_is_unchanged(self) -> None:
        self.assertEqual(clip_segment(1.0, 1.0, 5.0, 5.0, xmin=0, ymin=0, xmax=10, ymax=10), (1.0, 1.0, 5.0, 5.0))

    def test_clip_segment_outside_returns_none(self) -> None:
        self.assertIsNone(clip_segment(-5.0, -5.0, -1.0, -1.0, xmin=0, ymin=0, xmax=10, ymax=10))
        self.assertIsNone(clip_segment(0.0, float("nan"), 1.0, 1.0, xmin=0, ymin=0, xmax=10, ymax=10))

    def test_clip_segment_trims_to_rect(self) -> None:
        clipped = clip_segment(-10.0, 5.0, 20.0, 5.0, xmin=0, ymin=0, xmax=10, ymax=10)
        self.assertIsNotNone(clipped)
        for got, want in zip(clipped, (0.0, 5.0, 10.0, 5.0), strict=True):
            self.assertAlmostEqual(got, want, places=9)

    def test_far_off_screen_vertices_still_draw_visible_part(self) -> None:
        canvas = new_canvas(100, 50, color=(0, 0, 0, 0))
        xs = np.asarray([-1e12, 1e12], dtype=np.float64)
        ys = np.asarray([25.0, 25.0], dtype=np.float64)
        draw_polyline(canvas, xs, ys, (255, 255, 255, 255), width=1)
        self.assertTrue(np.all(canvas[25, :, 3] == 255))
        self.assertTrue(np.all(canvas[10, :, 3] == 0))

    def test_translucent_stroke_does_not_darken_at_joints(self) -> None:
        canvas = new_canvas(40, 40, color=(0, 0, 0, 0))
        xs = np.asarray([5.0, 20.0, 35.0], dtype=np.float64)
        ys = np.asarray([20.0, 20.0, 20.0], dtype=np.float64)
        draw_polyline(canvas, xs, ys, (255, 255, 255, 128), width=3)
        self.assertEqual(int(canvas[20, 20, 3]), int(canvas[20, 10, 3]))

    def test_stroke_mask_covers_only_its_bounding_box(self) -> None:
        canvas = new_canvas(1000, 1000, color=(0, 0, 0, 0))
        xs = np.asarray([10.0, 30.0], dtype=np.float64)
        ys = np.asarray([20.0, 20.0], dtype=np.float64)
        with mock.patch("curvelab.raster.draw_lines.blend_mask", wraps=blend_mask) as blend:
            draw_polyline(canvas, xs, ys, (255, 255, 255, 255), width=3)
        blend.assert_called_once()
        _, x, y, mask, _ = blend.call_args.args
        self.assertEqual((x, y), (9, 19))
        self.assertEqual(mask.shape, (3, 23))
        self.assertEqual(int(canvas[20, 20, 3]), 255)
        self.assertEqual(int(canvas[23, 20, 3]), 0)

    def test_many_paths_composite_once(self) -> None:
        canvas = new_canvas(200, 200, color=(0, 0, 0, 0))
        paths = [
            (np.asarray([float(i), float(i)]), np.asarray([10.0, 190.0]))
            for i in range(10, 190, 20)
        ]
        with mock.patch("curvelab.raster.draw_lines.blend_mask", wraps=blend_mask) as blend:
            draw_polylines(canvas, paths, (255, 0, 0, 255), width=1)
        blend.assert_called_once()
        for i in range(10, 190, 20):
            self.assertEqual(int(canvas[100, i, 3]), 255)
        self.assertEqual(int(canvas[100, 11, 3]), 0)

    def test_fully_offscreen_paths_do_not_composite(self) -> None:
        canvas = new_canvas(50, 50, color=(0, 0, 0, 0))
        with mock.patch("curvelab.raster.draw_lines.blend_mask", wraps=blend_mask) as blend:
            draw_polylines(canvas, [(np.asarray([-100.0, -90.0]), np.asarray([5.0, 5.0]))], (255, 0, 0, 255))
        blend.assert_not_called()
        self.assertFalse(np.any(canvas[:, :, 3]))


class MarkerTests(unittest.TestCase):
    def test_disc_fills_centre_and_leaves_corners(self) -> None:
        canvas = new_canvas(20, 20, color=(0, 0, 0, 0))
        draw_disc(canvas, 10.0, 10.0, 4.0, (255, 0, 0, 255))
        self.assertEqual(tuple(int(v) for v in canvas[10, 10]), (255, 0, 0, 255))
        self.assertEqual(int(canvas[0, 0, 3]), 0)
        edge = canvas[:, :, 3]
        self.assertTrue(np.any((edge > 0) & (edge < 255)))

    def test_ring_leaves_centre_empty(self) -> None:
        canvas = new_canvas(30, 30, color=(0, 0, 0, 0))
        draw_ring(canvas, 15.0, 15.0, 8.0, (255, 255, 255, 255), width=2.0)
        self.assertEqual(int(canvas[15, 15, 3]), 0)
        self.assertEqual(int(canvas[15, 22, 3]), 255)

    def test_ring_drawn_over_disc_outlines_marker(self) -> None:
        canvas = new_canvas(40, 20, color=(0, 0, 0, 255))
        for cx in (10.0, 30.0):
            draw_disc(canvas, cx, 10.0, 6.0, (255, 0, 0, 255))
            draw_ring(canvas, cx, 10.0, 6.0, (255, 255, 255, 255), width=2.0)
        self.assertEqual(tuple(int(v) for v in canvas[10, 10, :3]), (255, 0, 0))
        self.assertEqual(tuple(int(v) for v in canvas[10, 35, :3]), (255, 255, 255))


class TextTests(unittest.TestCase):
    def test_default_font_family(self) -> None:
        self.assertEqual(DEFAULT_FONT_FAMILY, "DejaVu Sans")

    def test_text_renderer_uses_antialias_coverage(self) -> None:
        canvas = new_canvas(220, 80, color=(0, 0, 0, 0))
        draw_text(canvas, 10, 20, "x-intercept 3.14", (255, 255, 255, 255), font_size_px=24.0)
        chan = canvas[:, :, 0]
        self.assertTrue(np.any((chan > 0) & (chan < 255)))
        # Transparent background should remain transparent outside rendered glyph coverage.
        self.assertEqual(int(canvas[0, 0, 3]), 0)

    def test_text_size_grows_with_font_size(self) -> None:
        w_small, h_small = text_size("1.25", font_size_px=12.0)
        w_large, h_large = text_size("1.25", font_size_px=24.0)
        self.assertGreater(w_large, w_small)
        self.assertGreater(h_large, h_small)

    def test_empty_text_draws_nothing(self) -> None:
        canvas = new_canvas(10, 10, color=(0, 0, 0, 0))
        draw_text(canvas, 0, 0, "", (255, 255, 255, 255))
        self.assertFalse(np.any(canvas))


if __name__ == "__main__":
    unittest.main()

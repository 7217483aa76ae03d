from __future__ import annotations

import math
import unittest

import numpy as np

from rusplot.adapters import make_series
from rusplot.errors import EmptyDataError
from rusplot.scales import (
    Bounds,
    CoordinateMapper,
    compute_bounds,
    format_tick,
    format_ticks_for_axis,
    tick_decimals,
    tick_values,
)
from rusplot.series import PlotSet


def _plot_set(*point_lists: list) -> PlotSet:
    return PlotSet.of([make_series(pts, label=f"s{i}") for i, pts in enumerate(point_lists)])


class BoundsTests(unittest.TestCase):
    def test_padded_bounds_add_ten_percent_of_span(self) -> None:
        b = compute_bounds(_plot_set([(0.0, 0.0), (10.0, 20.0)]))
        self.assertAlmostEqual(b.x_min, -1.0)
        self.assertAlmostEqual(b.x_max, 11.0)
        self.assertAlmostEqual(b.y_min, -2.0)
        self.assertAlmostEqual(b.y_max, 22.0)
        self.assertEqual(b.corrections, ())

    def test_bounds_cover_every_series(self) -> None:
        b = compute_bounds(_plot_set([(0.0, 0.0), (1.0, 1.0)], [(-4.0, 3.0), (6.0, 9.0)]))
        self.assertTrue(b.contains(-4.0, 0.0))
        self.assertTrue(b.contains(6.0, 9.0))
        self.assertLess(b.x_min, -4.0)
        self.assertGreater(b.y_max, 9.0)

    def test_single_point_widens_both_axes_and_records_warning(self) -> None:
        b = compute_bounds(_plot_set([(5.0, 5.0)]))
        self.assertEqual((b.x_min, b.x_max, b.y_min, b.y_max), (4.0, 6.0, 4.0, 6.0))
        self.assertEqual([w.axis for w in b.corrections], ["x", "y"])
        self.assertEqual(b.corrections[0].epsilon, 1.0)

    def test_constant_y_only_widens_y(self) -> None:
        b = compute_bounds(_plot_set([(0.0, 3.0), (10.0, 3.0)]))
        self.assertAlmostEqual(b.x_min, -1.0)
        self.assertEqual((b.y_min, b.y_max), (2.0, 4.0))
        self.assertEqual([w.axis for w in b.corrections], ["y"])

    def test_non_finite_points_are_ignored(self) -> None:
        b = compute_bounds(_plot_set([(0.0, 0.0), (1.0, math.nan), (2.0, 2.0), (math.inf, 1.0)]))
        self.assertAlmostEqual(b.x_min, -0.2)
        self.assertAlmostEqual(b.x_max, 2.2)
        self.assertAlmostEqual(b.y_max, 2.2)

    def test_no_finite_points_raises(self) -> None:
        with self.assertRaises(EmptyDataError):
            compute_bounds(_plot_set([(math.nan, 1.0)], []))
        with self.assertRaises(EmptyDataError):
            compute_bounds(PlotSet.of([]))

    def test_symmetric_profile_is_centered_on_zero(self) -> None:
        b = compute_bounds(_plot_set([(-2.0, 1.0), (4.0, 3.0)]), profile="symmetric")
        self.assertAlmostEqual(b.x_min, -4.4)
        self.assertAlmostEqual(b.x_max, 4.4)
        self.assertAlmostEqual(b.y_min, -3.3)
        self.assertAlmostEqual(b.y_max, 3.3)

    def test_symmetric_profile_all_zero_uses_epsilon(self) -> None:
        b = compute_bounds(_plot_set([(0.0, 0.0)]), profile="symmetric", epsilon=2.0)
        self.assertEqual((b.x_min, b.x_max), (-2.0, 2.0))
        self.assertEqual(len(b.corrections), 2)

    def test_huge_magnitude_single_point_still_has_positive_span(self) -> None:
        b = compute_bounds(_plot_set([(1e300, 1e300)]))
        self.assertGreater(b.x_span, 0.0)
        self.assertGreater(b.y_span, 0.0)

    def test_span_beyond_float_range_keeps_finite_bounds(self) -> None:
        b = compute_bounds(_plot_set([(-1e308, 0.0), (1e308, 1.0)]))
        self.assertTrue(all(math.isfinite(v) for v in (b.x_min, b.x_max, b.y_min, b.y_max)))
        self.assertLessEqual(b.x_min, -1e308)
        self.assertGreaterEqual(b.x_max, 1e308)

    def test_corrections_do_not_affect_equality(self) -> None:
        a = compute_bounds(_plot_set([(5.0, 5.0)]))
        self.assertEqual(a, Bounds(4.0, 6.0, 4.0, 6.0))


class CoordinateMapperTests(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = CoordinateMapper(bounds=Bounds(0.0, 10.0, 0.0, 10.0), width=220, height=220, inset=10)

    def test_corners_map_to_plot_rect_with_flipped_y(self) -> None:
        self.assertEqual(self.mapper.plot_rect, (10, 10, 210, 210))
        self.assertAlmostEqual(self.mapper.to_pixel_x(0.0), 10.0)
        self.assertAlmostEqual(self.mapper.to_pixel_x(10.0), 210.0)
        self.assertAlmostEqual(self.mapper.to_pixel_y(0.0), 210.0)
        self.assertAlmostEqual(self.mapper.to_pixel_y(10.0), 10.0)

    def test_pixel_to_data_inverts_mapping(self) -> None:
        for x, y in ((0.0, 0.0), (2.5, 7.25), (10.0, 3.0)):
            self.assertAlmostEqual(self.mapper.to_data_x(self.mapper.to_pixel_x(x)), x)
            self.assertAlmostEqual(self.mapper.to_data_y(self.mapper.to_pixel_y(y)), y)

    def test_map_points_matches_scalar_mapping(self) -> None:
        pts = np.asarray([[1.0, 2.0], [9.0, 4.0]])
        px, py = self.mapper.map_points(pts)
        self.assertEqual(px.tolist(), [30.0, 190.0])
        self.assertEqual(py.tolist(), [170.0, 130.0])

    def test_inside_tests_the_plot_rect(self) -> None:
        px = np.asarray([10.0, 210.0, 9.0, 100.0])
        py = np.asarray([10.0, 210.0, 100.0, 211.0])
        self.assertEqual(self.mapper.inside(px, py).tolist(), [True, True, False, False])

    def test_mapping_handles_span_beyond_float_range(self) -> None:
        mapper = CoordinateMapper(bounds=Bounds(-1e308, 1e308, -1.0, 1.0), width=220, height=220, inset=10)
        self.assertAlmostEqual(mapper.to_pixel_x(-1e308), 10.0)
        self.assertAlmostEqual(mapper.to_pixel_x(0.0), 110.0)
        self.assertAlmostEqual(mapper.to_pixel_x(1e308), 210.0)
        self.assertAlmostEqual(mapper.to_data_x(210.0) / 1e308, 1.0)
        px, _ = mapper.map_points(np.asarray([[-1e308, 0.0], [1e308, 0.0]]))
        self.assertTrue(np.all(np.isfinite(px)))

    def test_rejects_viewport_smaller_than_inset(self) -> None:
        with self.assertRaises(ValueError):
            CoordinateMapper(bounds=Bounds(0.0, 1.0, 0.0, 1.0), width=100, height=40, inset=20)


class TickTests(unittest.TestCase):
    def test_tick_values_are_evenly_spaced_and_include_ends(self) -> None:
        ticks = tick_values(-1.0, 9.0, 10)
        self.assertEqual(ticks.shape, (11,))
        self.assertEqual(float(ticks[0]), -1.0)
        self.assertEqual(float(ticks[-1]), 9.0)
        self.assertTrue(np.allclose(np.diff(ticks), 1.0))

    def test_tick_values_stay_finite_for_huge_spans(self) -> None:
        ticks = tick_values(-1.5e308, 1.5e308, 10)
        self.assertTrue(np.all(np.isfinite(ticks)))
        self.assertEqual(float(ticks[0]), -1.5e308)
        self.assertEqual(float(ticks[-1]), 1.5e308)
        self.assertAlmostEqual(float(ticks[5]) / 1.5e308, 0.0)
        self.assertTrue(np.all(np.diff(ticks) > 0))

    def test_decimals_depend_on_span(self) -> None:
        self.assertEqual(tick_decimals(0.0, 10.0), 1)
        self.assertEqual(tick_decimals(0.0, 9.99), 2)
        self.assertEqual(format_ticks_for_axis(tick_values(0.0, 10.0, 2)), ["0.0", "5.0", "10.0"])
        self.assertEqual(format_ticks_for_axis(tick_values(0.0, 1.0, 2)), ["0.00", "0.50", "1.00"])

    def test_negative_zero_is_normalised(self) -> None:
        self.assertEqual(format_tick(-0.0001, 2), "0.00")
        self.assertEqual(format_tick(-0.0, 1), "0.0")
        self.assertEqual(format_tick(-1.25, 1), "-1.2")


if __name__ == "__main__":
    unittest.main()

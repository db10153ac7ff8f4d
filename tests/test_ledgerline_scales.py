from __future__ import annotations

import unittest

import numpy as np

from ledgerline_chart.config import CanvasGeometry
from ledgerline_chart.scales import EMPTY_RANGE, AxisRange, ChartScale, grid_values, resolve_range


class RangeResolverTests(unittest.TestCase):
    def test_empty_series_resolves_to_empty_range(self) -> None:
        axis = resolve_range([], fit_data_range=False)
        self.assertIs(axis, EMPTY_RANGE)
        self.assertTrue(axis.empty)
        self.assertEqual((axis.min_y, axis.max_y), (0.0, 0.0))

    def test_nice_mode_rounds_small_negative_down_to_full_step(self) -> None:
        axis = resolve_range([100.0, -50.0, 200.0], fit_data_range=False)
        self.assertEqual((axis.min_y, axis.max_y), (-1000.0, 1000.0))

    def test_nice_mode_includes_zero_for_positive_series(self) -> None:
        axis = resolve_range([1500.0, 2500.0], fit_data_range=False)
        self.assertEqual((axis.min_y, axis.max_y), (0.0, 3000.0))

    def test_nice_mode_includes_zero_for_negative_series(self) -> None:
        axis = resolve_range([-200.0, -1500.0], fit_data_range=False)
        self.assertEqual((axis.min_y, axis.max_y), (-2000.0, 0.0))

    def test_nice_mode_exact_boundary_is_not_extended(self) -> None:
        axis = resolve_range([1000.0], fit_data_range=False)
        self.assertEqual((axis.min_y, axis.max_y), (0.0, 1000.0))

    def test_nice_mode_all_zero_series_gets_one_step(self) -> None:
        axis = resolve_range([0.0, 0.0, 0.0], fit_data_range=False)
        self.assertEqual((axis.min_y, axis.max_y), (0.0, 1000.0))

    def test_nice_step_is_parameterized(self) -> None:
        axis = resolve_range([120.0, 340.0], fit_data_range=False, nice_step=100.0)
        self.assertEqual((axis.min_y, axis.max_y), (0.0, 400.0))

    def test_fit_mode_pads_ten_percent(self) -> None:
        axis = resolve_range([100.0, 200.0], fit_data_range=True)
        self.assertAlmostEqual(axis.min_y, 90.0, places=9)
        self.assertAlmostEqual(axis.max_y, 210.0, places=9)

    def test_fit_mode_does_not_force_zero(self) -> None:
        axis = resolve_range([1000.0, 2000.0], fit_data_range=True)
        self.assertGreater(axis.min_y, 0.0)

    def test_fit_mode_flat_series_gets_absolute_pad(self) -> None:
        axis = resolve_range([500.0, 500.0], fit_data_range=True)
        self.assertEqual((axis.min_y, axis.max_y), (499.0, 501.0))

    def test_near_flat_series_is_widened_around_its_midpoint(self) -> None:
        axis = resolve_range([500.0, 500.0 + 1e-9], fit_data_range=True)
        self.assertAlmostEqual(axis.max_y - axis.min_y, 1.0, places=9)
        self.assertAlmostEqual(axis.min_y, 499.5, places=6)
        self.assertAlmostEqual(axis.max_y, 500.5, places=6)

    def test_range_invariant_holds_for_random_series(self) -> None:
        rng = np.random.default_rng(7)
        for _ in range(300):
            size = int(rng.integers(1, 12))
            values = rng.normal(0.0, float(rng.choice([0.5, 50.0, 5000.0])), size=size)
            if rng.random() < 0.2:
                values = np.full(size, float(values[0]))
            for fit in (True, False):
                axis = resolve_range(values, fit_data_range=fit)
                self.assertGreaterEqual(axis.max_y, axis.min_y)
                self.assertGreaterEqual(axis.max_y - axis.min_y, 1.0)
                if not fit:
                    self.assertLessEqual(axis.min_y, 0.0)
                    self.assertGreaterEqual(axis.max_y, 0.0)

    def test_resolver_does_not_mutate_input(self) -> None:
        values = [3.0, -7.0, 11.0]
        resolve_range(values, fit_data_range=True)
        self.assertEqual(values, [3.0, -7.0, 11.0])


class ScaleMapperTests(unittest.TestCase):
    def setUp(self) -> None:
        self.canvas = CanvasGeometry(width=300.0, height=240.0, top_padding=40.0, left_padding=40.0)

    def test_chart_area_excludes_padding(self) -> None:
        self.assertEqual(self.canvas.chart_area_width, 220.0)
        self.assertEqual(self.canvas.chart_area_height, 160.0)

    def test_explicit_right_and_bottom_padding(self) -> None:
        canvas = CanvasGeometry(width=300.0, height=240.0, top_padding=10.0, left_padding=60.0, right_padding=20.0, bottom_padding=30.0)
        self.assertEqual(canvas.chart_area_width, 220.0)
        self.assertEqual(canvas.chart_area_height, 200.0)

    def test_pixel_y_is_inverted(self) -> None:
        scale = ChartScale.build(AxisRange(0.0, 1000.0), self.canvas, 3)
        self.assertEqual(scale.y_at(0.0), 200.0)
        self.assertEqual(scale.y_at(1000.0), 40.0)
        self.assertLess(scale.y_at(750.0), scale.y_at(250.0))

    def test_x_positions_span_chart_area(self) -> None:
        scale = ChartScale.build(AxisRange(0.0, 1000.0), self.canvas, 3)
        self.assertEqual(scale.x_at(0), 40.0)
        self.assertEqual(scale.x_at(1), 150.0)
        self.assertEqual(scale.x_at(2), 260.0)

    def test_single_point_uses_full_width_scale(self) -> None:
        scale = ChartScale.build(AxisRange(0.0, 1000.0), self.canvas, 1)
        self.assertEqual(scale.x_scale, 220.0)
        self.assertEqual(scale.x_at(0), 40.0)

    def test_map_series_matches_scalar_mapping(self) -> None:
        scale = ChartScale.build(AxisRange(-1000.0, 1000.0), self.canvas, 4)
        values = [10.0, -400.0, 999.0, 0.0]
        xs, ys = scale.map_series(values)
        for i, v in enumerate(values):
            self.assertAlmostEqual(float(xs[i]), scale.x_at(i), places=9)
            self.assertAlmostEqual(float(ys[i]), scale.y_at(v), places=9)

    def test_mapping_is_monotonic_in_both_range_modes(self) -> None:
        rng = np.random.default_rng(11)
        values = rng.normal(200.0, 900.0, size=24)
        for fit in (True, False):
            axis = resolve_range(values, fit_data_range=fit)
            _, ys = ChartScale.build(axis, self.canvas, values.size).map_series(values)
            dv = values[:, None] - values[None, :]
            dy = ys[:, None] - ys[None, :]
            self.assertTrue(np.all(dy[dv > 0] < 0))

    def test_grid_values_run_top_to_bottom(self) -> None:
        ticks = grid_values(AxisRange(-1000.0, 1000.0))
        np.testing.assert_allclose(ticks, [1000.0, 500.0, 0.0, -500.0, -1000.0])


if __name__ == "__main__":
    unittest.main()

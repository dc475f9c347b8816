from __future__ import annotations

import unittest

from kpichart.config import Canvas
from kpichart.regression import RegressionResult, fit, fit_series, trend_endpoints
from kpichart.scales import ScaleContext, ValueRange


class RegressionEngineTests(unittest.TestCase):
    def test_exact_line_is_recovered(self) -> None:
        result = fit((x, 2.0 * x + 5.0) for x in range(6))
        self.assertAlmostEqual(result.slope, 2.0, places=9)
        self.assertAlmostEqual(result.intercept, 5.0, places=9)
        self.assertEqual(result.trend, "up")

    def test_empty_and_single_point_are_flat(self) -> None:
        self.assertEqual(fit([]), RegressionResult(slope=0.0, intercept=0.0))
        single = fit([(0, 7.5)])
        self.assertEqual(single.slope, 0.0)
        self.assertEqual(single.intercept, 7.5)
        self.assertEqual(single.trend, "up")

    def test_identical_x_values_give_zero_slope(self) -> None:
        result = fit([(1.0, 2.0), (1.0, 4.0)])
        self.assertEqual(result.slope, 0.0)
        self.assertAlmostEqual(result.intercept, 3.0)

    def test_zero_slope_is_classified_up(self) -> None:
        result = fit_series([3.0, 3.0, 3.0])
        self.assertEqual(result.slope, 0.0)
        self.assertEqual(result.trend, "up")

    def test_falling_series_is_down(self) -> None:
        self.assertEqual(fit_series([5.0, 4.0, 3.0]).trend, "down")

    def test_trend_endpoints_span_plot_width(self) -> None:
        canvas = Canvas()
        scale = ScaleContext(canvas=canvas, count=3, value_range=ValueRange(0.0, 10.0))
        start, end = trend_endpoints(RegressionResult(slope=1.0, intercept=2.0), scale)
        self.assertEqual(start[0], canvas.plot_left)
        self.assertAlmostEqual(end[0], canvas.plot_left + canvas.plot_width)
        self.assertAlmostEqual(start[1], scale.scale_y(2.0))
        self.assertAlmostEqual(end[1], scale.scale_y(4.0))


if __name__ == "__main__":
    unittest.main()

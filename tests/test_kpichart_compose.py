from __future__ import annotations

import unittest
import xml.etree.ElementTree as ET

import numpy as np

from kpichart.adapters import build_series
from kpichart.compose import compose_bar_chart, compose_line_chart, rank_categories
from kpichart.config import BarLayout, Canvas, StyleConfig
from kpichart.series import BarCategory, IndexedPoint


def _strip_namespace(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _elements(markup: str, tag: str, role: str | None = None) -> list[ET.Element]:
    root = ET.fromstring(markup)
    out = []
    for elem in root.iter():
        if _strip_namespace(elem.tag) != tag:
            continue
        if role is not None and role not in (elem.attrib.get("class") or "").split():
            continue
        out.append(elem)
    return out


class LineChartTests(unittest.TestCase):
    def setUp(self) -> None:
        self.canvas = Canvas()
        self.style = StyleConfig()
        self.points = build_series(
            [
                (1, "Jan", 10.0, 8.0),
                (2, "Feb", 20.0, None),
                (3, "Mar", 30.0, 24.0),
            ]
        )

    def _compose(self, points, title: str = "Revenue") -> str:
        return compose_line_chart(points, self.canvas, self.style, title)

    def test_empty_series_renders_placeholder(self) -> None:
        markup = self._compose([])
        texts = [t.text for t in _elements(markup, "text")]
        self.assertEqual(texts, ["No data"])
        self.assertEqual(_elements(markup, "polyline"), [])

    def test_document_frame(self) -> None:
        markup = self._compose(self.points)
        root = ET.fromstring(markup)
        self.assertEqual(root.attrib["viewBox"], "0 0 320 160")
        background = _elements(markup, "rect")[0]
        self.assertEqual(background.attrib["fill"], "rgb(255,255,255)")
        self.assertNotIn("#", markup)

    def test_prior_line_only_covers_points_with_prior(self) -> None:
        markup = self._compose(self.points)
        prior = _elements(markup, "polyline", role="prior")
        self.assertEqual(len(prior), 1)
        self.assertEqual(len(prior[0].attrib["points"].split()), 2)
        main = _elements(markup, "polyline", role="main")
        self.assertEqual(len(main[0].attrib["points"].split()), 3)

    def test_prior_line_omitted_without_prior_values(self) -> None:
        points = build_series([(1, "a", 1.0), (2, "b", 2.0)])
        markup = self._compose(points)
        self.assertEqual(_elements(markup, "polyline", role="prior"), [])
        self.assertEqual(len(_elements(markup, "polyline")), 1)

    def test_trend_line_is_dashed_and_classified(self) -> None:
        markup = self._compose(self.points)
        trend = _elements(markup, "line", role="trend")
        self.assertEqual(len(trend), 1)
        self.assertIn("stroke-dasharray", trend[0].attrib)
        self.assertIn("trend-up", trend[0].attrib["class"])
        self.assertEqual(float(trend[0].attrib["x1"]), self.canvas.plot_left)
        self.assertEqual(float(trend[0].attrib["x2"]), self.canvas.plot_left + self.canvas.plot_width)

    def test_headline_and_index_to_prior(self) -> None:
        markup = self._compose(self.points)
        self.assertEqual(_elements(markup, "text", role="headline")[0].text, "30.00")
        self.assertEqual(_elements(markup, "text", role="ratio")[0].text, "125.00% vs prior")

    def test_ratio_placeholder_when_latest_prior_missing_or_zero(self) -> None:
        for prior in (None, 0.0):
            points = build_series([(1, "a", 5.0, 4.0), (2, "b", 6.0, prior)])
            markup = self._compose(points)
            self.assertEqual(_elements(markup, "text", role="ratio")[0].text, "-- vs prior")

    def test_axis_labels(self) -> None:
        points = build_series([(i, f"d{i}", float(i)) for i in range(4)])
        markup = self._compose(points)
        self.assertEqual([t.text for t in _elements(markup, "text", role="x-label")], ["d0", "d1", "d3"])
        self.assertEqual(len(_elements(markup, "text", role="y-label")), 3)

    def test_single_point_chart(self) -> None:
        markup = self._compose(build_series([(1, "only", 42.0)]))
        main = _elements(markup, "polyline", role="main")[0]
        x, _ = main.attrib["points"].split(",")
        self.assertEqual(float(x), self.canvas.plot_left)
        self.assertIn("trend-up", _elements(markup, "line", role="trend")[0].attrib["class"])

    def test_ampersand_is_escaped(self) -> None:
        points = build_series([(1, "A & B", 1.0), (2, "C", 2.0)])
        markup = self._compose(points, title="Sales & Margin")
        self.assertIn("A &amp; B", markup)
        self.assertIn("Sales &amp; Margin", markup)
        self.assertEqual(_elements(markup, "text", role="title")[0].text, "Sales & Margin")

    def test_numpy_valued_points(self) -> None:
        points = [
            IndexedPoint(sort_key=i, label=f"d{i}", value=np.float64(v), prior_value=np.float64(v - 1.0), index=i)
            for i, v in enumerate((2.0, 4.0, 8.0))
        ]
        markup = self._compose(points)
        self.assertEqual(_elements(markup, "text", role="headline")[0].text, "8.00")
        self.assertEqual(_elements(markup, "text", role="ratio")[0].text, "114.29% vs prior")

    def test_output_is_deterministic(self) -> None:
        self.assertEqual(self._compose(self.points), self._compose(self.points))


class BarChartTests(unittest.TestCase):
    def setUp(self) -> None:
        self.layout = BarLayout()
        self.style = StyleConfig()
        self.categories = [BarCategory("a", 5.0), BarCategory("b", 20.0), BarCategory("c", 10.0)]

    def test_bars_sorted_descending(self) -> None:
        markup = compose_bar_chart(self.categories, self.layout, self.style, "Mix")
        labels = [t.text for t in _elements(markup, "text", role="bar-label")]
        self.assertEqual(labels, ["b", "c", "a"])

    def test_percentages_use_unfiltered_total(self) -> None:
        markup = compose_bar_chart(self.categories, self.layout, self.style, "Mix", selected={"a", "c"})
        values = [t.text for t in _elements(markup, "text", role="bar-value")]
        self.assertEqual(values, ["10.00 (28.57%)", "5.00 (14.29%)"])
        widths = [float(r.attrib["width"]) for r in _elements(markup, "rect", role="bar")]
        self.assertEqual(widths, [self.layout.track_width / 2.0, self.layout.track_width / 4.0])

    def test_numpy_valued_categories(self) -> None:
        cats = [BarCategory("a", np.float64(5.0)), BarCategory("b", np.float64(15.0))]
        markup = compose_bar_chart(cats, self.layout, self.style, "Mix")
        values = [t.text for t in _elements(markup, "text", role="bar-value")]
        self.assertEqual(values, ["15.00 (75.00%)", "5.00 (25.00%)"])

    def test_bar_label_ampersand_is_escaped(self) -> None:
        cats = [BarCategory("A & B", 3.0), BarCategory("C", 1.0)]
        markup = compose_bar_chart(cats, self.layout, self.style, "Mix")
        self.assertIn(">A &amp; B<", markup)
        labels = [t.text for t in _elements(markup, "text", role="bar-label")]
        self.assertEqual(labels, ["A & B", "C"])

    def test_bar_count_is_capped(self) -> None:
        cats = [BarCategory(f"c{i}", float(i)) for i in range(10)]
        ranked = rank_categories(cats, max_bars=3)
        self.assertEqual([c.label for c in ranked], ["c9", "c8", "c7"])

    def test_height_follows_bar_count(self) -> None:
        markup = compose_bar_chart(self.categories, self.layout, self.style, "Mix")
        root = ET.fromstring(markup)
        self.assertEqual(float(root.attrib["height"]), self.layout.height_for(3))

    def test_no_visible_bars_renders_placeholder(self) -> None:
        markup = compose_bar_chart(self.categories, self.layout, self.style, "Mix", selected=set())
        self.assertIn("No data", markup)


if __name__ == "__main__":
    unittest.main()

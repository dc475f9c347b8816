from kpichart.adapters import build_categories, build_series
from kpichart.api import SlopeResult, bar_chart, line_chart, series_slope
from kpichart.compose import compose_bar_chart, compose_line_chart, placeholder_document
from kpichart.config import BarLayout, Canvas, ChartConfig, StyleConfig, load_chart_config
from kpichart.errors import ChartConfigError
from kpichart.formatting import FormatMode, FormatSpec, choose_format, format_value, render_value
from kpichart.regression import RegressionResult, fit
from kpichart.scales import ScaleContext, ValueRange, compute_value_range
from kpichart.series import BarCategory, IndexedPoint, RawRow, SeriesPoint

__all__ = [
    "BarCategory",
    "BarLayout",
    "Canvas",
    "ChartConfig",
    "ChartConfigError",
    "FormatMode",
    "FormatSpec",
    "IndexedPoint",
    "RawRow",
    "RegressionResult",
    "ScaleContext",
    "SeriesPoint",
    "SlopeResult",
    "StyleConfig",
    "ValueRange",
    "bar_chart",
    "build_categories",
    "build_series",
    "choose_format",
    "compose_bar_chart",
    "compose_line_chart",
    "compute_value_range",
    "fit",
    "format_value",
    "line_chart",
    "load_chart_config",
    "placeholder_document",
    "render_value",
    "series_slope",
]

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Collection, Iterable, Mapping

from kpichart.adapters import build_categories, build_series
from kpichart.compose import MAX_BARS, compose_bar_chart, compose_line_chart
from kpichart.config import ChartConfig
from kpichart.regression import Trend, fit
from kpichart.svg import to_data_url


@dataclass(frozen=True)
class SlopeResult:
    slope: float
    intercept: float
    trend: Trend
    point_count: int


def line_chart(
    rows: Iterable[Any] | None = None,
    *,
    title: str = "",
    data: Any = None,
    config: ChartConfig | None = None,
    **columns: str,
) -> str:
    """Line chart of ``rows`` as a ``data:image/svg+xml`` URL.

    ``columns`` renames the ``sort_key``/``label``/``value``/``prior_value``
    fields read from mappings or a DataFrame.
    """

    cfg = config or ChartConfig()
    points = build_series(rows, data=data, **columns)
    return to_data_url(
        compose_line_chart(
            points,
            cfg.canvas,
            cfg.style,
            title,
            format_mode=cfg.format_mode,
            dynamic=cfg.dynamic_format,
        )
    )


def bar_chart(
    categories: Iterable[Any] | Mapping[str, Any],
    *,
    title: str = "",
    selected: Collection[str] | None = None,
    config: ChartConfig | None = None,
    max_bars: int = MAX_BARS,
) -> str:
    cfg = config or ChartConfig()
    return to_data_url(
        compose_bar_chart(
            build_categories(categories),
            cfg.bars,
            cfg.style,
            title,
            selected=selected,
            format_mode=cfg.format_mode,
            dynamic=cfg.dynamic_format,
            max_bars=max_bars,
        )
    )


def series_slope(rows: Iterable[Any] | None = None, *, data: Any = None, **columns: str) -> SlopeResult:
    """Least-squares slope of the indexed series, without rendering."""

    points = build_series(rows, data=data, **columns)
    result = fit((p.index, p.value) for p in points)
    return SlopeResult(
        slope=result.slope,
        intercept=result.intercept,
        trend=result.trend,
        point_count=len(points),
    )

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Collection, Sequence

from kpichart.config import BarLayout, Canvas, StyleConfig
from kpichart.formatting import (
    PERCENT_2DP,
    PLACEHOLDER_GLYPH,
    FormatMode,
    choose_format,
    render_value,
)
from kpichart.regression import RegressionResult, fit, trend_endpoints
from kpichart.scales import ScaleContext, ValueRange, compute_value_range
from kpichart.series import BarCategory, IndexedPoint
from kpichart.svg import SvgDocument

LOGGER = logging.getLogger(__name__)

MAX_BARS = 1000
PLACEHOLDER_WIDTH = 200.0
PLACEHOLDER_HEIGHT = 60.0
PLACEHOLDER_TEXT = "No data"
TREND_DASH = "4 3"
TEXT_INSET = 4.0
_EPS = 1e-9


@dataclass(frozen=True)
class LineChartSummary:
    """Values the line chart prints besides its geometry."""

    headline: float
    prior: float | None
    ratio: float | None
    regression: RegressionResult
    value_range: ValueRange


def placeholder_document(style: StyleConfig) -> str:
    doc = SvgDocument(
        width=PLACEHOLDER_WIDTH,
        height=PLACEHOLDER_HEIGHT,
        font_family=style.font_family,
        background=style.background_color,
    )
    doc.text(
        PLACEHOLDER_WIDTH / 2.0,
        PLACEHOLDER_HEIGHT / 2.0 + style.subtitle_font_px / 3.0,
        PLACEHOLDER_TEXT,
        size=style.subtitle_font_px,
        fill=style.muted_color,
        anchor="middle",
        role="placeholder",
    )
    return doc.to_markup()


def index_to_prior(value: float, prior: float | None) -> float | None:
    if prior is None or prior == 0:
        return None
    return value / prior


def summarize(points: Sequence[IndexedPoint]) -> LineChartSummary:
    last = points[-1]
    return LineChartSummary(
        headline=last.value,
        prior=last.prior_value,
        ratio=index_to_prior(last.value, last.prior_value),
        regression=fit((p.index, p.value) for p in points),
        value_range=compute_value_range([p.value for p in points]),
    )


def compose_line_chart(
    points: Sequence[IndexedPoint],
    canvas: Canvas,
    style: StyleConfig,
    title: str,
    *,
    format_mode: FormatMode | str | None = FormatMode.DYNAMIC_SCALE,
    dynamic: bool = True,
) -> str:
    """Render a line chart with prior-period line, trend line and headline.

    ``points`` must already be indexed and ascending, as produced by
    :func:`kpichart.adapters.build_series`.
    """

    if not points:
        LOGGER.debug("empty series; emitting placeholder document")
        return placeholder_document(style)

    summary = summarize(points)
    scale = ScaleContext(canvas=canvas, count=len(points), value_range=summary.value_range)
    doc = SvgDocument(
        width=canvas.width,
        height=canvas.height,
        font_family=style.font_family,
        background=style.background_color,
    )

    prior_points = [p for p in points if p.prior_value is not None]
    if prior_points:
        doc.polyline(
            scale.map_points([p.index for p in prior_points], [p.prior_value for p in prior_points]),
            stroke=style.prior_color,
            width=style.line_width,
            role="prior",
        )
    doc.polyline(
        scale.map_points([p.index for p in points], [p.value for p in points]),
        stroke=style.main_color,
        width=style.line_width,
        role="main",
    )
    start, end = trend_endpoints(summary.regression, scale)
    doc.line(
        start,
        end,
        stroke=style.trend_color,
        width=max(style.line_width / 2.0, 1.0),
        dash=TREND_DASH,
        role=f"trend trend-{summary.regression.trend}",
    )

    _headline(doc, canvas, style, title, summary, format_mode=format_mode, dynamic=dynamic)
    _x_labels(doc, scale, style, points)
    _y_labels(doc, scale, style, format_mode=format_mode, dynamic=dynamic)
    return doc.to_markup()


def _headline(
    doc: SvgDocument,
    canvas: Canvas,
    style: StyleConfig,
    title: str,
    summary: LineChartSummary,
    *,
    format_mode: FormatMode | str | None,
    dynamic: bool,
) -> None:
    title_y = canvas.margin_top + style.subtitle_font_px
    headline_y = title_y + style.headline_font_px
    right = canvas.plot_left + canvas.plot_width
    doc.text(canvas.plot_left, title_y, title, size=style.subtitle_font_px, fill=style.text_color, role="title")
    spec = choose_format(abs(summary.headline), format_mode, dynamic=dynamic)
    doc.text(
        canvas.plot_left,
        headline_y,
        render_value(summary.headline, spec),
        size=style.headline_font_px,
        fill=style.text_color,
        weight="bold",
        role="headline",
    )
    ratio = PLACEHOLDER_GLYPH if summary.ratio is None else render_value(summary.ratio, PERCENT_2DP)
    doc.text(
        right,
        headline_y,
        f"{ratio} vs prior",
        size=style.subtitle_font_px,
        fill=style.muted_color,
        anchor="end",
        role="ratio",
    )


def _x_labels(doc: SvgDocument, scale: ScaleContext, style: StyleConfig, points: Sequence[IndexedPoint]) -> None:
    n = len(points)
    y = scale.plot_bottom + style.label_font_px + TEXT_INSET
    for idx, anchor in ((0, "start"), ((n - 1) // 2, "middle"), (n - 1, "end")):
        doc.text(
            scale.scale_x(idx),
            y,
            points[idx].label,
            size=style.label_font_px,
            fill=style.muted_color,
            anchor=anchor,
            role="x-label",
        )


def _y_labels(
    doc: SvgDocument,
    scale: ScaleContext,
    style: StyleConfig,
    *,
    format_mode: FormatMode | str | None,
    dynamic: bool,
) -> None:
    vr = scale.value_range
    spec = choose_format(max(abs(vr.min), abs(vr.max)), format_mode, dynamic=dynamic)
    x = scale.canvas.plot_left - TEXT_INSET
    for value in (vr.min, vr.mid, vr.max):
        doc.text(
            x,
            scale.scale_y(value) + style.label_font_px / 3.0,
            render_value(value, spec),
            size=style.label_font_px,
            fill=style.muted_color,
            anchor="end",
            role="y-label",
        )


def rank_categories(
    categories: Sequence[BarCategory],
    *,
    selected: Collection[str] | None = None,
    max_bars: int = MAX_BARS,
) -> list[BarCategory]:
    """Sort descending by value, keep ``selected`` labels, cap at ``max_bars``."""

    ranked = sorted(categories, key=lambda c: -c.value)
    if selected is not None:
        keep = set(selected)
        ranked = [c for c in ranked if c.label in keep]
    return ranked[: max(max_bars, 0)]


def compose_bar_chart(
    categories: Sequence[BarCategory],
    layout: BarLayout,
    style: StyleConfig,
    title: str,
    *,
    selected: Collection[str] | None = None,
    format_mode: FormatMode | str | None = FormatMode.DYNAMIC_SCALE,
    dynamic: bool = True,
    max_bars: int = MAX_BARS,
) -> str:
    """Render one horizontal bar per category.

    Bar lengths and percentage labels are relative to the full ``categories``
    set; ``selected`` only chooses which rows are drawn.
    """

    bars = rank_categories(categories, selected=selected, max_bars=max_bars)
    if not bars:
        LOGGER.debug("no categories to draw; emitting placeholder document")
        return placeholder_document(style)

    total = sum(c.value for c in categories)
    peak = max(max(c.value for c in categories), _EPS)
    height = layout.height_for(len(bars))
    doc = SvgDocument(
        width=layout.width,
        height=height,
        font_family=style.font_family,
        background=style.background_color,
    )

    header_y = layout.margin_top + style.subtitle_font_px
    doc.text(TEXT_INSET, header_y, title, size=style.subtitle_font_px, fill=style.text_color, role="title")
    total_spec = choose_format(abs(total), format_mode, dynamic=dynamic)
    doc.text(
        layout.width - layout.margin_right,
        header_y,
        f"Total {render_value(total, total_spec)}",
        size=style.subtitle_font_px,
        fill=style.muted_color,
        anchor="end",
        role="total",
    )

    top = layout.margin_top + layout.header_height
    text_dy = layout.bar_height / 2.0 + style.label_font_px / 3.0
    for i, cat in enumerate(bars):
        y = top + i * (layout.bar_height + layout.row_gap)
        bar_w = layout.track_width * max(cat.value, 0.0) / peak
        doc.text(
            layout.track_left - TEXT_INSET,
            y + text_dy,
            cat.label,
            size=style.label_font_px,
            fill=style.text_color,
            anchor="end",
            role="bar-label",
        )
        doc.rect(layout.track_left, y, bar_w, layout.bar_height, fill=style.bar_color, role="bar")
        share = None if total == 0 else cat.value / total
        value_text = render_value(cat.value, choose_format(abs(cat.value), format_mode, dynamic=dynamic))
        share_text = PLACEHOLDER_GLYPH if share is None else render_value(share, PERCENT_2DP)
        doc.text(
            layout.track_left + bar_w + TEXT_INSET,
            y + text_dy,
            f"{value_text} ({share_text})",
            size=style.label_font_px,
            fill=style.muted_color,
            role="bar-value",
        )
    return doc.to_markup()

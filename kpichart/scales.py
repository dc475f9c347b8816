from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from kpichart.config import Canvas

MIN_SPAN = 1e-9


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def mid(self) -> float:
        return (self.min + self.max) / 2.0


def compute_value_range(
    values: Sequence[float] | np.ndarray,
    *,
    top_pad_ratio: float = 0.18,
    bottom_pad_ratio: float = 0.06,
    min_span: float = MIN_SPAN,
) -> ValueRange:
    """Pad the data extent, leaving more headroom above than below.

    A flat series pads around a unit span (or ``|value|`` when larger) so the
    line sits inside the plot instead of on its edge.
    """

    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return ValueRange(min=0.0, max=1.0)
    vmin = float(np.min(arr))
    vmax = float(np.max(arr))
    span = vmax - vmin
    if span < min_span:
        span = max(1.0, abs(vmax))
    return ValueRange(min=vmin - span * bottom_pad_ratio, max=vmax + span * top_pad_ratio)


@dataclass(frozen=True)
class ScaleContext:
    canvas: Canvas
    count: int
    value_range: ValueRange

    @property
    def x_step(self) -> float:
        return self.canvas.plot_width / max(self.count - 1, 1)

    @property
    def plot_right(self) -> float:
        return self.canvas.plot_left + self.canvas.plot_width

    @property
    def plot_bottom(self) -> float:
        return self.canvas.plot_top + self.canvas.plot_height

    def scale_x(self, index: int | float | np.ndarray) -> Any:
        out = self.canvas.plot_left + np.asarray(index, dtype=np.float64) * self.x_step
        return float(out) if out.ndim == 0 else out

    def scale_y(self, value: float | np.ndarray) -> Any:
        denom = max(self.value_range.span, MIN_SPAN)
        frac = (np.asarray(value, dtype=np.float64) - self.value_range.min) / denom
        out = self.plot_bottom - frac * self.canvas.plot_height
        return float(out) if out.ndim == 0 else out

    def map_points(self, indices: Sequence[int], values: Sequence[float]) -> list[tuple[float, float]]:
        px = self.scale_x(np.asarray(indices, dtype=np.float64))
        py = self.scale_y(np.asarray(values, dtype=np.float64))
        return list(zip(px.tolist(), py.tolist(), strict=True))

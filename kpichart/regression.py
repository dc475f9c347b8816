from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

import numpy as np

from kpichart.scales import ScaleContext

Trend = Literal["up", "down"]


@dataclass(frozen=True)
class RegressionResult:
    slope: float
    intercept: float

    @property
    def trend(self) -> Trend:
        # A flat fit counts as "up".
        return "up" if self.slope >= 0 else "down"

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


def fit(points: Iterable[tuple[float, float]]) -> RegressionResult:
    """Ordinary least squares over ``(x, y)`` pairs via the normal equations."""

    pairs = np.asarray(list(points), dtype=np.float64).reshape(-1, 2)
    n = pairs.shape[0]
    if n == 0:
        return RegressionResult(slope=0.0, intercept=0.0)
    x = pairs[:, 0]
    y = pairs[:, 1]
    mean_y = float(np.mean(y))
    if n == 1:
        return RegressionResult(slope=0.0, intercept=mean_y)

    mean_x = float(np.mean(x))
    mean_xy = float(np.mean(x * y))
    mean_xx = float(np.mean(x * x))
    var_x = mean_xx - mean_x * mean_x
    if var_x <= np.finfo(np.float64).eps * max(1.0, mean_xx):
        return RegressionResult(slope=0.0, intercept=mean_y)
    slope = (mean_xy - mean_x * mean_y) / var_x
    return RegressionResult(slope=slope, intercept=mean_y - slope * mean_x)


def fit_series(values: Iterable[float]) -> RegressionResult:
    """Fit against the position of each value, ``x = 0..N-1``."""

    return fit((float(i), float(v)) for i, v in enumerate(values))


def trend_endpoints(result: RegressionResult, scale: ScaleContext) -> tuple[tuple[float, float], tuple[float, float]]:
    last = float(max(scale.count - 1, 0))
    return (
        (scale.scale_x(0), scale.scale_y(result.predict(0.0))),
        (scale.scale_x(last), scale.scale_y(result.predict(last))),
    )

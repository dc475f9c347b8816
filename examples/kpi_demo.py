from __future__ import annotations

import datetime as dt
from pathlib import Path

import numpy as np

from kpichart import bar_chart, line_chart, series_slope
from kpichart.compose import compose_line_chart
from kpichart.adapters import build_series
from kpichart.config import ChartConfig


def _monthly_rows() -> list[tuple[dt.date, str, float, float | None]]:
    rng = np.random.default_rng(7)
    base = np.linspace(120_000.0, 185_000.0, 12) + rng.normal(0.0, 6_000.0, 12)
    rows = []
    for month, value in enumerate(base.tolist(), start=1):
        day = dt.date(2025, month, 1)
        prior = None if month <= 2 else value * 0.92
        rows.append((day, day.strftime("%b"), value, prior))
    return rows


def main() -> None:
    out_dir = Path(__file__).resolve().parent / "out"
    out_dir.mkdir(parents=True, exist_ok=True)
    cfg = ChartConfig()

    rows = _monthly_rows()
    svg_path = out_dir / "kpi_demo_line.svg"
    svg_path.write_text(
        compose_line_chart(build_series(rows), cfg.canvas, cfg.style, "Revenue & Orders"),
        encoding="utf-8",
    )
    url_path = out_dir / "kpi_demo_urls.txt"
    url_path.write_text(
        "\n".join(
            [
                line_chart(rows, title="Revenue & Orders", config=cfg),
                bar_chart({"North": 5_400, "South": 21_000, "East": 9_800, "West": 12_250}, title="Region mix"),
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    slope = series_slope(rows)
    print(f"wrote {svg_path}")
    print(f"wrote {url_path}")
    print(f"trend {slope.trend} slope={slope.slope:.2f} over {slope.point_count} points")


if __name__ == "__main__":
    main()

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from kpichart.errors import ChartConfigError
from kpichart.formatting import FormatMode, parse_format_mode

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_COLOR_TOKENS = (
    "main_color",
    "prior_color",
    "trend_color",
    "text_color",
    "muted_color",
    "bar_color",
    "background_color",
)


@dataclass(frozen=True)
class Canvas:
    """Pixel space of one render.

    ``plot_offset`` is the band between the top margin and the plot rectangle
    that holds the headline text.
    """

    width: float = 320.0
    height: float = 160.0
    margin_top: float = 8.0
    margin_right: float = 12.0
    margin_bottom: float = 22.0
    margin_left: float = 44.0
    plot_offset: float = 40.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ChartConfigError("canvas width/height must be > 0")
        for name in ("margin_top", "margin_right", "margin_bottom", "margin_left", "plot_offset"):
            if getattr(self, name) < 0:
                raise ChartConfigError(f"{name} must be >= 0")
        if self.plot_width <= 0 or self.plot_height <= 0:
            raise ChartConfigError("margins leave no room for the plot area")

    @property
    def plot_left(self) -> float:
        return self.margin_left

    @property
    def plot_top(self) -> float:
        return self.margin_top + self.plot_offset

    @property
    def plot_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def plot_height(self) -> float:
        return self.height - self.plot_top - self.margin_bottom


@dataclass(frozen=True)
class StyleConfig:
    main_color: str = "#1F6FEB"
    prior_color: str = "#B8C2CC"
    trend_color: str = "#F28C28"
    text_color: str = "#1F2933"
    muted_color: str = "#7B8794"
    bar_color: str = "#1F6FEB"
    background_color: str = "#FFFFFF"
    font_family: str = "Segoe UI"
    headline_font_px: float = 22.0
    subtitle_font_px: float = 11.0
    label_font_px: float = 9.0
    line_width: float = 2.0

    def __post_init__(self) -> None:
        for key in _COLOR_TOKENS:
            value = getattr(self, key)
            if not isinstance(value, str) or not _HEX_COLOR.match(value):
                raise ChartConfigError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        if not isinstance(self.font_family, str) or not self.font_family.strip():
            raise ChartConfigError("Token `font_family` must be a non-empty string")
        for key in ("headline_font_px", "subtitle_font_px", "label_font_px", "line_width"):
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or float(value) <= 0:
                raise ChartConfigError(f"Token `{key}` must be a positive number")


@dataclass(frozen=True)
class BarLayout:
    width: float = 360.0
    bar_height: float = 14.0
    row_gap: float = 6.0
    margin_top: float = 8.0
    margin_right: float = 12.0
    margin_bottom: float = 8.0
    label_width: float = 110.0
    annotation_width: float = 96.0
    header_height: float = 30.0

    def __post_init__(self) -> None:
        if self.bar_height <= 0:
            raise ChartConfigError("bar_height must be > 0")
        for f in fields(self):
            if f.name != "bar_height" and getattr(self, f.name) < 0:
                raise ChartConfigError(f"{f.name} must be >= 0")
        if self.track_width <= 0:
            raise ChartConfigError("bar layout leaves no room for bars")

    @property
    def track_left(self) -> float:
        return self.label_width

    @property
    def track_width(self) -> float:
        return self.width - self.label_width - self.annotation_width - self.margin_right

    def height_for(self, rows: int) -> float:
        body = rows * self.bar_height + max(rows - 1, 0) * self.row_gap
        return self.margin_top + self.header_height + body + self.margin_bottom


@dataclass(frozen=True)
class ChartConfig:
    canvas: Canvas = field(default_factory=Canvas)
    style: StyleConfig = field(default_factory=StyleConfig)
    bars: BarLayout = field(default_factory=BarLayout)
    format_mode: FormatMode | None = FormatMode.DYNAMIC_SCALE
    dynamic_format: bool = True


DEFAULT_STYLE = StyleConfig()


def validate_style(overrides: Mapping[str, Any] | None = None) -> StyleConfig:
    """Merge style overrides onto the defaults, rejecting unknown tokens."""

    return StyleConfig(**_merge(asdict(DEFAULT_STYLE), overrides, kind="style token"))


def build_chart_config(raw: Mapping[str, Any] | None = None) -> ChartConfig:
    """Build a :class:`ChartConfig` from nested ``canvas``/``style``/``bars``/``format`` tables."""

    raw = dict(raw or {})
    unknown = set(raw) - {"canvas", "style", "bars", "format"}
    if unknown:
        raise ChartConfigError(f"Unknown config section: {sorted(unknown)[0]}")
    fmt = raw.get("format", {})
    if not isinstance(fmt, Mapping):
        raise ChartConfigError("`format` must be a table")
    fmt_raw = _merge({"mode": FormatMode.DYNAMIC_SCALE.value, "dynamic": True}, fmt, kind="format option")
    if not isinstance(fmt_raw["dynamic"], bool):
        raise ChartConfigError("`format.dynamic` must be a boolean")
    return ChartConfig(
        canvas=Canvas(**_merge(asdict(Canvas()), _table(raw, "canvas"), kind="canvas option")),
        style=validate_style(_table(raw, "style")),
        bars=BarLayout(**_merge(asdict(BarLayout()), _table(raw, "bars"), kind="bar option")),
        format_mode=parse_format_mode(fmt_raw["mode"]),
        dynamic_format=fmt_raw["dynamic"],
    )


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartConfigError(f"invalid chart config {config_path}: {exc}") from exc
    return build_chart_config(raw)


def _table(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    table = raw.get(name, {})
    if not isinstance(table, Mapping):
        raise ChartConfigError(f"`{name}` must be a table")
    return table


def _merge(base: dict[str, Any], overrides: Mapping[str, Any] | None, *, kind: str) -> dict[str, Any]:
    if overrides:
        for key, value in overrides.items():
            if key not in base:
                raise ChartConfigError(f"Unknown {kind}: {key}")
            base[key] = value
    return base

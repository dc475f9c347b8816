from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional

DATA_URL_PREFIX = "data:image/svg+xml;utf8,"
SVG_NS = "http://www.w3.org/2000/svg"

Anchor = Literal["start", "middle", "end"]


def escape_text(text: str) -> str:
    """Escape ``&`` only; other markup characters pass through unchanged."""

    return str(text).replace("&", "&amp;")


def num(value: float) -> str:
    """Coordinate text with at most two decimals and no trailing zeros."""

    out = f"{float(value):.2f}".rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def svg_color(hex_color: str) -> tuple[str, Optional[float]]:
    """Convert ``#RRGGBB[AA]`` into ``rgb(r,g,b)`` plus an opacity when alpha < 255.

    Functional notation keeps ``#`` out of the data URL.
    """

    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    alpha = int(h[6:8], 16) if len(h) == 8 else 255
    opacity = None if alpha == 255 else round(alpha / 255.0, 3)
    return f"rgb({r},{g},{b})", opacity


def _paint(attr: str, hex_color: Optional[str]) -> str:
    if hex_color is None:
        return f'{attr}="none"'
    color, opacity = svg_color(hex_color)
    out = f'{attr}="{color}"'
    if opacity is not None:
        out += f' {attr}-opacity="{num(opacity)}"'
    return out


@dataclass
class SvgDocument:
    width: float
    height: float
    font_family: str
    background: str = "#FFFFFF"
    elements: list[str] = field(default_factory=list)

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[str],
        rx: float = 0.0,
        role: str | None = None,
    ) -> None:
        extra = f' rx="{num(rx)}"' if rx else ""
        self.elements.append(
            f'<rect{_role(role)} x="{num(x)}" y="{num(y)}" width="{num(max(width, 0.0))}" '
            f'height="{num(max(height, 0.0))}"{extra} {_paint("fill", fill)}/>'
        )

    def line(
        self,
        p0: tuple[float, float],
        p1: tuple[float, float],
        *,
        stroke: str,
        width: float = 1.0,
        dash: str | None = None,
        role: str | None = None,
    ) -> None:
        dashed = f' stroke-dasharray="{dash}"' if dash else ""
        self.elements.append(
            f'<line{_role(role)} x1="{num(p0[0])}" y1="{num(p0[1])}" x2="{num(p1[0])}" y2="{num(p1[1])}" '
            f'{_paint("stroke", stroke)} stroke-width="{num(width)}"{dashed}/>'
        )

    def polyline(
        self,
        points: Iterable[tuple[float, float]],
        *,
        stroke: str,
        width: float = 1.0,
        role: str | None = None,
    ) -> None:
        coords = " ".join(f"{num(x)},{num(y)}" for x, y in points)
        self.elements.append(
            f'<polyline{_role(role)} points="{coords}" fill="none" {_paint("stroke", stroke)} '
            f'stroke-width="{num(width)}" stroke-linejoin="round" stroke-linecap="round"/>'
        )

    def text(
        self,
        x: float,
        y: float,
        content: str,
        *,
        size: float,
        fill: str,
        anchor: Anchor = "start",
        weight: str | None = None,
        role: str | None = None,
    ) -> None:
        bold = f' font-weight="{weight}"' if weight else ""
        self.elements.append(
            f'<text{_role(role)} x="{num(x)}" y="{num(y)}" font-size="{num(size)}" '
            f'text-anchor="{anchor}"{bold} {_paint("fill", fill)}>{escape_text(content)}</text>'
        )

    def to_markup(self) -> str:
        w = num(self.width)
        h = num(self.height)
        head = (
            f'<svg xmlns="{SVG_NS}" width="{w}" height="{h}" viewBox="0 0 {w} {h}" '
            f"font-family=\"{escape_text(self.font_family)}\">"
        )
        background = f'<rect x="0" y="0" width="{w}" height="{h}" {_paint("fill", self.background)}/>'
        return head + background + "".join(self.elements) + "</svg>"


def _role(role: str | None) -> str:
    return f' class="{role}"' if role else ""


def to_data_url(markup: str) -> str:
    return DATA_URL_PREFIX + markup

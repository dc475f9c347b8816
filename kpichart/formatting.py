from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
import logging
import math
from typing import Literal

LOGGER = logging.getLogger(__name__)

PLACEHOLDER_GLYPH = "--"

FormatKind = Literal["scaled", "percentage", "fixed"]


class FormatMode(str, Enum):
    DYNAMIC_SCALE = "dynamic-scale"
    DYNAMIC_PERCENT = "dynamic-percent"
    FIXED_WHOLE = "fixed-whole"
    FIXED_1DP = "fixed-1dp"
    FIXED_2DP = "fixed-2dp"
    FIXED_PERCENT = "fixed-percent"


@dataclass(frozen=True)
class FormatSpec:
    kind: FormatKind
    decimals: int
    suffix: str = ""
    divisor: float = 1.0


# (lower bound inclusive, divisor, suffix, decimals), checked top-down.
MAGNITUDE_TIERS: tuple[tuple[float, float, str, int], ...] = (
    (1e14, 1e12, "T", 0),
    (1e13, 1e12, "T", 1),
    (1e12, 1e12, "T", 2),
    (1e11, 1e9, "B", 0),
    (1e10, 1e9, "B", 1),
    (1e9, 1e9, "B", 2),
    (1e8, 1e6, "M", 0),
    (1e7, 1e6, "M", 1),
    (1e6, 1e6, "M", 2),
    (1e5, 1e3, "K", 0),
    (1e4, 1e3, "K", 1),
    (1e3, 1e3, "K", 2),
    (1e-3, 1.0, "", 2),
)

FIXED_2DP = FormatSpec(kind="fixed", decimals=2)
PERCENT_2DP = FormatSpec(kind="percentage", decimals=2, suffix="%")
_SUB_THRESHOLD = FormatSpec(kind="scaled", decimals=3)

_FIXED_SPECS: dict[FormatMode, FormatSpec] = {
    FormatMode.FIXED_WHOLE: FormatSpec(kind="fixed", decimals=0),
    FormatMode.FIXED_1DP: FormatSpec(kind="fixed", decimals=1),
    FormatMode.FIXED_2DP: FIXED_2DP,
    FormatMode.FIXED_PERCENT: PERCENT_2DP,
    FormatMode.DYNAMIC_PERCENT: PERCENT_2DP,
}


def parse_format_mode(raw: FormatMode | str | None) -> FormatMode | None:
    """Return the matching mode, or ``None`` for absent or unrecognized values."""

    if raw is None or isinstance(raw, FormatMode):
        return raw
    try:
        return FormatMode(str(raw).strip().lower())
    except ValueError:
        LOGGER.debug("unrecognized format mode %r", raw)
        return None


def choose_format(
    magnitude: float,
    mode: FormatMode | str | None,
    *,
    dynamic: bool = True,
) -> FormatSpec:
    resolved = parse_format_mode(mode)
    if resolved is FormatMode.DYNAMIC_SCALE:
        if not dynamic:
            return FIXED_2DP
        return _scaled_spec(magnitude)
    if resolved is None:
        return FIXED_2DP
    return _FIXED_SPECS[resolved]


def _scaled_spec(magnitude: float) -> FormatSpec:
    size = abs(magnitude)
    if not math.isfinite(size) or size == 0:
        return FormatSpec(kind="scaled", decimals=2)
    for threshold, divisor, suffix, decimals in MAGNITUDE_TIERS:
        if size >= threshold:
            return FormatSpec(kind="scaled", decimals=decimals, suffix=suffix, divisor=divisor)
    return _SUB_THRESHOLD


def render_value(value: float | None, spec: FormatSpec) -> str:
    if value is None or not math.isfinite(value):
        return PLACEHOLDER_GLYPH
    if spec.kind == "percentage":
        return _group(_decimal(value) * 100, spec.decimals) + "%"
    if spec.kind == "scaled":
        scaled = _decimal(value) / _decimal(spec.divisor)
        return _group(scaled, spec.decimals) + spec.suffix
    return _group(_decimal(value), spec.decimals)


def format_value(
    value: float | None,
    mode: FormatMode | str | None,
    *,
    dynamic: bool = True,
) -> str:
    if value is None or not math.isfinite(value):
        return PLACEHOLDER_GLYPH
    return render_value(value, choose_format(abs(value), mode, dynamic=dynamic))


def _decimal(value: float) -> Decimal:
    return Decimal(str(float(value)))


def _group(d: Decimal, decimals: int) -> str:
    try:
        q = d.quantize(Decimal("1").scaleb(-decimals), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        q = d
    if q.is_zero():
        q = abs(q)
    return format(q, f",.{decimals}f")

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RawRow:
    sort_key: Any
    label: str | None
    value: Any
    prior_value: Any = None


@dataclass(frozen=True)
class SeriesPoint:
    sort_key: Any
    label: str
    value: float
    prior_value: float | None = None


@dataclass(frozen=True)
class IndexedPoint(SeriesPoint):
    index: int = 0

    @property
    def has_prior(self) -> bool:
        return self.prior_value is not None


@dataclass(frozen=True)
class BarCategory:
    label: str
    value: float

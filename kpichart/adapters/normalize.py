from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
import logging
import math
from typing import Any

import numpy as np

from kpichart.series import BarCategory, IndexedPoint, RawRow, SeriesPoint


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)


def build_series(
    rows: Iterable[Any] | None = None,
    *,
    data: Any = None,
    sort_key: str = "sort_key",
    label: str = "label",
    value: str = "value",
    prior_value: str = "prior_value",
) -> list[IndexedPoint]:
    """Filter, order and index raw rows.

    Rows with a missing primary value or sort key are dropped. The survivors are ordered by
    ascending sort key and receive contiguous indices ``0..N-1``. Rows sharing a
    sort key are resolved last-wins in arrival order.
    """

    if data is not None:
        raw_rows = _rows_from_frame(
            data, sort_key=sort_key, label=label, value=value, prior_value=prior_value
        )
    else:
        raw_rows = [_coerce_row(row, sort_key=sort_key, label=label, value=value, prior_value=prior_value) for row in rows or ()]

    by_key: dict[Any, SeriesPoint] = {}
    dropped = 0
    for row in raw_rows:
        primary = coerce_number(row.value)
        if primary is None or row.sort_key is None:
            dropped += 1
            continue
        if row.sort_key in by_key:
            LOGGER.warning("duplicate sort key %r; keeping the later row", row.sort_key)
        by_key[row.sort_key] = SeriesPoint(
            sort_key=row.sort_key,
            label=str(row.sort_key) if row.label is None else str(row.label),
            value=primary,
            prior_value=coerce_number(row.prior_value),
        )
    if dropped:
        LOGGER.debug("dropped %d row(s) without a primary value or sort key", dropped)

    ordered = sorted(by_key.values(), key=lambda p: p.sort_key)
    return [
        IndexedPoint(
            sort_key=p.sort_key,
            label=p.label,
            value=p.value,
            prior_value=p.prior_value,
            index=i,
        )
        for i, p in enumerate(ordered)
    ]


def build_categories(rows: Iterable[Any] | Mapping[str, Any]) -> list[BarCategory]:
    """Coerce ``(label, value)`` pairs or a label->value mapping into bar categories."""

    items = rows.items() if isinstance(rows, Mapping) else rows
    out: list[BarCategory] = []
    for item in items:
        if isinstance(item, BarCategory):
            cat_label, raw = item.label, item.value
        else:
            cat_label, raw = item
        number = coerce_number(raw)
        if number is None:
            continue
        out.append(BarCategory(label=str(cat_label), value=number))
    return out


def coerce_number(raw: Any) -> float | None:
    """Return ``raw`` as a finite float, or ``None`` when it is blank or not numeric."""

    if raw is None:
        return None
    if torch is not None and isinstance(raw, torch.Tensor):
        if raw.numel() != 1:
            return None
        raw = raw.detach().cpu().item()
    if isinstance(raw, Decimal):
        if not raw.is_finite():
            return None
        return float(raw)
    if isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if not text:
            return None
        try:
            out = float(text)
        except ValueError:
            return None
    else:
        try:
            out = float(raw)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(out):
        return None
    return out


def _coerce_row(row: Any, *, sort_key: str, label: str, value: str, prior_value: str) -> RawRow:
    if isinstance(row, RawRow):
        return row
    if isinstance(row, Mapping):
        return RawRow(
            sort_key=row.get(sort_key),
            label=row.get(label),
            value=row.get(value),
            prior_value=row.get(prior_value),
        )
    if isinstance(row, Sequence) and not isinstance(row, (str, bytes, bytearray)):
        if len(row) == 3:
            return RawRow(sort_key=row[0], label=row[1], value=row[2])
        if len(row) == 4:
            return RawRow(sort_key=row[0], label=row[1], value=row[2], prior_value=row[3])
    raise TypeError(f"unsupported row type: {type(row)!r}")


def _rows_from_frame(
    data: Any,
    *,
    sort_key: str,
    label: str,
    value: str,
    prior_value: str,
) -> list[RawRow]:
    if pd is None:
        raise TypeError("pandas is required when using `data=`")
    if not isinstance(data, pd.DataFrame):
        raise TypeError("`data` must be a pandas DataFrame")
    for column in (sort_key, value):
        if column not in data.columns:
            raise KeyError(f"column not found: {column}")

    keys = data[sort_key].tolist()
    values = _column_values(data[value])
    labels = data[label].tolist() if label in data.columns else [None] * len(keys)
    priors = _column_values(data[prior_value]) if prior_value in data.columns else [None] * len(keys)
    return [
        RawRow(sort_key=k, label=None if _is_missing(lbl) else lbl, value=v, prior_value=p)
        for k, lbl, v, p in zip(keys, labels, values, priors, strict=True)
    ]


def _column_values(column: Any) -> list[Any]:
    arr = column.to_numpy()
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False).tolist()
    return [None if _is_missing(v) else v for v in arr.tolist()]


def _is_missing(raw: Any) -> bool:
    if raw is None:
        return True
    try:
        return bool(pd.isna(raw)) if pd is not None else False
    except (TypeError, ValueError):
        return False

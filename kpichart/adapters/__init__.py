from .normalize import build_categories, build_series, coerce_number

__all__ = ["build_categories", "build_series", "coerce_number"]

"""
Utility functions for chart post-processing, formatting and validation.

Pure Python module with no Streamlit dependency — safe to use in tests.
None of the helpers mutate the sequences they are given.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from chart_transformers import ChartDataPoint, percentage_of
from constants import CHART_TYPES, DEFAULT_CHART_TYPE, PIE_PALETTE, UNSET_COLORS


# =============================================================================
# Chart utilities
# =============================================================================

def calculate_total(points: Iterable[ChartDataPoint]) -> float:
    """Sum of all point values (``0`` for no points)."""
    return sum(point.value for point in points)


def filter_empty_points(points: Iterable[ChartDataPoint]) -> list[ChartDataPoint]:
    """Points with a positive value, in their original order."""
    return [point for point in points if point.value > 0]


def sort_by_value(points: Iterable[ChartDataPoint]) -> list[ChartDataPoint]:
    """New list ordered by value, largest first; ties keep their input order."""
    return sorted(points, key=lambda point: point.value, reverse=True)


def get_max_point(points: Iterable[ChartDataPoint]) -> ChartDataPoint | None:
    """First point holding the largest value, or ``None`` when empty."""
    best = None
    for point in points:
        if best is None or point.value > best.value:
            best = point
    return best


def get_min_point(points: Iterable[ChartDataPoint]) -> ChartDataPoint | None:
    """First point holding the smallest value, or ``None`` when empty."""
    best = None
    for point in points:
        if best is None or point.value < best.value:
            best = point
    return best


# =============================================================================
# Generic chart math
# =============================================================================

def calculate_percentages(values: Sequence[float]) -> list[float]:
    """Percent share of each value; all zeros when the values sum to zero."""
    total = sum(values)
    return [percentage_of(value, total) for value in values]


def transform_generic_chart_data(
    items: Sequence[tuple[str, float]],
    colors: Sequence[str],
) -> list[ChartDataPoint]:
    """Build points from ``(label, value)`` pairs, cycling through *colors*."""
    percentages = calculate_percentages([value for _, value in items])
    return [
        ChartDataPoint(
            label=label,
            value=value,
            percentage=pct,
            color=colors[index % len(colors)] if colors else '',
        )
        for index, ((label, value), pct) in enumerate(zip(items, percentages))
    ]


def assign_palette_colors(
    points: Sequence[ChartDataPoint],
    palette: Sequence[str] = PIE_PALETTE,
) -> list[ChartDataPoint]:
    """Give every uncolored point the palette color for its position.

    Points that already carry a color keep it, so the sex chart stays
    blue/purple while the other categories get the cycling pie palette.
    """
    return [
        replace(point, color=palette[index % len(palette)])
        if point.color in UNSET_COLORS else point
        for index, point in enumerate(points)
    ]


def get_single_slice(points: Iterable[ChartDataPoint]) -> ChartDataPoint | None:
    """The only non-empty point, or ``None`` when there are zero or several."""
    non_empty = filter_empty_points(points)
    return non_empty[0] if len(non_empty) == 1 else None


def is_single_slice(points: Iterable[ChartDataPoint]) -> bool:
    """True when exactly one point has a positive value (a 100 % pie)."""
    return get_single_slice(points) is not None


# =============================================================================
# Formatting
# =============================================================================

def format_percentage(value: float, decimals: int = 1) -> str:
    """Format a percentage for labels, e.g. ``46.153`` → ``"46.2%"``."""
    return f"{value:.{decimals}f}%"


def format_count(value: float) -> str:
    """Format a count with thousands separators, e.g. ``1234`` → ``"1,234"``."""
    return f"{value:,.0f}"


# =============================================================================
# Query-parameter / input validation
# =============================================================================

def validate_chart_type(value: str | None, default: str = DEFAULT_CHART_TYPE) -> str:
    """Return *value* if it is a known chart tag, else *default*."""
    if value in CHART_TYPES:
        return value  # type: ignore[return-value]
    return default


def validate_barangay(value: str | None, barangay_lbl: dict[str, str]) -> str:
    """Return *value* if it exists in *barangay_lbl*, else the first available barangay."""
    if value and value in barangay_lbl:
        return value
    return next(iter(barangay_lbl))


def validate_flag(value: str | int | None, default: bool = False) -> bool:
    """Interpret a ``0``/``1`` query parameter, falling back to *default*."""
    try:
        val = int(value)  # type: ignore[arg-type]
    except (ValueError, TypeError):
        return default
    if val not in (0, 1):
        return default
    return bool(val)

"""
Chart data transformers for demographic distributions.

Pure functions that turn aggregate resident counts into chart-ready
``ChartDataPoint`` lists.  No Streamlit or pandas dependency, so the
functions are safe to call from any layer and from tests.

Counts are expected to be non-negative; negative values are not
validated and flow straight into the percentage arithmetic.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any, Literal, Union, overload

from constants import (
    CHART_CIVIL_STATUS,
    CHART_COLORS,
    CHART_DEPENDENCY,
    CHART_EMPLOYMENT,
    CHART_SEX,
    CHART_TYPES,
    CIVIL_STATUS_LABELS,
    DEFAULT_CHART_TITLES,
    DEPENDENCY_LABELS,
    EMPLOYMENT_LABELS,
    SEX_LABELS,
)

ChartType = Literal['dependency', 'sex', 'civilStatus', 'employment']


# =============================================================================
# Data model
# =============================================================================

@dataclass(frozen=True)
class ChartDataPoint:
    """One slice / bar of a distribution chart."""

    label: str
    value: float
    percentage: float
    color: str = ''

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _camel_case(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


class _CountRecord:
    """Shared helpers for the flat count records below."""

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, float]):
        """Build the record from a dict with snake_case or camelCase keys.

        Raises
        ------
        KeyError
            When a field is missing under both spellings.
        """
        values = {}
        for field in fields(cls):  # type: ignore[arg-type]
            if field.name in mapping:
                values[field.name] = mapping[field.name]
            else:
                values[field.name] = mapping[_camel_case(field.name)]
        return cls(**values)

    def total(self) -> float:
        return sum(getattr(self, field.name) for field in fields(self))  # type: ignore[arg-type]


@dataclass(frozen=True)
class DependencyData(_CountRecord):
    young_dependents: float   # under 15
    working_age: float        # 15-64
    old_dependents: float     # 65 and over


@dataclass(frozen=True)
class SexData(_CountRecord):
    male: float
    female: float


@dataclass(frozen=True)
class CivilStatusData(_CountRecord):
    single: float
    married: float
    widowed: float
    divorced: float
    separated: float
    annulled: float
    registered_partnership: float
    live_in: float


@dataclass(frozen=True)
class EmploymentStatusData(_CountRecord):
    employed: float
    unemployed: float
    self_employed: float
    student: float
    retired: float
    homemaker: float
    disabled: float
    other: float


ChartData = Union[DependencyData, SexData, CivilStatusData, EmploymentStatusData]


# =============================================================================
# Category transformers
# =============================================================================

def percentage_of(value: float, total: float) -> float:
    """Share of *total* in percent, or ``0`` when *total* is not positive."""
    return (value / total) * 100 if total > 0 else 0


def _build_points(
    record: _CountRecord,
    labels: tuple[tuple[str, str], ...],
    colors: Mapping[str, str],
) -> list[ChartDataPoint]:
    total = record.total()
    points = []
    for field_name, label in labels:
        value = getattr(record, field_name)
        points.append(ChartDataPoint(
            label=label,
            value=value,
            percentage=percentage_of(value, total),
            color=colors.get(field_name, ''),
        ))
    return points


def transform_dependency_data(data: DependencyData) -> list[ChartDataPoint]:
    """Young / working-age / elderly split, in that order."""
    return _build_points(data, DEPENDENCY_LABELS, CHART_COLORS[CHART_DEPENDENCY])


def transform_sex_data(data: SexData) -> list[ChartDataPoint]:
    """Male / female split, colored to match the population pyramid."""
    return _build_points(data, SEX_LABELS, CHART_COLORS[CHART_SEX])


def transform_civil_status_data(data: CivilStatusData) -> list[ChartDataPoint]:
    return _build_points(data, CIVIL_STATUS_LABELS, CHART_COLORS[CHART_CIVIL_STATUS])


def transform_employment_data(data: EmploymentStatusData) -> list[ChartDataPoint]:
    return _build_points(data, EMPLOYMENT_LABELS, CHART_COLORS[CHART_EMPLOYMENT])


# =============================================================================
# Dispatch
# =============================================================================

_TRANSFORMERS: dict[str, tuple[type, Callable[[Any], list[ChartDataPoint]]]] = {
    CHART_DEPENDENCY: (DependencyData, transform_dependency_data),
    CHART_SEX: (SexData, transform_sex_data),
    CHART_CIVIL_STATUS: (CivilStatusData, transform_civil_status_data),
    CHART_EMPLOYMENT: (EmploymentStatusData, transform_employment_data),
}


@overload
def transform_chart_data(
    chart_type: Literal['dependency'], data: DependencyData,
) -> list[ChartDataPoint]: ...


@overload
def transform_chart_data(
    chart_type: Literal['sex'], data: SexData,
) -> list[ChartDataPoint]: ...


@overload
def transform_chart_data(
    chart_type: Literal['civilStatus'], data: CivilStatusData,
) -> list[ChartDataPoint]: ...


@overload
def transform_chart_data(
    chart_type: Literal['employment'], data: EmploymentStatusData,
) -> list[ChartDataPoint]: ...


def transform_chart_data(chart_type, data):
    """Route *data* to the transformer registered for *chart_type*.

    Raises
    ------
    ValueError
        If *chart_type* is not one of the four chart tags.
    TypeError
        If *data* is not the record type that *chart_type* expects.
    """
    if chart_type not in CHART_TYPES:
        raise ValueError(f"Unknown chart type: {chart_type}")
    record_cls, transform = _TRANSFORMERS[chart_type]

    if not isinstance(data, record_cls):
        raise TypeError(
            f"Chart type {chart_type!r} expects {record_cls.__name__}, "
            f"got {type(data).__name__}"
        )
    return transform(data)


def transform_chart_data_legacy(
    chart_type: str,
    data: ChartData | Mapping[str, float],
) -> list[ChartDataPoint]:
    """Untyped entry point kept for older call sites.

    Plain dicts are cast to the record for *chart_type* without checking
    that they belong to that chart.

    .. deprecated::
        Use :func:`transform_chart_data` with a record instance.
    """
    warnings.warn(
        "transform_chart_data_legacy is deprecated; "
        "use transform_chart_data with a count record",
        DeprecationWarning,
        stacklevel=2,
    )
    if chart_type in CHART_TYPES and isinstance(data, Mapping):
        data = _TRANSFORMERS[chart_type][0].from_mapping(data)
    return transform_chart_data(chart_type, data)  # type: ignore[call-overload]


# =============================================================================
# Titles
# =============================================================================

def get_chart_title(chart_type: ChartType, custom_title: str | None = None) -> str:
    """Return *custom_title* when given, else the default title for *chart_type*."""
    return custom_title or DEFAULT_CHART_TITLES[chart_type]

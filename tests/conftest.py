"""Shared fixtures for dashboard tests."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from chart_transformers import ChartDataPoint


@pytest.fixture()
def today() -> date:
    """Fixed reference date so ages in ``sample_residents`` are stable."""
    return date(2025, 6, 15)


@pytest.fixture()
def sample_residents() -> pd.DataFrame:
    """Minimal residents DataFrame spanning two barangays.

    Ages on 2025-06-15: 5, 35, 34, 75, 9, unknown (B001) and 45, 1 (B002).
    The raw status spellings mirror what the registry export contains.
    """
    return pd.DataFrame({
        'barangay_code': ['B001'] * 6 + ['B002'] * 2,
        'barangay_name': ['San Isidro'] * 6 + ['Poblacion'] * 2,
        'birthdate': [
            '2020-01-10', '1990-06-15', '1990-06-16', '1950-03-01',
            '2015-12-31', None, '1980-01-01', '2024-01-01',
        ],
        'sex': ['male', 'Female', 'male', 'female', 'female', 'male', 'male', 'female'],
        'civil_status': [
            'single', 'Married', 'live-in', 'widowed',
            'single', 'registered partnership', 'divorced', 'unknown status',
        ],
        'employment_status': [
            'student', 'employed', 'self-employed', 'retired',
            'student', 'housewife', 'freelancer', '',
        ],
    })


@pytest.fixture()
def sample_points() -> list[ChartDataPoint]:
    """Three points with values 5, 0 and 10."""
    return [
        ChartDataPoint(label='A', value=5, percentage=100 / 3, color=''),
        ChartDataPoint(label='B', value=0, percentage=0, color=''),
        ChartDataPoint(label='C', value=10, percentage=200 / 3, color=''),
    ]

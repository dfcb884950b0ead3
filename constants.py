"""
Constants for the RBI demographic dashboard.

Centralizes chart tags, titles, palettes, category orders and
configuration values used throughout the dashboard modules.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Chart types (string tags are part of the URL / caller contract)
# =============================================================================
CHART_DEPENDENCY: Final = 'dependency'
CHART_SEX: Final = 'sex'
CHART_CIVIL_STATUS: Final = 'civilStatus'
CHART_EMPLOYMENT: Final = 'employment'

CHART_TYPES: tuple[str, ...] = (
    CHART_DEPENDENCY,
    CHART_SEX,
    CHART_CIVIL_STATUS,
    CHART_EMPLOYMENT,
)

DEFAULT_CHART_TITLES: dict[str, str] = {
    CHART_DEPENDENCY: 'Age Distribution',
    CHART_SEX: 'Sex Distribution',
    CHART_CIVIL_STATUS: 'Civil Status Distribution',
    CHART_EMPLOYMENT: 'Employment Status',
}

# =============================================================================
# Colors
# =============================================================================
# Only sex has a fixed palette (matches the population pyramid); the other
# categories are colored by the caller.
CHART_COLORS: dict[str, dict[str, str]] = {
    CHART_SEX: {
        'male': '#3b82f6',
        'female': '#a855f7',
    },
    CHART_DEPENDENCY: {},
    CHART_CIVIL_STATUS: {},
    CHART_EMPLOYMENT: {},
}

# Cycled by position for points that carry no color of their own
PIE_PALETTE: list[str] = [
    '#36a2eb', '#ff6384', '#ff9f40', '#ffcd56', '#4bc0c0',
    '#9966ff', '#c9cbcf', '#ff4757', '#2ed573', '#ffa502',
    '#3742fa', '#ff3838', '#70a1ff', '#7bed9f', '#5352ed',
]

# Colors treated as "not set" when applying the pie palette
UNSET_COLORS: tuple[str, ...] = ('', '#000000')

# =============================================================================
# Category labels, in display order: (record field, label)
# =============================================================================
DEPENDENCY_LABELS: tuple[tuple[str, str], ...] = (
    ('young_dependents', 'Young (0-14)'),
    ('working_age', 'Working (15-64)'),
    ('old_dependents', 'Elderly (65+)'),
)

SEX_LABELS: tuple[tuple[str, str], ...] = (
    ('male', 'Male'),
    ('female', 'Female'),
)

CIVIL_STATUS_LABELS: tuple[tuple[str, str], ...] = (
    ('single', 'Single'),
    ('married', 'Married'),
    ('widowed', 'Widowed'),
    ('divorced', 'Divorced'),
    ('separated', 'Separated'),
    ('annulled', 'Annulled'),
    ('registered_partnership', 'Registered Partnership'),
    ('live_in', 'Live-in'),
)

EMPLOYMENT_LABELS: tuple[tuple[str, str], ...] = (
    ('employed', 'Employed'),
    ('unemployed', 'Unemployed'),
    ('self_employed', 'Self-employed'),
    ('student', 'Student'),
    ('retired', 'Retired'),
    ('homemaker', 'Homemaker'),
    ('disabled', 'Disabled'),
    ('other', 'Other'),
)

# =============================================================================
# Raw status values (lower-cased) -> record field
# =============================================================================
CIVIL_STATUS_ALIASES: dict[str, str] = {
    'single': 'single',
    'married': 'married',
    'widowed': 'widowed',
    'divorced': 'divorced',
    'separated': 'separated',
    'annulled': 'annulled',
    'registered partnership': 'registered_partnership',
    'registered_partnership': 'registered_partnership',
    'live-in': 'live_in',
    'live_in': 'live_in',
    'livein': 'live_in',
}

# Any other non-blank employment status is counted as 'other'
EMPLOYMENT_STATUS_ALIASES: dict[str, str] = {
    'employed': 'employed',
    'unemployed': 'unemployed',
    'self-employed': 'self_employed',
    'self_employed': 'self_employed',
    'selfemployed': 'self_employed',
    'student': 'student',
    'retired': 'retired',
    'homemaker': 'homemaker',
    'housewife': 'homemaker',
    'househusband': 'homemaker',
    'disabled': 'disabled',
    'person with disability': 'disabled',
    'pwd': 'disabled',
}

# =============================================================================
# Age bands (population pyramid)
# =============================================================================
AGE_BAND_WIDTH: int = 5
OLDEST_AGE_BAND_START: int = 100

STANDARD_AGE_GROUPS: list[str] = [
    f'{start}-{start + AGE_BAND_WIDTH - 1}'
    for start in range(0, OLDEST_AGE_BAND_START, AGE_BAND_WIDTH)
] + [f'{OLDEST_AGE_BAND_START}+']

WORKING_AGE_MIN: int = 15      # first working-age year
WORKING_AGE_MAX: int = 64      # last working-age year

# =============================================================================
# Required columns in the residents Parquet file
# =============================================================================
REQUIRED_COLUMNS: list[str] = [
    'barangay_code',
    'birthdate',
    'sex',
    'civil_status',
    'employment_status',
]

OPTIONAL_COLUMNS: list[str] = ['barangay_name', 'household_code']

# =============================================================================
# Query-parameter defaults
# =============================================================================
DEFAULT_CHART_TYPE: str = CHART_SEX

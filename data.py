"""
Data loading, filtering, and aggregation functions.

Turns resident rows into the count records consumed by
``chart_transformers``.  All heavy data operations live here so they can
be tested independently of the Streamlit UI layer.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from typing import Union

import pandas as pd
import streamlit as st

from chart_transformers import (
    CivilStatusData,
    DependencyData,
    EmploymentStatusData,
    SexData,
    percentage_of,
)
from constants import (
    AGE_BAND_WIDTH,
    CIVIL_STATUS_ALIASES,
    CIVIL_STATUS_LABELS,
    EMPLOYMENT_LABELS,
    EMPLOYMENT_STATUS_ALIASES,
    OLDEST_AGE_BAND_START,
    REQUIRED_COLUMNS,
    STANDARD_AGE_GROUPS,
    WORKING_AGE_MAX,
    WORKING_AGE_MIN,
)

logger = logging.getLogger(__name__)

DateLike = Union[str, date, pd.Timestamp]


# =============================================================================
# Schema validation
# =============================================================================

def validate_schema(df: pd.DataFrame) -> None:
    """Check that *df* contains every column listed in REQUIRED_COLUMNS.

    Raises
    ------
    ValueError
        With a message listing the missing columns.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(
            f"Residents file is missing required columns: {', '.join(missing)}"
        )


# =============================================================================
# Data loading and access control
# =============================================================================

def parse_barangay_keys(raw: str) -> dict[str, str]:
    """Parse ``"code=key,code=key"`` into a barangay-code → access-key dict.

    Blank entries are ignored; an entry without ``=`` is a configuration
    error.
    """
    keys: dict[str, str] = {}
    for entry in raw.split(','):
        entry = entry.strip()
        if not entry:
            continue
        code, sep, key = entry.partition('=')
        if not sep:
            raise ValueError(f"Malformed BARANGAY_KEYS entry: {entry!r}")
        keys[code.strip()] = key.strip()
    return keys


def filter_by_access(
    df: pd.DataFrame,
    key: str | None,
    key_all: str,
    barangay_keys: dict[str, str],
) -> pd.DataFrame:
    """Restrict *df* to the barangays that *key* unlocks.

    *key_all* unlocks every barangay; otherwise a barangay is visible when
    its entry in *barangay_keys* equals *key*.
    """
    base_mask = df['barangay_code'].notna() & (df['barangay_code'].astype(str) != '')

    if key_all and key == key_all:
        return df[base_mask]

    allowed = [code for code, code_key in barangay_keys.items() if key and code_key == key]
    if not allowed:
        logger.warning("Access key does not unlock any barangay")
    return df[base_mask & df['barangay_code'].astype(str).isin(allowed)]


def _access_config() -> tuple[str, str, dict[str, str]]:
    # Support both Streamlit secrets.toml and environment variables (Cloud Run)
    try:
        data_url = st.secrets["residents_url"]
        key_all = st.secrets["key_all"]
        barangay_keys = dict(st.secrets.get("barangay_keys", {}))
    except (AttributeError, KeyError, FileNotFoundError):
        data_url = os.getenv("RESIDENTS_URL", "residents.parquet")
        key_all = os.getenv("KEY_ALL", "")
        barangay_keys = parse_barangay_keys(os.getenv("BARANGAY_KEYS", ""))
    return data_url, key_all, barangay_keys


@st.cache_data
def load_residents(key: str | None) -> pd.DataFrame:
    """Load residents from a Parquet file and filter by barangay access key.

    Supports both Streamlit secrets and environment variables for
    configuration.  Validates the schema after loading.
    """
    data_url, key_all, barangay_keys = _access_config()

    df = pd.read_parquet(data_url)
    validate_schema(df)
    logger.info("Loaded %d resident rows from %s", len(df), data_url)

    return filter_by_access(df, key, key_all, barangay_keys)


def barangay_labels(df: pd.DataFrame) -> dict[str, str]:
    """Barangay code → display name, falling back to the code itself."""
    if 'barangay_name' not in df.columns:
        codes = sorted(df['barangay_code'].dropna().astype(str).unique())
        return {code: code for code in codes}

    labels = df[['barangay_code', 'barangay_name']].dropna(subset=['barangay_code'])
    return (
        labels
        .assign(barangay_name=labels['barangay_name'].fillna(labels['barangay_code']))
        .drop_duplicates('barangay_code')
        .astype(str)
        .sort_values('barangay_name')
        .set_index('barangay_code')['barangay_name']
        .to_dict()
    )


def filter_barangay(df: pd.DataFrame, barangay_code: str | list[str]) -> pd.DataFrame:
    """Residents of one or more barangays."""
    if isinstance(barangay_code, str):
        barangay_code = [barangay_code]
    return df[df['barangay_code'].astype(str).isin(barangay_code)]


# =============================================================================
# Ages and the population pyramid
# =============================================================================

def calculate_age(birthdate: DateLike, today: date | None = None) -> int:
    """Age in whole years on *today* (defaults to the current date)."""
    born = pd.Timestamp(birthdate)
    today = today or date.today()
    had_birthday = (today.month, today.day) >= (born.month, born.day)
    return today.year - born.year - (0 if had_birthday else 1)


def get_age_group(age: int) -> str:
    """Five-year band for *age*: ``'0-4'`` … ``'95-99'``, then ``'100+'``."""
    if age >= OLDEST_AGE_BAND_START:
        return STANDARD_AGE_GROUPS[-1]
    return STANDARD_AGE_GROUPS[max(age, 0) // AGE_BAND_WIDTH]


def _band_start(age_group: str) -> int:
    return int(age_group.rstrip('+').split('-')[0])


def population_pyramid_data(df: pd.DataFrame, today: date | None = None) -> pd.DataFrame:
    """Male and female counts per standard age band.

    Residents without a readable birthdate or a sex are left out of the
    counts but still count towards the population used for the
    percentages.  Any non-empty sex other than ``male``, whitespace
    included, is counted as female.

    Returns
    -------
    DataFrame
        One row per ``STANDARD_AGE_GROUPS`` band, youngest first, with
        columns ``age_group``, ``male``, ``female``, ``male_pct`` and
        ``female_pct``.
    """
    valid = df.dropna(subset=['birthdate', 'sex'])
    valid = valid[valid['sex'].astype(str) != '']
    # Blank or unparseable birthdates become NaT and are skipped
    born = valid['birthdate'].map(lambda value: pd.to_datetime(value, errors='coerce'))
    valid, born = valid[born.notna()], born[born.notna()]

    counts = pd.DataFrame(0, index=STANDARD_AGE_GROUPS, columns=['male', 'female'])
    if not valid.empty:
        groups = born.map(lambda value: get_age_group(calculate_age(value, today)))
        sexes = valid['sex'].astype(str).str.lower().eq('male').map({True: 'male', False: 'female'})
        tally = pd.crosstab(groups.to_numpy(), sexes.to_numpy())
        counts = tally.reindex(index=STANDARD_AGE_GROUPS, columns=['male', 'female'], fill_value=0)

    total_population = len(df)
    result = pd.DataFrame({
        'age_group': STANDARD_AGE_GROUPS,
        'male': counts['male'].to_numpy(dtype=int),
        'female': counts['female'].to_numpy(dtype=int),
    })
    result['male_pct'] = [percentage_of(v, total_population) for v in result['male']]
    result['female_pct'] = [percentage_of(v, total_population) for v in result['female']]
    return result


def population_stats(pyramid: pd.DataFrame) -> dict[str, float]:
    """Population totals and sex shares from pyramid data."""
    total_male = int(pyramid['male'].sum())
    total_female = int(pyramid['female'].sum())
    total_population = total_male + total_female
    return {
        'total_male': total_male,
        'total_female': total_female,
        'total_population': total_population,
        'male_pct': percentage_of(total_male, total_population),
        'female_pct': percentage_of(total_female, total_population),
    }


# =============================================================================
# Count records for the distribution charts
# =============================================================================

def dependency_counts(pyramid: pd.DataFrame) -> DependencyData:
    """Young (0-14), working-age (15-64) and elderly (65+) totals."""
    starts = pyramid['age_group'].map(_band_start)
    totals = pyramid['male'] + pyramid['female']

    young = int(totals[starts < WORKING_AGE_MIN].sum())
    old = int(totals[starts > WORKING_AGE_MAX].sum())
    working = int(totals.sum()) - young - old

    return DependencyData(young_dependents=young, working_age=working, old_dependents=old)


def dependency_ratios(counts: DependencyData) -> dict[str, float]:
    """Dependents per 100 working-age residents (all zero without any)."""
    working = counts.working_age
    return {
        'total': percentage_of(counts.young_dependents + counts.old_dependents, working),
        'young': percentage_of(counts.young_dependents, working),
        'old': percentage_of(counts.old_dependents, working),
    }


def _normalised(series: pd.Series) -> pd.Series:
    return series.dropna().astype(str).str.strip().str.lower()


def sex_counts(df: pd.DataFrame) -> SexData:
    sexes = _normalised(df['sex'])
    return SexData(male=int((sexes == 'male').sum()), female=int((sexes == 'female').sum()))


def civil_status_counts(df: pd.DataFrame) -> CivilStatusData:
    """Counts per civil status; unrecognised statuses are not counted."""
    tally = _normalised(df['civil_status']).map(CIVIL_STATUS_ALIASES).value_counts()
    return CivilStatusData(**{
        field: int(tally.get(field, 0)) for field, _ in CIVIL_STATUS_LABELS
    })


def employment_status_counts(df: pd.DataFrame) -> EmploymentStatusData:
    """Counts per employment status; any other non-blank status is 'other'."""
    statuses = _normalised(df['employment_status'])
    statuses = statuses[statuses != '']
    tally = statuses.map(EMPLOYMENT_STATUS_ALIASES).fillna('other').value_counts()
    return EmploymentStatusData(**{
        field: int(tally.get(field, 0)) for field, _ in EMPLOYMENT_LABELS
    })

"""Tests for data.py — access filtering, ages, pyramid and count records."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from chart_transformers import CivilStatusData, DependencyData, EmploymentStatusData, SexData
from constants import STANDARD_AGE_GROUPS
from data import (
    barangay_labels,
    calculate_age,
    civil_status_counts,
    dependency_counts,
    dependency_ratios,
    employment_status_counts,
    filter_barangay,
    filter_by_access,
    get_age_group,
    parse_barangay_keys,
    population_pyramid_data,
    population_stats,
    sex_counts,
    validate_schema,
)


@pytest.fixture()
def san_isidro(sample_residents: pd.DataFrame) -> pd.DataFrame:
    return filter_barangay(sample_residents, 'B001')


# =============================================================================
# validate_schema
# =============================================================================

class TestValidateSchema:
    def test_valid_schema(self, sample_residents: pd.DataFrame) -> None:
        # Should not raise
        validate_schema(sample_residents)

    def test_missing_columns(self) -> None:
        df = pd.DataFrame({'barangay_code': ['B001'], 'sex': ['male']})
        with pytest.raises(ValueError, match="missing required columns: birthdate"):
            validate_schema(df)


# =============================================================================
# Access control
# =============================================================================

class TestParseBarangayKeys:
    def test_pairs(self) -> None:
        assert parse_barangay_keys("B001=abc, B002=def") == {'B001': 'abc', 'B002': 'def'}

    def test_empty(self) -> None:
        assert parse_barangay_keys("") == {}

    def test_malformed(self) -> None:
        with pytest.raises(ValueError, match="Malformed"):
            parse_barangay_keys("B001")


class TestFilterByAccess:
    def test_key_all(self, sample_residents: pd.DataFrame) -> None:
        result = filter_by_access(sample_residents, 'master', 'master', {})
        assert len(result) == len(sample_residents)

    def test_barangay_key(self, sample_residents: pd.DataFrame) -> None:
        result = filter_by_access(sample_residents, 'k2', 'master', {'B001': 'k1', 'B002': 'k2'})
        assert set(result['barangay_code']) == {'B002'}

    def test_unknown_key(self, sample_residents: pd.DataFrame) -> None:
        result = filter_by_access(sample_residents, 'nope', 'master', {'B001': 'k1'})
        assert len(result) == 0

    def test_missing_key_with_blank_key_all(self, sample_residents: pd.DataFrame) -> None:
        result = filter_by_access(sample_residents, None, '', {'B001': ''})
        assert len(result) == 0

    def test_drops_rows_without_barangay(self, sample_residents: pd.DataFrame) -> None:
        df = sample_residents.copy()
        df.loc[0, 'barangay_code'] = None
        result = filter_by_access(df, 'master', 'master', {})
        assert len(result) == len(df) - 1


class TestBarangayLabels:
    def test_names(self, sample_residents: pd.DataFrame) -> None:
        assert barangay_labels(sample_residents) == {'B002': 'Poblacion', 'B001': 'San Isidro'}

    def test_falls_back_to_code(self, sample_residents: pd.DataFrame) -> None:
        df = sample_residents.drop(columns='barangay_name')
        assert barangay_labels(df) == {'B001': 'B001', 'B002': 'B002'}

    def test_empty(self, sample_residents: pd.DataFrame) -> None:
        assert barangay_labels(sample_residents.iloc[:0]) == {}

    def test_missing_name_uses_code(self) -> None:
        df = pd.DataFrame({'barangay_code': ['B1', 'B2'], 'barangay_name': ['San Isidro', None]})
        assert barangay_labels(df) == {'B1': 'San Isidro', 'B2': 'B2'}


# =============================================================================
# Ages
# =============================================================================

class TestCalculateAge:
    def test_on_birthday(self, today: date) -> None:
        assert calculate_age('1990-06-15', today) == 35

    def test_day_before_birthday(self, today: date) -> None:
        assert calculate_age('1990-06-16', today) == 34

    def test_accepts_date(self, today: date) -> None:
        assert calculate_age(date(2000, 1, 1), today) == 25


class TestGetAgeGroup:
    @pytest.mark.parametrize("age,group", [
        (0, '0-4'), (4, '0-4'), (5, '5-9'), (14, '10-14'),
        (64, '60-64'), (99, '95-99'), (100, '100+'), (117, '100+'),
    ])
    def test_bands(self, age: int, group: str) -> None:
        assert get_age_group(age) == group

    def test_negative_age(self) -> None:
        assert get_age_group(-1) == '0-4'


# =============================================================================
# Population pyramid
# =============================================================================

class TestPopulationPyramidData:
    def test_all_bands_present(self, san_isidro: pd.DataFrame, today: date) -> None:
        result = population_pyramid_data(san_isidro, today)
        assert list(result['age_group']) == STANDARD_AGE_GROUPS

    def test_counts(self, san_isidro: pd.DataFrame, today: date) -> None:
        result = population_pyramid_data(san_isidro, today).set_index('age_group')
        assert result.loc['5-9', 'male'] == 1
        assert result.loc['5-9', 'female'] == 1
        assert result.loc['30-34', 'male'] == 1
        assert result.loc['35-39', 'female'] == 1
        assert result.loc['75-79', 'female'] == 1
        # Resident without a birthdate is skipped
        assert result['male'].sum() + result['female'].sum() == 5

    def test_percentages_use_all_residents(self, san_isidro: pd.DataFrame, today: date) -> None:
        result = population_pyramid_data(san_isidro, today).set_index('age_group')
        assert result.loc['5-9', 'male_pct'] == pytest.approx(100 / 6)

    def test_empty(self, sample_residents: pd.DataFrame, today: date) -> None:
        result = population_pyramid_data(sample_residents.iloc[:0], today)
        assert len(result) == len(STANDARD_AGE_GROUPS)
        assert result['male'].sum() == 0
        assert (result['male_pct'] == 0).all()

    def test_blank_birthdates_skipped(self, today: date) -> None:
        df = pd.DataFrame({
            'birthdate': ['1990-01-01', '', '   ', 'not a date'],
            'sex': ['male', 'male', 'female', 'female'],
        })
        result = population_pyramid_data(df, today).set_index('age_group')
        assert result.loc['35-39', 'male'] == 1
        assert result['male'].sum() + result['female'].sum() == 1
        assert result.loc['35-39', 'male_pct'] == pytest.approx(25.0)

    def test_whitespace_sex_counted_as_female(self, today: date) -> None:
        df = pd.DataFrame({'birthdate': ['1990-01-01', '1990-01-01'], 'sex': [' ', '']})
        result = population_pyramid_data(df, today).set_index('age_group')
        assert result.loc['35-39', 'female'] == 1
        assert result['male'].sum() == 0


class TestPopulationStats:
    def test_totals(self, san_isidro: pd.DataFrame, today: date) -> None:
        stats = population_stats(population_pyramid_data(san_isidro, today))
        assert stats['total_male'] == 2
        assert stats['total_female'] == 3
        assert stats['total_population'] == 5
        assert stats['male_pct'] == pytest.approx(40.0)

    def test_empty(self, sample_residents: pd.DataFrame, today: date) -> None:
        stats = population_stats(population_pyramid_data(sample_residents.iloc[:0], today))
        assert stats['male_pct'] == 0
        assert stats['female_pct'] == 0


# =============================================================================
# Dependency
# =============================================================================

class TestDependencyCounts:
    def test_bands(self, san_isidro: pd.DataFrame, today: date) -> None:
        result = dependency_counts(population_pyramid_data(san_isidro, today))
        assert result == DependencyData(young_dependents=2, working_age=2, old_dependents=1)


class TestDependencyRatios:
    def test_ratios(self) -> None:
        ratios = dependency_ratios(DependencyData(30, 60, 15))
        assert ratios['total'] == pytest.approx(75.0)
        assert ratios['young'] == pytest.approx(50.0)
        assert ratios['old'] == pytest.approx(25.0)

    def test_no_working_age(self) -> None:
        assert dependency_ratios(DependencyData(3, 0, 2)) == {'total': 0, 'young': 0, 'old': 0}


# =============================================================================
# Distribution counts
# =============================================================================

class TestSexCounts:
    def test_case_insensitive(self, san_isidro: pd.DataFrame) -> None:
        assert sex_counts(san_isidro) == SexData(male=3, female=3)


class TestCivilStatusCounts:
    def test_aliases(self, san_isidro: pd.DataFrame) -> None:
        assert civil_status_counts(san_isidro) == CivilStatusData(
            single=2, married=1, widowed=1, divorced=0,
            separated=0, annulled=0, registered_partnership=1, live_in=1,
        )

    def test_unknown_not_counted(self, sample_residents: pd.DataFrame) -> None:
        result = civil_status_counts(sample_residents)
        assert result.total() == len(sample_residents) - 1


class TestEmploymentStatusCounts:
    def test_aliases(self, san_isidro: pd.DataFrame) -> None:
        assert employment_status_counts(san_isidro) == EmploymentStatusData(
            employed=1, unemployed=0, self_employed=1, student=2,
            retired=1, homemaker=1, disabled=0, other=0,
        )

    def test_other_and_blank(self, sample_residents: pd.DataFrame) -> None:
        result = employment_status_counts(sample_residents)
        # 'freelancer' counts as other, the blank status is skipped
        assert result.other == 1
        assert result.total() == len(sample_residents) - 1

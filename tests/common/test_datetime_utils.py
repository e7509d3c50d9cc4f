from datetime import date

import pytest

from src.academic_ledger.academic_ledger.common.datetime_utils import (
    academic_year_start,
    admission_year_from_id,
    current_semester,
    intersect_ranges,
    program_periods,
    semester_period,
    semester_window,
)


def test_admission_year_is_read_from_student_id():
    assert admission_year_from_id("KCSE202101") == 2021
    assert admission_year_from_id("FAC001") is None


def test_program_periods_cover_four_years():
    assert program_periods(2021) == ["2021-2022", "2022-2023", "2023-2024", "2024-2025"]


@pytest.mark.parametrize(
    "semester, window, period",
    [
        (1, (date(2021, 7, 1), date(2021, 12, 31)), "2021-2022"),
        (2, (date(2022, 1, 1), date(2022, 6, 30)), "2021-2022"),
        (3, (date(2022, 7, 1), date(2022, 12, 31)), "2022-2023"),
        (8, (date(2025, 1, 1), date(2025, 6, 30)), "2024-2025"),
    ],
)
def test_semester_window_and_period(semester, window, period):
    assert semester_window(2021, semester) == window
    assert semester_period(2021, semester) == period


@pytest.mark.parametrize(
    "as_of, expected",
    [
        (date(2021, 6, 30), None),
        (date(2021, 7, 1), 1),
        (date(2022, 1, 10), 2),
        (date(2024, 3, 15), 6),
        (date(2025, 8, 1), 9),
    ],
)
def test_current_semester(as_of, expected):
    assert current_semester(2021, as_of) == expected


def test_intersect_ranges_keeps_narrowest_bounds():
    assert intersect_ranges(None, date(2021, 9, 1), date(2021, 7, 1), date(2021, 12, 31)) == (
        date(2021, 7, 1),
        date(2021, 9, 1),
    )


def test_academic_year_start_accepts_label():
    assert academic_year_start("2023-2024") == 2023

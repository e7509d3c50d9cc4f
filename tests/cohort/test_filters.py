from datetime import date

import pytest

from src.academic_ledger.academic_ledger.cohort.filters import ScopeFilter
from src.academic_ledger.academic_ledger.core.enums import PersonKind
from src.academic_ledger.academic_ledger.core.exceptions import AmbiguousScopeError, ValidationError
from src.academic_ledger.academic_ledger.registry.model import Person, ScopeAttributes

ASHA = Person("KCSE202101", "Asha Rao", PersonKind.STUDENT, ScopeAttributes("KMIT", "CSE", 2021, "01"))
MEENA = Person("FAC001", "Prof. Meena", PersonKind.FACULTY, ScopeAttributes("KMIT", "CSE"))


def test_person_id_with_cohort_dimension_is_rejected():
    with pytest.raises(AmbiguousScopeError):
        ScopeFilter(person_id="KCSE202101", institution="KMIT")


def test_person_id_may_carry_data_narrowing():
    scope = ScopeFilter(person_id="KCSE202101", subject_code="MA101", start_date=date(2021, 8, 1))

    assert scope.is_individual
    assert scope.active_dimensions == ()


def test_adding_person_id_to_cohort_scope_is_rejected():
    with pytest.raises(AmbiguousScopeError):
        ScopeFilter(institution="KMIT", semester=1, subject_code="MA101").with_changes(person_id="KCSE202101")


def test_invalid_semester_and_range_are_rejected():
    with pytest.raises(ValidationError):
        ScopeFilter(semester=0)
    with pytest.raises(ValidationError):
        ScopeFilter(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


def test_matches_ands_dimensions_case_insensitively():
    assert ScopeFilter(institution="kmit", department="cse").matches(ASHA)
    assert ScopeFilter(institution="KMIT", admission_year=2021, roll_no="01").matches(ASHA)
    assert not ScopeFilter(institution="KMIT", admission_year=2022).matches(ASHA)
    assert not ScopeFilter(kind=PersonKind.FACULTY).matches(ASHA)
    assert ScopeFilter(person_id="kcse202101").matches(ASHA)


def test_semester_scope_needs_admission_year():
    assert ScopeFilter(semester=1).matches(ASHA)
    assert not ScopeFilter(semester=1).matches(MEENA)


def test_from_mapping_treats_blank_and_all_as_unrestricted():
    scope = ScopeFilter.from_mapping(
        {"institution": "all", "department": "", "admission_year": "2021-2022", "kind": "student", "semester": "3"}
    )

    assert scope.institution is None
    assert scope.department is None
    assert scope.admission_year == 2021
    assert scope.kind == PersonKind.STUDENT
    assert scope.semester == 3


def test_from_mapping_rejects_bad_input():
    with pytest.raises(ValidationError):
        ScopeFilter.from_mapping({"start_date": "15/01/2024"})
    with pytest.raises(ValidationError):
        ScopeFilter.from_mapping({"kind": "alumni"})
    with pytest.raises(ValidationError):
        ScopeFilter.from_mapping({"semester": "first"})
    with pytest.raises(AmbiguousScopeError):
        ScopeFilter.from_mapping({"person_id": "KCSE202101", "department": "CSE"})


def test_describe_lists_only_set_fields():
    scope = ScopeFilter(institution="KMIT", kind=PersonKind.STUDENT, start_date=date(2024, 1, 1))

    assert scope.describe() == {"institution": "KMIT", "kind": "Student", "start_date": "2024-01-01"}

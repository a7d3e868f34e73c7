"""Unit tests for the kind descriptor table and per-kind validation."""

import pytest

from jobboard.core.errors import InvalidArgumentError, NotFoundError
from jobboard.services.kinds import JOBS, KINDS, USERS, USER_SECTION_FIELDS, get_kind


@pytest.mark.unit
def test_every_user_section_has_a_descriptor():
    assert set(USER_SECTION_FIELDS) == {
        "employments", "educations", "it_skills", "projects", "accomplishments", "certifications"
    }
    assert KINDS["applications"].parent == JOBS


@pytest.mark.unit
@pytest.mark.parametrize("name", ["skills", "itSkills", "it_skills"])
def test_skill_aliases_resolve_to_it_skills(name):
    assert get_kind(name).field == "it_skills"


@pytest.mark.unit
def test_unknown_kind_is_not_found():
    with pytest.raises(NotFoundError):
        get_kind("hobbies")


@pytest.mark.unit
def test_kind_of_other_parent_is_not_found():
    """Applications cannot be edited through the user routes."""
    with pytest.raises(NotFoundError):
        get_kind("applications", USERS)
    assert get_kind("applications", JOBS).label == "Application"


@pytest.mark.unit
def test_validate_new_applies_defaults():
    item = get_kind("skills").validate_new({"name": "Python"})
    assert item == {
        "name": "Python",
        "version": None,
        "last_used": None,
        "experience_years": 0,
        "experience_months": 0,
    }


@pytest.mark.unit
def test_validate_new_serializes_dates_as_strings():
    item = get_kind("employments").validate_new(
        {"job_title": "Engineer", "company": "Acme", "start_date": "2021-03-01"}
    )
    assert item["start_date"] == "2021-03-01"


@pytest.mark.unit
def test_validate_new_requires_required_fields():
    with pytest.raises(InvalidArgumentError, match="company"):
        get_kind("employments").validate_new({"job_title": "Engineer"})


@pytest.mark.unit
def test_unknown_fields_are_rejected():
    with pytest.raises(InvalidArgumentError, match="salary"):
        get_kind("employments").validate_new(
            {"job_title": "Engineer", "company": "Acme", "salary": 10}
        )
    with pytest.raises(InvalidArgumentError):
        get_kind("educations").validate_patch({"_id": "abc"})


@pytest.mark.unit
def test_validate_patch_keeps_only_sent_fields():
    patch = get_kind("employments").validate_patch({"company": "NewCo"})
    assert patch == {"company": "NewCo"}


@pytest.mark.unit
def test_validate_patch_rejects_empty_body():
    with pytest.raises(InvalidArgumentError, match="No fields"):
        get_kind("projects").validate_patch({})


@pytest.mark.unit
def test_non_object_payload_is_rejected():
    with pytest.raises(InvalidArgumentError, match="JSON object"):
        get_kind("certifications").validate_new(["not", "a", "dict"])

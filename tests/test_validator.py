import pytest

from lms.core import PayloadValidator, normalize_status
from lms.errors import ReferenceNotFound, UniquenessConflict, ValidationFailed
from lms.models import Course, EntityKind, GradeStatus, User


def test_course_create_lists_every_missing_field(store) -> None:
    result = PayloadValidator(store).validate(EntityKind.COURSE, {})
    assert not result.ok
    assert result.reasons == [
        "name is required",
        "description is required",
        "lecturer is required",
        "category is required",
        "duration is required",
        "content is required",
    ]


def test_course_blank_strings_count_as_missing(store, course_payload) -> None:
    result = PayloadValidator(store).validate(
        EntityKind.COURSE, course_payload(name="   ", category="")
    )
    assert result.reasons == ["name is required", "category is required"]


def test_course_content_rules(store, course_payload) -> None:
    validator = PayloadValidator(store)
    empty = validator.validate(EntityKind.COURSE, course_payload(content=[]))
    assert empty.reasons == ["at least one content item is required"]

    items = [{"title": "L1", "url": " "}, {"url": "http://y"}]
    bad_items = validator.validate(EntityKind.COURSE, course_payload(content=items))
    assert bad_items.reasons == ["content[0].url is required", "content[1].title is required"]


def test_partial_update_checks_only_present_fields(store) -> None:
    validator = PayloadValidator(store)
    assert validator.validate(EntityKind.COURSE, {"description": "New"}, partial=True).ok
    result = validator.validate(EntityKind.COURSE, {"name": ""}, partial=True)
    assert result.reasons == ["name is required"]


def test_raise_for_errors() -> None:
    from lms.core import ValidationResult

    ValidationResult().raise_for_errors()
    with pytest.raises(ValidationFailed) as excinfo:
        ValidationResult(["name is required"]).raise_for_errors()
    assert excinfo.value.reasons == ["name is required"]


def test_grade_rules(store) -> None:
    validator = PayloadValidator(store)
    assert validator.validate(EntityKind.GRADE, {}).reasons == [
        "student is required",
        "course is required",
    ]
    bad_status = validator.validate(EntityKind.GRADE, {"status": "Z"}, partial=True)
    assert len(bad_status.reasons) == 1
    assert bad_status.reasons[0].startswith("status must be one of")


def test_normalize_status() -> None:
    assert normalize_status("A") is GradeStatus.A
    assert normalize_status(" Incomplete ") is GradeStatus.INCOMPLETE
    assert normalize_status("Fail") is GradeStatus.F
    assert normalize_status("Pass") is None
    assert normalize_status(3) is None


def test_account_rules(store) -> None:
    validator = PayloadValidator(store)
    user = validator.validate(EntityKind.USER, {"name": "Alan", "email": "a@b.io", "password": ""})
    assert user.reasons == ["password is required"]
    lecturer = validator.validate(
        EntityKind.LECTURER, {"name": "Ada", "email": "ada@b.io", "password": "x"}
    )
    assert lecturer.reasons == ["department is required"]


def test_unique_course_name_ignores_target_course(session, store, lecturer) -> None:
    course = Course(
        name="CS101",
        description="Intro",
        lecturer_id=lecturer.id,
        category="CS",
        duration=10,
        content=[{"title": "L1", "url": "http://x"}],
    )
    session.add(course)
    session.commit()
    validator = PayloadValidator(store)

    validator.ensure_unique_course_name("CS101", exclude_id=course.id)
    validator.ensure_unique_course_name("CS102")
    with pytest.raises(UniquenessConflict):
        validator.ensure_unique_course_name(" CS101 ")


def test_unique_email(store, student) -> None:
    validator = PayloadValidator(store)
    validator.ensure_unique_email(EntityKind.LECTURER, "alan@example.com")
    with pytest.raises(UniquenessConflict):
        validator.ensure_unique_email(EntityKind.USER, "alan@example.com")


def test_ensure_exists(store, student) -> None:
    validator = PayloadValidator(store)
    assert validator.ensure_exists(User, student.id, "student").id == student.id
    with pytest.raises(ReferenceNotFound) as excinfo:
        validator.ensure_exists(User, "0" * 24, "student")
    assert excinfo.value.token == "0" * 24

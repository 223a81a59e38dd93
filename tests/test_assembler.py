from types import SimpleNamespace

import pytest

from lms.core import RecordAssembler
from lms.errors import TypeMismatch
from lms.models import EntityKind, GradeStatus


def _lecturer():
    return SimpleNamespace(id="L1", name="Ada", email="ada@example.com")


def test_course_record_is_normalized() -> None:
    payload = {
        "name": "  CS101 ",
        "description": " Intro ",
        "lecturer": "ada@example.com",
        "category": "CS",
        "duration": "10",
        "price": 99.5,
        "content": [{"title": " L1 ", "url": " http://x "}],
    }
    record = RecordAssembler().assemble(EntityKind.COURSE, payload, {"lecturer": _lecturer()})

    assert record == {
        "name": "CS101",
        "description": "Intro",
        "category": "CS",
        "duration": 10.0,
        "price": 99.5,
        "content": [{"title": "L1", "url": "http://x"}],
        "lecturer_id": "L1",
    }


def test_assemble_is_deterministic() -> None:
    assembler = RecordAssembler()
    payload = {"name": "CS101", "duration": 3}
    assert assembler.assemble(EntityKind.COURSE, payload) == assembler.assemble(
        EntityKind.COURSE, payload
    )


@pytest.mark.parametrize("value", ["ten", True, [1]])
def test_non_numeric_duration_is_type_mismatch(value) -> None:
    with pytest.raises(TypeMismatch):
        RecordAssembler().assemble(EntityKind.COURSE, {"duration": value})


def test_partial_payload_only_emits_present_fields() -> None:
    record = RecordAssembler().assemble(EntityKind.COURSE, {"description": "New"})
    assert record == {"description": "New"}


def test_grade_record() -> None:
    record = RecordAssembler().assemble(
        EntityKind.GRADE,
        {"student": "s", "course": "c", "status": "Fail", "remarks": " late "},
        {"student": SimpleNamespace(id="S1"), "course": SimpleNamespace(id="C1")},
    )
    assert record == {
        "student_id": "S1",
        "course_id": "C1",
        "status": GradeStatus.F,
        "remarks": "late",
    }


def test_account_record_never_carries_password() -> None:
    record = RecordAssembler().assemble(
        EntityKind.LECTURER,
        {"name": " Ada ", "email": "ada@example.com", "password": "pw", "department": "CS"},
    )
    assert record == {"name": "Ada", "email": "ada@example.com", "department": "CS"}

import pytest

from lms.core import ReferenceResolver, is_object_id
from lms.errors import ReferenceNotFound
from lms.models import Course, EntityKind, Lecturer
from lms.security import hash_password


def test_object_id_format() -> None:
    assert is_object_id("0123456789abcdef01234567")
    assert is_object_id("0123456789ABCDEF01234567")
    assert not is_object_id("ada@example.com")
    assert not is_object_id("0123456789abcdef0123456")


def test_resolve_by_email(store, lecturer) -> None:
    found = ReferenceResolver(store).resolve(EntityKind.LECTURER, "ada@example.com")
    assert found.id == lecturer.id


def test_resolve_by_name_and_id(store, lecturer) -> None:
    resolver = ReferenceResolver(store)
    assert resolver.resolve(EntityKind.LECTURER, "Ada Lovelace").id == lecturer.id
    assert resolver.resolve(EntityKind.LECTURER, lecturer.id).id == lecturer.id
    assert resolver.resolve(EntityKind.LECTURER, f"  {lecturer.id}  ").id == lecturer.id


def test_unknown_token_carries_token(store, lecturer) -> None:
    with pytest.raises(ReferenceNotFound) as excinfo:
        ReferenceResolver(store).resolve(EntityKind.LECTURER, "nobody@example.com")
    assert excinfo.value.token == "nobody@example.com"
    assert excinfo.value.status_code == 404


def test_well_formed_id_without_record_is_not_found(store, lecturer) -> None:
    with pytest.raises(ReferenceNotFound):
        ReferenceResolver(store).resolve(EntityKind.LECTURER, "f" * 24)


def test_duplicate_names_resolve_to_lowest_id(session, store) -> None:
    for entity_id, email in (("b" * 24, "second@example.com"), ("a" * 24, "first@example.com")):
        session.add(
            Lecturer(
                id=entity_id,
                name="Grace Hopper",
                email=email,
                password_hash=hash_password("pw"),
                department="Navy",
            )
        )
    session.commit()

    found = ReferenceResolver(store).resolve(EntityKind.LECTURER, "Grace Hopper")
    assert found.id == "a" * 24


def test_course_resolves_by_name(session, store, lecturer) -> None:
    session.add(
        Course(
            name="CS101",
            description="Intro",
            lecturer_id=lecturer.id,
            category="CS",
            duration=10,
            content=[{"title": "L1", "url": "http://x"}],
        )
    )
    session.commit()

    assert ReferenceResolver(store).resolve(EntityKind.COURSE, "CS101").name == "CS101"

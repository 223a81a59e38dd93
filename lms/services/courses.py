"""课程服务：创建/更新流程、检索、选课。"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from lms.core import FlowState, PayloadValidator, RecordAssembler, ReferenceResolver, WriteFlow
from lms.db import new_object_id
from lms.errors import EntityNotFound, UniquenessConflict, ValidationFailed
from lms.models import Course, EntityKind, Lecturer, User
from lms.services.presenters import present_course
from lms.store import EntityStore

logger = logging.getLogger(__name__)


class CourseService:
    """封装课程的写入状态机与查询。"""

    def __init__(self, store: EntityStore) -> None:
        self.store = store
        self.resolver = ReferenceResolver(store)
        self.validator = PayloadValidator(store)
        self.assembler = RecordAssembler()

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        flow = WriteFlow("course", "create")
        with flow.step(FlowState.STRUCTURALLY_VALIDATED):
            self.validator.validate(EntityKind.COURSE, payload).raise_for_errors()
        with flow.step(FlowState.REFERENCES_RESOLVED):
            lecturer = self.resolver.resolve(EntityKind.LECTURER, payload["lecturer"])
            self.validator.ensure_unique_course_name(payload["name"])
        with flow.step(FlowState.ASSEMBLED):
            values = self.assembler.assemble(EntityKind.COURSE, payload, {"lecturer": lecturer})
        with flow.step(FlowState.PERSISTED):
            course = Course(id=new_object_id(), **values)
            lecturer.courses = [*(lecturer.courses or []), course.id]
            self.store.insert(course, lecturer)
        logger.info("Course %s created (%s) by lecturer %s", course.id, course.name, lecturer.id)
        flow.advance(FlowState.RESPONDED)
        return present_course(course, lecturer)

    def update(self, course_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        flow = WriteFlow("course", "update")
        course = self._get_or_404(course_id)
        with flow.step(FlowState.STRUCTURALLY_VALIDATED):
            self.validator.validate(EntityKind.COURSE, payload, partial=True).raise_for_errors()
        resolved: Dict[str, Any] = {}
        with flow.step(FlowState.REFERENCES_RESOLVED):
            if "lecturer" in payload:
                resolved["lecturer"] = self.resolver.resolve(EntityKind.LECTURER, payload["lecturer"])
            if "name" in payload:
                self.validator.ensure_unique_course_name(payload["name"], exclude_id=course.id)
        with flow.step(FlowState.ASSEMBLED):
            values = self.assembler.assemble(EntityKind.COURSE, payload, resolved)
        with flow.step(FlowState.PERSISTED):
            related = self._move_between_lecturers(course, values.get("lecturer_id"), resolved.get("lecturer"))
            course = self.store.update_by_id(Course, course.id, values, *related)
        flow.advance(FlowState.RESPONDED)
        return present_course(course, self.store.find_by_id(Lecturer, course.lecturer_id))

    def _move_between_lecturers(self, course: Course, new_lecturer_id, new_lecturer) -> List[Lecturer]:
        """讲师变更时同步双方的 ``courses`` 列表。"""
        if new_lecturer_id is None or new_lecturer_id == course.lecturer_id:
            return []
        related = []
        previous = self.store.find_by_id(Lecturer, course.lecturer_id)
        if previous is not None:
            previous.courses = [cid for cid in previous.courses or [] if cid != course.id]
            related.append(previous)
        new_lecturer.courses = [*(new_lecturer.courses or []), course.id]
        related.append(new_lecturer)
        return related

    def get(self, course_id: str) -> Dict[str, Any]:
        course = self._get_or_404(course_id)
        return present_course(course, self.store.find_by_id(Lecturer, course.lecturer_id))

    def list(self) -> List[Dict[str, Any]]:
        return self._present_many(self.store.find_all(Course))

    def search(self, query: str) -> List[Dict[str, Any]]:
        term = (query or "").strip()
        if not term:
            raise ValidationFailed(["query is required"], "Search query is required")
        return self._present_many(self.store.search_courses(term))

    def delete(self, course_id: str) -> None:
        course = self._get_or_404(course_id)
        related = []
        lecturer = self.store.find_by_id(Lecturer, course.lecturer_id)
        if lecturer is not None:
            lecturer.courses = [cid for cid in lecturer.courses or [] if cid != course.id]
            related.append(lecturer)
        self.store.delete_by_id(Course, course.id, *related)
        logger.info("Course %s deleted", course_id)

    def enroll(self, course_id: str, student_id: str) -> Dict[str, Any]:
        course = self._get_or_404(course_id)
        student = self.validator.ensure_exists(User, student_id, "student")
        enrolled = list(course.enrolled_students or [])
        if student.id in enrolled:
            raise UniquenessConflict("Student is already enrolled in this course")
        if course.enrollment_limit is not None and len(enrolled) >= course.enrollment_limit:
            raise ValidationFailed(["enrollment limit reached"], "Course is full")
        course = self.store.update_by_id(Course, course.id, {"enrolled_students": [*enrolled, student.id]})
        return present_course(course, self.store.find_by_id(Lecturer, course.lecturer_id))

    def _get_or_404(self, course_id: str) -> Course:
        course = self.store.find_by_id(Course, course_id)
        if course is None:
            raise EntityNotFound("course")
        return course

    def _present_many(self, courses: List[Course]) -> List[Dict[str, Any]]:
        lecturers = self.store.find_many_by_ids(Lecturer, [c.lecturer_id for c in courses])
        return [present_course(c, lecturers.get(c.lecturer_id)) for c in courses]

"""成绩服务：登记、查询、修改与删除。"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from lms.core import FlowState, PayloadValidator, RecordAssembler, WriteFlow
from lms.db import new_object_id
from lms.errors import EntityNotFound
from lms.models import Course, EntityKind, Grade, User
from lms.services.presenters import present_grade
from lms.store import EntityStore

logger = logging.getLogger(__name__)


class GradeService:
    def __init__(self, store: EntityStore) -> None:
        self.store = store
        self.validator = PayloadValidator(store)
        self.assembler = RecordAssembler()

    def assign(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """为学生登记某门课的成绩，同一 (学生, 课程) 只允许一条。"""
        flow = WriteFlow("grade", "create")
        with flow.step(FlowState.STRUCTURALLY_VALIDATED):
            self.validator.validate(EntityKind.GRADE, payload).raise_for_errors()
        with flow.step(FlowState.REFERENCES_RESOLVED):
            student = self.validator.ensure_exists(User, payload["student"], "student")
            course = self.validator.ensure_exists(Course, payload["course"], "course")
            self.validator.ensure_unique_grade(student.id, course.id)
        with flow.step(FlowState.ASSEMBLED):
            values = self.assembler.assemble(
                EntityKind.GRADE, payload, {"student": student, "course": course}
            )
        with flow.step(FlowState.PERSISTED):
            grade = Grade(id=new_object_id(), **values)
            student.grades = [*(student.grades or []), grade.id]
            self.store.insert(grade, student)
        logger.info("Grade %s assigned: student=%s course=%s", grade.id, student.id, course.id)
        flow.advance(FlowState.RESPONDED)
        return present_grade(grade, student, course)

    def update(self, grade_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """仅允许修改 ``status`` 与 ``remarks``。"""
        flow = WriteFlow("grade", "update")
        grade = self._get_or_404(grade_id)
        with flow.step(FlowState.STRUCTURALLY_VALIDATED):
            self.validator.validate(EntityKind.GRADE, payload, partial=True).raise_for_errors()
        flow.advance(FlowState.REFERENCES_RESOLVED)
        with flow.step(FlowState.ASSEMBLED):
            values = self.assembler.assemble(EntityKind.GRADE, payload)
        with flow.step(FlowState.PERSISTED):
            grade = self.store.update_by_id(Grade, grade.id, values)
        flow.advance(FlowState.RESPONDED)
        return self._present(grade)

    def get(self, grade_id: str) -> Dict[str, Any]:
        return self._present(self._get_or_404(grade_id))

    def list(self) -> List[Dict[str, Any]]:
        return self._present_many(self.store.find_all(Grade))

    def for_student(self, student_id: str) -> List[Dict[str, Any]]:
        return self._present_many(self.store.find_all(Grade, student_id=student_id))

    def for_course(self, course_id: str) -> List[Dict[str, Any]]:
        return self._present_many(self.store.find_all(Grade, course_id=course_id))

    def delete(self, grade_id: str) -> None:
        grade = self._get_or_404(grade_id)
        related = []
        student = self.store.find_by_id(User, grade.student_id)
        if student is not None:
            student.grades = [gid for gid in student.grades or [] if gid != grade.id]
            related.append(student)
        self.store.delete_by_id(Grade, grade.id, *related)
        logger.info("Grade %s deleted", grade_id)

    def _get_or_404(self, grade_id: str) -> Grade:
        grade = self.store.find_by_id(Grade, grade_id)
        if grade is None:
            raise EntityNotFound("grade")
        return grade

    def _present(self, grade: Grade) -> Dict[str, Any]:
        return present_grade(
            grade,
            self.store.find_by_id(User, grade.student_id),
            self.store.find_by_id(Course, grade.course_id),
        )

    def _present_many(self, grades: List[Grade]) -> List[Dict[str, Any]]:
        students = self.store.find_many_by_ids(User, [g.student_id for g in grades])
        courses = self.store.find_many_by_ids(Course, [g.course_id for g in grades])
        return [
            present_grade(g, students.get(g.student_id), courses.get(g.course_id))
            for g in grades
        ]

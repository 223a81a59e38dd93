"""请求体校验。

分两阶段：先做不访问存储的结构检查（一次性返回所有字段问题），
结构通过后再做需要查询存储的唯一性/存在性检查（遇到第一个问题即失败）。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from lms.db import Base
from lms.errors import ReferenceNotFound, UniquenessConflict, ValidationFailed
from lms.models import (
    LEGACY_STATUS_ALIASES,
    Course,
    EntityKind,
    Grade,
    GradeStatus,
    Lecturer,
    User,
)
from lms.store import EntityStore

COURSE_TEXT_FIELDS = ("name", "description", "lecturer", "category")
ACCOUNT_TEXT_FIELDS = ("name", "email", "password")


@dataclass
class ValidationResult:
    reasons: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.reasons

    def raise_for_errors(self) -> None:
        if self.reasons:
            raise ValidationFailed(self.reasons)


def normalize_status(value: Any) -> Optional[GradeStatus]:
    """把输入映射到规范成绩状态，无法识别时返回 ``None``。"""
    if isinstance(value, GradeStatus):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return GradeStatus(text)
    except ValueError:
        return LEGACY_STATUS_ALIASES.get(text)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class PayloadValidator:
    def __init__(self, store: EntityStore) -> None:
        self.store = store

    # === 阶段一：结构检查 ===

    def validate(self, kind: EntityKind, payload: Dict[str, Any], partial: bool = False) -> ValidationResult:
        """``partial=True`` 时只检查请求中出现的字段（部分更新）。"""
        if kind is EntityKind.COURSE:
            reasons = self._course_reasons(payload, partial)
        elif kind is EntityKind.GRADE:
            reasons = self._grade_reasons(payload, partial)
        else:
            reasons = self._account_reasons(kind, payload, partial)
        return ValidationResult(reasons)

    def _course_reasons(self, payload: Dict[str, Any], partial: bool) -> List[str]:
        reasons = []
        for name in COURSE_TEXT_FIELDS + ("duration",):
            if partial and name not in payload:
                continue
            if _is_blank(payload.get(name)):
                reasons.append(f"{name} is required")

        if not partial or "content" in payload:
            content = payload.get("content")
            if content is None:
                reasons.append("content is required")
            elif len(content) == 0:
                reasons.append("at least one content item is required")
            else:
                for index, item in enumerate(content):
                    for key in ("title", "url"):
                        if _is_blank(item.get(key)):
                            reasons.append(f"content[{index}].{key} is required")
        return reasons

    def _grade_reasons(self, payload: Dict[str, Any], partial: bool) -> List[str]:
        reasons = []
        if not partial:
            for name in ("student", "course"):
                if _is_blank(payload.get(name)):
                    reasons.append(f"{name} is required")
        status = payload.get("status")
        if status is not None and normalize_status(status) is None:
            allowed = ", ".join(s.value for s in GradeStatus)
            reasons.append(f"status must be one of: {allowed}")
        return reasons

    def _account_reasons(self, kind: EntityKind, payload: Dict[str, Any], partial: bool) -> List[str]:
        names = ACCOUNT_TEXT_FIELDS
        if kind is EntityKind.LECTURER:
            names = names + ("department",)
        reasons = []
        for name in names:
            if partial and name not in payload:
                continue
            if _is_blank(payload.get(name)):
                reasons.append(f"{name} is required")
        return reasons

    # === 阶段二：依赖存储的检查 ===

    def ensure_unique_course_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        existing = self.store.find_one(Course, name=name.strip())
        if existing is not None and existing.id != exclude_id:
            raise UniquenessConflict("Course name must be unique")

    def ensure_unique_email(self, kind: EntityKind, email: str, exclude_id: Optional[str] = None) -> None:
        model = Lecturer if kind is EntityKind.LECTURER else User
        existing = self.store.find_one(model, email=email.strip())
        if existing is not None and existing.id != exclude_id:
            raise UniquenessConflict(f"{kind.value.capitalize()} already exists")

    def ensure_exists(self, model: Type[Base], entity_id: str, label: str) -> Any:
        """按 id 校验引用存在（成绩流程中的引用总是 id，不走名称解析）。"""
        entity = self.store.find_by_id(model, entity_id.strip())
        if entity is None:
            raise ReferenceNotFound(label, entity_id)
        return entity

    def ensure_unique_grade(self, student_id: str, course_id: str) -> None:
        if self.store.find_one(Grade, student_id=student_id, course_id=course_id) is not None:
            raise UniquenessConflict("Grade already exists for this student in this course")

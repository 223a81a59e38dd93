"""核心 SQLAlchemy 模型导出。"""

from lms.models.course import Course
from lms.models.enums import CourseLevel, EntityKind, GradeStatus, LEGACY_STATUS_ALIASES
from lms.models.grade import Grade
from lms.models.people import Lecturer, User

# 实体类型到模型类的映射，供存储层与解析器按类型查询
MODEL_BY_KIND = {
    EntityKind.USER: User,
    EntityKind.LECTURER: Lecturer,
    EntityKind.COURSE: Course,
    EntityKind.GRADE: Grade,
}

__all__ = [
    "Course",
    "CourseLevel",
    "EntityKind",
    "Grade",
    "GradeStatus",
    "LEGACY_STATUS_ALIASES",
    "Lecturer",
    "MODEL_BY_KIND",
    "User",
]

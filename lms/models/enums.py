"""业务枚举定义 - 实体类型、成绩状态、课程难度。"""

import enum


class EntityKind(str, enum.Enum):
    """存储中的四类实体。"""
    USER = "user"
    LECTURER = "lecturer"
    COURSE = "course"
    GRADE = "grade"


class GradeStatus(str, enum.Enum):
    """成绩状态。

    统一采用 A-F + Incomplete/Pending 这一套；历史上的 Pass/Fail 变体
    由迁移脚本改写，写入时仅接受 ``Fail`` 作为 ``F`` 的别名。
    """
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    INCOMPLETE = "Incomplete"
    PENDING = "Pending"


# 旧版成绩集合的兼容映射
LEGACY_STATUS_ALIASES = {"Fail": GradeStatus.F}


class CourseLevel(str, enum.Enum):
    """课程难度。"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

"""成绩模型定义 - 学生与课程之间的关联实体。"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Enum, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from lms.db import Base, new_object_id
from lms.models.enums import GradeStatus


class Grade(Base):
    """每个 (学生, 课程) 组合至多一条成绩，由唯一约束兜底。"""

    __tablename__ = "grades"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_grades_student_course"),
    )

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    student_id: Mapped[str] = mapped_column(String(24), nullable=False, index=True)
    course_id: Mapped[str] = mapped_column(String(24), nullable=False, index=True)
    status: Mapped[GradeStatus] = mapped_column(
        Enum(GradeStatus, values_callable=lambda e: [m.value for m in e]),
        default=GradeStatus.PENDING,
        nullable=False,
    )
    remarks: Mapped[Optional[str]] = mapped_column(Text)
    graded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Grade(id={self.id}, student={self.student_id}, course={self.course_id})>"

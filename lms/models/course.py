"""课程模型定义。"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import DateTime, Enum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from lms.db import Base, new_object_id
from lms.models.enums import CourseLevel


class Course(Base):
    """课程。

    - ``lecturer_id``：写入时必须指向存在的讲师，之后讲师被删除不会级联。
    - ``content``：有序的 ``{title, url}`` 列表。
    - ``enrolled_students``：已选课学生 id 列表（弱引用）。
    """

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    lecturer_id: Mapped[str] = mapped_column(String(24), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False)
    price: Mapped[Optional[float]] = mapped_column(Float)
    level: Mapped[Optional[CourseLevel]] = mapped_column(Enum(CourseLevel))
    enrollment_limit: Mapped[Optional[int]] = mapped_column(Integer)
    enrolled_students: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    content: Mapped[List[Dict[str, str]]] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, name={self.name})>"

"""实体存储：对 SQLAlchemy Session 的薄封装。

所有写操作在一次 ``commit`` 中完成；唯一约束冲突转换为 ``StoreConflict``，
数据库不可用转换为 ``StoreUnavailable``，两者都会先回滚，保证不留下部分记录。
"""

import logging
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import or_
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import Session

from lms.db import Base
from lms.errors import StoreConflict, StoreUnavailable
from lms.models import Course, Lecturer

logger = logging.getLogger(__name__)


class EntityStore:
    """按请求注入的存储能力，测试中可直接包裹测试 Session。"""

    def __init__(self, session: Session) -> None:
        self.session = session

    # === 读取 ===

    def find_by_id(self, model: Type[Base], entity_id: str) -> Optional[Any]:
        return self._guard_read(lambda: self.session.get(model, entity_id))

    def find_one(self, model: Type[Base], **filters: Any) -> Optional[Any]:
        return self._guard_read(
            lambda: self.session.query(model).filter_by(**filters).order_by(model.id).first()
        )

    def find_by_name_or_email(self, model: Type[Base], token: str) -> Optional[Any]:
        """单次组合查询 name 或 email；按 id 排序取第一条，保证结果确定。"""

        conditions = [model.name == token]
        if hasattr(model, "email"):
            conditions.append(model.email == token)
        return self._guard_read(
            lambda: self.session.query(model).filter(or_(*conditions)).order_by(model.id).first()
        )

    def find_all(self, model: Type[Base], **filters: Any) -> List[Any]:
        return self._guard_read(
            lambda: self.session.query(model).filter_by(**filters).order_by(model.id).all()
        )

    def find_many_by_ids(self, model: Type[Base], ids: List[str]) -> Dict[str, Any]:
        if not ids:
            return {}
        rows = self._guard_read(
            lambda: self.session.query(model).filter(model.id.in_(set(ids))).all()
        )
        return {row.id: row for row in rows}

    def search_courses(self, term: str) -> List[Any]:
        """名称、简介、分类或讲师姓名包含 ``term``（不区分大小写）的课程。"""

        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        return self._guard_read(
            lambda: self.session.query(Course)
            .outerjoin(Lecturer, Lecturer.id == Course.lecturer_id)
            .filter(
                or_(
                    Course.name.ilike(pattern, escape="\\"),
                    Course.description.ilike(pattern, escape="\\"),
                    Course.category.ilike(pattern, escape="\\"),
                    Lecturer.name.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Course.id)
            .all()
        )

    # === 写入 ===

    def insert(self, record: Base, *related: Base) -> Base:
        """插入记录，``related`` 中的已加载对象随同一事务一起提交。"""

        self.session.add(record)
        for item in related:
            self.session.add(item)
        self.commit()
        self.session.refresh(record)
        return record

    def update_by_id(self, model: Type[Base], entity_id: str, values: Dict[str, Any], *related: Base) -> Optional[Any]:
        record = self.find_by_id(model, entity_id)
        if record is None:
            return None
        for key, value in values.items():
            setattr(record, key, value)
        for item in related:
            self.session.add(item)
        self.commit()
        self.session.refresh(record)
        return record

    def delete_by_id(self, model: Type[Base], entity_id: str, *related: Base) -> Optional[Any]:
        record = self.find_by_id(model, entity_id)
        if record is None:
            return None
        self.session.delete(record)
        for item in related:
            self.session.add(item)
        self.commit()
        return record

    def commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Store rejected write on unique constraint: %s", exc.orig)
            raise StoreConflict("Record conflicts with an existing record, retry with fresh data") from exc
        except DBAPIError as exc:
            self.session.rollback()
            if _is_unavailable(exc):
                raise StoreUnavailable("Storage is temporarily unavailable") from exc
            raise

    def _guard_read(self, query):
        try:
            return query()
        except DBAPIError as exc:
            self.session.rollback()
            if _is_unavailable(exc):
                raise StoreUnavailable("Storage is temporarily unavailable") from exc
            raise


def _is_unavailable(exc: DBAPIError) -> bool:
    return isinstance(exc, OperationalError) or exc.connection_invalidated

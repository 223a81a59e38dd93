"""清空本地数据库中的全部业务数据（保留表结构与迁移记录）。"""
import sys
from pathlib import Path

# 添加项目根目录到 path
sys.path.insert(0, str(Path(__file__).parent.parent))

from lms.db import Base, engine, session_scope
from lms.models import Course, Grade, Lecturer, User


def clean():
    print("=" * 50)
    print("清理本地测试数据")
    print("=" * 50)

    Base.metadata.create_all(bind=engine)
    with session_scope() as db:
        # 成绩引用学生与课程，先删
        for model in (Grade, Course, User, Lecturer):
            count = db.query(model).delete()
            print(f"  删除 {model.__name__}: {count} 条")

    print("\n" + "=" * 50)
    print("清理完成！")
    print("=" * 50)


if __name__ == "__main__":
    clean()

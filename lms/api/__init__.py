"""API 路由包入口。"""

from fastapi import APIRouter

from lms.api import courses, grades
from lms.api.accounts import lecturers_router, users_router

router = APIRouter(prefix="/api")

# 注册子路由
router.include_router(users_router, prefix="/users", tags=["学生"])
router.include_router(lecturers_router, prefix="/lecturers", tags=["讲师"])
router.include_router(courses.router, prefix="/courses", tags=["课程"])
router.include_router(grades.router, prefix="/grades", tags=["成绩"])

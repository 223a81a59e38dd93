"""响应体构造。引用字段展开为公开摘要，任何响应都不包含密码字段。"""

from typing import Any, Dict, Optional

from lms.models import Course, Grade, Lecturer, User


def person_summary(entity_id: str, person: Optional[Any]) -> Dict[str, Any]:
    # 被引用者已删除时只保留 id
    if person is None:
        return {"id": entity_id, "name": None, "email": None}
    return {"id": person.id, "name": person.name, "email": person.email}


def course_summary(course_id: str, course: Optional[Course]) -> Dict[str, Any]:
    if course is None:
        return {"id": course_id, "name": None, "category": None}
    return {"id": course.id, "name": course.name, "category": course.category}


def present_course(course: Course, lecturer: Optional[Lecturer]) -> Dict[str, Any]:
    return {
        "id": course.id,
        "name": course.name,
        "description": course.description,
        "lecturer": person_summary(course.lecturer_id, lecturer),
        "category": course.category,
        "duration": course.duration,
        "price": course.price,
        "level": course.level.value if course.level else None,
        "enrollment_limit": course.enrollment_limit,
        "enrolled_students": list(course.enrolled_students or []),
        "content": [dict(item) for item in course.content or []],
        "created_at": course.created_at,
    }


def present_grade(grade: Grade, student: Optional[User], course: Optional[Course]) -> Dict[str, Any]:
    return {
        "id": grade.id,
        "student": person_summary(grade.student_id, student),
        "course": course_summary(grade.course_id, course),
        "status": grade.status.value,
        "remarks": grade.remarks,
        "graded_at": grade.graded_at,
    }


def present_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "grades": list(user.grades or []),
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def present_lecturer(lecturer: Lecturer) -> Dict[str, Any]:
    return {
        "id": lecturer.id,
        "name": lecturer.name,
        "email": lecturer.email,
        "department": lecturer.department,
        "courses": list(lecturer.courses or []),
        "created_at": lecturer.created_at,
        "updated_at": lecturer.updated_at,
    }

"""课程 CRUD、检索与选课 API。"""

from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from lms.dependencies import get_course_service
from lms.models import CourseLevel
from lms.services.courses import CourseService

router = APIRouter()


# === Schemas ===

class ContentItemIn(BaseModel):
    title: Optional[str] = None
    url: Optional[str] = None


class CoursePayload(BaseModel):
    """创建与更新共用；缺失字段由校验器逐项报告。"""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    lecturer: Optional[str] = None  # 讲师 id、姓名或 email
    category: Optional[str] = None
    duration: Optional[Union[float, str]] = None
    price: Optional[Union[float, str]] = None
    level: Optional[CourseLevel] = None
    enrollment_limit: Optional[int] = Field(default=None, ge=0, alias="enrollmentLimit")
    content: Optional[List[ContentItemIn]] = None


class EnrollRequest(BaseModel):
    student: str


class PersonSummary(BaseModel):
    id: str
    name: Optional[str]
    email: Optional[str]


class ContentItem(BaseModel):
    title: str
    url: str


class CourseResponse(BaseModel):
    id: str
    name: str
    description: str
    lecturer: PersonSummary
    category: str
    duration: float
    price: Optional[float]
    level: Optional[CourseLevel]
    enrollment_limit: Optional[int]
    enrolled_students: List[str]
    content: List[ContentItem]
    created_at: datetime


class CourseEnvelope(BaseModel):
    message: str
    course: CourseResponse


# === API 端点 ===

@router.get("/search", response_model=List[CourseResponse])
def search_courses(query: Optional[str] = None, service: CourseService = Depends(get_course_service)):
    """按名称、简介、分类或讲师姓名模糊检索。"""
    return service.search(query or "")


@router.post("/create", response_model=CourseEnvelope, status_code=status.HTTP_201_CREATED)
def create_course(data: CoursePayload, service: CourseService = Depends(get_course_service)):
    course = service.create(data.model_dump(exclude_unset=True))
    return {"message": "Course created successfully", "course": course}


@router.get("/", response_model=List[CourseResponse])
def list_courses(service: CourseService = Depends(get_course_service)):
    return service.list()


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(course_id: str, service: CourseService = Depends(get_course_service)):
    return service.get(course_id)


@router.put("/{course_id}", response_model=CourseEnvelope)
def update_course(
    course_id: str,
    data: CoursePayload,
    service: CourseService = Depends(get_course_service),
):
    """部分更新：未出现的字段保留原值。"""
    course = service.update(course_id, data.model_dump(exclude_unset=True))
    return {"message": "Course updated successfully", "course": course}


@router.delete("/{course_id}")
def delete_course(course_id: str, service: CourseService = Depends(get_course_service)):
    service.delete(course_id)
    return {"message": "Course deleted successfully"}


@router.post("/{course_id}/enroll", response_model=CourseEnvelope)
def enroll_student(
    course_id: str,
    data: EnrollRequest,
    service: CourseService = Depends(get_course_service),
):
    course = service.enroll(course_id, data.student)
    return {"message": "Student enrolled successfully", "course": course}

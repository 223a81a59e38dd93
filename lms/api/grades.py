"""成绩 API。"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict

from lms.dependencies import get_grade_service
from lms.models import GradeStatus
from lms.services.grades import GradeService

router = APIRouter()


# === Schemas ===

class GradeCreate(BaseModel):
    student: Optional[str] = None
    course: Optional[str] = None
    status: Optional[str] = None
    remarks: Optional[str] = None


class GradeUpdate(BaseModel):
    # 学生与课程不可修改
    model_config = ConfigDict(extra="forbid")

    status: Optional[str] = None
    remarks: Optional[str] = None


class StudentSummary(BaseModel):
    id: str
    name: Optional[str]
    email: Optional[str]


class CourseSummary(BaseModel):
    id: str
    name: Optional[str]
    category: Optional[str]


class GradeResponse(BaseModel):
    id: str
    student: StudentSummary
    course: CourseSummary
    status: GradeStatus
    remarks: Optional[str]
    graded_at: datetime


class GradeEnvelope(BaseModel):
    message: str
    grade: GradeResponse


# === API 端点 ===

@router.post("/assign", response_model=GradeEnvelope, status_code=status.HTTP_201_CREATED)
def assign_grade(data: GradeCreate, service: GradeService = Depends(get_grade_service)):
    grade = service.assign(data.model_dump(exclude_unset=True))
    return {"message": "Grade assigned successfully", "grade": grade}


@router.get("/", response_model=List[GradeResponse])
def list_grades(service: GradeService = Depends(get_grade_service)):
    return service.list()


@router.get("/student/{student_id}", response_model=List[GradeResponse])
def student_grades(student_id: str, service: GradeService = Depends(get_grade_service)):
    """某学生的全部成绩。"""
    return service.for_student(student_id)


@router.get("/course/{course_id}", response_model=List[GradeResponse])
def course_grades(course_id: str, service: GradeService = Depends(get_grade_service)):
    """某课程的全部成绩。"""
    return service.for_course(course_id)


@router.get("/{grade_id}", response_model=GradeResponse)
def get_grade(grade_id: str, service: GradeService = Depends(get_grade_service)):
    return service.get(grade_id)


@router.put("/{grade_id}", response_model=GradeEnvelope)
def update_grade(
    grade_id: str,
    data: GradeUpdate,
    service: GradeService = Depends(get_grade_service),
):
    grade = service.update(grade_id, data.model_dump(exclude_unset=True))
    return {"message": "Grade updated successfully", "grade": grade}


@router.delete("/{grade_id}")
def delete_grade(grade_id: str, service: GradeService = Depends(get_grade_service)):
    service.delete(grade_id)
    return {"message": "Grade deleted successfully"}

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.schemas.exam import Exam, ExamCreate, ExamAssignQuestions
from app.schemas.user import UserContext
from app.services.exam import exam_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Exam], status_code=status.HTTP_201_CREATED)
def create_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_in: ExamCreate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    new_exam = exam_service.create_exam(db, exam_in=exam_in, current_user_context=context)
    return APIResponse(message="Exam created successfully", data=Exam.model_validate(new_exam))


@router.get("/", response_model=APIResponse[List[Exam]])
def get_all_exams(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    skip: int = 0,
    limit: int = 100
):
    exams = exam_service.get_all_exams(db, skip=skip, limit=limit)
    return APIResponse(message="Exams retrieved successfully", data=[Exam.model_validate(e) for e in exams])


@router.get("/{exam_id}", response_model=APIResponse[Exam])
def get_exam(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    exam = exam_service.get_exam(db, exam_id=exam_id)
    return APIResponse(message="Exam retrieved successfully", data=Exam.model_validate(exam))


@router.post("/{exam_id}/assign")
def assign_questions(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    assign_in: ExamAssignQuestions,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    exam_service.assign_questions(
        db, exam_id=exam_id, question_ids=assign_in.question_ids, current_user_context=context
    )
    return {"ok": True}

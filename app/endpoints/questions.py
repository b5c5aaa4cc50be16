from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session

from app.core.config import settings
from app.schemas.response import APIResponse
from app.schemas.question import Question, QuestionCreate, QuestionUpdate, QuestionImportResult
from app.schemas.user import UserContext
from app.services.question import question_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Question], status_code=status.HTTP_201_CREATED)
def create_question(
    *,
    db: Session = Depends(deps.get_transactional_db),
    question_in: QuestionCreate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    new_question = question_service.create_question(db, question_in=question_in, current_user_context=context)
    return APIResponse(message="Question created successfully", data=Question.model_validate(new_question))


@router.get("/", response_model=APIResponse[List[Question]])
def get_all_questions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    skip: int = 0,
    limit: int = 100
):
    questions = question_service.get_all_questions(db, skip=skip, limit=limit)
    return APIResponse(message="Questions retrieved successfully", data=[Question.model_validate(q) for q in questions])


@router.post("/import", response_model=APIResponse[QuestionImportResult])
async def import_questions(
    file: UploadFile = File(...),
    db: Session = Depends(deps.get_transactional_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
):
    if not (file.filename or "").lower().endswith(('.csv', '.xlsx')):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Please upload a CSV or .xlsx file."
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File too large. Maximum file size is 10MB."
        )

    imported = question_service.import_questions(
        db, file_content=file_content, filename=file.filename, current_user_context=context
    )
    return APIResponse(message="Questions imported successfully", data=QuestionImportResult(imported=imported))


@router.get("/{question_id}", response_model=APIResponse[Question])
def get_question(
    *,
    db: Session = Depends(deps.get_db),
    question_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    question = question_service.get_question(db, question_id=question_id)
    return APIResponse(message="Question retrieved successfully", data=Question.model_validate(question))


@router.put("/{question_id}", response_model=APIResponse[Question])
def update_question(
    *,
    db: Session = Depends(deps.get_transactional_db),
    question_id: int,
    question_in: QuestionUpdate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    updated_question = question_service.update_question(
        db, question_id=question_id, question_in=question_in, current_user_context=context
    )
    return APIResponse(message="Question updated successfully", data=Question.model_validate(updated_question))

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.utils import deps
from app.schemas.answer import AutosaveRequest
from app.schemas.attempt import AttemptStarted, AutosaveAck, SubmitResult, AttemptResult
from app.schemas.user import UserContext
from app.services.attempt import AttemptService

router = APIRouter()


@router.post("/{exam_id}/start", response_model=AttemptStarted)
def start_attempt(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context),
    service: AttemptService = Depends(deps.get_attempt_service)
):
    attempt = service.start_attempt(db, exam_id=exam_id, user_id=context.user.id)
    return AttemptStarted(attempt_id=attempt.id)


@router.post("/{attempt_id}/autosave", response_model=AutosaveAck)
def autosave_answers(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    autosave_in: AutosaveRequest,
    context: UserContext = Depends(deps.get_current_user_with_context),
    service: AttemptService = Depends(deps.get_attempt_service)
):
    service.autosave(db, attempt_id=attempt_id, entries=autosave_in.answers, current_user_context=context)
    return AutosaveAck(ok=True)


@router.post("/{attempt_id}/submit", response_model=SubmitResult)
def submit_attempt(
    *,
    db: Session = Depends(deps.get_transactional_db),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context),
    service: AttemptService = Depends(deps.get_attempt_service)
):
    total = service.submit(db, attempt_id=attempt_id, current_user_context=context)
    return SubmitResult(ok=True, total=total)


@router.get("/{attempt_id}", response_model=AttemptResult)
def get_attempt(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context),
    service: AttemptService = Depends(deps.get_attempt_service)
):
    return service.get_result(db, attempt_id=attempt_id, current_user_context=context)

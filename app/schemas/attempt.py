from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.core.constants import AttemptStatusEnum
from app.schemas.answer import Answer

class AttemptStarted(BaseModel):
    attempt_id: int = Field(..., serialization_alias="attemptId")

class AutosaveAck(BaseModel):
    ok: bool = True

class SubmitResult(BaseModel):
    ok: bool = True
    total: float

class Attempt(BaseModel):
    id: int
    exam_id: int
    user_id: int
    status: AttemptStatusEnum
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    time_spent_seconds: Optional[int] = None
    total_score: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)

class AttemptResult(Attempt):
    answers: List[Answer] = []

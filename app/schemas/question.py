from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from app.core.constants import QuestionTypeEnum, AUTO_GRADABLE_QUESTION_TYPES

class QuestionOption(BaseModel):
    key: str
    label: str

class QuestionBase(BaseModel):
    type: QuestionTypeEnum
    content: str
    options: Optional[List[QuestionOption]] = None
    correct_answer: Optional[List[str]] = None # Option keys
    points: float = Field(default=1.0, ge=0)

class QuestionCreate(QuestionBase):

    @field_validator("options")
    def unique_option_keys(cls, v):
        if v is not None:
            keys = [option.key for option in v]
            if len(keys) != len(set(keys)):
                raise ValueError("Option keys must be unique.")
        return v

    @model_validator(mode="after")
    def check_choice_fields(self):
        if self.type in AUTO_GRADABLE_QUESTION_TYPES:
            if not self.options:
                raise ValueError("Choice questions need at least one option.")
            keys = {option.key for option in self.options}
            correct = self.correct_answer or []
            unknown = [key for key in correct if key not in keys]
            if unknown:
                raise ValueError(f"Correct answer references unknown option key(s): {unknown}")
            if self.type == QuestionTypeEnum.SINGLE_CHOICE and len(correct) != 1:
                raise ValueError("Single choice questions need exactly one correct option.")
        return self

class QuestionUpdate(BaseModel):
    content: Optional[str] = None
    options: Optional[List[QuestionOption]] = None
    correct_answer: Optional[List[str]] = None
    points: Optional[float] = Field(default=None, ge=0)

class Question(QuestionBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class QuestionImportResult(BaseModel):
    imported: int

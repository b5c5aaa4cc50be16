"""Scoring of auto-gradable answers.

A choice question earns its full points when the submitted option keys are
exactly the correct option keys, compared as sets; anything else scores zero.
There is no partial credit for multiple choice questions.
"""
from typing import Any, FrozenSet

from app.core.constants import QuestionTypeEnum, AUTO_GRADABLE_QUESTION_TYPES


def is_auto_gradable(question) -> bool:
    return QuestionTypeEnum(question.type) in AUTO_GRADABLE_QUESTION_TYPES


def _key_set(value: Any) -> FrozenSet[str]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(str(key) for key in value)
    return frozenset()


def submitted_keys(question, submitted: Any) -> FrozenSet[str]:
    """Option keys selected by an answer value; null or non-list values select nothing."""
    if isinstance(submitted, str) and QuestionTypeEnum(question.type) == QuestionTypeEnum.SINGLE_CHOICE:
        return frozenset({submitted})
    return _key_set(submitted)


def grade(question, submitted: Any) -> float:
    if not is_auto_gradable(question):
        raise ValueError(f"Question type '{QuestionTypeEnum(question.type).value}' cannot be graded automatically.")

    correct = _key_set(question.correct_answer)
    if submitted_keys(question, submitted) == correct:
        return float(question.points or 0)
    return 0.0

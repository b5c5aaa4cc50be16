from typing import Any, List, Optional

from app.core.constants import QuestionTypeEnum


class AnswerValueError(ValueError):
    pass


def _check_option_key(question, key: Any) -> str:
    if not isinstance(key, str) or not key:
        raise AnswerValueError("Option keys must be non-empty strings.")
    option_keys = question.option_keys
    if option_keys and key not in option_keys:
        raise AnswerValueError(f"'{key}' is not an option of this question.")
    return key


def _single_choice(question, value: Any) -> str:
    # A one-element list is accepted as the same selection.
    if isinstance(value, list) and len(value) == 1:
        value = value[0]
    return _check_option_key(question, value)


def _multiple_choice(question, value: Any) -> List[str]:
    if not isinstance(value, list):
        raise AnswerValueError("Multiple choice answers must be a list of option keys.")
    keys = [_check_option_key(question, key) for key in value]
    if len(keys) != len(set(keys)):
        raise AnswerValueError("Multiple choice answers must not repeat an option key.")
    return keys


def _text(question, value: Any) -> str:
    if not isinstance(value, str):
        raise AnswerValueError("Text answers must be a string.")
    return value


def _attachment(question, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise AnswerValueError("File upload answers must be an attachment reference.")
    return value


_NORMALIZERS = {
    QuestionTypeEnum.SINGLE_CHOICE: _single_choice,
    QuestionTypeEnum.MULTIPLE_CHOICE: _multiple_choice,
    QuestionTypeEnum.SHORT_TEXT: _text,
    QuestionTypeEnum.ESSAY: _text,
    QuestionTypeEnum.FILE_UPLOAD: _attachment,
}


def normalize_answer_value(question, value: Any) -> Any:
    """Check an answer value against the question type and return the form that gets stored.

    None is always accepted and clears the answer.
    """
    if value is None:
        return None
    return _NORMALIZERS[QuestionTypeEnum(question.type)](question, value)


def has_attachments(question) -> bool:
    return QuestionTypeEnum(question.type) == QuestionTypeEnum.FILE_UPLOAD


def attachments_for(question, value: Any) -> Optional[List[str]]:
    """Attachment list stored next to a file upload answer; None clears it."""
    if value is None:
        return None
    return [value]

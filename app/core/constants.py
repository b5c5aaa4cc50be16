from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"

class QuestionTypeEnum(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    SHORT_TEXT = "short_text"
    ESSAY = "essay"
    FILE_UPLOAD = "file_upload"

AUTO_GRADABLE_QUESTION_TYPES = frozenset({
    QuestionTypeEnum.SINGLE_CHOICE,
    QuestionTypeEnum.MULTIPLE_CHOICE,
})

class AttemptStatusEnum(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    GRADED = "graded"
    ABANDONED = "abandoned"

class AttemptStartPolicyEnum(str, Enum):
    ALWAYS_NEW = "always_new"
    RESUME_IN_PROGRESS = "resume_in_progress"

# Column order of the question import spreadsheet (first row is a header).
QUESTION_IMPORT_COLUMNS = [
    "type", "content", "option_a", "option_b", "option_c", "option_d", "correct", "points"
]
QUESTION_IMPORT_OPTION_KEYS = {
    "option_a": "A",
    "option_b": "B",
    "option_c": "C",
    "option_d": "D",
}

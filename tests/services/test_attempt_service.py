import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.core.constants import AttemptStatusEnum, AttemptStartPolicyEnum, QuestionTypeEnum
from app.crud.answer import answer as crud_answer
from app.crud.attempt import attempt as crud_attempt
from app.crud.exam import exam as crud_exam
from app.crud.question import question as crud_question
from app.schemas.answer import AutosaveEntry
from app.services.attempt import AttemptService


def make_service(policy=AttemptStartPolicyEnum.ALWAYS_NEW) -> AttemptService:
    return AttemptService(
        questions=crud_question,
        exams=crud_exam,
        attempts=crud_attempt,
        answers=crud_answer,
        start_policy=policy,
    )


def entries(*pairs):
    return [AutosaveEntry(question_id=question_id, answer=value) for question_id, value in pairs]


@pytest.fixture
def two_question_exam(question_factory, exam_factory):
    q1 = question_factory(QuestionTypeEnum.MULTIPLE_CHOICE, correct_answer=["A", "B"], points=2)
    q2 = question_factory(QuestionTypeEnum.SHORT_TEXT, points=1)
    exam = exam_factory([q1, q2])
    return exam, q1, q2


class TestStartAttempt:
    def test_creates_one_empty_answer_per_question(self, db_session: Session, user_factory, two_question_exam):
        exam, q1, q2 = two_question_exam
        student = user_factory()

        attempt = make_service().start_attempt(db_session, exam_id=exam.id, user_id=student.id)

        assert attempt.status == AttemptStatusEnum.IN_PROGRESS
        assert attempt.started_at is not None
        assert attempt.submitted_at is None
        answers = crud_answer.get_all_by_attempt(db_session, attempt_id=attempt.id)
        assert sorted(a.question_id for a in answers) == sorted([q1.id, q2.id])
        for ans in answers:
            assert ans.answer is None
            assert ans.is_graded is False
            assert ans.score is None

    def test_exam_without_questions_gets_no_answers(self, db_session: Session, user_factory, exam_factory):
        exam = exam_factory([])
        attempt = make_service().start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)
        assert crud_answer.get_all_by_attempt(db_session, attempt_id=attempt.id) == []

    def test_unknown_exam_is_not_found(self, db_session: Session, user_factory):
        with pytest.raises(HTTPException) as exc_info:
            make_service().start_attempt(db_session, exam_id=987654, user_id=user_factory().id)
        assert exc_info.value.status_code == 404

    def test_always_new_policy_creates_a_new_attempt_each_time(self, db_session: Session, user_factory, two_question_exam):
        exam, _, _ = two_question_exam
        student = user_factory()
        service = make_service(AttemptStartPolicyEnum.ALWAYS_NEW)

        first = service.start_attempt(db_session, exam_id=exam.id, user_id=student.id)
        second = service.start_attempt(db_session, exam_id=exam.id, user_id=student.id)

        assert first.id != second.id
        assert len(crud_attempt.get_by_user_and_exam(db_session, user_id=student.id, exam_id=exam.id)) == 2

    def test_resume_policy_returns_the_in_progress_attempt(self, db_session: Session, user_factory, two_question_exam):
        exam, _, _ = two_question_exam
        student = user_factory()
        service = make_service(AttemptStartPolicyEnum.RESUME_IN_PROGRESS)

        first = service.start_attempt(db_session, exam_id=exam.id, user_id=student.id)
        second = service.start_attempt(db_session, exam_id=exam.id, user_id=student.id)
        assert first.id == second.id

        service.submit(db_session, attempt_id=first.id)
        third = service.start_attempt(db_session, exam_id=exam.id, user_id=student.id)
        assert third.id != first.id


class TestAutosave:
    def test_overwrites_answer_values(self, db_session: Session, user_factory, two_question_exam):
        exam, q1, q2 = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q1.id, ["A"]), (q2.id, "draft")))
        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q1.id, ["A", "B"])))

        assert crud_answer.get_by_attempt_and_question(db_session, attempt.id, q1.id).answer == ["A", "B"]
        assert crud_answer.get_by_attempt_and_question(db_session, attempt.id, q2.id).answer == "draft"

    def test_is_idempotent(self, db_session: Session, user_factory, two_question_exam):
        exam, q1, q2 = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)
        payload = entries((q1.id, ["B", "A"]), (q2.id, "answer text"))

        service.autosave(db_session, attempt_id=attempt.id, entries=payload)
        once = {a.question_id: a.answer for a in crud_answer.get_all_by_attempt(db_session, attempt_id=attempt.id)}
        service.autosave(db_session, attempt_id=attempt.id, entries=payload)
        twice = {a.question_id: a.answer for a in crud_answer.get_all_by_attempt(db_session, attempt_id=attempt.id)}

        assert once == twice == {q1.id: ["B", "A"], q2.id: "answer text"}

    def test_ignores_unknown_question_ids(self, db_session: Session, user_factory, two_question_exam, question_factory):
        exam, q1, _ = two_question_exam
        outsider = question_factory(QuestionTypeEnum.SINGLE_CHOICE, correct_answer=["A"])
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        saved = service.autosave(
            db_session, attempt_id=attempt.id,
            entries=entries((outsider.id, "A"), (424242, "A"), (q1.id, ["A"]))
        )

        assert saved == 1
        answers = crud_answer.get_all_by_attempt(db_session, attempt_id=attempt.id)
        assert outsider.id not in {a.question_id for a in answers}
        assert len(answers) == 2

    def test_null_clears_a_saved_answer(self, db_session: Session, user_factory, two_question_exam):
        exam, _, q2 = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q2.id, "draft")))
        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q2.id, None)))

        assert crud_answer.get_by_attempt_and_question(db_session, attempt.id, q2.id).answer is None

    def test_invalid_value_rejects_whole_batch(self, db_session: Session, user_factory, two_question_exam):
        exam, q1, q2 = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        with pytest.raises(HTTPException) as exc_info:
            service.autosave(
                db_session, attempt_id=attempt.id,
                entries=entries((q2.id, "kept out"), (q1.id, "A"))
            )

        assert exc_info.value.status_code == 422
        assert exc_info.value.detail["answers"][0]["questionId"] == q1.id
        assert crud_answer.get_by_attempt_and_question(db_session, attempt.id, q2.id).answer is None

    def test_failure_part_way_keeps_earlier_entries(self, db_session: Session, monkeypatch, user_factory,
                                                    two_question_exam):
        exam, q1, q2 = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        original_save_value = crud_answer.save_value
        calls = {"n": 0}

        def failing_save_value(db, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                raise RuntimeError("connection dropped")
            return original_save_value(db, **kwargs)

        monkeypatch.setattr(crud_answer, "save_value", failing_save_value)

        with pytest.raises(RuntimeError):
            service.autosave(
                db_session, attempt_id=attempt.id,
                entries=entries((q1.id, ["A", "B"]), (q2.id, "never stored"))
            )
        db_session.rollback()

        assert calls["n"] == 2
        assert crud_answer.get_by_attempt_and_question(db_session, attempt.id, q1.id).answer == ["A", "B"]
        assert crud_answer.get_by_attempt_and_question(db_session, attempt.id, q2.id).answer is None

    def test_file_upload_reference_is_stored_as_attachment(self, db_session: Session, user_factory,
                                                           question_factory, exam_factory):
        upload = question_factory(QuestionTypeEnum.FILE_UPLOAD)
        essay = question_factory(QuestionTypeEnum.ESSAY)
        exam = exam_factory([upload, essay])
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        service.autosave(
            db_session, attempt_id=attempt.id,
            entries=entries((upload.id, "uploads/report.pdf"), (essay.id, "Some prose."))
        )
        saved_upload = crud_answer.get_by_attempt_and_question(db_session, attempt.id, upload.id)
        assert saved_upload.answer == "uploads/report.pdf"
        assert saved_upload.attachments == ["uploads/report.pdf"]
        assert crud_answer.get_by_attempt_and_question(db_session, attempt.id, essay.id).attachments is None

        service.autosave(db_session, attempt_id=attempt.id, entries=entries((upload.id, None)))
        cleared = crud_answer.get_by_attempt_and_question(db_session, attempt.id, upload.id)
        assert cleared.answer is None
        assert cleared.attachments is None

    def test_unknown_attempt_is_not_found(self, db_session: Session):
        with pytest.raises(HTTPException) as exc_info:
            make_service().autosave(db_session, attempt_id=987654, entries=[])
        assert exc_info.value.status_code == 404


class TestSubmit:
    def test_grades_only_auto_gradable_answers(self, db_session: Session, user_factory, two_question_exam):
        exam, q1, q2 = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)
        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q1.id, ["A", "B"]), (q2.id, "answer text")))

        total = service.submit(db_session, attempt_id=attempt.id)

        assert total == 2
        submitted = crud_attempt.get(db_session, id=attempt.id)
        assert submitted.status == AttemptStatusEnum.SUBMITTED
        assert submitted.total_score == 2
        assert submitted.submitted_at is not None
        assert submitted.time_spent_seconds is not None and submitted.time_spent_seconds >= 0

        a1 = crud_answer.get_by_attempt_and_question(db_session, attempt.id, q1.id)
        a2 = crud_answer.get_by_attempt_and_question(db_session, attempt.id, q2.id)
        assert a1.is_graded is True and a1.score == 2
        assert a2.is_graded is False and a2.score is None

    def test_wrong_and_missing_answers_score_zero(self, db_session: Session, user_factory, question_factory, exam_factory):
        q1 = question_factory(QuestionTypeEnum.SINGLE_CHOICE, correct_answer=["C"], points=5)
        q2 = question_factory(QuestionTypeEnum.MULTIPLE_CHOICE, correct_answer=["A", "D"], points=3)
        exam = exam_factory([q1, q2])
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)
        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q1.id, "B")))

        assert service.submit(db_session, attempt_id=attempt.id) == 0
        for ans in crud_answer.get_all_by_attempt(db_session, attempt_id=attempt.id):
            assert ans.is_graded is True
            assert ans.score == 0

    def test_resubmit_recomputes_total_from_current_answers(self, db_session: Session, user_factory, two_question_exam):
        exam, q1, _ = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)
        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q1.id, ["A"])))
        assert service.submit(db_session, attempt_id=attempt.id) == 0

        service.autosave(db_session, attempt_id=attempt.id, entries=entries((q1.id, ["A", "B"])))
        assert service.submit(db_session, attempt_id=attempt.id) == 2
        assert crud_attempt.get(db_session, id=attempt.id).total_score == 2

    def test_unknown_attempt_is_not_found(self, db_session: Session):
        with pytest.raises(HTTPException) as exc_info:
            make_service().submit(db_session, attempt_id=987654)
        assert exc_info.value.status_code == 404


class TestGetResult:
    def test_hides_correct_answers_until_submitted(self, db_session: Session, user_factory, two_question_exam):
        exam, q1, _ = two_question_exam
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        in_progress = service.get_result(db_session, attempt_id=attempt.id)
        assert all(a.question.correct_answer is None for a in in_progress.answers)

        service.submit(db_session, attempt_id=attempt.id)
        submitted = service.get_result(db_session, attempt_id=attempt.id)
        by_question = {a.question_id: a for a in submitted.answers}
        assert by_question[q1.id].question.correct_answer == ["A", "B"]

    def test_answers_follow_exam_question_order(self, db_session: Session, user_factory, question_factory, exam_factory):
        questions = [question_factory(QuestionTypeEnum.ESSAY, content=f"Essay {i}") for i in range(3)]
        exam = exam_factory(list(reversed(questions)))
        service = make_service()
        attempt = service.start_attempt(db_session, exam_id=exam.id, user_id=user_factory().id)

        result = service.get_result(db_session, attempt_id=attempt.id)
        assert [a.question_id for a in result.answers] == [q.id for q in reversed(questions)]

    def test_unknown_attempt_is_not_found(self, db_session: Session):
        with pytest.raises(HTTPException) as exc_info:
            make_service().get_result(db_session, attempt_id=987654)
        assert exc_info.value.status_code == 404

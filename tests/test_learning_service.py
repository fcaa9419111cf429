"""
학생 작업 테스트: 강의 완료, 퀴즈 제출(채점 → 진도 기록), 강의 진도 조회.
"""

import pytest

from app.core.errors import (
    AnswerCountMismatchError,
    EmptyQuizError,
    LectureTypeError,
    NotFoundError,
    ValidationError,
)
from app.db.models import LectureType

from tests.factories import INSTRUCTOR_ID, STUDENT_ID


def test_submit_quiz_three_of_four(learning, quiz_lecture):
    submission = learning.submit_quiz(STUDENT_ID, quiz_lecture.id, [0, 1, 2, 0])
    assert submission.grade.correct_count == 3
    assert submission.grade.score == 75.0
    assert submission.grade.passed is True
    assert submission.progress.is_completed is True
    assert submission.progress.quiz_attempts == 1
    assert submission.message == "Quiz passed!"


def test_submit_quiz_failing_attempt_not_completed(learning, quiz_lecture):
    submission = learning.submit_quiz(STUDENT_ID, quiz_lecture.id, [1, 1, 1, 1])
    assert submission.grade.correct_count == 1
    assert submission.grade.score == 25.0
    assert submission.grade.passed is False
    assert submission.progress.is_completed is False
    assert submission.message == "Quiz failed. Try again."


def test_failing_after_passing_keeps_completion(learning, quiz_lecture):
    learning.submit_quiz(STUDENT_ID, quiz_lecture.id, [0, 1, 2, 3])
    submission = learning.submit_quiz(STUDENT_ID, quiz_lecture.id, [3, 3, 3, 0])
    assert submission.grade.score == 0.0
    assert submission.progress.is_completed is True
    assert submission.progress.quiz_score == 0.0
    assert submission.progress.quiz_attempts == 2


def test_answer_count_mismatch_writes_nothing(learning, store, quiz_lecture):
    with pytest.raises(ValidationError) as exc_info:
        learning.submit_quiz(STUDENT_ID, quiz_lecture.id, [0, 1, 2])
    assert isinstance(exc_info.value, AnswerCountMismatchError)
    assert store.find_progress(STUDENT_ID, quiz_lecture.id) is None


def test_answer_count_mismatch_leaves_existing_row(learning, store, quiz_lecture):
    learning.submit_quiz(STUDENT_ID, quiz_lecture.id, [1, 1, 1, 1])
    with pytest.raises(AnswerCountMismatchError):
        learning.submit_quiz(STUDENT_ID, quiz_lecture.id, [0, 1, 2, 3, 0])
    row = store.find_progress(STUDENT_ID, quiz_lecture.id)
    assert row.quiz_attempts == 1
    assert row.quiz_score == 25.0


def test_empty_quiz_rejected(learning, catalog, course, store):
    lecture = catalog.create_lecture(
        INSTRUCTOR_ID, course.id, title="빈 퀴즈", lecture_type=LectureType.QUIZ
    )
    with pytest.raises(EmptyQuizError):
        learning.submit_quiz(STUDENT_ID, lecture.id, [])
    assert store.find_progress(STUDENT_ID, lecture.id) is None


def test_submit_quiz_to_reading_lecture_rejected(learning, reading_lecture):
    with pytest.raises(LectureTypeError):
        learning.submit_quiz(STUDENT_ID, reading_lecture.id, [0])


def test_complete_lecture_twice_is_noop(learning, reading_lecture):
    first = learning.complete_lecture(STUDENT_ID, reading_lecture.id)
    second = learning.complete_lecture(STUDENT_ID, reading_lecture.id)
    assert first.already_completed is False
    assert second.already_completed is True
    assert second.progress.is_completed is True
    assert second.progress.completed_at == first.progress.completed_at


def test_legacy_reading_type_can_be_completed(learning, catalog, course):
    lecture = catalog.create_lecture(
        INSTRUCTOR_ID, course.id, title="옛 읽기", lecture_type=LectureType.READING, content="x"
    )
    result = learning.complete_lecture(STUDENT_ID, lecture.id)
    assert result.progress.is_completed is True


def test_complete_quiz_lecture_rejected(learning, store, quiz_lecture):
    with pytest.raises(LectureTypeError):
        learning.complete_lecture(STUDENT_ID, quiz_lecture.id)
    assert store.find_progress(STUDENT_ID, quiz_lecture.id) is None


def test_unknown_lecture(learning):
    with pytest.raises(NotFoundError):
        learning.complete_lecture(STUDENT_ID, 404)
    with pytest.raises(NotFoundError):
        learning.submit_quiz(STUDENT_ID, 404, [0])
    with pytest.raises(NotFoundError):
        learning.get_lecture_progress(STUDENT_ID, 404)


def test_lecture_progress_defaults_and_hides_answers(learning, quiz_lecture):
    detail = learning.get_lecture_progress(STUDENT_ID, quiz_lecture.id)
    assert detail.progress.is_completed is False
    assert detail.progress.quiz_attempts == 0
    assert len(detail.lecture.questions) == 4
    dumped = detail.model_dump()
    assert all("correct_answer" not in q for q in dumped["lecture"]["questions"])


def test_lecture_progress_after_completion(learning, reading_lecture):
    learning.complete_lecture(STUDENT_ID, reading_lecture.id)
    detail = learning.get_lecture_progress(STUDENT_ID, reading_lecture.id)
    assert detail.progress.is_completed is True
    assert detail.lecture.content == "파이썬의 기본 자료형"
    assert detail.lecture.questions == []


def test_course_progress_through_learning(learning, course, reading_lecture, quiz_lecture):
    learning.complete_lecture(STUDENT_ID, reading_lecture.id)
    view = learning.get_course_progress(STUDENT_ID, course.id)
    assert (view.completed_count, view.total_count, view.percentage) == (1, 2, 50)
    assert [v.course.id for v in learning.get_all_progress(STUDENT_ID)] == [course.id]

"""
학생용 작업: 강의 완료, 퀴즈 제출, 강의 진도 조회, 강좌별 진도 조회.
퀴즈 제출은 채점(QuizGraderService) → 진도 기록(ProgressLedgerService) 순서로 처리한다.
"""

from typing import Any, Sequence

from app.core.errors import LectureTypeError, NotFoundError
from app.db.models import Lecture
from app.db.store import SqlEntityStore
from app.schema.catalog import LectureWithQuestions, PublicQuestion
from app.schema.progress import (
    CompletionResult,
    CourseProgressView,
    LectureDetail,
    ProgressSnapshot,
    QuizSubmission,
)
from app.services.progress_aggregator import ProgressAggregatorService
from app.services.progress_ledger import ProgressLedgerService
from app.services.quiz_grader import QuizGraderService, quiz_grader_service


class LearningService:
    def __init__(
        self,
        store: SqlEntityStore,
        *,
        grader: QuizGraderService = quiz_grader_service,
        ledger: ProgressLedgerService | None = None,
        aggregator: ProgressAggregatorService | None = None,
    ) -> None:
        self._store = store
        self._grader = grader
        self._ledger = ledger or ProgressLedgerService(store)
        self._aggregator = aggregator or ProgressAggregatorService(store)

    def _get_lecture(self, lecture_id: int) -> Lecture:
        lecture = self._store.find_lecture_by_id(lecture_id)
        if lecture is None:
            raise NotFoundError("Lecture not found")
        return lecture

    def complete_lecture(self, student_id: int, lecture_id: int) -> CompletionResult:
        """문서(reading/text-document) 강의 완료 처리. 이미 완료면 기존 행 그대로."""
        lecture = self._get_lecture(lecture_id)
        if not lecture.lecture_type.is_document:
            raise LectureTypeError("This endpoint is only for reading lectures")
        existing = self._store.find_progress(student_id, lecture_id)
        if existing is not None and existing.is_completed:
            return CompletionResult(
                progress=ProgressSnapshot.model_validate(existing), already_completed=True
            )
        row = self._ledger.record_completion(student_id, lecture_id)
        return CompletionResult(progress=ProgressSnapshot.model_validate(row))

    def submit_quiz(self, student_id: int, lecture_id: int, answers: Sequence[Any]) -> QuizSubmission:
        """
        채점 후 진도 기록. 문항 없음·답안 수 불일치는 기록 전에 ValidationError로 거부한다.
        """
        lecture = self._get_lecture(lecture_id)
        if not lecture.lecture_type.is_quiz:
            raise LectureTypeError("This endpoint is only for quiz lectures")
        questions = self._store.find_questions_by_lecture(lecture_id)
        grade = self._grader.grade(questions, answers)
        progress = self._ledger.record_quiz_attempt(student_id, lecture_id, grade)
        return QuizSubmission(grade=grade, progress=ProgressSnapshot.model_validate(progress))

    def get_lecture_progress(self, student_id: int, lecture_id: int) -> LectureDetail:
        lecture = self._get_lecture(lecture_id)
        questions = []
        if lecture.lecture_type.is_quiz:
            questions = [
                PublicQuestion.model_validate(q)
                for q in self._store.find_questions_by_lecture(lecture_id)
            ]
        detail = LectureWithQuestions.model_validate(lecture).model_copy(update={"questions": questions})
        row = self._store.find_progress(student_id, lecture_id)
        progress = ProgressSnapshot.model_validate(row) if row else ProgressSnapshot()
        return LectureDetail(lecture=detail, progress=progress)

    def get_all_progress(self, student_id: int) -> list[CourseProgressView]:
        return self._aggregator.build_progress_view(student_id)

    def get_course_progress(self, student_id: int, course_id: int) -> CourseProgressView:
        return self._aggregator.build_course_progress_view(student_id, course_id)

"""
학생 진도(student_progress) 기록의 유일한 쓰기 경로.
"""

from datetime import datetime, timezone
from typing import Callable

from app.db.models import StudentProgress
from app.db.store import SqlEntityStore
from app.schema.progress import GradeResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressLedgerService:
    """
    (student_id, lecture_id)당 한 행을 유지한다.

    - 완료는 멱등: 이미 완료된 행은 completed_at을 바꾸지 않는다.
    - 완료 상태는 단조: 통과 후 실패한 응시가 완료를 취소하지 않는다.
    - 응시 횟수는 저장소에서 원자적으로 +1 한다.
    저장소 오류는 StorageError로 그대로 올라가며 재시도하지 않는다.
    """

    def __init__(self, store: SqlEntityStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self._store = store
        self._clock = clock

    def record_completion(self, student_id: int, lecture_id: int) -> StudentProgress:
        return self._store.upsert_completion(student_id, lecture_id, self._clock())

    def record_quiz_attempt(
        self, student_id: int, lecture_id: int, grade_result: GradeResult
    ) -> StudentProgress:
        return self._store.upsert_quiz_attempt(
            student_id,
            lecture_id,
            score=grade_result.score,
            passed=grade_result.passed,
            now=self._clock(),
        )

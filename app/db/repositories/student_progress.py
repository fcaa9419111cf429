"""
student_progress 테이블 접근.

(student_id, lecture_id) 당 한 행(unique constraint). 갱신은 단일 UPDATE 문으로 원자적으로 수행하고,
UPDATE가 0행이면 INSERT 한다. 동시에 첫 INSERT가 겹쳐 unique 위반이 나면 롤백 후 UPDATE부터 다시 시도한다.
"""

from datetime import datetime

from sqlalchemy import DateTime, case, delete, literal, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import StorageError
from app.db.models import StudentProgress

# INSERT 경합에서 진 뒤 UPDATE로 재시도하는 최대 횟수
_MAX_UPSERT_ROUNDS = 3


class StudentProgressRepo:
    def get(self, session: Session, student_id: int, lecture_id: int) -> StudentProgress | None:
        stmt = (
            select(StudentProgress)
            .where(
                StudentProgress.student_id == student_id,
                StudentProgress.lecture_id == lecture_id,
            )
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()

    def list_by_student(
        self, session: Session, student_id: int, lecture_ids: list[int] | None = None
    ) -> list[StudentProgress]:
        conditions = [StudentProgress.student_id == student_id]
        if lecture_ids is not None:
            if not lecture_ids:
                return []
            conditions.append(StudentProgress.lecture_id.in_(lecture_ids))
        stmt = select(StudentProgress).where(*conditions)
        return list(session.exec(stmt).all())

    def mark_completed(
        self, session: Session, student_id: int, lecture_id: int, now: datetime
    ) -> StudentProgress:
        """
        완료 처리. 이미 완료된 행은 그대로 반환(completed_at 유지).
        """
        stmt = (
            update(StudentProgress)
            .where(
                StudentProgress.student_id == student_id,
                StudentProgress.lecture_id == lecture_id,
                StudentProgress.is_completed == False,  # noqa: E712
            )
            .values(is_completed=True, completed_at=now)
        )
        return self._upsert(
            session,
            student_id,
            lecture_id,
            update_stmt=stmt,
            new_row=lambda: StudentProgress(
                student_id=student_id,
                lecture_id=lecture_id,
                is_completed=True,
                completed_at=now,
                quiz_attempts=0,
            ),
            keep_existing=True,
        )

    def record_attempt(
        self,
        session: Session,
        student_id: int,
        lecture_id: int,
        *,
        score: float,
        passed: bool,
        now: datetime,
    ) -> StudentProgress:
        """
        퀴즈 응시 반영: 점수 덮어쓰기, 응시 횟수 +1 (DB에서 증가), 통과 시에만 완료로 전환.
        완료 상태는 한 번 true가 되면 실패 응시로 되돌아가지 않는다.
        """
        values = {
            "quiz_score": score,
            "quiz_attempts": StudentProgress.quiz_attempts + 1,
        }
        if passed:
            values["is_completed"] = True
            values["completed_at"] = case(
                (StudentProgress.is_completed == True, StudentProgress.completed_at),  # noqa: E712
                else_=literal(now, DateTime(timezone=True)),
            )
        stmt = (
            update(StudentProgress)
            .where(
                StudentProgress.student_id == student_id,
                StudentProgress.lecture_id == lecture_id,
            )
            .values(**values)
        )
        return self._upsert(
            session,
            student_id,
            lecture_id,
            update_stmt=stmt,
            new_row=lambda: StudentProgress(
                student_id=student_id,
                lecture_id=lecture_id,
                is_completed=passed,
                completed_at=now if passed else None,
                quiz_score=score,
                quiz_attempts=1,
            ),
        )

    def _upsert(
        self,
        session: Session,
        student_id: int,
        lecture_id: int,
        *,
        update_stmt,
        new_row,
        keep_existing: bool = False,
    ) -> StudentProgress:
        """
        UPDATE가 행을 바꿨으면 그 행을 반환, 0행이면 INSERT. INSERT가 unique 위반이면 UPDATE부터 다시.
        keep_existing=True 이면 UPDATE 0행이어도 기존 행이 있으면 그대로 반환한다(이미 완료된 행).
        """
        update_stmt = update_stmt.execution_options(synchronize_session=False)
        for _ in range(_MAX_UPSERT_ROUNDS):
            updated = session.execute(update_stmt).rowcount
            session.commit()
            if updated or keep_existing:
                existing = self.get(session, student_id, lecture_id)
                if existing is not None:
                    return existing
            row = new_row()
            if self._insert(session, row):
                return row
        raise StorageError(
            f"student_progress upsert failed student_id={student_id} lecture_id={lecture_id}"
        )

    def _insert(self, session: Session, row: StudentProgress) -> bool:
        """새 행 INSERT. 다른 요청이 먼저 INSERT 해서 unique 위반이면 롤백 후 False."""
        session.add(row)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            return False
        session.refresh(row)
        return True

    def delete_by_lectures(self, session: Session, lecture_ids: list[int]) -> None:
        """commit은 호출 측에서."""
        if lecture_ids:
            session.execute(delete(StudentProgress).where(StudentProgress.lecture_id.in_(lecture_ids)))


student_progress_repo = StudentProgressRepo()

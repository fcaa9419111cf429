"""
Entity Store: 서비스 계층이 생성자로 주입받는 저장소 어댑터.

세션 팩토리를 받아 repository들을 조합하고, SQLAlchemy 오류는 StorageError로 변환한다.
테스트에서는 sqlite 엔진의 Session을 팩토리로 넘긴다.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, ContextManager, Generator

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.errors import StorageError
from app.db.connection import get_session
from app.db.models import Course, Lecture, QuizQuestion, StudentProgress
from app.db.repositories.course import course_repo
from app.db.repositories.lecture import lecture_repo
from app.db.repositories.quiz_question import quiz_question_repo
from app.db.repositories.student_progress import student_progress_repo

SessionFactory = Callable[[], ContextManager[Session]]


class SqlEntityStore:
    """강좌·강의·문항·진도 저장소 (SQLModel Session)."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            raise StorageError(f"storage failure: {e}") from e

    # ----- 조회 -----

    def find_course(self, course_id: int) -> Course | None:
        with self._session() as session:
            return course_repo.get_by_id(session, course_id)

    def find_lecture_by_id(self, lecture_id: int) -> Lecture | None:
        with self._session() as session:
            return lecture_repo.get_by_id(session, lecture_id)

    def find_questions_by_lecture(self, lecture_id: int) -> list[QuizQuestion]:
        with self._session() as session:
            return quiz_question_repo.list_by_lecture(session, lecture_id)

    def find_courses_with_lectures(
        self,
        *,
        course_id: int | None = None,
        instructor_id: int | None = None,
    ) -> list[tuple[Course, list[Lecture]]]:
        """
        강좌와 정렬된 강의 목록 쌍. course_id를 주면 해당 강좌만(없으면 빈 리스트),
        instructor_id를 주면 그 강사의 강좌만.
        """
        with self._session() as session:
            if course_id is not None:
                course = course_repo.get_by_id(session, course_id)
                courses = [course] if course else []
            elif instructor_id is not None:
                courses = course_repo.list_by_instructor(session, instructor_id)
            else:
                courses = course_repo.list_all(session)
            grouped = lecture_repo.list_by_courses(session, [c.id for c in courses])
            return [(c, grouped[c.id]) for c in courses]

    def find_progress(self, student_id: int, lecture_id: int) -> StudentProgress | None:
        with self._session() as session:
            return student_progress_repo.get(session, student_id, lecture_id)

    def find_progress_by_student(
        self, student_id: int, lecture_ids: list[int] | None = None
    ) -> list[StudentProgress]:
        with self._session() as session:
            return student_progress_repo.list_by_student(session, student_id, lecture_ids)

    # ----- 진도 upsert -----

    def upsert_completion(self, student_id: int, lecture_id: int, now: datetime) -> StudentProgress:
        with self._session() as session:
            return student_progress_repo.mark_completed(session, student_id, lecture_id, now)

    def upsert_quiz_attempt(
        self,
        student_id: int,
        lecture_id: int,
        *,
        score: float,
        passed: bool,
        now: datetime,
    ) -> StudentProgress:
        with self._session() as session:
            return student_progress_repo.record_attempt(
                session, student_id, lecture_id, score=score, passed=passed, now=now
            )

    # ----- 강좌/강의 관리 (강사) -----

    def create_course(self, *, title: str, description: str, instructor_id: int) -> Course:
        with self._session() as session:
            return course_repo.create(
                session, title=title, description=description, instructor_id=instructor_id
            )

    def create_lecture(self, **fields: Any) -> Lecture:
        with self._session() as session:
            return lecture_repo.create(session, **fields)

    def update_lecture(self, lecture_id: int, fields: dict[str, Any]) -> Lecture | None:
        with self._session() as session:
            lecture = lecture_repo.get_by_id(session, lecture_id)
            if lecture is None:
                return None
            return lecture_repo.update(session, lecture, fields)

    def add_question(
        self, *, lecture_id: int, question_text: str, options: list[str], correct_answer: int
    ) -> QuizQuestion:
        with self._session() as session:
            return quiz_question_repo.insert(
                session,
                lecture_id=lecture_id,
                question_text=question_text,
                options=options,
                correct_answer=correct_answer,
            )

    def replace_questions(self, lecture_id: int, questions: list[dict[str, Any]]) -> list[QuizQuestion]:
        """기존 문항 삭제 후 새 문항 저장 (한 트랜잭션)."""
        with self._session() as session:
            quiz_question_repo.delete_by_lectures(session, [lecture_id])
            rows = [
                quiz_question_repo.insert(session, lecture_id=lecture_id, commit=False, **q)
                for q in questions
            ]
            session.commit()
            for row in rows:
                session.refresh(row)
            return rows

    def delete_lecture(self, lecture_id: int) -> None:
        """문항 → 진도 → 강의 순으로 삭제."""
        with self._session() as session:
            quiz_question_repo.delete_by_lectures(session, [lecture_id])
            student_progress_repo.delete_by_lectures(session, [lecture_id])
            lecture = lecture_repo.get_by_id(session, lecture_id)
            if lecture is not None:
                session.delete(lecture)
            session.commit()

    def delete_course(self, course_id: int) -> None:
        """문항 → 진도 → 강의 → 강좌 순으로 삭제."""
        with self._session() as session:
            lectures = lecture_repo.list_by_course(session, course_id)
            lecture_ids = [lec.id for lec in lectures]
            quiz_question_repo.delete_by_lectures(session, lecture_ids)
            student_progress_repo.delete_by_lectures(session, lecture_ids)
            for lecture in lectures:
                session.delete(lecture)
            session.flush()
            course = course_repo.get_by_id(session, course_id)
            if course is not None:
                session.delete(course)
            session.commit()

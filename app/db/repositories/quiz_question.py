"""
quiz_questions 테이블 접근.
options: JSON 배열 (문자열 2개 이상), correct_answer: 0부터 시작하는 인덱스.
"""

from sqlalchemy import delete
from sqlmodel import Session, select

from app.db.models import QuizQuestion


class QuizQuestionRepo:
    def insert(
        self,
        session: Session,
        *,
        lecture_id: int,
        question_text: str,
        options: list[str],
        correct_answer: int,
        commit: bool = True,
    ) -> QuizQuestion:
        row = QuizQuestion(
            lecture_id=lecture_id,
            question_text=question_text,
            options=options,
            correct_answer=correct_answer,
        )
        session.add(row)
        if commit:
            session.commit()
            session.refresh(row)
        return row

    def list_by_lecture(self, session: Session, lecture_id: int) -> list[QuizQuestion]:
        """출제 순서(id 오름차순)."""
        stmt = (
            select(QuizQuestion)
            .where(QuizQuestion.lecture_id == lecture_id)
            .order_by(QuizQuestion.id.asc())
        )
        return list(session.exec(stmt).all())

    def delete_by_lectures(self, session: Session, lecture_ids: list[int]) -> None:
        """commit은 호출 측에서."""
        if lecture_ids:
            session.execute(delete(QuizQuestion).where(QuizQuestion.lecture_id.in_(lecture_ids)))


quiz_question_repo = QuizQuestionRepo()

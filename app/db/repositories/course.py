"""
courses 테이블 접근.
"""

from sqlmodel import Session, select

from app.db.models import Course


class CourseRepo:
    def create(
        self,
        session: Session,
        *,
        title: str,
        description: str,
        instructor_id: int,
    ) -> Course:
        row = Course(title=title, description=description, instructor_id=instructor_id)
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def get_by_id(self, session: Session, course_id: int) -> Course | None:
        return session.get(Course, course_id)

    def list_all(self, session: Session) -> list[Course]:
        """최신 강좌가 먼저 오도록 id 내림차순."""
        stmt = select(Course).order_by(Course.id.desc())
        return list(session.exec(stmt).all())

    def list_by_instructor(self, session: Session, instructor_id: int) -> list[Course]:
        stmt = (
            select(Course)
            .where(Course.instructor_id == instructor_id)
            .order_by(Course.id.desc())
        )
        return list(session.exec(stmt).all())


course_repo = CourseRepo()

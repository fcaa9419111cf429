"""
lectures 테이블 접근.
정렬: order 오름차순, 같은 order면 생성 순(id 오름차순).
"""

from typing import Any

from sqlmodel import Session, select

from app.db.models import Lecture


class LectureRepo:
    def create(
        self,
        session: Session,
        *,
        course_id: int,
        title: str,
        lecture_type: str,
        order: int = 0,
        content: str | None = None,
        description: str | None = None,
        attachments: list[dict[str, Any]] | None = None,
    ) -> Lecture:
        row = Lecture(
            course_id=course_id,
            title=title,
            type=lecture_type,
            order=order,
            content=content,
            description=description,
            attachments=attachments or [],
        )
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def get_by_id(self, session: Session, lecture_id: int) -> Lecture | None:
        return session.get(Lecture, lecture_id)

    def list_by_course(self, session: Session, course_id: int) -> list[Lecture]:
        stmt = (
            select(Lecture)
            .where(Lecture.course_id == course_id)
            .order_by(Lecture.order.asc(), Lecture.id.asc())
        )
        return list(session.exec(stmt).all())

    def list_by_courses(self, session: Session, course_ids: list[int]) -> dict[int, list[Lecture]]:
        """course_id별 정렬된 강의 목록. 강의가 없는 강좌도 빈 리스트로 포함."""
        grouped: dict[int, list[Lecture]] = {cid: [] for cid in course_ids}
        if not course_ids:
            return grouped
        stmt = (
            select(Lecture)
            .where(Lecture.course_id.in_(course_ids))
            .order_by(Lecture.order.asc(), Lecture.id.asc())
        )
        for lecture in session.exec(stmt).all():
            grouped[lecture.course_id].append(lecture)
        return grouped

    def update(self, session: Session, lecture: Lecture, fields: dict[str, Any]) -> Lecture:
        for key, value in fields.items():
            setattr(lecture, key, value)
        session.add(lecture)
        session.commit()
        session.refresh(lecture)
        return lecture


lecture_repo = LectureRepo()

"""
강좌별 진도 집계: 강의별 진도를 모아 완료 수/전체 수를 만든다.
등록(enrollment) 개념이 없으므로 모든 강좌가 대상이다.
"""

from app.core.errors import NotFoundError
from app.db.models import Course, Lecture, StudentProgress
from app.db.store import SqlEntityStore
from app.schema.progress import (
    CourseProgressView,
    CourseSummary,
    LectureWithProgress,
    ProgressSnapshot,
)


class ProgressAggregatorService:
    def __init__(self, store: SqlEntityStore) -> None:
        self._store = store

    def build_progress_view(self, student_id: int) -> list[CourseProgressView]:
        """전체 강좌 (최신 강좌 먼저)."""
        courses = self._store.find_courses_with_lectures()
        return self._build(student_id, courses)

    def build_course_progress_view(self, student_id: int, course_id: int) -> CourseProgressView:
        courses = self._store.find_courses_with_lectures(course_id=course_id)
        if not courses:
            raise NotFoundError("Course not found")
        return self._build(student_id, courses)[0]

    def _build(
        self, student_id: int, courses: list[tuple[Course, list[Lecture]]]
    ) -> list[CourseProgressView]:
        lecture_ids = [lec.id for _, lectures in courses for lec in lectures]
        progress_by_lecture: dict[int, StudentProgress] = {
            p.lecture_id: p
            for p in self._store.find_progress_by_student(student_id, lecture_ids)
        }

        views: list[CourseProgressView] = []
        for course, lectures in courses:
            items = [
                LectureWithProgress(
                    id=lec.id,
                    title=lec.title,
                    type=lec.type,
                    order=lec.order,
                    progress=self._snapshot(progress_by_lecture.get(lec.id)),
                )
                for lec in lectures
            ]
            views.append(
                CourseProgressView(
                    course=CourseSummary.model_validate(course),
                    lectures=items,
                    completed_count=sum(1 for item in items if item.progress.is_completed),
                    total_count=len(items),
                )
            )
        return views

    @staticmethod
    def _snapshot(row: StudentProgress | None) -> ProgressSnapshot:
        if row is None:
            return ProgressSnapshot()
        return ProgressSnapshot.model_validate(row)

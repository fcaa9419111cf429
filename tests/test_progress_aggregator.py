"""
강좌별 진도 집계 테스트.
"""

import pytest

from app.core.errors import NotFoundError
from app.db.models import LectureType
from app.schema.progress import CourseProgressView, CourseSummary
from app.services.quiz_grader import quiz_grader_service

from tests.factories import INSTRUCTOR_ID, OTHER_INSTRUCTOR_ID, STUDENT_ID


def add_readings(catalog, course_id: int, orders: list[int], instructor_id: int = INSTRUCTOR_ID):
    return [
        catalog.create_lecture(
            instructor_id,
            course_id,
            title=f"읽기 {i}",
            lecture_type=LectureType.TEXT_DOCUMENT,
            content="본문",
            order=order,
        )
        for i, order in enumerate(orders)
    ]


def test_five_lectures_two_completed(catalog, course, ledger, aggregator):
    lectures = add_readings(catalog, course.id, [1, 2, 3, 4, 5])
    ledger.record_completion(STUDENT_ID, lectures[0].id)
    ledger.record_completion(STUDENT_ID, lectures[3].id)

    view = aggregator.build_course_progress_view(STUDENT_ID, course.id)
    assert view.completed_count == 2
    assert view.total_count == 5
    assert view.percentage == 40
    assert view.course.id == course.id
    assert view.course.title == course.title


def test_missing_progress_uses_defaults(catalog, course, aggregator):
    add_readings(catalog, course.id, [0])
    view = aggregator.build_course_progress_view(STUDENT_ID, course.id)
    progress = view.lectures[0].progress
    assert progress.is_completed is False
    assert progress.quiz_score is None
    assert progress.quiz_attempts == 0
    assert progress.completed_at is None


def test_lectures_ordered_by_order_then_insertion(catalog, course, aggregator):
    created = add_readings(catalog, course.id, [3, 1, 3, 0])
    view = aggregator.build_course_progress_view(STUDENT_ID, course.id)
    ids = [lec.id for lec in view.lectures]
    assert ids == [created[3].id, created[1].id, created[0].id, created[2].id]


def test_all_courses_are_included_without_enrollment(catalog, ledger, aggregator):
    first = catalog.create_course(INSTRUCTOR_ID, "A", "a")
    second = catalog.create_course(OTHER_INSTRUCTOR_ID, "B", "b")
    empty = catalog.create_course(INSTRUCTOR_ID, "C", "c")
    a_lectures = add_readings(catalog, first.id, [0, 1])
    b_lectures = add_readings(catalog, second.id, [0, 1, 2], instructor_id=OTHER_INSTRUCTOR_ID)
    ledger.record_completion(STUDENT_ID, a_lectures[1].id)
    for lec in b_lectures:
        ledger.record_completion(STUDENT_ID, lec.id)

    views = aggregator.build_progress_view(STUDENT_ID)
    by_id = {v.course.id: v for v in views}
    # 최신 강좌가 먼저
    assert [v.course.id for v in views] == [empty.id, second.id, first.id]
    assert (by_id[first.id].completed_count, by_id[first.id].total_count) == (1, 2)
    assert (by_id[second.id].completed_count, by_id[second.id].total_count) == (3, 3)
    assert by_id[second.id].percentage == 100
    assert (by_id[empty.id].completed_count, by_id[empty.id].total_count) == (0, 0)
    assert by_id[empty.id].percentage == 0


def test_completed_count_matches_ledger(catalog, course, quiz_lecture, ledger, store, aggregator):
    readings = add_readings(catalog, course.id, [5, 6])
    ledger.record_completion(STUDENT_ID, readings[0].id)
    questions = store.find_questions_by_lecture(quiz_lecture.id)
    ledger.record_quiz_attempt(STUDENT_ID, quiz_lecture.id, quiz_grader_service.grade(questions, [0, 1, 2, 3]))

    view = aggregator.build_course_progress_view(STUDENT_ID, course.id)
    rows = store.find_progress_by_student(STUDENT_ID)
    completed_in_course = {
        r.lecture_id for r in rows if r.is_completed
    } & {lec.id for lec in view.lectures}
    assert view.completed_count == len(completed_in_course) == 2
    quiz_item = next(lec for lec in view.lectures if lec.id == quiz_lecture.id)
    assert quiz_item.progress.quiz_score == 100.0
    assert quiz_item.progress.quiz_attempts == 1


def test_other_students_progress_is_ignored(catalog, course, ledger, aggregator):
    lectures = add_readings(catalog, course.id, [0, 1])
    ledger.record_completion(STUDENT_ID + 1, lectures[0].id)
    view = aggregator.build_course_progress_view(STUDENT_ID, course.id)
    assert view.completed_count == 0


def test_unknown_course(aggregator):
    with pytest.raises(NotFoundError):
        aggregator.build_course_progress_view(STUDENT_ID, 9999)


@pytest.mark.parametrize(
    "completed,total,expected",
    [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (5, 5, 100)],
)
def test_percentage_rounding(completed, total, expected):
    view = CourseProgressView(
        course=CourseSummary(id=1, title="t", description="d"),
        lectures=[],
        completed_count=completed,
        total_count=total,
    )
    assert view.percentage == expected
    assert view.model_dump()["percentage"] == expected

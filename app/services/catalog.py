"""
강좌/강의/퀴즈 문항 관리 (강사용) 및 강좌 목록 조회.
강사는 자기 강좌만 수정할 수 있다. 삭제는 문항 → 진도 → 강의 → 강좌 순으로 연쇄된다.
"""

import logging
from typing import Any

from app.core.errors import AuthorizationError, LectureTypeError, NotFoundError, ValidationError
from app.db.models import Course, Lecture, LectureType, QuizQuestion
from app.db.store import SqlEntityStore
from app.schema.catalog import (
    CourseOut,
    CourseWithLectures,
    LectureWithQuestions,
    PublicQuestion,
)

logger = logging.getLogger(__name__)

# update_lecture에서 바꿀 수 있는 필드
_EDITABLE_LECTURE_FIELDS = ("title", "description", "content", "order", "attachments")
# null로 비울 수 없는 필드
_REQUIRED_LECTURE_FIELDS = ("title", "order", "attachments")


def validate_question(question_text: str, options: list[str], correct_answer: int) -> None:
    if not question_text or not question_text.strip():
        raise ValidationError("Question text is required")
    if len(options) < 2:
        raise ValidationError("At least 2 options are required")
    if any(not opt or not opt.strip() for opt in options):
        raise ValidationError("Each option must not be empty")
    if correct_answer < 0 or correct_answer >= len(options):
        raise ValidationError("Correct answer index is invalid")


class CatalogService:
    def __init__(self, store: SqlEntityStore) -> None:
        self._store = store

    # ----- 소유권 확인 -----

    def _owned_course(self, instructor_id: int, course_id: int) -> Course:
        course = self._store.find_course(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        if course.instructor_id != instructor_id:
            raise AuthorizationError("You do not have permission to modify this course")
        return course

    def _owned_lecture(self, instructor_id: int, lecture_id: int) -> Lecture:
        lecture = self._store.find_lecture_by_id(lecture_id)
        if lecture is None:
            raise NotFoundError("Lecture not found")
        self._owned_course(instructor_id, lecture.course_id)
        return lecture

    # ----- 조회 -----

    def _with_lectures(
        self, pairs: list[tuple[Course, list[Lecture]]], include_questions: bool = False
    ) -> list[CourseWithLectures]:
        out = []
        for course, lectures in pairs:
            items = []
            for lec in lectures:
                item = LectureWithQuestions.model_validate(lec)
                if include_questions and lec.lecture_type.is_quiz:
                    item.questions = [
                        PublicQuestion.model_validate(q)
                        for q in self._store.find_questions_by_lecture(lec.id)
                    ]
                items.append(item)
            out.append(CourseWithLectures.model_validate(course).model_copy(update={"lectures": items}))
        return out

    def list_courses(self) -> list[CourseWithLectures]:
        return self._with_lectures(self._store.find_courses_with_lectures())

    def get_course(self, course_id: int) -> CourseWithLectures:
        pairs = self._store.find_courses_with_lectures(course_id=course_id)
        if not pairs:
            raise NotFoundError("Course not found")
        return self._with_lectures(pairs, include_questions=True)[0]

    def list_instructor_courses(self, instructor_id: int) -> list[CourseWithLectures]:
        return self._with_lectures(self._store.find_courses_with_lectures(instructor_id=instructor_id))

    # ----- 강좌 -----

    def create_course(self, instructor_id: int, title: str, description: str) -> CourseOut:
        course = self._store.create_course(
            title=title.strip(), description=description.strip(), instructor_id=instructor_id
        )
        logger.info("강좌 생성 course_id=%s instructor_id=%s", course.id, instructor_id)
        return CourseOut.model_validate(course)

    def delete_course(self, instructor_id: int, course_id: int) -> None:
        self._owned_course(instructor_id, course_id)
        self._store.delete_course(course_id)
        logger.info("강좌 삭제 course_id=%s", course_id)

    # ----- 강의 -----

    def create_lecture(
        self,
        instructor_id: int,
        course_id: int,
        *,
        title: str,
        lecture_type: LectureType,
        content: str | None = None,
        order: int = 0,
        description: str | None = None,
        attachments: list[dict[str, Any]] | None = None,
    ) -> Lecture:
        self._owned_course(instructor_id, course_id)
        if order < 0:
            raise ValidationError("Order must be a non-negative integer")
        return self._store.create_lecture(
            course_id=course_id,
            title=title.strip(),
            lecture_type=lecture_type.value,
            order=order,
            # 퀴즈 강의는 본문을 갖지 않는다
            content=content if lecture_type.is_document else None,
            description=description,
            attachments=attachments or [],
        )

    def update_lecture(self, instructor_id: int, lecture_id: int, fields: dict[str, Any]) -> Lecture:
        """
        title/description/content/order/attachments 만 수정. type 변경은 거부한다.
        퀴즈 강의의 content는 무시한다.
        """
        lecture = self._owned_lecture(instructor_id, lecture_id)
        requested_type = fields.get("type")
        if requested_type is not None:
            try:
                same_type = LectureType(requested_type) is lecture.lecture_type
            except ValueError:
                raise ValidationError(f"Unknown lecture type: {requested_type}") from None
            if not same_type:
                raise LectureTypeError("Lecture type cannot be changed")
        changes = {
            k: v
            for k, v in fields.items()
            if k in _EDITABLE_LECTURE_FIELDS and not (v is None and k in _REQUIRED_LECTURE_FIELDS)
        }
        if lecture.lecture_type.is_quiz:
            changes.pop("content", None)
        if changes.get("order") is not None and changes["order"] < 0:
            raise ValidationError("Order must be a non-negative integer")
        updated = self._store.update_lecture(lecture_id, changes)
        if updated is None:
            raise NotFoundError("Lecture not found")
        return updated

    def delete_lecture(self, instructor_id: int, lecture_id: int) -> None:
        self._owned_lecture(instructor_id, lecture_id)
        self._store.delete_lecture(lecture_id)
        logger.info("강의 삭제 lecture_id=%s", lecture_id)

    # ----- 퀴즈 문항 -----

    def add_question(
        self,
        instructor_id: int,
        course_id: int,
        lecture_id: int,
        *,
        question_text: str,
        options: list[str],
        correct_answer: int,
    ) -> QuizQuestion:
        self._owned_course(instructor_id, course_id)
        lecture = self._store.find_lecture_by_id(lecture_id)
        if lecture is None or lecture.course_id != course_id:
            raise NotFoundError("Lecture not found")
        if not lecture.lecture_type.is_quiz:
            raise LectureTypeError("Questions can only be added to quiz lectures")
        validate_question(question_text, options, correct_answer)
        return self._store.add_question(
            lecture_id=lecture_id,
            question_text=question_text.strip(),
            options=[opt.strip() for opt in options],
            correct_answer=correct_answer,
        )

    def replace_questions(
        self, instructor_id: int, lecture_id: int, questions: list[dict[str, Any]]
    ) -> list[QuizQuestion]:
        """
        기존 문항을 모두 지우고 새로 저장. 질문이 비었거나 보기가 전부 빈 항목은 건너뛴다.
        """
        lecture = self._owned_lecture(instructor_id, lecture_id)
        if not lecture.lecture_type.is_quiz:
            raise LectureTypeError("This endpoint is only for quiz lectures")
        kept = []
        for q in questions:
            text = (q.get("question_text") or "").strip()
            options = [opt.strip() for opt in q.get("options") or []]
            if not text or not any(options):
                continue
            correct_answer = q.get("correct_answer", 0)
            validate_question(text, options, correct_answer)
            kept.append({"question_text": text, "options": options, "correct_answer": correct_answer})
        return self._store.replace_questions(lecture_id, kept)

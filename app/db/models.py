"""
SQLModel 테이블 정의: 강좌, 강의, 퀴즈 문항, 학생 진도.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Column, DateTime, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

# PostgreSQL에서는 JSONB, 그 외(sqlite 등)에서는 JSON
JsonType = JSON().with_variant(JSONB(), "postgresql")


class LectureType(str, Enum):
    """강의 유형. reading은 text-document의 이전 이름으로 동일하게 취급한다."""

    TEXT_DOCUMENT = "text-document"
    READING = "reading"
    QUIZ = "quiz"

    @property
    def is_quiz(self) -> bool:
        return self is LectureType.QUIZ

    @property
    def is_document(self) -> bool:
        return self in (LectureType.TEXT_DOCUMENT, LectureType.READING)


class Course(SQLModel, table=True):
    """강좌. 강사 한 명이 소유한다."""

    __tablename__ = "courses"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(nullable=False, max_length=200)
    description: str = Field(sa_column=Column(Text, nullable=False))
    instructor_id: int = Field(nullable=False, index=True)
    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), server_default=func.now()),
    )


class Lecture(SQLModel, table=True):
    """강좌 안의 강의. type은 생성 후 변경 불가."""

    __tablename__ = "lectures"

    id: int | None = Field(default=None, primary_key=True)
    course_id: int = Field(foreign_key="courses.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=200)
    type: str = Field(sa_column=Column(String(32), nullable=False))  # LectureType 값
    order: int = Field(default=0, nullable=False)
    content: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    # 각 항목: filename, original_name, mime_type, size
    attachments: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JsonType, nullable=False, server_default="[]"),
    )
    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), server_default=func.now()),
    )

    @property
    def lecture_type(self) -> LectureType:
        return LectureType(self.type)


class QuizQuestion(SQLModel, table=True):
    """퀴즈 문항. correct_answer는 options의 0부터 시작하는 인덱스."""

    __tablename__ = "quiz_questions"

    id: int | None = Field(default=None, primary_key=True)
    lecture_id: int = Field(foreign_key="lectures.id", nullable=False, index=True)
    question_text: str = Field(sa_column=Column(Text, nullable=False))
    options: list[str] = Field(sa_column=Column(JsonType, nullable=False))
    correct_answer: int = Field(nullable=False)


class StudentProgress(SQLModel, table=True):
    """(학생, 강의) 쌍마다 최대 한 행."""

    __tablename__ = "student_progress"
    __table_args__ = (UniqueConstraint("student_id", "lecture_id", name="uq_student_progress_student_lecture"),)

    id: int | None = Field(default=None, primary_key=True)
    student_id: int = Field(nullable=False, index=True)
    lecture_id: int = Field(foreign_key="lectures.id", nullable=False, index=True)
    is_completed: bool = Field(default=False, nullable=False)
    completed_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )
    quiz_score: float | None = Field(default=None, ge=0, le=100)
    quiz_attempts: int = Field(default=0, nullable=False, ge=0)
    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), server_default=func.now()),
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), onupdate=func.now()),
    )

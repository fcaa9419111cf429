"""
채점 결과·진도 스키마 (서비스 계층 값 객체).
"""

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.schema.catalog import LectureWithQuestions

PASSING_SCORE = 70.0


class GradableQuestion(BaseModel):
    """채점에 필요한 문항 정보만."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    question_text: str = ""
    options: list[str] = Field(default_factory=list)
    correct_answer: int


class QuestionResult(BaseModel):
    question_id: int | None
    question_text: str
    submitted_answer: Any = None
    correct_answer: int
    is_correct: bool


class GradeResult(BaseModel):
    correct_count: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1)
    score: float = Field(..., ge=0, le=100, description="정답률(%)")
    passed: bool
    results: list[QuestionResult]


class ProgressSnapshot(BaseModel):
    """학생 한 명의 강의 한 개 진도. 행이 없으면 기본값."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    student_id: int | None = None
    lecture_id: int | None = None
    is_completed: bool = False
    completed_at: datetime | None = None
    quiz_score: float | None = None
    quiz_attempts: int = 0


class LectureWithProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    type: str
    order: int
    progress: ProgressSnapshot


class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str


class CourseProgressView(BaseModel):
    course: CourseSummary
    lectures: list[LectureWithProgress]
    completed_count: int
    total_count: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percentage(self) -> int:
        if self.total_count == 0:
            return 0
        # 0.5는 올림 (12.5% → 13%)
        return math.floor(self.completed_count * 100 / self.total_count + 0.5)


class LectureDetail(BaseModel):
    """학생용 강의 상세: 강의 + 정답 없는 문항 + 진도."""

    lecture: LectureWithQuestions
    progress: ProgressSnapshot


class QuizSubmission(BaseModel):
    grade: GradeResult
    progress: ProgressSnapshot

    @property
    def message(self) -> str:
        return "Quiz passed!" if self.grade.passed else "Quiz failed. Try again."


class CompletionResult(BaseModel):
    progress: ProgressSnapshot
    already_completed: bool = False

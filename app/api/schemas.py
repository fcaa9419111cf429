"""
API 요청/응답 스키마.
"""

from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, Field

from app.db.models import LectureType
from app.schema.catalog import Attachment
from app.schema.progress import GradeResult, ProgressSnapshot, QuestionResult

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """공통 응답 포맷: {success, message, data}."""

    success: bool = True
    message: str | None = None
    data: T | None = None


# ----- 강좌/강의 (강사) -----


class CourseCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="강좌 제목")
    description: str = Field(..., min_length=1, description="강좌 설명")


class LectureCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="강의 제목")
    type: LectureType = Field(..., description="text-document | reading | quiz")
    content: str | None = Field(None, description="문서 강의 본문 (퀴즈 강의는 무시)")
    description: str | None = None
    order: int = Field(0, ge=0, description="강좌 안에서의 순서")
    attachments: list[Attachment] = Field(default_factory=list)


class LectureUpdateRequest(BaseModel):
    """type은 변경할 수 없다. 같은 값을 보내는 것만 허용."""

    title: str | None = Field(None, min_length=1, max_length=200)
    type: LectureType | None = None
    content: str | None = None
    description: str | None = None
    order: int | None = Field(None, ge=0)
    attachments: list[Attachment] | None = None


class QuestionCreateRequest(BaseModel):
    question_text: str = Field(..., min_length=1, description="질문 문장")
    options: list[str] = Field(..., min_length=2, description="보기 (2개 이상)")
    correct_answer: int = Field(..., ge=0, description="정답 보기 인덱스 (0부터)")


class QuestionDraft(BaseModel):
    """문항 일괄 교체용. 빈 문항은 서버에서 건너뛴다."""

    question_text: str = ""
    options: list[str] = Field(default_factory=list)
    correct_answer: int = Field(0, ge=0)


class QuestionsReplaceRequest(BaseModel):
    questions: list[QuestionDraft]


# ----- 학생 -----


class QuizSubmitRequest(BaseModel):
    answers: list[Annotated[int, Field(ge=0, strict=True)]] = Field(
        ..., description="문항 순서대로 고른 보기 인덱스"
    )


class QuizSubmitResponseData(BaseModel):
    score: float
    passed: bool
    correct_answers: int
    total_questions: int
    results: list[QuestionResult]
    progress: ProgressSnapshot

    @classmethod
    def from_grade(cls, grade: GradeResult, progress: ProgressSnapshot) -> "QuizSubmitResponseData":
        return cls(
            score=grade.score,
            passed=grade.passed,
            correct_answers=grade.correct_count,
            total_questions=grade.total_questions,
            results=grade.results,
            progress=progress,
        )


class ProgressData(BaseModel):
    progress: ProgressSnapshot


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    info: dict[str, Any] = Field(default_factory=dict)

"""
강좌/강의/문항 조회용 스키마. 학생에게 보내는 문항에는 정답을 넣지 않는다.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Attachment(BaseModel):
    """첨부 파일 메타데이터 (파일 저장은 외부에서 처리)."""

    filename: str = Field(..., min_length=1)
    original_name: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1)
    size: int = Field(..., ge=0)


class PublicQuestion(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_text: str
    options: list[str]


class InstructorQuestion(PublicQuestion):
    correct_answer: int


class LectureOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    title: str
    type: str
    order: int
    content: str | None = None
    description: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)


class LectureWithQuestions(LectureOut):
    questions: list[PublicQuestion] = Field(default_factory=list)


class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    instructor_id: int
    created_at: datetime | None = None


class CourseWithLectures(CourseOut):
    lectures: list[LectureWithQuestions] = Field(default_factory=list)

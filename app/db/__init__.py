from app.db.connection import engine, get_session, init_db
from app.db.models import (
    Course,
    Lecture,
    LectureType,
    QuizQuestion,
    StudentProgress,
)
from app.db.repositories.course import course_repo
from app.db.repositories.lecture import lecture_repo
from app.db.repositories.quiz_question import quiz_question_repo
from app.db.repositories.student_progress import student_progress_repo
from app.db.store import SqlEntityStore

__all__ = [
    "engine",
    "get_session",
    "init_db",
    "Course",
    "Lecture",
    "LectureType",
    "QuizQuestion",
    "StudentProgress",
    "course_repo",
    "lecture_repo",
    "quiz_question_repo",
    "student_progress_repo",
    "SqlEntityStore",
]

from app.db.repositories.course import course_repo
from app.db.repositories.lecture import lecture_repo
from app.db.repositories.quiz_question import quiz_question_repo
from app.db.repositories.student_progress import student_progress_repo

__all__ = [
    "course_repo",
    "lecture_repo",
    "quiz_question_repo",
    "student_progress_repo",
]

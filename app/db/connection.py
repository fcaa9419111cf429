"""
SQLModel 엔진·세션 (PostgreSQL, 테스트에서는 sqlite).
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings
from app.db.models import (  # noqa: F401 - 테이블 등록
    Course,
    Lecture,
    QuizQuestion,
    StudentProgress,
)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    # postgresql:// → postgresql+psycopg:// (psycopg3 드라이버)
    url = database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return create_engine(url, echo=echo)


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)


def init_db(target: Engine | None = None) -> None:
    """테이블이 없으면 생성."""
    SQLModel.metadata.create_all(target or engine)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session

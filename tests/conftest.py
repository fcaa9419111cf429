"""
공통 픽스처: 테스트마다 새 in-memory sqlite 엔진, Entity Store, 서비스, 샘플 강좌.
"""

import os

# app 모듈 import 전에 설정 (기본값 PostgreSQL 대신 sqlite)
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.db.models import LectureType
from app.db.store import SqlEntityStore
from app.services.catalog import CatalogService
from app.services.learning import LearningService
from app.services.progress_aggregator import ProgressAggregatorService
from app.services.progress_ledger import ProgressLedgerService
from tests.factories import INSTRUCTOR_ID



@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return SqlEntityStore(lambda: Session(engine))


@pytest.fixture
def catalog(store):
    return CatalogService(store)


@pytest.fixture
def ledger(store):
    return ProgressLedgerService(store)


@pytest.fixture
def aggregator(store):
    return ProgressAggregatorService(store)


@pytest.fixture
def learning(store):
    return LearningService(store)


@pytest.fixture
def course(catalog):
    return catalog.create_course(INSTRUCTOR_ID, "Python 기초", "변수, 반복문, 함수")


@pytest.fixture
def reading_lecture(catalog, course):
    return catalog.create_lecture(
        INSTRUCTOR_ID,
        course.id,
        title="변수와 자료형",
        lecture_type=LectureType.TEXT_DOCUMENT,
        content="파이썬의 기본 자료형",
        order=1,
    )


@pytest.fixture
def quiz_lecture(catalog, course):
    """문항 4개, 정답 인덱스 [0, 1, 2, 3]."""
    lecture = catalog.create_lecture(
        INSTRUCTOR_ID,
        course.id,
        title="1장 퀴즈",
        lecture_type=LectureType.QUIZ,
        order=2,
    )
    for i in range(4):
        catalog.add_question(
            INSTRUCTOR_ID,
            course.id,
            lecture.id,
            question_text=f"질문 {i + 1}",
            options=["A", "B", "C", "D"],
            correct_answer=i,
        )
    return lecture

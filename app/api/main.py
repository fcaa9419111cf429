"""
FastAPI 앱: 강좌/강의 관리(강사), 강의 완료·퀴즈 제출·진도 조회(학생).
실행: uvicorn app.api.main:app
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.deps import (
    Identity,
    get_catalog_service,
    get_identity,
    get_learning_service,
    require_instructor,
    require_student,
)
from app.api.schemas import (
    ApiResponse,
    CourseCreateRequest,
    HealthResponse,
    LectureCreateRequest,
    LectureUpdateRequest,
    ProgressData,
    QuestionCreateRequest,
    QuestionsReplaceRequest,
    QuizSubmitRequest,
    QuizSubmitResponseData,
)
from app.core.config import settings
from app.core.errors import LearnCraftError
from app.db.connection import init_db
from app.schema.catalog import CourseOut, CourseWithLectures, InstructorQuestion, LectureOut
from app.schema.progress import CourseProgressView, LectureDetail
from app.services.catalog import CatalogService
from app.services.learning import LearningService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s API 시작", settings.PROJECT_NAME)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{settings.PROJECT_NAME} API",
        description="강좌·강의 관리, 퀴즈 채점, 학생 진도 추적",
        version=settings.API_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(LearnCraftError)
    async def handle_domain_error(request: Request, exc: LearnCraftError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("요청 실패 %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("처리되지 않은 오류 %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"},
        )

    @app.get("/api/health", response_model=HealthResponse, summary="헬스 체크")
    def health() -> HealthResponse:
        return HealthResponse(
            message="Server is running",
            timestamp=datetime.now(timezone.utc).isoformat(),
            info={"version": settings.API_VERSION},
        )

    # ----- 강좌 -----

    @app.get(
        "/api/courses",
        response_model=ApiResponse[list[CourseWithLectures]],
        summary="강좌 목록 (최신순)",
    )
    def list_courses(
        identity: Identity = Depends(get_identity),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[list[CourseWithLectures]]:
        return ApiResponse(data=catalog.list_courses())

    @app.get(
        "/api/courses/instructor/my-courses",
        response_model=ApiResponse[list[CourseWithLectures]],
        summary="내 강좌 목록 (강사)",
    )
    def list_my_courses(
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[list[CourseWithLectures]]:
        return ApiResponse(data=catalog.list_instructor_courses(identity.user_id))

    @app.get(
        "/api/courses/{course_id:int}",
        response_model=ApiResponse[CourseWithLectures],
        summary="강좌 상세 (강의·문항 포함, 정답 제외)",
    )
    def get_course(
        course_id: int,
        identity: Identity = Depends(get_identity),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[CourseWithLectures]:
        return ApiResponse(data=catalog.get_course(course_id))

    @app.post(
        "/api/courses",
        status_code=201,
        response_model=ApiResponse[CourseOut],
        summary="강좌 생성 (강사)",
    )
    def create_course(
        body: CourseCreateRequest,
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[CourseOut]:
        course = catalog.create_course(identity.user_id, body.title, body.description)
        return ApiResponse(message="Course created successfully", data=course)

    @app.delete(
        "/api/courses/{course_id:int}",
        response_model=ApiResponse[None],
        summary="강좌 삭제 (강의·문항·진도 연쇄 삭제)",
    )
    def delete_course(
        course_id: int,
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[None]:
        catalog.delete_course(identity.user_id, course_id)
        return ApiResponse(message="Course deleted successfully")

    # ----- 강의 (강사) -----

    @app.post(
        "/api/courses/{course_id:int}/lectures",
        status_code=201,
        response_model=ApiResponse[LectureOut],
        summary="강의 추가 (강사)",
    )
    def create_lecture(
        course_id: int,
        body: LectureCreateRequest,
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[LectureOut]:
        lecture = catalog.create_lecture(
            identity.user_id,
            course_id,
            title=body.title,
            lecture_type=body.type,
            content=body.content,
            order=body.order,
            description=body.description,
            attachments=[a.model_dump() for a in body.attachments],
        )
        return ApiResponse(message="Lecture created successfully", data=LectureOut.model_validate(lecture))

    @app.put(
        "/api/lectures/{lecture_id:int}",
        response_model=ApiResponse[LectureOut],
        summary="강의 수정 (강사, type 변경 불가)",
    )
    def update_lecture(
        lecture_id: int,
        body: LectureUpdateRequest,
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[LectureOut]:
        fields = body.model_dump(exclude_unset=True)
        if "type" in fields and fields["type"] is not None:
            fields["type"] = body.type.value
        lecture = catalog.update_lecture(identity.user_id, lecture_id, fields)
        return ApiResponse(message="Lecture updated successfully", data=LectureOut.model_validate(lecture))

    @app.delete(
        "/api/lectures/{lecture_id:int}",
        response_model=ApiResponse[None],
        summary="강의 삭제 (문항·진도 연쇄 삭제)",
    )
    def delete_lecture(
        lecture_id: int,
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[None]:
        catalog.delete_lecture(identity.user_id, lecture_id)
        return ApiResponse(message="Lecture deleted successfully")

    @app.post(
        "/api/courses/{course_id:int}/lectures/{lecture_id:int}/questions",
        status_code=201,
        response_model=ApiResponse[InstructorQuestion],
        summary="퀴즈 문항 추가 (강사)",
    )
    def add_question(
        course_id: int,
        lecture_id: int,
        body: QuestionCreateRequest,
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[InstructorQuestion]:
        question = catalog.add_question(
            identity.user_id,
            course_id,
            lecture_id,
            question_text=body.question_text,
            options=body.options,
            correct_answer=body.correct_answer,
        )
        return ApiResponse(
            message="Quiz question created successfully",
            data=InstructorQuestion.model_validate(question),
        )

    @app.put(
        "/api/lectures/{lecture_id:int}/questions",
        response_model=ApiResponse[list[InstructorQuestion]],
        summary="퀴즈 문항 일괄 교체 (강사)",
    )
    def replace_questions(
        lecture_id: int,
        body: QuestionsReplaceRequest,
        identity: Identity = Depends(require_instructor),
        catalog: CatalogService = Depends(get_catalog_service),
    ) -> ApiResponse[list[InstructorQuestion]]:
        rows = catalog.replace_questions(
            identity.user_id, lecture_id, [q.model_dump() for q in body.questions]
        )
        return ApiResponse(
            message="Quiz questions updated successfully",
            data=[InstructorQuestion.model_validate(r) for r in rows],
        )

    # ----- 학생 -----

    @app.get(
        "/api/lectures/{lecture_id:int}",
        response_model=ApiResponse[LectureDetail],
        summary="강의 상세 + 내 진도 (학생)",
    )
    def get_lecture(
        lecture_id: int,
        identity: Identity = Depends(require_student),
        learning: LearningService = Depends(get_learning_service),
    ) -> ApiResponse[LectureDetail]:
        return ApiResponse(data=learning.get_lecture_progress(identity.user_id, lecture_id))

    @app.post(
        "/api/lectures/{lecture_id:int}/complete",
        response_model=ApiResponse[ProgressData],
        summary="문서 강의 완료 처리 (학생)",
        description="이미 완료된 강의는 기존 completed_at을 그대로 반환한다.",
    )
    def complete_lecture(
        lecture_id: int,
        identity: Identity = Depends(require_student),
        learning: LearningService = Depends(get_learning_service),
    ) -> ApiResponse[ProgressData]:
        result = learning.complete_lecture(identity.user_id, lecture_id)
        if result.already_completed:
            message = "Lecture already completed"
        else:
            message = "Lecture marked as completed"
            logger.info("강의 완료 student_id=%s lecture_id=%s", identity.user_id, lecture_id)
        return ApiResponse(message=message, data=ProgressData(progress=result.progress))

    @app.post(
        "/api/lectures/{lecture_id:int}/quiz/submit",
        response_model=ApiResponse[QuizSubmitResponseData],
        summary="퀴즈 제출 (학생)",
        description="답안 수가 문항 수와 다르면 400, 진도는 기록되지 않는다. 70% 이상이면 통과.",
    )
    def submit_quiz(
        lecture_id: int,
        body: QuizSubmitRequest,
        identity: Identity = Depends(require_student),
        learning: LearningService = Depends(get_learning_service),
    ) -> ApiResponse[QuizSubmitResponseData]:
        submission = learning.submit_quiz(identity.user_id, lecture_id, body.answers)
        logger.info(
            "퀴즈 제출 student_id=%s lecture_id=%s score=%.1f passed=%s attempts=%s",
            identity.user_id,
            lecture_id,
            submission.grade.score,
            submission.grade.passed,
            submission.progress.quiz_attempts,
        )
        return ApiResponse(
            message=submission.message,
            data=QuizSubmitResponseData.from_grade(submission.grade, submission.progress),
        )

    @app.get(
        "/api/progress",
        response_model=ApiResponse[dict[int, CourseProgressView]],
        summary="전체 강좌 진도 (학생)",
    )
    def get_all_progress(
        identity: Identity = Depends(require_student),
        learning: LearningService = Depends(get_learning_service),
    ) -> ApiResponse[dict[int, CourseProgressView]]:
        views = learning.get_all_progress(identity.user_id)
        return ApiResponse(data={v.course.id: v for v in views})

    @app.get(
        "/api/progress/course/{course_id:int}",
        response_model=ApiResponse[CourseProgressView],
        summary="강좌 하나의 진도 (학생)",
    )
    def get_course_progress(
        course_id: int,
        identity: Identity = Depends(require_student),
        learning: LearningService = Depends(get_learning_service),
    ) -> ApiResponse[CourseProgressView]:
        return ApiResponse(data=learning.get_course_progress(identity.user_id, course_id))

    return app


app = create_app()

"""
도메인 예외 정의. status_code는 API 계층에서 HTTP 응답 코드로 그대로 사용된다.
"""


class LearnCraftError(Exception):
    """모든 도메인 예외의 기반 클래스."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LearnCraftError):
    """잘못된 요청 (400)."""

    status_code = 400


class EmptyQuizError(ValidationError):
    def __init__(self, message: str = "No questions found for this quiz") -> None:
        super().__init__(message)


class AnswerCountMismatchError(ValidationError):
    def __init__(self, expected: int, received: int) -> None:
        super().__init__("Number of answers must match number of questions")
        self.expected = expected
        self.received = received


class LectureTypeError(ValidationError):
    """강의 유형에 맞지 않는 작업 (퀴즈 강의 완료 처리, 문서 강의에 퀴즈 제출 등)."""


class NotFoundError(LearnCraftError):
    status_code = 404


class AuthorizationError(LearnCraftError):
    status_code = 403


class StorageError(LearnCraftError):
    """저장소 오류. 재시도는 호출 측에서 결정한다."""

    status_code = 500

"""
퀴즈 채점: 제출 답안(보기 인덱스 배열)을 문항별 정답과 비교해 점수·통과 여부를 계산한다.
순수 계산만 하며 저장소에 접근하지 않는다.
"""

from typing import Any, Sequence

from app.core.errors import AnswerCountMismatchError, EmptyQuizError
from app.schema.progress import PASSING_SCORE, GradableQuestion, GradeResult, QuestionResult


def _is_correct(answer: Any, correct_answer: int) -> bool:
    # bool은 int의 하위 타입이므로 제외 (True == 1 방지)
    if isinstance(answer, bool) or not isinstance(answer, int):
        return False
    return answer == correct_answer


class QuizGraderService:
    """문항 순서와 답안 순서는 같아야 한다."""

    passing_score = PASSING_SCORE

    def grade(self, questions: Sequence[Any], answers: Sequence[Any]) -> GradeResult:
        """
        questions: correct_answer 속성을 가진 객체(QuizQuestion 등) 또는 GradableQuestion.
        answers: 제출한 보기 인덱스. 범위 밖이거나 None이면 오답.
        """
        if not questions:
            raise EmptyQuizError()
        if len(answers) != len(questions):
            raise AnswerCountMismatchError(expected=len(questions), received=len(answers))

        results: list[QuestionResult] = []
        correct_count = 0
        for raw, answer in zip(questions, answers):
            q = raw if isinstance(raw, GradableQuestion) else GradableQuestion.model_validate(raw)
            is_correct = _is_correct(answer, q.correct_answer)
            if is_correct:
                correct_count += 1
            results.append(
                QuestionResult(
                    question_id=q.id,
                    question_text=q.question_text,
                    submitted_answer=answer,
                    correct_answer=q.correct_answer,
                    is_correct=is_correct,
                )
            )

        score = correct_count / len(questions) * 100
        return GradeResult(
            correct_count=correct_count,
            total_questions=len(questions),
            score=score,
            passed=score >= self.passing_score,
            results=results,
        )


quiz_grader_service = QuizGraderService()

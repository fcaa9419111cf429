from app.services.catalog import CatalogService
from app.services.learning import LearningService
from app.services.progress_aggregator import ProgressAggregatorService
from app.services.progress_ledger import ProgressLedgerService
from app.services.quiz_grader import QuizGraderService, quiz_grader_service

__all__ = [
    "CatalogService",
    "LearningService",
    "ProgressAggregatorService",
    "ProgressLedgerService",
    "QuizGraderService",
    "quiz_grader_service",
]

"""
학생 진도 리포트 CLI. 전체 강좌(또는 --course-id 강좌 하나)의 진도를 JSON으로 출력한다.

사용 예:
  python -m app.progress_report --student-id 3
  python -m app.progress_report --student-id 3 --course-id 1 --pretty
로그는 stderr, JSON 결과는 stdout으로 출력된다.
"""

import argparse
import json
import logging
import sys

from app.core.errors import LearnCraftError
from app.db.connection import init_db
from app.db.store import SqlEntityStore
from app.services.progress_aggregator import ProgressAggregatorService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="학생의 강좌별 진도(완료 수/전체 수/퍼센트)를 출력합니다.")
    parser.add_argument("--student-id", type=int, required=True, help="student_id")
    parser.add_argument("--course-id", type=int, default=None, help="강좌 하나만 조회")
    parser.add_argument("--pretty", action="store_true", help="JSON 예쁘게 출력")
    return parser


def main(argv: list[str] | None = None, store: SqlEntityStore | None = None) -> int:
    args = build_parser().parse_args(argv)
    if store is None:
        init_db()
        store = SqlEntityStore()
    aggregator = ProgressAggregatorService(store)

    logger.info("진도 조회 student_id=%s course_id=%s", args.student_id, args.course_id)
    try:
        if args.course_id is not None:
            payload = aggregator.build_course_progress_view(args.student_id, args.course_id).model_dump(mode="json")
        else:
            payload = [v.model_dump(mode="json") for v in aggregator.build_progress_view(args.student_id)]
    except LearnCraftError as exc:
        print(f"조회 실패: {exc.message}", file=sys.stderr)
        return 1

    print(json.dumps(payload, ensure_ascii=False, indent=2 if args.pretty else None))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Enqueue and run a crawl for one competitor from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import uuid
from dataclasses import asdict

from app.services.crawl_job_service import CrawlJobService
from db.models.crawl_job import CrawlJobSource
from db.repositories.errors import CompetitorNotFoundError
from db.session import session_scope


def main() -> int:
    parser = argparse.ArgumentParser(description="Run one competitor crawl end to end.")
    parser.add_argument("competitor_id", help="Competitor UUID.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    try:
        competitor_id = uuid.UUID(args.competitor_id)
    except ValueError:
        parser.error(f"invalid competitor id: {args.competitor_id!r}")

    service = CrawlJobService()
    with session_scope() as db:
        try:
            job = service.enqueue(db=db, competitor_id=competitor_id, source=CrawlJobSource.STANDALONE)
        except (CompetitorNotFoundError, ValueError) as exc:
            print(json.dumps({"error": str(exc)}))
            return 1
        summary = service.run_crawl(db=db, job_id=job.id)

    print(json.dumps(asdict(summary), indent=2, default=str))
    return 0 if summary.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())

"""
Seed demo carriers into the configured database and print the review queue.

Usage:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --database-url sqlite:///demo.db
    python scripts/seed_demo.py --memory --segmented
"""

import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env"))

from src.api.dependencies import build_services
from src.api.main import load_demo_data
from src.infrastructure.db.database import create_db_engine, init_db, make_session_factory
from src.infrastructure.db.memory_repository import InMemoryVerificationRepository
from src.infrastructure.db.repository import SqlVerificationRepository
from src.infrastructure.notifications.composite_notifier import CompositeNotifier
from src.infrastructure.notifications.logging_notifier import LoggingNotifier

logger = logging.getLogger("seed_demo")


def build_repository(database_url: str | None, memory: bool):
    if memory:
        return InMemoryVerificationRepository()
    engine = create_db_engine(database_url)
    init_db(engine)
    return SqlVerificationRepository(make_session_factory(engine))


def print_queue(services, segmented: bool):
    print("=" * 70)
    print("  Review queue (pending + under_review)")
    print("=" * 70)

    if segmented:
        groups = services.review_queue.segmented()
    else:
        groups = {"all": services.review_queue.list_queue()}

    for name, apps in groups.items():
        print(f"\n── {name} ({len(apps)}) ──")
        for app in apps:
            submitted = app.submitted_at.isoformat(timespec="seconds") if app.submitted_at else "-"
            print(f"  {app.id[:8]}  {app.carrier_id:<18} {app.carrier_type.value:<11} "
                  f"{app.status.value:<13} submitted={submitted}")

    print("\n── stats ──")
    for key, value in services.review_queue.stats().items():
        print(f"  {key:<16} {value}")


def main():
    parser = argparse.ArgumentParser(description="Seed demo carriers and show the review queue")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    parser.add_argument("--memory", action="store_true", help="Use the in-memory repository")
    parser.add_argument("--segmented", action="store_true", help="Split the queue into solo / enterprise")
    parser.add_argument("--quiet", action="store_true", help="Only warnings and errors")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    services = build_services(
        repository=build_repository(args.database_url, args.memory),
        notifier=CompositeNotifier([LoggingNotifier()]),
    )
    created = load_demo_data(services)
    logger.info(f"Seeded {created} demo carriers")

    print_queue(services, args.segmented)


if __name__ == "__main__":
    main()

"""Send reminder digests to managers with goals waiting on them.

Meant to run from cron, e.g. daily at 09:00 for approvals and weekly on
Monday for completions:

Usage:
    python scripts/send_reminders.py --job approvals
    python scripts/send_reminders.py --job completions \\
        --mongodb-url mongodb://localhost:27017
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from performance_track.config import settings
from performance_track.services.reminder_service import ReminderService

logger = logging.getLogger("send_reminders")


async def run(job: str, mongodb_url: str, db_name: str) -> int:
    """Run the selected reminder job(s) and return managers notified."""
    client = AsyncIOMotorClient(mongodb_url)
    try:
        service = ReminderService(client[db_name])
        notified = 0
        if job in ("approvals", "all"):
            notified += await service.send_pending_approval_reminders()
        if job in ("completions", "all"):
            notified += await service.send_pending_completion_reminders()
        return notified
    finally:
        client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Send goal reminder notifications")
    parser.add_argument(
        "--job",
        choices=["approvals", "completions", "all"],
        default="all",
        help="Which reminder scan to run",
    )
    parser.add_argument("--mongodb-url", default=settings.mongodb_url, help="MongoDB connection URL")
    parser.add_argument("--db-name", default=settings.mongodb_db_name, help="Database name")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")

    notified = asyncio.run(run(args.job, args.mongodb_url, args.db_name))
    logger.info("Done: %d reminder(s) sent", notified)


if __name__ == "__main__":
    main()

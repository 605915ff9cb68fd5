"""Bulk-load webhook payload files: python -m inbox_service.scripts.ingest_directory <dir>"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import redis.asyncio as aioredis

from inbox_service.application.exceptions import NotFoundError, StoreUnavailableError
from inbox_service.application.ports.notifier import Notifier
from inbox_service.config import settings
from inbox_service.infrastructure.bus.redis_pubsub import RedisPubSubNotifier
from inbox_service.infrastructure.db.database import Database
from inbox_service.infrastructure.ws.manager import ConnectionManager
from inbox_service.infrastructure.ws.notifier import LocalNotifier
from inbox_service.logging_config import configure_logging
from inbox_service.services import conversation_service, ingestion_service

logger = logging.getLogger(__name__)


async def run(directory: str) -> int:
    database = Database.from_settings(settings)
    redis: aioredis.Redis | None = None
    try:
        await database.ping()
        if settings.DB_CREATE_SCHEMA:
            await database.create_schema()

        notifier: Notifier
        if settings.NOTIFIER_BACKEND == "redis":
            # Lets running servers push the loaded messages to their clients.
            redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
            notifier = RedisPubSubNotifier(redis, settings.REDIS_PUBSUB_CHANNEL)
        else:
            notifier = LocalNotifier(ConnectionManager())

        async with database.store() as store:
            totals = await ingestion_service.ingest_directory(directory, store, notifier)
            summaries = await conversation_service.list_conversations(store)
    except StoreUnavailableError as exc:
        logger.error("%s", exc.detail)
        return 1
    except NotFoundError as exc:
        logger.error("%s: %s", exc.detail, directory)
        return 1
    finally:
        if redis is not None:
            await redis.aclose()
        await database.dispose()

    print("=== Processing complete ===")
    print(f"Messages created: {totals.created}")
    print(f"Status updates:   {totals.status_updates}")
    print(f"Files processed:  {totals.processed_files} ({totals.failed_files} unreadable)")
    print("\n=== Conversations ===")
    for s in summaries:
        print(f"{s.display_name} ({s.conversation_id}): {s.message_count} messages")
        print(f"  Last: {s.last_message_body[:100]}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Ingest every *.json webhook payload in a directory.")
    parser.add_argument("directory", nargs="?", default=settings.SAMPLE_DATA_DIR)
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(run(args.directory)))


if __name__ == "__main__":
    main()

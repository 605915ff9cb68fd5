"""Entrypoint: python -m inbox_service"""
from __future__ import annotations

import uvicorn

from inbox_service.config import settings
from inbox_service.logging_config import configure_logging


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "inbox_service.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

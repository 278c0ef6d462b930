"""Run the chat relay: ``python -m relay_service``."""
from __future__ import annotations

import logging

import uvicorn

from .app.config import get_settings

logger = logging.getLogger("relay_service")


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
    )
    logger.info("Server starting on %s:%s", settings.host, settings.port)
    # uvicorn logs bind failures itself and exits non-zero
    uvicorn.run(
        "relay_service.app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

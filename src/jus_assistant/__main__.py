"""Entry point for running the legal assistant server."""

import logging

import uvicorn

from .config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def main():
    """Run the HTTP server."""
    settings = get_settings()

    logger.info("Starting legal assistant server on %s:%s", settings.app_host, settings.app_port)

    uvicorn.run(
        "jus_assistant.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()

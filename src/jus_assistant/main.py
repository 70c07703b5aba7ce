from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router
from .config import get_settings
from .schemas import THREAD_ID_HEADER

# Configure logging for the entire jus_assistant package
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logging.getLogger("jus_assistant").setLevel(logging.INFO)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("Legal assistant server starting up")
    if not settings.assistant_id:
        logger.warning("ASSISTANT_ID is not set; /api/chat will fail until it is configured")
    if not settings.serper_api_key:
        logger.warning("SERPER_API_KEY is not set; legal search will return no results")
    yield
    logger.info("Legal assistant server shutting down")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Jus Assistant",
        description="Streaming legal assistant with web-search tool calls",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[THREAD_ID_HEADER],
    )

    app.include_router(router)
    return app


app = create_app()

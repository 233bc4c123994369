"""
Quillnote Backend Application

FastAPI application entrypoint with async lifespan management.
Checks database connectivity on startup and creates tables when configured.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from quillnote.api.v1.notes import router as notes_router
from quillnote.core.config import settings
from quillnote.core.database import engine, init_models
from quillnote.core.exceptions import NoteServiceError, note_error_handler
from quillnote.core.logging import setup_logging

# Initialize logging before any log statements
setup_logging()
logger = logging.getLogger(__name__)


async def wait_for_db(retries: int = 10, delay: int = 1) -> bool:
    """
    Wait for the database to become available.

    Args:
        retries: Maximum connection attempts.
        delay: Seconds between attempts.

    Returns:
        True if connection established, False if all retries exhausted.
    """
    for i in range(retries):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection established")
            return True
        except Exception as e:
            logger.warning(f"Waiting for database ({i + 1}/{retries})... Error: {e}")
            await asyncio.sleep(delay)
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
        - Validates database connectivity (blocks startup on failure)
        - Creates tables when AUTO_CREATE_TABLES is set

    Shutdown:
        - Disposes the engine
    """
    logger.info("Starting Quillnote...")
    logger.info(f"Log Level: {settings.LOG_LEVEL}")

    if not await wait_for_db():
        logger.critical("Could not connect to the database. Shutting down.")
        raise RuntimeError("Database connection failed")

    if settings.AUTO_CREATE_TABLES:
        await init_models()

    yield

    await engine.dispose()
    logger.info("Shutting down Quillnote...")


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_exception_handler(NoteServiceError, note_error_handler)
app.include_router(notes_router, prefix="/api/v1/notes", tags=["Notes"])


@app.get("/health")
async def health_check():
    """Liveness check. Static: does not touch the database."""
    return {
        "status": "OK",
        "service": "quillnote",
        "environment": os.getenv("ENVIRONMENT", "unknown"),
    }

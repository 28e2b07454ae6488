"""
Quiz Master Server

FastAPI server with:
- Trivia-backed quiz generation
- Submission scoring and statistics
- Pluggable storage (in-memory or MongoDB)
- CORS
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import app_state
from quizmaster import __version__
from quizmaster.logging_config import setup_logging
from quizmaster.router import router as quiz_router

config = app_state.get_config()
setup_logging(config.log_level_value)
logger = logging.getLogger(__name__)


# =============================================================================
# FASTAPI APP
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    logger.info(f"Starting Quiz Master (storage={config.storage_backend})")
    await app_state.startup()
    yield
    await app_state.cleanup()
    logger.info("Quiz Master stopped")


app = FastAPI(
    title="Quiz Master",
    description="Timed quizzes generated from Open Trivia DB",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quiz_router)


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check."""
    return {
        "status": "healthy",
        "version": __version__,
        "storage": config.storage_backend,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)

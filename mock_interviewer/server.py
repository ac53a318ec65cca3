"""
FastAPI server for the Mock Interviewer platform.

This module provides the REST and WebSocket API used by the interview UI.
"""
import contextlib
import logging
from datetime import datetime

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from mock_interviewer import __version__
from mock_interviewer.config_api import router as config_router
from mock_interviewer.routers import call_session, interviews
from mock_interviewer.routers.dependencies import limiter
from mock_interviewer.services.feedback_service import FeedbackService
from mock_interviewer.services.interview_generator import InterviewGenerator
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.config import SYSTEM_NAME, get_cors_origins, log_config

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """
    Lifespan context manager for FastAPI app.

    Creates the interview store and the LLM-backed services on startup and
    closes the store on shutdown.
    """
    log_config()

    repository = InterviewRepository()
    app_instance.state.repository = repository

    # The LLM services need credentials; the API still serves stored data without them
    try:
        app_instance.state.feedback_service = FeedbackService(repository)
        app_instance.state.interview_generator = InterviewGenerator(repository)
        logger.info("LLM services initialized")
    except Exception as e:
        logger.warning(f"LLM services disabled: {e}", exc_info=True)
        app_instance.state.feedback_service = None
        app_instance.state.interview_generator = None

    yield

    repository.close()
    logger.info("Mock Interviewer shut down")


# Dependency for monitoring request timing
async def log_request_time(request: Request):
    request.state.start_time = datetime.now()
    yield
    process_time = (datetime.now() - request.state.start_time).total_seconds() * 1000
    logger.info(f"Request to {request.url.path} took {process_time:.2f}ms")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app_instance = FastAPI(
        title=f"{SYSTEM_NAME} API",
        description="Voice mock interviews: generation, live call sessions and feedback",
        version=__version__,
        lifespan=lifespan
    )

    # Add rate limiter exception handler
    app_instance.state.limiter = limiter
    app_instance.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Add CORS middleware to allow cross-origin requests
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    app_instance.include_router(
        interviews.router,
        tags=["Interviews"],
        dependencies=[Depends(log_request_time)]
    )
    app_instance.include_router(config_router, tags=["System"])

    # No HTTP dependencies for WebSocket endpoints
    app_instance.include_router(
        call_session.router,
        prefix="/api/call-session",
        tags=["Call Session"]
    )

    @app_instance.get("/api/health", tags=["System"])
    async def health_check():
        return {
            "status": "ok",
            "version": __version__,
            "timestamp": datetime.now().isoformat()
        }

    return app_instance


app = create_app()


def start_server(host: str = "0.0.0.0", port: int = 8000):
    """
    Start the FastAPI server.

    Args:
        host: Host to bind the server to
        port: Port to bind the server to
    """
    import uvicorn

    # Configure Uvicorn logging
    uvicorn_log_config = uvicorn.config.LOGGING_CONFIG
    uvicorn_log_config["formatters"]["access"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    uvicorn_log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=uvicorn_log_config
    )


if __name__ == "__main__":
    # Run the server directly if this module is executed
    start_server()

"""
Shared FastAPI dependencies for the Mock Interviewer routers.
"""
from typing import Optional

from fastapi import HTTPException, Request, WebSocket
from slowapi import Limiter
from slowapi.util import get_remote_address

from mock_interviewer.services.feedback_service import FeedbackService
from mock_interviewer.services.interview_generator import InterviewGenerator
from mock_interviewer.services.interview_repository import InterviewRepository

# Setup rate limiter
limiter = Limiter(key_func=get_remote_address)


def _require(service, name: str):
    if service is None:
        raise HTTPException(status_code=503, detail=f"{name} not available")
    return service


def get_repository(request: Request) -> InterviewRepository:
    return _require(getattr(request.app.state, "repository", None), "Interview store")


def get_feedback_service(request: Request) -> FeedbackService:
    return _require(getattr(request.app.state, "feedback_service", None), "Feedback service")


def get_interview_generator(request: Request) -> InterviewGenerator:
    return _require(getattr(request.app.state, "interview_generator", None), "Interview generator")


def get_ws_repository(websocket: WebSocket) -> Optional[InterviewRepository]:
    return getattr(websocket.app.state, "repository", None)


def get_ws_feedback_service(websocket: WebSocket) -> Optional[FeedbackService]:
    return getattr(websocket.app.state, "feedback_service", None)

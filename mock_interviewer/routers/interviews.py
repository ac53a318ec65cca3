"""
REST endpoints for interviews and feedback.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from mock_interviewer.models.feedback import FeedbackRecord
from mock_interviewer.models.interview import Interview, InterviewGenerationRequest
from mock_interviewer.models.session import Speaker, Utterance
from mock_interviewer.routers.dependencies import (
    get_feedback_service,
    get_interview_generator,
    get_repository,
    limiter,
)
from mock_interviewer.services.feedback_service import FeedbackService
from mock_interviewer.services.interview_generator import InterviewGenerator
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.config import LATEST_INTERVIEWS_LIMIT
from mock_interviewer.utils.constants import normalize_tech_name

logger = logging.getLogger(__name__)

router = APIRouter()


class InterviewResponse(Interview):
    """Interview plus the canonical tech names the UI uses for icons."""
    normalized_techstack: List[str] = Field(default_factory=list, description="Canonical technology names")

    @classmethod
    def from_interview(cls, interview: Interview) -> "InterviewResponse":
        return cls(
            **interview.model_dump(),
            normalized_techstack=[normalize_tech_name(tech) for tech in interview.techstack]
        )


class TranscriptLine(BaseModel):
    role: Speaker = Field(..., description="Who spoke")
    content: str = Field(..., description="What was said")


class FeedbackRequest(BaseModel):
    """Model for a direct feedback request."""
    interview_id: str = Field(..., description="Interview that was taken")
    user_id: str = Field(..., description="User who took it")
    transcript: List[TranscriptLine] = Field(..., description="Conversation, in order")
    feedback_id: Optional[str] = Field(None, description="Existing feedback to overwrite")


class FeedbackResponse(BaseModel):
    success: bool
    feedback_id: Optional[str] = None


@router.get("/api/interviews", response_model=List[InterviewResponse])
@limiter.limit("60/minute")
async def list_user_interviews(
    request: Request,
    user_id: str = Query(..., description="User whose interviews to list"),
    repository: InterviewRepository = Depends(get_repository)
):
    """Get all interviews created by a user, newest first."""
    interviews = repository.get_interviews_by_user_id(user_id)
    return [InterviewResponse.from_interview(interview) for interview in interviews]


@router.get("/api/interviews/latest", response_model=List[InterviewResponse])
@limiter.limit("60/minute")
async def list_latest_interviews(
    request: Request,
    user_id: str = Query(..., description="User whose own interviews are excluded"),
    limit: int = Query(LATEST_INTERVIEWS_LIMIT, ge=1, le=100),
    repository: InterviewRepository = Depends(get_repository)
):
    """Get the latest finalized interviews created by other users."""
    interviews = repository.get_latest_interviews(user_id, limit=limit)
    return [InterviewResponse.from_interview(interview) for interview in interviews]


@router.post("/api/interviews/generate", response_model=InterviewResponse)
@limiter.limit("10/minute")
async def generate_interview(
    request: Request,
    generation_request: InterviewGenerationRequest,
    generator: InterviewGenerator = Depends(get_interview_generator)
):
    """Generate an interview from the variables collected by the voice workflow."""
    try:
        interview = await generator.generate(generation_request)
        return InterviewResponse.from_interview(interview)
    except Exception as e:
        logger.error(f"Error generating interview: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/interviews/{interview_id}", response_model=InterviewResponse)
@limiter.limit("60/minute")
async def get_interview(
    request: Request,
    interview_id: str,
    repository: InterviewRepository = Depends(get_repository)
):
    """Get a single interview."""
    interview = repository.get_interview_by_id(interview_id)
    if interview is None:
        raise HTTPException(status_code=404, detail=f"Interview {interview_id} not found")
    return InterviewResponse.from_interview(interview)


@router.get("/api/interviews/{interview_id}/feedback", response_model=FeedbackRecord)
@limiter.limit("60/minute")
async def get_interview_feedback(
    request: Request,
    interview_id: str,
    user_id: str = Query(..., description="User who took the interview"),
    repository: InterviewRepository = Depends(get_repository)
):
    """Get a user's feedback for an interview."""
    feedback = repository.get_feedback_by_interview_id(interview_id, user_id)
    if feedback is None:
        raise HTTPException(status_code=404, detail=f"No feedback for interview {interview_id}")
    return feedback


@router.post("/api/feedback", response_model=FeedbackResponse)
@limiter.limit("10/minute")
async def create_feedback(
    request: Request,
    feedback_request: FeedbackRequest,
    feedback_service: FeedbackService = Depends(get_feedback_service)
):
    """Score a transcript and create or overwrite the feedback record."""
    transcript = [Utterance(speaker=line.role, text=line.content) for line in feedback_request.transcript]
    result = await feedback_service.submit(
        interview_id=feedback_request.interview_id,
        user_id=feedback_request.user_id,
        transcript=transcript,
        feedback_id=feedback_request.feedback_id
    )
    return FeedbackResponse(success=result.success, feedback_id=result.feedback_id)

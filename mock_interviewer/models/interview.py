"""
Interview models for the Mock Interviewer platform.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class Interview(BaseModel):
    """A generated interview a user can take."""
    id: Optional[str] = Field(None, description="Document identifier")
    user_id: str = Field(..., description="User who generated the interview")
    role: str = Field(..., description="Job role")
    type: str = Field(..., description="Behavioural, technical or mixed")
    level: str = Field(..., description="Experience level")
    techstack: List[str] = Field(default_factory=list, description="Technologies used in the role")
    questions: List[str] = Field(default_factory=list, description="Questions the interviewer will ask")
    finalized: bool = Field(False, description="Whether the interview is ready to take")
    cover_image: Optional[str] = Field(None, description="Card cover image path")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation time")


class InterviewGenerationRequest(BaseModel):
    """Variables collected by the voice workflow before generating an interview."""
    type: str = Field(..., description="Focus between behavioural and technical questions")
    role: str = Field(..., description="Job role")
    level: str = Field(..., description="Experience level")
    techstack: str = Field("", description="Comma separated tech stack")
    amount: int = Field(5, ge=1, le=20, description="Number of questions")
    userid: str = Field(..., description="User the interview belongs to")


class GeneratedQuestions(BaseModel):
    """Questions returned by the language model."""
    questions: List[str] = Field(..., description="Interview questions, plain text, no special characters")

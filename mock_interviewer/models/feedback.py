from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from enum import Enum

from mock_interviewer.utils.constants import FEEDBACK_CATEGORIES

class CategoryName(str, Enum):
    COMMUNICATION_SKILLS = "Communication Skills"
    TECHNICAL_KNOWLEDGE = "Technical Knowledge"
    PROBLEM_SOLVING = "Problem Solving"
    CULTURAL_FIT = "Cultural Fit"
    CONFIDENCE_AND_CLARITY = "Confidence and Clarity"

class CategoryScore(BaseModel):
    """Score for a single assessment category"""
    name: CategoryName = Field(..., description="Assessment category")
    score: float = Field(..., ge=0, le=100, description="Score from 0 to 100")
    comment: str = Field(..., description="Justification for the score")

class FeedbackEvaluation(BaseModel):
    """Structured evaluation of a mock interview transcript"""
    total_score: float = Field(..., ge=0, le=100, description="Overall interview score from 0 to 100")
    category_scores: List[CategoryScore] = Field(
        ...,
        description="Exactly one score per category, in this order: " + ", ".join(FEEDBACK_CATEGORIES)
    )
    strengths: List[str] = Field(default_factory=list, description="What the candidate did well")
    areas_for_improvement: List[str] = Field(default_factory=list, description="Where the candidate should improve")
    final_assessment: str = Field(..., description="Overall assessment and hiring recommendation")

    @field_validator("category_scores")
    @classmethod
    def check_categories(cls, scores: List[CategoryScore]) -> List[CategoryScore]:
        names = tuple(score.name.value for score in scores)
        if names != FEEDBACK_CATEGORIES:
            raise ValueError(f"category_scores must be {list(FEEDBACK_CATEGORIES)}, got {list(names)}")
        return scores

class FeedbackRecord(FeedbackEvaluation):
    """Persisted feedback for one user's attempt at an interview"""
    id: Optional[str] = Field(None, description="Document identifier")
    interview_id: str = Field(..., description="Interview the feedback belongs to")
    user_id: str = Field(..., description="User who took the interview")
    created_at: datetime = Field(default_factory=datetime.now, description="When the feedback was generated")

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "fb_123",
                "interview_id": "int_456",
                "user_id": "user_789",
                "total_score": 72,
                "category_scores": [
                    {"name": "Communication Skills", "score": 80, "comment": "Clear and structured answers"},
                    {"name": "Technical Knowledge", "score": 70, "comment": "Solid React fundamentals"},
                    {"name": "Problem Solving", "score": 65, "comment": "Needed prompting on edge cases"},
                    {"name": "Cultural Fit", "score": 75, "comment": "Collaborative attitude"},
                    {"name": "Confidence and Clarity", "score": 70, "comment": "Some hesitation"}
                ],
                "strengths": ["Communicates clearly"],
                "areas_for_improvement": ["Discuss trade-offs"],
                "final_assessment": "Promising junior candidate",
                "created_at": "2024-03-15T10:00:00"
            }
        }
    }

"""
Service layer for the Mock Interviewer platform.

This module contains the collaborators the call session controller talks to:
the voice transport adapters, the feedback gateway and the interview store.
"""

from .transport import VoiceTransport, WebSocketRelayTransport, ReplayTransport
from .interview_repository import InterviewRepository
from .feedback_service import FeedbackService
from .interview_generator import InterviewGenerator

__all__ = [
    "VoiceTransport",
    "WebSocketRelayTransport",
    "ReplayTransport",
    "InterviewRepository",
    "FeedbackService",
    "InterviewGenerator"
]

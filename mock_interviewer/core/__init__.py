"""
Core call session logic for the Mock Interviewer platform.
"""

from .call_session import CallSessionController
from .exceptions import CallSessionError, MissingContextError, SessionStateError
from .transcript_accumulator import TranscriptAccumulator

__all__ = [
    "CallSessionController",
    "CallSessionError",
    "MissingContextError",
    "SessionStateError",
    "TranscriptAccumulator"
]

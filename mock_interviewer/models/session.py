"""
Session models for live interview calls.

This module contains the value types owned by a call session: its status,
mode, the utterances captured from the voice transport, the read-only
context a session is created with and the signals it produces when it ends.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from mock_interviewer.utils.constants import FEEDBACK_PATH_TEMPLATE, HOME_PATH


class CallStatus(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    FINISHED = "finished"

    @property
    def order(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [CallStatus.IDLE, CallStatus.CONNECTING, CallStatus.ACTIVE, CallStatus.FINISHED]


class InterviewMode(str, Enum):
    """
    What a call is for.

    GENERATE runs the question-generation workflow, REVIEW runs the
    interviewer persona over stored questions and scores the result.
    """
    GENERATE = "generate"
    REVIEW = "interview"

    @classmethod
    def from_value(cls, value: str) -> "InterviewMode":
        # Anything that is not "generate" is a real interview
        return cls.GENERATE if value == cls.GENERATE.value else cls.REVIEW


class Speaker(str, Enum):
    USER = "user"
    SYSTEM = "system"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Utterance:
    """A finalized transcript line."""
    speaker: Speaker
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.speaker.value, "content": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Utterance":
        return cls(speaker=Speaker(data["role"]), text=data["content"])


@dataclass(frozen=True)
class SessionContext:
    """Caller-supplied identity and interview data for one session."""
    user_name: str
    user_id: Optional[str]
    interview_id: Optional[str] = None
    feedback_id: Optional[str] = None
    questions: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.questions is None:
            object.__setattr__(self, "questions", ())
        elif not isinstance(self.questions, tuple):
            object.__setattr__(self, "questions", tuple(self.questions))

    def formatted_questions(self) -> str:
        """Render questions as a bulleted list for the interviewer prompt."""
        return format_questions(self.questions)


def format_questions(questions: Optional[Sequence[str]]) -> str:
    if not questions:
        return ""
    return "\n".join(f"- {question}" for question in questions)


@dataclass(frozen=True)
class FeedbackResult:
    """Outcome of a feedback submission."""
    success: bool
    feedback_id: Optional[str] = None


@dataclass(frozen=True)
class NavigationSignal:
    """Where the UI should go once a session is over."""
    destination: str  # 'home' or 'feedback'
    interview_id: Optional[str] = None

    @classmethod
    def home(cls) -> "NavigationSignal":
        return cls(destination="home")

    @classmethod
    def feedback(cls, interview_id: str) -> "NavigationSignal":
        return cls(destination="feedback", interview_id=interview_id)

    @property
    def path(self) -> str:
        if self.destination == "feedback":
            return FEEDBACK_PATH_TEMPLATE.format(interview_id=self.interview_id)
        return HOME_PATH

"""
AI components for the {SYSTEM_NAME} platform.

This package contains the interviewer persona and the prompt templates.
"""

from mock_interviewer.ai.prompts.interview_prompts import (
    INTERVIEWER_SYSTEM_PROMPT,
    FEEDBACK_SYSTEM_PROMPT,
    FEEDBACK_PROMPT,
    QUESTION_GENERATION_PROMPT
)
from mock_interviewer.ai.assistant import INTERVIEWER_ASSISTANT, build_interviewer_assistant

__all__ = [
    'INTERVIEWER_SYSTEM_PROMPT',
    'FEEDBACK_SYSTEM_PROMPT',
    'FEEDBACK_PROMPT',
    'QUESTION_GENERATION_PROMPT',
    'INTERVIEWER_ASSISTANT',
    'build_interviewer_assistant'
]

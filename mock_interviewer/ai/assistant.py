"""
Interviewer assistant configuration sent to the voice platform.
"""
import copy
from typing import Any, Dict

from mock_interviewer.ai.prompts.interview_prompts import (
    INTERVIEWER_FIRST_MESSAGE,
    INTERVIEWER_SYSTEM_PROMPT,
)

INTERVIEWER_ASSISTANT: Dict[str, Any] = {
    "name": "Interviewer",
    "firstMessage": INTERVIEWER_FIRST_MESSAGE,
    # Speech-to-text
    "transcriber": {
        "provider": "deepgram",
        "model": "nova-2",
        "language": "en",
    },
    # Text-to-speech
    "voice": {
        "provider": "11labs",
        "voiceId": "sarah",
        "stability": 0.4,
        "similarityBoost": 0.8,
        "speed": 0.9,
        "style": 0.5,
        "useSpeakerBoost": True,
    },
    "model": {
        "provider": "openai",
        "model": "gpt-4",
        "messages": [
            {
                "role": "system",
                "content": INTERVIEWER_SYSTEM_PROMPT,
            },
        ],
    },
}


def build_interviewer_assistant() -> Dict[str, Any]:
    """Return a fresh copy of the interviewer persona so callers can't mutate the shared one."""
    return copy.deepcopy(INTERVIEWER_ASSISTANT)

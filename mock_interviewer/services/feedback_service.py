"""
Feedback generation for finished mock interviews.

Scores a transcript with a Gemini chat model constrained to the
``FeedbackEvaluation`` schema and persists the result. This is the gateway the
call session controller hands a finished interview to.
"""
import logging
from typing import Any, Optional, Sequence

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from mock_interviewer.ai.prompts.interview_prompts import FEEDBACK_PROMPT, FEEDBACK_SYSTEM_PROMPT
from mock_interviewer.models.feedback import FeedbackEvaluation, FeedbackRecord
from mock_interviewer.models.session import FeedbackResult
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.config import get_llm_config
from mock_interviewer.utils.constants import ERROR_FEEDBACK_SAVE, ERROR_NO_TRANSCRIPT
from mock_interviewer.utils.transcript import TranscriptEntry, format_transcript_for_prompt

logger = logging.getLogger(__name__)


class FeedbackService:
    """Creates or updates feedback records from interview transcripts."""

    def __init__(self, repository: InterviewRepository, llm: Optional[Any] = None):
        """
        Initialize the feedback service.

        Args:
            repository: Where feedback records are stored
            llm: Chat model to score with (defaults to the configured Gemini model)
        """
        self.repository = repository
        if llm is None:
            llm_config = get_llm_config()
            llm = ChatGoogleGenerativeAI(
                model=llm_config["model"],
                temperature=llm_config["temperature"]
            )
        self.llm = llm
        self.scorer = llm.with_structured_output(FeedbackEvaluation)

    async def evaluate(self, transcript: Sequence[TranscriptEntry]) -> FeedbackEvaluation:
        """
        Score a transcript.

        Raises:
            ValueError: If the transcript is empty
        """
        if not transcript:
            raise ValueError(ERROR_NO_TRANSCRIPT)

        messages = [
            SystemMessage(content=FEEDBACK_SYSTEM_PROMPT),
            HumanMessage(content=FEEDBACK_PROMPT.format(transcript=format_transcript_for_prompt(transcript)))
        ]
        result = await self.scorer.ainvoke(messages)

        # Some providers hand back a plain dict instead of the schema instance
        if isinstance(result, dict):
            result = FeedbackEvaluation.model_validate(result)
        return result

    async def submit(
        self,
        interview_id: str,
        user_id: str,
        transcript: Sequence[TranscriptEntry],
        feedback_id: Optional[str] = None
    ) -> FeedbackResult:
        """
        Score a transcript and save the feedback.

        Args:
            interview_id: Interview that was taken
            user_id: User who took it
            transcript: Utterances or role/content dictionaries, in order
            feedback_id: Existing feedback record to overwrite

        Returns:
            FeedbackResult; ``success`` is False on any failure
        """
        try:
            evaluation = await self.evaluate(transcript)

            record = FeedbackRecord(
                interview_id=interview_id,
                user_id=user_id,
                **evaluation.model_dump()
            )
            saved_id = self.repository.save_feedback(record, feedback_id)

            logger.info(f"Feedback {saved_id} saved for interview {interview_id} (score {record.total_score})")
            return FeedbackResult(success=True, feedback_id=saved_id)
        except Exception as e:
            logger.error(f"{ERROR_FEEDBACK_SAVE}: {e}")
            return FeedbackResult(success=False)

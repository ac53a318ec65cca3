"""
Interview generation for the Mock Interviewer platform.

The voice workflow collects role, level, tech stack, focus and question count
from the user and posts them here. Questions are written by the LLM and the
new interview is stored, ready to be taken.
"""
import logging
from typing import Any, Optional

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from mock_interviewer.ai.prompts.interview_prompts import QUESTION_GENERATION_PROMPT
from mock_interviewer.models.interview import GeneratedQuestions, Interview, InterviewGenerationRequest
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.utils.config import get_llm_config
from mock_interviewer.utils.constants import get_random_interview_cover, split_techstack

logger = logging.getLogger(__name__)


class InterviewGenerator:
    """Writes interview questions and stores the resulting interview."""

    def __init__(self, repository: InterviewRepository, llm: Optional[Any] = None):
        self.repository = repository
        if llm is None:
            llm = ChatGoogleGenerativeAI(
                model=get_llm_config()["model"],
                temperature=0.7
            )
        self.llm = llm
        self.question_writer = llm.with_structured_output(GeneratedQuestions)

    async def generate(self, request: InterviewGenerationRequest) -> Interview:
        """
        Generate and store an interview.

        Raises:
            ValueError: If the model returned no usable questions
        """
        logger.info(f"Generating {request.amount} {request.type} questions for {request.level} {request.role}")

        prompt = QUESTION_GENERATION_PROMPT.format(
            role=request.role,
            level=request.level,
            techstack=request.techstack,
            type=request.type,
            amount=request.amount
        )
        result = await self.question_writer.ainvoke([HumanMessage(content=prompt)])
        if isinstance(result, dict):
            result = GeneratedQuestions.model_validate(result)

        questions = [question.strip() for question in result.questions if question.strip()]
        if not questions:
            raise ValueError("No questions were generated")

        interview = Interview(
            user_id=request.userid,
            role=request.role,
            type=request.type,
            level=request.level,
            techstack=split_techstack(request.techstack),
            questions=questions,
            finalized=True,
            cover_image=get_random_interview_cover()
        )
        interview.id = self.repository.save_interview(interview)
        return interview

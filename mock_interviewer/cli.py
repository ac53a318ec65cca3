"""
Command-line interface for the Mock Interviewer platform.

This module provides commands to run the API server, replay a recorded call
through a call session controller, score a saved transcript and generate an
interview.
"""
import asyncio
import logging
from typing import Optional, Tuple

import click

from mock_interviewer.core.call_session import CallSessionController
from mock_interviewer.core.exceptions import CallSessionError
from mock_interviewer.models.interview import InterviewGenerationRequest
from mock_interviewer.models.session import InterviewMode, SessionContext
from mock_interviewer.services.transport import ReplayTransport
from mock_interviewer.utils.transcript import load_transcript_from_json, save_transcript_to_json

logger = logging.getLogger(__name__)


def _feedback_service():
    from mock_interviewer.services.feedback_service import FeedbackService
    from mock_interviewer.services.interview_repository import InterviewRepository
    return FeedbackService(InterviewRepository())


async def replay_call(
    transport: ReplayTransport,
    context: SessionContext,
    mode: InterviewMode,
    feedback_gateway=None,
    workflow_id: Optional[str] = None
) -> CallSessionController:
    """
    Drive a controller with recorded events.

    Returns:
        The controller after its termination side effect completed
    """
    controller = CallSessionController(
        transport,
        context,
        mode,
        feedback_gateway=feedback_gateway,
        workflow_id=workflow_id,
        connect_timeout=0
    )
    async with controller:
        await controller.start()
        await transport.play()
        if controller.is_live:
            # Recording ended without call-end
            await controller.stop()
        await controller.wait_for_navigation()
    return controller


@click.group()
def cli():
    """Mock Interviewer - voice mock interview platform"""
    pass


@cli.command()
@click.option('--host', default="0.0.0.0", help='Host to bind to')
@click.option('--port', default=8000, type=int, help='Port to bind to')
def serve(host: str, port: int):
    """Run the API server."""
    from mock_interviewer.server import start_server
    start_server(host=host, port=port)


@cli.command()
@click.argument('events_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--mode', type=click.Choice(['generate', 'interview']), default='interview', help='Call mode')
@click.option('--user-name', default="Candidate", help='Name passed to the voice workflow')
@click.option('--user-id', required=True, help='User identifier')
@click.option('--interview-id', help='Interview being taken (interview mode)')
@click.option('--feedback-id', help='Existing feedback record to overwrite')
@click.option('--question', 'questions', multiple=True, help='Interview question, repeatable')
@click.option('--workflow-id', help='Generation workflow id (generate mode)')
@click.option('--delay', default=0.0, type=float, help='Seconds between replayed events')
@click.option('--save-transcript', 'transcript_dir', help='Directory to save the captured transcript in')
def replay(events_file: str, mode: str, user_name: str, user_id: str, interview_id: Optional[str],
           feedback_id: Optional[str], questions: Tuple[str, ...], workflow_id: Optional[str],
           delay: float, transcript_dir: Optional[str]) -> None:
    """
    Replay a recorded call through a call session controller.
    """
    interview_mode = InterviewMode.from_value(mode)
    context = SessionContext(
        user_name=user_name,
        user_id=user_id,
        interview_id=interview_id,
        feedback_id=feedback_id,
        questions=questions
    )
    transport = ReplayTransport.from_file(events_file, delay=delay)
    gateway = _feedback_service() if interview_mode is InterviewMode.REVIEW else None

    try:
        controller = asyncio.run(replay_call(transport, context, interview_mode, gateway, workflow_id))
    except CallSessionError as e:
        raise click.ClickException(str(e))

    print("\n" + "=" * 50)
    print("  REPLAYED CALL")
    print("=" * 50)
    print(f"* Session ID: {controller.session_id}")
    print(f"* Status: {controller.status.value}")
    print(f"* Transcript lines: {len(controller.transcript)}")
    for utterance in controller.transcript:
        print(f"  - {utterance.speaker.value}: {utterance.text}")
    if controller.last_error:
        print(f"* Last transport error: {controller.last_error}")
    if controller.feedback_failed:
        print("* Feedback could not be saved")
    if controller.navigation:
        print(f"* Navigate to: {controller.navigation.path}")
    print("=" * 50 + "\n")

    if transcript_dir:
        path = save_transcript_to_json(
            controller.transcript,
            metadata={"user_id": user_id, "interview_id": interview_id, "mode": interview_mode.value},
            directory=transcript_dir
        )
        print(f"Transcript saved to {path}")


@cli.command('score-transcript')
@click.argument('transcript_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--interview-id', required=True, help='Interview the transcript belongs to')
@click.option('--user-id', required=True, help='User who took the interview')
@click.option('--feedback-id', help='Existing feedback record to overwrite')
def score_transcript(transcript_file: str, interview_id: str, user_id: str, feedback_id: Optional[str]) -> None:
    """Score a saved transcript and store the feedback."""
    data = load_transcript_from_json(transcript_file)
    service = _feedback_service()
    result = asyncio.run(service.submit(interview_id, user_id, data["transcript"], feedback_id))

    if not result.success:
        raise click.ClickException("Error saving feedback")
    print(f"Feedback saved: {result.feedback_id}")


@cli.command('generate-interview')
@click.option('--role', required=True, help='Job role')
@click.option('--level', required=True, help='Experience level')
@click.option('--type', 'interview_type', default="mixed", help='Behavioural, technical or mixed')
@click.option('--techstack', default="", help='Comma separated tech stack')
@click.option('--amount', default=5, type=int, help='Number of questions')
@click.option('--user-id', required=True, help='User the interview belongs to')
def generate_interview(role: str, level: str, interview_type: str, techstack: str, amount: int, user_id: str) -> None:
    """Generate and store a new interview."""
    from mock_interviewer.services.interview_generator import InterviewGenerator
    from mock_interviewer.services.interview_repository import InterviewRepository

    request = InterviewGenerationRequest(
        type=interview_type, role=role, level=level, techstack=techstack, amount=amount, userid=user_id
    )
    interview = asyncio.run(InterviewGenerator(InterviewRepository()).generate(request))

    print(f"\nInterview {interview.id} ({interview.role}, {interview.level})")
    for number, question in enumerate(interview.questions, 1):
        print(f"{number}. {question}")


if __name__ == "__main__":
    cli()

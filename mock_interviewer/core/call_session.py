"""
Call session controller for live voice interviews.

This module drives one voice interview from connection through transcript
capture to feedback submission. It owns the session status and the
transcript, subscribes to an injected voice transport and, once the call is
over, either sends the user home or scores the transcript and points the user
at the feedback page.

Status only ever moves forward:

    IDLE -> CONNECTING -> ACTIVE -> FINISHED

CONNECTING may also go straight to FINISHED when the connection is aborted
(stop requested, transport ended the call, open failed or the connect timeout
elapsed). A FINISHED controller cannot be restarted.
"""
import asyncio
import functools
import inspect
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from mock_interviewer.ai.assistant import build_interviewer_assistant
from mock_interviewer.core.exceptions import CallSessionError, MissingContextError, SessionStateError
from mock_interviewer.core.transcript_accumulator import TranscriptAccumulator
from mock_interviewer.models.session import (
    CallStatus,
    FeedbackResult,
    InterviewMode,
    NavigationSignal,
    SessionContext,
    Speaker,
    Utterance,
)
from mock_interviewer.services.transport import VoiceTransport
from mock_interviewer.utils.config import get_call_config
from mock_interviewer.utils.constants import (
    CALL_END_EVENT,
    CALL_START_EVENT,
    ERROR_EVENT,
    FINAL_TRANSCRIPT_TYPE,
    MESSAGE_EVENT,
    SPEECH_END_EVENT,
    SPEECH_START_EVENT,
    TRANSCRIPT_MESSAGE_TYPE,
)

# Set up logging
logger = logging.getLogger(__name__)

LIVE_STATUSES = (CallStatus.CONNECTING, CallStatus.ACTIVE)


class CallSessionController:
    """
    State machine for a single voice interview call.

    Transport events are routed through ``dispatch`` to one reducer per event
    name. The feedback gateway is any object with an async
    ``submit(interview_id, user_id, transcript, feedback_id)`` returning a
    ``FeedbackResult``.
    """

    def __init__(
        self,
        transport: VoiceTransport,
        context: SessionContext,
        mode: InterviewMode,
        feedback_gateway: Optional[Any] = None,
        workflow_id: Optional[str] = None,
        assistant_config: Optional[Dict[str, Any]] = None,
        connect_timeout: Optional[float] = None,
        on_navigate: Optional[Callable[[NavigationSignal], Any]] = None
    ):
        """
        Initialize the controller.

        Args:
            transport: Voice transport to observe and drive
            context: Identity and interview data for this session
            mode: GENERATE or REVIEW
            feedback_gateway: Scorer used when a REVIEW call finishes
            workflow_id: Generation workflow id (defaults to configuration)
            assistant_config: Interviewer persona (defaults to the built-in one)
            connect_timeout: Seconds to wait for the call to start; None or 0 disables
            on_navigate: Callback receiving the terminal navigation signal
        """
        if mode is InterviewMode.REVIEW and feedback_gateway is None:
            raise ValueError("feedback_gateway is required for review sessions")

        call_config = get_call_config()
        self.session_id = str(uuid.uuid4())
        self.transport = transport
        self.context = context
        self.mode = mode
        self.feedback_gateway = feedback_gateway
        self.workflow_id = workflow_id if workflow_id is not None else call_config["workflow_id"]
        self.assistant_config = assistant_config or build_interviewer_assistant()
        self.connect_timeout = connect_timeout if connect_timeout is not None else call_config["connect_timeout"]
        self.on_navigate = on_navigate

        self._status = CallStatus.IDLE
        self._transcript = TranscriptAccumulator()
        self.is_speaking = False
        self.reached_active = False
        self.last_error: Optional[str] = None

        # Termination outputs
        self.navigation: Optional[NavigationSignal] = None
        self.feedback_result: Optional[FeedbackResult] = None
        self.feedback_failed = False

        self._reducers: Dict[str, Callable[[Optional[Dict[str, Any]]], None]] = {
            CALL_START_EVENT: self._on_call_start,
            CALL_END_EVENT: self._on_call_end,
            MESSAGE_EVENT: self._on_message,
            SPEECH_START_EVENT: self._on_speech_start,
            SPEECH_END_EVENT: self._on_speech_end,
            ERROR_EVENT: self._on_error,
        }
        self._subscriptions: List[Tuple[str, Callable]] = []
        self._connect_watchdog: Optional[asyncio.Task] = None
        self._termination_task: Optional[asyncio.Task] = None
        self._closed = False

        logger.info(f"Call session {self.session_id} created in {mode.value} mode for user {context.user_id}")

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def status(self) -> CallStatus:
        return self._status

    @property
    def transcript(self) -> Tuple[Utterance, ...]:
        return self._transcript.snapshot()

    @property
    def last_message(self) -> str:
        last = self._transcript.last
        return last.text if last else ""

    @property
    def is_live(self) -> bool:
        return self._status in LIVE_STATUSES

    @property
    def is_subscribed(self) -> bool:
        return bool(self._subscriptions)

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    def activate(self):
        """Subscribe to every transport event this controller reduces."""
        if self._closed:
            raise CallSessionError(f"Call session {self.session_id} has been closed")
        if self._subscriptions:
            return

        for event in self._reducers:
            handler = functools.partial(self.dispatch, event)
            self.transport.on(event, handler)
            self._subscriptions.append((event, handler))

        logger.debug(f"Call session {self.session_id} subscribed to {len(self._subscriptions)} events")

    def deactivate(self):
        """Remove exactly the handlers added by ``activate``."""
        for event, handler in self._subscriptions:
            self.transport.off(event, handler)
        self._subscriptions.clear()
        self._cancel_connect_watchdog()

    async def aclose(self):
        """
        Tear the controller down.

        Unsubscribes from the transport, closes a still-live call without
        running the termination side effect, and waits for a termination
        already in flight.
        """
        if self._closed:
            return

        self.deactivate()
        self._closed = True

        if self.is_live:
            logger.warning(f"Call session {self.session_id} torn down while {self._status.value}, closing transport")
            await self._close_transport()

        if self._termination_task is not None and self._termination_task is not asyncio.current_task():
            await self._termination_task

        logger.info(f"Call session {self.session_id} closed")

    async def __aenter__(self) -> "CallSessionController":
        self.activate()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
        return False

    # ------------------------------------------------------------------
    # Caller actions
    # ------------------------------------------------------------------

    async def start(self):
        """
        Open the voice session.

        Raises:
            SessionStateError: If the session is not idle
            MissingContextError: If the context lacks what the mode needs
        """
        if self._closed:
            raise CallSessionError(f"Call session {self.session_id} has been closed")
        if self._status is not CallStatus.IDLE:
            raise SessionStateError("start", self._status)

        target, variables = self._build_open_request()

        self.activate()
        self._transition(CallStatus.CONNECTING)

        try:
            await self.transport.open(target, variables)
        except Exception as e:
            logger.error(f"Failed to open voice session for {self.session_id}: {e}", exc_info=True)
            self.last_error = str(e)
            self._finish("transport failed to open")
            return

        # call-start may already have arrived while open was awaited
        if self._status is CallStatus.CONNECTING and self.connect_timeout:
            self._connect_watchdog = asyncio.get_running_loop().create_task(self._watch_connection())

    async def stop(self):
        """
        End the call at the user's request.

        Raises:
            SessionStateError: If the session was never started
            CallSessionError: If the controller has been closed
        """
        if self._closed:
            raise CallSessionError(f"Call session {self.session_id} has been closed")
        if self._status is CallStatus.IDLE:
            raise SessionStateError("stop", self._status)
        if self._status is CallStatus.FINISHED:
            logger.debug(f"Stop requested for already finished session {self.session_id}")
            return

        self._finish("stopped by user")
        await self._close_transport()

    async def wait_for_navigation(self) -> Optional[NavigationSignal]:
        """Wait for the termination side effect and return its signal, if one is running."""
        if self._termination_task is None:
            return self.navigation
        return await self._termination_task

    # ------------------------------------------------------------------
    # Event reduction
    # ------------------------------------------------------------------

    def dispatch(self, event: str, payload: Optional[Dict[str, Any]] = None):
        """Route a transport event to its reducer."""
        if self._closed:
            logger.debug(f"Ignoring {event} for closed session {self.session_id}")
            return

        reducer = self._reducers.get(event)
        if reducer is None:
            logger.warning(f"No reducer for transport event {event}")
            return
        reducer(payload)

    def _on_call_start(self, payload: Optional[Dict[str, Any]]):
        if self._status is not CallStatus.CONNECTING:
            logger.warning(f"Ignoring call-start for session {self.session_id} in status {self._status.value}")
            return

        self._cancel_connect_watchdog()
        self.reached_active = True
        self._transition(CallStatus.ACTIVE)

    def _on_call_end(self, payload: Optional[Dict[str, Any]]):
        if not self.is_live:
            logger.debug(f"Ignoring call-end for session {self.session_id} in status {self._status.value}")
            return
        self._finish("call ended by transport")

    def _on_message(self, payload: Optional[Dict[str, Any]]):
        if not payload or payload.get("type") != TRANSCRIPT_MESSAGE_TYPE:
            return
        if payload.get("transcriptType") != FINAL_TRANSCRIPT_TYPE:
            # Interim transcripts are superseded by a final one
            return

        if not self.is_live:
            logger.debug(f"Dropping transcript after cutoff for session {self.session_id} ({self._status.value})")
            return

        try:
            speaker = Speaker(payload.get("role"))
        except ValueError:
            logger.warning(f"Dropping transcript with unknown role {payload.get('role')!r}")
            return

        text = payload.get("transcript")
        if not isinstance(text, str):
            logger.warning(f"Dropping final transcript without text from {speaker.value}")
            return

        self._transcript.append(Utterance(speaker=speaker, text=text))

    def _on_speech_start(self, payload: Optional[Dict[str, Any]]):
        if self._status is CallStatus.FINISHED:
            return
        logger.debug("speech start")
        self.is_speaking = True

    def _on_speech_end(self, payload: Optional[Dict[str, Any]]):
        logger.debug("speech end")
        self.is_speaking = False

    def _on_error(self, payload: Optional[Dict[str, Any]]):
        if isinstance(payload, dict):
            message = payload.get("message") or str(payload)
        else:
            message = str(payload)
        self.last_error = message
        logger.error(f"Transport error in session {self.session_id} ({self._status.value}): {message}")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(self, new_status: CallStatus) -> bool:
        if new_status.order <= self._status.order:
            logger.warning(
                f"Rejected transition {self._status.value} -> {new_status.value} for session {self.session_id}"
            )
            return False

        old_status = self._status
        self._status = new_status
        logger.info(f"Call session {self.session_id}: {old_status.value} -> {new_status.value}")

        if new_status is CallStatus.FINISHED:
            self._on_finished()
        return True

    def _finish(self, reason: str):
        self._cancel_connect_watchdog()
        self.is_speaking = False
        logger.info(f"Finishing call session {self.session_id}: {reason}")
        self._transition(CallStatus.FINISHED)

    def _on_finished(self):
        if self._termination_task is not None:
            return
        snapshot = self._transcript.snapshot()
        self._termination_task = asyncio.get_running_loop().create_task(self._terminate(snapshot))

    async def _terminate(self, transcript: Tuple[Utterance, ...]) -> NavigationSignal:
        if self.mode is InterviewMode.GENERATE:
            signal = NavigationSignal.home()
        elif not self.reached_active:
            # Aborted before the interview began: nothing worth scoring, same home exit
            logger.warning(f"Session {self.session_id} never connected, skipping feedback")
            signal = NavigationSignal.home()
        else:
            signal = await self._submit_feedback(transcript)

        self.navigation = signal
        await self._notify(signal)
        return signal

    async def _submit_feedback(self, transcript: Tuple[Utterance, ...]) -> NavigationSignal:
        logger.info(f"Generating feedback for interview {self.context.interview_id} ({len(transcript)} lines)")
        try:
            result = await self.feedback_gateway.submit(
                interview_id=self.context.interview_id,
                user_id=self.context.user_id,
                transcript=list(transcript),
                feedback_id=self.context.feedback_id
            )
        except Exception as e:
            logger.error(f"Feedback gateway raised for session {self.session_id}: {e}", exc_info=True)
            result = FeedbackResult(success=False)

        self.feedback_result = result
        if result.success and result.feedback_id:
            return NavigationSignal.feedback(self.context.interview_id)

        self.feedback_failed = True
        logger.error(f"Error saving feedback for interview {self.context.interview_id}")
        return NavigationSignal.home()

    async def _notify(self, signal: NavigationSignal):
        if self.on_navigate is None:
            return
        try:
            result = self.on_navigate(signal)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Error in navigation callback {self.on_navigate}: {e}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_open_request(self) -> Tuple[Any, Dict[str, Any]]:
        missing = []
        if not self.context.user_id:
            missing.append("user_id")

        if self.mode is InterviewMode.GENERATE:
            if not self.workflow_id:
                missing.append("workflow_id")
            if missing:
                raise MissingContextError(self.mode, missing)
            return self.workflow_id, {
                "username": self.context.user_name,
                "userid": self.context.user_id,
            }

        if not self.context.interview_id:
            missing.append("interview_id")
        if missing:
            raise MissingContextError(self.mode, missing)
        return self.assistant_config, {"questions": self.context.formatted_questions()}

    async def _watch_connection(self):
        await asyncio.sleep(self.connect_timeout)
        self._connect_watchdog = None
        if self._status is not CallStatus.CONNECTING:
            return

        self.last_error = f"Call did not connect within {self.connect_timeout} seconds"
        logger.error(f"Session {self.session_id}: {self.last_error}")
        self._finish("connect timeout")
        await self._close_transport()

    def _cancel_connect_watchdog(self):
        watchdog = self._connect_watchdog
        self._connect_watchdog = None
        if watchdog is not None and not watchdog.done() and watchdog is not asyncio.current_task():
            watchdog.cancel()

    async def _close_transport(self):
        try:
            await self.transport.close()
        except Exception as e:
            logger.warning(f"Error closing voice session {self.session_id}: {e}")

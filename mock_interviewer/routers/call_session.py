"""
WebSocket router for live interview calls.

The browser runs the voice SDK; this endpoint hosts the call session
controller for it. Each socket gets one controller and one relay transport.

Client frames:
    {"type": "command", "action": "start" | "stop"}
    {"type": "event", "event": "<transport event>", "payload": {...}}

Server frames:
    {"type": "open", "target": ..., "variableValues": {...}}
    {"type": "close"}
    {"type": "state", "status": ..., "isSpeaking": ..., "lastMessage": ..., "transcriptLength": ...}
    {"type": "error", "message": ...}
    {"type": "navigate", "destination": ..., "path": ...}
"""
import json
import logging
from typing import Any, Dict, Literal, Optional

from fastapi import Depends, WebSocket, WebSocketDisconnect
from fastapi.routing import APIRouter
from pydantic import BaseModel, ValidationError, model_validator

from mock_interviewer.core.call_session import CallSessionController
from mock_interviewer.core.exceptions import CallSessionError
from mock_interviewer.models.session import InterviewMode, NavigationSignal, SessionContext
from mock_interviewer.routers.dependencies import get_ws_feedback_service, get_ws_repository
from mock_interviewer.services.feedback_service import FeedbackService
from mock_interviewer.services.interview_repository import InterviewRepository
from mock_interviewer.services.transport import WebSocketRelayTransport

logger = logging.getLogger(__name__)

router = APIRouter()


class ClientFrame(BaseModel):
    """A frame sent by the browser."""
    type: Literal["command", "event"]
    action: Optional[Literal["start", "stop"]] = None
    event: Optional[Literal["call-start", "call-end", "message", "speech-start", "speech-end", "error"]] = None
    payload: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def check_frame(self) -> "ClientFrame":
        if self.type == "command" and self.action is None:
            raise ValueError("command frames need an action")
        if self.type == "event" and self.event is None:
            raise ValueError("event frames need an event")
        return self


async def _send(websocket: WebSocket, message: Dict[str, Any]):
    await websocket.send_text(json.dumps(message))


def _state_frame(controller: CallSessionController) -> Dict[str, Any]:
    return {
        "type": "state",
        "status": controller.status.value,
        "isSpeaking": controller.is_speaking,
        "lastMessage": controller.last_message,
        "transcriptLength": len(controller.transcript),
    }


@router.websocket("/ws")
async def call_session_websocket(
    websocket: WebSocket,
    repository: Optional[InterviewRepository] = Depends(get_ws_repository),
    feedback_service: Optional[FeedbackService] = Depends(get_ws_feedback_service)
):
    """Host one interview call for the connected browser."""
    await websocket.accept()
    params = websocket.query_params
    mode = InterviewMode.from_value(params.get("mode", InterviewMode.GENERATE.value))
    interview_id = params.get("interview_id")

    questions = ()
    if mode is InterviewMode.REVIEW:
        interview = repository.get_interview_by_id(interview_id) if (repository and interview_id) else None
        if interview is None:
            await _send(websocket, {"type": "error", "message": f"Interview {interview_id} not found"})
            await websocket.close(code=1008)
            return
        questions = tuple(interview.questions)

    context = SessionContext(
        user_name=params.get("user_name", ""),
        user_id=params.get("user_id"),
        interview_id=interview_id,
        feedback_id=params.get("feedback_id"),
        questions=questions
    )

    async def navigate(signal: NavigationSignal):
        await _send(websocket, {"type": "navigate", "destination": signal.destination, "path": signal.path})

    transport = WebSocketRelayTransport(websocket)
    try:
        controller = CallSessionController(
            transport,
            context,
            mode,
            feedback_gateway=feedback_service,
            on_navigate=navigate
        )
    except ValueError as e:
        logger.error(f"Cannot host call session: {e}")
        await _send(websocket, {"type": "error", "message": str(e)})
        await websocket.close(code=1011)
        return

    async with controller:
        try:
            await _send(websocket, _state_frame(controller))
            while True:
                raw = await websocket.receive_text()
                try:
                    frame = ClientFrame.model_validate_json(raw)
                except ValidationError as e:
                    await _send(websocket, {"type": "error", "message": f"Invalid frame: {e.errors()[0]['msg']}"})
                    continue

                if frame.type == "command":
                    try:
                        if frame.action == "start":
                            await controller.start()
                        else:
                            await controller.stop()
                    except CallSessionError as e:
                        logger.warning(f"Rejected {frame.action} for session {controller.session_id}: {e}")
                        await _send(websocket, {"type": "error", "message": str(e)})
                        continue
                else:
                    transport.relay(frame.event, frame.payload)

                await _send(websocket, _state_frame(controller))
        except WebSocketDisconnect:
            logger.info(f"Client disconnected from call session {controller.session_id}")
